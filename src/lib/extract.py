"""
Extraction entry points

dts_generate() turns source text into declaration text entirely in memory;
extract() reads a source file first. Each call owns its own scanner state,
so files can be processed independently and in any order.
"""

from pathlib import Path
from typing import Optional, Union

from .assembler import Assembler
from .log import ERROR, LOG
from .scanner import Scanner


class ExtractionError(Exception):
    """Raised when a source file cannot be read for extraction"""
    pass


def dts_generate(
    source: str,
    multiline_declarations: Optional[bool] = None,
    keep_comments: Optional[bool] = None,
) -> str:
    """
    Generate declaration text from source text

    Args:
        source: Full contents of one source file
        multiline_declarations: Merge non-constant statements across lines
        keep_comments: Emit documentation blocks

    Returns:
        Declaration file text (no trailing newline)
    """
    scanner = Scanner(
        source,
        multiline_declarations=multiline_declarations,
        keep_comments=keep_comments,
    )
    result = scanner.scan()
    return Assembler(result, keep_comments=keep_comments).assemble()


def extract(
    file_path: Union[str, Path],
    multiline_declarations: Optional[bool] = None,
    keep_comments: Optional[bool] = None,
) -> str:
    """
    Read a source file and generate its declaration text

    Args:
        file_path: Path of the source file
        multiline_declarations: Merge non-constant statements across lines
        keep_comments: Emit documentation blocks

    Returns:
        Declaration file text (no trailing newline)

    Raises:
        ExtractionError: If the file cannot be read or is not valid UTF-8
    """
    path = Path(file_path)
    try:
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        ERROR(f"Could not read {path}: {e}", exc=e)
        raise ExtractionError("Failed to extract and generate .d.ts file") from e

    LOG(f"Read {len(source)} characters from {path.name}", level=2)
    return dts_generate(
        source,
        multiline_declarations=multiline_declarations,
        keep_comments=keep_comments,
    )
