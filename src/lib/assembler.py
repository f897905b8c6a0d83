"""
Assembler for declaration output

Concatenates the buffers of an ExtractionResult into the text of one
declaration file and normalizes its whitespace.
"""

import re
from typing import List, Optional

from ..config import appsettings
from ..models.declarations import ExtractionResult
from .log import LOG


# Applied once, in this order
CLEANUP_RULES = [
    (re.compile(r'\{\s*\}'), '{}'),                              # empty bodies
    (re.compile(r'[ \t]+;(?=[ \t]*(?:\}|$))', re.MULTILINE), ';'),  # space before terminator
    (re.compile(r'\n{3,}'), '\n\n'),                             # blank line runs
    (re.compile(r';\}'), ';\n}'),                                # brace glued to terminator
    (re.compile(r'\{;'), '{'),                                   # terminator after an open brace
]


def output_clean(output: str) -> str:
    """
    Normalize assembled declaration text

    Args:
        output: Raw assembled text

    Returns:
        Cleaned text without surrounding whitespace

    Example:
        output_clean("export declare interface A {\\n\\n}") → "export declare interface A {}"
    """
    for pattern, replacement in CLEANUP_RULES:
        output = pattern.sub(replacement, output)
    return output.strip()


class Assembler:
    """
    Builds declaration file text from an ExtractionResult

    Output layout, empty groups omitted:

        imports
        <blank>
        declarations (each preceded by its comment block)
        <blank>
        re-exports
        default export
    """

    def __init__(self, result: ExtractionResult, keep_comments: Optional[bool] = None) -> None:
        """
        Args:
            result: Buffers from Scanner.scan()
            keep_comments: Emit comment blocks (defaults to settings)
        """
        self.result = result
        self.keep_comments = appsettings.keep_comments if keep_comments is None else keep_comments

    def groups_build(self) -> List[List[str]]:
        """Ordered, non-empty output groups"""
        declarations = []
        for record in self.result.declarations:
            if self.keep_comments and record.comment:
                declarations.append(record.comment)
            declarations.append(record.text)

        tail = list(self.result.exports)
        if self.result.default_export is not None:
            tail.append(self.result.default_export.text)

        groups = [list(self.result.imports), declarations, tail]
        return [group for group in groups if group]

    def assemble(self) -> str:
        """
        Assemble and clean the declaration file text

        Returns:
            Declaration text without a trailing newline
        """
        groups = self.groups_build()
        output = '\n\n'.join('\n'.join(group) for group in groups)
        LOG(f"Assembled {len(groups)} output groups", level=3)
        return output_clean(output)
