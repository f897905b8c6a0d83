"""
Scanner-specific data models

Line classification, comment aggregation and declaration accumulation state
for a single extraction pass.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

from .declarations import DeclarationKind


class LineKind(Enum):
    """Classification of one stripped source line"""
    COMMENT = "comment"                # /** ... , * ... , */
    IMPORT = "import"                  # import ... from ...
    DEFAULT_EXPORT = "default_export"  # export default ...
    REEXPORT = "reexport"              # export { a }, export * from '...'
    CONST_OPEN = "const_open"          # export const ...
    DECLARATION = "declaration"        # any other export
    OTHER = "other"                    # implementation detail, ignored


@dataclass(frozen=True)
class SourceLine:
    """
    A physical line of input

    Attributes:
        index: Zero-based ordinal of the line in the source
        text: Line text without its line terminator
    """
    index: int
    text: str

    @property
    def line_number(self) -> int:
        return self.index + 1


@dataclass
class CommentBlock:
    """
    Pending documentation comment

    At most one block is pending. Opening a new block discards the previous
    one; emitting a declaration consumes it.
    """
    lines: List[str] = field(default_factory=list)

    def reset(self) -> None:
        self.lines = []

    def line_append(self, text: str) -> None:
        self.lines.append(text)

    def isEmpty(self) -> bool:
        return not self.lines

    def text_get(self) -> str:
        """Block text with trailing whitespace trimmed"""
        return ''.join(f"{line}\n" for line in self.lines).rstrip()

    def consume(self) -> Optional[str]:
        """Return the pending text (None when empty) and clear the block"""
        if self.isEmpty():
            return None
        text = self.text_get()
        self.reset()
        return text or None


@dataclass
class DeclarationAccumulator:
    """
    Buffer for a statement spanning several lines

    Attributes:
        target: What the statement becomes on flush (IMPORT, REEXPORT or a declaration)
        kind: Rewriter to use when target is a declaration
        start_index: Zero-based index of the opening line
        lines: Raw lines appended so far (trailing whitespace removed)
        balance: Open-bracket balance of the text so far; only meaningful while active
        settled: Balanced type alias waiting to see whether the next line continues it
    """
    target: LineKind
    kind: DeclarationKind = DeclarationKind.PASSTHROUGH
    start_index: int = 0
    lines: List[str] = field(default_factory=list)
    balance: int = 0
    settled: bool = False

    def line_add(self, text: str) -> None:
        self.lines.append(text)

    def text_get(self) -> str:
        return '\n'.join(self.lines).strip()
