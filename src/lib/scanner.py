"""
Line scanner for declaration extraction

Walks a source file line by line and collects its exported surface into
ordered buffers (imports, declarations, re-exports, default export).

The scanner is a two-state machine scoped to one Scanner instance:

1. Idle: each stripped line is classified (comment, import, default export,
   re-export, const, other declaration, other) and routed.
2. Accumulating: a statement whose opening line leaves brackets open is
   buffered until its bracket balance returns to zero (or input ends), then
   handed to the DeclarationTransformer.

Key features:
- Comment aggregation: /** ... */ blocks attach to the next declaration
- Brace depth tracking that ignores braces in strings and comments
- Multi-line interface/type/function/import support (switchable)
- Best-effort: malformed input never raises

Example:
    >>> scanner = Scanner("export const conf = {\\n  key: 'value',\\n}")
    >>> result = scanner.scan()
    >>> result.declarations[0].text.splitlines()[0]
    "export declare const conf: { [key: string]: string } {"
"""

import re
from typing import List, Optional

from ..config import appsettings
from ..models.declarations import DeclarationKind, ExtractionResult
from ..models.scan import CommentBlock, DeclarationAccumulator, LineKind, SourceLine
from .lexer import braces_balance, brackets_balance
from .log import LOG
from .transformer import DeclarationTransformer


LINE_PATTERNS = [
    (LineKind.IMPORT, re.compile(r'^import\b(?![.(])')),
    (LineKind.DEFAULT_EXPORT, re.compile(r'^export\s+default\b')),
    (LineKind.REEXPORT, re.compile(r'^export\s*(?:\*|\{|type\s*\{)')),
    (LineKind.CONST_OPEN, re.compile(r'^export\s+const\b')),
    (LineKind.DECLARATION, re.compile(r'^export\b')),
]

COMMENT_OPEN = '/**'
COMMENT_CONTINUE = '*'
COMMENT_START = '/*'

# A balanced type alias still continues when its text ends with one of these
TYPE_TRAILING_OPERATORS = ('=', '|', '&', '?', ':', ',', '=>')
# ... or when the next line starts with one of these
TYPE_LEADING_OPERATORS = ('|', '&', '?', ':')


class Scanner:
    """
    Scanner for exported declarations in one source file

    Handles:
    - Documentation comment blocks (attached to the following declaration)
    - Import, re-export and default export statements
    - Multi-line constants via brace balance
    - Multi-line interfaces, type aliases, functions and imports
    """

    def __init__(
        self,
        source: str,
        multiline_declarations: Optional[bool] = None,
        keep_comments: Optional[bool] = None,
        transformer: Optional[DeclarationTransformer] = None,
    ):
        """
        Initialize scanner with source text

        Args:
            source: Full source text of one file
            multiline_declarations: Merge non-constant statements across lines
                (defaults to settings)
            keep_comments: Attach documentation blocks to declarations
                (defaults to settings)
            transformer: DeclarationTransformer to use (a new one if omitted)

        Attributes:
            lines: Source lines with their ordinals
            comment: Pending documentation block
            accumulator: Statement being buffered, None while idle
            result: Ordered output buffers
        """
        self.source = source
        self.multiline_declarations = (
            appsettings.multiline_declarations if multiline_declarations is None
            else multiline_declarations
        )
        self.keep_comments = appsettings.keep_comments if keep_comments is None else keep_comments
        self.transformer = transformer or DeclarationTransformer()

        self.lines: List[SourceLine] = [
            SourceLine(index=index, text=text)
            for index, text in enumerate(source.split('\n'))
        ]
        self.comment = CommentBlock()
        self.accumulator: Optional[DeclarationAccumulator] = None
        self.result = ExtractionResult()

    def scan(self) -> ExtractionResult:
        """
        Scan the whole source

        Returns:
            ExtractionResult holding imports, declarations, re-exports and
            the default export in source order. A statement still open at
            end of input is flushed as-is; a trailing comment block with no
            declaration after it is dropped.
        """
        for line in self.lines:
            self.line_process(line)

        if self.accumulator is not None:
            LOG(
                f"Statement opened at line {self.accumulator.start_index + 1} "
                f"unterminated at end of input (balance {self.accumulator.balance})",
                level=2,
            )
            self.accumulator_flush()

        if not self.comment.isEmpty():
            LOG("Dropping trailing comment block with no declaration after it", level=3)
            self.comment.reset()

        LOG(
            f"Scanned {len(self.lines)} lines: {len(self.result.imports)} imports, "
            f"{len(self.result.declarations)} declarations, {len(self.result.exports)} re-exports",
            level=2,
        )
        return self.result

    def line_classify(self, text: str) -> LineKind:
        """
        Classify a stripped line

        Comment markers win over every other prefix.

        Example:
            line_classify("* export const x = 1") → LineKind.COMMENT
            line_classify("export type { Foo } from './foo'") → LineKind.REEXPORT
            line_classify("const local = 1") → LineKind.OTHER
        """
        if text.startswith(COMMENT_OPEN) or text.startswith(COMMENT_CONTINUE):
            return LineKind.COMMENT
        for kind, pattern in LINE_PATTERNS:
            if pattern.match(text):
                return kind
        return LineKind.OTHER

    def line_process(self, line: SourceLine) -> None:
        """Route one line according to scanner state and classification"""
        text = line.text.strip()
        kind = self.line_classify(text)
        LOG(f"Line {line.line_number} [{kind.value}]: {text}", level=3)

        accumulator = self.accumulator
        if accumulator is not None and accumulator.settled:
            if text.startswith(TYPE_LEADING_OPERATORS):
                accumulator.settled = False
                self.accumulator_extend(line)
                return
            self.accumulator_flush()
            accumulator = None

        if kind is LineKind.DEFAULT_EXPORT:
            if accumulator is not None:
                self.accumulator_flush()
            self.defaultExport_set(text, line)
            return

        if accumulator is not None:
            if accumulator.kind is DeclarationKind.CONST \
                    and (kind is LineKind.COMMENT or text.startswith(COMMENT_START)):
                self.comment_append(text, line)
                return
            self.accumulator_extend(line)
            return

        if kind is LineKind.COMMENT:
            self.comment_append(text, line)
        elif kind is LineKind.IMPORT:
            self.statement_open(LineKind.IMPORT, line)
        elif kind is LineKind.REEXPORT:
            self.statement_open(LineKind.REEXPORT, line)
        elif kind is LineKind.CONST_OPEN:
            self.accumulator_open(LineKind.DECLARATION, self.transformer.kind_detect(text), line)
        elif kind is LineKind.DECLARATION:
            declaration_kind = self.transformer.kind_detect(text)
            if self.multiline_declarations:
                self.accumulator_open(LineKind.DECLARATION, declaration_kind, line)
            else:
                self.declaration_emit(text, declaration_kind, line.index)

    def comment_append(self, text: str, line: SourceLine) -> None:
        """
        Add a line to the pending documentation block

        A block-opening marker discards any block still pending, so
        unattached blocks are dropped rather than merged. Comment lines met
        inside a constant's body also land here and attach to that constant.
        """
        if text.startswith(COMMENT_START):
            if not self.comment.isEmpty():
                LOG(f"Discarding unattached comment block before line {line.line_number}", level=3)
            self.comment.reset()
        self.comment.line_append(line.text.rstrip())

    def statement_open(self, target: LineKind, line: SourceLine) -> None:
        """
        Handle an import or re-export line

        Single-line statements are stored immediately; with multi-line
        support enabled an unclosed `{` starts an accumulator.
        """
        text = line.text.strip()
        if self.multiline_declarations and braces_balance(text) > 0:
            self.accumulator_open(target, DeclarationKind.PASSTHROUGH, line)
            return
        self.statement_store(target, text)

    def statement_store(self, target: LineKind, text: str) -> None:
        if target is LineKind.IMPORT:
            self.result.imports.append(self.transformer.import_rewrite(text))
        else:
            self.result.exports.append(text)

    def accumulator_open(self, target: LineKind, kind: DeclarationKind, line: SourceLine) -> None:
        """Idle → Accumulating, starting with the opening line"""
        LOG(f"Opening {kind.value if target is LineKind.DECLARATION else target.value} at line {line.line_number}", level=3)
        self.accumulator = DeclarationAccumulator(target=target, kind=kind, start_index=line.index)
        self.accumulator_extend(line)

    def accumulator_extend(self, line: SourceLine) -> None:
        """
        Append a line and update the bracket balance

        Constants, imports and re-exports balance `{`/`}` only; other
        declarations balance all bracket kinds so parameter lists spanning
        lines are kept together. The balance is taken over the whole
        accumulated text, so brackets inside a comment, string or regular
        expression that spans lines never count. Flushes when the balance is
        exactly zero.
        """
        accumulator = self.accumulator
        accumulator.line_add(line.text.rstrip())

        if accumulator.target is LineKind.DECLARATION and accumulator.kind is not DeclarationKind.CONST:
            accumulator.balance = brackets_balance(accumulator.text_get())
        else:
            accumulator.balance = braces_balance(accumulator.text_get())

        if accumulator.balance != 0:
            return

        if accumulator.target is LineKind.DECLARATION and accumulator.kind is DeclarationKind.TYPE \
                and self.multiline_declarations:
            if accumulator.text_get().endswith(TYPE_TRAILING_OPERATORS):
                return
            accumulator.settled = True
            return

        self.accumulator_flush()

    def accumulator_flush(self) -> None:
        """Accumulating → Idle, handing the buffered text to its consumer"""
        accumulator = self.accumulator
        self.accumulator = None
        text = accumulator.text_get()

        if accumulator.target is LineKind.DECLARATION:
            self.declaration_emit(text, accumulator.kind, accumulator.start_index)
        else:
            self.statement_store(accumulator.target, text)

    def declaration_emit(self, text: str, kind: DeclarationKind, index: int) -> None:
        """Transform a complete declaration and consume the pending comment block"""
        comment = self.comment.consume()
        if not self.keep_comments:
            comment = None
        record = self.transformer.transform(text, kind, comment=comment, line_number=index + 1)
        self.result.declarations.append(record)
        LOG(f"Emitted {record.kind.value} declaration from line {record.line_number}", level=2)

    def defaultExport_set(self, text: str, line: SourceLine) -> None:
        """
        Record the default export

        Only the last `export default` in a file survives; earlier ones are
        overwritten.
        """
        if self.result.default_export is not None:
            LOG(
                f"Default export at line {line.line_number} replaces the one from line "
                f"{self.result.default_export.line_number}",
                level=1,
            )
        self.result.default_export = self.transformer.transform(
            text, DeclarationKind.DEFAULT, line_number=line.line_number
        )
