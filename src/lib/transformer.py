"""
Declaration rewriters

Each exported declaration kind has a rewriter that turns the declaration's
complete source text into its declaration-only form. Rewriters never raise
on malformed input; anything they cannot make sense of is passed through.
"""

import re
from typing import Callable, Dict, List, Optional

from ..config import appsettings
from ..models.declarations import DeclarationKind, DeclarationRecord
from .inference import objectType_infer, value_classify
from .lexer import bodyBrace_find, lines_nest, toplevel_find, toplevel_split
from .log import LOG


KIND_PATTERNS = [
    (DeclarationKind.DEFAULT, re.compile(r'^export\s+default\b')),
    (DeclarationKind.PASSTHROUGH, re.compile(r'^export\s+(?:declare\s+)?const\s+enum\b')),
    (DeclarationKind.CONST, re.compile(r'^export\s+const\b')),
    (DeclarationKind.INTERFACE, re.compile(r'^export\s+(?:declare\s+)?interface\b')),
    (DeclarationKind.TYPE, re.compile(r'^export\s+(?:declare\s+)?type\s+[A-Za-z_$]')),
    (DeclarationKind.FUNCTION, re.compile(r'^export\s+(?:declare\s+)?(?:async\s+)?function\b')),
]

CONST_HEADER = re.compile(r'^export\s+const\s+')
INTERFACE_HEADER = re.compile(r'^export\s+(?:declare\s+)?interface\s+')
TYPE_EXPORT = re.compile(r'^export\s+type\b')
FUNCTION_MODIFIERS = re.compile(r'^export\s+(?:declare\s+)?(?:async\s+)?')
GENERATOR_STAR = re.compile(r'^function\s*\*\s*')
IDENTIFIER = re.compile(r'[A-Za-z_$][\w$]*')

TYPE_IMPORT = re.compile(r'^import\s+type\b')
NAMED_IMPORT = re.compile(r'^import\s*\{(?P<names>.*)\}\s*from\s*(?P<source>.+)$', re.DOTALL)
TYPE_SPECIFIER = re.compile(r'^type\s+')

FUNCTION_INITIALIZER = re.compile(
    r'^(?:async\s+)?(?:'
    r'function\b'
    r'|(?:<[^>]*>\s*)?\([^)]*\)\s*(?::[^=]+)?=>'
    r'|[A-Za-z_$][\w$]*\s*=>'
    r')'
)
FUNCTION_TYPE = '(...args: any[]) => unknown'

COMMENT_PREFIXES = ('//', '/*', '*')


class DeclarationTransformer:
    """
    Registry of per-kind rewriters

    Maps each DeclarationKind to the function producing its
    declaration-only text. Unregistered kinds pass through unchanged.
    """

    def __init__(self, indent_unit: Optional[str] = None) -> None:
        """
        Initialize the transformer and register the built-in rewriters

        Args:
            indent_unit: Indentation per nesting level (defaults to settings)
        """
        self.indent_unit = appsettings.indent_unit if indent_unit is None else indent_unit
        self.rewriters: Dict[DeclarationKind, Callable[[str], str]] = {}
        self.register(DeclarationKind.CONST, self.const_rewrite)
        self.register(DeclarationKind.INTERFACE, self.interface_rewrite)
        self.register(DeclarationKind.TYPE, self.type_rewrite)
        self.register(DeclarationKind.FUNCTION, self.function_rewrite)
        self.register(DeclarationKind.DEFAULT, self.default_rewrite)
        self.register(DeclarationKind.PASSTHROUGH, self.passthrough_rewrite)

    def register(self, kind: DeclarationKind, rewriter: Callable[[str], str]) -> None:
        """Register (or replace) the rewriter for a declaration kind"""
        self.rewriters[kind] = rewriter

    def kind_detect(self, text: str) -> DeclarationKind:
        """
        Determine the declaration kind from the opening text

        Args:
            text: Declaration source, first line first

        Returns:
            Matching kind, PASSTHROUGH when nothing matches

        Example:
            kind_detect("export async function load() {") → DeclarationKind.FUNCTION
            kind_detect("export type { Foo }") → DeclarationKind.PASSTHROUGH
        """
        head = text.lstrip()
        for kind, pattern in KIND_PATTERNS:
            if pattern.match(head):
                return kind
        return DeclarationKind.PASSTHROUGH

    def transform(
        self,
        text: str,
        kind: Optional[DeclarationKind] = None,
        comment: Optional[str] = None,
        line_number: int = 0,
    ) -> DeclarationRecord:
        """
        Rewrite one complete declaration

        Args:
            text: Full declaration source (all its lines joined)
            kind: Declaration kind; detected from text when omitted
            comment: Documentation block to attach to the record
            line_number: 1-based source line of the declaration

        Returns:
            DeclarationRecord with the declaration-only text
        """
        if kind is None:
            kind = self.kind_detect(text)
        rewriter = self.rewriters.get(kind, self.passthrough_rewrite)
        LOG(f"Rewriting {kind.value} declaration from line {line_number}", level=3)
        return DeclarationRecord(
            kind=kind,
            text=rewriter(text),
            comment=comment,
            line_number=line_number,
        )

    def indent_make(self, level: int) -> str:
        return self.indent_unit * max(level, 0)

    # ------------------------------------------------------------------
    # Constants
    # ------------------------------------------------------------------

    def const_rewrite(self, text: str) -> str:
        """
        Rewrite an exported constant

        The name is the identifier after `export const`. An explicit
        annotation is kept verbatim; otherwise object literals get an
        inferred index signature, functions a generic callable type and
        scalars their literal classification.

        Object constants keep their literal body after the type:

            export const conf = {          export declare const conf: { [key: string]: string } {
              key: 'value',         →        key: 'value';
            }                              };
        """
        lines = [line.strip() for line in text.strip().split('\n')]
        header = CONST_HEADER.sub('', lines[0], count=1)

        match = IDENTIFIER.match(header)
        if not match:
            LOG(f"Const without a plain name passed through: {lines[0]}", level=2)
            return text.strip()

        name = match.group(0)
        rest = header[match.end():]
        assign = toplevel_find(rest, '=', angles=True)

        annotation = ''
        if rest.lstrip().startswith(':'):
            colon = rest.index(':')
            end = assign if assign != -1 else len(rest)
            annotation = rest[colon + 1:end].strip().rstrip(';').strip()

        initializer = rest[assign + 1:].strip() if assign != -1 else ''

        if initializer.startswith('{'):
            body = self.objectBody_extract(lines, initializer)
            declared_type = annotation or objectType_infer(body)
            properties = self.properties_render(body)
            return f"export declare const {name}: {declared_type} {{\n{properties}\n}};"

        if annotation:
            declared_type = annotation
        elif FUNCTION_INITIALIZER.match(initializer):
            declared_type = FUNCTION_TYPE
        elif len(lines) > 1:
            declared_type = 'any'
        else:
            declared_type = value_classify(initializer).ts_type
        return f"export declare const {name}: {declared_type};"

    def objectBody_extract(self, lines: List[str], initializer: str) -> List[str]:
        """
        Interior lines of an object literal

        Multi-line literals drop their opening and closing lines (an
        unterminated literal keeps its last line); a literal written on one
        line is split into its depth-zero members.
        """
        if len(lines) > 1:
            return [line for line in self.interior_get(lines) if not line.startswith(COMMENT_PREFIXES)]

        closing = initializer.rfind('}')
        inner = initializer[1:closing] if closing != -1 else initializer[1:]
        return toplevel_split(inner, ',')

    def interior_get(self, lines: List[str]) -> List[str]:
        """Lines after the opening line, minus a final closing-brace line"""
        interior = lines[1:]
        if interior and interior[-1].strip().startswith('}'):
            interior = interior[:-1]
        return interior

    def properties_render(self, body: List[str]) -> str:
        """Render body lines as `key: value;` members indented by nesting level"""
        rendered = []
        for level, text in lines_nest(body):
            rendered.append(f"{self.indent_make(level)}{self.member_render(text)}")
        return '\n'.join(rendered)

    def member_render(self, text: str) -> str:
        colon = toplevel_find(text, ':')
        if colon == -1:
            return self.terminator_normalize(text)
        key = text[:colon].strip()
        value = text[colon + 1:].strip()
        return f"{key}: {self.terminator_normalize(value)}"

    def terminator_normalize(self, value: str) -> str:
        """
        Trailing comma becomes ';'; lines not already terminated or opening
        a nested literal gain one.
        """
        if value.endswith(','):
            return f"{value[:-1].rstrip()};"
        if value.endswith((';', '{', '[', '(')):
            return value
        return f"{value};"

    # ------------------------------------------------------------------
    # Interfaces and type aliases
    # ------------------------------------------------------------------

    def interface_rewrite(self, text: str) -> str:
        """
        Rewrite an exported interface

        Everything between `interface` and the opening brace (generic
        parameters and `extends` clauses included) is kept as the name.
        Body members are re-indented by nesting level.
        """
        lines = text.strip().split('\n')
        header = INTERFACE_HEADER.sub('', lines[0].strip(), count=1)
        brace = toplevel_find(header, '{', angles=True)

        if brace == -1:
            name = header.strip()
            members = self.interior_get(lines)
        else:
            name = header[:brace].strip()
            remainder = header[brace + 1:]
            if len(lines) == 1:
                closing = remainder.rfind('}')
                inner = remainder[:closing] if closing != -1 else remainder
                members = [
                    member
                    for chunk in toplevel_split(inner, ';', angles=True)
                    for member in toplevel_split(chunk, ',', angles=True)
                ]
            else:
                members = ([remainder] if remainder.strip() else []) + self.interior_get(lines)

        body = []
        for level, member in lines_nest(members):
            if member.startswith('*'):
                member = f" {member}"
            body.append(f"{self.indent_make(level)}{member}")

        return f"export declare interface {name} {{\n" + '\n'.join(body) + "\n}"

    def type_rewrite(self, text: str) -> str:
        """
        Rewrite an exported type alias

        The right-hand side (unions, intersections, conditional and mapped
        types, generics) is passed through verbatim.
        """
        return TYPE_EXPORT.sub('export declare type', text.strip(), count=1)

    # ------------------------------------------------------------------
    # Functions, default export, passthrough
    # ------------------------------------------------------------------

    def function_rewrite(self, text: str) -> str:
        """
        Rewrite an exported function to its signature

        The signature ends at the body brace. Overloads are rewritten one by
        one and never merged.

        Example:
            "export async function load(id: string): Promise<Item> {"
            → "export declare function load(id: string): Promise<Item>;"
        """
        source = text.strip()
        body = bodyBrace_find(source)
        signature = source[:body] if body != -1 else source
        signature = signature.strip().rstrip(';').rstrip()
        signature = FUNCTION_MODIFIERS.sub('', signature, count=1)
        signature = GENERATOR_STAR.sub('function ', signature, count=1)
        return f"export declare {signature};"

    def default_rewrite(self, text: str) -> str:
        """`export default x` → `export default x;` (never doubled)"""
        return f"{text.strip().rstrip(';').rstrip()};"

    def passthrough_rewrite(self, text: str) -> str:
        return text.strip()

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def import_rewrite(self, text: str) -> str:
        """
        Normalize an import statement

        Named imports whose every specifier is type-only become a single
        `import type` statement; all other imports are kept verbatim.

        Example:
            "import { type A, type B } from './types'"
            → "import type { A, B } from './types'"
        """
        statement = text.strip()
        if TYPE_IMPORT.match(statement):
            return statement

        match = NAMED_IMPORT.match(statement)
        if not match:
            return statement

        specifiers = toplevel_split(match.group('names'), ',')
        if specifiers and all(TYPE_SPECIFIER.match(spec) for spec in specifiers):
            names = ', '.join(TYPE_SPECIFIER.sub('', spec, count=1) for spec in specifiers)
            return f"import type {{ {names} }} from {match.group('source').strip()}"
        return statement
