"""
Scanner accumulation tests

Tests bracket-balanced accumulation of statements spanning several lines,
forced flushing, type alias continuation and single-line mode.
"""

from tsdeclare.lib.scanner import Scanner
from tsdeclare.models.declarations import DeclarationKind


def texts_get(source: str, **kwargs) -> list:
    return [record.text for record in Scanner(source, **kwargs).scan().declarations]


class TestConstAccumulation:
    """Test multi-line constants"""

    def test_braces_in_strings_ignored(self):
        """Braces inside string values do not end the literal early"""
        source = "export const a = {\n  open: '{',\n  close: '}',\n}"
        assert texts_get(source) == [
            "export declare const a: { [key: string]: string } {\n  open: '{';\n  close: '}';\n};"
        ]

    def test_nested_literal(self):
        """Nested braces keep the literal open until the outer close"""
        source = "export const conf = {\n  nested: {\n    key: 'value',\n  },\n}\nexport const b = 1"
        assert texts_get(source) == [
            "export declare const conf: { [key: string]: any } {\n"
            "  nested: {\n"
            "    key: 'value';\n"
            "  };\n"
            "};",
            "export declare const b: number;",
        ]

    def test_unterminated_flushed_at_end(self):
        """An open literal at end of input is flushed as-is"""
        assert texts_get("export const a = {\n  b: 1,") == [
            "export declare const a: { [key: string]: number } {\n  b: 1;\n};"
        ]

    def test_default_export_flushes(self):
        """export default ends an open statement"""
        result = Scanner("export const a = {\n  b: 1,\nexport default a").scan()
        assert len(result.declarations) == 1
        assert result.declarations[0].text.startswith("export declare const a:")
        assert result.default_export.text == "export default a;"

    def test_single_line_mode_still_merges_constants(self):
        """Constants are merged in both modes"""
        source = "export const conf = {\n  key: 'value',\n}"
        assert texts_get(source, multiline_declarations=False) == texts_get(source)

    def test_comment_with_brace_in_constant(self):
        """A brace inside a comment in the literal does not keep it open"""
        source = "export const o = {\n  /**\n   * e.g. {\n   */\n  a: 1,\n}\nexport const y = 2"
        declarations = Scanner(source, multiline_declarations=False).scan().declarations
        assert [record.text for record in declarations] == [
            "export declare const o: { [key: string]: number } {\n  a: 1;\n};",
            "export declare const y: number;",
        ]
        assert declarations[0].comment == "  /**\n   * e.g. {\n   */"
        assert declarations[1].comment is None

    def test_comment_inside_constant_attaches(self):
        """A documentation block inside the literal attaches to the constant"""
        source = "export const o = {\n  /** doc */\n  a: 1,\n}"
        record = Scanner(source).scan().declarations[0]
        assert record.comment == "  /** doc */"
        assert record.text == "export declare const o: { [key: string]: number } {\n  a: 1;\n};"


class TestDeclarationAccumulation:
    """Test multi-line interfaces, functions and types"""

    def test_multiline_interface(self):
        """Interface body spanning lines is kept"""
        source = "export interface User {\n  id: number\n  name: string\n}"
        assert texts_get(source) == ["export declare interface User {\n  id: number\n  name: string\n}"]

    def test_single_line_mode_interface(self):
        """Single-line mode reads only the opening line"""
        source = "export interface User {\n  id: number\n  name: string\n}"
        assert texts_get(source, multiline_declarations=False) == ["export declare interface User {\n\n}"]

    def test_overloads_kept_separate(self):
        """Bodiless overload signatures are not merged"""
        source = (
            "export function processData(data: string): string\n"
            "export function processData(data: number): number\n"
            "export function processData(data: any): any {\n"
            "  return data\n"
            "}"
        )
        assert texts_get(source) == [
            "export declare function processData(data: string): string;",
            "export declare function processData(data: number): number;",
            "export declare function processData(data: any): any;",
        ]

    def test_multiline_parameters(self):
        """Parentheses count toward the balance"""
        source = "export function f(\n  a: string,\n  b: number,\n): void {\n  return\n}"
        assert texts_get(source) == ["export declare function f(\n  a: string,\n  b: number,\n): void;"]

    def test_function_body_with_braces_in_template(self):
        """Template literal braces in a body are ignored"""
        source = "export function f(): string {\n  return `${a}}`\n}\nexport const b = 1"
        assert texts_get(source) == [
            "export declare function f(): string;",
            "export declare const b: number;",
        ]

    def test_interface_comment_with_parenthesis(self):
        """A parenthesis inside a documentation block spanning lines is ignored"""
        source = (
            "export interface Opts {\n"
            "  /**\n"
            "   * Modes:\n"
            "   * 1) fast\n"
            "   */\n"
            "  mode: string\n"
            "}\n"
            "export const x = 1"
        )
        assert texts_get(source) == [
            "export declare interface Opts {\n"
            "  /**\n"
            "   * Modes:\n"
            "   * 1) fast\n"
            "   */\n"
            "  mode: string\n"
            "}",
            "export declare const x: number;",
        ]

    def test_function_body_comment_with_parenthesis(self):
        """An open parenthesis inside a block comment in a body is ignored"""
        source = "export function f() {\n  /*\n   * see foo(\n   */\n  return 1\n}\nexport const x = 1"
        assert texts_get(source) == [
            "export declare function f();",
            "export declare const x: number;",
        ]

    def test_function_body_with_regex_literal(self):
        """Brackets inside a regular expression literal are ignored"""
        source = "export function f(s: string) {\n  return s.replace(/\\(/g, '')\n}\nexport const x = 1"
        assert texts_get(source) == [
            "export declare function f(s: string);",
            "export declare const x: number;",
        ]

    def test_passthrough_class(self):
        """Unrecognized exports are kept whole"""
        source = "export class Foo {\n  bar() {}\n}"
        result = Scanner(source).scan()
        assert result.declarations[0].kind is DeclarationKind.PASSTHROUGH
        assert result.declarations[0].text == source


class TestTypeContinuation:
    """Test type aliases that continue past a balanced line"""

    def test_leading_union_lines(self):
        """Lines starting with | continue the alias"""
        source = "export type Status =\n  | 'active'\n  | 'inactive'\nexport const x = 1"
        assert texts_get(source) == [
            "export declare type Status =\n  | 'active'\n  | 'inactive'",
            "export declare const x: number;",
        ]

    def test_trailing_operator(self):
        """A trailing operator keeps the alias open"""
        source = "export type Both = A &\n  B\n\nexport type C = 1"
        assert texts_get(source) == [
            "export declare type Both = A &\n  B",
            "export declare type C = 1",
        ]

    def test_conditional_type(self):
        """? and : lines continue a conditional type"""
        source = "export type Unwrap<T> = T extends Promise<infer U>\n  ? U\n  : T"
        assert texts_get(source) == [
            "export declare type Unwrap<T> = T extends Promise<infer U>\n  ? U\n  : T"
        ]

    def test_object_type(self):
        """Object types balance across lines"""
        source = "export type Point = {\n  x: number\n}\nexport type C = 1"
        assert texts_get(source) == [
            "export declare type Point = {\n  x: number\n}",
            "export declare type C = 1",
        ]

    def test_alias_then_comment(self):
        """A comment after a finished alias attaches to the next declaration"""
        source = "export type A = 1\n/** doc */\nexport type B = 2"
        declarations = Scanner(source).scan().declarations
        assert declarations[0].comment is None
        assert declarations[1].comment == "/** doc */"


class TestMultilineStatements:
    """Test imports and re-exports spanning lines"""

    def test_multiline_import(self):
        """Named imports spanning lines are merged"""
        source = "import {\n  a,\n  b,\n} from './x'\nexport const c = 1"
        result = Scanner(source).scan()
        assert result.imports == ["import {\n  a,\n  b,\n} from './x'"]
        assert len(result.declarations) == 1

    def test_multiline_type_import(self):
        """Type-only specifiers spanning lines are collapsed"""
        source = "import {\n  type A,\n  type B,\n} from './types'"
        assert Scanner(source).scan().imports == ["import type { A, B } from './types'"]

    def test_multiline_reexport(self):
        """Re-export lists spanning lines are merged"""
        source = "export {\n  a,\n  b,\n}"
        assert Scanner(source).scan().exports == ["export {\n  a,\n  b,\n}"]

    def test_single_line_mode_import(self):
        """Single-line mode keeps only the opening line"""
        source = "import {\n  a,\n} from './x'"
        assert Scanner(source, multiline_declarations=False).scan().imports == ["import {"]
