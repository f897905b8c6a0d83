"""
Assembler tests

Tests output grouping and the ordered cleanup pass.
"""

import pytest

from tsdeclare.lib.assembler import Assembler, output_clean
from tsdeclare.models.declarations import DeclarationKind, DeclarationRecord, ExtractionResult


def record_make(text: str, comment=None, kind=DeclarationKind.CONST) -> DeclarationRecord:
    return DeclarationRecord(kind=kind, text=text, comment=comment)


class TestOutputClean:
    """Test the cleanup substitutions"""

    @pytest.mark.parametrize("raw,expected", [
        ("export declare interface A {\n\n}", "export declare interface A {}"),
        ("export declare interface A {   }", "export declare interface A {}"),
        ("export default a ;", "export default a;"),
        ("  key: 'value' ;\n}", "key: 'value';\n}"),
        ("a\n\n\n\nb", "a\n\nb"),
        ("key: 'value';}", "key: 'value';\n}"),
        ("x {;\n}", "x {\n}"),
        ("\n\nexport const a: number;\n\n", "export const a: number;"),
    ])
    def test_rules(self, raw, expected):
        """Each rule normalizes its pattern"""
        assert output_clean(raw) == expected

    def test_space_kept_mid_line(self):
        """Whitespace before a terminator followed by more text is kept"""
        assert output_clean("for (a ; b)") == "for (a ; b)"

    def test_concrete_const_unchanged(self):
        """A well-formed constant passes through unchanged"""
        text = "export declare const conf: { [key: string]: string } {\n  key: 'value';\n};"
        assert output_clean(text) == text


class TestAssemble:
    """Test grouping of buffers into output text"""

    def test_all_groups(self):
        """Imports, declarations and exports are separated by one blank line"""
        result = ExtractionResult(
            imports=["import a from 'a'"],
            declarations=[
                record_make("export declare const x: number;", comment="/** x */"),
                record_make("export declare type Y = 1", kind=DeclarationKind.TYPE),
            ],
            exports=["export { y }"],
            default_export=record_make("export default x;", kind=DeclarationKind.DEFAULT),
        )
        assert Assembler(result).assemble() == (
            "import a from 'a'\n"
            "\n"
            "/** x */\n"
            "export declare const x: number;\n"
            "export declare type Y = 1\n"
            "\n"
            "export { y }\n"
            "export default x;"
        )

    def test_empty_groups_omitted(self):
        """Missing groups leave no stray blank lines"""
        result = ExtractionResult(
            declarations=[record_make("export declare const x: number;")],
            default_export=record_make("export default x;", kind=DeclarationKind.DEFAULT),
        )
        assert Assembler(result).assemble() == "export declare const x: number;\n\nexport default x;"

    def test_imports_only(self):
        """A file with only imports keeps them"""
        result = ExtractionResult(imports=["import a from 'a'", "import b from 'b'"])
        assert Assembler(result).assemble() == "import a from 'a'\nimport b from 'b'"

    def test_empty_result(self):
        """Nothing to emit gives empty text"""
        assert Assembler(ExtractionResult()).assemble() == ""

    def test_comments_disabled(self):
        """Comment blocks are omitted when disabled"""
        result = ExtractionResult(declarations=[record_make("export declare const x: number;", comment="/** x */")])
        assert Assembler(result, keep_comments=False).assemble() == "export declare const x: number;"

    def test_empty_interface_collapsed(self):
        """Empty bodies are collapsed during assembly"""
        result = ExtractionResult(
            declarations=[record_make("export declare interface User {\n\n}", kind=DeclarationKind.INTERFACE)]
        )
        assert Assembler(result).assemble() == "export declare interface User {}"

    def test_groups_build(self):
        """Groups are built in a fixed order"""
        result = ExtractionResult(
            imports=["import a from 'a'"],
            exports=["export * from './t'"],
        )
        assert Assembler(result).groups_build() == [["import a from 'a'"], ["export * from './t'"]]
