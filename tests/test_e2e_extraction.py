"""
End-to-end extraction tests

Tests the full pipeline: source file → Scanner → DeclarationTransformer →
Assembler → declaration text.

Validates that complete source files produce the expected declaration
files, and that unreadable files are reported.
"""

import pytest
from pathlib import Path
import tempfile

from tsdeclare.lib import ExtractionError, dts_generate, extract


SAMPLE_SOURCE = """import type { Plugin } from 'bun'
import { generate } from './generate'

/**
 * Example of const declaration
 */
export const conf = {
  key: 'value',
}

export interface User {
  id: number
  name: string
}

export type Status = 'on' | 'off'

/**
 * Fetch all users
 */
export async function fetchUsers(): Promise<User[]> {
  return []
}

const internal = 1

export { generate }
export * from './types'

export default conf
"""

SAMPLE_DECLARATIONS = """import type { Plugin } from 'bun'
import { generate } from './generate'

/**
 * Example of const declaration
 */
export declare const conf: { [key: string]: string } {
  key: 'value';
};
export declare interface User {
  id: number
  name: string
}
export declare type Status = 'on' | 'off'
/**
 * Fetch all users
 */
export declare function fetchUsers(): Promise<User[]>;

export { generate }
export * from './types'
export default conf;"""


class TestGenerate:
    """Test in-memory generation"""

    def test_concrete_const(self):
        """The object constant scenario"""
        assert dts_generate("export const conf = {\n  key: 'value',\n}") == (
            "export declare const conf: { [key: string]: string } {\n  key: 'value';\n};"
        )

    def test_sample_file(self):
        """A complete module produces grouped declarations"""
        assert dts_generate(SAMPLE_SOURCE) == SAMPLE_DECLARATIONS

    def test_sample_without_comments(self):
        """Comment blocks can be left out"""
        output = dts_generate(SAMPLE_SOURCE, keep_comments=False)
        assert '/**' not in output
        assert 'export declare function fetchUsers(): Promise<User[]>;' in output

    def test_single_line_mode(self):
        """Single-line mode reads interfaces from their opening line"""
        output = dts_generate(SAMPLE_SOURCE, multiline_declarations=False)
        assert 'export declare interface User {}' in output
        assert 'id: number' not in output

    def test_already_declared_is_stable(self):
        """Declaration-only input is reproduced"""
        source = (
            "import type { A } from './a'\n"
            "\n"
            "export declare const a: number;\n"
            "export declare interface B {\n"
            "  id: number\n"
            "}\n"
            "export declare type S = 'a'\n"
            "export declare function f(): void;\n"
            "\n"
            "export default a;"
        )
        assert dts_generate(source) == source
        assert dts_generate(dts_generate(source)) == source

    def test_overloads(self):
        """Overload sets produce one signature per line"""
        source = (
            "/**\n"
            " * Process data\n"
            " */\n"
            "export function processData(data: string): string\n"
            "export function processData(data: number): number\n"
            "export function processData(data: any): any {\n"
            "  return data\n"
            "}\n"
        )
        assert dts_generate(source) == (
            "/**\n"
            " * Process data\n"
            " */\n"
            "export declare function processData(data: string): string;\n"
            "export declare function processData(data: number): number;\n"
            "export declare function processData(data: any): any;"
        )

    def test_comment_inside_constant(self):
        """Comments inside an object constant precede it and never leak later exports"""
        source = "export const o = {\n  /**\n   * e.g. {\n   */\n  a: 1,\n}\nexport const y = 2"
        assert dts_generate(source, multiline_declarations=False) == (
            "/**\n"
            "   * e.g. {\n"
            "   */\n"
            "export declare const o: { [key: string]: number } {\n"
            "  a: 1;\n"
            "};\n"
            "export declare const y: number;"
        )

    def test_single_line_doc_inside_constant(self):
        """A one-line documentation block inside a constant is emitted before it"""
        source = "export const o = {\n  /** doc */\n  a: 1,\n}"
        assert dts_generate(source, multiline_declarations=False) == (
            "/** doc */\n"
            "export declare const o: { [key: string]: number } {\n"
            "  a: 1;\n"
            "};"
        )

    def test_trailing_comment_produces_nothing(self):
        """A trailing comment block is not emitted"""
        assert dts_generate("export const a = 1\n\n/**\n * later\n */\n") == "export declare const a: number;"

    def test_empty_source(self):
        """Empty source produces empty output"""
        assert dts_generate("") == ""
        assert dts_generate("const a = 1\n") == ""

    def test_independent_calls(self):
        """State does not leak between calls"""
        dts_generate("/** orphan */\nexport const a = {\n  b: 1,")
        assert dts_generate("export const c = 2") == "export declare const c: number;"


class TestExtract:
    """Test reading source files"""

    def test_extract_file(self):
        """extract() reads and generates"""
        with tempfile.TemporaryDirectory() as tmpdir:
            source_file = Path(tmpdir) / "index.ts"
            source_file.write_text(SAMPLE_SOURCE, encoding='utf-8')

            assert extract(source_file) == SAMPLE_DECLARATIONS
            assert extract(str(source_file)) == SAMPLE_DECLARATIONS

    def test_missing_file(self):
        """A missing file raises ExtractionError"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ExtractionError, match="Failed to extract and generate .d.ts file"):
                extract(Path(tmpdir) / "missing.ts")

    def test_invalid_encoding(self):
        """Undecodable bytes raise ExtractionError"""
        with tempfile.TemporaryDirectory() as tmpdir:
            source_file = Path(tmpdir) / "binary.ts"
            source_file.write_bytes(b"export const a = '\xff\xfe'")

            with pytest.raises(ExtractionError) as excinfo:
                extract(source_file)
            assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_directory_is_not_readable(self):
        """A directory path raises ExtractionError"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ExtractionError):
                extract(tmpdir)
