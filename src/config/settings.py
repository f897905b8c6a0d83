"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TSDECLARE_ prefix (e.g., TSDECLARE_KEEP_COMMENTS=false).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import PurePath

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TSDECLARE_ prefix.

    Examples:
        TSDECLARE_MULTILINE_DECLARATIONS=false
        TSDECLARE_KEEP_COMMENTS=false
        TSDECLARE_SOURCE_PATTERN=src/**/*.ts
    """

    model_config = SettingsConfigDict(
        env_prefix="TSDECLARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Scanner configuration
    multiline_declarations: bool = Field(
        default=True,
        description=(
            "Merge interface, type, function, import and re-export statements that span "
            "several lines. When false only constants are merged across lines"
        ),
    )

    keep_comments: bool = Field(
        default=True,
        description="Emit /** ... */ blocks in front of the declaration they precede",
    )

    # Rendering configuration
    indent_unit: str = Field(
        default="  ",
        description="Indentation emitted per nesting level inside declaration bodies",
    )

    # File configuration
    source_pattern: str = Field(
        default="**/*.ts",
        description="Glob (relative to inputdir) selecting source files when no entrypoints are configured",
    )

    output_suffix: str = Field(
        default=".d.ts",
        description="Suffix replacing the source suffix on generated declaration files",
    )

    config_filename: str = Field(
        default="tsdeclare.yaml",
        description="Name of the optional per-project YAML configuration file inside inputdir",
    )

    def outputName_make(self, relative_path: PurePath) -> PurePath:
        """
        Map a source path onto its declaration file path.

        Only the final suffix is replaced so that directory structure and
        dotted stems survive.

        Args:
            relative_path: Source path, usually relative to the input directory

        Returns:
            Path with the source suffix swapped for output_suffix

        Example:
            >>> settings = AppSettings()
            >>> settings.outputName_make(PurePath('lib/utils.ts'))
            PurePosixPath('lib/utils.d.ts')
        """
        return relative_path.with_name(f"{relative_path.stem}{self.output_suffix}")


# Singleton instance - import this in your code
appsettings = AppSettings()
