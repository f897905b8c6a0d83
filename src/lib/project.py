"""
Project configuration loader

A project may carry an optional YAML file (tsdeclare.yaml by default) in its
input directory:

    entrypoints:
      - src/**/*.ts
    clean: true
    keepComments: true
    multilineDeclarations: true

Every key is optional. Values given on the command line take precedence,
then this file, then application settings.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from ..config import appsettings


class ProjectConfigError(Exception):
    """Raised when the project configuration file cannot be loaded"""
    pass


class ProjectConfig:
    """
    Per-project generation options

    Attributes:
        config_path: Path of the YAML file (may not exist)
        config: Parsed mapping, empty when the file is absent
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Load project configuration.

        Args:
            config_path: YAML file to read; a missing file means defaults

        Raises:
            ProjectConfigError: If the file is unreadable, is not valid YAML,
                or does not contain a mapping
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.config: Dict[str, Any] = {}
        if self.config_path is not None and self.config_path.exists():
            self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse the YAML file"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProjectConfigError(f"Failed to parse {self.config_path.name}: {e}")
        except OSError as e:
            raise ProjectConfigError(f"Failed to load {self.config_path.name}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ProjectConfigError(
                f"{self.config_path.name} must contain a mapping, got {type(config).__name__}"
            )
        return config

    def option_get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, falling back to default when unset"""
        value = self.config.get(key)
        return default if value is None else value

    def entrypoints_get(self) -> List[str]:
        """Source globs, relative to the input directory"""
        entrypoints = self.option_get('entrypoints', appsettings.source_pattern)
        if isinstance(entrypoints, str):
            return [entrypoints]
        return [str(pattern) for pattern in entrypoints]

    def keepComments_get(self) -> bool:
        return bool(self.option_get('keepComments', appsettings.keep_comments))

    def multilineDeclarations_get(self) -> bool:
        return bool(self.option_get('multilineDeclarations', appsettings.multiline_declarations))

    def clean_get(self) -> bool:
        return bool(self.option_get('clean', False))

    def sources_discover(self, root: Path, patterns: Optional[Iterable[str]] = None) -> List[Path]:
        """
        Find source files under root.

        Args:
            root: Input directory
            patterns: Globs to use instead of the configured entrypoints

        Returns:
            Sorted, de-duplicated files; generated declaration files are excluded
        """
        if patterns is None:
            patterns = self.entrypoints_get()

        found = set()
        for pattern in patterns:
            for path in root.glob(pattern):
                if path.is_file() and not path.name.endswith(appsettings.output_suffix):
                    found.add(path)
        return sorted(found)
