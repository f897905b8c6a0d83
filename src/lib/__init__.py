"""
tsdeclare - Ambient declaration generator

Strips implementation bodies from source files and emits their exported
surface as declaration files.
"""

__version__ = "1.0.0"

from .scanner import Scanner
from .assembler import Assembler
from .transformer import DeclarationTransformer
from .extract import extract, dts_generate, ExtractionError
from .project import ProjectConfig, ProjectConfigError
from .log import LOG, ERROR, state_connectToLogger

__all__ = [
    "Scanner",
    "Assembler",
    "DeclarationTransformer",
    "extract",
    "dts_generate",
    "ExtractionError",
    "ProjectConfig",
    "ProjectConfigError",
    "LOG",
    "ERROR",
    "state_connectToLogger",
    "__version__",
]
