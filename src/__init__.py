"""
tsdeclare - Ambient declaration generator

Strips implementation bodies from source files and emits their exported
surface (constants, interfaces, type aliases, functions, re-exports) as
declaration files.
"""

__version__ = "1.0.0"

from .lib import (
    Scanner,
    Assembler,
    DeclarationTransformer,
    extract,
    dts_generate,
    ExtractionError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Scanner",
    "Assembler",
    "DeclarationTransformer",
    "extract",
    "dts_generate",
    "ExtractionError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
