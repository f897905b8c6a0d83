"""
Models package for tsdeclare

Contains data structures and type definitions for the extraction pipeline.
"""

from .state import ProgramState, pipeline
from .declarations import (
    DeclarationKind,
    DeclarationRecord,
    ExtractionResult,
    InferredKind,
    InferredProperty,
)
from .scan import LineKind, SourceLine, CommentBlock, DeclarationAccumulator

__all__ = [
    "ProgramState",
    "pipeline",
    "DeclarationKind",
    "DeclarationRecord",
    "ExtractionResult",
    "InferredKind",
    "InferredProperty",
    "LineKind",
    "SourceLine",
    "CommentBlock",
    "DeclarationAccumulator",
]
