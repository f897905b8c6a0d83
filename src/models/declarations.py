"""
Declaration records and inference models

Defines the kinds of declarations the transformer produces, the immutable
records collected during a scan, and the tagged inference variant used by
the object-literal type heuristic.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class DeclarationKind(Enum):
    """
    Kinds of exported declarations

    Selects the rewriter that turns a declaration's source text into its
    declaration-only form.
    """
    CONST = "const"                # export const name = ...
    INTERFACE = "interface"        # export interface Name { ... }
    TYPE = "type"                  # export type Name = ...
    FUNCTION = "function"          # export [async] function name(...)
    DEFAULT = "default"            # export default ...
    PASSTHROUGH = "passthrough"    # anything else, emitted unchanged


class InferredKind(Enum):
    """
    Result of classifying one object-literal property value

    The value of each member is the type name rendered into the
    synthesized index signature.
    """
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    UNKNOWN = "any"

    @property
    def ts_type(self) -> str:
        return self.value


@dataclass(frozen=True)
class InferredProperty:
    """
    One classified property of an annotation-less constant

    Attributes:
        key: Property name as written (quotes preserved)
        value: Raw value text with any trailing comma removed
        kind: Classification of the value

    Example:
        For the body line "port: 8080,":
        InferredProperty(key="port", value="8080", kind=InferredKind.NUMBER)
    """
    key: str
    value: str
    kind: InferredKind


@dataclass(frozen=True)
class DeclarationRecord:
    """
    A transformed declaration ready for output

    Attributes:
        kind: Which rewriter produced the text
        text: Declaration-only text
        comment: Documentation block emitted immediately before the text
        line_number: 1-based source line where the declaration opened
    """
    kind: DeclarationKind
    text: str
    comment: Optional[str] = None
    line_number: int = 0


@dataclass
class ExtractionResult:
    """
    Ordered output buffers of one extraction pass

    Imports, declarations and re-exports are independently ordered groups;
    the assembler concatenates them without interleaving.

    Attributes:
        imports: Import statements in source order
        declarations: Declaration records in source order
        exports: Re-export statements (export { .. }, export * from ..)
        default_export: The last `export default` seen, if any
    """
    imports: List[str] = field(default_factory=list)
    declarations: List[DeclarationRecord] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)
    default_export: Optional[DeclarationRecord] = None
