"""
Literal type inference for annotation-less object constants

A flat, single-pass heuristic: each top-level property value is classified
as string, boolean, number or unknown, and the set of classifications is
collapsed into one index-signature type. Nested object and array literals
are not entered; at the top level they classify as unknown.

Example:
    >>> objectType_infer(["host: 'localhost',", "name: 'api',"])
    '{ [key: string]: string }'
    >>> objectType_infer(["host: 'localhost',", "port: 8080,"])
    '{ [key: string]: any }'
"""

import re
from typing import Iterable, List, Optional

from ..models.declarations import InferredKind, InferredProperty
from .lexer import CLOSERS, lines_nest, toplevel_find
from .log import LOG


NUMBER_PATTERN = re.compile(
    r'^[+-]?(?:'
    r'0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+'
    r'|(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?'
    r'|Infinity'
    r')$'
)

QUOTES = ('\'', '"', '`')


def value_classify(value: str) -> InferredKind:
    """
    Classify a literal value fragment.

    Args:
        value: Property value text, trailing ',' or ';' allowed

    Returns:
        STRING for quoted literals, BOOLEAN for true/false, NUMBER for
        numeric literals, UNKNOWN for everything else (including empty)
    """
    literal = value.strip().rstrip(',;').strip()
    if not literal:
        return InferredKind.UNKNOWN
    if literal.startswith(QUOTES):
        return InferredKind.STRING
    if literal in ('true', 'false'):
        return InferredKind.BOOLEAN
    if NUMBER_PATTERN.match(literal):
        return InferredKind.NUMBER
    return InferredKind.UNKNOWN


def property_infer(line: str) -> Optional[InferredProperty]:
    """
    Split one body line at its first structural colon and classify the value.

    Shorthand and spread members (no colon) classify as UNKNOWN. Comment
    lines yield None.
    """
    text = line.strip()
    if not text or text.startswith(('//', '/*', '*')):
        return None

    colon = toplevel_find(text, ':')
    if colon == -1:
        member = text.rstrip(',;').strip()
        return InferredProperty(key=member, value=member, kind=InferredKind.UNKNOWN)

    key = text[:colon].strip()
    value = text[colon + 1:].strip().rstrip(',').strip()
    return InferredProperty(key=key, value=value, kind=value_classify(value))


def properties_infer(lines: Iterable[str]) -> List[InferredProperty]:
    """
    Classify the top-level properties among an object's interior lines.

    Lines nested inside child object or array literals are skipped; the
    line opening the child is itself classified (as UNKNOWN).
    """
    properties = []
    for level, text in lines_nest(lines):
        if level != 1 or text[0] in CLOSERS:
            continue
        inferred = property_infer(text)
        if inferred is not None:
            LOG(f"Inferred {inferred.key} as {inferred.kind.ts_type}", level=3)
            properties.append(inferred)
    return properties


def kind_collapse(properties: Iterable[InferredProperty]) -> InferredKind:
    """Single distinct kind wins; mixed or empty collapses to UNKNOWN"""
    kinds = {prop.kind for prop in properties}
    if len(kinds) == 1:
        return kinds.pop()
    return InferredKind.UNKNOWN


def indexSignature_make(kind: InferredKind) -> str:
    return f"{{ [key: string]: {kind.ts_type} }}"


def objectType_infer(lines: Iterable[str]) -> str:
    """
    Synthesize the index-signature type of an object literal body.

    Args:
        lines: Interior lines of the literal (opening and closing lines excluded)

    Returns:
        Index signature such as '{ [key: string]: string }'
    """
    return indexSignature_make(kind_collapse(properties_infer(lines)))
