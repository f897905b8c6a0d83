"""
Verbosity-gated logging on top of Loguru.

The CLI connects its ProgramState once; every engine module then calls
LOG() with the verbosity a message needs and never handles the state
itself. Failures go through ERROR(), which is never gated.

Levels:
    1 = run summary (default)
    2 = per-file progress (-v)
    3 = per-line scanner and rewriter trace (-vv)

Usage:
    from .log import LOG, ERROR, state_connectToLogger

    state_connectToLogger(state)          # once, in main()

    LOG("Generated 3 declaration files")
    LOG("Emitted const declaration from line 12", level=2)
    LOG("Line 12 [comment]: * Fetch all users", level=3)
    ERROR("Could not read src/index.ts", exc=e)

Outside a connected context (library use, tests) LOG() is silent.
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

# ProgramState of the running pipeline, if any
_connected_state: ContextVar[Optional[Any]] = ContextVar('tsdeclare_state', default=None)

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <11}</cyan>:"
    "<cyan>{function: <22}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make a state's verbosity govern LOG() in the current context.

    Args:
        state: Object with an integer `verbosity` attribute
    """
    _connected_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _connected_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit a debug record when the connected verbosity reaches level.

    Args:
        message: Text of the record
        level: Verbosity needed for the record to appear
        **kwargs: Extra values bound into the Loguru record
    """
    if verbosity_get() >= level > 0:
        logger.opt(depth=1).debug(message, **kwargs)


def ERROR(message: str, exc: Optional[BaseException] = None) -> None:
    """
    Emit an error record regardless of verbosity.

    Args:
        message: Human-readable description of the failure
        exc: Exception whose traceback is attached to the record
    """
    logger.opt(depth=1, exception=exc).error(message)
