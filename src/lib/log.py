"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing, and the Diagnostics
sink that the markup engine reports warnings and errors to.

Features:
- Context-aware logging tied to ProgramState verbosity
- Rich formatting with timestamps, colors, and metadata
- Thread-safe using contextvars
- Diagnostics recorded per snippet and forwarded to loguru

Usage:
    from lib.log import LOG, Diagnostics, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)

    # Inside the engine:
    diagnostics = Diagnostics()
    diagnostics.warn("tag @start without specified region attribute")
"""

from loguru import logger
from typing import Any, List, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with snipmark-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of each pipeline function to make the state's
    verbosity setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


class Diagnostics:
    """
    Diagnostic sink for the markup engine

    Records every warning and error so callers can inspect them after a
    parse, and forwards each message to loguru. Reporting never changes
    control flow.

    Attributes:
        warnings: Warning messages in emission order (prefixed)
        errors: Error messages in emission order (prefixed)
        forward: False to record without logging
    """

    def __init__(self, forward: bool = True) -> None:
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self.forward = forward

    def warn(self, message: str) -> None:
        """Record a recoverable problem"""
        text = appsettings.message_make(message)
        self.warnings.append(text)
        if self.forward:
            logger.opt(depth=1).warning(text)

    def error(self, message: str) -> None:
        """Record a data-integrity problem"""
        text = appsettings.message_make(message)
        self.errors.append(text)
        if self.forward:
            logger.opt(depth=1).error(text)

    def count(self) -> int:
        """Total number of recorded diagnostics"""
        return len(self.warnings) + len(self.errors)
