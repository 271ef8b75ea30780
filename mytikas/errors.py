"""
Mytikas Error Hierarchy

Unified exception hierarchy for the rules engine and its surfaces.
All custom exceptions inherit from MytikasError for easy catching and filtering.

Usage:
    from mytikas.errors import DecodeError, IllegalTurnError

    try:
        position = Position.decode(text)
    except DecodeError as e:
        logger.warning(f"Invalid position string: {e.message}")
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "IllegalTurnError",
    "InvalidStateError",
    # Base error
    "MytikasError",
    "PositionDecodeError",
    "TurnDecodeError",
]


class MytikasError(Exception):
    """Base exception for all Mytikas errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "MYTIKAS_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Decoding Errors
# =============================================================================


class DecodeError(MytikasError, ValueError):
    """Malformed external input.

    Raised by the text decoders. Decoding is all-or-nothing: no partially
    decoded value is ever returned alongside this error.

    Attributes:
        text: The rejected input
        offset: Character offset where decoding failed, when known
    """
    code: str = "DECODE_FAILED"

    def __init__(
        self,
        message: str,
        text: str,
        offset: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.text = text
        self.offset = offset
        self.context["text"] = text
        if offset is not None:
            self.context["offset"] = offset


class PositionDecodeError(DecodeError):
    """Invalid position string."""
    code: str = "POSITION_DECODE_FAILED"


class TurnDecodeError(DecodeError):
    """Invalid turn or action notation."""
    code: str = "TURN_DECODE_FAILED"


# =============================================================================
# Game Rules Errors
# =============================================================================


class InvalidStateError(MytikasError):
    """Corrupted or unexpected game state.

    Raised by invariant checks when a position is in a configuration that
    should not be reachable through the primitives (e.g., the occupancy table
    disagrees with a character's recorded cell).
    """
    code: str = "INVALID_STATE"


class IllegalTurnError(MytikasError):
    """Turn that is not legal in the given position.

    Only raised when the caller explicitly asks for validation; the executor
    itself never re-validates.
    """
    code: str = "ILLEGAL_TURN"

    def __init__(
        self,
        message: str,
        turn: str | None = None,
        position: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.turn = turn
        self.position = position
        if turn is not None:
            self.context["turn"] = turn
        if position is not None:
            self.context["position"] = position


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MytikasError):
    """Invalid engine configuration (e.g., a malformed environment flag)."""
    code: str = "CONFIGURATION_ERROR"
