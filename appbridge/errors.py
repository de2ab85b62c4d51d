"""
errors.py - Error classification for appbridge

Every exception raised by the bridge derives from BridgeError and carries an
ErrorCode. Codes are grouped by area:

    1xxx  container / locator
    2xxx  providers
    3xxx  configuration
    4xxx  views
    5xxx  facades
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Specific error codes."""

    # Container (1xxx)
    CNT_UNBOUND = 1001
    CNT_NOT_FOUND = 1002
    CNT_UNDEFINED_OPERATION = 1003

    # Provider (2xxx)
    PRV_INVALID = 2001

    # Configuration (3xxx)
    CFG_INVALID = 3001
    CFG_MISSING_CONNECTION = 3002

    # View (4xxx)
    VIE_NOT_FOUND = 4001

    # Facade (5xxx)
    FAC_NO_APPLICATION = 5001


class BridgeError(Exception):
    """Base class for all appbridge errors."""

    code: ErrorCode = ErrorCode.CNT_UNBOUND

    def __init__(self, message: str = "", **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "error": type(self).__name__,
            "message": self.message,
            "context": dict(self.context),
        }


class UnboundServiceError(BridgeError, LookupError):
    """Raised by Container.resolve when no binding exists for a key."""

    code = ErrorCode.CNT_UNBOUND

    def __init__(self, key: str):
        super().__init__(f"Target [{key}] is not bound in the container", key=key)
        self.key = key

    def __str__(self) -> str:
        return self.message


class EntryNotFoundError(BridgeError, LookupError):
    """No entry was found in the container for the given identifier."""

    code = ErrorCode.CNT_NOT_FOUND

    def __init__(self, key: Optional[str] = None):
        message = f"No entry found for [{key}]" if key else "No entry found"
        super().__init__(message, key=key)
        self.key = key

    def __str__(self) -> str:
        return self.message


class UndefinedOperationError(BridgeError, AttributeError):
    """Raised when the bridge is asked for an operation it does not expose."""

    code = ErrorCode.CNT_UNDEFINED_OPERATION

    def __init__(self, name: str):
        super().__init__(f"Undefined method '{name}'", name=name)
        self.name = name


class InvalidProviderError(BridgeError, TypeError):
    """A provider factory returned something that is not a ServiceProvider."""

    code = ErrorCode.PRV_INVALID


class ConfigurationError(BridgeError):
    """Configuration is missing or malformed."""

    code = ErrorCode.CFG_INVALID


class ViewNotFoundError(BridgeError, LookupError):
    """No template matched the requested view name."""

    code = ErrorCode.VIE_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"View [{name}] not found.", view=name)
        self.name = name

    def __str__(self) -> str:
        return self.message


class FacadeError(BridgeError, RuntimeError):
    """A facade was used before an application was attached."""

    code = ErrorCode.FAC_NO_APPLICATION
