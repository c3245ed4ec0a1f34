from __future__ import annotations

"""
Error Taxonomy.

Every failure raised by the transport, the operation poller, the tree
resolver and the instance accessor derives from RblxSyncError. Each error
exposes a stable 'kind' identifier and the discriminating detail (missing
segment, HTTP status, ...) so that interface layers can render structured
messages without inspecting exception classes.
"""

from typing import Any, Dict, List, Optional


class RblxSyncError(Exception):
    """Base class for all domain failures."""

    kind: str = "RblxSyncError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the failure as a structured payload.

        Returns:
            Dict[str, Any]: Mapping with 'kind' and 'message' keys.
        """
        return {"kind": self.kind, "message": self.message}

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


# -----------------------------------------------------------------------------
# TRANSPORT FAILURES
# -----------------------------------------------------------------------------

class NetworkError(RblxSyncError):
    """The connection could not be established or was interrupted."""

    kind = "NetworkError"


class HttpStatusError(RblxSyncError):
    """The server answered with a status outside [200, 300)."""

    kind = "HttpStatusError"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.server_message = message

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["status_code"] = self.status_code
        return payload


class ParseError(RblxSyncError):
    """A body was received but could not be interpreted."""

    kind = "ParseError"


# -----------------------------------------------------------------------------
# OPERATION FAILURES
# -----------------------------------------------------------------------------

class OperationTimeoutError(RblxSyncError):
    """A deferred operation did not finish within the configured bounds."""

    kind = "OperationTimeoutError"

    def __init__(self, operation_path: str, attempts: int) -> None:
        super().__init__(
            f"Operation '{operation_path}' still pending after {attempts} poll(s)"
        )
        self.operation_path = operation_path
        self.attempts = attempts


class OperationFailedError(RblxSyncError):
    """A deferred operation finished with an error status."""

    kind = "OperationFailedError"

    def __init__(self, operation_path: str, code: Optional[Any], message: str) -> None:
        super().__init__(f"Operation '{operation_path}' failed ({code}): {message}")
        self.operation_path = operation_path
        self.code = code


# -----------------------------------------------------------------------------
# RESOLUTION FAILURES
# -----------------------------------------------------------------------------

class NodeNotFoundError(RblxSyncError):
    """No child of the current node matches the next path segment."""

    kind = "NodeNotFoundError"

    def __init__(self, segment: str) -> None:
        super().__init__(f"Node '{segment}' not found")
        self.segment = segment

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["segment"] = self.segment
        return payload


class FieldNotFoundError(RblxSyncError):
    """The instance has no Details entry for the requested type key."""

    kind = "FieldNotFoundError"

    def __init__(self, type_key: str) -> None:
        super().__init__(f"Details entry '{type_key}' not found on instance")
        self.type_key = type_key

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["type_key"] = self.type_key
        return payload


class ConfigurationError(RblxSyncError):
    """Required target settings are missing or invalid."""

    kind = "ConfigurationError"

    def __init__(self, missing: List[str]) -> None:
        super().__init__(f"Missing required settings: {', '.join(missing)}")
        self.missing = list(missing)


def describe_error(exc: BaseException) -> Dict[str, Any]:
    """
    Convert any exception into the structured {kind, message} form.

    Args:
        exc: The failure to describe.

    Returns:
        Dict[str, Any]: Structured error payload.
    """
    if isinstance(exc, RblxSyncError):
        return exc.to_dict()
    return {"kind": type(exc).__name__, "message": str(exc)}
