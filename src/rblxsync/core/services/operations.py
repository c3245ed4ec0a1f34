from __future__ import annotations

"""
Long-Running Operation Poller.

Open Cloud instance endpoints answer with a deferred operation handle
({"path": ...}) instead of the result. The poller queries that handle at a
fixed interval until the server reports it done, then hands back the
operation's 'response' payload. Waiting is unbounded unless a maximum number
of polls or a timeout is configured. Sleep and clock are injectable so tests
run without real delays.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from rblxsync.domain.constants import DEFAULT_POLL_INTERVAL, OPEN_CLOUD_BASE_URL
from rblxsync.domain.errors import (
    OperationFailedError,
    OperationTimeoutError,
    ParseError,
)
from rblxsync.infra.network.common import join_url

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]
ClockFn = Callable[[], float]


# -----------------------------------------------------------------------------
# POLLING STATE DEFINITIONS
# -----------------------------------------------------------------------------

class PollState(Enum):
    """Lifecycle of a single wait on a deferred operation."""
    PENDING = "PENDING"
    DONE = "DONE"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


# -----------------------------------------------------------------------------
# OPERATION POLLER
# -----------------------------------------------------------------------------

class OperationPoller:
    """
    Fixed-interval poller for deferred Open Cloud operations.

    Args:
        transport: Object exposing an async send(url, method, headers, body).
        base_url: API base the operation paths are relative to.
        interval: Seconds to wait between two polls.
        max_attempts: Optional cap on the number of polls.
        timeout: Optional cap, in clock seconds, on the whole wait.
        sleep: Coroutine function used to suspend between polls.
        clock: Monotonic clock used for the timeout.
    """

    def __init__(
            self,
            transport: Any,
            base_url: str = OPEN_CLOUD_BASE_URL,
            *,
            interval: float = DEFAULT_POLL_INTERVAL,
            max_attempts: Optional[int] = None,
            timeout: Optional[float] = None,
            sleep: SleepFn = asyncio.sleep,
            clock: ClockFn = time.monotonic,
    ) -> None:
        self._transport = transport
        self._base_url = base_url
        self._interval = interval
        self._max_attempts = max_attempts
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock

    async def wait(self, operation_path: str, headers: Dict[str, str]) -> Any:
        """
        Poll an operation until it completes and return its response payload.

        Args:
            operation_path: Server-relative path of the operation.
            headers: Request headers (credential included).

        Returns:
            Any: The operation's 'response' field (None when absent).

        Raises:
            OperationTimeoutError: A configured bound was exceeded.
            OperationFailedError: The operation finished with an error.
            ParseError: The poll payload is not an operation object.
        """
        url = join_url(self._base_url, operation_path)
        started = self._clock()
        attempts = 0
        state = PollState.PENDING
        payload: Dict[str, Any] = {}

        while state is PollState.PENDING:
            payload = await self._transport.send(url, "GET", headers)
            attempts += 1
            logger.debug(f"Operation {operation_path} poll #{attempts}: {payload}")

            if not isinstance(payload, dict):
                raise ParseError(f"Operation payload is not an object: {payload!r}")

            state = self._next_state(payload, attempts, started)
            if state is PollState.PENDING:
                await self._sleep(self._interval)

        if state is PollState.FAILED:
            error = payload.get("error")
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise OperationFailedError(
                operation_path,
                error.get("code"),
                str(error.get("message", "")),
            )

        if state is PollState.EXPIRED:
            logger.warning(f"Operation {operation_path} abandoned after {attempts} poll(s).")
            raise OperationTimeoutError(operation_path, attempts)

        logger.debug(f"Operation {operation_path} completed after {attempts} poll(s).")
        return payload.get("response")

    def _next_state(self, payload: Dict[str, Any], attempts: int, started: float) -> PollState:
        if payload.get("done"):
            if "error" in payload and "response" not in payload:
                return PollState.FAILED
            return PollState.DONE

        if self._max_attempts is not None and attempts >= self._max_attempts:
            return PollState.EXPIRED

        if self._timeout is not None:
            # The next poll would start after another interval
            if self._clock() - started + self._interval > self._timeout:
                return PollState.EXPIRED

        return PollState.PENDING
