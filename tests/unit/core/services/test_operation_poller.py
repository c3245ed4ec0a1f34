from __future__ import annotations

"""
Unit tests for the Long-Running Operation Poller.

Verifies:
1. Completion after a number of pending polls with one delay per pending poll.
2. Optional bounds (max attempts, clock-based timeout).
3. Propagation of transport failures and server-reported operation errors.
"""

import logging
from typing import Any, Dict, List, Optional

import pytest

from rblxsync.core.services.operations import OperationPoller
from rblxsync.domain.errors import (
    NetworkError,
    OperationFailedError,
    OperationTimeoutError,
    ParseError,
)

BASE = "https://example.test/cloud/v2/"
OP = "universes/1/places/2/instances/root/operations/abc"
HEADERS = {"x-api-key": "k", "Content-Type": "application/json"}


class ScriptedTransport:
    """Returns queued payloads (or raises queued exceptions) in order."""

    def __init__(self, replies: List[Any]) -> None:
        self._replies = list(replies)
        self.requests: List[Dict[str, Any]] = []

    async def send(self, url: str, method: str, headers: Dict[str, str], body: Optional[Any] = None) -> Any:
        self.requests.append({"url": url, "method": method, "headers": headers})
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    """Monotonic clock advanced by the paired sleep coroutine."""

    def __init__(self) -> None:
        self.now = 0.0
        self.delays: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.now += seconds


@pytest.mark.asyncio
async def test_returns_response_after_two_pending_polls(sleep_recorder) -> None:
    """TC-01: done:false twice then done:true returns R after exactly two delays."""
    result = {"engineInstance": {"Id": "x"}}
    transport = ScriptedTransport([
        {"path": OP, "done": False},
        {"path": OP, "done": False},
        {"path": OP, "done": True, "response": result},
    ])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    assert await poller.wait(OP, HEADERS) == result
    assert sleep_recorder.delays == [1.0, 1.0]
    assert len(transport.requests) == 3


@pytest.mark.asyncio
async def test_polls_operation_url_with_get_and_headers(sleep_recorder) -> None:
    """TC-02: The operation path is joined to the base URL and queried with GET."""
    transport = ScriptedTransport([{"done": True, "response": 1}])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    await poller.wait("/" + OP, HEADERS)

    request = transport.requests[0]
    assert request["url"] == BASE + OP
    assert request["method"] == "GET"
    assert request["headers"] == HEADERS


@pytest.mark.asyncio
async def test_immediately_done_operation_never_sleeps(sleep_recorder) -> None:
    transport = ScriptedTransport([{"done": True}])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    assert await poller.wait(OP, HEADERS) is None
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_custom_interval_is_used(sleep_recorder) -> None:
    transport = ScriptedTransport([{"done": False}, {"done": True, "response": "ok"}])
    poller = OperationPoller(transport, BASE, interval=0.25, sleep=sleep_recorder)

    assert await poller.wait(OP, HEADERS) == "ok"
    assert sleep_recorder.delays == [0.25]


@pytest.mark.asyncio
async def test_max_attempts_bounds_the_wait(sleep_recorder) -> None:
    """TC-03: A bounded poller gives up with OperationTimeoutError."""
    transport = ScriptedTransport([{"done": False}] * 5)
    poller = OperationPoller(transport, BASE, max_attempts=3, sleep=sleep_recorder)

    with pytest.raises(OperationTimeoutError) as exc_info:
        await poller.wait(OP, HEADERS)

    assert exc_info.value.attempts == 3
    assert exc_info.value.operation_path == OP
    assert len(transport.requests) == 3
    assert sleep_recorder.delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_timeout_uses_injected_clock() -> None:
    """TC-04: The timeout is measured on the injected clock, not wall time."""
    clock = FakeClock()
    transport = ScriptedTransport([{"done": False}] * 10)
    poller = OperationPoller(
        transport, BASE, interval=1.0, timeout=2.5, sleep=clock.sleep, clock=clock
    )

    with pytest.raises(OperationTimeoutError):
        await poller.wait(OP, HEADERS)

    # Polls at t=0, 1, 2; a fourth poll would start past 2.5s
    assert len(transport.requests) == 3
    assert clock.delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_transport_failure_aborts_wait(sleep_recorder) -> None:
    """TC-05: Transport errors propagate immediately without retry."""
    transport = ScriptedTransport([{"done": False}, NetworkError("reset"), {"done": True}])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    with pytest.raises(NetworkError):
        await poller.wait(OP, HEADERS)

    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_operation_error_is_raised(sleep_recorder) -> None:
    transport = ScriptedTransport([
        {"done": True, "error": {"code": 9, "message": "FAILED_PRECONDITION"}},
    ])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    with pytest.raises(OperationFailedError) as exc_info:
        await poller.wait(OP, HEADERS)

    assert exc_info.value.code == 9
    assert "FAILED_PRECONDITION" in exc_info.value.message


@pytest.mark.asyncio
async def test_non_object_payload_is_a_parse_error(sleep_recorder) -> None:
    transport = ScriptedTransport([["not", "an", "operation"]])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    with pytest.raises(ParseError):
        await poller.wait(OP, HEADERS)


@pytest.mark.asyncio
async def test_every_poll_payload_is_logged_at_debug(sleep_recorder, caplog: pytest.LogCaptureFixture) -> None:
    """TC-06: One DEBUG record per poll, the final done:true poll included."""
    transport = ScriptedTransport([
        {"path": OP, "done": False},
        {"path": OP, "done": True, "response": {"ok": 1}},
    ])
    poller = OperationPoller(transport, BASE, sleep=sleep_recorder)

    with caplog.at_level(logging.DEBUG, logger="rblxsync.core.services.operations"):
        await poller.wait(OP, HEADERS)

    polls = [r.getMessage() for r in caplog.records if " poll #" in r.getMessage()]
    assert len(polls) == 2
    assert all(r.levelno == logging.DEBUG for r in caplog.records if " poll #" in r.getMessage())
    assert polls[0].startswith(f"Operation {OP} poll #1:")
    assert polls[1].startswith(f"Operation {OP} poll #2:")
    assert "'done': True" in polls[1]
