from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory fake of the Open Cloud instance API that answers every call
   with a deferred operation, mirroring the real service.
3. Shared fixtures for targets, configuration and a recording sleep.
"""

import copy
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from rblxsync.domain.constants import OPEN_CLOUD_BASE_URL  # noqa: E402
from rblxsync.domain.errors import HttpStatusError  # noqa: E402
from rblxsync.domain.instance import ScriptTarget  # noqa: E402
from rblxsync.infra.logging import shutdown_logging  # noqa: E402

UNIVERSE_ID = "111"
PLACE_ID = "222"
API_KEY = "test-api-key"


# -----------------------------------------------------------------------------
# Fake Open Cloud
# -----------------------------------------------------------------------------
class FakeOpenCloud:
    """
    In-memory instance tree speaking the deferred-operation protocol.

    Every instance call returns {"path": <operation>}; each operation reports
    done:false 'pending_polls' times before returning its response.
    """

    def __init__(self, base_url: str = OPEN_CLOUD_BASE_URL, pending_polls: int = 0) -> None:
        self.base_url = base_url
        self.pending_polls = pending_polls
        self.instances: Dict[str, Dict[str, Any]] = {}
        self.children: Dict[str, List[str]] = {"root": []}
        self.calls: List[Tuple[str, str, Optional[Any]]] = []
        self.headers_seen: List[Dict[str, str]] = []
        self._operations: Dict[str, Dict[str, Any]] = {}

    # --- Tree construction ---
    def add(self, parent_id: str, instance_id: str, name: str, **fields: Any) -> Dict[str, Any]:
        instance = {"Id": instance_id, "Name": name, **fields}
        self.instances[instance_id] = instance
        self.children.setdefault(parent_id, []).append(instance_id)
        self.children.setdefault(instance_id, [])
        return instance

    # --- Inspection helpers ---
    def listing_calls(self) -> List[str]:
        return [url for method, url, _ in self.calls if url.endswith(":listchildren")]

    def mutations(self) -> List[Tuple[str, Any]]:
        return [(url, body) for method, url, body in self.calls if method == "PATCH"]

    # --- Transport interface ---
    async def send(
            self,
            url: str,
            method: str,
            headers: Dict[str, str],
            body: Optional[Any] = None,
    ) -> Any:
        self.calls.append((method, url, copy.deepcopy(body)))
        self.headers_seen.append(dict(headers))
        assert url.startswith(self.base_url), url
        relative = url[len(self.base_url):]

        if "/operations/" in relative:
            return self._poll(relative)

        prefix = f"universes/{UNIVERSE_ID}/places/{PLACE_ID}/instances/"
        if not relative.startswith(prefix):
            raise HttpStatusError(404, f"Unknown resource {relative}")
        ref = relative[len(prefix):]
        instance_id, _, action = ref.partition(":")

        if instance_id != "root" and instance_id not in self.instances:
            raise HttpStatusError(404, "Instance not found")

        if action == "listchildren":
            response = {"instances": [
                {"engineInstance": copy.deepcopy(self.instances[c])}
                for c in self.children.get(instance_id, [])
            ]}
        elif method == "PATCH":
            self.instances[instance_id] = copy.deepcopy(body["engineInstance"])
            response = copy.deepcopy(body["engineInstance"])
        else:
            response = {"engineInstance": copy.deepcopy(self.instances[instance_id])}

        op_path = f"{prefix}{instance_id}/operations/{len(self._operations) + 1}"
        self._operations[op_path] = {"remaining": self.pending_polls, "response": response}
        return {"path": op_path}

    def _poll(self, op_path: str) -> Dict[str, Any]:
        op = self._operations[op_path]
        if op["remaining"] > 0:
            op["remaining"] -= 1
            return {"path": op_path, "done": False}
        return {"path": op_path, "done": True, "response": op["response"]}


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_logging(capsys: pytest.CaptureFixture) -> Any:
    """
    Detach package log handlers between tests.

    Depends on capsys so the listener is stopped while the captured stderr
    it writes to is still open.
    """
    yield
    shutdown_logging()
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
def cloud() -> FakeOpenCloud:
    """
    Sample tree:

        root
        ├── Workspace (ws)
        └── ReplicatedStorage (rs)
            ├── MyScript (ms)       Details.Script.Source = "old"
            └── Shared (mod)        Details.ModuleScript.Source = "return {}"
    """
    fake = FakeOpenCloud()
    fake.add("root", "ws", "Workspace", Details={"Workspace": {}})
    fake.add("root", "rs", "ReplicatedStorage", Details={"ReplicatedStorage": {}})
    fake.add(
        "rs", "ms", "MyScript",
        Details={
            "Script": {"Source": "old", "RunContext": "Legacy", "Enabled": True},
            "Attributes": {"Owner": "build"},
        },
        HasChildren=False,
    )
    fake.add("rs", "mod", "Shared", Details={"ModuleScript": {"Source": "return {}"}})
    return fake


@pytest.fixture
def cloud_factory() -> Callable[..., FakeOpenCloud]:
    """Build empty fakes with custom polling behavior."""
    return FakeOpenCloud


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def script_target() -> ScriptTarget:
    return ScriptTarget(
        api_key=API_KEY,
        path="ReplicatedStorage/MyScript",
        universe_id=UNIVERSE_ID,
        place_id=PLACE_ID,
        type_key="Script",
    )


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'rblxsync.domain.config'.
    """
    return {
        "api_key": API_KEY,
        "path": "ReplicatedStorage/MyScript",
        "universe_id": UNIVERSE_ID,
        "place_id": PLACE_ID,
        "type_key": "Script",
        "base_url": OPEN_CLOUD_BASE_URL,
        "request_timeout": 30.0,
        "poll_interval": 1.0,
        "poll_max_attempts": None,
        "poll_timeout": None,
    }
