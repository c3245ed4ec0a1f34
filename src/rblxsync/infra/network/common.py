from __future__ import annotations

USER_AGENT = "RblxSync-Client/1.0.0"
DEFAULT_TIMEOUT = 30

SUPPORTED_METHODS = frozenset({"GET", "PATCH"})
BODY_METHODS = frozenset({"PATCH"})


def is_success(status_code: int) -> bool:
    """True for statuses in [200, 300)."""
    return 200 <= status_code < 300


def join_url(base_url: str, relative: str) -> str:
    """Append a server-relative path to the API base, tolerating a leading slash."""
    return base_url.rstrip("/") + "/" + relative.lstrip("/")
