from __future__ import annotations

"""
Open Cloud HTTP Transport.

Issues JSON requests through a shared requests.Session and classifies every
failure into the domain taxonomy (NetworkError, HttpStatusError, ParseError).
The blocking session call runs in a worker thread so that callers awaiting
long-running operations never stall the event loop.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import requests

from rblxsync.domain.errors import HttpStatusError, NetworkError, ParseError
from rblxsync.infra.network.common import (
    BODY_METHODS,
    DEFAULT_TIMEOUT,
    SUPPORTED_METHODS,
    USER_AGENT,
    is_success,
)

logger = logging.getLogger(__name__)


class Transport:
    """
    Minimal 'send request, get JSON' primitive over HTTP.

    Args:
        session: Optional pre-configured session (injected in tests).
        timeout: Per-request connect/read timeout in seconds.
    """

    def __init__(
            self,
            session: Optional[requests.Session] = None,
            timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT
        self._timeout = timeout

    async def send(
            self,
            url: str,
            method: str,
            headers: Dict[str, str],
            body: Optional[Any] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON payload.

        Args:
            url: Absolute request URL.
            method: GET or PATCH.
            headers: Request headers (credential included).
            body: JSON-serializable payload, only sent for PATCH.

        Returns:
            Any: Parsed JSON body of a 2xx response.

        Raises:
            NetworkError: Connection failure, interruption or timeout.
            HttpStatusError: Non-2xx status.
            ParseError: 2xx response whose body is not JSON.
        """
        verb = method.upper()
        if verb not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        data: Optional[str] = None
        if verb in BODY_METHODS:
            data = json.dumps(body if body is not None else {})

        return await asyncio.to_thread(self._send_blocking, url, verb, headers, data)

    def close(self) -> None:
        self._session.close()

    def _send_blocking(
            self,
            url: str,
            method: str,
            headers: Dict[str, str],
            data: Optional[str],
    ) -> Any:
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network: {method} {url} failed: {e}")
            raise NetworkError(f"Request error: {e}") from e

        logger.debug(f"Network: {method} {url} -> {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            if not is_success(response.status_code):
                raise HttpStatusError(response.status_code, response.text) from e
            raise ParseError(f"Error parsing JSON response: {e}") from e

        if not is_success(response.status_code):
            message = response.text
            if isinstance(payload, dict) and payload.get("message"):
                message = str(payload["message"])
            raise HttpStatusError(response.status_code, message)

        return payload
