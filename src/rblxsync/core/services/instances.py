from __future__ import annotations

"""
Engine Instance Endpoints.

Thin client over the place-scoped instance endpoints. Every call starts a
deferred operation and awaits its result through the OperationPoller, so
callers only ever see final payloads.
"""

import logging
from typing import Any, Dict, List, Optional

from rblxsync.core.services.operations import OperationPoller
from rblxsync.domain.constants import OPEN_CLOUD_BASE_URL
from rblxsync.domain.errors import ParseError
from rblxsync.domain.instance import EngineInstance, PlaceTarget
from rblxsync.infra.network.common import join_url

logger = logging.getLogger(__name__)


class InstanceApi:
    """
    Deferred-call helper for universes/{u}/places/{p}/instances/*.

    Args:
        transport: Object exposing an async send(url, method, headers, body).
        poller: Poller used to await every operation.
        base_url: Open Cloud v2 base URL.
    """

    def __init__(
            self,
            transport: Any,
            poller: OperationPoller,
            base_url: str = OPEN_CLOUD_BASE_URL,
    ) -> None:
        self._transport = transport
        self._poller = poller
        self._base_url = base_url

    def instance_url(self, place: PlaceTarget, instance_id: str, action: str = "") -> str:
        """Absolute URL of an instance, optionally suffixed with a ':action'."""
        suffix = f":{action}" if action else ""
        return join_url(self._base_url, f"{place.instances_prefix()}{instance_id}{suffix}")

    async def get_instance(
            self,
            instance_id: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> EngineInstance:
        result = await self._call(self.instance_url(place, instance_id), "GET", headers)
        return _unwrap_instance(result, required=True)

    async def list_children(
            self,
            instance_id: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> List[EngineInstance]:
        """
        List the direct children of an instance in server order.

        Returns:
            List[EngineInstance]: Child engine instances (empty when the
                                  operation result carries no 'instances').
        """
        url = self.instance_url(place, instance_id, "listchildren")
        result = await self._call(url, "GET", headers)
        if result is None:
            return []
        if not isinstance(result, dict):
            raise ParseError(f"Unexpected listChildren result: {result!r}")

        entries = result.get("instances") or []
        if not isinstance(entries, list):
            raise ParseError(f"Unexpected 'instances' value: {entries!r}")
        return [_unwrap_instance(entry, required=True) for entry in entries]

    async def patch_instance(
            self,
            instance_id: str,
            instance: EngineInstance,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> Any:
        """
        Replace an instance with the full document given.

        Returns:
            Any: The updated instance when the operation returns one,
                 otherwise the raw operation result.
        """
        url = self.instance_url(place, instance_id)
        result = await self._call(url, "PATCH", headers, {"engineInstance": instance})
        unwrapped = _unwrap_instance(result, required=False)
        return unwrapped if unwrapped is not None else result

    async def _call(
            self,
            url: str,
            method: str,
            headers: Dict[str, str],
            body: Optional[Any] = None,
    ) -> Any:
        handle = await self._transport.send(url, method, headers, body)
        if not isinstance(handle, dict) or not handle.get("path"):
            raise ParseError(f"Expected an operation handle from {method} {url}, got {handle!r}")
        logger.debug(f"{method} {url} started operation {handle['path']}")
        return await self._poller.wait(handle["path"], headers)


def _unwrap_instance(payload: Any, *, required: bool) -> Optional[EngineInstance]:
    if isinstance(payload, dict) and isinstance(payload.get("engineInstance"), dict):
        return payload["engineInstance"]
    if required:
        raise ParseError(f"Payload without 'engineInstance': {payload!r}")
    return None
