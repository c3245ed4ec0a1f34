from __future__ import annotations

"""
Script Synchronization Service.

Composes path resolution and instance access into the two operations exposed
to the surrounding tool: reading a script's source and replacing it. Failures
propagate unchanged; interface layers turn them into messages.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

from rblxsync.core.services.accessor import InstanceAccessor, RemoteInstanceAccessor
from rblxsync.core.services.instances import InstanceApi
from rblxsync.core.services.operations import ClockFn, OperationPoller, SleepFn
from rblxsync.core.services.resolver import TreeResolver
from rblxsync.domain.config import get_default_config
from rblxsync.domain.instance import ScriptTarget, get_source
from rblxsync.infra.network.transport import Transport

logger = logging.getLogger(__name__)


class ScriptSyncService:
    """
    Read/update use cases for script sources addressed by path.

    Args:
        resolver: Path-to-identifier resolver.
        accessor: Instance read/update implementation.
        transport: Transport owned by this service, closed by close().
    """

    def __init__(
            self,
            resolver: TreeResolver,
            accessor: InstanceAccessor,
            transport: Optional[Transport] = None,
    ) -> None:
        self._resolver = resolver
        self._accessor = accessor
        self._owned_transport = transport

    @classmethod
    def from_config(
            cls,
            config: Optional[Dict[str, Any]] = None,
            *,
            transport: Optional[Any] = None,
            sleep: SleepFn = asyncio.sleep,
            clock: ClockFn = time.monotonic,
    ) -> "ScriptSyncService":
        """
        Wire the default object graph from a validated configuration.

        Args:
            config: Endpoint and polling settings (defaults when omitted).
            transport: Optional transport replacement (tests, custom clients).
            sleep: Poll delay coroutine function.
            clock: Monotonic clock for the poll timeout.
        """
        cfg = get_default_config()
        cfg.update(config or {})

        owned: Optional[Transport] = None
        if transport is None:
            owned = Transport(timeout=cfg["request_timeout"])
            transport = owned

        poller = OperationPoller(
            transport,
            cfg["base_url"],
            interval=cfg["poll_interval"],
            max_attempts=cfg["poll_max_attempts"],
            timeout=cfg["poll_timeout"],
            sleep=sleep,
            clock=clock,
        )
        api = InstanceApi(transport, poller, cfg["base_url"])
        return cls(TreeResolver(api), RemoteInstanceAccessor(api), owned)

    async def read_script(self, target: ScriptTarget) -> str:
        """
        Return Details[type_key].Source of the instance at target.path.

        Raises:
            NodeNotFoundError, FieldNotFoundError, or any transport/poller error.
        """
        headers = target.headers()
        place = target.place

        instance_id = await self._resolver.resolve(target.path, place, headers)
        instance = await self._accessor.get(instance_id, place, headers)
        source = get_source(instance, target.type_key)

        logger.info(f"Read {target.type_key} source of '{target.path}' ({len(source)} chars)")
        return source

    async def update_script(self, target: ScriptTarget, source: str) -> None:
        """
        Replace Details[type_key].Source of the instance at target.path.

        Resolution and missing-field failures occur before any mutation. A
        failure while the PATCH or its operation is in flight leaves the
        remote state undefined and is not retried.
        """
        logger.info(f"Attempting to update script '{target.path}'")
        headers = target.headers()
        place = target.place

        instance_id = await self._resolver.resolve(target.path, place, headers)
        await self._accessor.update(instance_id, source, target.type_key, place, headers)
        logger.info(f"Done updating script '{target.path}'")

    def close(self) -> None:
        if self._owned_transport is not None:
            self._owned_transport.close()


# -----------------------------------------------------------------------------
# COLLABORATOR ENTRY POINTS
# -----------------------------------------------------------------------------

async def read_script(
        credential: str,
        path: str,
        universe_id: str,
        place_id: str,
        type_key: str,
        *,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[Any] = None,
) -> str:
    """Resolve the path and return the script source."""
    target = ScriptTarget(credential, path, universe_id, place_id, type_key)
    service = ScriptSyncService.from_config(config, transport=transport)
    try:
        return await service.read_script(target)
    finally:
        service.close()


async def update_script(
        credential: str,
        path: str,
        universe_id: str,
        place_id: str,
        type_key: str,
        source: str,
        *,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[Any] = None,
) -> None:
    """Resolve the path and replace the script source."""
    target = ScriptTarget(credential, path, universe_id, place_id, type_key)
    service = ScriptSyncService.from_config(config, transport=transport)
    try:
        await service.update_script(target, source)
    finally:
        service.close()
