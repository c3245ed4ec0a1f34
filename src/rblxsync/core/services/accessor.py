from __future__ import annotations

"""
Engine Instance Accessors.

Defines the read/update contract used by the script orchestrator and its
current implementation, a plain read-modify-write: the full instance is
fetched, only Details[type].Source is replaced, and the whole document is
sent back. No version token is exchanged, so the last writer wins.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from rblxsync.core.services.instances import InstanceApi
from rblxsync.domain.instance import EngineInstance, PlaceTarget, with_source

logger = logging.getLogger(__name__)


class InstanceAccessor(ABC):
    """
    Abstract read/update access to a single engine instance.
    """

    @abstractmethod
    async def get(
            self,
            instance_id: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> EngineInstance:
        """
        Fetch the full representation of an instance.

        Args:
            instance_id: Resolved instance identifier.
            place: Universe/place scoping the instance.
            headers: Request headers (credential included).

        Returns:
            EngineInstance: The instance document.
        """
        pass

    @abstractmethod
    async def update(
            self,
            instance_id: str,
            source: str,
            type_key: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> Any:
        """
        Replace Details[type_key].Source of an instance.

        Args:
            instance_id: Resolved instance identifier.
            source: New script source.
            type_key: Details entry to modify (must already exist).
            place: Universe/place scoping the instance.
            headers: Request headers (credential included).

        Returns:
            Any: The updated instance as reported by the server.
        """
        pass


class RemoteInstanceAccessor(InstanceAccessor):
    """Last-writer-wins accessor backed by the Open Cloud instance endpoints."""

    def __init__(self, api: InstanceApi) -> None:
        self._api = api

    async def get(
            self,
            instance_id: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> EngineInstance:
        return await self._api.get_instance(instance_id, place, headers)

    async def update(
            self,
            instance_id: str,
            source: str,
            type_key: str,
            place: PlaceTarget,
            headers: Dict[str, str],
    ) -> Any:
        current = await self.get(instance_id, place, headers)

        # Raises FieldNotFoundError before anything is sent
        updated = with_source(current, type_key, source)

        logger.info(f"Updating {type_key} source of instance {instance_id} ({len(source)} chars)")
        return await self._api.patch_instance(instance_id, updated, place, headers)
