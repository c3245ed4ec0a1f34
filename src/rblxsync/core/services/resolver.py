from __future__ import annotations

"""
Instance Path Resolution Service.

Walks a slash-separated path from the DataModel root, listing the children of
the current node at each step and following the first child whose Name
matches the next segment. Steps are strictly sequential since every listing
depends on the previous match.
"""

import logging
from typing import Dict

from rblxsync.core.services.instances import InstanceApi
from rblxsync.domain.constants import ROOT_INSTANCE_ID
from rblxsync.domain.errors import NodeNotFoundError
from rblxsync.domain.instance import PlaceTarget, instance_id, instance_name, split_path

logger = logging.getLogger(__name__)


class TreeResolver:
    """Resolves human-readable instance paths into instance identifiers."""

    def __init__(self, api: InstanceApi) -> None:
        self._api = api

    async def resolve(self, path: str, place: PlaceTarget, headers: Dict[str, str]) -> str:
        """
        Resolve a path such as 'ReplicatedStorage/MyScript' to an instance Id.

        The empty path resolves to the root without any request. Empty
        segments are matched literally against child names.

        Args:
            path: Slash-separated path from the root.
            place: Universe/place scoping the lookup.
            headers: Request headers (credential included).

        Returns:
            str: Identifier of the target instance.

        Raises:
            NodeNotFoundError: When a segment has no matching child.
        """
        current = ROOT_INSTANCE_ID

        for depth, segment in enumerate(split_path(path)):
            children = await self._api.list_children(current, place, headers)
            logger.debug(
                f"Resolve step {depth}: {len(children)} child(ren) under '{current}', "
                f"looking for '{segment}'"
            )

            match = next((c for c in children if instance_name(c) == segment), None)
            if match is None:
                raise NodeNotFoundError(segment)
            current = instance_id(match)

        logger.info(f"Resolved '{path}' to instance {current}")
        return current
