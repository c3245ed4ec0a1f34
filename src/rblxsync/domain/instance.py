from __future__ import annotations

"""
Engine Instance Domain Models.

Engine instances are handled as plain JSON mappings so that fields unknown to
this tool survive a read-modify-write untouched. This module provides the
typed targets that identify what to operate on, and the small accessors used
to read and replace the script source nested under 'Details'.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List

from rblxsync.domain.constants import API_KEY_HEADER, PATH_SEPARATOR
from rblxsync.domain.errors import FieldNotFoundError, ParseError

EngineInstance = Dict[str, Any]


# -----------------------------------------------------------------------------
# TARGET MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PlaceTarget:
    """
    Universe/place pair scoping every instance endpoint.

    Attributes:
        universe_id: Experience (universe) identifier.
        place_id: Place identifier inside the universe.
    """
    universe_id: str
    place_id: str

    def instances_prefix(self) -> str:
        """Relative URL prefix of the place's instance collection."""
        return f"universes/{self.universe_id}/places/{self.place_id}/instances/"


@dataclass(frozen=True)
class ScriptTarget:
    """
    Immutable description of a single read or update request.

    Captured once when an operation starts so later configuration changes
    cannot leak into an in-flight resolution.

    Attributes:
        api_key: Open Cloud credential sent as the x-api-key header.
        path: Slash-separated path from the DataModel root.
        universe_id: Experience (universe) identifier.
        place_id: Place identifier.
        type_key: Details entry holding the source (Script, ModuleScript...).
    """
    api_key: str
    path: str
    universe_id: str
    place_id: str
    type_key: str

    @property
    def place(self) -> PlaceTarget:
        return PlaceTarget(self.universe_id, self.place_id)

    def headers(self) -> Dict[str, str]:
        return build_headers(self.api_key)


def build_headers(api_key: str) -> Dict[str, str]:
    """Headers attached to every Open Cloud request."""
    return {
        API_KEY_HEADER: api_key,
        "Content-Type": "application/json",
    }


def split_path(path: str) -> List[str]:
    """
    Split a slash-separated instance path into its segments.

    Empty segments produced by leading, trailing or doubled separators are
    kept; the empty string is the zero-segment path.
    """
    if path == "":
        return []
    return path.split(PATH_SEPARATOR)


# -----------------------------------------------------------------------------
# INSTANCE ACCESSORS
# -----------------------------------------------------------------------------

def instance_id(instance: EngineInstance) -> str:
    try:
        return str(instance["Id"])
    except (KeyError, TypeError) as e:
        raise ParseError(f"Engine instance without 'Id': {instance!r}") from e


def instance_name(instance: EngineInstance) -> Any:
    if not isinstance(instance, dict):
        return None
    return instance.get("Name")


def get_source(instance: EngineInstance, type_key: str) -> str:
    """
    Read Details[type_key].Source from an engine instance.

    Raises:
        FieldNotFoundError: If the Details entry or its Source is absent.
        ParseError: If the Source is not a string.
    """
    entry = _details_entry(instance, type_key)
    if "Source" not in entry:
        raise FieldNotFoundError(type_key)
    source = entry["Source"]
    if not isinstance(source, str):
        raise ParseError(f"{type_key}.Source is not a string: {source!r}")
    return source


def with_source(instance: EngineInstance, type_key: str, source: str) -> EngineInstance:
    """
    Return a deep copy of the instance with only Details[type_key].Source replaced.

    Every other field, including sibling Details entries, is carried over
    unchanged. The entry must already exist; it is never created.

    Raises:
        FieldNotFoundError: If the Details entry is absent.
    """
    updated = copy.deepcopy(instance)
    _details_entry(updated, type_key)["Source"] = source
    return updated


def _details_entry(instance: EngineInstance, type_key: str) -> Dict[str, Any]:
    details = instance.get("Details") if isinstance(instance, dict) else None
    if not isinstance(details, dict):
        raise FieldNotFoundError(type_key)
    entry = details.get(type_key)
    if not isinstance(entry, dict):
        raise FieldNotFoundError(type_key)
    return entry
