from __future__ import annotations

"""
rblxsync: pull and push Roblox script sources through Open Cloud.
"""

from rblxsync.core.services.scripts import ScriptSyncService, read_script, update_script
from rblxsync.domain.errors import describe_error

__version__ = "1.0.0"

__all__ = [
    "ScriptSyncService",
    "read_script",
    "update_script",
    "describe_error",
    "__version__",
]
