from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the Open Cloud HTTP transport and its helpers.
"""

from rblxsync.infra.network.common import USER_AGENT, join_url
from rblxsync.infra.network.transport import Transport

__all__ = [
    "Transport",
    "USER_AGENT",
    "join_url",
]
