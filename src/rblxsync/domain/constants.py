from __future__ import annotations

"""
Open Cloud Domain Constants.
"""

APP_NAME = "RblxSync"

OPEN_CLOUD_BASE_URL = "https://apis.roblox.com/cloud/v2/"

# Well-known identifier of the DataModel root
ROOT_INSTANCE_ID = "root"

PATH_SEPARATOR = "/"

DEFAULT_TYPE_KEY = "Script"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_REQUEST_TIMEOUT = 30.0

API_KEY_HEADER = "x-api-key"
API_KEY_ENV_VAR = "RBLXSYNC_API_KEY"
