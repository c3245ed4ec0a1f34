from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the OS-specific application data directory and the text I/O used by
the CLI to load local script files and persist pulled sources. Acts as an
abstraction over the 'os' module to ensure uniform behavior across Windows
and Unix-like systems.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "RblxSync"
UNIX_APP_DIR_NAME = ".rblxsync"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/RblxSync
    - Linux/Mac: ~/.rblxsync

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str]) -> str:
    """
    Normalize a file path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/).
    """
    p = (path or "").strip()
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))

# -----------------------------------------------------------------------------
# TEXT I/O API
# -----------------------------------------------------------------------------

def read_text_file(path: str) -> str:
    """
    Load a local script file as UTF-8 text.

    Newlines are preserved exactly so the remote Source matches the file.
    """
    with open(normalize_path(path), "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_file(path: str, content: str) -> str:
    """
    Persist text to disk, creating parent directories when needed.

    Returns:
        str: Absolute path of the written file.
    """
    target = normalize_path(path)
    parent = os.path.dirname(target)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(target, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return target
