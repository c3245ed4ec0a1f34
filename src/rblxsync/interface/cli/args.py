from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema (pull, push, configure and
show-config sub-commands plus the shared target/polling options) and
translates raw argparse namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict

from rblxsync.domain.constants import API_KEY_ENV_VAR

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the rblxsync CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    common = argparse.ArgumentParser(add_help=False)

    # --- Script Target ---
    target = common.add_argument_group("target")
    target.add_argument(
        "--api-key",
        dest="api_key",
        default=None,
        help=f"Open Cloud API key (or set {API_KEY_ENV_VAR}).",
    )
    target.add_argument(
        "--path",
        dest="path",
        default=None,
        help="Path to the script from the root, e.g. ReplicatedStorage/MyScript.",
    )
    target.add_argument("--universe-id", dest="universe_id", default=None, help="Universe Id.")
    target.add_argument("--place-id", dest="place_id", default=None, help="Place Id.")
    target.add_argument(
        "--type",
        dest="type_key",
        default=None,
        help="Details entry holding the source (Script, LocalScript, ModuleScript).",
    )

    # --- Endpoint and Polling ---
    remote = common.add_argument_group("remote")
    remote.add_argument("--base-url", dest="base_url", default=None, help="Open Cloud v2 base URL.")
    remote.add_argument(
        "--poll-interval",
        dest="poll_interval",
        type=float,
        default=None,
        help="Seconds between operation polls (default 1).",
    )
    remote.add_argument(
        "--poll-timeout",
        dest="poll_timeout",
        type=float,
        default=None,
        help="Give up waiting on an operation after this many seconds.",
    )
    remote.add_argument(
        "--max-polls",
        dest="poll_max_attempts",
        type=int,
        default=None,
        help="Give up waiting on an operation after this many polls.",
    )

    # --- Configuration and Diagnostic Tools ---
    diag = common.add_argument_group("diagnostics")
    diag.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    diag.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    diag.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location when no path given).",
    )
    diag.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit results and errors as JSON.",
    )

    p = argparse.ArgumentParser(
        prog="rblxsync",
        description="Pull and push script sources through the Roblox Open Cloud API.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    pull = sub.add_parser("pull", parents=[common], help="Read a script source.")
    pull.add_argument(
        "-o", "--output",
        dest="output",
        default=None,
        help="Write the source to this file instead of stdout.",
    )

    push = sub.add_parser("push", parents=[common], help="Replace a script source.")
    push.add_argument(
        "-f", "--file",
        dest="file",
        default=None,
        help="Read the new source from this file ('-' or omitted reads stdin).",
    )

    sub.add_parser("configure", parents=[common], help="Save the given options as defaults.")
    sub.add_parser("show-config", parents=[common], help="Print the effective configuration.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

_OVERRIDE_KEYS = (
    "api_key", "path", "universe_id", "place_id", "type_key",
    "base_url", "poll_interval", "poll_timeout", "poll_max_attempts",
)


def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options given on the command line are returned.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}
    for key in _OVERRIDE_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    return overrides
