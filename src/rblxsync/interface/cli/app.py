from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: initialization of logging, loading and merging
of configuration sources (defaults, persistent storage, environment and CLI
overrides), execution of the pull/push use cases and result rendering. This is
the single place where domain failures become user-visible messages and exit
codes.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from rblxsync.core.services.scripts import ScriptSyncService
from rblxsync.core.validator import build_target, validate_config
from rblxsync.domain.config import get_default_config, load_config, mask_secret, update_config
from rblxsync.domain.errors import ConfigurationError, RblxSyncError, describe_error
from rblxsync.domain.instance import ScriptTarget
from rblxsync.infra.fs import read_text_file, write_text_file
from rblxsync.infra.logging import LoggingConfig, configure_logging, get_default_log_path
from rblxsync.interface.cli import args as cli_args

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMOTE_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, *, transport: Optional[Any] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.
        transport: Optional transport replacement used by the sync service.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_file = None
    if args.log_file is not None:
        log_file = args.log_file or get_default_log_path()
    configure_logging(LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=log_file,
    ))

    # 3. Configuration hierarchy: defaults < saved file/env < CLI flags
    overrides = cli_args.args_to_overrides(args)

    if args.command == "configure":
        return _configure(overrides, args.json_output)

    base_conf = get_default_config() if args.use_defaults else load_config()
    base_conf.update(overrides)
    config, warnings = validate_config(base_conf)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.command == "show-config":
        shown = dict(config)
        shown["api_key"] = mask_secret(shown.get("api_key", ""))
        print(json.dumps(shown, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Use case execution phase
    try:
        target = build_target(config)
        service = ScriptSyncService.from_config(config, transport=transport)
        try:
            if args.command == "pull":
                return _pull(service, target, args.output, args.json_output)
            return _push(service, target, args.file, args.json_output)
        finally:
            service.close()

    except ConfigurationError as e:
        _report_error(e, args.json_output)
        return EXIT_CONFIG_ERROR
    except (OSError, UnicodeDecodeError) as e:
        _report_error(e, args.json_output)
        return EXIT_CONFIG_ERROR
    except RblxSyncError as e:
        _report_error(e, args.json_output)
        return EXIT_REMOTE_FAILURE
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

# -----------------------------------------------------------------------------
# SUB-COMMANDS
# -----------------------------------------------------------------------------

def _pull(
        service: ScriptSyncService,
        target: ScriptTarget,
        output: Optional[str],
        json_output: bool,
) -> int:
    source = asyncio.run(service.read_script(target))

    written = write_text_file(output, source) if output else None

    if json_output:
        payload: Dict[str, Any] = {"ok": True, "path": target.path, "type": target.type_key}
        if written:
            payload["output"] = written
        else:
            payload["source"] = source
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    elif written:
        print(f"Synced '{target.path}' into {written}")
    else:
        sys.stdout.write(source)

    return EXIT_OK


def _push(
        service: ScriptSyncService,
        target: ScriptTarget,
        file: Optional[str],
        json_output: bool,
) -> int:
    if file and file != "-":
        source = read_text_file(file)
    else:
        source = sys.stdin.read()

    asyncio.run(service.update_script(target, source))

    if json_output:
        print(json.dumps({"ok": True, "path": target.path, "type": target.type_key}, indent=2))
    else:
        print(f"Script '{target.path}' updated successfully!")
    return EXIT_OK


def _configure(overrides: Dict[str, Any], json_output: bool) -> int:
    if not overrides:
        print("Nothing to save: pass at least one option (e.g. --path).", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # Rejected values are never persisted
    try:
        clean, warnings = validate_config(overrides, strict=True)
    except (TypeError, ValueError) as e:
        _report_error(e, json_output)
        return EXIT_CONFIG_ERROR
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    to_save = {key: clean[key] for key in overrides}

    try:
        saved = update_config(to_save)
    except OSError as e:
        _report_error(e, json_output)
        return EXIT_CONFIG_ERROR

    if json_output:
        shown = dict(saved)
        shown["api_key"] = mask_secret(shown.get("api_key", ""))
        print(json.dumps(shown, ensure_ascii=False, indent=2))
    else:
        print(f"Saved: {', '.join(sorted(overrides))}")
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _report_error(exc: BaseException, json_output: bool) -> None:
    """Print a failure including its kind and discriminating detail."""
    details = describe_error(exc)
    logger.debug(f"Command failed: {details}")
    if json_output:
        print(json.dumps({"ok": False, "error": details}, ensure_ascii=False, indent=2))
    else:
        print(f"ERROR [{details['kind']}]: {details['message']}", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
