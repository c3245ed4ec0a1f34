from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Sub-command routing.
2. Mapping of target and polling options to configuration overrides.
3. Omitted options never override saved configuration.
"""

import pytest

from rblxsync.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_target_options_mapping():
    args = parse_args([
        "pull",
        "--api-key", "k",
        "--path", "ReplicatedStorage/MyScript",
        "--universe-id", "1",
        "--place-id", "2",
        "--type", "ModuleScript",
    ])

    assert args.command == "pull"
    assert args_to_overrides(args) == {
        "api_key": "k",
        "path": "ReplicatedStorage/MyScript",
        "universe_id": "1",
        "place_id": "2",
        "type_key": "ModuleScript",
    }


def test_polling_options_are_typed():
    args = parse_args(["push", "--poll-interval", "0.5", "--poll-timeout", "30", "--max-polls", "10"])
    overrides = args_to_overrides(args)

    assert overrides["poll_interval"] == 0.5
    assert overrides["poll_timeout"] == 30.0
    assert overrides["poll_max_attempts"] == 10


def test_omitted_options_produce_no_overrides():
    args = parse_args(["show-config"])
    assert args_to_overrides(args) == {}


def test_empty_path_is_an_override():
    args = parse_args(["configure", "--path", ""])
    assert args_to_overrides(args) == {"path": ""}


def test_pull_and_push_specific_options():
    pull = parse_args(["pull", "-o", "out.lua", "--json"])
    push = parse_args(["push", "-f", "in.lua", "--debug"])

    assert pull.output == "out.lua"
    assert pull.json_output is True
    assert push.file == "in.lua"
    assert push.debug is True


def test_log_file_flag_without_value():
    assert parse_args(["pull", "--log-file"]).log_file == ""
    assert parse_args(["pull", "--log-file", "x.log"]).log_file == "x.log"
    assert parse_args(["pull"]).log_file is None


def test_command_is_required():
    with pytest.raises(SystemExit):
        parse_args([])
