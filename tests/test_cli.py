"""Tests for the termfilter command line."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")

from click.testing import CliRunner
from rich.logging import RichHandler

from termfilter import __version__
from termfilter.cli.logging import configure_logging, restore_logging
from termfilter.cli.main import cli

POSTS = "\n".join(
    [
        json.dumps({"id": 1, "author": "ann", "text": "I love blue skies"}),
        json.dumps({"id": 2, "author": "bob", "text": "green and red mix"}),
        "yellow sun, purple flower",
        "bluebird singing",
    ]
)


def _json(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


def test_no_command_shows_help() -> None:
    """Test that running without a command prints help."""
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "match" in result.output
    assert "parse" in result.output


def test_parse_json_output() -> None:
    """Test the JSON envelope of the parse command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "parse", "blue or green and not red"])
    assert result.exit_code == 0
    payload = _json(result.output)
    assert payload["ok"] is True
    assert payload["command"] == "parse"
    assert payload["data"] == {
        "filter": "(blue or (green and (not red)))",
        "terms": ["blue", "green", "red"],
    }
    assert payload["meta"]["match"] == "substring"


def test_parse_joins_unquoted_arguments() -> None:
    """Test that separate arguments form one expression."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "parse", "a", "and", "b"])
    assert result.exit_code == 0
    assert _json(result.output)["data"]["filter"] == "(a and b)"


def test_parse_table_output() -> None:
    """Test the human output of the parse command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "a and (b or a)"])
    assert result.exit_code == 0
    assert "(a and (b or a))" in result.output
    assert "a, b, a" in result.output


def test_parse_syntax_error_json() -> None:
    """Test that a syntax error exits 2 with a usage_error envelope."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "parse", "(a or b"])
    assert result.exit_code == 2
    payload = _json(result.output)
    assert payload["ok"] is False
    assert payload["error"]["type"] == "usage_error"
    assert payload["error"]["message"] == "Expected ')' at position 7"
    assert payload["error"]["details"] == {"position": 7}


def test_parse_syntax_error_table() -> None:
    """Test that a syntax error is printed to stderr in table mode."""
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "a b"])
    assert result.exit_code == 2
    assert "Syntax error: Extra stuff at end of input" in result.output


def test_match_from_stdin() -> None:
    """Test filtering posts read from stdin."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "blue or green and not red"], input=POSTS)
    assert result.exit_code == 0
    data = _json(result.output)["data"]
    assert data["count"] == 2
    assert [p["text"] for p in data["posts"]] == ["I love blue skies", "bluebird singing"]
    assert data["posts"][0] == {"id": 1, "author": "ann", "text": "I love blue skies"}


def test_match_word_policy_from_env() -> None:
    """Test that TERMFILTER_MATCH selects the match policy."""
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--json", "match", "blue"],
        input=POSTS,
        env={"TERMFILTER_MATCH": "word"},
    )
    assert result.exit_code == 0
    payload = _json(result.output)
    assert payload["meta"]["match"] == "word"
    assert [p["text"] for p in payload["data"]["posts"]] == ["I love blue skies"]


def test_match_count_only(tmp_path: Path) -> None:
    """Test --count with posts read from a file."""
    path = tmp_path / "posts.jsonl"
    path.write_text(POSTS, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["match", "not red", "--count", "--file", str(path)])
    assert result.exit_code == 0
    assert result.output.strip() == "3"


def test_match_table_output() -> None:
    """Test the human output of the match command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["match", "sun"], input=POSTS)
    assert result.exit_code == 0
    assert "purple flower" in result.output
    assert "1 matching post(s)" in result.output


def test_match_empty_input_warns() -> None:
    """Test that empty input prints a warning."""
    runner = CliRunner()
    result = runner.invoke(cli, ["match", "sun"], input="")
    assert result.exit_code == 0
    assert "No posts read from input." in result.output


def test_quiet_hides_warnings() -> None:
    """Test that -q suppresses warnings but not results."""
    runner = CliRunner()
    result = runner.invoke(cli, ["-q", "match", "sun"], input="")
    assert result.exit_code == 0
    assert "No posts read from input." not in result.output
    assert "0 matching post(s)" in result.output


def test_match_invalid_line() -> None:
    """Test that a broken input line exits 2."""
    runner = CliRunner()
    result = runner.invoke(cli, ["match", "sun"], input="ok\n{broken")
    assert result.exit_code == 2
    assert "Invalid input: Line 2: invalid JSON" in result.output


def test_match_bad_filter_fails_before_reading() -> None:
    """Test that the filter is parsed before any input is read."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "blue and"], input="{broken")
    assert result.exit_code == 2
    assert _json(result.output)["error"]["message"] == "Unexpected end of input"


def test_version_json() -> None:
    """Test the version command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "version"])
    assert result.exit_code == 0
    assert _json(result.output)["data"]["version"] == __version__


# =============================================================================
# Logging
# =============================================================================


@pytest.mark.parametrize(
    ("verbosity", "level"),
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (3, logging.DEBUG)],
)
def test_configure_logging_levels(verbosity: int, level: int) -> None:
    """Test that -v maps to INFO and -vv to DEBUG on the root logger."""
    root = logging.getLogger()
    state = configure_logging(verbosity=verbosity)
    try:
        assert root.level == level
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
    finally:
        restore_logging(state)


def test_debug_logging_reaches_stderr() -> None:
    """Test that -vv shows the parser's debug records."""
    runner = CliRunner()
    result = runner.invoke(cli, ["-vv", "parse", "a"])
    assert result.exit_code == 0
    assert "Parsed filter 'a'" in result.output


def test_info_logging_hides_debug() -> None:
    """Test that -v does not show debug records."""
    runner = CliRunner()
    result = runner.invoke(cli, ["-v", "parse", "a"])
    assert result.exit_code == 0
    assert "Parsed filter" not in result.output


def test_logging_restored_after_command() -> None:
    """Test that the root logger is put back when the command exits."""
    root = logging.getLogger()
    level_before = root.level
    handlers_before = list(root.handlers)
    runner = CliRunner()
    result = runner.invoke(cli, ["-vv", "parse", "a"])
    assert result.exit_code == 0
    assert root.level == level_before
    assert root.handlers == handlers_before

    result = runner.invoke(cli, ["-vv", "parse", "a b"])
    assert result.exit_code == 2
    assert root.level == level_before
    assert root.handlers == handlers_before
