"""Shared test fixtures and helpers for stackdigest tests.

Provides:
- CliRunner fixtures: cli_runner, invoke_cli()
- Source fixtures: view_of() for in-memory files, source_tree factory for
  files on disk, sample C++/C# sources and a call stack pointing at them
- JSON validation helpers: parse_json_output(), assert_json_envelope()
- Isolation: every test gets an empty config dir and a cold file-view cache
"""

from __future__ import annotations

import json
import logging
import os

import pytest
from click.testing import CliRunner

from stackdigest.source.fileview import FileView, clear_cache

# ===========================================================================
# Isolation
# ===========================================================================


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path, monkeypatch):
    """Point the config dir at tmp, drop env overrides, clear the view cache."""
    monkeypatch.setenv("STACKDIGEST_CONFIG_DIR", str(tmp_path / "config"))
    for name in ("STACKDIGEST_FRAMES", "STACKDIGEST_MAX_LINES", "STACKDIGEST_NEAR_MISS_CHARS"):
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    yield
    clear_cache()
    logger = logging.getLogger("stackdigest")
    for handler in [h for h in logger.handlers if getattr(h, "_stackdigest", False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ===========================================================================
# CliRunner helpers
# ===========================================================================


@pytest.fixture
def cli_runner():
    """Provide a Click CliRunner for in-process CLI testing."""
    return CliRunner()


def invoke_cli(runner, args, cwd=None, json_mode=False, input=None):
    """Invoke the stackdigest CLI via CliRunner.

    Args:
        runner: CliRunner instance
        args: list of CLI arguments (e.g. ["frames", "stack.txt"])
        cwd: directory to run in
        json_mode: if True, prepend --json flag
        input: text fed to stdin (for ``-`` call-stack arguments)
    Returns:
        click.testing.Result
    """
    from stackdigest.cli import cli

    full_args = []
    if json_mode:
        full_args.append("--json")
    full_args.extend(args)

    old_cwd = os.getcwd()
    try:
        if cwd:
            os.chdir(str(cwd))
        result = runner.invoke(cli, full_args, input=input, catch_exceptions=False)
    finally:
        os.chdir(old_cwd)

    return result


# ===========================================================================
# JSON validation helpers
# ===========================================================================


def parse_json_output(result, command=None, exit_code=0):
    """Parse JSON from a CliRunner result.

    Args:
        result: click.testing.Result from invoke_cli
        command: optional command name for better error messages
        exit_code: expected exit code (partial results exit non-zero)
    Returns:
        Parsed dict from JSON output
    """
    assert result.exit_code == exit_code, (
        f"Command {command or '?'} exited {result.exit_code}, expected {exit_code}:\n{result.output}"
    )
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        pytest.fail(f"Invalid JSON from {command or '?'}: {e}\nOutput was:\n{result.output[:500]}")


def assert_json_envelope(data, command=None):
    """Validate that a parsed JSON dict follows the stackdigest envelope contract.

    Checks required top-level keys: schema, command, version, summary.
    Checks _meta contains timestamp and summary contains a verdict.
    """
    assert isinstance(data, dict), f"Expected dict, got {type(data)}"
    assert data.get("schema") == "stackdigest-envelope-v1"
    assert "command" in data, "Missing 'command' key in envelope"
    assert "version" in data, "Missing 'version' key in envelope"
    assert "summary" in data, "Missing 'summary' key in envelope"
    assert "timestamp" in data.get("_meta", {}), "Missing 'timestamp' in _meta"
    if command:
        assert data["command"] == command, f"Expected command={command}, got {data['command']}"
    summary = data["summary"]
    assert isinstance(summary, dict), f"summary should be dict, got {type(summary)}"
    assert isinstance(summary.get("verdict"), str), "summary should carry a verdict string"


# ===========================================================================
# Source helpers
# ===========================================================================


def view_of(text: str, name: str = "sample.cpp") -> FileView:
    """Build an in-memory FileView; the dialect follows *name*'s extension."""
    return FileView.from_text(text, path=name)


def line_of(text: str, needle: str) -> int:
    """1-based line of the first occurrence of *needle* in *text*."""
    idx = text.index(needle)
    return text.count("\n", 0, idx) + 1


WRITER_CPP = """\
#include "Writer.h"

namespace UE::Net
{

int32 FWriter::Write(FNetBitStreamWriter& Writer, const FContext& Context)
{
    if (!Context.IsValid())
    {
        return 0;
    }
    const int32 Written = SerializeObjects(Writer);
    return Written;
}

}
"""

PLAYER_CS = """\
namespace Game
{
    public class Player
    {
        private int _hp;

        public Player(int hp) : base()
        {
            _hp = hp;
        }

        public int Health
        {
            get
            {
                return _hp;
            }
        }

        public bool IsAlive => _hp > 0;
    }
}
"""


@pytest.fixture
def source_tree(tmp_path):
    """Factory writing source files under tmp_path/src.

    Usage::

        root = source_tree({"Writer.cpp": WRITER_CPP})
        path = root / "Writer.cpp"
    """

    def _create(files: dict[str, str]):
        root = tmp_path / "src"
        for rel_path, content in files.items():
            fp = root / rel_path
            fp.parent.mkdir(parents=True, exist_ok=True)
            fp.write_text(content, encoding="utf-8")
        return root

    return _create


def make_callstack(writer_path, player_path=None) -> str:
    """A Visual Studio call stack with one located C++ frame, an inline
    frame without location and (optionally) a located C# frame."""
    lines = [
        "UnrealEditor-IrisCore.dll!UE::Net::FWriter::Write(FNetBitStreamWriter &, const FContext &) Line 12",
        f"    at {writer_path}(12)",
        "[Inline Frame] UnrealEditor-Mover.dll!operator<<(FArchive &) Line 1777",
    ]
    if player_path is not None:
        lines += [
            "Game.dll!Game.Player.get_Health() Line 16",
            f"    at {player_path}(16)",
        ]
    lines.append("kernel32.dll!00007ff919167374()")
    return "\n".join(lines) + "\n"
