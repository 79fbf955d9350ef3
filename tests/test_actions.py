import json
import os
import signal
import stat
import sys
from pathlib import Path

import pytest

from wadrun.actions import LaunchError, format_command, run_dsda_doom, spawn_dsda_doom

_FAKE_DSDA = """#!{python}
import json, os, signal, sys

print(json.dumps(sys.argv[1:]))
sys.stdout.flush()
if {signum}:
    os.kill(os.getpid(), {signum})
raise SystemExit({code})
"""


def _fake_engine(tmp_path: Path, *, code: int = 0, signum: int = 0) -> str:
    exe = tmp_path / "fake-dsda-doom"
    exe.write_text(_FAKE_DSDA.format(python=sys.executable, code=code, signum=int(signum)), encoding="utf-8")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(exe)


pytestmark = pytest.mark.skipif(os.name == "nt", reason="uses a shebang script as fake engine")


def test_run_passes_arguments_unmodified_and_in_order(tmp_path: Path) -> None:
    exe = _fake_engine(tmp_path)
    args = ["-iwad", "doom2.wad", "-file", "b.wad", "a.wad", "with space.wad", "-extra"]
    seen: list[str] = []

    code = run_dsda_doom(exe, args, on_line=seen.append)

    assert code == 0
    assert json.loads(seen[0]) == args


def test_run_returns_engine_exit_status(tmp_path: Path) -> None:
    exe = _fake_engine(tmp_path, code=3)

    assert run_dsda_doom(exe, ["-iwad", "doom.wad"]) == 3


def test_run_returns_negative_code_when_engine_is_killed(tmp_path: Path) -> None:
    exe = _fake_engine(tmp_path, signum=signal.SIGTERM)

    assert run_dsda_doom(exe, ["-iwad", "doom.wad"]) == -signal.SIGTERM


def test_spawn_records_command_and_output(tmp_path: Path) -> None:
    exe = _fake_engine(tmp_path)

    handle = spawn_dsda_doom(exe, ["-iwad", "doom.wad"], cwd=str(tmp_path))
    assert handle.wait() == 0

    lines = list(handle.log_lines)
    assert "(PID " in lines[0]
    assert lines[1].endswith(f"> {exe} -iwad doom.wad")
    assert lines[2].endswith('["-iwad", "doom.wad"]')
    assert handle.alive is False


def test_missing_executable_raises_launch_error(tmp_path: Path) -> None:
    with pytest.raises(LaunchError):
        spawn_dsda_doom(str(tmp_path / "no-such-dsda"), ["-iwad", "doom.wad"])


def test_format_command_quotes_tokens() -> None:
    assert format_command("dsda-doom", ["-iwad", "my doom.wad"]) == "dsda-doom -iwad 'my doom.wad'"
