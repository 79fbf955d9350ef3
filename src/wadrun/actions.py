"""Subprocess spawning for dsda-doom launches."""

from __future__ import annotations

import logging
import shlex
import subprocess
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


class LaunchError(RuntimeError):
    """The engine executable could not be started."""


@dataclass
class ProcessHandle:
    """Tracks a running engine process and its log output."""

    label: str
    proc: subprocess.Popen
    log_lines: deque[str] = field(default_factory=lambda: deque(maxlen=2000))
    _readers: list[threading.Thread] = field(default_factory=list)

    @property
    def alive(self) -> bool:
        return self.proc.poll() is None

    def wait(self) -> int:
        """Block until the process exits and its output is drained."""
        code = self.proc.wait()
        for t in self._readers:
            t.join()
        return int(code)

    def kill(self) -> None:
        if self.alive:
            self.proc.terminate()
            try:
                self.proc.wait(timeout=3)
            except subprocess.TimeoutExpired:
                self.proc.kill()


def _ts() -> str:
    return time.strftime("%H:%M:%S")


def _stream_reader(stream, lines: deque[str], on_line: Callable[[str], None] | None) -> None:
    """Read lines from a subprocess stream and append to the shared deque."""
    try:
        for raw in iter(stream.readline, ""):
            line = raw.rstrip("\n\r")
            lines.append(f"[{_ts()}] {line}")
            if on_line:
                on_line(line)
    except (OSError, ValueError) as e:
        logger.debug("Output stream closed early: %s", e)
    finally:
        stream.close()


def format_command(exe: str, args: Sequence[str]) -> str:
    return " ".join(shlex.quote(x) for x in [exe, *args])


def spawn_dsda_doom(
    exe: str,
    args: Sequence[str],
    *,
    cwd: str | None = None,
    on_line: Callable[[str], None] | None = None,
) -> ProcessHandle:
    """Launch ``exe`` with ``args`` exactly as given, output captured to a ProcessHandle."""
    cmd = [exe, *args]
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            cwd=cwd,
            bufsize=1,
        )
    except OSError as e:
        raise LaunchError(f"Failed to launch {exe}: {e}") from e

    label = "dsda-doom"
    handle = ProcessHandle(label=label, proc=proc)
    handle.log_lines.append(f"[{_ts()}] --- {label} (PID {proc.pid}) ---")
    handle.log_lines.append(f"[{_ts()}] > {format_command(exe, args)}")
    logger.info("Started %s (PID %d)", label, proc.pid)

    t = threading.Thread(target=_stream_reader, args=(proc.stdout, handle.log_lines, on_line), daemon=True)
    t.start()
    handle._readers.append(t)
    return handle


def run_dsda_doom(
    exe: str,
    args: Sequence[str],
    *,
    cwd: str | None = None,
    on_line: Callable[[str], None] | None = None,
) -> int:
    """Launch dsda-doom, wait for it, and return its exit status unchanged."""
    handle = spawn_dsda_doom(exe, args, cwd=cwd, on_line=on_line)
    try:
        code = handle.wait()
    except KeyboardInterrupt:
        handle.kill()
        raise
    logger.info("%s exited with status %d", handle.label, code)
    return code
