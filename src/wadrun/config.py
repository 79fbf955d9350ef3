"""Persistent launcher settings stored at ~/.wadrun/config.json."""

from __future__ import annotations

import json
import logging
import os
import secrets
import shutil
from dataclasses import asdict, dataclass, field
from pathlib import Path

from wadrun.engine import DSDA_DOOM_EXE

logger = logging.getLogger(__name__)


@dataclass
class LauncherSettings:
    """User-configurable launcher settings.  Empty strings mean 'not set'."""

    # Path to the dsda-doom executable (empty: look up "dsda-doom" on PATH).
    dsda_exe: str = ""
    # Working directory for the engine process (empty: current directory).
    working_dir: str = ""
    # Passthrough tokens added to every launch, ahead of command-line extras.
    extra_args: list[str] = field(default_factory=list)

    def effective_exe(self) -> str:
        if self.dsda_exe:
            return self.dsda_exe
        return shutil.which(DSDA_DOOM_EXE) or DSDA_DOOM_EXE

    def effective_cwd(self) -> str | None:
        if self.working_dir and Path(self.working_dir).is_dir():
            return self.working_dir
        return None


# ── persistence ──────────────────────────────────────────────


def _config_dir() -> Path:
    override = os.environ.get("WADRUN_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".wadrun"


def config_path() -> Path:
    return _config_dir() / "config.json"


def load_settings() -> LauncherSettings:
    p = config_path()
    if not p.exists():
        return LauncherSettings()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", p, e)
        return LauncherSettings()
    if not isinstance(raw, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object.", p)
        return LauncherSettings()

    kwargs: dict = {}
    for name in ("dsda_exe", "working_dir"):
        val = raw.get(name)
        if isinstance(val, str):
            kwargs[name] = val.strip()
    extra = raw.get("extra_args")
    if isinstance(extra, list):
        kwargs["extra_args"] = [str(tok) for tok in extra if isinstance(tok, (str, int, float))]
    elif isinstance(extra, str):
        # Tolerate a single space-separated string written by hand.
        kwargs["extra_args"] = extra.split()
    return LauncherSettings(**kwargs)


def save_settings(settings: LauncherSettings) -> Path:
    d = _config_dir()
    d.mkdir(parents=True, exist_ok=True)
    p = config_path()
    tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(4)}.tmp")
    tmp.write_text(
        json.dumps(asdict(settings), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    tmp.replace(p)
    return p
