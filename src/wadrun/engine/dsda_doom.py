"""dsda-doom launch options and command-line argument generation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Union

PathLike = Union[str, Path]

DSDA_DOOM_EXE = "dsda-doom"

WARP_MIN = 1
WARP_MAX = 255


class Renderer(Enum):
    SOFTWARE = "software"
    OPENGL = "opengl"

    @property
    def token(self) -> str:
        return _RENDERER_TOKENS[self]


class Skill(Enum):
    BABY = "baby"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    NIGHTMARE = "nightmare"

    @property
    def token(self) -> str:
        return _SKILL_TOKENS[self]


class Complevel(Enum):
    DOOM19 = "doom19"
    ULTIMATE_DOOM = "ultimate-doom"
    FINAL_DOOM = "final-doom"
    BOOM = "boom"
    MBF = "mbf"
    MBF21 = "mbf21"

    @property
    def token(self) -> str:
        return _COMPLEVEL_TOKENS[self]


# Encodings for dsda-doom 0.2x. Every member must have an entry.
_RENDERER_TOKENS: dict[Renderer, str] = {
    Renderer.SOFTWARE: "sw",
    Renderer.OPENGL: "gl",
}

_SKILL_TOKENS: dict[Skill, str] = {
    Skill.BABY: "1",
    Skill.EASY: "2",
    Skill.MEDIUM: "3",
    Skill.HARD: "4",
    Skill.NIGHTMARE: "5",
}

_COMPLEVEL_TOKENS: dict[Complevel, str] = {
    Complevel.DOOM19: "2",
    Complevel.ULTIMATE_DOOM: "3",
    Complevel.FINAL_DOOM: "4",
    Complevel.BOOM: "9",
    Complevel.MBF: "11",
    Complevel.MBF21: "21",
}


@dataclass(frozen=True)
class LaunchConfig:
    """Everything needed to start one dsda-doom session.

    ``None`` for an optional field means "let the engine decide". Sequences are
    normalized to tuples so a config can be shared and hashed safely.
    Invalid values are rejected here, never during argument generation.
    """

    iwad: PathLike
    warp: int | None = None
    renderer: Renderer | None = None
    skill: Skill | None = None
    complevel: Complevel | None = None
    pistolstart: bool = False
    # PWADs in load order; later files override earlier ones inside the engine.
    files: tuple[PathLike, ...] = field(default_factory=tuple)
    # Forwarded verbatim after everything else.
    extra: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if is_blank_path(self.iwad):
            raise ValueError("An IWAD path is required.")
        if self.warp is not None:
            if isinstance(self.warp, bool) or not isinstance(self.warp, int):
                raise ValueError(f"Warp level must be an integer, got {self.warp!r}.")
            if not (WARP_MIN <= self.warp <= WARP_MAX):
                raise ValueError(f"Warp level must be between {WARP_MIN} and {WARP_MAX}, got {self.warp}.")
        _check_enum("renderer", self.renderer, Renderer)
        _check_enum("skill", self.skill, Skill)
        _check_enum("complevel", self.complevel, Complevel)
        object.__setattr__(self, "pistolstart", bool(self.pistolstart))
        files = _as_sequence("files", self.files)
        for p in files:
            if is_blank_path(p):
                raise ValueError(f"PWAD paths must not be empty, got {p!r}.")
        object.__setattr__(self, "files", files)
        object.__setattr__(self, "extra", tuple(str(tok) for tok in _as_sequence("extra", self.extra)))

    def generate_arguments(self) -> list[str]:
        return generate_arguments(self)


def _check_enum(name: str, value: object, enum_type: type[Enum]) -> None:
    if value is not None and not isinstance(value, enum_type):
        raise ValueError(f"{name} must be a {enum_type.__name__} or None, got {value!r}.")


def _as_sequence(name: str, value: object) -> tuple:
    # A single str, bytes or path is one value, not a sequence of tokens.
    if isinstance(value, (str, bytes, os.PathLike)):
        raise ValueError(f"{name} must be a sequence, not a single {type(value).__name__}: {value!r}.")
    try:
        return tuple(value)  # type: ignore[call-overload]
    except TypeError:
        raise ValueError(f"{name} must be a sequence, got {value!r}.") from None


def is_blank_path(value: object) -> bool:
    """True for None, empty or whitespace-only paths, and ``Path("")`` (which is ``"."``)."""
    if value is None:
        return True
    if isinstance(value, os.PathLike):
        text = os.fspath(value)
        return not str(text).strip() or text == "."
    return not str(value).strip()


# ── segments ─────────────────────────────────────────────────


def _iwad_segment(cfg: LaunchConfig) -> list[str]:
    return ["-iwad", str(cfg.iwad)]


def _warp_segment(cfg: LaunchConfig) -> list[str]:
    if cfg.warp is None:
        return []
    return ["-warp", str(cfg.warp)]


def _renderer_segment(cfg: LaunchConfig) -> list[str]:
    if cfg.renderer is None:
        return []
    return ["-vidmode", cfg.renderer.token]


def _skill_segment(cfg: LaunchConfig) -> list[str]:
    if cfg.skill is None:
        return []
    return ["-skill", cfg.skill.token]


def _complevel_segment(cfg: LaunchConfig) -> list[str]:
    if cfg.complevel is None:
        return []
    return ["-complevel", cfg.complevel.token]


def _pistolstart_segment(cfg: LaunchConfig) -> list[str]:
    return ["-pistolstart"] if cfg.pistolstart else []


def _files_segment(cfg: LaunchConfig) -> list[str]:
    if not cfg.files:
        return []
    return ["-file", *(str(p) for p in cfg.files)]


def _extra_segment(cfg: LaunchConfig) -> list[str]:
    # Last, so callers can override anything emitted before.
    return list(cfg.extra)


SEGMENTS: tuple[Callable[[LaunchConfig], list[str]], ...] = (
    _iwad_segment,
    _warp_segment,
    _renderer_segment,
    _skill_segment,
    _complevel_segment,
    _pistolstart_segment,
    _files_segment,
    _extra_segment,
)


def generate_arguments(cfg: LaunchConfig) -> list[str]:
    """Return the dsda-doom argument list for ``cfg`` (executable name excluded)."""
    args: list[str] = []
    for segment in SEGMENTS:
        args.extend(segment(cfg))
    return args


def with_extra(cfg: LaunchConfig, extra: Iterable[str]) -> LaunchConfig:
    """Copy of ``cfg`` with ``extra`` appended to its passthrough tokens."""
    return replace(cfg, extra=(*cfg.extra, *extra))
