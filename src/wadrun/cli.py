from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Sequence

from wadrun import __version__
from wadrun.actions import LaunchError, format_command, run_dsda_doom
from wadrun.config import load_settings
from wadrun.engine.dsda_doom import (
    WARP_MAX,
    WARP_MIN,
    Complevel,
    LaunchConfig,
    Renderer,
    Skill,
    is_blank_path,
    with_extra,
)

logger = logging.getLogger(__name__)

# Exit status when the engine executable cannot be started (shell convention).
EXIT_LAUNCH_FAILED = 127


def exit_status(code: int) -> int:
    """Map a ``Popen`` return code to a process exit status.

    A negative code means the engine was killed by that signal; report it as
    128 + signal, like a POSIX shell does.
    """
    if code < 0:
        return 128 - code
    return code


def _warp_level(raw: str) -> int:
    try:
        level = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level: {raw!r}") from None
    if not (WARP_MIN <= level <= WARP_MAX):
        raise argparse.ArgumentTypeError(f"level must be between {WARP_MIN} and {WARP_MAX}, got {level}")
    return level


def _non_empty_path(raw: str) -> str:
    if is_blank_path(raw):
        raise argparse.ArgumentTypeError("path must not be empty")
    # Kept as typed; dsda-doom resolves paths itself.
    return raw


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wadrun",
        description="Launch dsda-doom with an IWAD, PWADs and game options.",
        epilog="Arguments after a literal '--' are forwarded to dsda-doom unchanged.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--iwad", required=True, type=_non_empty_path, help="Path to IWAD to use.")
    p.add_argument("-w", "--warp", type=_warp_level, default=None, metavar="LEVEL", help="Warp to level at start.")
    p.add_argument(
        "-v",
        "--vid",
        dest="renderer",
        choices=[r.value for r in Renderer],
        default=None,
        help="Set graphics renderer.",
    )
    p.add_argument("-s", "--skill", choices=[s.value for s in Skill], default=None, help="Set skill level.")
    p.add_argument(
        "-c",
        "--complevel",
        choices=[c.value for c in Complevel],
        default=None,
        help="Set compatibility level.",
    )
    p.add_argument("-p", "--pistolstart", action="store_true", help="Pistol start after every level.")
    p.add_argument("files", nargs="*", type=_non_empty_path, metavar="PWADS", help="Paths to PWADs to use.")
    p.add_argument(
        "-e",
        "--extra",
        action="append",
        default=None,
        metavar="EXTRA_ARG",
        help="Extra command line argument (repeatable). Use --extra=-flag for dash-prefixed values.",
    )
    p.add_argument("--exe", default=None, help="dsda-doom executable (default: settings file, then PATH).")
    p.add_argument("--print-cmd", action="store_true", help="Print the resolved command and exit.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p


def split_passthrough(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` at the first ``--``; the tail is forwarded verbatim."""
    raw = list(argv)
    if "--" in raw:
        i = raw.index("--")
        return raw[:i], raw[i + 1 :]
    return raw, []


def config_from_args(
    args: argparse.Namespace,
    *,
    default_extra: Iterable[str] = (),
    passthrough: Iterable[str] = (),
) -> LaunchConfig:
    """Build a LaunchConfig from parsed options.

    Passthrough order: ``default_extra`` (settings), then ``--extra`` values, then
    tokens given after ``--``.
    """
    cfg = LaunchConfig(
        iwad=args.iwad,
        warp=args.warp,
        renderer=Renderer(args.renderer) if args.renderer else None,
        skill=Skill(args.skill) if args.skill else None,
        complevel=Complevel(args.complevel) if args.complevel else None,
        pistolstart=bool(args.pistolstart),
        files=tuple(args.files or ()),
        extra=tuple(default_extra),
    )
    return with_extra(cfg, (*(args.extra or ()), *passthrough))


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    raw = list(argv) if argv is not None else sys.argv[1:]
    head, passthrough = split_passthrough(raw)
    args = parser.parse_intermixed_args(head)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(message)s",
    )

    settings = load_settings()
    try:
        cfg = config_from_args(args, default_extra=settings.extra_args, passthrough=passthrough)
    except ValueError as e:
        parser.error(str(e))

    exe = args.exe or settings.effective_exe()
    launch_args = cfg.generate_arguments()

    if args.print_cmd:
        print("+", format_command(exe, launch_args))
        return 0

    logger.debug("Launching: %s", format_command(exe, launch_args))
    try:
        code = run_dsda_doom(exe, launch_args, cwd=settings.effective_cwd(), on_line=print)
    except LaunchError as e:
        print(f"wadrun: {e}", file=sys.stderr)
        return EXIT_LAUNCH_FAILED
    return exit_status(code)
