from wadrun.engine.dsda_doom import (
    DSDA_DOOM_EXE,
    Complevel,
    LaunchConfig,
    Renderer,
    Skill,
    generate_arguments,
    is_blank_path,
    with_extra,
)

__all__ = [
    "DSDA_DOOM_EXE",
    "Complevel",
    "LaunchConfig",
    "Renderer",
    "Skill",
    "generate_arguments",
    "is_blank_path",
    "with_extra",
]
