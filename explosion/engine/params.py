"""Parameter schema for the explosion synthesizer.

This is the shared contract between presets, the CLI and scripting.
All parameter sources produce a dict in this format; the engine itself
reads a frozen ExplosionDef built from it.
"""

from dataclasses import dataclass, fields

from shared.params import ParamType as T, ParamDef, ParamSchema

SR = 44100

# ── Schema ────────────────────────────────────────────────────────────

_PARAMS = [
    # --- Main explosion ---
    ParamDef("duration", T.FLOAT, section="explosion",
             label="Duration (secs)", default=4.0, range=(0.2, 60.0),
             help="Duration of the explosion in seconds (roughly)"),

    ParamDef("layer_count", T.INT, section="explosion",
             label="Layers", default=4, range=(1, 10),
             help="Number of noise layers used to build up each explosion"),

    ParamDef("final_speed_factor", T.FLOAT, section="explosion",
             label="Speed factor", default=0.25, range=(0.1, 10.0),
             help="Speed up (>1.0) or slow down (<1.0) the final explosion"),

    # --- Pre-explosions ("ka-" in "ka-BOOM!") ---
    ParamDef("pre_explosion_count", T.INT, section="pre_explosion",
             label="Pre-explosions", default=1, range=(0, 5),
             help="Number of pre-explosions, the \"ka-\" in \"ka-BOOM!\""),

    ParamDef("pre_explosion_delay", T.FLOAT, section="pre_explosion",
             label="Pre-delay", default=0.2, range=(0.0, 3.0),
             help="Seconds of pre-explosions before the main explosion kicks in"),

    ParamDef("pre_explosion_lowpass_factor", T.FLOAT, section="pre_explosion",
             label="Pre-lp-factor", default=0.5, range=(0.0, 1.0),
             help="Low pass on the pre-explosions: near 0 lowers the cutoff, "
                  "near 1 raises it"),

    ParamDef("pre_explosion_lowpass_count", T.INT, section="pre_explosion",
             label="Pre-lp-count", default=1, range=(0, 10),
             help="Number of low pass passes over the pre-explosions"),

    # --- Reverb ---
    ParamDef("reverb_early_reflections", T.INT, section="reverb",
             label="Reverb early refls", default=10, range=(0, 50),
             help="Number of early reflections in the reverb"),

    ParamDef("reverb_late_reflections", T.INT, section="reverb",
             label="Reverb late refls", default=50, range=(0, 2000),
             help="Number of late reflections in the reverb"),
]

SCHEMA = ParamSchema(_PARAMS)

default_params = SCHEMA.default_params
PARAM_RANGES = SCHEMA.param_ranges()
PARAM_SECTIONS = SCHEMA.param_sections()


def seconds_to_frames(seconds):
    return int(seconds * SR)


@dataclass(frozen=True)
class ExplosionDef:
    """One run's worth of explosion parameters. Never mutated mid-pipeline."""

    duration: float = 4.0
    layer_count: int = 4
    pre_explosion_count: int = 1
    pre_explosion_delay: float = 0.2
    pre_explosion_lowpass_factor: float = 0.5
    pre_explosion_lowpass_count: int = 1
    final_speed_factor: float = 0.25
    reverb_early_reflections: int = 10
    reverb_late_reflections: int = 50

    def __post_init__(self):
        # Counts from JSON or numpy arrive as floats; whole numbers are accepted.
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is int and not isinstance(value, int):
                if value != int(value):
                    raise ValueError(f"{f.name} must be a whole number, got {value}")
                object.__setattr__(self, f.name, int(value))
        for name in ("duration", "pre_explosion_delay", "layer_count",
                     "pre_explosion_count", "pre_explosion_lowpass_count",
                     "reverb_early_reflections", "reverb_late_reflections"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.final_speed_factor <= 0:
            raise ValueError(
                f"final_speed_factor must be > 0, got {self.final_speed_factor}")

    @classmethod
    def from_params(cls, params: dict) -> "ExplosionDef":
        """Build from a params dict; missing keys take the schema defaults."""
        p = default_params()
        p.update(params)
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in p.items() if k in names})

    def to_params(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
