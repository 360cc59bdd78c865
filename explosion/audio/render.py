"""Offline WAV rendering for the explosion synth.

Usage:
    python -m explosion.audio.render output.wav [--preset preset.json] [--seed 1234]

Caution: output.wav is overwritten.
"""

import argparse
import json
import logging
import sys

from explosion.engine.composer import ExplosionComposer
from explosion.engine.params import SCHEMA, SR, ExplosionDef, default_params
from shared.audio import save_wav

log = logging.getLogger(__name__)


def load_preset(path):
    with open(path) as f:
        preset = json.load(f)
    preset.pop("_meta", None)
    return preset


def build_parser():
    parser = argparse.ArgumentParser(
        description="Synthesize an explosion sound effect into a WAV file",
        epilog="caution: the output file will be overwritten.")
    parser.add_argument("output", help="Output WAV file")
    parser.add_argument("--preset", help="Preset JSON file")
    parser.add_argument("--seed", type=int,
                        help="Random seed (default: derived from the clock)")
    parser.add_argument("--play", action="store_true",
                        help="Play the result after saving")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every pipeline stage")
    for p in SCHEMA:
        lo, hi = p.range
        parser.add_argument(f"--{p.key}", type=float,
                            help=f"{p.help} ({lo}-{hi}, default {p.default})")
    return parser


def resolve_params(args):
    """Defaults, then the preset, then command-line overrides, all clamped."""
    params = default_params()
    if args.preset:
        params.update(SCHEMA.validate_and_clamp(load_preset(args.preset)))
    overrides = {p.key: getattr(args, p.key) for p in SCHEMA
                 if getattr(args, p.key) is not None}
    params.update(SCHEMA.validate_and_clamp(overrides))
    return params


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s %(levelname)s: %(message)s")

    try:
        params = resolve_params(args)
    except (OSError, json.JSONDecodeError) as e:
        log.error("cannot load preset %s: %s", args.preset, e)
        return 1
    explosion_def = ExplosionDef.from_params(params)

    composer = ExplosionComposer(explosion_def, seed=args.seed)
    try:
        out = composer.render()
    except MemoryError as e:
        log.error("render aborted: %s", e)
        return 1

    try:
        save_wav(args.output, out.samples, SR)
    except OSError as e:
        log.error("cannot write '%s': %s", args.output, e)
        return 1
    print(f"Saved output in '{args.output}' ({out.seconds:.2f}s, seed {composer.seed})")

    if args.play:
        from shared.playback import play
        play(out.samples, SR)
    return 0


if __name__ == "__main__":
    sys.exit(main())
