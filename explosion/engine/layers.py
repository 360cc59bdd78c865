"""Layered noise explosion.

Each layer is white noise shaped by a speed change, compounding linear fades
and repeated sliding lowpass passes. Layer 0 is long, bright and lightly
faded; higher layers are sped up (shorter, denser), faded harder and swept
through darker cutoffs. Summed, they give a broadband hit over a rumble.
"""

import logging
from collections import namedtuple

from explosion.engine.buffer import allocate
from explosion.engine.filters import change_speed_in_place, sliding_low_pass_in_place
from explosion.engine.ops import (
    accumulate_in_place, fade_out_linear, normalize, white_noise,
)
from explosion.engine.params import seconds_to_frames

log = logging.getLogger(__name__)

MAX_FADE_PASSES = 3
MAX_FILTER_PASSES = 3

LayerPlan = namedtuple("LayerPlan", "speed fade_passes filter_passes alpha1 alpha2")


def layer_plan(i, layer_count):
    """How hard layer `i` of `layer_count` gets processed."""
    return LayerPlan(
        speed=2.0 * i if i > 0 else 1.0,
        fade_passes=min(i + 1, MAX_FADE_PASSES),
        filter_passes=max(MAX_FILTER_PASSES - i, 1),
        alpha1=(i + 1) / layer_count,
        alpha2=i / layer_count,
    )


def make_layer(seconds, i, layer_count, rng):
    """Build layer `i` from fresh noise."""
    plan = layer_plan(i, layer_count)
    layer = white_noise(seconds_to_frames(seconds), rng)

    if i > 0:
        change_speed_in_place(layer, plan.speed)

    for _ in range(plan.fade_passes):
        fade_out_linear(layer, layer.length)

    for _ in range(plan.filter_passes):
        sliding_low_pass_in_place(layer, plan.alpha1, plan.alpha2)
        normalize(layer)

    return layer


def make_explosion(seconds, layer_count, rng):
    """Sum `layer_count` layers into one normalized explosion."""
    if layer_count <= 0:
        return allocate(0)

    layers = [make_layer(seconds, i, layer_count, rng) for i in range(layer_count)]
    log.debug("%d layers, lengths %s", layer_count, [len(layer) for layer in layers])

    explosion = layers[0]
    for layer in layers[1:]:
        accumulate_in_place(explosion, layer)
    normalize(explosion)
    return explosion
