"""Escape-time evaluation for single points and whole sample grids."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import tensorflow as tf

ESCAPE_RADIUS = 2.0


@dataclass(frozen=True)
class Escaped:
    """The orbit left the escape radius on iteration ``at_iteration``."""

    at_iteration: int


@dataclass(frozen=True)
class Bounded:
    """The orbit stayed inside the escape radius for the whole budget."""

    final_z: tuple[float, float]


EscapeResult = Union[Escaped, Bounded]


@dataclass(frozen=True)
class GridResult:
    """Per-sample outcome of a vectorized evaluation.

    ``escaped_at`` holds the escape iteration, or ``-1`` where the orbit stayed
    bounded. ``final_re``/``final_im`` hold the last orbit value that passed the
    radius check.
    """

    escaped_at: np.ndarray
    final_re: np.ndarray
    final_im: np.ndarray

    @property
    def bounded(self) -> np.ndarray:
        return self.escaped_at < 0


def _square_plus(z: tuple[float, float], c: tuple[float, float]) -> tuple[float, float]:
    a, b = z
    return (a * a - b * b + c[0], 2.0 * a * b + c[1])


def evaluate(start: tuple[float, float], c: tuple[float, float], max_iterations: int) -> EscapeResult:
    """Iterate ``z -> z*z + c`` from ``start`` until it escapes or the budget runs out.

    The radius check is applied to the value produced by the current step, so a
    point whose first step lands outside the radius escapes at iteration 0.
    """

    x, y = start
    for i in range(max_iterations):
        x_new, y_new = _square_plus((x, y), c)
        distance = math.sqrt(x_new * x_new + y_new * y_new)
        if distance > ESCAPE_RADIUS:
            return Escaped(at_iteration=i)
        x, y = x_new, y_new
    return Bounded(final_z=(x, y))


_GRID_SPEC = tf.TensorSpec(shape=None, dtype=tf.float64)
_MASK_SPEC = tf.TensorSpec(shape=None, dtype=tf.bool)
_COUNT_SPEC = tf.TensorSpec(shape=None, dtype=tf.int32)
_SCALAR_SPEC = tf.TensorSpec(shape=[], dtype=tf.int32)


@tf.function(input_signature=[_SCALAR_SPEC, _GRID_SPEC, _GRID_SPEC, _GRID_SPEC, _GRID_SPEC, _COUNT_SPEC, _MASK_SPEC])
def _escape_step(
    i: tf.Tensor,
    re: tf.Tensor,
    im: tf.Tensor,
    c_re: tf.Tensor,
    c_im: tf.Tensor,
    escaped_at: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every active orbit by one step and record the ones that escape."""

    re_new = re * re - im * im + c_re
    im_new = 2.0 * re * im + c_im
    distance = tf.sqrt(re_new * re_new + im_new * im_new)
    escaping = tf.logical_and(active, distance > ESCAPE_RADIUS)
    escaped_at = tf.where(escaping, tf.fill(tf.shape(escaped_at), i), escaped_at)
    active = tf.logical_and(active, tf.logical_not(escaping))
    re = tf.where(active, re_new, re)
    im = tf.where(active, im_new, im)
    return re, im, escaped_at, active


# Grids of any shape share one traced graph.
@tf.function(input_signature=[_GRID_SPEC, _GRID_SPEC, _SCALAR_SPEC])
def _escape_run(c_re: tf.Tensor, c_im: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Run the escape loop with a TensorFlow while loop, seeding ``z0 = c``."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    escaped_at = tf.fill(tf.shape(c_re), tf.constant(-1, dtype=tf.int32))
    active = tf.ones_like(c_re, tf.bool)

    def cond(i, re, im, escaped_at, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, re, im, escaped_at, active):
        re, im, escaped_at, active = _escape_step(i, re, im, c_re, c_im, escaped_at, active)
        return i + 1, re, im, escaped_at, active

    _, re, im, escaped_at, _ = tf.while_loop(cond, body, (i, c_re, c_im, escaped_at, active))
    return re, im, escaped_at


def evaluate_grid(c_re: np.ndarray, c_im: np.ndarray, max_iterations: int, *, device: Optional[str] = None) -> GridResult:
    """Evaluate every sample of a grid of plane coordinates at once."""

    c_re = np.asarray(c_re, dtype=np.float64)
    c_im = np.asarray(c_im, dtype=np.float64)
    if c_re.shape != c_im.shape:
        raise ValueError(f"coordinate arrays differ in shape: {c_re.shape} vs {c_im.shape}")

    with tf.device(device if device is not None else "/CPU:0"):
        re_tf = tf.convert_to_tensor(c_re, dtype=tf.float64)
        im_tf = tf.convert_to_tensor(c_im, dtype=tf.float64)
        budget = tf.constant(max_iterations, dtype=tf.int32)
        re, im, escaped_at = _escape_run(re_tf, im_tf, budget)

    return GridResult(
        escaped_at=escaped_at.numpy(),
        final_re=re.numpy(),
        final_im=im.numpy(),
    )
