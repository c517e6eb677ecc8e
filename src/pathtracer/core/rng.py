"""Per-sample random number generation for Taichi kernels.

Every path owns a 32-bit xorshift state that is threaded explicitly through
every sampling call, so a (pixel, sample, seed) tuple always produces the
same path no matter how the kernel is scheduled across threads.

States are seeded by hashing the pixel coordinates, the sample index and a
base seed with Wang's integer hash. Uniform floats take the high 24 bits of
the state, giving values in [0, 1).

Right shifts are masked so the result is the same whether the backend
shifts unsigned values logically or arithmetically.

Example:
    >>> @ti.kernel
    ... def draw() -> ti.f64:
    ...     state = seed_state(3, 4, 0, 42)
    ...     state, xi = next_float(state)
    ...     return xi
"""

import taichi as ti


@ti.func
def wang_hash(key):
    """Wang's 32-bit integer hash."""
    x = (key ^ ti.u32(61)) ^ ((key >> 16) & ti.u32(0xFFFF))
    x = x * ti.u32(9)
    x = x ^ ((x >> 4) & ti.u32(0x0FFFFFFF))
    x = x * ti.u32(668265261)
    x = x ^ ((x >> 15) & ti.u32(0x1FFFF))
    return x


@ti.func
def xorshift32(state):
    """Advance a xorshift32 state by one step (13, 17, 5)."""
    s = state ^ (state << 13)
    s = s ^ ((s >> 17) & ti.u32(0x7FFF))
    s = s ^ (s << 5)
    return s


@ti.func
def seed_state(i: ti.i32, j: ti.i32, sample: ti.i32, seed: ti.i32):
    """Derive an independent, non-zero state for one sample.

    Args:
        i: Pixel x-coordinate (or any first key).
        j: Pixel y-coordinate (or any second key).
        sample: Sample index within the pixel.
        seed: Base seed for the whole render.

    Returns:
        A non-zero u32 state.
    """
    h = wang_hash(ti.cast(i, ti.u32))
    h = wang_hash(h ^ ti.cast(j, ti.u32))
    h = wang_hash(h ^ ti.cast(sample, ti.u32))
    h = wang_hash(h ^ ti.cast(seed, ti.u32))
    # xorshift has a fixed point at zero
    if h == ti.u32(0):
        h = ti.u32(1)
    return h


@ti.func
def next_float(state):
    """Advance the state and draw a uniform float in [0, 1).

    Returns:
        A tuple (new_state, xi).
    """
    s = xorshift32(state)
    xi = ti.cast((s >> 8) & ti.u32(0xFFFFFF), ti.f64) / 16777216.0
    return s, xi
