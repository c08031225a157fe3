"""Color gradients for turtle drawing."""

from typing import List, Sequence, Tuple

import numpy as np

Color = Tuple[int, int, int, int]

# Linear-light RGBA stops, evenly spaced over [0, 1].
RAINBOW_STOPS = np.array([
    [1.0, 0.0, 0.0, 1.0],
    [1.0, 1.0, 0.0, 1.0],
    [0.0, 1.0, 0.0, 1.0],
    [0.0, 1.0, 1.0, 1.0],
    [0.0, 0.0, 1.0, 1.0],
    [1.0, 0.0, 1.0, 1.0],
    [1.0, 0.0, 0.0, 1.0],
])


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Apply the sRGB transfer function to linear values in [0, 1]."""
    values = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    return np.where(
        values <= 0.0031308,
        values * 12.92,
        1.055 * np.power(values, 1.0 / 2.4) - 0.055,
    )


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Invert the sRGB transfer function for values in [0, 1]."""
    values = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    return np.where(
        values <= 0.04045,
        values / 12.92,
        np.power((values + 0.055) / 1.055, 2.4),
    )


def gradient(stops: Sequence[Sequence[float]], n: int) -> List[Color]:
    """Sample ``n`` evenly spaced 8-bit sRGB colors from linear RGBA stops.

    Interpolation happens in linear light. The first and last samples land
    exactly on the first and last stops. Alpha is not gamma encoded.

    Args:
        stops: Linear RGBA stops, evenly spaced over [0, 1]
        n: Number of colors to return

    Returns:
        List of ``(r, g, b, a)`` tuples
    """
    if n < 0:
        raise ValueError(f"Gradient length must be non-negative, got {n}")
    stops = np.asarray(stops, dtype=np.float64)
    if stops.ndim != 2 or stops.shape[1] != 4 or len(stops) < 2:
        raise ValueError(f"Expected at least two RGBA stops, got shape {stops.shape}")

    knots = np.linspace(0.0, 1.0, len(stops))
    t = np.linspace(0.0, 1.0, n) if n > 1 else np.zeros(n)
    linear = np.stack([np.interp(t, knots, stops[:, c]) for c in range(4)], axis=-1)

    encoded = linear.copy()
    encoded[:, :3] = linear_to_srgb(linear[:, :3])
    rgba = np.round(np.clip(encoded, 0.0, 1.0) * 255.0).astype(np.uint8)
    return [tuple(int(c) for c in row) for row in rgba]


def rainbow(n: int) -> List[Color]:
    """Red → yellow → green → cyan → blue → magenta → red, ``n`` samples."""
    return gradient(RAINBOW_STOPS, n)
