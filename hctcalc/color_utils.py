"""Color packing, sRGB transfer functions and lightness helpers."""
import math

import numpy as np

from hctcalc.types import RGB, InvalidColorComponentError


SRGB_TO_XYZ = np.array([
    [0.41233895, 0.35762064, 0.18051042],
    [0.2126, 0.7152, 0.0722],
    [0.01932141, 0.11916382, 0.95034478],
])

XYZ_TO_SRGB = np.array([
    [3.2413774792388685, -1.5376652402851851, -0.49885366846268053],
    [-0.9691452513005321, 1.8758853451067872, 0.04156585616912061],
    [0.05562093689691305, -0.20395524564742123, 1.0571799111220335],
])

WHITE_POINT_D65 = np.array([95.047, 100.0, 108.883])

# CIE L* constants
_EPSILON = 216.0 / 24389.0
_KAPPA = 24389.0 / 27.0


def argb_from_rgb(red: int, green: int, blue: int) -> int:
    """Pack an opaque RGB color into a 32-bit ARGB integer."""
    return (255 << 24) | ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF)


def rgb_from_argb(argb: int) -> RGB:
    return ((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)


def pack_pixels(pixels: np.ndarray) -> np.ndarray:
    """Pack an (N, 3) uint8 array into (N,) opaque ARGB uint32 values."""
    channels = pixels.astype(np.uint32)
    return (
        np.uint32(0xFF000000)
        | (channels[:, 0] << np.uint32(16))
        | (channels[:, 1] << np.uint32(8))
        | channels[:, 2]
    )


def unpack_colors(colors: np.ndarray) -> np.ndarray:
    """Unpack (N,) ARGB values into an (N, 3) int64 RGB array."""
    colors = colors.astype(np.int64)
    return np.stack(
        [(colors >> 16) & 0xFF, (colors >> 8) & 0xFF, colors & 0xFF],
        axis=-1,
    )


def validate_pixels(pixels) -> np.ndarray:
    """
    Coerce a pixel sequence into an (N, 3) uint8 array.

    Args:
        pixels: Sequence of RGB triples or an array of shape (..., 3)

    Returns:
        (N, 3) uint8 array

    Raises:
        InvalidColorComponentError: If the shape is wrong or a channel is
            outside 0-255
    """
    array = np.asarray(pixels)
    if array.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)

    if array.ndim < 2 or array.shape[-1] != 3:
        raise InvalidColorComponentError(
            f"Expected RGB triples with shape (..., 3), got {array.shape}"
        )

    array = array.reshape(-1, 3)
    if array.dtype == np.uint8:
        return array

    if not np.issubdtype(array.dtype, np.number):
        raise InvalidColorComponentError(f"Pixel values must be numeric, got {array.dtype}")

    if np.issubdtype(array.dtype, np.floating):
        if not np.all(np.isfinite(array)) or np.any(array != np.floor(array)):
            raise InvalidColorComponentError("Pixel channels must be whole numbers")

    if array.min() < 0 or array.max() > 255:
        raise InvalidColorComponentError(
            f"Pixel channels must be within 0-255, got range [{array.min()}, {array.max()}]"
        )

    return array.astype(np.uint8)


def linearized(component: int) -> float:
    """
    Convert an 8-bit sRGB channel to linear RGB.

    Returns:
        Linear value in range [0, 100]
    """
    normalized = component / 255.0
    if normalized <= 0.040449936:
        return normalized / 12.92 * 100.0
    return ((normalized + 0.055) / 1.055) ** 2.4 * 100.0


def delinearized(component: float) -> int:
    """Convert a linear RGB channel in [0, 100] to an 8-bit sRGB channel."""
    normalized = component / 100.0
    if normalized <= 0.0031308:
        delinear = normalized * 12.92
    else:
        delinear = 1.055 * math.pow(normalized, 1.0 / 2.4) - 0.055
    return min(255, max(0, int(math.floor(delinear * 255.0 + 0.5))))


def xyz_from_argb(argb: int) -> np.ndarray:
    red, green, blue = rgb_from_argb(argb)
    linear = np.array([linearized(red), linearized(green), linearized(blue)])
    return SRGB_TO_XYZ @ linear


def argb_from_xyz(x: float, y: float, z: float) -> int:
    linear = XYZ_TO_SRGB @ np.array([x, y, z])
    return argb_from_rgb(*(delinearized(c) for c in linear))


def _lab_f(t: float) -> float:
    if t > _EPSILON:
        return math.pow(t, 1.0 / 3.0)
    return (_KAPPA * t + 16.0) / 116.0


def _lab_inv_f(ft: float) -> float:
    ft3 = ft * ft * ft
    if ft3 > _EPSILON:
        return ft3
    return (116.0 * ft - 16.0) / _KAPPA


def lstar_from_y(y: float) -> float:
    """Convert relative luminance Y in [0, 100] to L* in [0, 100]."""
    return _lab_f(y / 100.0) * 116.0 - 16.0


def y_from_lstar(lstar: float) -> float:
    """Convert L* in [0, 100] to relative luminance Y in [0, 100]."""
    return 100.0 * _lab_inv_f((lstar + 16.0) / 116.0)


def lstar_from_argb(argb: int) -> float:
    """Perceptual lightness of a color, clamped to [0, 100]."""
    y = float(xyz_from_argb(argb)[1])
    return min(100.0, max(0.0, lstar_from_y(y)))


def argb_from_lstar(lstar: float) -> int:
    """Gray with the given L*."""
    component = delinearized(y_from_lstar(lstar))
    return argb_from_rgb(component, component, component)


def sanitize_degrees(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    degrees = math.fmod(degrees, 360.0)
    if degrees < 0.0:
        degrees += 360.0
    if degrees >= 360.0:
        degrees = 0.0
    return degrees


def difference_degrees(a: float, b: float) -> float:
    """Shortest circular distance between two angles, in [0, 180]."""
    return 180.0 - abs(abs(a - b) - 180.0)


def hex_from_argb(argb: int) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb_from_argb(argb))
