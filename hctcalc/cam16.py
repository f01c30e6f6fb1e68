"""CAM16 color appearance model under fixed viewing conditions."""
import math
from dataclasses import dataclass

import numpy as np

from hctcalc.color_utils import (
    SRGB_TO_XYZ,
    WHITE_POINT_D65,
    argb_from_xyz,
    linearized,
    rgb_from_argb,
    y_from_lstar,
)


# XYZ to cone responses (CAT16)
XYZ_TO_CAM16RGB = np.array([
    [0.401288, 0.650173, -0.051461],
    [-0.250268, 1.204414, 0.045854],
    [-0.002079, 0.048952, 0.953127],
])

CAM16RGB_TO_XYZ = np.array([
    [1.8620678, -1.0112547, 0.14918678],
    [0.38752654, 0.62144744, -0.00897398],
    [-0.01584150, -0.03412294, 1.0499644],
])


def _lerp(start: float, stop: float, amount: float) -> float:
    return (1.0 - amount) * start + amount * stop


def _signum(value: float) -> float:
    if value < 0.0:
        return -1.0
    if value > 0.0:
        return 1.0
    return 0.0


@dataclass(frozen=True)
class ViewingConditions:
    """Precomputed parameters of the environment a color is seen in."""
    n: float
    aw: float
    nbb: float
    ncb: float
    c: float
    nc: float
    rgb_d: np.ndarray
    fl: float
    fl_root: float
    z: float

    @classmethod
    def make(
        cls,
        white_point: np.ndarray = WHITE_POINT_D65,
        adapting_luminance: float = 200.0 / math.pi * y_from_lstar(50.0) / 100.0,
        background_lstar: float = 50.0,
        surround: float = 2.0,
        discounting_illuminant: bool = False,
    ) -> "ViewingConditions":
        """
        Build viewing conditions.

        Args:
            white_point: XYZ of the adopted white, Y = 100
            adapting_luminance: Luminance of the adapting field in cd/m^2
            background_lstar: L* of the background
            surround: 0 = dark, 1 = dim, 2 = average
            discounting_illuminant: Whether the eye fully adapts to the illuminant
        """
        rgb_w = XYZ_TO_CAM16RGB @ np.asarray(white_point, dtype=np.float64)

        f = 0.8 + surround / 10.0
        if f >= 0.9:
            c = _lerp(0.59, 0.69, (f - 0.9) * 10.0)
        else:
            c = _lerp(0.525, 0.59, (f - 0.8) * 10.0)

        if discounting_illuminant:
            d = 1.0
        else:
            d = f * (1.0 - (1.0 / 3.6) * math.exp((-adapting_luminance - 42.0) / 92.0))
        d = min(1.0, max(0.0, d))

        nc = f
        rgb_d = d * (100.0 / rgb_w) + 1.0 - d

        k = 1.0 / (5.0 * adapting_luminance + 1.0)
        k4 = k ** 4
        k4f = 1.0 - k4
        fl = k4 * adapting_luminance + 0.1 * k4f * k4f * math.pow(5.0 * adapting_luminance, 1.0 / 3.0)

        n = y_from_lstar(background_lstar) / white_point[1]
        z = 1.48 + math.sqrt(n)
        nbb = 0.725 / math.pow(n, 0.2)
        ncb = nbb

        rgb_a_factors = np.power(fl * rgb_d * rgb_w / 100.0, 0.42)
        rgb_a = 400.0 * rgb_a_factors / (rgb_a_factors + 27.13)
        aw = (2.0 * rgb_a[0] + rgb_a[1] + 0.05 * rgb_a[2]) * nbb

        return cls(
            n=n,
            aw=aw,
            nbb=nbb,
            ncb=ncb,
            c=c,
            nc=nc,
            rgb_d=rgb_d,
            fl=fl,
            fl_root=math.pow(fl, 0.25),
            z=z,
        )


DEFAULT_VIEWING_CONDITIONS = ViewingConditions.make()


@dataclass(frozen=True)
class Cam16:
    """
    CAM16 appearance correlates of a color.

    hue is in degrees, chroma/j/q/m/s are the usual CAM16 correlates and
    jstar/astar/bstar are the CAM16-UCS coordinates used for color distance.
    """
    hue: float
    chroma: float
    j: float
    q: float
    m: float
    s: float
    jstar: float
    astar: float
    bstar: float

    @classmethod
    def from_argb(
        cls,
        argb: int,
        conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
    ) -> "Cam16":
        red, green, blue = rgb_from_argb(argb)
        linear = np.array([linearized(red), linearized(green), linearized(blue)])
        xyz = SRGB_TO_XYZ @ linear
        return cls.from_xyz(xyz, conditions)

    @classmethod
    def from_xyz(
        cls,
        xyz: np.ndarray,
        conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
    ) -> "Cam16":
        vc = conditions
        rgb_c = XYZ_TO_CAM16RGB @ np.asarray(xyz, dtype=np.float64)
        rgb_d = vc.rgb_d * rgb_c

        # Post-adaptation nonlinear compression
        rgb_af = np.power(vc.fl * np.abs(rgb_d) / 100.0, 0.42)
        r_a, g_a, b_a = (float(x) for x in np.sign(rgb_d) * 400.0 * rgb_af / (rgb_af + 27.13))

        # Opponent dimensions
        a = (11.0 * r_a + -12.0 * g_a + b_a) / 11.0
        b = (r_a + g_a - 2.0 * b_a) / 9.0
        u = (20.0 * r_a + 20.0 * g_a + 21.0 * b_a) / 20.0
        p2 = (40.0 * r_a + 20.0 * g_a + b_a) / 20.0

        hue = math.degrees(math.atan2(b, a))
        if hue < 0.0:
            hue += 360.0
        elif hue >= 360.0:
            hue -= 360.0
        hue_radians = math.radians(hue)

        ac = p2 * vc.nbb
        j = 100.0 * math.pow(ac / vc.aw, vc.c * vc.z)
        q = (4.0 / vc.c) * math.sqrt(j / 100.0) * (vc.aw + 4.0) * vc.fl_root

        hue_prime = hue + 360.0 if hue < 20.14 else hue
        e_hue = 0.25 * (math.cos(math.radians(hue_prime) + 2.0) + 3.8)
        p1 = 50000.0 / 13.0 * e_hue * vc.nc * vc.ncb
        t = p1 * math.hypot(a, b) / (u + 0.305)
        alpha = math.pow(t, 0.9) * math.pow(1.64 - math.pow(0.29, vc.n), 0.73)

        chroma = alpha * math.sqrt(j / 100.0)
        m = chroma * vc.fl_root
        s = 50.0 * math.sqrt((alpha * vc.c) / (vc.aw + 4.0))

        jstar = (1.0 + 100.0 * 0.007) * j / (1.0 + 0.007 * j)
        mstar = 1.0 / 0.0228 * math.log1p(0.0228 * m)
        astar = mstar * math.cos(hue_radians)
        bstar = mstar * math.sin(hue_radians)

        return cls(hue, chroma, j, q, m, s, jstar, astar, bstar)

    @classmethod
    def from_jch(
        cls,
        j: float,
        chroma: float,
        hue: float,
        conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
    ) -> "Cam16":
        vc = conditions
        q = (4.0 / vc.c) * math.sqrt(j / 100.0) * (vc.aw + 4.0) * vc.fl_root
        m = chroma * vc.fl_root
        alpha = chroma / math.sqrt(j / 100.0) if j > 0.0 else 0.0
        s = 50.0 * math.sqrt((alpha * vc.c) / (vc.aw + 4.0))

        hue_radians = math.radians(hue)
        jstar = (1.0 + 100.0 * 0.007) * j / (1.0 + 0.007 * j)
        mstar = 1.0 / 0.0228 * math.log1p(0.0228 * m)
        astar = mstar * math.cos(hue_radians)
        bstar = mstar * math.sin(hue_radians)

        return cls(hue, chroma, j, q, m, s, jstar, astar, bstar)

    def distance(self, other: "Cam16") -> float:
        """Perceptual distance in CAM16-UCS."""
        d_j = self.jstar - other.jstar
        d_a = self.astar - other.astar
        d_b = self.bstar - other.bstar
        d_e_prime = math.sqrt(d_j * d_j + d_a * d_a + d_b * d_b)
        return 1.41 * math.pow(d_e_prime, 0.63)

    def to_xyz(self, conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS) -> np.ndarray:
        """Closed-form inverse of the model, without gamut mapping."""
        vc = conditions
        if self.chroma == 0.0 or self.j == 0.0:
            alpha = 0.0
        else:
            alpha = self.chroma / math.sqrt(self.j / 100.0)

        t = math.pow(alpha / math.pow(1.64 - math.pow(0.29, vc.n), 0.73), 1.0 / 0.9)
        h_rad = math.radians(self.hue)

        e_hue = 0.25 * (math.cos(h_rad + 2.0) + 3.8)
        ac = vc.aw * math.pow(self.j / 100.0, 1.0 / vc.c / vc.z)
        p1 = e_hue * (50000.0 / 13.0) * vc.nc * vc.ncb
        p2 = ac / vc.nbb

        h_sin = math.sin(h_rad)
        h_cos = math.cos(h_rad)

        gamma = 23.0 * (p2 + 0.305) * t / (23.0 * p1 + 11.0 * t * h_cos + 108.0 * t * h_sin)
        a = gamma * h_cos
        b = gamma * h_sin
        r_a = (460.0 * p2 + 451.0 * a + 288.0 * b) / 1403.0
        g_a = (460.0 * p2 - 891.0 * a - 261.0 * b) / 1403.0
        b_a = (460.0 * p2 - 220.0 * a - 6300.0 * b) / 1403.0

        rgb_c = np.array([
            _signum(x) * (100.0 / vc.fl) * math.pow(max(0.0, 27.13 * abs(x) / (400.0 - abs(x))), 1.0 / 0.42)
            for x in (r_a, g_a, b_a)
        ])
        rgb_f = rgb_c / vc.rgb_d
        return CAM16RGB_TO_XYZ @ rgb_f

    def to_argb(self, conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS) -> int:
        x, y, z = self.to_xyz(conditions)
        return argb_from_xyz(x, y, z)
