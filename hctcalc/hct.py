"""sRGB <-> HCT conversion.

Hue and chroma come from CAM16, tone is CIE L*. Reading the HCT of an
existing color is closed form; constructing a color from a hue, chroma and
tone needs a search, since not every combination is inside the sRGB gamut.
"""
import logging
from typing import Optional

from hctcalc.cam16 import DEFAULT_VIEWING_CONDITIONS, Cam16, ViewingConditions
from hctcalc.color_utils import (
    argb_from_lstar,
    lstar_from_argb,
    sanitize_degrees,
)
from hctcalc.types import Hct

logger = logging.getLogger(__name__)

# Search tolerances
CHROMA_SEARCH_ENDPOINT = 0.4
LIGHTNESS_SEARCH_ENDPOINT = 0.01
DE_MAX = 1.0
DL_MAX = 0.2


def to_hct(argb: int, conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS) -> Hct:
    """
    Compute the HCT triple of an sRGB color.

    Args:
        argb: Packed ARGB color
        conditions: CAM16 viewing conditions

    Returns:
        Hct with hue in [0, 360), chroma >= 0 and tone in [0, 100]
    """
    cam = Cam16.from_argb(argb, conditions)
    return Hct(
        hue=sanitize_degrees(cam.hue),
        chroma=max(0.0, cam.chroma),
        tone=lstar_from_argb(argb),
    )


def hct_to_argb(
    hue: float,
    chroma: float,
    tone: float,
    conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
) -> int:
    """
    Find the sRGB color closest to the requested hue, chroma and tone.

    Tone is matched first; when the requested chroma is out of gamut the
    highest reachable chroma for that hue and tone is used instead.

    Args:
        hue: Hue in degrees, any range
        chroma: Requested chroma
        tone: Requested L*, clamped to [0, 100]

    Returns:
        Packed ARGB color
    """
    hue = sanitize_degrees(hue)
    tone = min(100.0, max(0.0, tone))

    if chroma < 1.0 or round(tone) <= 0.0 or round(tone) >= 100.0:
        return argb_from_lstar(tone)

    high = chroma
    mid = chroma
    low = 0.0
    is_first_loop = True
    answer: Optional[Cam16] = None

    while abs(low - high) >= CHROMA_SEARCH_ENDPOINT:
        possible_answer = _find_cam_by_j(hue, mid, tone, conditions)

        if is_first_loop:
            if possible_answer is not None:
                return possible_answer.to_argb(conditions)
            is_first_loop = False
            mid = low + (high - low) / 2.0
            continue

        if possible_answer is None:
            high = mid
        else:
            answer = possible_answer
            low = mid

        mid = low + (high - low) / 2.0

    if answer is None:
        logger.debug(f"No in-gamut color for H{hue:.1f} C{chroma:.1f} T{tone:.1f}, using gray")
        return argb_from_lstar(tone)

    return answer.to_argb(conditions)


def solve_to_hct(
    hue: float,
    chroma: float,
    tone: float,
    conditions: ViewingConditions = DEFAULT_VIEWING_CONDITIONS,
) -> Hct:
    """HCT of the closest in-gamut color to the requested hue, chroma and tone."""
    return to_hct(hct_to_argb(hue, chroma, tone, conditions), conditions)


def _find_cam_by_j(
    hue: float,
    chroma: float,
    tone: float,
    conditions: ViewingConditions,
) -> Optional[Cam16]:
    """Binary search on CAM16 J for a color with the given hue, chroma and L*."""
    low = 0.0
    high = 100.0
    best_dl = 1000.0
    best_de = 1000.0
    best_cam: Optional[Cam16] = None

    while abs(low - high) > LIGHTNESS_SEARCH_ENDPOINT:
        mid = low + (high - low) / 2.0

        cam_before_clip = Cam16.from_jch(mid, chroma, hue, conditions)
        clipped = cam_before_clip.to_argb(conditions)
        clipped_lstar = lstar_from_argb(clipped)
        d_l = abs(tone - clipped_lstar)

        if d_l < DL_MAX:
            cam_clipped = Cam16.from_argb(clipped, conditions)
            d_e = cam_clipped.distance(
                Cam16.from_jch(cam_clipped.j, cam_clipped.chroma, hue, conditions)
            )
            if d_e <= DE_MAX and d_e <= best_de:
                best_dl = d_l
                best_de = d_e
                best_cam = cam_clipped

        if best_dl == 0.0 and best_de == 0.0:
            break

        if clipped_lstar < tone:
            low = mid
        else:
            high = mid

    return best_cam
