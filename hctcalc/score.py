"""Ranking of palette colors by their suitability as a theme source color."""
import logging
from typing import Dict, List

import numpy as np

from hctcalc.color_utils import difference_degrees, hex_from_argb
from hctcalc.hct import to_hct
from hctcalc.types import ScoredColor

logger = logging.getLogger(__name__)

TARGET_CHROMA = 48.0
WEIGHT_PROPORTION = 0.7
WEIGHT_CHROMA_ABOVE = 0.3
WEIGHT_CHROMA_BELOW = 0.1

# Near-neutral thresholds
CUTOFF_CHROMA = 5.0
CUTOFF_EXCITED_PROPORTION = 0.01
CUTOFF_TONE_DARK = 2.0
CUTOFF_TONE_LIGHT = 98.0
NEUTRAL_DEMOTION = 1000.0

# Hues within this many degrees on either side count toward a color's proportion
HUE_WINDOW = (-14, 16)


def _hue_index(hue: float) -> int:
    return int(round(hue)) % 360


def excited_proportions(hue_population: np.ndarray) -> np.ndarray:
    """
    Spread each hue's share of the population over its neighbouring hues.

    Args:
        hue_population: (360,) pixel counts per whole-degree hue

    Returns:
        (360,) share of all pixels whose hue is near each hue
    """
    total = hue_population.sum()
    if total <= 0:
        return np.zeros(360, dtype=np.float64)
    proportions = hue_population / total
    return sum(np.roll(proportions, offset) for offset in range(*HUE_WINDOW))


def rank(
    color_to_count: Dict[int, int],
    exclude_near_gray: bool = False,
) -> List[ScoredColor]:
    """
    Score every palette color, best first.

    The score grows with the population share of the color's hue
    neighbourhood and with chroma. Near-neutral colors (very low chroma,
    extreme tone, or a tiny population share) are demoted below every other
    color when exclude_near_gray is set, never removed.

    Args:
        color_to_count: Palette mapping ARGB colors to pixel counts
        exclude_near_gray: Whether to demote near-neutral colors

    Returns:
        Scored colors sorted by descending score, ties by ascending color value
    """
    colors = [(argb, count) for argb, count in color_to_count.items() if count > 0]
    if not colors:
        return []

    hcts = [to_hct(argb) for argb, _ in colors]

    hue_population = np.zeros(360, dtype=np.float64)
    for (_, count), hct in zip(colors, hcts):
        hue_population[_hue_index(hct.hue)] += count
    excited = excited_proportions(hue_population)

    scored = []
    for (argb, _), hct in zip(colors, hcts):
        proportion = float(excited[_hue_index(hct.hue)])
        proportion_score = proportion * 100.0 * WEIGHT_PROPORTION

        if hct.chroma < TARGET_CHROMA:
            chroma_weight = WEIGHT_CHROMA_BELOW
        else:
            chroma_weight = WEIGHT_CHROMA_ABOVE
        chroma_score = (hct.chroma - TARGET_CHROMA) * chroma_weight

        neutral = (
            hct.chroma < CUTOFF_CHROMA
            or hct.tone < CUTOFF_TONE_DARK
            or hct.tone > CUTOFF_TONE_LIGHT
            or proportion <= CUTOFF_EXCITED_PROPORTION
        )

        score = proportion_score + chroma_score
        if exclude_near_gray and neutral:
            score -= NEUTRAL_DEMOTION

        scored.append(ScoredColor(argb=argb, hct=hct, score=score, neutral=neutral))

    scored.sort(key=lambda s: (-s.score, s.argb))
    return scored


def score(
    color_to_count: Dict[int, int],
    want_count: int = 4,
    exclude_near_gray: bool = False,
    hue_diversity_threshold: float = 15.0,
) -> List[int]:
    """
    Pick up to want_count well-scored colors with distinct hues.

    Candidates are visited best first; one whose hue is closer than
    hue_diversity_threshold degrees to an already chosen color is skipped.

    Args:
        color_to_count: Palette mapping ARGB colors to pixel counts
        want_count: Maximum number of colors to return
        exclude_near_gray: Whether to demote near-neutral colors
        hue_diversity_threshold: Minimum hue distance between chosen colors

    Returns:
        ARGB colors, best first. Never empty for a non-empty palette.
    """
    if want_count < 1:
        raise ValueError(f"want_count must be >= 1, got {want_count}")

    ranked = rank(color_to_count, exclude_near_gray=exclude_near_gray)
    if not ranked:
        return []

    chosen: List[ScoredColor] = []
    for candidate in ranked:
        if any(
            difference_degrees(candidate.hct.hue, other.hct.hue) < hue_diversity_threshold
            for other in chosen
        ):
            continue
        chosen.append(candidate)
        if len(chosen) >= want_count:
            break

    if not chosen:
        chosen = [ranked[0]]

    logger.debug(
        "Top scored colors: "
        + ", ".join(f"{hex_from_argb(c.argb)} ({c.score:.2f})" for c in chosen)
    )
    return [c.argb for c in chosen]
