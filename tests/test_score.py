"""Tests for palette scoring."""
import pytest

from hctcalc.color_utils import argb_from_rgb, difference_degrees
from hctcalc.hct import to_hct
from hctcalc.score import rank, score

RED = argb_from_rgb(255, 0, 0)
DARK_RED = argb_from_rgb(200, 20, 20)
BLUE = argb_from_rgb(0, 0, 255)
GREEN = argb_from_rgb(0, 200, 0)
WHITE = argb_from_rgb(255, 255, 255)
GRAY = argb_from_rgb(128, 128, 128)


class TestScore:
    """Test color ranking and selection."""

    def test_empty_palette(self):
        assert score({}) == []
        assert rank({}) == []

    def test_dominant_red(self):
        assert score({RED: 90, BLUE: 10}, want_count=1) == [RED]

    def test_population_wins_at_similar_chroma(self):
        assert score({RED: 10, BLUE: 90}, want_count=1) == [BLUE]

    def test_hue_diversity(self):
        palette = {RED: 50, DARK_RED: 40, BLUE: 10}
        chosen = score(palette, want_count=2, hue_diversity_threshold=15.0)

        assert chosen == [RED, BLUE]

    def test_zero_threshold_allows_similar_hues(self):
        palette = {RED: 50, DARK_RED: 40, BLUE: 10}
        chosen = score(palette, want_count=3, hue_diversity_threshold=0.0)

        assert len(chosen) == 3

    def test_chosen_hues_are_spread(self):
        palette = {RED: 30, DARK_RED: 30, BLUE: 20, GREEN: 20}
        chosen = score(palette, want_count=4, hue_diversity_threshold=30.0)
        hues = [to_hct(c).hue for c in chosen]

        for i, a in enumerate(hues):
            for b in hues[i + 1:]:
                assert difference_degrees(a, b) >= 30.0

    def test_near_gray_demoted(self):
        palette = {WHITE: 90, BLUE: 10}

        assert score(palette, want_count=1) == [WHITE]
        assert score(palette, want_count=1, exclude_near_gray=True) == [BLUE]

    def test_near_gray_never_empties_result(self):
        palette = {WHITE: 50, GRAY: 50}
        chosen = score(palette, want_count=1, exclude_near_gray=True)
        assert len(chosen) == 1
        assert chosen[0] in palette

    def test_rank_order(self):
        palette = {RED: 40, BLUE: 25, GREEN: 25, GRAY: 10}
        ranked = rank(palette)
        keys = [(-s.score, s.argb) for s in ranked]

        assert keys == sorted(keys)
        assert {s.argb for s in ranked} == set(palette)

    def test_rank_flags_neutral(self):
        ranked = {s.argb: s for s in rank({GRAY: 50, RED: 50})}
        assert ranked[GRAY].neutral
        assert not ranked[RED].neutral

    def test_deterministic(self):
        palette = {RED: 30, BLUE: 30, GREEN: 30, GRAY: 10}
        reordered = dict(reversed(list(palette.items())))
        assert score(palette) == score(reordered)

    def test_want_count_validation(self):
        with pytest.raises(ValueError, match="want_count must be >= 1"):
            score({RED: 1}, want_count=0)
