"""Core types for the dominant color pipeline."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np


RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Hct:
    """Hue, chroma and tone of a color."""
    hue: float
    chroma: float
    tone: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.hue, self.chroma, self.tone)


@dataclass
class Histogram:
    """Distinct colors with their pixel counts.

    Colors are packed ARGB values in ascending order, so the histogram only
    depends on the multiset of input pixels.
    """
    colors: np.ndarray  # (N,) uint32, unique, ascending
    counts: np.ndarray  # (N,) int64, all > 0

    def __len__(self) -> int:
        return int(self.colors.shape[0])

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def to_dict(self) -> Dict[int, int]:
        return {int(c): int(n) for c, n in zip(self.colors, self.counts)}


@dataclass
class QuantizerResult:
    """Output of the quantizer: representative colors and their populations."""
    color_to_count: Dict[int, int] = field(default_factory=dict)
    inertia_history: List[float] = field(default_factory=list)
    iterations: int = 0

    @property
    def total(self) -> int:
        return sum(self.color_to_count.values())


@dataclass
class ScoredColor:
    """Palette color with its desirability score."""
    argb: int
    hct: Hct
    score: float
    neutral: bool = False


@dataclass
class ExtractionConfig:
    """Configuration for dominant color extraction."""
    # Quantization
    max_colors: int = 128
    max_iterations: int = 10

    # Sampling: the image is resized to at most bitmap_size**2 pixels
    bitmap_size: int = 128

    # Scoring
    exclude_near_gray: bool = False
    hue_diversity_threshold: float = 15.0

    # Histogram aggregation
    workers: Optional[int] = None  # None = auto
    shard_size: int = 65536

    def __post_init__(self):
        if self.max_colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {self.max_colors}")
        if self.bitmap_size < 1:
            raise ValueError(f"bitmap_size must be >= 1, got {self.bitmap_size}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.shard_size < 1:
            raise ValueError(f"shard_size must be >= 1, got {self.shard_size}")
        if not 0.0 <= self.hue_diversity_threshold <= 180.0:
            raise ValueError(
                f"hue_diversity_threshold must be within [0, 180], got {self.hue_diversity_threshold}"
            )


class HctError(Exception):
    """Base exception for dominant color extraction errors."""
    pass


class EmptyInputError(HctError):
    """Raised when there are no pixels to quantize."""
    pass


class DegenerateQuantizationError(HctError):
    """Raised when a palette of fewer than one color is requested."""
    pass


class InvalidColorComponentError(HctError):
    """Raised when a pixel channel falls outside 0-255."""
    pass


class ImageLoadError(HctError):
    """Raised when an image file cannot be decoded."""
    pass
