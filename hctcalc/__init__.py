"""hctcalc: dominant color of an image in the HCT color space."""
from hctcalc.hct import hct_to_argb, solve_to_hct, to_hct
from hctcalc.pipeline import HctPipeline, extract_hct, source_color
from hctcalc.quantize import quantize
from hctcalc.score import score
from hctcalc.types import (
    Hct,
    ExtractionConfig,
    QuantizerResult,
    HctError,
    EmptyInputError,
    DegenerateQuantizationError,
    InvalidColorComponentError,
    ImageLoadError,
)

__version__ = "0.1.0"
__all__ = [
    "Hct",
    "ExtractionConfig",
    "QuantizerResult",
    "HctPipeline",
    "extract_hct",
    "source_color",
    "quantize",
    "score",
    "to_hct",
    "hct_to_argb",
    "solve_to_hct",
    "HctError",
    "EmptyInputError",
    "DegenerateQuantizationError",
    "InvalidColorComponentError",
    "ImageLoadError",
]
