"""
Dominant color extraction service.

This module implements the extraction pipeline for PaletteKit:
a primary quantization pass, a frequency-bucket fallback for images the
quantizer cannot fill, and channel-offset synthesis so the palette always
has exactly the requested number of entries.
"""

from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from palettekit.config import config
from palettekit.exceptions import ColorExtractionError
from palettekit.schemas import ColorValue, ExtractionReport
from palettekit.services.colors.naming import create_color_value
from palettekit.services.colors.pixels import PixelBuffer
from palettekit.services.colors.quantize import median_cut, kmeans_quantize
from palettekit.services.observability import MetricsCollector, performance_monitor

RGBTuple = Tuple[int, int, int]

# Channel offsets applied, in order, to each generation of synthesized colors
SYNTHESIS_OFFSETS = [
    (24, 0, 0),
    (0, 24, 0),
    (0, 0, 24),
    (-24, -24, -24),
    (24, 24, 24),
    (-24, 0, 0),
    (0, -24, 0),
    (0, 0, -24),
]


def visible_pixels(pixels: PixelBuffer, min_alpha: int, stride: int = 1) -> np.ndarray:
    """
    Sample every ``stride``-th pixel in row-major order and drop those
    whose alpha is below ``min_alpha``.

    Returns:
        (N, 3) uint8 RGB array
    """
    flat = pixels.flat()[::max(1, stride)]
    return flat[flat[:, 3] >= min_alpha, :3]


def primary_pass(pixels: PixelBuffer, count: int,
                 algorithm: str = "median_cut",
                 quality: int = 1,
                 min_alpha: Optional[int] = None,
                 rng_seed: Optional[int] = None) -> List[RGBTuple]:
    """
    Run the quantization pass and return distinct colors by prominence.

    Args:
        pixels: Decoded image
        count: Requested palette size
        algorithm: ``median_cut`` or ``kmeans``
        quality: Pixel stride; 1 reads every pixel
        min_alpha: Opacity cut, defaults to ``config.QUANTIZE_MIN_ALPHA``
        rng_seed: k-means seed, defaults to ``config.KMEANS_SEED``

    Returns:
        Up to ``count`` RGB tuples without exact duplicates
    """
    if not config.validate_algorithm(algorithm):
        raise ValueError(f"Unsupported extraction algorithm: {algorithm}")

    min_alpha = config.QUANTIZE_MIN_ALPHA if min_alpha is None else min_alpha
    sample = visible_pixels(pixels, min_alpha, stride=quality)
    if algorithm == "kmeans":
        seed = config.KMEANS_SEED if rng_seed is None else rng_seed
        quantized = kmeans_quantize(sample, count, rng_seed=seed)
    else:
        quantized = median_cut(sample, count)

    colors: List[RGBTuple] = []
    for entry in quantized:
        if entry.rgb not in colors:
            colors.append(entry.rgb)
    return colors[:count]


def frequency_pass(pixels: PixelBuffer,
                   min_alpha: Optional[int] = None,
                   target_samples: Optional[int] = None) -> List[RGBTuple]:
    """
    Bucket exact RGB values of a strided sample by frequency.

    The stride grows with the image so roughly ``target_samples`` pixels
    are read. Ties in frequency keep first-encountered order.

    Returns:
        Distinct RGB tuples, most frequent first
    """
    min_alpha = config.FALLBACK_MIN_ALPHA if min_alpha is None else min_alpha
    target_samples = config.FALLBACK_TARGET_SAMPLES if target_samples is None else target_samples

    stride = max(1, pixels.pixel_count // max(1, target_samples))
    sample = visible_pixels(pixels, min_alpha, stride=stride).astype(np.int64)
    if len(sample) == 0:
        return []

    packed = (sample[:, 0] << 16) | (sample[:, 1] << 8) | sample[:, 2]
    values, first_index, counts = np.unique(packed, return_index=True, return_counts=True)
    order = np.lexsort((first_index, -counts))

    return [
        (int(v >> 16) & 0xFF, int(v >> 8) & 0xFF, int(v) & 0xFF)
        for v in values[order]
    ]


def synthesize_variations(existing: List[RGBTuple], needed: int) -> List[RGBTuple]:
    """
    Derive ``needed`` new colors from ``existing`` by channel offsets.

    Works in generations: every offset is applied to every base color in
    turn, then the colors that generation created become the bases of
    the next one. Clamping at 0 and 255 only ever merges candidates, so
    flat black or white images still walk outwards across the offset
    lattice instead of running dry.

    Raises:
        ColorExtractionError: If there is nothing to derive from, or a
            generation adds no new color before ``needed`` is reached
    """
    if needed <= 0:
        return []
    if not existing:
        raise ColorExtractionError("Cannot synthesize colors without a base color")

    seen = set(existing)
    created: List[RGBTuple] = []
    bases = list(existing)

    while len(created) < needed:
        generation: List[RGBTuple] = []
        for offset in SYNTHESIS_OFFSETS:
            for base in bases:
                candidate = tuple(
                    int(np.clip(channel + delta, 0, 255))
                    for channel, delta in zip(base, offset)
                )
                if candidate in seen:
                    continue
                seen.add(candidate)
                generation.append(candidate)
                if len(created) + len(generation) == needed:
                    break
            if len(created) + len(generation) == needed:
                break
        if not generation:
            raise ColorExtractionError(f"Could only synthesize {len(created)} of {needed} colors")
        created.extend(generation)
        bases = generation

    return created


def extract_colors_detailed(pixels: PixelBuffer,
                            count: Optional[int] = None,
                            algorithm: Optional[str] = None,
                            quality: int = 1,
                            collector: Optional[MetricsCollector] = None) -> ExtractionReport:
    """
    Extract exactly ``count`` colors and report where each came from.

    Args:
        pixels: Decoded image
        count: Palette size, defaults to ``config.DEFAULT_COLOR_COUNT``
        algorithm: Primary pass, defaults to ``config.EXTRACTION_ALGORITHM``
        quality: Pixel stride for the primary pass
        collector: Optional metrics collector

    Returns:
        ExtractionReport whose ``colors`` has length ``count``

    Raises:
        ValueError: If ``count`` or ``algorithm`` is invalid
        ColorExtractionError: If the image has no visible pixels
    """
    count = config.DEFAULT_COLOR_COUNT if count is None else count
    algorithm = algorithm or config.EXTRACTION_ALGORITHM
    if not config.validate_color_count(count):
        raise ValueError(f"count must be between 1 and {config.MAX_COLOR_COUNT}, got {count}")
    if not config.validate_algorithm(algorithm):
        raise ValueError(f"Unsupported extraction algorithm: {algorithm}")
    if pixels.pixel_count == 0:
        raise ColorExtractionError("Image has no pixel data")

    with performance_monitor("extract_colors", collector,
                             width=pixels.width, height=pixels.height,
                             count=count, algorithm=algorithm):
        primary_failed = False
        try:
            colors = primary_pass(pixels, count, algorithm=algorithm, quality=quality)
        except Exception as e:
            logger.warning(f"Primary {algorithm} pass failed, using frequency fallback: {e}")
            colors = []
            primary_failed = True
        primary_count = len(colors)

        fallback_count = 0
        if len(colors) < count:
            logger.debug(f"Primary pass returned {len(colors)}/{count} colors, running frequency pass")
            for rgb in frequency_pass(pixels):
                if len(colors) >= count:
                    break
                if rgb not in colors:
                    colors.append(rgb)
                    fallback_count += 1

        if not colors:
            raise ColorExtractionError("Image has no visible pixels")

        synthesized = synthesize_variations(colors, count - len(colors))
        if synthesized:
            logger.warning(f"Synthesized {len(synthesized)} color variations to reach {count}")
        colors.extend(synthesized)

    logger.info(f"Extracted {count} colors from {pixels.width}x{pixels.height} image "
                f"(primary={primary_count}, fallback={fallback_count}, "
                f"synthesized={len(synthesized)})")

    return ExtractionReport(
        colors=[create_color_value(*rgb) for rgb in colors],
        algorithm=algorithm,
        primary_count=primary_count,
        fallback_count=fallback_count,
        synthesized_count=len(synthesized),
        primary_failed=primary_failed,
    )


def extract_colors(pixels: PixelBuffer, count: Optional[int] = None, **kwargs) -> List[ColorValue]:
    """
    Extract an ordered palette of exactly ``count`` colors.

    Same arguments as ``extract_colors_detailed``.
    """
    return extract_colors_detailed(pixels, count, **kwargs).colors


def extract_dominant_color(pixels: PixelBuffer, **kwargs) -> ColorValue:
    """Return the most prominent color of an image: the first entry of a five color palette."""
    return extract_colors_detailed(pixels, 5, **kwargs).colors[0]
