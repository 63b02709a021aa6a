"""
Primary quantization passes for dominant color extraction.

``median_cut`` is the modified median cut (MMCQ) used by ColorThief and
Leptonica: pixels are binned into a 5-bit-per-channel histogram, the
enclosing box is repeatedly split at the median of its longest axis,
first by population and then by population times volume, and each box
contributes its mean color. ``kmeans_quantize`` is the MiniBatchKMeans
alternative.

Both take an (N, 3) uint8 RGB array that the caller has already filtered
for visibility, and return colors ordered by prominence.
"""

from collections import Counter
from typing import Callable, List, NamedTuple, Tuple

import numpy as np
from loguru import logger
from sklearn.cluster import MiniBatchKMeans

from palettekit.services.colors.conversion import clamp_channel

SIGBITS = 5
RSHIFT = 8 - SIGBITS
HISTO_SIDE = 1 << SIGBITS
MAX_ITERATIONS = 1000
FRACT_BY_POPULATION = 0.75


class QuantizedColor(NamedTuple):
    """One representative color and the number of pixels it stands for."""
    rgb: Tuple[int, int, int]
    population: int


class ColorHistogram:
    """Pixel counts and channel sums per 5-bit histogram cell."""

    def __init__(self, pixels_rgb_u8: np.ndarray):
        pixels = np.asarray(pixels_rgb_u8, dtype=np.int64).reshape(-1, 3)
        quantized = pixels >> RSHIFT
        index = (quantized[:, 0] << (2 * SIGBITS)) + (quantized[:, 1] << SIGBITS) + quantized[:, 2]
        size = HISTO_SIDE ** 3
        shape = (HISTO_SIDE, HISTO_SIDE, HISTO_SIDE)

        self.counts = np.bincount(index, minlength=size).reshape(shape)
        self.sums = np.stack(
            [np.bincount(index, weights=pixels[:, c], minlength=size).reshape(shape)
             for c in range(3)],
            axis=-1,
        )


class VBox:
    """
    Axis-aligned box of histogram cells, shrunk to the cells it populates.

    Bounds are inclusive (lo, hi) pairs per channel.
    """
    __slots__ = ('histogram', 'bounds', 'count', 'volume')

    def __init__(self, histogram: ColorHistogram, bounds: List[Tuple[int, int]]):
        self.histogram = histogram
        view = histogram.counts[self._slices(bounds)]
        populated = np.nonzero(view)
        if len(populated[0]) == 0:
            self.bounds = list(bounds)
            self.count = 0
        else:
            self.bounds = [
                (lo + int(idx.min()), lo + int(idx.max()))
                for (lo, _), idx in zip(bounds, populated)
            ]
            self.count = int(view.sum())
        self.volume = int(np.prod([hi - lo + 1 for lo, hi in self.bounds]))

    @staticmethod
    def _slices(bounds):
        return tuple(slice(lo, hi + 1) for lo, hi in bounds)

    @property
    def splittable(self) -> bool:
        return self.count > 0 and self.volume > 1

    def average(self) -> Tuple[int, int, int]:
        """Mean of the actual pixel values inside the box."""
        sums = self.histogram.sums[self._slices(self.bounds)].reshape(-1, 3).sum(axis=0)
        return tuple(clamp_channel(s / self.count) for s in sums)

    def split(self) -> List["VBox"]:
        """Cut at the median of the longest axis into two populated boxes."""
        widths = [hi - lo + 1 for lo, hi in self.bounds]
        axis = int(np.argmax(widths))
        width = widths[axis]

        view = self.histogram.counts[self._slices(self.bounds)]
        other_axes = tuple(a for a in range(3) if a != axis)
        partial = np.cumsum(view.sum(axis=other_axes))
        total = partial[-1]

        median = int(np.argmax(partial > total / 2))
        left, right = median, width - 1 - median
        if left <= right:
            cut = min(width - 2, int(median + right / 2))
        else:
            cut = max(0, int(median - 1 - left / 2))

        # both halves must hold pixels
        valid = np.flatnonzero((partial[:-1] > 0) & (partial[:-1] < total))
        cut = int(valid[np.argmin(np.abs(valid - cut))])

        lo, hi = self.bounds[axis]
        first_bounds = list(self.bounds)
        second_bounds = list(self.bounds)
        first_bounds[axis] = (lo, lo + cut)
        second_bounds[axis] = (lo + cut + 1, hi)
        return [VBox(self.histogram, first_bounds), VBox(self.histogram, second_bounds)]


def _split_until(boxes: List[VBox], target: float,
                 priority: Callable[[VBox], int]) -> List[VBox]:
    boxes = list(boxes)
    iterations = 0
    while len(boxes) < target and iterations < MAX_ITERATIONS:
        candidates = [box for box in boxes if box.splittable]
        if not candidates:
            break
        box = max(candidates, key=priority)
        boxes.remove(box)
        boxes.extend(box.split())
        iterations += 1
    return boxes


def median_cut(pixels_rgb_u8: np.ndarray, max_colors: int) -> List[QuantizedColor]:
    """
    Quantize pixels with modified median cut.

    Args:
        pixels_rgb_u8: Visible pixels (N, 3) uint8
        max_colors: Upper bound on returned colors

    Returns:
        Up to ``max_colors`` colors ordered by population times box volume.
        Fewer are returned when the image has fewer distinct histogram cells.
    """
    if max_colors < 1:
        raise ValueError(f"max_colors must be >= 1, got {max_colors}")
    if len(pixels_rgb_u8) == 0:
        return []

    histogram = ColorHistogram(pixels_rgb_u8)
    full = [(0, HISTO_SIDE - 1)] * 3
    boxes = [VBox(histogram, full)]

    boxes = _split_until(boxes, FRACT_BY_POPULATION * max_colors, lambda b: b.count)
    boxes = _split_until(boxes, max_colors, lambda b: b.count * b.volume)
    boxes.sort(key=lambda b: b.count * b.volume, reverse=True)

    logger.debug(f"Median cut produced {len(boxes)} boxes for {len(pixels_rgb_u8)} pixels")
    return [QuantizedColor(box.average(), box.count) for box in boxes]


def kmeans_quantize(pixels_rgb_u8: np.ndarray, max_colors: int,
                    rng_seed: int = 42) -> List[QuantizedColor]:
    """
    Quantize pixels with MiniBatchKMeans.

    The cluster count is capped at the number of distinct colors, so
    near-monochrome images return fewer colors instead of failing.

    Args:
        pixels_rgb_u8: Visible pixels (N, 3) uint8
        max_colors: Upper bound on returned colors
        rng_seed: Random seed for deterministic clustering

    Returns:
        Cluster centers ordered by cluster size, largest first
    """
    if max_colors < 1:
        raise ValueError(f"max_colors must be >= 1, got {max_colors}")
    if len(pixels_rgb_u8) == 0:
        return []

    pixels = np.ascontiguousarray(np.asarray(pixels_rgb_u8, dtype=np.uint8).reshape(-1, 3))
    n_unique = len(np.unique(pixels, axis=0))
    k = min(max_colors, n_unique)
    logger.debug(f"Starting clustering with k={k}, {len(pixels)} pixels")

    kmeans = MiniBatchKMeans(
        n_clusters=k,
        random_state=rng_seed,
        batch_size=min(2048, len(pixels)),
        n_init="auto",
        max_iter=100,
    )
    labels = kmeans.fit_predict(pixels.astype(np.float32))
    label_counts = Counter(labels.tolist())

    clusters = []
    for i, center in enumerate(kmeans.cluster_centers_):
        count = label_counts.get(i, 0)
        if count == 0:
            continue
        rgb = tuple(clamp_channel(c) for c in center)
        clusters.append(QuantizedColor(rgb, count))

    clusters.sort(key=lambda c: -c.population)
    return clusters
