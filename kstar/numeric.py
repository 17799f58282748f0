"""
Transformation probabilities for numeric attributes.

The probability of transforming value a into value b decays exponentially
with their distance, measured in units of the attribute's observed range:

P*(b|a) = scale * exp(-2 * scale * |a - b| / range)

The scale factor (the inverse radius of the sphere of influence) is
resolved once per test value and training-set generation.
"""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from config import KStarConfig, RootFinderConfig
from .blend import (
    EntropyStats,
    SphereStats,
    bisect_sphere,
    entropic_search,
    entropy_stats,
    missing_probability,
    sphere_stats,
)
from .cache import AttributeCache, CacheEntry
from .permutation import RandomClassPermutationTable

logger = logging.getLogger(__name__)


def pstar(distance, scale: float):
    """Transformation probability at a normalised distance."""
    return scale * np.exp(-2.0 * distance * scale)


class NumericSimilarity:
    """
    Similarity of values of one numeric attribute.

    A training column whose values are all equal (zero range) is neutral:
    every pair with a value gets probability 1.
    """

    def __init__(self, column: np.ndarray,
                 cache: AttributeCache,
                 config: KStarConfig,
                 root_finder: RootFinderConfig,
                 permutations: Optional[RandomClassPermutationTable] = None,
                 num_classes: int = 0):
        """
        Args:
            column: Training values of the attribute, NaN missing
            cache: Cache for resolved scale factors
            config: Classifier options
            root_finder: Search tolerances
            permutations: Class permutations; enables entropic blending
            num_classes: Number of class labels (entropic blending only)
        """
        self.cache = cache
        self.config = config
        self.root_finder = root_finder
        self.num_classes = num_classes

        column = np.asarray(column, dtype=np.float64)
        present = ~np.isnan(column)
        self._values = column[present]
        self.count = int(self._values.shape[0])
        self.range = float(self._values.max() - self._values.min()) if self.count else 0.0

        self._class_columns = None
        if permutations is not None:
            self._class_columns = permutations.restrict(present)

    @property
    def entropic(self) -> bool:
        return self._class_columns is not None

    @property
    def is_constant(self) -> bool:
        return self.count > 0 and self.range == 0.0

    def resolve(self, test_value: float) -> CacheEntry:
        """
        Scale factor and missing-value probability for a test value.

        Keyed by the exact test value, so the cache grows by one entry per
        distinct value queried within a training-set generation.
        """
        key = float(test_value)
        return self.cache.get_or_compute(key, lambda: self._compute(key))

    def trans_probs(self, test_value: float, train_values: np.ndarray) -> np.ndarray:
        """
        Transformation probabilities from a test value to training values.

        Args:
            test_value: Value of the test instance (not missing)
            train_values: Training values, NaN missing

        Returns:
            Probabilities, same shape as train_values
        """
        entry = self.resolve(test_value)
        train_values = np.asarray(train_values, dtype=np.float64)
        missing = np.isnan(train_values)

        if self.is_constant or self.count == 0:
            probs = np.ones(train_values.shape)
        else:
            distances = np.abs(train_values - test_value) / self.range
            probs = pstar(distances, entry.value)
        probs[missing] = entry.missing_prob
        return probs

    def trans_prob(self, test_value: float, train_value: float) -> float:
        return float(self.trans_probs(test_value, np.array([train_value]))[0])

    # -------------------------------------------------------------------------
    # Parameter resolution
    # -------------------------------------------------------------------------

    def _neutral(self) -> CacheEntry:
        # Constant or empty column only
        return CacheEntry(value=1.0,
                          missing_prob=missing_probability(self.config.missing_mode, 1.0, 1.0))

    def _compute(self, test_value: float) -> CacheEntry:
        if self.count == 0 or self.is_constant:
            return self._neutral()

        distances = np.abs(self._values - test_value) / self.range
        epsilon = self.root_finder.epsilon
        lowest = float(distances.min())
        lowest_count = int(np.sum(np.abs(distances - lowest) < epsilon))
        beyond = distances[distances > lowest + epsilon]
        if beyond.size == 0:
            # All training values sit at the same distance from the test value
            prob = float(pstar(lowest, 1.0))
            return CacheEntry(value=1.0,
                              missing_prob=missing_probability(self.config.missing_mode,
                                                               min(1.0, prob), prob))

        # Scale at which the closest and next closest values separate
        root = 1.0 / (float(beyond.min()) - lowest)
        if self.entropic:
            scale, stats = self._scale_using_entropy(distances, root)
        else:
            scale, stats = self._scale_using_blend(distances, root, lowest_count)

        missing_prob = missing_probability(self.config.missing_mode,
                                           stats.min_prob, stats.avg_prob)
        logger.debug("Attribute %d value %.6g: scale=%.6g missing=%.6g",
                     self.cache.attr_index, test_value, scale, missing_prob)
        return CacheEntry(value=scale, missing_prob=missing_prob)

    def _scale_using_blend(self, distances: np.ndarray, root: float,
                           lowest_count: int) -> Tuple[float, SphereStats]:
        blend = self.config.global_blend
        aim_for = (self.count - lowest_count) * blend / 100.0 + lowest_count
        if blend == 0:
            aim_for += 1.0
        lower = self.root_finder.accuracy / 2.0
        upper = root * 16.0

        def evaluate(scale: float) -> SphereStats:
            return sphere_stats(pstar(distances, scale), self.count)

        return bisect_sphere(evaluate, aim_for, lower, upper, root, self.root_finder)

    def _scale_using_entropy(self, distances: np.ndarray,
                             root: float) -> Tuple[float, EntropyStats]:
        lower = self.root_finder.accuracy / 2.0
        upper = root * 8.0

        def raw(scale: float) -> EntropyStats:
            return entropy_stats(pstar(distances, scale), self._class_columns,
                                 self.num_classes, self.count)

        top = raw(upper)
        bottom = raw(lower)
        rand_scale = bottom.rand_entropy - top.rand_entropy

        def evaluate(log_scale: float) -> EntropyStats:
            stats = raw(math.exp(log_scale))
            if rand_scale > 0:
                # Both entropies on the random entropy's range
                stats.rand_entropy = (stats.rand_entropy - top.rand_entropy) / rand_scale
                stats.act_entropy = (stats.act_entropy - top.act_entropy) / rand_scale
            return stats

        log_lower, log_upper = math.log(lower), math.log(upper)
        step = (log_upper - log_lower) / 20.0
        log_scale, stats = entropic_search(evaluate, log_lower, log_upper,
                                           step, self.root_finder)
        return math.exp(log_scale), stats
