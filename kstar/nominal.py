"""
Transformation probabilities for nominal attributes.

A symbol is kept with the stop probability, otherwise it is replaced by a
symbol drawn uniformly from the attribute's n values:

P*(b|a) = stop + (1 - stop) / n    if a == b
P*(b|a) = (1 - stop) / n           otherwise

The stop probability is resolved once per test symbol and training-set
generation, then served from the attribute's cache.
"""

import logging
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


class NominalSimilarity:
    """
    Similarity of symbols of one nominal attribute.

    Statistics of the training column (symbol distribution, count of
    instances with a value) are taken once, when the object is built for a
    training-set generation.
    """

    def __init__(self, column: np.ndarray, num_values: int,
                 cache: AttributeCache,
                 config: KStarConfig,
                 root_finder: RootFinderConfig,
                 permutations: Optional[RandomClassPermutationTable] = None,
                 num_classes: int = 0):
        """
        Args:
            column: Training values of the attribute (label indices, NaN missing)
            num_values: Number of labels of the attribute
            cache: Cache for resolved stop probabilities
            config: Classifier options
            root_finder: Search tolerances
            permutations: Class permutations; enables entropic blending
            num_classes: Number of class labels (entropic blending only)
        """
        self.num_values = max(num_values, 1)
        self.cache = cache
        self.config = config
        self.root_finder = root_finder
        self.num_classes = num_classes

        column = np.asarray(column, dtype=np.float64)
        present = ~np.isnan(column)
        self._codes = column[present].astype(np.intp)
        self.distribution = np.bincount(self._codes, minlength=self.num_values)
        self.total_count = int(present.sum())

        self._class_columns = None
        if permutations is not None:
            self._class_columns = permutations.restrict(present)

    @property
    def entropic(self) -> bool:
        return self._class_columns is not None

    def resolve(self, test_value: float) -> CacheEntry:
        """Stop probability and missing-value probability for a test symbol."""
        symbol = int(test_value)
        return self.cache.get_or_compute(symbol, lambda: self._compute(symbol))

    def trans_probs(self, test_value: float, train_values: np.ndarray) -> np.ndarray:
        """
        Transformation probabilities from a test symbol to training values.

        Args:
            test_value: Label index of the test instance (not missing)
            train_values: Label indices of training instances, NaN missing

        Returns:
            Probabilities, same shape as train_values
        """
        entry = self.resolve(test_value)
        stop = entry.value
        train_values = np.asarray(train_values, dtype=np.float64)
        missing = np.isnan(train_values)

        probs = np.full(train_values.shape, (1.0 - stop) / self.num_values)
        same = ~missing & (train_values == int(test_value))
        probs[same] += stop
        probs[missing] = entry.missing_prob
        return probs

    def trans_prob(self, test_value: float, train_value: float) -> float:
        return float(self.trans_probs(test_value, np.array([train_value]))[0])

    def pstar(self, symbol: int, stop: float) -> np.ndarray:
        """P*(b|symbol) for every label b."""
        probs = np.full(self.num_values, (1.0 - stop) / self.num_values)
        if 0 <= symbol < self.num_values:
            probs[symbol] += stop
        return probs

    # -------------------------------------------------------------------------
    # Parameter resolution
    # -------------------------------------------------------------------------

    def _compute(self, symbol: int) -> CacheEntry:
        if self.total_count == 0:
            # No training value to blend over: uniform default
            stop = 1.0 - self.config.global_blend / 100.0
            uniform = 1.0 / self.num_values
            smallest, average = uniform, uniform
        else:
            if self.entropic:
                stop, stats = self._stop_using_entropy(symbol)
            else:
                stop, stats = self._stop_using_blend(symbol)
            smallest, average = stats.min_prob, stats.avg_prob

        missing_prob = missing_probability(self.config.missing_mode, smallest, average)
        logger.debug("Attribute %d symbol %d: stop=%.6g missing=%.6g",
                     self.cache.attr_index, symbol, stop, missing_prob)
        return CacheEntry(value=stop, missing_prob=missing_prob)

    def _bounds(self) -> Tuple[float, float]:
        half = self.root_finder.accuracy / 2.0
        return 0.0 + half, 1.0 - half

    def _stop_using_blend(self, symbol: int) -> Tuple[float, SphereStats]:
        count = self.distribution[symbol] if 0 <= symbol < self.num_values else 0
        aim_for = (self.total_count - count) * self.config.global_blend / 100.0 + count
        lower, upper = self._bounds()
        start = 1.0 - self.config.global_blend / 100.0

        def evaluate(stop: float) -> SphereStats:
            return sphere_stats(self.pstar(symbol, stop), self.total_count,
                                counts=self.distribution)

        return bisect_sphere(evaluate, aim_for, lower, upper, start, self.root_finder)

    def _stop_using_entropy(self, symbol: int) -> Tuple[float, EntropyStats]:
        lower, upper = self._bounds()

        def evaluate(stop: float) -> EntropyStats:
            pstar = self.pstar(symbol, stop)[self._codes]
            return entropy_stats(pstar, self._class_columns, self.num_classes,
                                 self.total_count)

        return entropic_search(evaluate, lower, upper,
                               self.root_finder.initial_step, self.root_finder)
