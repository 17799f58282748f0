"""
Blend Comparison for the K* classifier.

Cross-validates one classifier per blend setting on the same folds:
- Fixed global blends (default 0, 20, 50, 80, 100 percent)
- Entropic auto-blend (nominal class only)

Accuracy is compared for a nominal class, RMSE for a numeric class.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from config import COMPARISON_BLENDS, CV_FOLDS, RANDOM_SEED, setup_logging
from kstar.classifier import KStar
from kstar.dataset import Attribute, Dataset
from .metrics import cross_validate

logger = logging.getLogger(__name__)


@dataclass
class BlendResult:
    """Cross-validation result of one blend setting."""
    label: str
    global_blend: int
    entropic_auto_blend: bool
    scoring: str
    mean_score: float
    std_score: float
    elapsed: float


class BlendComparison:
    """
    Compare blend settings on a dataset.

    Usage:
        comparison = BlendComparison(dataset)
        results = comparison.run_comparison()
        comparison.print_results()
    """

    def __init__(self, dataset: Dataset,
                 blends: Sequence[int] = COMPARISON_BLENDS,
                 include_entropic: bool = True,
                 missing_mode: str = 'average',
                 n_folds: int = CV_FOLDS,
                 random_state: Optional[int] = RANDOM_SEED):
        """
        Initialize comparison.

        Args:
            dataset: Data with a class attribute assigned
            blends: Global blend percentages to try
            include_entropic: Also try entropic auto-blend (skipped for a
                numeric class)
            missing_mode: Missing value treatment for every classifier
            n_folds: Cross-validation folds
            random_state: Seed of the fold split, shared by all settings
        """
        self.dataset = dataset
        self.blends = tuple(blends)
        self.include_entropic = include_entropic
        self.missing_mode = missing_mode
        self.n_folds = n_folds
        self.random_state = random_state
        self.results: List[BlendResult] = []

    @property
    def higher_is_better(self) -> bool:
        return self.dataset.class_attribute.is_nominal

    def _settings(self) -> List[KStar]:
        classifiers = [KStar(global_blend=blend, missing_mode=self.missing_mode)
                       for blend in self.blends]
        if self.include_entropic and self.dataset.class_attribute.is_nominal:
            classifiers.append(KStar(entropic_auto_blend=True,
                                     missing_mode=self.missing_mode))
        return classifiers

    @staticmethod
    def _label(classifier: KStar) -> str:
        if classifier.entropic_auto_blend:
            return "Entropic"
        return f"Blend {classifier.global_blend}%"

    def run_comparison(self) -> List[BlendResult]:
        """
        Cross-validate every blend setting.

        Returns:
            List of BlendResult, in the order the settings were tried
        """
        self.results = []
        for classifier in self._settings():
            label = self._label(classifier)
            logger.info("Cross-validating %s...", label)
            start = time.time()
            cv = cross_validate(classifier, self.dataset, n_folds=self.n_folds,
                                random_state=self.random_state)
            self.results.append(BlendResult(
                label=label,
                global_blend=classifier.global_blend,
                entropic_auto_blend=classifier.entropic_auto_blend,
                scoring=cv.scoring,
                mean_score=cv.mean_score,
                std_score=cv.std_score,
                elapsed=time.time() - start,
            ))
        logger.info("Blend comparison complete (%d settings)", len(self.results))
        return self.results

    def get_best(self) -> BlendResult:
        """Best setting: highest accuracy, or lowest RMSE for a numeric class."""
        if not self.results:
            raise ValueError("No results. Run run_comparison() first.")
        if self.higher_is_better:
            return max(self.results, key=lambda r: r.mean_score)
        return min(self.results, key=lambda r: r.mean_score)

    def print_results(self):
        """Print comparison results as a formatted table."""
        if not self.results:
            print("No results. Run run_comparison() first.")
            return

        scoring = self.results[0].scoring
        print("\n" + "=" * 60)
        print(f"BLEND COMPARISON ({self.dataset.name}, {self.n_folds}-fold CV)")
        print("=" * 60)
        print(f"{'Setting':<14} {scoring.upper():<10} {'Std':<10} {'Time (s)':<10}")
        print("-" * 60)

        for r in self.results:
            print(f"{r.label:<14} {r.mean_score:<10.4f} {r.std_score:<10.4f} {r.elapsed:<10.3f}")

        print("-" * 60)

        best = self.get_best()
        print(f"\nBest Setting: {best.label} ({scoring}: {best.mean_score:.4f})")

    def to_dict(self) -> List[Dict]:
        """Export results as list of dictionaries."""
        return [
            {
                'label': r.label,
                'global_blend': r.global_blend,
                'entropic_auto_blend': r.entropic_auto_blend,
                'scoring': r.scoring,
                'mean_score': r.mean_score,
                'std_score': r.std_score,
                'elapsed': r.elapsed,
            }
            for r in self.results
        ]


def compare_blends(dataset: Dataset,
                   blends: Sequence[int] = COMPARISON_BLENDS,
                   include_entropic: bool = True,
                   n_folds: int = CV_FOLDS,
                   random_state: Optional[int] = RANDOM_SEED,
                   verbose: bool = True) -> BlendComparison:
    """
    Convenience function to run a full blend comparison.

    Args:
        dataset: Data with a class attribute assigned
        blends: Global blend percentages to try
        include_entropic: Also try entropic auto-blend
        n_folds: Cross-validation folds
        random_state: Seed of the fold split
        verbose: Print the results table

    Returns:
        BlendComparison with results
    """
    comparison = BlendComparison(dataset, blends=blends,
                                 include_entropic=include_entropic,
                                 n_folds=n_folds, random_state=random_state)
    comparison.run_comparison()
    if verbose:
        comparison.print_results()
    return comparison


# =============================================================================
# Demo
# =============================================================================

def generate_mixed_data(n_samples: int = 120) -> Dataset:
    """Generate a synthetic dataset with nominal and numeric attributes."""
    rng = np.random.RandomState(42)

    colours = ['red', 'green', 'blue']
    rows = []
    for i in range(n_samples):
        label = i % 2
        size = rng.normal(3.0 if label else 1.0, 0.8)
        colour = colours[rng.randint(2) + label]
        weight = rng.normal(10.0, 2.0)
        if rng.rand() < 0.05:
            weight = None
        rows.append([colour, size, weight, 'big' if label else 'small'])

    attributes = [
        Attribute.nominal('colour', colours),
        Attribute.numeric('size'),
        Attribute.numeric('weight'),
        Attribute.nominal('class', ['small', 'big']),
    ]
    return Dataset.from_rows('synthetic', attributes, rows, class_index=-1)


def demo():
    """Run demo comparison."""
    setup_logging()
    compare_blends(generate_mixed_data(), n_folds=5)


if __name__ == "__main__":
    demo()
