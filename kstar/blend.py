"""
Blend parameter resolution shared by nominal and numeric attributes.

Every attribute value needs a decay parameter: the stop probability of a
nominal attribute or the scale factor of a numeric one. Two ways of
choosing it are supported:

- Fixed blend: bisect until the "sphere of influence" (the effective
  number of training instances reached) equals
  n0 + (N - n0) * blend / 100, where n0 is the number of training
  instances closest to the test value and N the number with a value.
- Entropic blend: hill-climb to maximise the gap between the class entropy
  under random class permutations and under the true class column.

Both searches have a hard iteration cap. When the cap is hit the best
candidate seen so far is used.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from config import RootFinderConfig

logger = logging.getLogger(__name__)


@dataclass
class SphereStats:
    """Sphere of influence reached by one candidate parameter."""
    sphere: float
    avg_prob: float
    min_prob: float


@dataclass
class EntropyStats:
    """Class entropies reached by one candidate parameter."""
    act_entropy: float
    rand_entropy: float
    avg_prob: float
    min_prob: float

    @property
    def gap(self) -> float:
        return self.rand_entropy - self.act_entropy


def missing_probability(mode: str, smallest: float, average: float) -> float:
    """
    Probability of transforming into a missing training value.

    Args:
        mode: 'delete', 'normal', 'maxdiff' or 'average'
        smallest: Smallest transformation probability at the chosen parameter
        average: Average transformation probability at the chosen parameter
    """
    if mode == 'delete':
        return 0.0
    if mode == 'normal':
        return 1.0
    if mode == 'maxdiff':
        return smallest
    return average


def sphere_stats(pstar: np.ndarray, total: int,
                 counts: Optional[np.ndarray] = None) -> SphereStats:
    """
    Sphere of influence of a set of transformation probabilities.

    sphere = (sum p)^2 / sum p^2, with p = pstar / total

    Args:
        pstar: Transformation probabilities
        total: Number of training instances with a value
        counts: Multiplicity of each pstar entry (default: 1 each)
    """
    if counts is None:
        counts = np.ones_like(pstar)
    inc = pstar / total
    pstar_sum = float(np.sum(counts * inc))
    pstar_square_sum = float(np.sum(counts * inc * inc))
    sphere = 0.0 if pstar_square_sum == 0 else pstar_sum * pstar_sum / pstar_square_sum

    reached = pstar[counts > 0]
    min_prob = min(1.0, float(reached.min())) if reached.size else 1.0
    return SphereStats(sphere=sphere, avg_prob=pstar_sum, min_prob=min_prob)


def _entropy(class_probs: np.ndarray) -> float:
    probs = class_probs[class_probs > 0]
    return float(-np.sum(probs * np.log2(probs)))


def entropy_stats(pstar: np.ndarray, class_columns: np.ndarray,
                  num_classes: int, total: int) -> EntropyStats:
    """
    Actual and random class entropies of a set of transformation probabilities.

    Args:
        pstar: Transformation probability of each training instance with a value
        class_columns: Permuted class columns, true column last; one column
            entry per pstar entry
        num_classes: Number of class labels
        total: Number of training instances with a value
    """
    tprob = pstar / total
    avg_prob = float(np.sum(tprob))
    min_prob = min(1.0, float(pstar.min())) if pstar.size else 1.0
    if avg_prob <= 0:
        return EntropyStats(0.0, 0.0, avg_prob, min_prob)

    class_probs = [np.bincount(column, weights=tprob, minlength=num_classes) / avg_prob
                   for column in class_columns]
    act_entropy = _entropy(class_probs[-1])
    rand_entropy = float(np.mean([_entropy(probs) for probs in class_probs[:-1]]))
    return EntropyStats(act_entropy, rand_entropy, avg_prob, min_prob)


def bisect_sphere(evaluate: Callable[[float], SphereStats], aim_for: float,
                  lower: float, upper: float, start: float,
                  config: RootFinderConfig) -> Tuple[float, SphereStats]:
    """
    Find the parameter whose sphere of influence equals aim_for.

    The sphere must shrink as the parameter grows.

    Args:
        evaluate: Sphere statistics for a parameter value
        aim_for: Target sphere size
        lower: Smallest parameter allowed
        upper: Largest parameter allowed
        start: First guess
        config: Accuracy and iteration cap

    Returns:
        Tuple of (parameter, statistics at that parameter)
    """
    bottom = evaluate(lower)
    if bottom.sphere - aim_for < 0:
        # Cannot include that many instances, take the widest sphere
        return lower, bottom
    top = evaluate(upper)
    if top.sphere - aim_for > 0:
        # Cannot include that few instances, take the narrowest sphere
        return upper, top

    x = min(max(start, lower), upper)
    best_x, best_stats, best_error = lower, bottom, abs(bottom.sphere - aim_for)
    for _ in range(config.max_iter):
        stats = evaluate(x)
        error = stats.sphere - aim_for
        if abs(error) < best_error:
            best_x, best_stats, best_error = x, stats, abs(error)
        if abs(error) <= config.accuracy:
            return x, stats
        if error > 0:
            lower = x
        else:
            upper = x
        x = (lower + upper) / 2.0

    logger.debug("Sphere root finder hit %d iterations, using %.6g (error %.4g)",
                 config.max_iter, best_x, best_error)
    return best_x, best_stats


def entropic_search(evaluate: Callable[[float], EntropyStats],
                    lower: float, upper: float, step: float,
                    config: RootFinderConfig) -> Tuple[float, EntropyStats]:
    """
    Climb from lower towards the parameter with the largest entropy gap.

    The step reverses and shrinks fourfold whenever the gap gets worse or
    the search runs into a bound. Gaps below the floor are clamped to it;
    if the search has turned around and never beat the floor, the lower
    bound is used.

    Args:
        evaluate: Entropy statistics for a parameter value
        lower: Smallest parameter allowed
        upper: Largest parameter allowed
        step: First step
        config: Accuracy, floor and iteration cap

    Returns:
        Tuple of (parameter, statistics at that parameter)
    """
    bottom = evaluate(lower)
    best_x, best_stats, best_gap = lower, bottom, 0.0
    x, current, turned = lower, 0.0, False

    for _ in range(config.max_iter):
        last = current
        x += step
        if x <= lower or x >= upper:
            x = min(max(x, lower), upper)
            current, delta = 0.0, -1.0
        else:
            stats = evaluate(x)
            current = stats.gap
            if current < config.floor:
                current = config.floor
                if turned and best_gap <= config.floor:
                    return lower, bottom
            delta = current - last
            if current > best_gap:
                best_x, best_stats, best_gap = x, stats, current

        if delta < 0:
            if abs(step) < config.accuracy:
                return best_x, best_stats
            step /= -4.0
            turned = True

    logger.debug("Entropic search hit %d iterations, using %.6g (gap %.4g)",
                 config.max_iter, best_x, best_gap)
    return best_x, best_stats
