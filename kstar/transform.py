"""
Instance-level transformation probabilities.

The probability of a test instance transforming into a training instance
is the product of the attribute transformation probabilities, taken over
the non-class attributes in ascending schema order.

Attributes missing from the test instance are skipped. After every
multiplication the running product is raised to the power
num_attributes / (num_attributes - missing_so_far), so the
compensation for missing attributes builds up as the product does. A test
instance with every non-class attribute missing has probability 0. The
final product is divided by the number of training instances.
"""

import logging
from typing import Callable, Dict, List, Optional, Union

import numpy as np

from config import KStarConfig, RootFinderConfig
from .cache import AttributeCache
from .dataset import AttributeType, Dataset, Instance
from .nominal import NominalSimilarity
from .numeric import NumericSimilarity
from .permutation import RandomClassPermutationTable

logger = logging.getLogger(__name__)


def _nominal_strategy(train: Dataset, index: int, cache: AttributeCache,
                      config: KStarConfig, root_finder: RootFinderConfig,
                      permutations: Optional[RandomClassPermutationTable]):
    return NominalSimilarity(train.column(index), train.attribute(index).num_values,
                             cache, config, root_finder, permutations,
                             num_classes=train.num_classes)


def _numeric_strategy(train: Dataset, index: int, cache: AttributeCache,
                      config: KStarConfig, root_finder: RootFinderConfig,
                      permutations: Optional[RandomClassPermutationTable]):
    return NumericSimilarity(train.column(index), cache, config, root_finder,
                             permutations, num_classes=train.num_classes)


# Similarity strategy per attribute type
SIMILARITY_STRATEGIES: Dict[AttributeType, Callable] = {
    AttributeType.NOMINAL: _nominal_strategy,
    AttributeType.NUMERIC: _numeric_strategy,
}


class InstanceTransformModel:
    """
    Transformation probabilities against one training-set generation.

    The model keeps a snapshot of the training values, one AttributeCache
    and one similarity strategy per non-class attribute. It never changes
    after construction except for filling its caches.
    """

    def __init__(self, train: Dataset, config: KStarConfig,
                 root_finder: RootFinderConfig, generation: int,
                 permutations: Optional[RandomClassPermutationTable] = None):
        """
        Args:
            train: Training set (class attribute assigned)
            config: Classifier options
            root_finder: Search tolerances
            generation: Training-set generation the model is built for
            permutations: Class permutations for entropic blending
        """
        self.generation = generation
        self.class_index = train.class_index
        self.num_attributes = train.num_attributes
        self.num_classes = train.num_classes
        self.class_is_nominal = train.class_attribute.is_nominal
        self._data = np.array(train.values)
        self.num_instances = self._data.shape[0]
        self.class_values = self._data[:, self.class_index].copy()
        self.permutations = permutations

        self.caches: List[Optional[AttributeCache]] = []
        self.similarities: List = []
        for index, attribute in enumerate(train.attributes):
            if index == self.class_index:
                self.caches.append(None)
                self.similarities.append(None)
                continue
            try:
                strategy = SIMILARITY_STRATEGIES[attribute.type]
            except KeyError:
                raise ValueError(
                    f"No similarity for {attribute.type.value} attribute "
                    f"'{attribute.name}'") from None
            cache = AttributeCache(index, generation)
            self.caches.append(cache)
            self.similarities.append(
                strategy(train, index, cache, config, root_finder, permutations))

        logger.debug("Built transform model for generation %d (%d instances)",
                     generation, self.num_instances)

    def attribute_probabilities(self, index: int, test_value: float,
                                rows=slice(None)) -> np.ndarray:
        """Transformation probabilities of one attribute to training rows."""
        similarity = self.similarities[index]
        if similarity is None:
            raise ValueError("The class attribute has no transformation probability")
        return similarity.trans_probs(test_value, self._data[rows, index])

    def transformation_probabilities(self, instance: Union[Instance, np.ndarray]) -> np.ndarray:
        """
        Probability of the instance transforming into each training instance.

        Args:
            instance: Test instance or its value vector

        Returns:
            Array of shape (num_instances,)
        """
        return self._combine(self._values_of(instance), slice(None))

    def transformation_probability(self, instance: Union[Instance, np.ndarray],
                                   train_index: int) -> float:
        """Probability of the instance transforming into one training instance."""
        rows = slice(train_index, train_index + 1)
        return float(self._combine(self._values_of(instance), rows)[0])

    def _values_of(self, instance) -> np.ndarray:
        if isinstance(instance, Instance):
            return instance.values
        return np.asarray(instance, dtype=np.float64)

    def _combine(self, values: np.ndarray, rows) -> np.ndarray:
        n_rows = self._data[rows].shape[0]
        trans_prob = np.ones(n_rows)
        num_missing = 0
        num_used = 0

        for index in range(self.num_attributes):
            if index == self.class_index:
                continue
            test_value = values[index]
            if np.isnan(test_value):
                num_missing += 1
                continue
            trans_prob *= self.attribute_probabilities(index, test_value, rows)
            num_used += 1
            # Renormalise for the attributes skipped so far
            trans_prob = np.power(trans_prob,
                                  self.num_attributes / (self.num_attributes - num_missing))

        if num_used == 0:
            return np.zeros(n_rows)
        return trans_prob / self.num_instances
