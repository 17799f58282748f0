"""
K* instance-based classifier.

Implements:
- Training by storing a private copy of the training set
- Incremental updates, one instance at a time
- Class distributions (nominal class) or weighted means (numeric class)
  from the transformation probabilities to every training instance
- Lazy rebuild of attribute caches and class permutations, driven by an
  explicit generation counter

Reference: J. G. Cleary and L. E. Trigg (1995), "K*: An Instance-based
Learner Using an Entropic Distance Measure", Proceedings of the 12th
International Conference on Machine Learning, pp. 108-114.
"""

import dataclasses
import logging
import threading
from enum import Enum
from typing import Dict, Optional, Sequence, Union

import numpy as np

from config import (
    DEFAULT_ENTROPIC_AUTO_BLEND,
    DEFAULT_GLOBAL_BLEND,
    DEFAULT_MISSING_MODE,
    MISSING_MODES,
    RANDOM_SEED,
    KStarConfig,
    RootFinderConfig,
)
from .dataset import Dataset, Instance
from .exceptions import InvalidInputError, NotTrainedError, SchemaMismatchError
from .permutation import RandomClassPermutationTable
from .transform import InstanceTransformModel

logger = logging.getLogger(__name__)


class ModelState(Enum):
    """Lifecycle of a classifier."""
    UNTRAINED = 'untrained'
    TRAINED = 'trained'
    PREDICTING = 'predicting'


class KStar:
    """
    K* Classifier.

    The class of a test instance is predicted from every training instance,
    weighted by the probability that the test instance transforms into it.

    Usage:
        clf = KStar(global_blend=20)
        clf.train(dataset)
        distribution = clf.predict(dataset.instance(0))

    Caches and the permutation table belong to a generation. Training,
    updating and changing an option start a new generation; the next
    prediction rebuilds them.
    """

    def __init__(self,
                 global_blend: int = DEFAULT_GLOBAL_BLEND,
                 entropic_auto_blend: bool = DEFAULT_ENTROPIC_AUTO_BLEND,
                 missing_mode: str = DEFAULT_MISSING_MODE,
                 random_state: int = RANDOM_SEED,
                 root_finder: Optional[RootFinderConfig] = None):
        """
        Initialize K*.

        Args:
            global_blend: Manual blend percent, clamped into [0, 100]
            entropic_auto_blend: Pick blend parameters by entropy (nominal class only)
            missing_mode: 'average', 'delete', 'maxdiff' or 'normal'
            random_state: Seed of the class permutations
            root_finder: Search tolerances (default: RootFinderConfig())
        """
        self._config = KStarConfig(random_state=random_state)
        self.root_finder = root_finder or RootFinderConfig()

        self._train: Optional[Dataset] = None
        self._model: Optional[InstanceTransformModel] = None
        self._generation = 0
        self._state = ModelState.UNTRAINED
        self._active_predictions = 0
        self._lock = threading.RLock()

        self.global_blend = global_blend
        self.entropic_auto_blend = entropic_auto_blend
        self.missing_mode = missing_mode

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    @property
    def global_blend(self) -> int:
        return self._config.global_blend

    @global_blend.setter
    def global_blend(self, blend: int):
        self._config.global_blend = int(min(max(blend, 0), 100))
        self._invalidate()

    @property
    def entropic_auto_blend(self) -> bool:
        return self._config.entropic_auto_blend

    @entropic_auto_blend.setter
    def entropic_auto_blend(self, enabled: bool):
        self._config.entropic_auto_blend = bool(enabled)
        self._invalidate()

    @property
    def missing_mode(self) -> str:
        return self._config.missing_mode

    @missing_mode.setter
    def missing_mode(self, mode: str):
        if mode not in MISSING_MODES:
            raise ValueError(f"Unknown missing mode '{mode}', "
                             f"expected one of {sorted(MISSING_MODES)}")
        self._config.missing_mode = mode
        self._invalidate()

    @property
    def random_state(self) -> int:
        return self._config.random_state

    def get_params(self) -> Dict[str, object]:
        """Constructor arguments, for building an untrained copy."""
        return {
            'global_blend': self.global_blend,
            'entropic_auto_blend': self.entropic_auto_blend,
            'missing_mode': self.missing_mode,
            'random_state': self.random_state,
            'root_finder': dataclasses.replace(self.root_finder),
        }

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> ModelState:
        """PREDICTING while any prediction is running, on any thread."""
        return self._state

    @property
    def is_trained(self) -> bool:
        return self._train is not None

    @property
    def num_instances(self) -> int:
        return self._train.num_instances if self._train is not None else 0

    @property
    def permutations(self) -> Optional[RandomClassPermutationTable]:
        """Class permutations of the current model (entropic blending only)."""
        return self._model.permutations if self._model is not None else None

    def _invalidate(self):
        with self._lock:
            self._generation += 1

    def _require_trained(self) -> Dataset:
        if self._train is None:
            raise NotTrainedError("KStar not trained. Call train() first.")
        return self._train

    def _uses_entropy(self, train: Dataset) -> bool:
        return self.entropic_auto_blend and train.class_attribute.is_nominal

    def _current_model(self) -> InstanceTransformModel:
        """Model for the current generation, rebuilt when stale."""
        with self._lock:
            train = self._require_trained()
            if self._model is None or self._model.generation != self._generation:
                permutations = None
                if self._uses_entropy(train):
                    permutations = RandomClassPermutationTable.build(
                        train.class_column(), self._generation,
                        seed=self.random_state,
                        num_rand_cols=self.root_finder.num_rand_cols)
                self._model = InstanceTransformModel(
                    train, dataclasses.replace(self._config), self.root_finder,
                    self._generation, permutations)
                logger.debug("Rebuilt attribute caches for generation %d",
                             self._generation)
            return self._model

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def train(self, dataset: Dataset) -> 'KStar':
        """
        Train on a copy of the dataset.

        Instances with a missing class value are discarded. On failure the
        previously trained state is kept.

        Args:
            dataset: Training data with a class attribute assigned

        Returns:
            self

        Raises:
            InvalidInputError: No class attribute, a string attribute, or
                no instance with a class value
        """
        if dataset.class_index is None:
            raise InvalidInputError("No class attribute assigned to instances")
        if dataset.check_for_string_attributes():
            raise InvalidInputError("Can't handle string attributes")

        train = dataset.copy()
        dropped = train.delete_with_missing_class()
        if train.num_instances == 0:
            raise InvalidInputError("No training instances with a class value")

        with self._lock:
            self._train = train
            self._model = None
            self._state = ModelState.TRAINED
            self._invalidate()

        logger.info("Trained on %d instances (%d dropped with missing class)",
                    train.num_instances, dropped)
        if self.entropic_auto_blend and not train.class_attribute.is_nominal:
            logger.warning("Entropic auto-blend needs a nominal class, "
                           "using global blend %d%%", self.global_blend)
        return self

    def update(self, instance: Union[Instance, Sequence[float]]) -> None:
        """
        Add one instance to the training set.

        Instances with a missing class value are ignored.

        Raises:
            NotTrainedError: Called before train()
            SchemaMismatchError: Schema differs from the training set
        """
        with self._lock:
            train = self._require_trained()
            values = self._check_schema(instance)
            if np.isnan(values[train.class_index]):
                logger.debug("Ignoring update with missing class value")
                return
            train.add(Instance(values, train))
            self._invalidate()

    def _check_schema(self, instance: Union[Instance, Sequence[float]]) -> np.ndarray:
        train = self._require_trained()
        if isinstance(instance, Instance):
            if instance.dataset is not None and not train.equal_headers(instance.dataset):
                raise SchemaMismatchError("Incompatible instance types")
            values = instance.values
        else:
            values = np.asarray(instance, dtype=np.float64)
        if values.shape != (train.num_attributes,):
            raise SchemaMismatchError(
                f"Instance has {values.size} values, expected {train.num_attributes}")
        return values

    # -------------------------------------------------------------------------
    # Prediction
    # -------------------------------------------------------------------------

    def transformation_probabilities(self, instance: Union[Instance, Sequence[float]]) -> np.ndarray:
        """Probability of the instance transforming into each training instance."""
        values = self._check_schema(instance)
        return self._current_model().transformation_probabilities(values)

    def predict(self, instance: Union[Instance, Sequence[float]]) -> Union[np.ndarray, float]:
        """
        Predict for one instance.

        Args:
            instance: Test instance (class value ignored)

        Returns:
            Class distribution summing to 1 (nominal class) or the
            predicted value (numeric class)
        """
        values = self._check_schema(instance)
        model = self._current_model()

        with self._lock:
            self._active_predictions += 1
            self._state = ModelState.PREDICTING
        try:
            trans_probs = model.transformation_probabilities(values)
        finally:
            with self._lock:
                self._active_predictions -= 1
                if self._active_predictions == 0:
                    self._state = ModelState.TRAINED

        if model.class_is_nominal:
            distribution = np.bincount(model.class_values.astype(np.intp),
                                       weights=trans_probs,
                                       minlength=model.num_classes)
            total = distribution.sum()
            if not np.isfinite(total) or total <= 0.0:
                # Every probability underflowed: no evidence for any class
                return np.full(model.num_classes, 1.0 / model.num_classes)
            return distribution / total

        weight = trans_probs.sum()
        if weight == 0 or not np.isfinite(weight):
            return 0.0
        return float(np.dot(trans_probs, model.class_values) / weight)

    def distribution_for_instance(self, instance: Union[Instance, Sequence[float]]) -> np.ndarray:
        """Class distribution, or a one-element array holding a numeric prediction."""
        prediction = self.predict(instance)
        if isinstance(prediction, np.ndarray):
            return prediction
        return np.array([prediction])

    def classify_instance(self, instance: Union[Instance, Sequence[float]]) -> float:
        """Most probable class index (lowest on ties), or the numeric prediction."""
        prediction = self.predict(instance)
        if isinstance(prediction, np.ndarray):
            return float(np.argmax(prediction))
        return prediction

    def predict_proba(self, dataset: Dataset) -> np.ndarray:
        """
        Distributions for every instance of a dataset.

        Returns:
            Array of shape (n_instances, num_classes); (n_instances, 1) for a
            numeric class
        """
        train = self._require_trained()
        width = train.num_classes
        return np.array([self.distribution_for_instance(instance) for instance in dataset]
                        ).reshape(dataset.num_instances, width)

    def predict_dataset(self, dataset: Dataset) -> np.ndarray:
        """Class index or numeric prediction for every instance of a dataset."""
        return np.array([self.classify_instance(instance) for instance in dataset],
                        dtype=np.float64)

    def __str__(self) -> str:
        lines = [
            "KStar instance-based classifier",
            f"Options: global blend {self.global_blend}%, "
            f"entropic auto-blend {'on' if self.entropic_auto_blend else 'off'}, "
            f"missing mode '{self.missing_mode}'",
        ]
        if self._train is None:
            lines.append("Not trained")
        else:
            lines.append(f"Training instances: {self._train.num_instances} "
                         f"({self._train.name})")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"KStar(global_blend={self.global_blend}, "
                f"entropic_auto_blend={self.entropic_auto_blend}, "
                f"missing_mode={self.missing_mode!r}, "
                f"random_state={self.random_state})")
