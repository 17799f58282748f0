"""
Evaluation Metrics for the K* classifier.

This module provides the metrics and cross-validation helpers used to
evaluate a classifier on a Dataset.

Classification Metrics:
- Confusion Matrix
- Accuracy

Regression Metrics (numeric class):
- MAE, RMSE

Cross-Validation:
- K-fold and stratified k-fold index splits
- Out-of-fold predictions and per-fold scores for a classifier
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from kstar.dataset import Dataset

logger = logging.getLogger(__name__)


# =============================================================================
# CLASSIFICATION METRICS
# =============================================================================

def confusion_matrix(y_true: np.ndarray, y_pred: np.ndarray,
                     n_classes: Optional[int] = None,
                     normalize: Optional[str] = None) -> np.ndarray:
    """
    Compute confusion matrix.

    Parameters
    ----------
    y_true : np.ndarray
        Ground truth class indices.
    y_pred : np.ndarray
        Predicted class indices.
    n_classes : int, optional
        Number of classes. If None, inferred from data.
    normalize : str, optional
        Normalization mode: 'true' (by row), 'pred' (by column), 'all'.

    Returns
    -------
    np.ndarray
        Confusion matrix of shape (n_classes, n_classes).
        Row i, column j is the count of instances of class i
        predicted as class j.

    Example
    -------
    >>> confusion_matrix(np.array([0, 0, 1, 1]), np.array([0, 1, 1, 1]))
    array([[1, 1],
           [0, 2]])
    """
    y_true = np.asarray(y_true).ravel().astype(np.intp)
    y_pred = np.asarray(y_pred).ravel().astype(np.intp)

    if n_classes is None:
        n_classes = int(max(np.max(y_true), np.max(y_pred))) + 1 if y_true.size else 0

    cm = np.zeros((n_classes, n_classes), dtype=np.int64)
    np.add.at(cm, (y_true, y_pred), 1)

    if normalize == 'true':
        row_sums = cm.sum(axis=1, keepdims=True)
        row_sums[row_sums == 0] = 1
        cm = cm.astype(np.float64) / row_sums
    elif normalize == 'pred':
        col_sums = cm.sum(axis=0, keepdims=True)
        col_sums[col_sums == 0] = 1
        cm = cm.astype(np.float64) / col_sums
    elif normalize == 'all':
        total = cm.sum()
        if total > 0:
            cm = cm.astype(np.float64) / total

    return cm


def accuracy_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate classification accuracy.

    Parameters
    ----------
    y_true : np.ndarray
        Ground truth class indices.
    y_pred : np.ndarray
        Predicted class indices.

    Returns
    -------
    float
        Accuracy score in [0, 1].
    """
    y_true = np.asarray(y_true).ravel()
    y_pred = np.asarray(y_pred).ravel()

    if len(y_true) == 0:
        return 0.0

    return float(np.mean(y_true == y_pred))


# =============================================================================
# REGRESSION METRICS
# =============================================================================

def mean_absolute_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Mean Absolute Error (MAE).

    MAE = (1/n) * sum(|y_true - y_pred|)
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if y_true.size == 0:
        return 0.0
    return float(np.mean(np.abs(y_true - y_pred)))


def root_mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Root Mean Squared Error (RMSE).

    RMSE = sqrt((1/n) * sum((y_true - y_pred)^2))
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if y_true.size == 0:
        return 0.0
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


# =============================================================================
# CROSS-VALIDATION
# =============================================================================

def k_fold(n_samples: int, n_folds: int = 10,
           shuffle: bool = True,
           random_state: Optional[int] = None) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Generate k-fold cross-validation indices.

    Parameters
    ----------
    n_samples : int
        Number of instances.
    n_folds : int
        Number of folds (at most n_samples).
    shuffle : bool
        Whether to shuffle indices before splitting.
    random_state : int, optional
        Seed of the generator used for shuffling.

    Returns
    -------
    list
        List of (train_indices, test_indices) tuples.
    """
    if n_folds < 2 or n_folds > n_samples:
        raise ValueError(f"Cannot split {n_samples} instances into {n_folds} folds")

    indices = np.arange(n_samples)
    if shuffle:
        np.random.RandomState(random_state).shuffle(indices)

    fold_sizes = np.full(n_folds, n_samples // n_folds)
    fold_sizes[:n_samples % n_folds] += 1

    folds = []
    start = 0
    for fold_size in fold_sizes:
        end = start + fold_size
        test_idx = indices[start:end]
        train_idx = np.concatenate([indices[:start], indices[end:]])
        folds.append((train_idx, test_idx))
        start = end
    return folds


def stratified_k_fold(y: np.ndarray, n_folds: int = 10,
                      shuffle: bool = True,
                      random_state: Optional[int] = None) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Generate stratified k-fold cross-validation indices.

    Parameters
    ----------
    y : np.ndarray
        Class indices (for stratification).
    n_folds : int
        Number of folds.
    shuffle : bool
        Whether to shuffle indices before splitting.
    random_state : int, optional
        Seed of the generator used for shuffling.

    Returns
    -------
    list
        List of (train_indices, test_indices) tuples.

    Stratification
    --------------
    Each fold gets approximately the same share of every class as the
    complete dataset. Remainders are dealt out round-robin across folds.
    """
    y = np.asarray(y).ravel()
    if n_folds < 2 or n_folds > len(y):
        raise ValueError(f"Cannot split {len(y)} instances into {n_folds} folds")

    rng = np.random.RandomState(random_state)
    test_folds: List[List[int]] = [[] for _ in range(n_folds)]

    next_fold = 0
    for cls in np.unique(y):
        indices = np.where(y == cls)[0]
        if shuffle:
            rng.shuffle(indices)
        for index in indices:
            test_folds[next_fold].append(int(index))
            next_fold = (next_fold + 1) % n_folds

    all_indices = np.arange(len(y))
    result = []
    for fold in test_folds:
        test_idx = np.sort(np.array(fold, dtype=np.intp))
        train_idx = np.setdiff1d(all_indices, test_idx)
        result.append((train_idx, test_idx))
    return result


def _folds_for(dataset: Dataset, n_folds: int, stratify: bool,
               random_state: Optional[int]) -> List[Tuple[np.ndarray, np.ndarray]]:
    if stratify and dataset.class_attribute.is_nominal:
        return stratified_k_fold(dataset.class_column(), n_folds=n_folds,
                                 random_state=random_state)
    return k_fold(dataset.num_instances, n_folds=n_folds, random_state=random_state)


def _clone(classifier):
    return classifier.__class__(**classifier.get_params())


def cross_val_predict(classifier, dataset: Dataset,
                      n_folds: int = 10,
                      stratify: bool = True,
                      random_state: Optional[int] = None) -> np.ndarray:
    """
    Out-of-fold predictions for every instance of a dataset.

    Parameters
    ----------
    classifier : KStar
        Template classifier; each fold trains a fresh clone built from
        its get_params().
    dataset : Dataset
        Data with a class attribute assigned. Instances with a missing
        class value are dropped first.
    n_folds : int
        Number of folds.
    stratify : bool
        Stratify folds by class (nominal class only).
    random_state : int, optional
        Seed of the fold split.

    Returns
    -------
    np.ndarray
        Predicted class index or value, aligned with the dataset after
        dropping instances with a missing class.
    """
    data = dataset.copy()
    data.delete_with_missing_class()
    predictions = np.empty(data.num_instances, dtype=np.float64)

    folds = _folds_for(data, n_folds, stratify, random_state)
    for fold_idx, (train_idx, test_idx) in enumerate(folds):
        model = _clone(classifier)
        model.train(data.subset(train_idx))
        predictions[test_idx] = model.predict_dataset(data.subset(test_idx))
        logger.debug("Fold %d/%d: %d test instances", fold_idx + 1, len(folds), len(test_idx))

    return predictions


@dataclass
class CrossValidationResult:
    """Container for cross-validation results."""
    scores: np.ndarray
    mean_score: float
    std_score: float
    scoring: str
    n_folds: int


def cross_validate(classifier, dataset: Dataset,
                   n_folds: int = 10,
                   stratify: bool = True,
                   random_state: Optional[int] = None) -> CrossValidationResult:
    """
    Score a classifier with k-fold cross-validation.

    Scoring is accuracy for a nominal class and RMSE for a numeric class.

    Parameters
    ----------
    classifier : KStar
        Template classifier, cloned for every fold.
    dataset : Dataset
        Data with a class attribute assigned.
    n_folds : int
        Number of folds.
    stratify : bool
        Stratify folds by class (nominal class only).
    random_state : int, optional
        Seed of the fold split.

    Returns
    -------
    CrossValidationResult
    """
    data = dataset.copy()
    data.delete_with_missing_class()
    nominal = data.class_attribute.is_nominal
    scoring = 'accuracy' if nominal else 'rmse'

    scores = []
    folds = _folds_for(data, n_folds, stratify, random_state)
    for fold_idx, (train_idx, test_idx) in enumerate(folds):
        model = _clone(classifier)
        model.train(data.subset(train_idx))
        test = data.subset(test_idx)
        y_pred = model.predict_dataset(test)
        y_true = test.class_column()
        if nominal:
            score = accuracy_score(y_true, y_pred)
        else:
            score = root_mean_squared_error(y_true, y_pred)
        scores.append(score)
        logger.debug("Fold %d/%d: %s = %.4f", fold_idx + 1, len(folds), scoring, score)

    scores = np.array(scores)
    result = CrossValidationResult(
        scores=scores,
        mean_score=float(np.mean(scores)),
        std_score=float(np.std(scores)),
        scoring=scoring,
        n_folds=len(folds),
    )
    logger.info("%d-fold cross-validation of %r: %s %.4f (+/- %.4f)",
                result.n_folds, classifier, scoring, result.mean_score, result.std_score)
    return result


# =============================================================================
# REPORTING
# =============================================================================

def print_confusion_matrix(cm: np.ndarray,
                           class_names: Optional[List[str]] = None,
                           title: str = "Confusion Matrix") -> str:
    """
    Create ASCII representation of confusion matrix.

    Parameters
    ----------
    cm : np.ndarray
        Confusion matrix.
    class_names : list, optional
        Names for each class.
    title : str
        Title for the matrix.

    Returns
    -------
    str
        Formatted string representation.
    """
    n_classes = cm.shape[0]

    if class_names is None:
        class_names = [f"C{i}" for i in range(n_classes)]

    max_val = np.max(cm) if cm.size else 0
    val_width = max(len(str(int(max_val))), 4)
    label_width = max(len(name) for name in class_names)

    lines = [title, "=" * (label_width + 2 + (val_width + 1) * n_classes + 10)]

    header = " " * (label_width + 8) + "Predicted"
    lines.append(header)
    header2 = " " * (label_width + 8) + " ".join(f"{name:>{val_width}}" for name in class_names)
    lines.append(header2)
    lines.append("-" * len(header2))

    for i, row_name in enumerate(class_names):
        prefix = "Actual " if i == n_classes // 2 else "       "
        row_vals = " ".join(f"{int(cm[i, j]):>{val_width}}" for j in range(n_classes))
        lines.append(f"{prefix}{row_name:>{label_width}} {row_vals}")

    lines.append("=" * len(header2))

    correct = np.trace(cm)
    total = np.sum(cm)
    accuracy = correct / total if total > 0 else 0
    lines.append(f"Accuracy: {accuracy:.4f} ({int(correct)}/{int(total)})")

    return "\n".join(lines)
