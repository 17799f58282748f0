"""
Unit tests for evaluation metrics and cross-validation.
"""
import numpy as np
import pytest

from evaluation.metrics import (
    CrossValidationResult,
    accuracy_score,
    confusion_matrix,
    cross_val_predict,
    cross_validate,
    k_fold,
    mean_absolute_error,
    print_confusion_matrix,
    root_mean_squared_error,
    stratified_k_fold,
)
from kstar.classifier import KStar


class TestClassificationMetrics:
    """Test suite for accuracy and confusion matrix."""

    def test_confusion_matrix(self):
        cm = confusion_matrix(np.array([0, 0, 1, 1, 2, 2]), np.array([0, 1, 1, 1, 2, 0]))
        np.testing.assert_array_equal(cm, [[1, 1, 0], [0, 2, 0], [1, 0, 1]])

    def test_confusion_matrix_normalised(self):
        cm = confusion_matrix(np.array([0, 0, 1, 1]), np.array([0, 1, 1, 1]), normalize='true')
        np.testing.assert_allclose(cm, [[0.5, 0.5], [0.0, 1.0]])

    def test_accuracy(self):
        assert accuracy_score([0, 1, 1, 0], [0, 1, 0, 0]) == pytest.approx(0.75)
        assert accuracy_score([], []) == 0.0

    def test_print_confusion_matrix(self):
        text = print_confusion_matrix(np.array([[3, 1], [0, 4]]), class_names=['yes', 'no'])
        assert "Accuracy: 0.8750 (7/8)" in text
        assert "yes" in text


class TestRegressionMetrics:
    """Test suite for MAE and RMSE."""

    def test_mean_absolute_error(self):
        assert mean_absolute_error([1.0, 2.0, 3.0], [2.0, 2.0, 1.0]) == pytest.approx(1.0)

    def test_root_mean_squared_error(self):
        assert root_mean_squared_error([0.0, 0.0], [3.0, 4.0]) == pytest.approx(np.sqrt(12.5))


class TestFolds:
    """Test suite for fold generation."""

    def test_k_fold_covers_every_index_once(self):
        folds = k_fold(11, n_folds=3, random_state=0)
        tests = np.concatenate([test for _, test in folds])
        np.testing.assert_array_equal(np.sort(tests), np.arange(11))
        for train, test in folds:
            assert len(np.intersect1d(train, test)) == 0
            assert len(train) + len(test) == 11

    def test_k_fold_reproducible(self):
        first = k_fold(10, n_folds=5, random_state=3)
        second = k_fold(10, n_folds=5, random_state=3)
        for (_, a), (_, b) in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_too_many_folds(self):
        with pytest.raises(ValueError):
            k_fold(3, n_folds=5)
        with pytest.raises(ValueError):
            stratified_k_fold(np.array([0, 1]), n_folds=3)

    def test_stratified_k_fold(self):
        y = np.array([0] * 6 + [1] * 4)
        folds = stratified_k_fold(y, n_folds=2, random_state=0)
        tests = np.concatenate([test for _, test in folds])
        np.testing.assert_array_equal(np.sort(tests), np.arange(10))
        for _, test in folds:
            assert np.sum(y[test] == 0) == 3
            assert np.sum(y[test] == 1) == 2


class TestCrossValidation:
    """Test suite for cross_validate and cross_val_predict."""

    def test_cross_validate_nominal(self, mixed_dataset):
        result = cross_validate(KStar(), mixed_dataset, n_folds=5, random_state=0)
        assert isinstance(result, CrossValidationResult)
        assert result.scoring == 'accuracy'
        assert result.n_folds == 5
        assert len(result.scores) == 5
        assert result.mean_score >= 0.9

    def test_cross_validate_numeric(self, numeric_class_dataset):
        result = cross_validate(KStar(), numeric_class_dataset, n_folds=5, random_state=0)
        assert result.scoring == 'rmse'
        assert result.mean_score >= 0.0

    def test_cross_val_predict(self, mixed_dataset):
        predictions = cross_val_predict(KStar(), mixed_dataset, n_folds=4, random_state=1)
        assert predictions.shape == (mixed_dataset.num_instances,)
        assert accuracy_score(mixed_dataset.class_column(), predictions) >= 0.9

    def test_template_is_not_trained(self, mixed_dataset):
        template = KStar(global_blend=40)
        cross_validate(template, mixed_dataset, n_folds=4, random_state=0)
        assert not template.is_trained
