"""
Evaluation module for the K* classifier.

Provides evaluation metrics and comparison utilities:
- Classification metrics: confusion matrix, accuracy
- Regression metrics: MAE, RMSE (numeric class)
- Cross-validation: k-fold and stratified k-fold over a Dataset
- Blend comparison: cross-validated sweep of blend settings
"""

from .metrics import (
    # Classification metrics
    confusion_matrix,
    accuracy_score,

    # Regression metrics
    mean_absolute_error,
    root_mean_squared_error,

    # Cross-validation
    k_fold,
    stratified_k_fold,
    cross_val_predict,
    cross_validate,
    CrossValidationResult,

    # Reporting
    print_confusion_matrix,
)
from .blend_comparison import BlendComparison, BlendResult, compare_blends

__all__ = [
    # Classification metrics
    'confusion_matrix',
    'accuracy_score',

    # Regression metrics
    'mean_absolute_error',
    'root_mean_squared_error',

    # Cross-validation
    'k_fold',
    'stratified_k_fold',
    'cross_val_predict',
    'cross_validate',
    'CrossValidationResult',

    # Reporting
    'print_confusion_matrix',

    # Blend comparison
    'BlendComparison',
    'BlendResult',
    'compare_blends',
]
