"""
KStar Workbench - Global Configuration

This module contains all configuration constants for the K* instance-based
classifier and its evaluation helpers.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

# =============================================================================
# CLASSIFIER DEFAULTS
# =============================================================================
DEFAULT_GLOBAL_BLEND = 20  # Percent, clamped into [0, 100]
DEFAULT_ENTROPIC_AUTO_BLEND = False
DEFAULT_MISSING_MODE = 'average'

# Missing value treatment modes
MISSING_MODES = {
    'average': "Average column entropy curves",
    'delete': "Ignore the instance with the missing value",
    'maxdiff': "Treat missing values as maximally different",
    'normal': "Normalize over the attributes",
}

# =============================================================================
# RANDOM CLASS PERMUTATIONS (entropic blend only)
# =============================================================================
NUM_RAND_COLS = 5  # Permuted copies of the class column
RANDOM_SEED = 42

# =============================================================================
# ROOT FINDER
# =============================================================================
ROOT_FINDER_ACCURACY = 0.01
ROOT_FINDER_MAX_ITER = 40
INITIAL_STEP = 0.05  # First step of the nominal stop-parameter search
ENTROPY_FLOOR = 0.1  # Lower clamp of the random/actual entropy gap
EPSILON = 1.0e-5  # Tolerance for equal numeric distances

# =============================================================================
# EVALUATION
# =============================================================================
CV_FOLDS = 10
COMPARISON_BLENDS = (0, 20, 50, 80, 100)

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# =============================================================================
# DATACLASSES FOR CONFIGURATION
# =============================================================================

@dataclass
class KStarConfig:
    """Classifier options."""
    global_blend: int = DEFAULT_GLOBAL_BLEND
    entropic_auto_blend: bool = DEFAULT_ENTROPIC_AUTO_BLEND
    missing_mode: str = DEFAULT_MISSING_MODE
    random_state: int = RANDOM_SEED


@dataclass
class RootFinderConfig:
    """Bounds and tolerances of the blend parameter searches."""
    accuracy: float = ROOT_FINDER_ACCURACY
    max_iter: int = ROOT_FINDER_MAX_ITER
    initial_step: float = INITIAL_STEP
    floor: float = ENTROPY_FLOOR
    epsilon: float = EPSILON
    num_rand_cols: int = NUM_RAND_COLS


@dataclass
class EvaluationConfig:
    """Cross-validation configuration."""
    n_folds: int = CV_FOLDS
    random_state: Optional[int] = RANDOM_SEED
    stratify: bool = True


def get_default_config() -> Dict[str, object]:
    """Get default configuration objects."""
    return {
        'kstar': KStarConfig(),
        'root_finder': RootFinderConfig(),
        'evaluation': EvaluationConfig(),
    }


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for scripts and comparisons."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
