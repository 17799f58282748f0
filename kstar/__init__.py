"""
KStar - Instance-based classification with an entropic distance measure.

The distance between two instances is the probability of transforming one
into the other through a random walk over attribute values.

Data:
- Attribute, AttributeType: Schema entries (nominal, numeric, string)
- Instance: One row of values, NaN for missing
- Dataset: Instances sharing a schema and class position

Classifier:
- KStar: Train, update incrementally and predict
- ModelState: Lifecycle of a classifier

Internals:
- AttributeCache: Resolved blend parameters per test value
- NominalSimilarity, NumericSimilarity: Attribute transformation probabilities
- InstanceTransformModel: Instance transformation probabilities
- RandomClassPermutationTable: Permuted class columns for entropic blending
"""

# Data
from .dataset import MISSING, Attribute, AttributeType, Dataset, Instance

# Classifier
from .classifier import KStar, ModelState
from .exceptions import (
    InvalidInputError,
    KStarError,
    NotTrainedError,
    SchemaMismatchError,
)

# Internals
from .cache import AttributeCache, CacheEntry
from .nominal import NominalSimilarity
from .numeric import NumericSimilarity
from .transform import InstanceTransformModel
from .permutation import RandomClassPermutationTable

__all__ = [
    # Data
    'MISSING',
    'Attribute',
    'AttributeType',
    'Dataset',
    'Instance',

    # Classifier
    'KStar',
    'ModelState',
    'KStarError',
    'InvalidInputError',
    'NotTrainedError',
    'SchemaMismatchError',

    # Internals
    'AttributeCache',
    'CacheEntry',
    'NominalSimilarity',
    'NumericSimilarity',
    'InstanceTransformModel',
    'RandomClassPermutationTable',
]
