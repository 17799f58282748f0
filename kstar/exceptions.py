"""
Exceptions raised by the K* classifier.

Numerically degenerate situations (constant columns, all-zero probability
sums, queries with every attribute missing) are not errors and never raise.
"""


class KStarError(Exception):
    """Base class for classifier errors."""


class InvalidInputError(KStarError, ValueError):
    """Training data the classifier cannot handle."""


class SchemaMismatchError(KStarError, ValueError):
    """Instance whose attributes differ from the trained schema."""


class NotTrainedError(KStarError, ValueError):
    """Prediction or update requested before training."""
