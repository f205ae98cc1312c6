"""Health score classification.

Maps a numeric health score in [0, 1] to a HealthTier using two
thresholds. A score exactly on a threshold falls into the less severe
tier.
"""

import math

from .exceptions import ConfigurationError
from .models import HealthTier


def validate_thresholds(unhealthy_threshold: float, shaky_threshold: float) -> None:
    """Check that 0.0 <= unhealthy_threshold < shaky_threshold <= 1.0.

    Raises:
        ConfigurationError: If the thresholds are out of range or out of order.
    """
    if not 0.0 <= unhealthy_threshold <= 1.0:
        raise ConfigurationError(
            f"unhealthy_threshold must be within [0.0, 1.0], got {unhealthy_threshold}"
        )
    if not 0.0 <= shaky_threshold <= 1.0:
        raise ConfigurationError(
            f"shaky_threshold must be within [0.0, 1.0], got {shaky_threshold}"
        )
    if unhealthy_threshold >= shaky_threshold:
        raise ConfigurationError(
            f"unhealthy_threshold ({unhealthy_threshold}) must be below "
            f"shaky_threshold ({shaky_threshold})"
        )


def is_valid_score(score: float) -> bool:
    """Return True if score is a finite number within [0.0, 1.0]."""
    return math.isfinite(score) and 0.0 <= score <= 1.0


def classify(
    score: float, unhealthy_threshold: float, shaky_threshold: float
) -> HealthTier:
    """Classify a health score. Thresholds are assumed to be validated."""
    if score < unhealthy_threshold:
        return HealthTier.UNHEALTHY
    if score < shaky_threshold:
        return HealthTier.SHAKY
    return HealthTier.HEALTHY


class HealthClassifier:
    """Classifier bound to a validated pair of thresholds.

    Pure decision logic, no side effects.
    """

    def __init__(self, unhealthy_threshold: float, shaky_threshold: float):
        validate_thresholds(unhealthy_threshold, shaky_threshold)
        self.unhealthy_threshold = unhealthy_threshold
        self.shaky_threshold = shaky_threshold

    def classify(self, score: float) -> HealthTier:
        return classify(score, self.unhealthy_threshold, self.shaky_threshold)
