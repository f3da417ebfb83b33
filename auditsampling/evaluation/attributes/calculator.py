#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Evaluation of attribute samples using Poisson confidence limits on the deviation rate."""

from typing import Optional

from scipy.stats import chi2

from auditsampling.base import AbstractCalculator, _validate_confidence_level
from auditsampling.evaluation.attributes.result import Result
from auditsampling.exceptions import InvalidArgumentsException


class AttributeEvaluator(AbstractCalculator):
    """Computes the sample deviation rate and its confidence limits for an attribute sample."""

    def __init__(self, confidence_level: float, tolerable_deviation_rate: Optional[float] = None):
        """Creates a new AttributeEvaluator instance.

        Parameters
        ----------
        confidence_level: float
            Confidence level in (0, 100).
        tolerable_deviation_rate: Optional[float], default=None
            Tolerable deviation rate in (0, 1]. When given the result tells whether the control can be relied upon.

        Examples
        --------
        >>> from auditsampling import AttributeEvaluator
        >>> res = AttributeEvaluator(confidence_level=95, tolerable_deviation_rate=0.05).calculate(59, 0)
        >>> round(res.unilateral_upper_limit, 2), res.is_accepted
        (5.08, False)
        """
        super().__init__()

        self.confidence_level = _validate_confidence_level(confidence_level, upper_inclusive=False)
        if tolerable_deviation_rate is not None and not 0 < tolerable_deviation_rate <= 1:
            raise InvalidArgumentsException(
                f"'tolerable_deviation_rate' should lie in (0, 1] but got {tolerable_deviation_rate}"
            )
        self.tolerable_deviation_rate = tolerable_deviation_rate

    def _calculate(self, sample_size: int, observed_deviations: int, *args, **kwargs) -> Result:
        if sample_size < 1:
            raise InvalidArgumentsException(f"'sample_size' should be at least 1 but got {sample_size}")
        if observed_deviations < 0:
            raise InvalidArgumentsException(
                f"'observed_deviations' should not be negative but got {observed_deviations}"
            )
        if observed_deviations > sample_size:
            raise InvalidArgumentsException(
                f"'observed_deviations' ({observed_deviations}) cannot exceed 'sample_size' ({sample_size})"
            )

        alpha = 1 - self.confidence_level / 100
        unilateral_upper = poisson_upper_limit(observed_deviations, 1 - alpha)
        bilateral_upper = poisson_upper_limit(observed_deviations, 1 - alpha / 2)
        bilateral_lower = poisson_lower_limit(observed_deviations, alpha / 2)

        return Result(
            sample_size=int(sample_size),
            observed_deviations=int(observed_deviations),
            confidence_level=self.confidence_level,
            sample_deviation_rate=observed_deviations / sample_size * 100,
            unilateral_upper_limit=unilateral_upper / sample_size * 100,
            bilateral_lower_limit=bilateral_lower / sample_size * 100,
            bilateral_upper_limit=bilateral_upper / sample_size * 100,
            tolerable_deviation_rate=self.tolerable_deviation_rate,
        )


def poisson_upper_limit(deviations: int, probability: float) -> float:
    """Expected number of deviations ``lambda`` at which ``P(X <= deviations) = 1 - probability``."""
    return float(chi2.ppf(probability, 2 * (deviations + 1)) / 2)


def poisson_lower_limit(deviations: int, probability: float) -> float:
    """Expected number of deviations ``lambda`` at which ``P(X >= deviations) = probability``, 0 without deviations."""
    if deviations == 0:
        return 0.0
    return float(chi2.ppf(probability, 2 * deviations) / 2)
