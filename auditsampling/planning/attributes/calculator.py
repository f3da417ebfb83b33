#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Attribute sample planner.

The sample size follows from the zero-deviation confidence factor divided by the tolerable
deviation rate (or by the margin between tolerable and expected rate when both the risk of
overreliance and the risk of underreliance are controlled), corrected for finite populations.
"""

import math
from typing import List, Optional, Union

import numpy as np
import pandas as pd
from scipy.stats import poisson

from auditsampling._typing import ControlMode, Issue, IssueKind
from auditsampling.base import AbstractCalculator, _validate_confidence_level, _validate_number
from auditsampling.confidence_factors import DEFAULT_CONFIDENCE_FACTOR_TABLE, ConfidenceFactorTable
from auditsampling.exceptions import InvalidArgumentsException
from auditsampling.planning.attributes.result import Result

DEVIATION_TABLE_ROWS = 10


class AttributePlanner(AbstractCalculator):
    """Computes the sample size and critical number of deviations of an attribute sample."""

    def __init__(
        self,
        population_size: int,
        tolerable_deviation_rate: float,
        confidence_level: float,
        expected_deviation_rate: float = 0.0,
        control_mode: Union[str, ControlMode] = ControlMode.SINGLE_RISK,
        confidence_factor_table: Optional[ConfidenceFactorTable] = None,
    ):
        """Creates a new AttributePlanner instance.

        Parameters
        ----------
        population_size: int
            Number of items in the population, should be positive.
        tolerable_deviation_rate: float
            Maximum rate of deviations the auditor accepts, in (0, 1].
        confidence_level: float
            Desired confidence level in (0, 100].
        expected_deviation_rate: float, default=0.0
            Rate of deviations the auditor expects. Only used in ``dual_risk`` mode.
        control_mode: Union[str, ControlMode], default='single_risk'
            ``single_risk`` controls the risk of overreliance only, ``dual_risk`` controls both the
            risk of overreliance and of underreliance.
        confidence_factor_table: ConfidenceFactorTable, default=None
            Table to look factors up in. Defaults to the bundled table.

        Examples
        --------
        >>> from auditsampling import AttributePlanner
        >>> res = AttributePlanner(population_size=500, tolerable_deviation_rate=0.05, confidence_level=95).calculate()
        >>> res.sample_size, res.critical_deviation
        (59, 0)
        """
        super().__init__()

        if isinstance(population_size, bool) or not isinstance(population_size, (int, np.integer)):
            raise InvalidArgumentsException(
                f"expected type of 'population_size' to be 'int' but got '{type(population_size).__name__}'"
            )
        if population_size <= 0:
            raise InvalidArgumentsException(f"'population_size' should be positive but got {population_size}")
        tolerable_deviation_rate = _validate_number(tolerable_deviation_rate, 'tolerable_deviation_rate')
        expected_deviation_rate = _validate_number(expected_deviation_rate, 'expected_deviation_rate')
        if not 0 < tolerable_deviation_rate <= 1:
            raise InvalidArgumentsException(
                f"'tolerable_deviation_rate' should lie in (0, 1] but got {tolerable_deviation_rate}"
            )
        if not 0 <= expected_deviation_rate <= 1:
            raise InvalidArgumentsException(
                f"'expected_deviation_rate' should lie in [0, 1] but got {expected_deviation_rate}"
            )

        self.population_size = int(population_size)
        self.tolerable_deviation_rate = tolerable_deviation_rate
        self.expected_deviation_rate = expected_deviation_rate
        self.confidence_level = _validate_confidence_level(confidence_level)
        self.control_mode = ControlMode.parse(control_mode)
        self.confidence_factor_table = confidence_factor_table or DEFAULT_CONFIDENCE_FACTOR_TABLE

    def _calculate(self, *args, **kwargs) -> Result:
        table = self.confidence_factor_table
        issues: List[Issue] = []

        if self.control_mode == ControlMode.SINGLE_RISK:
            divisor = self.tolerable_deviation_rate
        else:
            divisor = self.tolerable_deviation_rate - self.expected_deviation_rate

        factor = table.factor_for_zero_deviations(self.confidence_level)

        if divisor <= 0:
            message = (
                f"expected deviation rate {self.expected_deviation_rate} is not below the tolerable deviation rate "
                f"{self.tolerable_deviation_rate}. Recommending examination of the full population."
            )
            self._logger.warning(message)
            issues.append(Issue(kind=IssueKind.INVALID_PARAMETERS, message=message))
            uncorrected_sample_size = self.population_size
            sample_size = self.population_size
        else:
            uncorrected_sample_size = math.ceil(factor / divisor)
            sample_size = _finite_population_correction(uncorrected_sample_size, self.population_size)

        critical_deviation = table.critical_deviation_factor(
            self.confidence_level, sample_size * self.tolerable_deviation_rate
        )
        self._logger.debug(
            f"planned attribute sample of {sample_size} items with critical deviation {critical_deviation}"
        )

        return Result(
            sample_size=sample_size,
            critical_deviation=critical_deviation,
            population_size=self.population_size,
            tolerable_deviation_rate=self.tolerable_deviation_rate,
            expected_deviation_rate=self.expected_deviation_rate,
            confidence_level=table.nearest_confidence_level(self.confidence_level),
            control_mode=self.control_mode,
            factor=factor,
            divisor=divisor,
            uncorrected_sample_size=uncorrected_sample_size,
            deviation_table=_deviation_table(sample_size, self.tolerable_deviation_rate, critical_deviation),
            issues=issues,
        )


def _finite_population_correction(uncorrected_sample_size: int, population_size: int) -> int:
    if population_size > 1 and uncorrected_sample_size < population_size:
        sample_size = math.ceil(uncorrected_sample_size / (1 + uncorrected_sample_size / population_size))
    else:
        sample_size = population_size
    return max(sample_size, 1)


def _deviation_table(sample_size: int, tolerable_deviation_rate: float, critical_deviation: int) -> pd.DataFrame:
    deviations = np.arange(0, min(sample_size, DEVIATION_TABLE_ROWS) + 1)
    expected_deviations = sample_size * tolerable_deviation_rate
    return pd.DataFrame(
        {
            'deviations': deviations,
            'sample_deviation_rate': deviations / sample_size * 100,
            'achieved_confidence': (1 - poisson.cdf(deviations, expected_deviations)) * 100,
            'is_critical': deviations == critical_deviation,
        }
    )
