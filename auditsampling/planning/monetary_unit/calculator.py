#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Monetary unit sample planner."""

import math
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from auditsampling._typing import ErrorType, Issue, IssueKind, SignFilter
from auditsampling.base import (
    AbstractCalculator,
    DataLike,
    _as_dataframe,
    _numeric_column,
    _validate_confidence_level,
    _validate_number,
)
from auditsampling.confidence_factors import poisson_zero_factor
from auditsampling.exceptions import EmptyPopulationException, InvalidArgumentsException
from auditsampling.planning.monetary_unit.result import Result


class MonetaryUnitPlanner(AbstractCalculator):
    """Computes the population value, sample size and sampling interval of a monetary unit sample."""

    def __init__(
        self,
        value_column_name: Optional[str],
        confidence_level: float,
        tolerable_error: float,
        expected_error: float = 0.0,
        sign_filter: Union[str, SignFilter] = SignFilter.ABSOLUTE,
        error_type: Union[str, ErrorType] = ErrorType.RATE,
    ):
        """Creates a new MonetaryUnitPlanner instance.

        Parameters
        ----------
        value_column_name: Optional[str]
            Column holding the monetary value of each item. When ``None`` every record counts as
            one unit and the population value equals the number of records.
        confidence_level: float
            Desired confidence level in (0, 100].
        tolerable_error: float
            Tolerable misstatement, as a fraction of the population value when ``error_type`` is
            ``rate`` or as an amount when it is ``monetary``.
        expected_error: float, default=0.0
            Expected misstatement, expressed like ``tolerable_error``.
        sign_filter: Union[str, SignFilter], default='absolute'
            ``positive`` sums the positive values, ``negative`` sums the magnitude of the negative
            values and ``absolute`` sums the magnitude of all values.
        error_type: Union[str, ErrorType], default='rate'
            How ``tolerable_error`` and ``expected_error`` are expressed.

        Examples
        --------
        >>> import pandas as pd
        >>> from auditsampling import MonetaryUnitPlanner
        >>> population = pd.DataFrame({'amount': [1200.0, -300.0, 450.0, 8000.0]})
        >>> res = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05).calculate(population)
        >>> res.sample_size
        60
        """
        super().__init__()

        self.value_column_name = value_column_name
        self.confidence_level = _validate_confidence_level(confidence_level)
        self.sign_filter = SignFilter.parse(sign_filter)
        self.error_type = ErrorType.parse(error_type)

        tolerable_error = _validate_number(tolerable_error, 'tolerable_error')
        expected_error = _validate_number(expected_error, 'expected_error')
        if self.error_type == ErrorType.RATE and not 0 < tolerable_error <= 1:
            raise InvalidArgumentsException(f"'tolerable_error' rate should lie in (0, 1] but got {tolerable_error}")
        if tolerable_error <= 0:
            raise InvalidArgumentsException(f"'tolerable_error' should be positive but got {tolerable_error}")
        if expected_error < 0:
            raise InvalidArgumentsException(f"'expected_error' should not be negative but got {expected_error}")

        self.tolerable_error = tolerable_error
        self.expected_error = expected_error

    def _calculate(self, data: DataLike, *args, **kwargs) -> Result:
        data = _as_dataframe(data)
        if data.empty:
            raise EmptyPopulationException('data contains no rows. Please provide a valid data set.')

        population_size = len(data)
        population_value = self._population_value(data)
        if population_value <= 0:
            raise EmptyPopulationException(
                f"population value for sign filter '{self.sign_filter.value}' is zero, nothing to sample"
            )

        if self.error_type == ErrorType.MONETARY:
            tolerable_rate = self.tolerable_error / population_value
            expected_rate = self.expected_error / population_value
        else:
            tolerable_rate = self.tolerable_error
            expected_rate = self.expected_error

        factor = poisson_zero_factor(self.confidence_level)
        issues: List[Issue] = []

        raw_min_sample_size = factor / tolerable_rate
        if np.isfinite(raw_min_sample_size) and raw_min_sample_size > 0:
            min_sample_size = max(math.ceil(raw_min_sample_size), 1)
        else:
            min_sample_size = population_size

        if tolerable_rate <= expected_rate:
            message = (
                f"expected error rate {expected_rate:.6g} is not below the tolerable error rate {tolerable_rate:.6g}. "
                "Recommending examination of the full population."
            )
            self._logger.warning(message)
            issues.append(Issue(kind=IssueKind.INVALID_PARAMETERS, message=message))
            sample_size = population_size
        else:
            raw_sample_size = factor / (tolerable_rate - expected_rate)
            if not np.isfinite(raw_sample_size) or raw_sample_size < 0 or raw_sample_size < raw_min_sample_size:
                self._logger.debug(
                    f"sample size {raw_sample_size} is unusable, falling back to minimum sample size {min_sample_size}"
                )
                sample_size = min_sample_size
            else:
                sample_size = max(math.ceil(raw_sample_size), 1)

        sample_interval = population_value / sample_size

        return Result(
            population_value=population_value,
            population_size=population_size,
            sample_size=sample_size,
            sample_interval=sample_interval,
            min_sample_size=min_sample_size,
            reliability_factor=factor,
            confidence_level=self.confidence_level,
            tolerable_error_rate=tolerable_rate,
            expected_error_rate=expected_rate,
            tolerable_misstatement=tolerable_rate * population_value,
            expected_misstatement=expected_rate * population_value,
            tolerable_contamination=(tolerable_rate - expected_rate) * population_value,
            sign_filter=self.sign_filter,
            issues=issues,
        )

    def _population_value(self, data: pd.DataFrame) -> float:
        if self.value_column_name is None:
            return float(len(data))

        values = _numeric_column(data, self.value_column_name)
        return population_value(values, self.sign_filter)


def population_value(values: pd.Series, sign_filter: Union[str, SignFilter] = SignFilter.ABSOLUTE) -> float:
    """Sums a series of monetary values according to a sign filter."""
    sign_filter = SignFilter.parse(sign_filter)
    if sign_filter == SignFilter.POSITIVE:
        return float(values[values > 0].sum())
    elif sign_filter == SignFilter.NEGATIVE:
        return float(values[values < 0].abs().sum())
    else:
        return float(values.abs().sum())
