#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Base class for the monetary unit sample evaluators."""

from __future__ import annotations

from abc import abstractmethod
from typing import List, Optional, Union

from auditsampling._typing import Issue, PrecisionLimitMode
from auditsampling.base import (
    AbstractCalculator,
    DataLike,
    _as_dataframe,
    _list_missing,
    _validate_confidence_level,
    _validate_positive,
)
from auditsampling.confidence_factors import poisson_zero_factor
from auditsampling.evaluation.result import EvaluationSummary
from auditsampling.evaluation.tainting import HighValueTotals, SampleItem, high_value_totals, prepare_sample_items
from auditsampling.exceptions import InvalidArgumentsException


class AbstractMonetaryUnitEvaluator(AbstractCalculator):
    """Projects the taintings of an audited monetary unit sample onto the population.

    Subclasses implement :meth:`_evaluate`, which receives the prepared sample items and returns an
    :class:`~auditsampling.evaluation.result.EvaluationSummary`.
    """

    def __init__(
        self,
        sample_interval: float,
        confidence_level: float,
        tolerable_error: Optional[float] = None,
        precision_limit_mode: Union[str, PrecisionLimitMode] = PrecisionLimitMode.UPPER,
        book_value_column_name: str = 'book_value',
        audited_value_column_name: str = 'audited_value',
        reference_column_name: Optional[str] = None,
    ):
        """Creates a new monetary unit evaluator.

        Parameters
        ----------
        sample_interval: float
            The sampling interval used to extract the sample.
        confidence_level: float
            Confidence level in (0, 100).
        tolerable_error: Optional[float], default=None
            Tolerable misstatement amount. When given the summary tells whether the population can be accepted.
        precision_limit_mode: Union[str, PrecisionLimitMode], default='upper'
            ``upper`` only reports upper error limits, ``upper_lower`` also reports lower error limits.
        book_value_column_name: str, default='book_value'
            Column holding the recorded value of each sampled item.
        audited_value_column_name: str, default='audited_value'
            Column holding the audited value of each sampled item.
        reference_column_name: Optional[str], default=None
            Column identifying each sampled item. The row index is used when not given.
        """
        super().__init__()

        self.sample_interval = _validate_positive(sample_interval, 'sample_interval')
        self.confidence_level = _validate_confidence_level(confidence_level, upper_inclusive=False)
        if tolerable_error is not None and tolerable_error < 0:
            raise InvalidArgumentsException(f"'tolerable_error' should not be negative but got {tolerable_error}")
        self.tolerable_error = None if tolerable_error is None else float(tolerable_error)
        self.precision_limit_mode = PrecisionLimitMode.parse(precision_limit_mode)

        self.book_value_column_name = book_value_column_name
        self.audited_value_column_name = audited_value_column_name
        self.reference_column_name = reference_column_name

    def _calculate(
        self,
        data: DataLike,
        high_value_items: Optional[DataLike] = None,
        high_value_column_name: Optional[str] = None,
        *args,
        **kwargs,
    ) -> EvaluationSummary:
        data = _as_dataframe(data)
        required = [self.book_value_column_name, self.audited_value_column_name]
        if self.reference_column_name is not None:
            required.append(self.reference_column_name)
        _list_missing(required, data)

        items, issues = prepare_sample_items(
            data,
            book_value_column_name=self.book_value_column_name,
            audited_value_column_name=self.audited_value_column_name,
            reference_column_name=self.reference_column_name,
        )
        high_values = high_value_totals(
            None if high_value_items is None else _as_dataframe(high_value_items),
            book_value_column_name=self.book_value_column_name,
            audited_value_column_name=self.audited_value_column_name,
            fallback_value_column_name=high_value_column_name,
        )
        self._logger.debug(
            f"evaluating {len(items)} sampled items, {sum(1 for i in items if i.tainting != 0)} misstated, "
            f"at interval {self.sample_interval}"
        )

        return self._evaluate(items, issues, high_values)

    @property
    def basic_precision(self) -> float:
        return poisson_zero_factor(self.confidence_level) * self.sample_interval

    @abstractmethod
    def _evaluate(self, items: List[SampleItem], issues: List[Issue], high_values: HighValueTotals) -> EvaluationSummary:
        raise NotImplementedError(f"'{self.__class__.__name__}' must implement the '_evaluate' method")
