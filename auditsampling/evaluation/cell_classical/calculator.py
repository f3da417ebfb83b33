#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Cell & Classical PPS evaluation of a monetary unit sample.

Overstatements and understatements are evaluated separately. Within each partition the tainting
magnitudes are sorted from largest to smallest and propagated through a stage table. Stage ``i``
takes the incremental reliability factor for ``i`` misstatements and keeps the largest of two bounds:

- loading propagation: the bound of the previous stage plus the tainting of stage ``i``
- simple propagation: the incremental factor times the average of the ``i`` largest taintings

The walk starts from the zero misstatement reliability factor, so the upper error limit of a
partition never drops below basic precision.
"""

from typing import List, Optional, Union

import numpy as np

from auditsampling._typing import Issue, PrecisionLimitMode
from auditsampling.confidence_factors import incremental_reliability_factor, poisson_zero_factor
from auditsampling.evaluation.base import AbstractMonetaryUnitEvaluator
from auditsampling.evaluation.result import EvaluationStage, EvaluationSummary, PartitionEvaluation
from auditsampling.evaluation.tainting import HighValueTotals, SampleItem, sorted_by_magnitude


class CellClassicalEvaluator(AbstractMonetaryUnitEvaluator):
    """Evaluates a monetary unit sample using the Cell & Classical PPS method.

    Examples
    --------
    >>> import pandas as pd
    >>> from auditsampling import CellClassicalEvaluator
    >>> sample = pd.DataFrame({'book_value': [500.0, 800.0, 1200.0], 'audited_value': [500.0, 400.0, 1200.0]})
    >>> summary = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(sample)
    >>> round(summary.most_likely_error, 2), round(summary.upper_error_limit, 2)
    (500.0, 3495.73)
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
        super().__init__(
            sample_interval=sample_interval,
            confidence_level=confidence_level,
            tolerable_error=tolerable_error,
            precision_limit_mode=precision_limit_mode,
            book_value_column_name=book_value_column_name,
            audited_value_column_name=audited_value_column_name,
            reference_column_name=reference_column_name,
        )

    def _evaluate(self, items: List[SampleItem], issues: List[Issue], high_values: HighValueTotals) -> EvaluationSummary:
        basic_precision = self.basic_precision
        overstatements = self._evaluate_partition([item.tainting for item in items if item.is_overstatement])
        understatements = self._evaluate_partition([item.tainting for item in items if item.is_understatement])

        gross_most_likely_error = overstatements.most_likely_error
        net_most_likely_error = overstatements.most_likely_error - understatements.most_likely_error
        gross_upper_error_limit = overstatements.upper_error_limit
        net_upper_error_limit = gross_upper_error_limit - understatements.most_likely_error

        if self.precision_limit_mode == PrecisionLimitMode.UPPER_LOWER:
            gross_lower_error_limit: Optional[float] = understatements.upper_error_limit
            net_lower_error_limit: Optional[float] = understatements.upper_error_limit - overstatements.most_likely_error
        else:
            gross_lower_error_limit, net_lower_error_limit = None, None

        summary = EvaluationSummary(
            method='cell_classical',
            sample_interval=self.sample_interval,
            confidence_level=self.confidence_level,
            tolerable_error=self.tolerable_error,
            precision_limit_mode=self.precision_limit_mode,
            items=items,
            basic_precision=basic_precision,
            most_likely_error=net_most_likely_error,
            precision_gap_widening=overstatements.precision_gap_widening,
            upper_error_limit=gross_upper_error_limit,
            overstatements=overstatements,
            understatements=understatements,
            gross_most_likely_error=gross_most_likely_error,
            net_most_likely_error=net_most_likely_error,
            gross_upper_error_limit=gross_upper_error_limit,
            net_upper_error_limit=net_upper_error_limit,
            gross_lower_error_limit=gross_lower_error_limit,
            net_lower_error_limit=net_lower_error_limit,
            high_values=high_values,
            issues=issues,
        )
        if summary.is_accepted is False:
            self._logger.info(
                f"upper error limit {gross_upper_error_limit:.2f} exceeds tolerable error {self.tolerable_error:.2f}"
            )
        return summary

    def _evaluate_partition(self, taintings: List[float]) -> PartitionEvaluation:
        magnitudes = sorted_by_magnitude(taintings)
        stages = stage_table(magnitudes, self.confidence_level)

        total_taintings = float(magnitudes.sum())
        most_likely_error = total_taintings * self.sample_interval
        if stages:
            upper_error_limit = stages[-1].max_stage_uel * self.sample_interval
        else:
            upper_error_limit = self.basic_precision

        return PartitionEvaluation(
            stages=stages,
            total_taintings=total_taintings,
            most_likely_error=most_likely_error,
            precision_gap_widening=upper_error_limit - self.basic_precision - most_likely_error,
            upper_error_limit=upper_error_limit,
        )


def stage_table(magnitudes: np.ndarray, confidence_level: float) -> List[EvaluationStage]:
    """Propagates tainting magnitudes, sorted from largest to smallest, through the Cell & Classical stages."""
    stages: List[EvaluationStage] = []
    previous_uel = poisson_zero_factor(confidence_level)
    cumulative_tainting = 0.0

    for stage, tainting in enumerate(magnitudes, start=1):
        cumulative_tainting += tainting
        uel_factor = incremental_reliability_factor(confidence_level, stage)
        average_tainting = cumulative_tainting / stage
        loading_propagation = previous_uel + tainting
        simple_propagation = uel_factor * average_tainting
        max_stage_uel = max(loading_propagation, simple_propagation)

        stages.append(
            EvaluationStage(
                stage=stage,
                uel_factor=uel_factor,
                tainting=float(tainting),
                average_tainting=average_tainting,
                previous_uel=previous_uel,
                loading_propagation=loading_propagation,
                simple_propagation=simple_propagation,
                max_stage_uel=max_stage_uel,
            )
        )
        previous_uel = max_stage_uel

    return stages
