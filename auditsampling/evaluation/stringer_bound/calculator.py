#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Stringer bound evaluation of a monetary unit sample.

The upper error limit is the sum of three parts:

- basic precision, the bound when no misstatements are found
- the most likely error, the sum of all signed taintings times the sampling interval
- the precision gap widening, which weighs the ``i``-th nonzero tainting, in descending order of
  signed value, with the increase of the reliability factor caused by the ``i``-th misstatement
"""

from typing import List, Optional, Union

from auditsampling._typing import Issue, PrecisionLimitMode
from auditsampling.confidence_factors import incremental_reliability_factor, poisson_zero_factor
from auditsampling.evaluation.base import AbstractMonetaryUnitEvaluator
from auditsampling.evaluation.result import EvaluationStage, EvaluationSummary, PartitionEvaluation
from auditsampling.evaluation.tainting import HighValueTotals, SampleItem


class StringerBoundEvaluator(AbstractMonetaryUnitEvaluator):
    """Evaluates a monetary unit sample using the Stringer bound.

    The stage tables of the summary hold one row per nonzero tainting. ``previous_uel`` is the running
    bound before the tainting, ``simple_propagation`` its precision gap widening and ``max_stage_uel``
    the running bound after it, all in sampling intervals. Positive taintings end up in the
    overstatement table, negative ones in the understatement table.

    Examples
    --------
    >>> import pandas as pd
    >>> from auditsampling import StringerBoundEvaluator
    >>> sample = pd.DataFrame({'book_value': [250.0, 400.0], 'audited_value': [0.0, 400.0]})
    >>> summary = StringerBoundEvaluator(sample_interval=1000, confidence_level=95).calculate(sample)
    >>> round(summary.basic_precision, 2), round(summary.upper_error_limit, 2)
    (2995.73, 5743.86)
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
        interval = self.sample_interval

        taintings = sorted((item.tainting for item in items if item.tainting != 0), reverse=True)
        stages = stringer_stages(taintings, self.confidence_level)
        over_stages = [stage for stage in stages if stage.tainting > 0]
        under_stages = [stage for stage in stages if stage.tainting < 0]

        most_likely_error = sum(taintings) * interval
        precision_gap_widening = sum(stage.simple_propagation for stage in stages) * interval
        upper_error_limit = basic_precision + most_likely_error + precision_gap_widening

        overstatements = self._partition(over_stages, basic_precision)
        understatements = self._partition(under_stages, basic_precision)

        if self.precision_limit_mode == PrecisionLimitMode.UPPER_LOWER:
            gross_lower_error_limit: Optional[float] = understatements.upper_error_limit
            net_lower_error_limit: Optional[float] = understatements.upper_error_limit - overstatements.most_likely_error
        else:
            gross_lower_error_limit, net_lower_error_limit = None, None

        return EvaluationSummary(
            method='stringer_bound',
            sample_interval=interval,
            confidence_level=self.confidence_level,
            tolerable_error=self.tolerable_error,
            precision_limit_mode=self.precision_limit_mode,
            items=items,
            basic_precision=basic_precision,
            most_likely_error=most_likely_error,
            precision_gap_widening=precision_gap_widening,
            upper_error_limit=upper_error_limit,
            overstatements=overstatements,
            understatements=understatements,
            gross_most_likely_error=overstatements.most_likely_error,
            net_most_likely_error=most_likely_error,
            gross_upper_error_limit=overstatements.upper_error_limit,
            net_upper_error_limit=upper_error_limit,
            gross_lower_error_limit=gross_lower_error_limit,
            net_lower_error_limit=net_lower_error_limit,
            high_values=high_values,
            issues=issues,
        )

    def _partition(self, stages: List[EvaluationStage], basic_precision: float) -> PartitionEvaluation:
        # understatements are reported as magnitudes
        total_taintings = sum(abs(stage.tainting) for stage in stages)
        most_likely_error = total_taintings * self.sample_interval
        precision_gap_widening = sum(abs(stage.simple_propagation) for stage in stages) * self.sample_interval
        return PartitionEvaluation(
            stages=stages,
            total_taintings=total_taintings,
            most_likely_error=most_likely_error,
            precision_gap_widening=precision_gap_widening,
            upper_error_limit=basic_precision + most_likely_error + precision_gap_widening,
        )


def stringer_stages(taintings: List[float], confidence_level: float) -> List[EvaluationStage]:
    """Builds one stage per nonzero tainting, sorted descending by signed value."""
    stages: List[EvaluationStage] = []
    running_uel = poisson_zero_factor(confidence_level)
    cumulative_tainting = 0.0

    for stage, tainting in enumerate(taintings, start=1):
        cumulative_tainting += tainting
        uel_factor = incremental_reliability_factor(confidence_level, stage)
        gap_widening = uel_factor * tainting
        next_uel = running_uel + tainting + gap_widening

        stages.append(
            EvaluationStage(
                stage=stage,
                uel_factor=uel_factor,
                tainting=tainting,
                average_tainting=cumulative_tainting / stage,
                previous_uel=running_uel,
                loading_propagation=running_uel + tainting,
                simple_propagation=gap_widening,
                max_stage_uel=next_uel,
            )
        )
        running_uel = next_uel

    return stages
