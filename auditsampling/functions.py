#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Plain function interface over the planning, extraction and evaluation calculators.

Every function builds the matching calculator from its keyword arguments, runs it once and returns
its result. Use the calculators directly to reuse a configuration across data sets.
"""

from typing import Optional, Union

from auditsampling._typing import (
    ControlMode,
    ErrorType,
    ExtractionMode,
    HighValueManagement,
    PrecisionLimitMode,
    RandomState,
    SignFilter,
)
from auditsampling.base import DataLike
from auditsampling.confidence_factors import ConfidenceFactorTable
from auditsampling.evaluation.attributes import AttributeEvaluator
from auditsampling.evaluation.attributes import Result as AttributeEvaluationResult
from auditsampling.evaluation.cell_classical import CellClassicalEvaluator
from auditsampling.evaluation.result import EvaluationSummary
from auditsampling.evaluation.stringer_bound import StringerBoundEvaluator
from auditsampling.extraction.random_records import RandomRecordSelector
from auditsampling.extraction.random_records import Result as RandomSelectionResult
from auditsampling.extraction.systematic import Result as ExtractionResult
from auditsampling.extraction.systematic import SystematicExtractor
from auditsampling.planning.attributes import AttributePlanner
from auditsampling.planning.attributes import Result as AttributePlanningResult
from auditsampling.planning.monetary_unit import MonetaryUnitPlanner
from auditsampling.planning.monetary_unit import Result as MonetaryUnitPlanningResult


def plan_attribute_sample(
    population_size: int,
    tolerable_deviation_rate: float,
    confidence_level: float,
    expected_deviation_rate: float = 0.0,
    control_mode: Union[str, ControlMode] = ControlMode.SINGLE_RISK,
    confidence_factor_table: Optional[ConfidenceFactorTable] = None,
) -> AttributePlanningResult:
    """Plans the sample size and critical number of deviations of an attribute sample.

    Examples
    --------
    >>> from auditsampling import plan_attribute_sample
    >>> plan = plan_attribute_sample(population_size=500, tolerable_deviation_rate=0.05, confidence_level=95)
    >>> plan.sample_size, plan.critical_deviation
    (59, 0)
    """
    return AttributePlanner(
        population_size=population_size,
        tolerable_deviation_rate=tolerable_deviation_rate,
        confidence_level=confidence_level,
        expected_deviation_rate=expected_deviation_rate,
        control_mode=control_mode,
        confidence_factor_table=confidence_factor_table,
    ).calculate()


def plan_monetary_unit_sample(
    data: DataLike,
    value_column_name: Optional[str],
    confidence_level: float,
    tolerable_error: float,
    expected_error: float = 0.0,
    sign_filter: Union[str, SignFilter] = SignFilter.ABSOLUTE,
    error_type: Union[str, ErrorType] = ErrorType.RATE,
) -> MonetaryUnitPlanningResult:
    """Plans the sample size and sampling interval of a monetary unit sample."""
    return MonetaryUnitPlanner(
        value_column_name=value_column_name,
        confidence_level=confidence_level,
        tolerable_error=tolerable_error,
        expected_error=expected_error,
        sign_filter=sign_filter,
        error_type=error_type,
    ).calculate(data)


def extract_systematic_sample(
    data: DataLike,
    sample_column_name: str,
    sample_interval: float,
    high_value_threshold: Optional[float] = None,
    extraction_mode: Union[str, ExtractionMode] = ExtractionMode.FIXED_INTERVAL,
    random_start_point: Optional[float] = None,
    sample_size: Optional[int] = None,
    random_state: RandomState = None,
    high_value_management: Union[str, HighValueManagement] = HighValueManagement.SEPARATE,
) -> ExtractionResult:
    """Extracts a monetary unit sample, setting aside high value items unless they are aggregated."""
    return SystematicExtractor(
        sample_column_name=sample_column_name,
        sample_interval=sample_interval,
        high_value_threshold=high_value_threshold,
        extraction_mode=extraction_mode,
        random_start_point=random_start_point,
        sample_size=sample_size,
        random_state=random_state,
        high_value_management=high_value_management,
    ).calculate(data)


def extract_random_sample(
    data: DataLike,
    sample_size: int,
    allow_duplicates: bool = False,
    start_record: int = 1,
    end_record: Optional[int] = None,
    random_state: RandomState = None,
) -> RandomSelectionResult:
    """Selects records at random for an attribute sample."""
    return RandomRecordSelector(
        sample_size=sample_size,
        allow_duplicates=allow_duplicates,
        start_record=start_record,
        end_record=end_record,
        random_state=random_state,
    ).calculate(data)


def evaluate_cell_classical(
    data: DataLike,
    sample_interval: float,
    confidence_level: float,
    tolerable_error: Optional[float] = None,
    precision_limit_mode: Union[str, PrecisionLimitMode] = PrecisionLimitMode.UPPER,
    high_value_items: Optional[DataLike] = None,
    book_value_column_name: str = 'book_value',
    audited_value_column_name: str = 'audited_value',
    reference_column_name: Optional[str] = None,
) -> EvaluationSummary:
    """Evaluates an audited monetary unit sample with the Cell & Classical PPS method."""
    return CellClassicalEvaluator(
        sample_interval=sample_interval,
        confidence_level=confidence_level,
        tolerable_error=tolerable_error,
        precision_limit_mode=precision_limit_mode,
        book_value_column_name=book_value_column_name,
        audited_value_column_name=audited_value_column_name,
        reference_column_name=reference_column_name,
    ).calculate(data, high_value_items)


def evaluate_stringer_bound(
    data: DataLike,
    sample_interval: float,
    confidence_level: float,
    tolerable_error: Optional[float] = None,
    precision_limit_mode: Union[str, PrecisionLimitMode] = PrecisionLimitMode.UPPER,
    high_value_items: Optional[DataLike] = None,
    book_value_column_name: str = 'book_value',
    audited_value_column_name: str = 'audited_value',
    reference_column_name: Optional[str] = None,
) -> EvaluationSummary:
    """Evaluates an audited monetary unit sample with the Stringer bound."""
    return StringerBoundEvaluator(
        sample_interval=sample_interval,
        confidence_level=confidence_level,
        tolerable_error=tolerable_error,
        precision_limit_mode=precision_limit_mode,
        book_value_column_name=book_value_column_name,
        audited_value_column_name=audited_value_column_name,
        reference_column_name=reference_column_name,
    ).calculate(data, high_value_items)


def evaluate_attribute_sample(
    sample_size: int,
    observed_deviations: int,
    confidence_level: float,
    tolerable_deviation_rate: Optional[float] = None,
) -> AttributeEvaluationResult:
    """Computes the deviation rate limits of an evaluated attribute sample."""
    return AttributeEvaluator(
        confidence_level=confidence_level,
        tolerable_deviation_rate=tolerable_deviation_rate,
    ).calculate(sample_size, observed_deviations)
