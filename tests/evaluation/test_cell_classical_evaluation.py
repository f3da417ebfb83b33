#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Tests for the Cell & Classical PPS evaluation."""

import numpy as np
import pandas as pd
import pytest

from auditsampling import CellClassicalEvaluator
from auditsampling._typing import IssueKind, PrecisionLimitMode
from auditsampling.confidence_factors import reliability_factor
from auditsampling.evaluation.cell_classical import stage_table
from auditsampling.exceptions import InvalidArgumentsException, InvalidFieldException

RF0 = reliability_factor(95, 0)


@pytest.fixture(scope='module')
def clean_sample() -> pd.DataFrame:
    book_values = [500.0, 800.0, 1200.0, 75.0, 3300.0]
    return pd.DataFrame({'book_value': book_values, 'audited_value': book_values})


@pytest.fixture(scope='module')
def mixed_sample() -> pd.DataFrame:
    return pd.DataFrame(
        {
            'reference': ['INV-1', 'INV-2', 'INV-3', 'INV-4'],
            'book_value': [800.0, 1000.0, 400.0, 250.0],
            'audited_value': [400.0, 1200.0, 400.0, 250.0],
        }
    )


@pytest.mark.parametrize('confidence_level', [80, 90, 95, 99])
@pytest.mark.parametrize('precision_limit_mode', ['upper', 'upper_lower'])
def test_zero_taintings_give_basic_precision(clean_sample, confidence_level, precision_limit_mode):  # noqa: D103
    summary = CellClassicalEvaluator(
        sample_interval=1000, confidence_level=confidence_level, precision_limit_mode=precision_limit_mode
    ).calculate(clean_sample)

    assert summary.most_likely_error == 0
    assert summary.upper_error_limit == summary.basic_precision
    assert summary.basic_precision == pytest.approx(reliability_factor(confidence_level, 0) * 1000)
    assert summary.overstatements.stages == []
    assert summary.understatements.stages == []
    assert summary.precision_gap_widening == 0
    assert summary.error_count == 0


def test_single_overstatement():  # noqa: D103
    sample = pd.DataFrame({'book_value': [500.0, 800.0, 1200.0], 'audited_value': [500.0, 400.0, 1200.0]})
    summary = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(sample)

    assert summary.most_likely_error == pytest.approx(500.0)
    assert summary.upper_error_limit == pytest.approx((RF0 + 0.5) * 1000)
    stage = summary.overstatements.stages[0]
    assert stage.previous_uel == pytest.approx(RF0)
    assert stage.loading_propagation == pytest.approx(RF0 + 0.5)
    assert stage.simple_propagation == pytest.approx((reliability_factor(95, 1) - RF0) * 0.5)
    assert stage.max_stage_uel == pytest.approx(RF0 + 0.5)


def test_stage_taintings_are_sorted_by_magnitude():  # noqa: D103
    sample = pd.DataFrame({'book_value': [100.0, 100.0, 100.0], 'audited_value': [60.0, 0.0, 80.0]})
    summary = CellClassicalEvaluator(sample_interval=500, confidence_level=90).calculate(sample)

    stages = summary.overstatements.stages
    assert [stage.tainting for stage in stages] == pytest.approx([1.0, 0.4, 0.2])
    assert [stage.average_tainting for stage in stages] == pytest.approx([1.0, 0.7, 1.6 / 3])
    assert [stage.stage for stage in stages] == [1, 2, 3]


@pytest.mark.slow
@pytest.mark.parametrize('seed', [0, 1, 2, 3, 4])
@pytest.mark.parametrize('confidence_level', [75, 90, 95, 99.5])
def test_max_stage_uel_never_decreases(seed, confidence_level):  # noqa: D103
    rng = np.random.default_rng(seed)
    magnitudes = np.sort(rng.uniform(0.0, 1.0, size=25))[::-1]
    stages = stage_table(magnitudes, confidence_level)

    bounds = [stage.max_stage_uel for stage in stages]
    assert all(later >= earlier for earlier, later in zip(bounds, bounds[1:]))
    assert bounds[0] >= reliability_factor(confidence_level, 0)


def test_gross_and_net_figures(mixed_sample):  # noqa: D103
    summary = CellClassicalEvaluator(
        sample_interval=1000,
        confidence_level=95,
        precision_limit_mode=PrecisionLimitMode.UPPER_LOWER,
        reference_column_name='reference',
    ).calculate(mixed_sample)

    # INV-1 overstated by half, INV-2 understated by a fifth
    assert summary.gross_most_likely_error == pytest.approx(500.0)
    assert summary.net_most_likely_error == pytest.approx(300.0)
    assert summary.most_likely_error == pytest.approx(300.0)
    assert summary.gross_upper_error_limit == pytest.approx((RF0 + 0.5) * 1000)
    assert summary.net_upper_error_limit == pytest.approx((RF0 + 0.5) * 1000 - 200.0)
    assert summary.gross_lower_error_limit == pytest.approx((RF0 + 0.2) * 1000)
    assert summary.net_lower_error_limit == pytest.approx((RF0 + 0.2) * 1000 - 500.0)
    assert summary.understatements.stages[0].tainting == pytest.approx(0.2)
    assert summary.error_count == 2


def test_upper_mode_suppresses_lower_limits(mixed_sample):  # noqa: D103
    summary = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(mixed_sample)
    assert summary.gross_lower_error_limit is None
    assert summary.net_lower_error_limit is None


@pytest.mark.parametrize('tolerable_error, expected', [(None, None), (4000.0, True), (3000.0, False)])
def test_acceptance_decision(mixed_sample, tolerable_error, expected):  # noqa: D103
    summary = CellClassicalEvaluator(
        sample_interval=1000, confidence_level=95, tolerable_error=tolerable_error
    ).calculate(mixed_sample)
    assert summary.is_accepted is expected


def test_high_value_items_are_reported_separately(mixed_sample):  # noqa: D103
    high_values = pd.DataFrame({'book_value': [25000.0, 14000.0], 'audited_value': [24000.0, 14000.0]})
    with_high_values = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(
        mixed_sample, high_values
    )
    without_high_values = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(mixed_sample)

    assert with_high_values.high_values.count == 2
    assert with_high_values.high_values.book_value_total == 39000.0
    assert with_high_values.high_values.known_misstatement == 1000.0
    assert with_high_values.upper_error_limit == without_high_values.upper_error_limit


def test_data_anomalies_are_attached_to_summary():  # noqa: D103
    sample = pd.DataFrame({'book_value': [100.0, 100.0], 'audited_value': [-100.0, 100.0]})
    summary = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(sample)

    assert len(summary.issues) == 1
    assert summary.issues[0].kind == IssueKind.DATA_ANOMALY
    assert summary.overstatements.stages[0].tainting == pytest.approx(2.0)


def test_to_df_exports_both_stage_tables(mixed_sample):  # noqa: D103
    sut = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(mixed_sample).to_df()

    assert sut['partition'].tolist() == ['overstatement', 'understatement']
    assert {'uel_factor', 'loading_propagation', 'simple_propagation', 'max_stage_uel'} <= set(sut.columns)


def test_to_dict_holds_headline_figures(mixed_sample):  # noqa: D103
    sut = CellClassicalEvaluator(sample_interval=1000, confidence_level=95).calculate(mixed_sample).to_dict()
    assert sut['method'] == 'cell_classical'
    assert sut['sample_size'] == 4
    assert sut['error_count'] == 2


def test_missing_audited_column_raises(clean_sample):  # noqa: D103
    with pytest.raises(InvalidFieldException, match='audited'):
        _ = CellClassicalEvaluator(
            sample_interval=1000, confidence_level=95, audited_value_column_name='audited'
        ).calculate(clean_sample)


@pytest.mark.parametrize(
    'kwargs',
    [
        {'sample_interval': 0},
        {'confidence_level': 100},
        {'confidence_level': 0},
        {'tolerable_error': -1},
        {'precision_limit_mode': 'lower'},
    ],
)
def test_invalid_arguments_raise(kwargs):  # noqa: D103
    params = {'sample_interval': 1000, 'confidence_level': 95, **kwargs}
    with pytest.raises(InvalidArgumentsException):
        _ = CellClassicalEvaluator(**params)
