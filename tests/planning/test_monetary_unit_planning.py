#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Tests for monetary unit sample planning."""

import math

import numpy as np
import pandas as pd
import pytest

from auditsampling import MonetaryUnitPlanner
from auditsampling._typing import IssueKind, SignFilter
from auditsampling.datasets import load_synthetic_invoice_population
from auditsampling.exceptions import EmptyPopulationException, InvalidArgumentsException, InvalidFieldException
from auditsampling.planning.monetary_unit.calculator import population_value


@pytest.fixture(scope='module')
def population() -> pd.DataFrame:
    return pd.DataFrame({'amount': [1200.0, -300.0, 450.0, 8000.0, 0.0, -50.0]})


@pytest.fixture(scope='module')
def invoices() -> pd.DataFrame:
    return load_synthetic_invoice_population(size=2000, random_state=13)


@pytest.mark.parametrize(
    'sign_filter, expected',
    [(SignFilter.POSITIVE, 9650.0), (SignFilter.NEGATIVE, 350.0), (SignFilter.ABSOLUTE, 10000.0)],
)
def test_population_value_by_sign_filter(population, sign_filter, expected):  # noqa: D103
    assert population_value(population['amount'], sign_filter) == expected


def test_reference_plan(population):  # noqa: D103
    res = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05).calculate(population)

    assert res.population_value == 10000.0
    assert res.population_size == 6
    assert res.reliability_factor == pytest.approx(2.9957, abs=1e-4)
    assert res.min_sample_size == 60
    assert res.sample_size == 60
    assert res.sample_interval == pytest.approx(10000.0 / 60)
    assert res.tolerable_misstatement == pytest.approx(500.0)
    assert res.issues == []


def test_expected_error_increases_sample_size(population):  # noqa: D103
    res = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05, expected_error=0.01).calculate(
        population
    )

    assert res.sample_size == math.ceil(res.reliability_factor / 0.04)
    assert res.sample_size > res.min_sample_size
    assert res.tolerable_contamination == pytest.approx(400.0)


@pytest.mark.parametrize('tolerable_error', [0.01, 0.02, 0.05, 0.1, 0.3])
@pytest.mark.parametrize('expected_error', [0.0, 0.005])
@pytest.mark.parametrize('sign_filter', ['positive', 'negative', 'absolute'])
def test_sample_interval_times_sample_size_equals_population_value(  # noqa: D103
    invoices, tolerable_error, expected_error, sign_filter
):
    res = MonetaryUnitPlanner(
        'book_value',
        confidence_level=95,
        tolerable_error=tolerable_error,
        expected_error=expected_error,
        sign_filter=sign_filter,
    ).calculate(invoices)

    assert res.sample_interval * res.sample_size == pytest.approx(res.population_value)
    assert res.sample_interval > 0
    assert isinstance(res.sample_size, int)


def test_monetary_error_type_converts_amounts_to_rates(population):  # noqa: D103
    by_rate = MonetaryUnitPlanner('amount', confidence_level=90, tolerable_error=0.05).calculate(population)
    by_amount = MonetaryUnitPlanner(
        'amount', confidence_level=90, tolerable_error=500.0, error_type='monetary'
    ).calculate(population)

    assert by_amount.tolerable_error_rate == pytest.approx(0.05)
    assert by_amount.sample_size == by_rate.sample_size


def test_without_value_column_population_value_is_record_count(population):  # noqa: D103
    res = MonetaryUnitPlanner(None, confidence_level=95, tolerable_error=0.5).calculate(population)

    assert res.population_value == 6.0
    assert res.sample_size == 6
    assert res.sample_interval == pytest.approx(1.0)


def test_expected_error_at_tolerable_error_recommends_full_examination(population):  # noqa: D103
    res = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05, expected_error=0.05).calculate(
        population
    )

    assert res.sample_size == len(population)
    assert res.degraded
    assert res.issues[0].kind == IssueKind.INVALID_PARAMETERS
    assert res.sample_interval == pytest.approx(res.population_value / len(population))


def test_full_confidence_falls_back_to_population_size(population):  # noqa: D103
    res = MonetaryUnitPlanner('amount', confidence_level=100, tolerable_error=0.05).calculate(population)

    assert np.isinf(res.reliability_factor)
    assert res.min_sample_size == len(population)
    assert res.sample_size == len(population)


def test_to_df_has_single_row(population):  # noqa: D103
    sut = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05).calculate(population).to_df()
    assert len(sut) == 1
    assert 'sample_interval' in sut.columns
    assert 'issues' not in sut.columns


def test_accepts_list_of_records():  # noqa: D103
    records = [{'amount': 100.0}, {'amount': 900.0}]
    res = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.1).calculate(records)
    assert res.population_value == 1000.0


def test_empty_data_raises():  # noqa: D103
    with pytest.raises(EmptyPopulationException):
        _ = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05).calculate(
            pd.DataFrame({'amount': []})
        )


def test_zero_population_value_raises(population):  # noqa: D103
    with pytest.raises(EmptyPopulationException, match='population value'):
        _ = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05, sign_filter='negative').calculate(
            population[population['amount'] >= 0]
        )


def test_missing_value_column_raises(population):  # noqa: D103
    with pytest.raises(InvalidFieldException, match='missing required columns'):
        _ = MonetaryUnitPlanner('value', confidence_level=95, tolerable_error=0.05).calculate(population)


@pytest.mark.parametrize('bad_value', ['abc', None, np.nan, np.inf])
def test_non_numeric_value_raises(bad_value):  # noqa: D103
    data = pd.DataFrame({'amount': [100.0, bad_value, 200.0]})
    with pytest.raises(InvalidFieldException, match='non-numeric'):
        _ = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error=0.05).calculate(data)


@pytest.mark.parametrize(
    'kwargs',
    [
        {'confidence_level': 0},
        {'tolerable_error': 0},
        {'tolerable_error': 1.5},
        {'tolerable_error': -10, 'error_type': 'monetary'},
        {'expected_error': -0.01},
        {'sign_filter': 'both'},
        {'error_type': 'percentage'},
        {'tolerable_error': '5%'},
        {'expected_error': None},
        {'tolerable_error': np.nan},
    ],
)
def test_invalid_arguments_raise(kwargs):  # noqa: D103
    params = {'value_column_name': 'amount', 'confidence_level': 95, 'tolerable_error': 0.05, **kwargs}
    with pytest.raises(InvalidArgumentsException):
        _ = MonetaryUnitPlanner(**params)


def test_string_tolerable_error_raises_invalid_arguments():  # noqa: D103
    with pytest.raises(InvalidArgumentsException, match="expected type of 'tolerable_error' to be 'float' or 'int'"):
        _ = MonetaryUnitPlanner('amount', confidence_level=95, tolerable_error='0.05')
