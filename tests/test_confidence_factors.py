#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Tests for the confidence factor table and the Poisson reliability factors."""

import math

import numpy as np
import pytest

from auditsampling.confidence_factors import (
    DEFAULT_CONFIDENCE_FACTOR_TABLE,
    ConfidenceFactorEntry,
    ConfidenceFactorTable,
    incremental_reliability_factor,
    poisson_zero_factor,
    reliability_factor,
)
from auditsampling.exceptions import InvalidArgumentsException, NotFoundException


@pytest.fixture(scope='module')
def table() -> ConfidenceFactorTable:
    return DEFAULT_CONFIDENCE_FACTOR_TABLE


@pytest.mark.parametrize('confidence_level', [0.5, 50, 80, 82.4, 87.5, 90, 92.49, 94, 95, 97, 99, 100])
def test_nearest_confidence_level_is_idempotent_and_in_table(table, confidence_level):  # noqa: D103
    nearest = table.nearest_confidence_level(confidence_level)

    assert nearest in table.confidence_levels
    assert table.nearest_confidence_level(nearest) == nearest


@pytest.mark.parametrize(
    'confidence_level, expected',
    [(94, 95.0), (96, 95.0), (97, 99.0), (92.5, 95.0), (82.5, 85.0), (1, 80.0), (100, 99.0)],
)
def test_nearest_confidence_level_prefers_higher_level_on_ties(table, confidence_level, expected):  # noqa: D103
    assert table.nearest_confidence_level(confidence_level) == expected


@pytest.mark.parametrize('confidence_level, expected', [(80, 1.61), (90, 2.31), (95, 3.30), (99, 4.61), (96, 3.30)])
def test_factor_for_zero_deviations(table, confidence_level, expected):  # noqa: D103
    assert table.factor_for_zero_deviations(confidence_level) == expected


@pytest.mark.parametrize(
    'max_allowed_factor, expected',
    [(0.5, 0), (3.30, 0), (4.74, 0), (4.75, 1), (6.5, 2), (16.97, 10), (100, 10)],
)
def test_critical_deviation_factor(table, max_allowed_factor, expected):  # noqa: D103
    assert table.critical_deviation_factor(95, max_allowed_factor) == expected


def test_factor_for_returns_factor_of_resolved_level(table):  # noqa: D103
    assert table.factor_for(94, 2) == 6.30


def test_factor_for_raises_not_found_for_unknown_deviations(table):  # noqa: D103
    with pytest.raises(NotFoundException, match='no factor'):
        _ = table.factor_for(95, 42)


def test_factor_for_zero_deviations_raises_when_table_has_no_zero_rows():  # noqa: D103
    table = ConfidenceFactorTable(entries=[ConfidenceFactorEntry(deviations=1, factor=4.75, confidence=95)])
    with pytest.raises(NotFoundException, match='zero deviations'):
        _ = table.factor_for_zero_deviations(95)


def test_table_rejects_factors_not_increasing_with_deviations():  # noqa: D103
    entries = [
        ConfidenceFactorEntry(deviations=0, factor=3.0, confidence=95),
        ConfidenceFactorEntry(deviations=1, factor=2.0, confidence=95),
    ]
    with pytest.raises(InvalidArgumentsException):
        _ = ConfidenceFactorTable(entries=entries)


@pytest.mark.parametrize(
    'entry',
    [
        ConfidenceFactorEntry(deviations=0, factor=3.0, confidence=0),
        ConfidenceFactorEntry(deviations=0, factor=3.0, confidence=101),
        ConfidenceFactorEntry(deviations=0, factor=-1.0, confidence=95),
        ConfidenceFactorEntry(deviations=-1, factor=3.0, confidence=95),
    ],
)
def test_table_rejects_invalid_entries(entry):  # noqa: D103
    with pytest.raises(InvalidArgumentsException):
        _ = ConfidenceFactorTable(entries=[entry])


def test_bundled_table_covers_expected_levels_and_deviations(table):  # noqa: D103
    assert table.confidence_levels == [80.0, 85.0, 90.0, 95.0, 99.0]
    for level in table.confidence_levels:
        assert [entry.deviations for entry in table.entries_for(level)] == list(range(11))


@pytest.mark.parametrize(
    'confidence_level, deviations, expected',
    [(95, 0, 2.9957), (95, 1, 4.7439), (95, 2, 6.2958), (90, 0, 2.3026), (99, 0, 4.6052)],
)
def test_reliability_factor_matches_poisson_upper_limits(confidence_level, deviations, expected):  # noqa: D103
    assert reliability_factor(confidence_level, deviations) == pytest.approx(expected, abs=1e-4)


def test_poisson_zero_factor_equals_minus_log_of_risk():  # noqa: D103
    assert poisson_zero_factor(95) == pytest.approx(-math.log(0.05))


def test_reliability_factor_is_infinite_at_full_confidence():  # noqa: D103
    assert np.isinf(reliability_factor(100))


@pytest.mark.parametrize('confidence_level', [0, -5, 100.5, 'high'])
def test_reliability_factor_rejects_invalid_confidence_level(confidence_level):  # noqa: D103
    with pytest.raises(InvalidArgumentsException):
        _ = reliability_factor(confidence_level)


def test_incremental_reliability_factor_is_difference_of_factors():  # noqa: D103
    assert incremental_reliability_factor(95, 1) == pytest.approx(reliability_factor(95, 1) - reliability_factor(95, 0))
    assert incremental_reliability_factor(95, 1) == pytest.approx(1.7481, abs=1e-4)


def test_incremental_reliability_factor_rejects_zero_deviations():  # noqa: D103
    with pytest.raises(InvalidArgumentsException):
        _ = incremental_reliability_factor(95, 0)
