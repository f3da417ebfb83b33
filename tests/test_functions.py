#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Tests for the plain function interface."""

import pandas as pd
import pytest

from auditsampling import (
    evaluate_attribute_sample,
    evaluate_cell_classical,
    evaluate_stringer_bound,
    extract_random_sample,
    extract_systematic_sample,
    load_synthetic_audited_sample,
    load_synthetic_invoice_population,
    plan_attribute_sample,
    plan_monetary_unit_sample,
)


@pytest.fixture(scope='module')
def population() -> pd.DataFrame:
    return load_synthetic_invoice_population(size=1500, random_state=21)


def test_plan_attribute_sample():  # noqa: D103
    plan = plan_attribute_sample(population_size=500, tolerable_deviation_rate=0.05, confidence_level=95)
    assert (plan.sample_size, plan.critical_deviation) == (59, 0)


def test_monetary_unit_workflow(population):  # noqa: D103
    plan = plan_monetary_unit_sample(population, 'book_value', confidence_level=95, tolerable_error=0.05)
    extraction = extract_systematic_sample(
        population, 'book_value', sample_interval=plan.sample_interval, random_state=4
    )
    audited = load_synthetic_audited_sample(extraction.sampled_items, misstatement_rate=0.1, random_state=4)
    high_values = extraction.high_value_items.assign(audited_value=extraction.high_value_items['book_value'])

    cell = evaluate_cell_classical(
        audited,
        sample_interval=extraction.sample_interval,
        confidence_level=95,
        high_value_items=high_values,
        reference_column_name='reference',
    )
    stringer = evaluate_stringer_bound(
        audited, sample_interval=extraction.sample_interval, confidence_level=95, reference_column_name='reference'
    )

    assert extraction.sample_interval == plan.sample_interval
    assert cell.high_values.count == len(extraction.high_value_items)
    assert cell.high_values.known_misstatement == 0
    assert cell.upper_error_limit >= cell.basic_precision
    assert stringer.upper_error_limit == pytest.approx(
        stringer.basic_precision + stringer.most_likely_error + stringer.precision_gap_widening
    )
    assert [item.reference for item in cell.items] == audited['reference'].tolist()


def test_attribute_workflow():  # noqa: D103
    records = pd.DataFrame({'control_ok': [True] * 480 + [False] * 20})
    plan = plan_attribute_sample(population_size=len(records), tolerable_deviation_rate=0.1, confidence_level=90)
    selection = extract_random_sample(records, sample_size=plan.sample_size, random_state=9)
    deviations = int((~selection.sampled_items['control_ok']).sum())
    res = evaluate_attribute_sample(selection.sample_size, deviations, confidence_level=90, tolerable_deviation_rate=0.1)

    assert selection.sample_size == plan.sample_size
    assert res.observed_deviations == deviations
    assert res.sample_deviation_rate == pytest.approx(deviations / plan.sample_size * 100)


def test_extract_systematic_sample_with_aggregated_high_values(population):  # noqa: D103
    separate = extract_systematic_sample(population, 'book_value', sample_interval=20000, random_start_point=500)
    aggregated = extract_systematic_sample(
        population, 'book_value', sample_interval=20000, random_start_point=500, high_value_management='aggregated'
    )

    assert aggregated.high_value_items.empty
    assert aggregated.statistics.absolute_count == len(population)
    assert aggregated.statistics.absolute_total == pytest.approx(
        separate.statistics.absolute_total + separate.statistics.high_value_total
    )
    # on a fixed interval walk every item of at least one interval is hit
    assert set(separate.high_value_items.index) <= set(aggregated.sampled_items.index)
