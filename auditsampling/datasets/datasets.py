#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Synthetic accounts receivable data for quick experimentation."""

import numpy as np
import pandas as pd

from auditsampling._typing import RandomState, check_random_state
from auditsampling.base import _numeric_column
from auditsampling.exceptions import InvalidArgumentsException


def load_synthetic_invoice_population(
    size: int = 1000,
    credit_note_rate: float = 0.03,
    high_value_rate: float = 0.01,
    random_state: RandomState = None,
) -> pd.DataFrame:
    """Generates a synthetic population of open invoices.

    Book values follow a log-normal distribution. A fraction of the rows are credit notes with a
    negative book value and a small fraction are large invoices, ten to fifty times a typical amount.

    Parameters
    ----------
    size: int, default=1000
        Number of invoices.
    credit_note_rate: float, default=0.03
        Fraction of rows with a negative book value.
    high_value_rate: float, default=0.01
        Fraction of rows with an exceptionally large book value.
    random_state: Union[int, np.random.Generator], default=None
        Seed or generator for reproducible data.

    Returns
    -------
    population: pd.DataFrame
        A DataFrame with ``reference``, ``customer``, ``invoice_date`` and ``book_value`` columns.

    Examples
    --------
    >>> from auditsampling.datasets import load_synthetic_invoice_population
    >>> population = load_synthetic_invoice_population(size=500, random_state=42)
    >>> list(population.columns)
    ['reference', 'customer', 'invoice_date', 'book_value']
    """
    if size < 1:
        raise InvalidArgumentsException(f"'size' should be at least 1 but got {size}")
    rng = check_random_state(random_state)

    book_values = np.round(rng.lognormal(mean=7.0, sigma=1.0, size=size), 2)
    high_values = rng.random(size) < high_value_rate
    book_values[high_values] *= rng.uniform(10, 50, size=int(high_values.sum()))
    credit_notes = rng.random(size) < credit_note_rate
    book_values[credit_notes] *= -1

    return pd.DataFrame(
        {
            'reference': [f'INV-{i:06d}' for i in range(1, size + 1)],
            'customer': [f'C-{c:04d}' for c in rng.integers(1, max(size // 10, 2), size=size)],
            'invoice_date': pd.Timestamp('2024-01-01') + pd.to_timedelta(rng.integers(0, 366, size=size), unit='D'),
            'book_value': np.round(book_values, 2),
        }
    )


def load_synthetic_audited_sample(
    sample: pd.DataFrame,
    misstatement_rate: float = 0.05,
    understatement_share: float = 0.2,
    book_value_column_name: str = 'book_value',
    random_state: RandomState = None,
) -> pd.DataFrame:
    """Adds an ``audited_value`` column to a sample, misstating a fraction of its items.

    Misstated items receive a tainting drawn uniformly from [0.05, 1]. A share of them are
    understatements, where the audited value exceeds the book value by the tainting instead.

    Examples
    --------
    >>> from auditsampling.datasets import load_synthetic_audited_sample, load_synthetic_invoice_population
    >>> population = load_synthetic_invoice_population(size=100, random_state=1)
    >>> audited = load_synthetic_audited_sample(population.head(20), misstatement_rate=0.0, random_state=1)
    >>> bool((audited['audited_value'] == audited['book_value']).all())
    True
    """
    if not 0 <= misstatement_rate <= 1:
        raise InvalidArgumentsException(f"'misstatement_rate' should lie in [0, 1] but got {misstatement_rate}")
    if not 0 <= understatement_share <= 1:
        raise InvalidArgumentsException(f"'understatement_share' should lie in [0, 1] but got {understatement_share}")
    rng = check_random_state(random_state)

    book_values = _numeric_column(sample, book_value_column_name).to_numpy()
    misstated = rng.random(len(sample)) < misstatement_rate
    taintings = np.where(misstated, rng.uniform(0.05, 1.0, size=len(sample)), 0.0)
    understated = misstated & (rng.random(len(sample)) < understatement_share)
    taintings[understated] *= -1

    audited = sample.copy(deep=True)
    audited['audited_value'] = np.round(book_values * (1 - taintings), 2)
    return audited
