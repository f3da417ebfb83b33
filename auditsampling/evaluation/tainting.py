#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Turns audited sample rows into taintings shared by the monetary unit evaluators.

The tainting of a sampled item is its fractional misstatement ``(book - audited) / book``. A positive
tainting is an overstatement, a negative one an understatement. Items with a book value of zero get
a tainting of zero.

Taintings outside [-1, 1] mean an audited value more extreme than the book value. They are kept as
they are and reported as ``data_anomaly`` issues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from auditsampling._typing import Issue, IssueKind
from auditsampling.base import _numeric_column

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleItem:
    """A sampled item with its book value, audited value and the resulting tainting."""

    reference: str
    book_value: float
    audited_value: float
    tainting: float

    @property
    def misstatement(self) -> float:
        return self.book_value - self.audited_value

    @property
    def is_overstatement(self) -> bool:
        return self.tainting > 0

    @property
    def is_understatement(self) -> bool:
        return self.tainting < 0


def tainting(book_value: float, audited_value: float) -> float:
    """Fractional misstatement of a single item, zero when the book value is zero."""
    if book_value == 0:
        return 0.0
    return (book_value - audited_value) / book_value


def prepare_sample_items(
    data: pd.DataFrame,
    book_value_column_name: str,
    audited_value_column_name: str,
    reference_column_name: Optional[str] = None,
) -> Tuple[List[SampleItem], List[Issue]]:
    """Computes the tainting of every sampled row and collects data anomalies.

    Parameters
    ----------
    data: pd.DataFrame
        The audited sample.
    book_value_column_name: str
        Column holding the recorded value of each item.
    audited_value_column_name: str
        Column holding the value established by the auditor.
    reference_column_name: Optional[str], default=None
        Column identifying each item. The row index is used when not given.

    Returns
    -------
    items: List[SampleItem]
        One item per row, in row order.
    issues: List[Issue]
        ``data_anomaly`` issues for taintings outside [-1, 1] and for misstated items with a zero book value.
    """
    book_values = _numeric_column(data, book_value_column_name)
    audited_values = _numeric_column(data, audited_value_column_name)
    if reference_column_name is None:
        references = [str(ref) for ref in data.index]
    else:
        references = [str(ref) for ref in data[reference_column_name]]

    items: List[SampleItem] = []
    issues: List[Issue] = []
    for reference, book_value, audited_value in zip(references, book_values, audited_values):
        item = SampleItem(
            reference=reference,
            book_value=float(book_value),
            audited_value=float(audited_value),
            tainting=tainting(book_value, audited_value),
        )
        items.append(item)

        if abs(item.tainting) > 1:
            message = (
                f"item '{reference}' has tainting {item.tainting:.4f} outside [-1, 1]: "
                f"audited value {audited_value} is more extreme than book value {book_value}"
            )
        elif book_value == 0 and audited_value != 0:
            message = f"item '{reference}' has a zero book value but an audited value of {audited_value}"
        else:
            continue
        logger.warning(message)
        issues.append(Issue(kind=IssueKind.DATA_ANOMALY, message=message, reference=reference))

    return items, issues


def sorted_by_magnitude(taintings: List[float]) -> np.ndarray:
    """Tainting magnitudes sorted from largest to smallest."""
    return np.sort(np.abs(np.asarray(taintings, dtype=float)))[::-1]


@dataclass(frozen=True)
class HighValueTotals:
    """Totals of the items that were examined with certainty, reported next to the sample evaluation."""

    count: int
    book_value_total: float
    known_misstatement: Optional[float]


def high_value_totals(
    high_value_items: Optional[pd.DataFrame],
    book_value_column_name: str,
    audited_value_column_name: str,
    fallback_value_column_name: Optional[str] = None,
) -> HighValueTotals:
    """Sums the high value items, including their known misstatement when audited values are present.

    High value items taken straight from an extraction carry the extraction's value column instead of
    the book value column of the audited sample. That column is read when ``fallback_value_column_name``
    is given and the book value column is absent.
    """
    if high_value_items is None or high_value_items.empty:
        return HighValueTotals(count=0, book_value_total=0.0, known_misstatement=None)

    if (
        book_value_column_name not in high_value_items.columns
        and fallback_value_column_name is not None
        and fallback_value_column_name in high_value_items.columns
    ):
        book_value_column_name = fallback_value_column_name
    book_values = _numeric_column(high_value_items, book_value_column_name)
    known_misstatement = None
    if audited_value_column_name in high_value_items.columns:
        audited_values = _numeric_column(high_value_items, audited_value_column_name)
        known_misstatement = float((book_values - audited_values).sum())

    return HighValueTotals(
        count=len(high_value_items),
        book_value_total=float(book_values.abs().sum()),
        known_misstatement=known_misstatement,
    )
