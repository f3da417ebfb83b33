#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the results of a systematic sample extraction."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import pandas as pd

from auditsampling._typing import ExtractionMode, HighValueManagement


@dataclass(frozen=True)
class ExtractionStatistics:
    """Subtotals of the sampling column over the population that remains after removing high values."""

    positive_total: float
    positive_count: int
    negative_total: float
    negative_count: int
    absolute_total: float
    absolute_count: int
    high_value_total: float
    high_value_count: int

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True, eq=False)
class Result:
    """Contains the sampled items and high value items of a systematic extraction.

    Both frames are copies of the selected population rows, with the original index kept and the
    ``mus_recno``, ``mus_total`` and ``mus_excess`` columns added. Sampled items also carry the
    ``selection_point`` that hit them on the cumulative monetary walk.
    When high values are managed as ``aggregated`` they stay on the walk and ``high_value_items`` is empty.
    """

    sampled_items: pd.DataFrame
    high_value_items: pd.DataFrame
    statistics: ExtractionStatistics
    sample_column_name: str
    sample_interval: float
    high_value_threshold: float
    random_start_point: float
    extraction_mode: ExtractionMode
    high_value_management: HighValueManagement = HighValueManagement.SEPARATE

    @property
    def sample_size(self) -> int:
        return len(self.sampled_items)

    def to_df(self) -> pd.DataFrame:
        """Export the sampled items to a pandas dataframe."""
        return self.sampled_items.copy(deep=True)
