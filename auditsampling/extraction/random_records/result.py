#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the results of a random record selection."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True, eq=False)
class Result:
    """Contains the randomly selected records.

    ``sampled_items`` holds a copy of every selected record in selection order, extended with the
    ``sample_number`` (1-based draw number) and ``original_index`` (1-based record number in the
    full data set) columns. With duplicates allowed a record can appear more than once.
    """

    sampled_items: pd.DataFrame
    population_size: int
    sample_size: int
    allow_duplicates: bool
    start_record: int
    end_record: int

    @property
    def duplicate_count(self) -> int:
        return int(self.sampled_items['original_index'].duplicated().sum())

    def to_df(self) -> pd.DataFrame:
        """Export the selected records to a pandas dataframe."""
        return self.sampled_items.copy(deep=True)
