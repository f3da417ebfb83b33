#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the results of the attribute sample planning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from auditsampling._typing import ControlMode, Issue, IssueKind


@dataclass(frozen=True, eq=False)
class Result:
    """Contains the planned sample size and critical number of deviations for an attribute sample.

    Attributes
    ----------
    sample_size: int
        Number of items to examine, after the finite population correction.
    critical_deviation: int
        Largest number of deviations that still supports relying on the control.
    uncorrected_sample_size: int
        Sample size before the finite population correction.
    factor: float
        The zero-deviation confidence factor used.
    deviation_table: pd.DataFrame
        For 0 up to 10 deviations: the sample deviation rate, the confidence achieved that the
        population deviation rate does not exceed the tolerable rate, and the critical row marker.
    issues: List[Issue]
        Non-fatal problems, e.g. a degradation to a 100% examination.
    """

    sample_size: int
    critical_deviation: int
    population_size: int
    tolerable_deviation_rate: float
    expected_deviation_rate: float
    confidence_level: float
    control_mode: ControlMode
    factor: float
    divisor: float
    uncorrected_sample_size: int
    deviation_table: pd.DataFrame
    issues: List[Issue] = field(default_factory=list)

    @property
    def full_examination(self) -> bool:
        return self.sample_size >= self.population_size

    @property
    def degraded(self) -> bool:
        return any(issue.kind == IssueKind.INVALID_PARAMETERS for issue in self.issues)

    def to_df(self) -> pd.DataFrame:
        """Export the deviation table to a pandas dataframe."""
        return self.deviation_table.copy(deep=True)
