#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the results of the monetary unit sample planning."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List

import pandas as pd

from auditsampling._typing import Issue, IssueKind, SignFilter


@dataclass(frozen=True)
class Result:
    """Contains the planned sample size and sampling interval of a monetary unit sample."""

    population_value: float
    population_size: int
    sample_size: int
    sample_interval: float
    min_sample_size: int
    reliability_factor: float
    confidence_level: float
    tolerable_error_rate: float
    expected_error_rate: float
    tolerable_misstatement: float
    expected_misstatement: float
    tolerable_contamination: float
    sign_filter: SignFilter
    issues: List[Issue] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return any(issue.kind == IssueKind.INVALID_PARAMETERS for issue in self.issues)

    def to_df(self) -> pd.DataFrame:
        """Export the planning figures to a single row pandas dataframe."""
        row = {k: v for k, v in asdict(self).items() if k != 'issues'}
        row['sign_filter'] = self.sign_filter.value
        return pd.DataFrame([row])
