#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the results of an attribute sample evaluation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional

import pandas as pd

from auditsampling._typing import Issue


@dataclass(frozen=True, eq=False)
class Result:
    """Deviation rate limits of an evaluated attribute sample. Rates and limits are percentages."""

    sample_size: int
    observed_deviations: int
    confidence_level: float
    sample_deviation_rate: float
    unilateral_upper_limit: float
    bilateral_lower_limit: float
    bilateral_upper_limit: float
    tolerable_deviation_rate: Optional[float] = None
    issues: List[Issue] = field(default_factory=list)

    @property
    def is_accepted(self) -> Optional[bool]:
        """Whether the control can be relied upon, ``None`` when no tolerable deviation rate was given."""
        if self.tolerable_deviation_rate is None:
            return None
        return self.unilateral_upper_limit <= self.tolerable_deviation_rate * 100

    def to_df(self) -> pd.DataFrame:
        """Export the evaluation to a single row pandas dataframe."""
        row = asdict(self)
        row.pop('issues')
        row['is_accepted'] = self.is_accepted
        return pd.DataFrame([row])
