#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Contains the summary shared by the monetary unit sample evaluators."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from auditsampling._typing import Issue, PrecisionLimitMode
from auditsampling.evaluation.tainting import HighValueTotals, SampleItem


@dataclass(frozen=True)
class EvaluationStage:
    """A single row of an evaluation stage table.

    Factors and bounds are expressed in sampling intervals. Multiply by the sampling interval to get
    monetary amounts.
    """

    stage: int
    uel_factor: float
    tainting: float
    average_tainting: float
    previous_uel: float
    loading_propagation: float
    simple_propagation: float
    max_stage_uel: float


@dataclass(frozen=True)
class PartitionEvaluation:
    """Evaluation of either the overstatements or the understatements of a sample."""

    stages: List[EvaluationStage]
    total_taintings: float
    most_likely_error: float
    precision_gap_widening: float
    upper_error_limit: float

    @property
    def error_count(self) -> int:
        return len(self.stages)

    def to_df(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(stage) for stage in self.stages], columns=_STAGE_COLUMNS)


_STAGE_COLUMNS = [
    'stage',
    'uel_factor',
    'tainting',
    'average_tainting',
    'previous_uel',
    'loading_propagation',
    'simple_propagation',
    'max_stage_uel',
]


@dataclass(frozen=True, eq=False)
class EvaluationSummary:
    """The outcome of evaluating a monetary unit sample.

    ``most_likely_error`` and ``upper_error_limit`` are the headline figures of the evaluation method.
    The gross figures only consider overstatements, the net figures offset them with the
    understatements. Lower limits are only reported in ``upper_lower`` precision limit mode.
    """

    method: str
    sample_interval: float
    confidence_level: float
    tolerable_error: Optional[float]
    precision_limit_mode: PrecisionLimitMode
    items: List[SampleItem]
    basic_precision: float
    most_likely_error: float
    precision_gap_widening: float
    upper_error_limit: float
    overstatements: PartitionEvaluation
    understatements: PartitionEvaluation
    gross_most_likely_error: float
    net_most_likely_error: float
    gross_upper_error_limit: float
    net_upper_error_limit: float
    gross_lower_error_limit: Optional[float]
    net_lower_error_limit: Optional[float]
    high_values: HighValueTotals
    issues: List[Issue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for item in self.items if item.tainting != 0)

    @property
    def is_accepted(self) -> Optional[bool]:
        """Whether the population can be accepted, ``None`` when no tolerable error was given."""
        if self.tolerable_error is None:
            return None
        return self.gross_upper_error_limit <= self.tolerable_error

    def to_df(self) -> pd.DataFrame:
        """Export the stage tables of both partitions to a single pandas dataframe."""
        frames = []
        for partition_name, partition in (
            ('overstatement', self.overstatements),
            ('understatement', self.understatements),
        ):
            frame = partition.to_df()
            frame.insert(0, 'partition', partition_name)
            frames.append(frame)
        return pd.concat(frames, ignore_index=True)

    def to_dict(self) -> Dict[str, Any]:
        """Export the headline figures of the evaluation."""
        return {
            'method': self.method,
            'sample_size': len(self.items),
            'error_count': self.error_count,
            'sample_interval': self.sample_interval,
            'confidence_level': self.confidence_level,
            'basic_precision': self.basic_precision,
            'most_likely_error': self.most_likely_error,
            'precision_gap_widening': self.precision_gap_widening,
            'upper_error_limit': self.upper_error_limit,
            'gross_most_likely_error': self.gross_most_likely_error,
            'net_most_likely_error': self.net_most_likely_error,
            'gross_upper_error_limit': self.gross_upper_error_limit,
            'net_upper_error_limit': self.net_upper_error_limit,
            'gross_lower_error_limit': self.gross_lower_error_limit,
            'net_lower_error_limit': self.net_lower_error_limit,
            'tolerable_error': self.tolerable_error,
            'is_accepted': self.is_accepted,
            'high_value_count': self.high_values.count,
            'high_value_total': self.high_values.book_value_total,
            'high_value_known_misstatement': self.high_values.known_misstatement,
        }
