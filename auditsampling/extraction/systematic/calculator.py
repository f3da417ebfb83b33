#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Systematic extraction of a monetary unit sample.

Items whose absolute value reaches the high value threshold are selected with certainty and set
aside, unless high values are managed as ``aggregated`` and stay on the walk. The absolute values of the remaining items are accumulated in their original order and
every item containing a selection point on that cumulative walk is sampled.

In ``fixed_interval`` mode the selection points are ``random_start_point + k * sample_interval``.
In ``cell_selection`` mode the walk is cut into cells of ``sample_interval`` monetary units and a
single selection point is drawn uniformly within every cell.
"""

from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd

from auditsampling._typing import ExtractionMode, HighValueManagement, RandomState, check_random_state
from auditsampling.base import AbstractCalculator, DataLike, _as_dataframe, _numeric_column, _validate_positive
from auditsampling.exceptions import EmptyPopulationException, InvalidArgumentsException
from auditsampling.extraction.systematic.result import ExtractionStatistics, Result


class SystematicExtractor(AbstractCalculator):
    """Extracts a monetary unit sample by walking the cumulative value of a population."""

    def __init__(
        self,
        sample_column_name: str,
        sample_interval: float,
        high_value_threshold: Optional[float] = None,
        extraction_mode: Union[str, ExtractionMode] = ExtractionMode.FIXED_INTERVAL,
        random_start_point: Optional[float] = None,
        sample_size: Optional[int] = None,
        random_state: RandomState = None,
        high_value_management: Union[str, HighValueManagement] = HighValueManagement.SEPARATE,
    ):
        """Creates a new SystematicExtractor instance.

        Parameters
        ----------
        sample_column_name: str
            Column holding the monetary value used for selection.
        sample_interval: float
            Number of monetary units between two selection points, should be positive.
        high_value_threshold: float, default=None
            Items with an absolute value at or above this threshold are selected with certainty.
            Defaults to the sample interval.
        extraction_mode: Union[str, ExtractionMode], default='fixed_interval'
            Either ``fixed_interval`` or ``cell_selection``.
        random_start_point: float, default=None
            First selection point in fixed interval mode, within [1, sample_interval].
            Drawn uniformly from that range when not given.
        sample_size: int, default=None
            Optional maximum number of items to select on the cumulative walk.
        random_state: Union[int, np.random.Generator], default=None
            Seed or generator used to draw the start point and cell selection points.
        high_value_management: Union[str, HighValueManagement], default='separate'
            ``separate`` sets high value items aside before the cumulative walk. ``aggregated`` keeps every
            item on the walk and leaves ``high_value_items`` empty.

        Examples
        --------
        >>> import pandas as pd
        >>> from auditsampling import SystematicExtractor
        >>> population = pd.DataFrame({'amount': [100.0, 250.0, 50.0, 900.0, 400.0, 300.0]})
        >>> res = SystematicExtractor('amount', sample_interval=300, random_start_point=120).calculate(population)
        >>> list(res.sampled_items.index), list(res.high_value_items.index)
        ([1], [3, 4, 5])
        """
        super().__init__()

        self.sample_column_name = sample_column_name
        self.sample_interval = _validate_positive(sample_interval, 'sample_interval')
        self.high_value_threshold = (
            self.sample_interval
            if high_value_threshold is None
            else _validate_positive(high_value_threshold, 'high_value_threshold')
        )
        self.extraction_mode = ExtractionMode.parse(extraction_mode)
        self.high_value_management = HighValueManagement.parse(high_value_management)

        if random_start_point is not None:
            low, high = _start_point_range(self.sample_interval)
            valid = low <= random_start_point <= high if low > 0 else 0 < random_start_point <= high
            if not valid:
                raise InvalidArgumentsException(
                    f"'random_start_point' should lie in [{low}, {high}] but got {random_start_point}"
                )
        self.random_start_point = random_start_point

        if sample_size is not None and (isinstance(sample_size, bool) or sample_size < 1):
            raise InvalidArgumentsException(f"'sample_size' should be a positive integer but got {sample_size}")
        self.sample_size = sample_size
        self.random_state = random_state

    def _calculate(self, data: DataLike, *args, **kwargs) -> Result:
        data = _as_dataframe(data)
        values = _numeric_column(data, self.sample_column_name)
        absolute_values = values.abs()

        if data.empty:
            raise EmptyPopulationException("no items to sample, the population is empty")

        if self.high_value_management == HighValueManagement.AGGREGATED:
            high_value_mask = np.zeros(len(data), dtype=bool)
        else:
            high_value_mask = (absolute_values >= self.high_value_threshold).to_numpy()
        high_values = data.loc[high_value_mask]
        remaining = data.loc[~high_value_mask]
        self._logger.debug(f"set aside {len(high_values)} high value items at threshold {self.high_value_threshold}")

        rng = check_random_state(self.random_state)
        start_point = self.random_start_point
        if start_point is None:
            low, high = _start_point_range(self.sample_interval)
            start_point = float(rng.uniform(low, high)) if high > low else high

        remaining_absolute = absolute_values.loc[~high_value_mask].to_numpy()
        cumulative = np.cumsum(remaining_absolute)

        if remaining.empty:
            self._logger.debug("every item is a high value item, nothing left to walk")
            points = np.empty(0)
        elif self.extraction_mode == ExtractionMode.FIXED_INTERVAL:
            points = _fixed_interval_points(cumulative, start_point, self.sample_interval)
        else:
            points = _cell_selection_points(cumulative, self.sample_interval, rng)

        positions, selection_points = _select_positions(cumulative, points)
        if self.sample_size is not None:
            positions, selection_points = positions[: self.sample_size], selection_points[: self.sample_size]

        sampled_items = remaining.iloc[positions].copy(deep=True)
        sampled_absolute = remaining_absolute[positions]
        sampled_items['mus_recno'] = np.arange(1, len(sampled_items) + 1)
        sampled_items['mus_total'] = np.cumsum(sampled_absolute)
        sampled_items['mus_excess'] = np.maximum(sampled_absolute - self.sample_interval, 0.0)
        sampled_items['selection_point'] = selection_points

        high_value_items = high_values.copy(deep=True)
        high_value_absolute = absolute_values.loc[high_value_mask].to_numpy()
        high_value_items['mus_recno'] = np.arange(1, len(high_value_items) + 1)
        high_value_items['mus_total'] = high_value_absolute
        high_value_items['mus_excess'] = np.maximum(high_value_absolute - self.sample_interval, 0.0)

        self._logger.debug(
            f"selected {len(sampled_items)} items in '{self.extraction_mode.value}' mode "
            f"starting at {start_point:.4f}"
        )

        return Result(
            sampled_items=sampled_items,
            high_value_items=high_value_items,
            statistics=_statistics(values.loc[~high_value_mask], values.loc[high_value_mask]),
            sample_column_name=self.sample_column_name,
            sample_interval=self.sample_interval,
            high_value_threshold=self.high_value_threshold,
            random_start_point=start_point,
            extraction_mode=self.extraction_mode,
            high_value_management=self.high_value_management,
        )


def _start_point_range(sample_interval: float) -> Tuple[float, float]:
    if sample_interval >= 1:
        return 1.0, sample_interval
    return 0.0, sample_interval


def _fixed_interval_points(cumulative: np.ndarray, start_point: float, sample_interval: float) -> np.ndarray:
    total = cumulative[-1]
    if start_point >= total:
        return np.empty(0)
    count = int(np.floor((total - start_point) / sample_interval)) + 1
    points = start_point + sample_interval * np.arange(count)
    return points[points < total]


def _cell_selection_points(cumulative: np.ndarray, sample_interval: float, rng: np.random.Generator) -> np.ndarray:
    total = cumulative[-1]
    if total <= 0:
        return np.empty(0)
    cell_starts = sample_interval * np.arange(int(np.ceil(total / sample_interval)))
    cell_ends = np.minimum(cell_starts + sample_interval, total)
    return rng.uniform(cell_starts, cell_ends)


def _select_positions(cumulative: np.ndarray, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Maps selection points to the positions of the items containing them, each item at most once."""
    if len(points) == 0:
        return np.empty(0, dtype=int), np.empty(0)

    # item i covers the half-open range [cumulative[i - 1], cumulative[i])
    positions = np.searchsorted(cumulative, points, side='right')
    in_range = positions < len(cumulative)
    positions, points = positions[in_range], points[in_range]

    _, first_hits = np.unique(positions, return_index=True)
    first_hits = np.sort(first_hits)
    return positions[first_hits], points[first_hits]


def _statistics(remaining_values: pd.Series, high_values: pd.Series) -> ExtractionStatistics:
    positives = remaining_values[remaining_values > 0]
    negatives = remaining_values[remaining_values < 0]
    return ExtractionStatistics(
        positive_total=float(positives.sum()),
        positive_count=int(len(positives)),
        negative_total=float(negatives.sum()),
        negative_count=int(len(negatives)),
        absolute_total=float(remaining_values.abs().sum()),
        absolute_count=int(len(remaining_values)),
        high_value_total=float(high_values.abs().sum()),
        high_value_count=int(len(high_values)),
    )
