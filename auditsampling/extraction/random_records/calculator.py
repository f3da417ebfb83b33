#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Random selection of records for attribute samples."""

from typing import Optional

import numpy as np

from auditsampling._typing import RandomState, check_random_state
from auditsampling.base import AbstractCalculator, DataLike, _as_dataframe
from auditsampling.exceptions import EmptyPopulationException, InvalidArgumentsException
from auditsampling.extraction.random_records.result import Result


class RandomRecordSelector(AbstractCalculator):
    """Selects records uniformly at random, with or without replacement."""

    def __init__(
        self,
        sample_size: int,
        allow_duplicates: bool = False,
        start_record: int = 1,
        end_record: Optional[int] = None,
        random_state: RandomState = None,
    ):
        """Creates a new RandomRecordSelector instance.

        Parameters
        ----------
        sample_size: int
            Number of records to draw.
        allow_duplicates: bool, default=False
            Draw with replacement when set, so a record can be selected more than once.
        start_record: int, default=1
            First record (1-based, inclusive) of the range to select from.
        end_record: int, default=None
            Last record (1-based, inclusive) of the range to select from. Defaults to the last record.
        random_state: Union[int, np.random.Generator], default=None
            Seed or generator driving the draws.
        """
        super().__init__()

        if isinstance(sample_size, bool) or not isinstance(sample_size, (int, np.integer)) or sample_size < 1:
            raise InvalidArgumentsException(f"'sample_size' should be a positive integer but got {sample_size}")
        if start_record < 1:
            raise InvalidArgumentsException(f"'start_record' should be at least 1 but got {start_record}")
        if end_record is not None and end_record < start_record:
            raise InvalidArgumentsException(
                f"'start_record' ({start_record}) should not come after 'end_record' ({end_record})"
            )

        self.sample_size = int(sample_size)
        self.allow_duplicates = allow_duplicates
        self.start_record = start_record
        self.end_record = end_record
        self.random_state = random_state

    def _calculate(self, data: DataLike, *args, **kwargs) -> Result:
        data = _as_dataframe(data)

        start_index = self.start_record - 1
        end_index = len(data) if self.end_record is None else min(len(data), self.end_record)
        population = data.iloc[start_index:end_index]
        if population.empty:
            raise EmptyPopulationException(
                f"record range {self.start_record}-{self.end_record or len(data)} contains no data"
            )

        population_size = len(population)
        if not self.allow_duplicates and self.sample_size > population_size:
            raise InvalidArgumentsException(
                f"cannot select {self.sample_size} records without duplicates from a population of {population_size}"
            )

        rng = check_random_state(self.random_state)
        if self.allow_duplicates:
            positions = rng.integers(0, population_size, size=self.sample_size)
        else:
            positions = rng.choice(population_size, size=self.sample_size, replace=False)

        sampled_items = population.iloc[positions].copy(deep=True)
        sampled_items['sample_number'] = np.arange(1, self.sample_size + 1)
        sampled_items['original_index'] = positions + start_index + 1

        return Result(
            sampled_items=sampled_items,
            population_size=population_size,
            sample_size=self.sample_size,
            allow_duplicates=self.allow_duplicates,
            start_record=self.start_record,
            end_record=start_index + population_size,
        )
