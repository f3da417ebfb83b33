#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
from __future__ import annotations

import sys
import typing
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union  # noqa: TYP001

if typing.TYPE_CHECKING:
    from typing_extensions import Protocol
else:
    Protocol = object

if sys.version_info >= (3, 11):
    from typing import Self  # noqa: F401
else:
    from typing_extensions import Self  # noqa: F401

import numpy as np
import pandas as pd

from auditsampling.exceptions import InvalidArgumentsException

RandomState = Optional[Union[int, np.random.Generator]]


class Result(Protocol):
    """The data that was planned, extracted or evaluated."""

    issues: List[Issue]

    def to_df(self) -> pd.DataFrame:
        ...


class Calculator(Protocol):
    """Calculator base class."""

    def calculate(self, *args, **kwargs) -> Result:
        """Perform a calculation."""


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: Union[str, Enum]):
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace('-', '_').replace(' ', '_')
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidArgumentsException(
            f"unknown value for {cls.__name__} '{value}'. Value should be one of {[m.value for m in cls]}"
        )


class ControlMode(_ParsableEnum):
    """Risks controlled when planning an attribute sample."""

    SINGLE_RISK = 'single_risk'
    DUAL_RISK = 'dual_risk'


class SignFilter(_ParsableEnum):
    """Which part of a monetary population makes up the population value."""

    POSITIVE = 'positive'
    NEGATIVE = 'negative'
    ABSOLUTE = 'absolute'


class ErrorType(_ParsableEnum):
    """How tolerable and expected errors are expressed."""

    RATE = 'rate'
    MONETARY = 'monetary'


class ExtractionMode(_ParsableEnum):
    """How sampling units are picked from the cumulative monetary walk."""

    FIXED_INTERVAL = 'fixed_interval'
    CELL_SELECTION = 'cell_selection'


class HighValueManagement(_ParsableEnum):
    """Whether high value items are set aside before the cumulative walk or stay inside it."""

    SEPARATE = 'separate'
    AGGREGATED = 'aggregated'


class PrecisionLimitMode(_ParsableEnum):
    """Which precision limits an evaluation reports."""

    UPPER = 'upper'
    UPPER_LOWER = 'upper_lower'


class IssueKind(_ParsableEnum):
    INVALID_PARAMETERS = 'invalid_parameters'
    DATA_ANOMALY = 'data_anomaly'


@dataclass(frozen=True)
class Issue:
    """A non-fatal problem found during a calculation, attached to its result.

    Attributes
    ----------
    kind: IssueKind
        ``invalid_parameters`` when planning degraded to a 100% examination,
        ``data_anomaly`` when a sampled item has a tainting outside [-1, 1].
    message: str
        Human readable description.
    reference: Optional[str]
        The reference of the offending sample item, when applicable.
    """

    kind: IssueKind
    message: str
    reference: Optional[str] = None


def check_random_state(random_state: RandomState = None) -> np.random.Generator:
    """Turns a seed or generator into a :class:`numpy.random.Generator`."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    raise InvalidArgumentsException(
        f"random_state should be an int seed, a numpy Generator or None but got '{type(random_state).__name__}'"
    )
