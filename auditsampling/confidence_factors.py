#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Confidence (reliability) factors used to plan and evaluate samples.

Two families of factors live here:

- the bundled :class:`ConfidenceFactorTable`, a fixed list of
  (deviations, factor, confidence) triples used by attribute sampling;
- :func:`reliability_factor`, the continuous Poisson reliability factor used by monetary unit
  sampling. It is the upper confidence limit on the expected number of misstatements given
  ``deviations`` observed misstatements, i.e. the ``confidence`` quantile of a Gamma distribution
  with shape ``deviations + 1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
from scipy.stats import gamma

from auditsampling.base import _validate_confidence_level
from auditsampling.exceptions import InvalidArgumentsException, NotFoundException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfidenceFactorEntry:
    """A single row of a confidence factor table."""

    deviations: int
    factor: float
    confidence: float


_BUNDLED_FACTORS: Dict[float, Tuple[float, ...]] = {
    80: (1.61, 2.99, 4.28, 5.52, 6.72, 7.91, 9.08, 10.23, 11.38, 12.52, 13.65),
    85: (1.90, 3.37, 4.72, 6.02, 7.27, 8.50, 9.71, 10.90, 12.08, 13.25, 14.42),
    90: (2.31, 3.89, 5.33, 6.69, 8.00, 9.28, 10.54, 11.78, 13.00, 14.21, 15.41),
    95: (3.30, 4.75, 6.30, 7.76, 9.16, 10.52, 11.85, 13.15, 14.44, 15.71, 16.97),
    99: (4.61, 6.64, 8.41, 10.05, 11.61, 13.11, 14.58, 16.00, 17.41, 18.79, 20.15),
}

CONFIDENCE_FACTOR_ENTRIES: Tuple[ConfidenceFactorEntry, ...] = tuple(
    ConfidenceFactorEntry(deviations=deviations, factor=factor, confidence=float(confidence))
    for confidence, factors in _BUNDLED_FACTORS.items()
    for deviations, factor in enumerate(factors)
)


class ConfidenceFactorTable:
    """Static lookup of (deviations, factor, confidence) triples.

    Lookups first resolve the requested confidence level to the closest level present in the
    table, so that every factor used within one planning run comes from the same level.

    Examples
    --------
    >>> from auditsampling.confidence_factors import ConfidenceFactorTable
    >>> table = ConfidenceFactorTable()
    >>> table.nearest_confidence_level(94)
    95.0
    >>> table.critical_deviation_factor(95, max_allowed_factor=5.0)
    1
    """

    def __init__(self, entries: Optional[Iterable[ConfidenceFactorEntry]] = None):
        """Creates a new ConfidenceFactorTable.

        Parameters
        ----------
        entries: Iterable[ConfidenceFactorEntry], default=None
            The table rows. Defaults to the bundled attribute sampling table.

        Raises
        ------
        InvalidArgumentsException
            When a row holds an invalid value or factors do not strictly increase with the
            number of deviations at a fixed confidence level.
        """
        self.entries: Tuple[ConfidenceFactorEntry, ...] = tuple(
            CONFIDENCE_FACTOR_ENTRIES if entries is None else entries
        )
        self._validate_entries(self.entries)

    def __repr__(self):
        return f'{self.__class__.__name__}(levels={self.confidence_levels})'

    @property
    def confidence_levels(self) -> List[float]:
        return sorted({entry.confidence for entry in self.entries})

    def nearest_confidence_level(self, confidence_level: float) -> float:
        """Returns the distinct table confidence level closest to the input, ties broken toward the higher level."""
        confidence_level = _validate_confidence_level(confidence_level)
        levels = self.confidence_levels
        if not levels:
            raise NotFoundException("confidence factor table contains no entries")
        return min(levels, key=lambda level: (abs(level - confidence_level), -level))

    def entries_for(self, confidence_level: float) -> List[ConfidenceFactorEntry]:
        """Returns the rows at the resolved confidence level, ordered by number of deviations."""
        level = self.nearest_confidence_level(confidence_level)
        return sorted((e for e in self.entries if e.confidence == level), key=lambda e: e.deviations)

    def factor_for(self, confidence_level: float, deviations: int) -> float:
        for entry in self.entries_for(confidence_level):
            if entry.deviations == deviations:
                return entry.factor
        raise NotFoundException(
            f"no factor for {deviations} deviations at confidence level "
            f"{self.nearest_confidence_level(confidence_level)}"
        )

    def factor_for_zero_deviations(self, confidence_level: float) -> float:
        """Returns the zero-deviation factor whose confidence is closest to the requested level.

        Ties are broken by preferring the higher confidence level.

        Raises
        ------
        NotFoundException
            When the table holds no zero-deviation rows.
        """
        confidence_level = _validate_confidence_level(confidence_level)
        zero_rows = [entry for entry in self.entries if entry.deviations == 0]
        if not zero_rows:
            raise NotFoundException("confidence factor table contains no rows for zero deviations")
        best = min(zero_rows, key=lambda e: (abs(e.confidence - confidence_level), -e.confidence))
        return best.factor

    def critical_deviation_factor(self, confidence_level: float, max_allowed_factor: float) -> int:
        """Returns the largest number of deviations whose factor does not exceed ``max_allowed_factor``.

        Returns 0 when no row qualifies.
        """
        qualifying = [
            entry.deviations for entry in self.entries_for(confidence_level) if entry.factor <= max_allowed_factor
        ]
        return max(qualifying) if qualifying else 0

    @staticmethod
    def _validate_entries(entries: Tuple[ConfidenceFactorEntry, ...]):
        per_level: Dict[float, List[ConfidenceFactorEntry]] = {}
        for entry in entries:
            if not 0 < entry.confidence <= 100:
                raise InvalidArgumentsException(f"confidence of {entry} should lie in (0, 100]")
            if entry.factor <= 0:
                raise InvalidArgumentsException(f"factor of {entry} should be positive")
            if entry.deviations < 0:
                raise InvalidArgumentsException(f"deviations of {entry} should be non-negative")
            per_level.setdefault(entry.confidence, []).append(entry)

        for level, level_entries in per_level.items():
            ordered = sorted(level_entries, key=lambda e: e.deviations)
            for previous, current in zip(ordered, ordered[1:]):
                if current.factor <= previous.factor:
                    raise InvalidArgumentsException(
                        f"factors at confidence level {level} should strictly increase with the number of "
                        f"deviations, found {previous.factor} for {previous.deviations} and "
                        f"{current.factor} for {current.deviations}"
                    )


DEFAULT_CONFIDENCE_FACTOR_TABLE = ConfidenceFactorTable()


@lru_cache(maxsize=1024)
def reliability_factor(confidence_level: float, deviations: int = 0) -> float:
    """Poisson reliability factor for a number of observed misstatements.

    Parameters
    ----------
    confidence_level: float
        Confidence level in (0, 100]. A level of 100 results in an infinite factor.
    deviations: int, default=0
        The number of observed misstatements.

    Returns
    -------
    factor: float
        The upper confidence limit on the expected number of misstatements, e.g. 2.9957 for zero
        misstatements at 95% confidence.
    """
    confidence_level = _validate_confidence_level(confidence_level)
    if deviations < 0:
        raise InvalidArgumentsException(f"deviations should be non-negative but got {deviations}")
    if confidence_level == 100:
        return float(np.inf)
    return float(gamma.ppf(confidence_level / 100, deviations + 1))


def poisson_zero_factor(confidence_level: float) -> float:
    """Reliability factor for zero expected misstatements."""
    return reliability_factor(confidence_level, 0)


def incremental_reliability_factor(confidence_level: float, deviations: int) -> float:
    """Increase of the reliability factor caused by the ``deviations``-th misstatement."""
    if deviations < 1:
        raise InvalidArgumentsException(f"deviations should be at least 1 but got {deviations}")
    return reliability_factor(confidence_level, deviations) - reliability_factor(confidence_level, deviations - 1)
