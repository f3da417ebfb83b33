#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Module containing base classes for planning, extraction and evaluation calculators."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from auditsampling._typing import Result
from auditsampling.exceptions import (
    AuditSamplingException,
    CalculatorException,
    InvalidArgumentsException,
    InvalidFieldException,
)

DataLike = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


class AbstractCalculator(ABC):
    """Base class for all sampling calculators.

    A calculator is configured once through its constructor and performs its computation in
    :meth:`calculate`. Package exceptions raised while calculating are passed on untouched, any
    other exception is wrapped in a :class:`~auditsampling.exceptions.CalculatorException`.
    """

    def __init__(self):
        self.result: Optional[Result] = None

    @property
    def _logger(self) -> logging.Logger:
        return logging.getLogger(__name__)

    def __str__(self):
        return f'{self.__module__}.{self.__class__.__name__}'

    def calculate(self, *args, **kwargs) -> Result:
        """Performs a calculation on the provided data."""
        try:
            self._logger.debug(f"calculating {str(self)}")
            self.result = self._calculate(*args, **kwargs)
            return self.result
        except AuditSamplingException:
            raise
        except Exception as exc:
            raise CalculatorException(f"failed while calculating {str(self)}.\n{exc}")

    @abstractmethod
    def _calculate(self, *args, **kwargs) -> Result:
        raise NotImplementedError(f"'{self.__class__.__name__}' must implement the '_calculate' method")


def _as_dataframe(data: Optional[DataLike]) -> pd.DataFrame:
    if data is None:
        raise InvalidArgumentsException('no data provided. Please provide a valid data set.')
    if isinstance(data, pd.DataFrame):
        return data
    try:
        return pd.DataFrame(list(data))
    except Exception as exc:
        raise InvalidArgumentsException(f"could not convert data of type '{type(data).__name__}' into rows: {exc}")


def _list_missing(columns_to_find: List, dataset_columns: Union[List, pd.DataFrame]):
    if isinstance(dataset_columns, pd.DataFrame):
        dataset_columns = dataset_columns.columns

    missing = [col for col in columns_to_find if col not in dataset_columns]
    if missing:
        raise InvalidFieldException(f"missing required columns '{missing}' in data set:\n\t{list(dataset_columns)}")


def _numeric_column(data: pd.DataFrame, column_name: str) -> pd.Series:
    """Returns the values of a column as floats, raising when any row holds a non-numeric value."""
    _list_missing([column_name], data)

    column = data[column_name]
    if column.dtype == 'bool':
        raise InvalidFieldException(f"column '{column_name}' contains boolean values, expected numbers")

    converted = pd.to_numeric(column, errors='coerce')
    invalid = converted.isna() | ~np.isfinite(converted.astype(float))
    if invalid.any():
        offending_rows = list(data.index[invalid][:10])
        raise InvalidFieldException(
            f"column '{column_name}' contains missing or non-numeric values.\n"
            f"\tCheck '{column_name}' at rows {offending_rows}."
        )
    return converted.astype(float)


def _validate_confidence_level(confidence_level: float, upper_inclusive: bool = True) -> float:
    if isinstance(confidence_level, bool) or not isinstance(confidence_level, (int, float, np.number)):
        raise InvalidArgumentsException(
            f"expected type of 'confidence_level' to be 'float' or 'int' but got '{type(confidence_level).__name__}'"
        )
    in_range = 0 < confidence_level <= 100 if upper_inclusive else 0 < confidence_level < 100
    if not in_range:
        bounds = '(0, 100]' if upper_inclusive else '(0, 100)'
        raise InvalidArgumentsException(f"confidence_level should lie in {bounds} but got {confidence_level}")
    return float(confidence_level)


def _validate_number(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise InvalidArgumentsException(
            f"expected type of '{name}' to be 'float' or 'int' but got '{type(value).__name__}'"
        )
    if not np.isfinite(value):
        raise InvalidArgumentsException(f"'{name}' should be a finite number but got {value}")
    return float(value)


def _validate_positive(value: float, name: str) -> float:
    value = _validate_number(value, name)
    if value <= 0:
        raise InvalidArgumentsException(f"'{name}' should be a finite positive number but got {value}")
    return float(value)
