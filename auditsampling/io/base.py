#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple, Type
from urllib.parse import urlsplit

import pandas as pd

from auditsampling._typing import Result
from auditsampling.exceptions import InvalidArgumentsException, ReaderException, WriterException

HTTP_PROTOCOLS = ['http', 'https']
CLOUD_PROTOCOLS = ['s3', 'gcs', 'gs', 'adl', 'abfs', 'abfss', 'az']


class Writer(ABC):
    """Base class for exporting planning, extraction and evaluation results."""

    @property
    def _logger(self) -> logging.Logger:
        return logging.getLogger(__name__)

    def write(self, result: Result, **kwargs) -> Any:
        if result is None:
            raise InvalidArgumentsException("trying to write 'None'")

        try:
            return self._write(result, **kwargs)
        except InvalidArgumentsException:
            raise
        except Exception as exc:
            raise WriterException(f"failed writing result of type '{type(result).__name__}'.\n{exc}")

    @abstractmethod
    def _write(self, result: Result, **kwargs):
        raise NotImplementedError(
            f"'{self.__class__.__name__}' is a subclass of Writer and it must implement the _write method"
        )


class WriterFactory:
    """Produces :class:`~auditsampling.io.base.Writer` instances for the ``type`` keys used in configuration files."""

    registry: Dict[str, Type[Writer]] = {}

    @classmethod
    def _logger(cls) -> logging.Logger:
        return logging.getLogger(__name__)

    @classmethod
    def create(cls, key: str, kwargs: Optional[Dict[str, Any]] = None) -> Writer:
        if kwargs is None:
            kwargs = {}

        if key not in cls.registry:
            raise InvalidArgumentsException(
                f"unknown writer key '{key}' given. Currently registered keys are: {list(cls.registry.keys())}"
            )

        return cls.registry[key](**kwargs)

    @classmethod
    def register(cls, key: str) -> Callable:
        def inner_wrapper(wrapped_class: Type[Writer]) -> Type[Writer]:
            if key in cls.registry:
                cls._logger().warning(f"re-registering Writer for key='{key}'")
            cls.registry[key] = wrapped_class
            return wrapped_class

        return inner_wrapper


class Reader(ABC):
    """Base class for reading population and sample data."""

    @property
    def _logger(self) -> logging.Logger:
        return logging.getLogger(__name__)

    def read(self) -> pd.DataFrame:
        try:
            return self._read()
        except InvalidArgumentsException:
            raise
        except Exception as exc:
            raise ReaderException(f"failed reading data.\n{exc}")

    @abstractmethod
    def _read(self) -> pd.DataFrame:
        raise NotImplementedError(
            f"'{self.__class__.__name__}' is a subclass of Reader and it must implement the _read method"
        )


def _get_protocol_and_path(filepath: str) -> Tuple[str, str]:
    """Splits a path into the ``fsspec`` protocol and the path within that filesystem."""
    if re.match(r"^[a-zA-Z]:[\\/]", filepath) or re.match(r"^[a-zA-Z\d]+://", filepath) is None:
        return "file", filepath

    parsed_path = urlsplit(filepath)
    protocol = parsed_path.scheme or "file"
    path = parsed_path.path

    if protocol in HTTP_PROTOCOLS:
        return protocol, filepath.split("://", 1)[-1]

    if parsed_path.netloc and protocol in CLOUD_PROTOCOLS:
        host = parsed_path.netloc.rsplit("@", 1)[-1].rsplit(":", 1)[0]
        path = host + path

    return protocol, path


def get_filepath_str(path: str, protocol: str) -> str:
    if protocol in HTTP_PROTOCOLS:
        return f"{protocol}://{path}"
    return path
