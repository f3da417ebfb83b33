#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

from copy import deepcopy
from pathlib import PurePosixPath
from typing import Any, Dict, Optional

import fsspec
import pandas as pd

from auditsampling.exceptions import InvalidArgumentsException
from auditsampling.io.base import Reader, _get_protocol_and_path, get_filepath_str


class FileReader(Reader):
    """Reads a population or sample data set from a local or cloud-based CSV or parquet file."""

    def __init__(
        self,
        filepath: str,
        read_args: Optional[Dict[str, Any]] = None,
        credentials: Optional[Dict[str, Any]] = None,
        fs_args: Optional[Dict[str, Any]] = None,
    ):
        """
        Creates a new ``FileReader`` instance.

        Parameters
        ----------
        filepath : str
            The path to read data from. Can be a regular file path or contain a protocol.
        read_args : Dict[str, Any], default=None
            Arguments passed along to ``pandas.read_csv`` or ``pandas.read_parquet``.
        credentials : Dict[str, Any], default=None
            Credential information following specific ``fsspec`` implementations.
        fs_args : default=None
            Arguments passed along to the ``fsspec`` filesystem initializer.

        Examples
        --------
        >>> reader = FileReader(filepath='/audits/2024/receivables.csv', read_args={'sep': ';'})
        """
        _fs_args = deepcopy(fs_args) or {}
        _credentials = deepcopy(credentials) or {}

        protocol, path = _get_protocol_and_path(filepath)

        self._protocol = protocol
        self._storage_options = {**_credentials, **_fs_args}
        self._fs = fsspec.filesystem(self._protocol, **self._storage_options)
        self._filepath = PurePosixPath(path)

        self._read_args = read_args or {}  # type: Dict[str, Any]

    def _read(self) -> pd.DataFrame:
        suffix = self._filepath.suffix.lower()
        if suffix not in ['.pq', '.parquet', '.csv']:
            raise InvalidArgumentsException(f"'{self._filepath.suffix}' files are currently not supported.")

        read_path = get_filepath_str(str(self._filepath), self._protocol)
        self._logger.debug(f"reading data from {read_path}")
        with self._fs.open(read_path, mode='rb') as f:
            if suffix == '.csv':
                return pd.read_csv(f, **self._read_args)
            return pd.read_parquet(f, **self._read_args)
