#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
from copy import deepcopy
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional

import fsspec

from auditsampling._typing import Result
from auditsampling.exceptions import InvalidArgumentsException
from auditsampling.io.base import Writer, WriterFactory, _get_protocol_and_path, get_filepath_str

FORMATS = ['parquet', 'csv']


@WriterFactory.register('raw_files')
class RawFilesWriter(Writer):
    """Writes the exported data of a result to a CSV or parquet file on disk (local/remote/cloud)."""

    def __init__(
        self,
        path: str,
        format: str = 'csv',
        credentials: Optional[Dict[str, Any]] = None,
        fs_args: Optional[Dict[str, Any]] = None,
    ):
        """
        Creates a new ``RawFilesWriter`` instance.

        Parameters
        ----------
        path : str
            The directory to write the results in.
        format: str, default='csv'
            The file format for the data export. Should be one of ``parquet`` or ``csv``.
        credentials : Dict[str, Any], default=None
            Credential information following specific ``fsspec`` implementations.
        fs_args : default=None
            Arguments passed along to the ``fsspec`` filesystem initializer.

        Examples
        --------
        >>> writer = RawFilesWriter(path='/output', format='parquet')
        >>> writer.write(result, filename="sample.pq")  # doctest: +SKIP
        """
        super().__init__()

        if format not in FORMATS:
            raise InvalidArgumentsException(f"unknown value for format '{format}', should be one of {FORMATS}")
        self.format = format

        _fs_args = deepcopy(fs_args) or {}
        protocol, path = _get_protocol_and_path(path)
        if protocol == "file":
            _fs_args.setdefault("auto_mkdir", True)

        self._protocol = protocol
        self.filepath = path
        self._fs = fsspec.filesystem(self._protocol, **{**(deepcopy(credentials) or {}), **_fs_args})

    def _write(self, result: Result, **write_args) -> Path:
        """Exports ``result.to_df()`` to ``<path>/<filename>``.

        Parameters
        ----------
        result : Result
            The result to be exported.
        filename : str
            The filename to use for the exported file.
        write_args : dict
            Passed along to ``DataFrame.to_csv`` or ``DataFrame.to_parquet``.
        """
        if 'filename' not in write_args:
            raise InvalidArgumentsException("missing required parameter 'filename'")
        filename = write_args.pop('filename')

        data = result.to_df()
        data_path = Path(get_filepath_str(self.filepath, self._protocol)) / filename
        self._logger.debug(f"writing {len(data)} rows to {data_path}")

        bytes_buffer = BytesIO()
        if self.format == 'parquet':
            # parquet requires string column names
            data.columns = [str(column) for column in data.columns]
            data.to_parquet(bytes_buffer, **write_args)
        else:
            data.to_csv(bytes_buffer, **write_args)

        with self._fs.open(str(data_path), mode="wb") as fs_file:
            fs_file.write(bytes_buffer.getvalue())
        return data_path
