#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
"""The `io` package reads population data and exports results to local or cloud storage.

The `file_reader` module reads CSV or parquet files using ``fsspec`` and ``pandas``.
The `raw_files_writer` module exports the data of a result to CSV or parquet files.
"""

from .base import Reader, Writer, WriterFactory
from .file_reader import FileReader
from .raw_files_writer import RawFilesWriter
