#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
import pandas as pd
import pytest

from auditsampling import MonetaryUnitPlanner
from auditsampling.exceptions import InvalidArgumentsException, ReaderException, WriterException
from auditsampling.io import FileReader, RawFilesWriter, WriterFactory
from auditsampling.io.base import _get_protocol_and_path, get_filepath_str


@pytest.fixture(scope='module')
def planning_result():
    data = pd.DataFrame({'book_value': [1200.0, 300.0, 450.0, 8000.0]})
    return MonetaryUnitPlanner('book_value', confidence_level=95, tolerable_error=0.05).calculate(data)


@pytest.mark.parametrize('format', ['csv', 'parquet'])
def test_raw_files_writer_writes_result(planning_result, tmp_path, format):  # noqa: D103
    writer = RawFilesWriter(path=str(tmp_path / 'out'), format=format)
    written = writer.write(planning_result, filename=f'plan.{format}')

    assert written.name == f'plan.{format}'
    read_back = FileReader(str(written)).read()
    assert read_back['sample_size'].tolist() == [planning_result.sample_size]


def test_raw_files_writer_passes_write_args(planning_result, tmp_path):  # noqa: D103
    written = RawFilesWriter(path=str(tmp_path)).write(planning_result, filename='plan.csv', index=False, sep=';')
    assert FileReader(str(written), read_args={'sep': ';'}).read().columns[0] == 'population_value'


def test_raw_files_writer_requires_filename(planning_result, tmp_path):  # noqa: D103
    with pytest.raises(InvalidArgumentsException, match='filename'):
        RawFilesWriter(path=str(tmp_path)).write(planning_result)


def test_raw_files_writer_rejects_unknown_format(tmp_path):  # noqa: D103
    with pytest.raises(InvalidArgumentsException, match='format'):
        _ = RawFilesWriter(path=str(tmp_path), format='xlsx')


def test_writer_rejects_none(tmp_path):  # noqa: D103
    with pytest.raises(InvalidArgumentsException):
        RawFilesWriter(path=str(tmp_path)).write(None, filename='none.csv')


def test_writer_wraps_unexpected_errors(tmp_path):  # noqa: D103
    class Broken:
        def to_df(self):
            raise ValueError('cannot export')

    with pytest.raises(WriterException, match='cannot export'):
        RawFilesWriter(path=str(tmp_path)).write(Broken(), filename='broken.csv')


def test_writer_factory_creates_registered_writer(tmp_path):  # noqa: D103
    writer = WriterFactory.create('raw_files', {'path': str(tmp_path), 'format': 'parquet'})
    assert isinstance(writer, RawFilesWriter)
    assert writer.format == 'parquet'


def test_writer_factory_rejects_unknown_key():  # noqa: D103
    with pytest.raises(InvalidArgumentsException, match='unknown writer key'):
        _ = WriterFactory.create('database')


def test_file_reader_rejects_unsupported_suffix(tmp_path):  # noqa: D103
    path = tmp_path / 'population.xlsx'
    path.write_text('')
    with pytest.raises(InvalidArgumentsException, match='not supported'):
        _ = FileReader(str(path)).read()


def test_file_reader_wraps_missing_file(tmp_path):  # noqa: D103
    with pytest.raises(ReaderException):
        _ = FileReader(str(tmp_path / 'missing.csv')).read()


@pytest.mark.parametrize(
    'filepath, expected',
    [
        ('/audits/population.csv', ('file', '/audits/population.csv')),
        ('population.csv', ('file', 'population.csv')),
        ('C:\\audits\\population.csv', ('file', 'C:\\audits\\population.csv')),
        ('s3://audit-bucket/2024/population.csv', ('s3', 'audit-bucket/2024/population.csv')),
        ('https://example.org/population.csv', ('https', 'example.org/population.csv')),
    ],
)
def test_get_protocol_and_path(filepath, expected):  # noqa: D103
    assert _get_protocol_and_path(filepath) == expected


def test_get_filepath_str_restores_http_protocol():  # noqa: D103
    assert get_filepath_str('example.org/population.csv', 'https') == 'https://example.org/population.csv'
    assert get_filepath_str('audit-bucket/population.csv', 's3') == 'audit-bucket/population.csv'
