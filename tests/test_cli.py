#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
import pytest
from click.testing import CliRunner

from auditsampling import __version__
from auditsampling.cli import cli
from auditsampling.datasets import load_synthetic_audited_sample, load_synthetic_invoice_population


@pytest.fixture
def config_path(tmp_path):
    population = load_synthetic_invoice_population(size=800, random_state=8)
    population.to_csv(tmp_path / 'population.csv', index=False)
    load_synthetic_audited_sample(population.head(60), random_state=8).to_csv(tmp_path / 'sample.csv', index=False)

    path = tmp_path / 'auditsampling.yaml'
    path.write_text(
        f"""
input:
  population_data:
    path: {tmp_path / 'population.csv'}
  sample_data:
    path: {tmp_path / 'sample.csv'}

planning:
  type: monetary_unit
  params:
    value_column_name: book_value
    confidence_level: 90
    tolerable_error: 0.1

evaluation:
  type: stringer_bound
  params:
    confidence_level: 90
    reference_column_name: reference

outputs:
  - type: raw_files
    params:
      path: {tmp_path / 'results'}
"""
    )
    return path


def test_cli_run_executes_configured_steps(config_path):  # noqa: D103
    result = CliRunner().invoke(cli, ['-c', str(config_path), 'run'])

    assert result.exit_code == 0, result.output
    assert 'upper_error_limit' in result.output
    written = sorted(path.name for path in (config_path.parent / 'results').iterdir())
    assert written == ['evaluation_stringer_bound.csv', 'planning_monetary_unit.csv']


def test_cli_run_fails_on_invalid_step(tmp_path):  # noqa: D103
    path = tmp_path / 'auditsampling.yaml'
    path.write_text("planning:\n  type: attributes\n  params:\n    population_size: 0\n")

    result = CliRunner().invoke(cli, ['-c', str(path), 'run'])
    assert result.exit_code != 0


def test_cli_version():  # noqa: D103
    result = CliRunner().invoke(cli, ['--version'])
    assert __version__ in result.output
