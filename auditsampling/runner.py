#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Runs a configured audit sampling pipeline: planning, then extraction, then evaluation.

Each step is optional. Values produced by an earlier step fill in the parameters a later step leaves
out: the planned sample interval drives the systematic extraction and the evaluation, the planned
sample size drives a random record selection and the high value items set aside during extraction
are reported by the evaluation.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import pandas as pd
from rich.console import Console

from auditsampling._typing import Result
from auditsampling.config import Config, InputDataConfig, StepConfig, WriterConfig
from auditsampling.evaluation.attributes import AttributeEvaluator
from auditsampling.evaluation.cell_classical import CellClassicalEvaluator
from auditsampling.evaluation.stringer_bound import StringerBoundEvaluator
from auditsampling.exceptions import InvalidArgumentsException
from auditsampling.extraction.random_records import RandomRecordSelector
from auditsampling.extraction.systematic import SystematicExtractor
from auditsampling.io import FileReader, Writer, WriterFactory
from auditsampling.planning.attributes import AttributePlanner
from auditsampling.planning.monetary_unit import MonetaryUnitPlanner

PLANNING = 'planning'
EXTRACTION = 'extraction'
EVALUATION = 'evaluation'


@dataclass
class RunContext:
    STEPS_PER_CALCULATOR = 2

    current_step: int
    total_steps: int
    current_calculator: str
    current_calculator_config: Optional[Dict[str, Any]] = None
    current_calculator_success: bool = True
    run_success: bool = True
    result: Optional[Result] = None
    results: Dict[str, Result] = field(default_factory=dict)

    def increase_step(self):
        self.current_step += 1


@dataclass
class RunInput:
    population_data: Optional[pd.DataFrame] = None
    sample_data: Optional[pd.DataFrame] = None


@contextmanager
def run_context(config: Config):
    yield RunContext(
        current_step=0,
        total_steps=len(config.steps) * RunContext.STEPS_PER_CALCULATOR,
        current_calculator='',
    )


_logger = logging.getLogger(__name__)


class CalculatorFactory:
    """Maps the step ``type`` keys used in configuration files to calculator classes, per pipeline stage."""

    registry: Dict[str, Dict[str, Type]] = {
        PLANNING: {
            'attributes': AttributePlanner,
            'monetary_unit': MonetaryUnitPlanner,
        },
        EXTRACTION: {
            'systematic': SystematicExtractor,
            'random_records': RandomRecordSelector,
        },
        EVALUATION: {
            'attributes': AttributeEvaluator,
            'cell_classical': CellClassicalEvaluator,
            'stringer_bound': StringerBoundEvaluator,
        },
    }

    @classmethod
    def register(cls, stage: str, name: str, calculator_type: Type):
        if stage not in cls.registry:
            raise InvalidArgumentsException(f"unknown stage '{stage}', should be one of {list(cls.registry)}")
        cls.registry[stage][name] = calculator_type

    @classmethod
    def create(cls, stage: str, name: str, params: Dict[str, Any]):
        if name not in cls.registry[stage]:
            raise InvalidArgumentsException(
                f"unknown {stage} type '{name}'. Registered types are: {list(cls.registry[stage])}"
            )
        return cls.registry[stage][name](**params)


class RunnerLogger:
    def __init__(self, logger: logging.Logger, console: Optional[Console] = None):
        self.logger = logger
        self.console = console

    def log(self, message: object, log_level: int = logging.INFO):
        if self.logger:
            self.logger.log(level=log_level, msg=message)

        if self.console and log_level == logging.INFO:
            self.console.log(message)


def run(  # noqa: C901
    config: Config,
    input: Optional[RunInput] = None,
    ignore_errors: Optional[bool] = None,
    logger: logging.Logger = logging.getLogger(__name__),
    console: Optional[Console] = None,
    on_calculate: Optional[Callable[[RunContext], Any]] = None,
    on_write: Optional[Callable[[RunContext], Any]] = None,
    on_calculator_complete: Optional[Callable[[RunContext], Any]] = None,
    on_run_complete: Optional[Callable[[RunContext], Any]] = None,
    on_fail: Optional[Callable[[RunContext, Optional[Exception]], Any]] = None,
) -> Dict[str, Result]:
    """Runs the configured steps in order and returns their results keyed by stage."""
    run_logger = RunnerLogger(logger, console)
    ignore_errors = _get_ignore_errors(ignore_errors, config)

    with run_context(config) as context:
        try:
            population_data, sample_data = _load_input(config, input, run_logger)
            writers = get_output_writers(config.outputs, run_logger)

            for stage, step_config in _enabled_steps(config):
                context.current_calculator = step_config.name or f"{stage}_{step_config.type}"
                context.current_calculator_config = step_config.model_dump()
                context.current_calculator_success = True
                try:
                    context.increase_step()
                    run_logger.log(
                        f"[{context.current_step}/{context.total_steps}] '{context.current_calculator}': "
                        f"running {stage}"
                    )
                    if on_calculate:
                        on_calculate(context)
                    result = _run_step(stage, step_config, context.results, population_data, sample_data)
                    context.result = result
                    context.results[stage] = result

                    context.increase_step()
                    run_logger.log(
                        f"[{context.current_step}/{context.total_steps}] '{context.current_calculator}': "
                        f"writing out results"
                    )
                    if on_write:
                        on_write(context)
                    for writer, write_args in writers:
                        write_args = {'filename': _default_filename(context.current_calculator, writer), **write_args}
                        run_logger.log(f"writing results with {writer} and args {write_args}", log_level=logging.DEBUG)
                        writer.write(result, **write_args)

                    for issue in getattr(result, 'issues', None) or []:
                        run_logger.log(f"'{context.current_calculator}' reported {issue.kind.value}: {issue.message}")

                    if on_calculator_complete:
                        on_calculator_complete(context)
                except Exception as exc:
                    context.current_calculator_success = False
                    context.run_success = False
                    if on_fail:
                        on_fail(context, exc)
                    if not ignore_errors:
                        raise
                    run_logger.log(
                        f"an unexpected exception occurred running '{context.current_calculator}': {exc}",
                        log_level=logging.ERROR,
                    )

            if on_run_complete:
                on_run_complete(context)

        except Exception as exc:
            context.run_success = False
            if on_fail and context.current_calculator_success:
                on_fail(context, exc)
            raise

    return context.results


def _enabled_steps(config: Config) -> List[Tuple[str, StepConfig]]:
    steps = [(PLANNING, config.planning), (EXTRACTION, config.extraction), (EVALUATION, config.evaluation)]
    return [(stage, step) for stage, step in steps if step is not None and step.enabled]


def _load_input(
    config: Config, input: Optional[RunInput], run_logger: RunnerLogger
) -> Tuple[Optional[pd.DataFrame], Optional[pd.DataFrame]]:
    if input is not None:
        if config.input is not None:
            raise InvalidArgumentsException("both config.input and input provided. Please provide only one")
        return input.population_data, input.sample_data

    if config.input is None:
        return None, None

    population_data, sample_data = None, None
    if config.input.population_data is not None:
        run_logger.log("reading population data", log_level=logging.DEBUG)
        population_data = read_data(config.input.population_data, run_logger)
    if config.input.sample_data is not None:
        run_logger.log("reading sample data", log_level=logging.DEBUG)
        sample_data = read_data(config.input.sample_data, run_logger)
    return population_data, sample_data


def _run_step(
    stage: str,
    step_config: StepConfig,
    results: Dict[str, Result],
    population_data: Optional[pd.DataFrame],
    sample_data: Optional[pd.DataFrame],
) -> Result:
    params = dict(step_config.params)
    planning = results.get(PLANNING)
    extraction = results.get(EXTRACTION)

    if stage == PLANNING:
        calc = CalculatorFactory.create(stage, step_config.type, params)
        if step_config.type == 'attributes':
            return calc.calculate()
        return calc.calculate(_require(population_data, 'population data', stage))

    if stage == EXTRACTION:
        if step_config.type == 'systematic' and 'sample_interval' not in params:
            params['sample_interval'] = _from_result(planning, 'sample_interval', stage)
        if step_config.type == 'random_records' and 'sample_size' not in params:
            params['sample_size'] = _from_result(planning, 'sample_size', stage)
        calc = CalculatorFactory.create(stage, step_config.type, params)
        return calc.calculate(_require(population_data, 'population data', stage))

    if step_config.type == 'attributes':
        sample_size = params.pop('sample_size', None)
        if sample_size is None:
            sample_size = _from_result(extraction or planning, 'sample_size', stage)
        observed_deviations = params.pop('observed_deviations', None)
        if observed_deviations is None:
            raise InvalidArgumentsException("missing 'observed_deviations' in the attribute evaluation params")
        calc = CalculatorFactory.create(stage, step_config.type, params)
        return calc.calculate(sample_size, observed_deviations)

    if 'sample_interval' not in params:
        params['sample_interval'] = _from_result(extraction or planning, 'sample_interval', stage)
    calc = CalculatorFactory.create(stage, step_config.type, params)
    high_value_items = getattr(extraction, 'high_value_items', None)
    return calc.calculate(
        _require(sample_data, 'sample data', stage),
        high_value_items,
        high_value_column_name=getattr(extraction, 'sample_column_name', None),
    )


def _require(data: Optional[pd.DataFrame], name: str, stage: str) -> pd.DataFrame:
    if data is None:
        raise InvalidArgumentsException(f"no {name} provided for the {stage} step")
    return data


def _from_result(result: Optional[Result], attribute: str, stage: str) -> Any:
    value = getattr(result, attribute, None)
    if value is None:
        raise InvalidArgumentsException(
            f"missing '{attribute}' in the {stage} params and no earlier step provides it"
        )
    _logger.debug(f"using '{attribute}' = {value} from an earlier step for the {stage} step")
    return value


def _default_filename(name: str, writer: Writer) -> str:
    return f"{name}.{getattr(writer, 'format', 'csv')}"


def read_data(input_config: InputDataConfig, logger: Optional[RunnerLogger] = None) -> pd.DataFrame:
    data = FileReader(
        filepath=input_config.path, credentials=input_config.credentials, read_args=input_config.read_args
    ).read()
    if logger:
        logger.log(f"read {len(data)} rows from {input_config.path}")
    return data


def get_output_writers(
    outputs_config: Optional[List[WriterConfig]], logger: Optional[RunnerLogger] = None
) -> List[Tuple[Writer, Dict[str, Any]]]:
    if not outputs_config:
        return []

    writers: List[Tuple[Writer, Dict[str, Any]]] = []
    for writer_config in outputs_config:
        writer = WriterFactory.create(writer_config.type, writer_config.params)
        if logger:
            logger.log(f"created writer '{writer_config.type}'", log_level=logging.DEBUG)
        writers.append((writer, writer_config.write_args or {}))

    return writers


def _get_ignore_errors(ignore_errors: Optional[bool], config: Config) -> bool:
    if ignore_errors is None:
        if config.ignore_errors is None:
            return False
        else:
            return config.ignore_errors
    else:
        return ignore_errors
