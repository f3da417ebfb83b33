#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
import os
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import jinja2
import yaml
from pydantic import BaseModel, Field, field_validator

from auditsampling._typing import Self
from auditsampling.exceptions import IOException

CONFIG_PATH_ENV_VAR_KEY = 'AUDITSAMPLING_CONFIG_PATH'


class InputDataConfig(BaseModel):
    path: str
    credentials: Optional[Dict[str, Any]] = Field(default=None)
    read_args: Optional[Dict[str, Any]] = Field(default=None)


class InputConfig(BaseModel):
    population_data: Optional[InputDataConfig] = Field(default=None)
    sample_data: Optional[InputDataConfig] = Field(default=None)


class WriterConfig(BaseModel):
    type: str
    params: Optional[Dict[str, Any]] = Field(default=None)
    write_args: Optional[Dict[str, Any]] = Field(default=None)


class StepConfig(BaseModel):
    type: str
    name: Optional[str] = Field(default=None)
    enabled: Optional[bool] = Field(default=True)
    params: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('type')
    def _normalize_type(cls, value: str):
        return value.strip().lower().replace('-', '_')


class Config(BaseModel):
    input: Optional[InputConfig] = Field(default=None)
    planning: Optional[StepConfig] = Field(default=None)
    extraction: Optional[StepConfig] = Field(default=None)
    evaluation: Optional[StepConfig] = Field(default=None)
    outputs: List[WriterConfig] = Field(default_factory=list)

    ignore_errors: Optional[bool] = Field(default=None)

    @classmethod
    @lru_cache(maxsize=1)
    def load(cls, config_path: Optional[str] = None):
        with open(get_config_path(config_path), "r") as config_file:
            config_dict = yaml.load(config_file, Loader=yaml.FullLoader)
            return Config.model_validate(config_dict)._render()

    @classmethod
    def parse(cls, config: str):
        config_dict = yaml.safe_load(config)
        return Config.model_validate(config_dict)._render()

    @property
    def steps(self) -> List[StepConfig]:
        """The configured steps in pipeline order, skipping the disabled ones."""
        return [
            step for step in (self.planning, self.extraction, self.evaluation) if step is not None and step.enabled
        ]

    def _render(self) -> Self:
        if self.input is not None:
            for data_config in (self.input.population_data, self.input.sample_data):
                if data_config is not None:
                    data_config.path = _render_path_template(data_config.path)

        for output in self.outputs:
            if output.params and 'path' in output.params:
                output.params['path'] = _render_path_template(output.params['path'])

        return self


def get_config_path(custom_config_path: Optional[str] = None) -> Path:
    if custom_config_path:
        return Path(custom_config_path)

    if CONFIG_PATH_ENV_VAR_KEY in os.environ:
        return Path(os.environ[CONFIG_PATH_ENV_VAR_KEY])

    mounted_path = Path('/config/auditsampling.yaml')
    if mounted_path.exists():
        return mounted_path

    local_path = Path('auditsampling.yaml')
    if local_path.exists():
        return local_path

    raise RuntimeError('could not determine config path')


def _render_path_template(path_template: str) -> str:
    try:
        env = jinja2.Environment()
        tpl = env.from_string(path_template)
        return tpl.render(
            minute=datetime.strftime(datetime.today(), "%M"),
            hour=datetime.strftime(datetime.today(), "%H"),
            day=datetime.strftime(datetime.today(), "%d"),
            weeknumber=date.today().isocalendar()[1],
            month=datetime.strftime(datetime.today(), "%m"),
            year=datetime.strftime(datetime.today(), "%Y"),
        )
    except Exception as exc:
        raise IOException(f"could not render file path template: '{path_template}': {exc}")
