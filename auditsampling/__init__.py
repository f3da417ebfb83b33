#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Statistical audit sampling.

Use the library to:
- Plan attribute and monetary unit samples
- Extract systematic monetary unit samples and random record samples
- Evaluate audited samples using the Cell & Classical PPS method or the Stringer bound
"""

# PEP0440 compatible formatted version, see:
# https://www.python.org/dev/peps/pep-0440/
__version__ = '0.1.0'

import logging

from dotenv import load_dotenv

from ._typing import (
    ControlMode,
    ErrorType,
    ExtractionMode,
    HighValueManagement,
    Issue,
    IssueKind,
    PrecisionLimitMode,
    SignFilter,
)
from .confidence_factors import (
    DEFAULT_CONFIDENCE_FACTOR_TABLE,
    ConfidenceFactorEntry,
    ConfidenceFactorTable,
    incremental_reliability_factor,
    poisson_zero_factor,
    reliability_factor,
)
from .datasets import load_synthetic_audited_sample, load_synthetic_invoice_population
from .evaluation import (
    AttributeEvaluator,
    CellClassicalEvaluator,
    EvaluationStage,
    EvaluationSummary,
    SampleItem,
    StringerBoundEvaluator,
)
from .exceptions import (
    AuditSamplingException,
    CalculatorException,
    EmptyPopulationException,
    InvalidArgumentsException,
    InvalidFieldException,
    NotFoundException,
)
from .extraction import RandomRecordSelector, SystematicExtractor
from .functions import (
    evaluate_attribute_sample,
    evaluate_cell_classical,
    evaluate_stringer_bound,
    extract_random_sample,
    extract_systematic_sample,
    plan_attribute_sample,
    plan_monetary_unit_sample,
)
from .io import FileReader, RawFilesWriter
from .planning import AttributePlanner, MonetaryUnitPlanner

# read any .env files to import environment variables
load_dotenv()

logging.getLogger(__name__).addHandler(logging.NullHandler())
