#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Package containing the sample evaluators.

Monetary unit samples are evaluated with either the
:class:`~auditsampling.evaluation.cell_classical.CellClassicalEvaluator` or the
:class:`~auditsampling.evaluation.stringer_bound.StringerBoundEvaluator`. Both return an
:class:`~auditsampling.evaluation.result.EvaluationSummary`.
Attribute samples are evaluated with the :class:`~auditsampling.evaluation.attributes.AttributeEvaluator`.
"""

from .attributes import AttributeEvaluator
from .cell_classical import CellClassicalEvaluator
from .result import EvaluationStage, EvaluationSummary, PartitionEvaluation
from .stringer_bound import StringerBoundEvaluator
from .tainting import SampleItem
