#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Evaluation of attribute samples: deviation rate and its confidence limits."""

from .calculator import AttributeEvaluator, poisson_lower_limit, poisson_upper_limit
from .result import Result
