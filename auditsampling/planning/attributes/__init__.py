#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Planning of attribute samples: sample size and critical number of deviations."""

from .calculator import AttributePlanner
from .result import Result
