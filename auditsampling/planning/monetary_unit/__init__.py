#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Planning of monetary unit samples: population value, sample size and sampling interval."""

from .calculator import MonetaryUnitPlanner
from .result import Result
