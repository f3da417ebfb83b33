#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Random record selection for attribute samples."""

from .calculator import RandomRecordSelector
from .result import Result
