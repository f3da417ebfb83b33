#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Systematic (fixed interval or cell) extraction of monetary unit samples."""

from .calculator import SystematicExtractor
from .result import ExtractionStatistics, Result
