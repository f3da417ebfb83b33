#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Stringer bound evaluation of monetary unit samples."""

from .calculator import StringerBoundEvaluator, stringer_stages
