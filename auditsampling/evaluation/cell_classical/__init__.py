#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Cell & Classical PPS evaluation of monetary unit samples."""

from .calculator import CellClassicalEvaluator, stage_table
