#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Package containing the sample size planners for attribute and monetary unit sampling."""

from .attributes import AttributePlanner
from .monetary_unit import MonetaryUnitPlanner
