#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Package containing the sample extractors.

The :class:`~auditsampling.extraction.systematic.SystematicExtractor` walks the cumulative monetary value of a
population and picks the items containing the selection points, after setting aside high value items.
The :class:`~auditsampling.extraction.random_records.RandomRecordSelector` picks records at random for attribute samples.
"""

from .random_records import RandomRecordSelector
from .systematic import SystematicExtractor
