#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
"""Command line interface, run it using ``auditsampling -c <config> run``."""

from .cli import cli
from .run import run
