#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

from .datasets import load_synthetic_audited_sample, load_synthetic_invoice_population
