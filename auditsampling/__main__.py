#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
from auditsampling.cli import cli

if __name__ == '__main__':
    cli()
