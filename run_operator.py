#!/usr/bin/env python3
"""
Wrapper script to run the fleetshard operator with Kopf.

Launches Kopf's CLI with all standard arguments after importing the operator
module, which registers the handlers via decorators.

Usage:
    python run_operator.py [any kopf run arguments]

Examples:
    python run_operator.py --verbose --all-namespaces
    python run_operator.py -n my-namespace --log-format=json
"""

import sys

if __name__ == '__main__':
    import kopf.cli  # noqa: E402

    import fleetshard.app  # noqa: E402, F401

    # This makes it behave as if user called: kopf run <args>
    sys.argv.insert(1, 'run')

    sys.exit(kopf.cli.main(prog_name="kopf"))
