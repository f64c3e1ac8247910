#!/usr/bin/env python
# Licensed under a 3-clause BSD style license - see LICENSE.txt

import sys
from setuptools import setup

TEST_HELP = """
Note: running tests is not done using 'python setup.py test'. Instead
you will need to run:
    pip install -e .[test]
    pytest
"""

if 'test' in sys.argv:
    print(TEST_HELP)
    sys.exit(1)

setup()
