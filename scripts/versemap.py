#!/usr/bin/env python3

"""Inspect versification set files and resolve mappings between the
versifications they contain.
"""

import sys

from versemap.tool import main


if __name__ == '__main__':
    sys.exit(main())
