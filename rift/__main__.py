"""Entry point for ``python -m rift``."""

import sys

from .cli import main

sys.exit(main())
