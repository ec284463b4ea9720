"""Allow ``python -m pathplot``."""

import sys

from pathplot.cli import main

sys.exit(main())
