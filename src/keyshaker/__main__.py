"""Allow ``python -m keyshaker``."""

import sys

from keyshaker.cli import main

sys.exit(main())
