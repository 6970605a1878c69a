"""Allow `python -m typewriter_tui`."""

import sys

from .app import main

sys.exit(main())
