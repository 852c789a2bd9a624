"""Entry point for running the engine as a module.

Usage: python -m sound_alert_engine
"""

import sys

from sound_alert_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
