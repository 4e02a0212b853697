"""Quasar Simulator - command-line entry point."""

import sys

from quasar_sim.cli import main

if __name__ == '__main__':
    sys.exit(main())
