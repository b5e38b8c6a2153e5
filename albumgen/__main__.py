"""
Main entry point for running the package as a module.

Usage:
    python -m albumgen process
    python -m albumgen sync
    python -m albumgen report --type missing
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
