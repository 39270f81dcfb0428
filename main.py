"""Dashboard Entry Point - Root Module.

This is the root-level entry point. It delegates to the src package.
"""

import sys

from src.main import main

__all__ = [
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
