"""
Main entry point for running smartdhandha as a module.

Usage:
    python -m smartdhandha <command> [options]
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
