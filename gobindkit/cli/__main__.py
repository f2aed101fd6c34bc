"""
Entry point for running GobindKit CLI as a module.

Usage: python -m gobindkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
