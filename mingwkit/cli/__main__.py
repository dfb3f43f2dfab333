"""
Entry point for running MingwKit CLI as a module.

Usage: python -m mingwkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
