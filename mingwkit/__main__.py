"""
Entry point for running MingwKit CLI as a module.

Usage: python -m mingwkit [command] [options]
"""

from mingwkit.cli.parser import main

if __name__ == "__main__":
    main()
