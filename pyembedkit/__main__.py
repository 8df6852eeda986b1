"""
Entry point for running pyembedkit as a module.

Usage: python -m pyembedkit [command] [options]
"""

from pyembedkit.cli.parser import main

if __name__ == "__main__":
    main()
