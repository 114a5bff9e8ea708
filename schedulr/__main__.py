"""
Package entry point.

Allows running the application via:

    python -m schedulr

This simply forwards execution to schedulr.cli.main().
"""

from schedulr.cli import main

if __name__ == "__main__":
    main()
