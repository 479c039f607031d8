"""
Package entry point.

Allows running the client via:

    python -m evex

This simply forwards execution to evex.cli.main().
"""

from evex.cli import main

if __name__ == "__main__":
    main()
