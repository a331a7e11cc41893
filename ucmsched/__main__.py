"""
Package entry point.

Allows running the application via:

    python -m ucmsched

This simply forwards execution to ucmsched.cli.main().
"""

from ucmsched.cli import main

if __name__ == "__main__":
    main()
