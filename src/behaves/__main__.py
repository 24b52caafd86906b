"""Entry point for ``python -m behaves``."""

from behaves.cli import main

if __name__ == "__main__":
    main()
