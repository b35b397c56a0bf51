"""Entry point for ``python -m taskvantage``."""

from taskvantage.cli import main

if __name__ == "__main__":
    main()
