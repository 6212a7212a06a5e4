"""Allow ``python -m helmls``."""

from helmls.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
