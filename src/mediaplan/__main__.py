"""Allow running as ``python -m mediaplan``."""

from mediaplan.cli import main

if __name__ == "__main__":
    main()
