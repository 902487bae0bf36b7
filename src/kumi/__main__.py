"""Allow ``python -m kumi``."""

from kumi.cli import main

if __name__ == "__main__":
    main()
