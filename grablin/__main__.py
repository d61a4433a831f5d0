"""Entry point for ``python -m grablin``."""

from grablin.cli import main

if __name__ == "__main__":
    main()
