"""Module entrypoint for ``python -m jjview``."""

from .cli import main


if __name__ == "__main__":
    main()
