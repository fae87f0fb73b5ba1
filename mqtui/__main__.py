"""Module entrypoint for ``python -m mqtui``."""

from .cli import main


if __name__ == "__main__":
    main()
