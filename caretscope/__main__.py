"""Module entrypoint for ``python -m caretscope``."""

from .cli import main


if __name__ == "__main__":
    main()
