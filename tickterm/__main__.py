"""Module entrypoint for ``python -m tickterm``.

All argument parsing and session setup happen in ``tickterm.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
