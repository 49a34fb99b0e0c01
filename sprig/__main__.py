"""Allow the CLI to be run with ``python -m sprig``."""

from .cli import app

if __name__ == "__main__":
    app()
