"""Allow running as `python -m tuning_playground`."""

from .cli import cli

if __name__ == "__main__":
    cli()
