"""Entry point for the Milepost CLI.

Usage:
    python -m milepost.interfaces.cli.main

Or via installed entry point:
    milepost <command>
"""

from milepost.interfaces.cli import app


def main() -> None:
    """Run the Milepost CLI application."""
    app()


if __name__ == "__main__":
    main()
