"""Allow running xlsx-sender as ``python -m xlsxsender``."""

from xlsxsender.cli.typer_app import run

if __name__ == "__main__":
    run()
