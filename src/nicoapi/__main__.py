"""`python -m nicoapi` during development."""

from nicoapi.cli.main import run

if __name__ == "__main__":
    run()
