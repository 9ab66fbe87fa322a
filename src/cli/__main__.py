"""`python -m cli USER PASSWORD ...` sin instalar el script."""

from cli.main import run

if __name__ == "__main__":
    run()
