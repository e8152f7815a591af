"""Entry point for ``python -m blobprompt``."""
from .cli import run

if __name__ == "__main__":
    run()
