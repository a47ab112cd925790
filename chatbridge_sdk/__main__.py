"""``python -m chatbridge_sdk`` runs the chatbridge command line."""

from .cli import main

if __name__ == "__main__":
    main()
