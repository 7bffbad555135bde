"""Main entry point for running aliasscan as a module."""

from .cli import main

if __name__ == "__main__":
    main()
