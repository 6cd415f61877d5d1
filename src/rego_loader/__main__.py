"""Allow running as ``python -m rego_loader``."""

from rego_loader.cli import main

if __name__ == "__main__":
    main()
