"""Entry point for python -m repofs."""

from repofs.cli.main import main

main()
