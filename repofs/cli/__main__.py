#!/usr/bin/env python3
"""Entry point for the repofs CLI when run as python -m repofs.cli."""

if __name__ == "__main__":
    from repofs.cli.main import main

    main()
