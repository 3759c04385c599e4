"""
Entry point for ``python -m apfrq`` (same as the ``apfrq`` command).
"""

from apfrq.cli import main

if __name__ == "__main__":
    main()
