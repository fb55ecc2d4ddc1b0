"""
pipsync - Package Installation Plugin XML synchronization.
"""

from pipsync.interface.cli import main


if __name__ == "__main__":
    main()
