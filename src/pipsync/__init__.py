"""
pipsync - Package Installation Plugin XML synchronization.

Keeps a package's declarative PIP files and the installed database state in
step, and edits those files deterministically.

Usage:
    # CLI
    pipsync --config-dir config list

    # Programmatic
    from pipsync.application.container import Container

    container = Container(Path("config"))
    container.sync_service.install()
"""

__version__ = "0.1.0"
