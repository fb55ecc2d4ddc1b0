"""
Application layer: entry reconciliation, entry listing, installation
plugins and the services wiring them together.
"""
