"""
Infrastructure layer: XML document store, SQLite installation store,
configuration files and logging setup.
"""
