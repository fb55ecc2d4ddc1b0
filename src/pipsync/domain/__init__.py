"""
Domain layer for pipsync.

Pure data structures and rules with no I/O dependencies: entry kinds,
installation models, the plugin registry and form-boundary validation.
"""
