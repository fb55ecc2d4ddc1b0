"""
CLI result formatters.
"""
