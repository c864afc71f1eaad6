"""
Utility module: exceptions and text normalization.
"""
