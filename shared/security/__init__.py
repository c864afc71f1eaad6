"""
Security module: secret comparison helpers.
"""

from shared.security.secrets import safe_compare_secret

__all__ = ["safe_compare_secret"]
