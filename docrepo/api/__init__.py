"""API module for docrepo.

Functions defined here serve as the single source of truth for the library and the CLI.
"""

__all__ = []
