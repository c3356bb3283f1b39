"""
Top-level package for the Music Library API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
