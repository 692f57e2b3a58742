"""
HTTP API for the affiliate widget.
"""
from .app import create_app, build_matcher

__all__ = ["create_app", "build_matcher"]
