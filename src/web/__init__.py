"""
Web control surface for the detection loop.
"""

from .app import create_app

__all__ = ["create_app"]
