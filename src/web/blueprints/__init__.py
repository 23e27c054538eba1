"""
Flask blueprints for the SheetRoll API.

- rolls: roll endpoints, formula tools and the activity log
"""

from .rolls import rolls_bp

__all__ = ['rolls_bp']
