"""
UI components for Letter Ocean.

This module contains the mouse event wiring for dragging letters.
"""

__all__ = ['event_manager']
