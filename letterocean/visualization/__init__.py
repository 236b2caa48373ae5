"""
Visualization components for Letter Ocean.

This module contains the matplotlib renderer for the ocean's render state.
"""

__all__ = ['renderer']
