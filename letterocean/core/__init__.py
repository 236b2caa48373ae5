"""
Core simulation modules for Letter Ocean.

This module contains the ocean orchestrator, word formations and the
throttled word feed.
"""

__all__ = ['ocean', 'word_formation', 'word_feed']
