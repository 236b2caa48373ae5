"""
Physics simulation components for Letter Ocean.

This module contains the letter integrator, the force engine and the
spatial index used for neighbour queries.
"""

__all__ = ['letter', 'forces', 'spatial_index']
