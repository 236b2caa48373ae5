"""
Letter Ocean: a swarm of letter-shaped particles that gather into words.

Letters drift under short-range repulsion, medium-range attraction and a
weak pull toward the center, spinning when they collide. Asking the ocean
for a word recruits matching letters and steers them along a curved path
until the word dissolves back into the swarm.
"""

__version__ = "0.1.0"

__all__ = ['config', 'core', 'physics', 'ui', 'visualization']
