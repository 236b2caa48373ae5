"""
Renderer module for Letter Ocean.

Draws the ocean's render handoff with matplotlib: one text artist per
letter, moved and rotated every animation frame. The simulation itself
never touches matplotlib.
"""

import math

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from .. import config


def setup_figure_layout(ocean):
    """
    Create a figure whose single axes spans the ocean's world in screen coordinates.

    Returns:
        tuple: (fig, ax)
    """
    fig = plt.figure(figsize=(ocean.width / 100, ocean.height / 100))
    fig.patch.set_facecolor(config.BACKGROUND_COLOR)
    try:
        fig.canvas.manager.set_window_title(config.WINDOW_TITLE)
    except AttributeError:
        pass  # non-interactive backends have no window manager

    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_facecolor(config.BACKGROUND_COLOR)
    ax.set_xlim(0, ocean.width)
    # Screen convention: y grows downward
    ax.set_ylim(ocean.height, 0)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    return fig, ax


def create_letter_artists(ax, states):
    """One centered text artist per ``LetterState``."""
    artists = []
    for state in states:
        artist = ax.text(
            state.x, state.y, state.glyph,
            fontsize=config.LETTER_SIZE * 0.75,
            family=config.FONT_FAMILY,
            color=config.TEXT_COLOR,
            alpha=state.alpha,
            ha='center', va='center',
            rotation_mode='anchor',
        )
        artists.append(artist)
    return artists


def update_letter_artists(ax, artists, states):
    """Sync artists to the latest render state, adding artists for new letters."""
    if len(states) > len(artists):
        artists.extend(create_letter_artists(ax, states[len(artists):]))
    for artist, state in zip(artists, states):
        artist.set_position((state.x, state.y))
        # The y axis is flipped, so screen-clockwise angles read as negative degrees
        artist.set_rotation(-math.degrees(state.angle) % 360.0)
        artist.set_alpha(state.alpha)
    return artists


def animate(ocean, fig=None, ax=None, frames=None, interval=None):
    """
    Build a ``FuncAnimation`` that steps ``ocean`` once per frame.

    Args:
        ocean (Ocean): Simulation to drive
        frames (int, optional): Frame count, None runs until the window closes
        interval (int, optional): Milliseconds between frames

    Returns:
        tuple: (fig, ax, animation)
    """
    if fig is None or ax is None:
        fig, ax = setup_figure_layout(ocean)
    if interval is None:
        interval = config.ANIMATION_INTERVAL

    artists = create_letter_artists(ax, ocean.render_state())

    def update(frame):
        ocean.pump()
        ocean.step()
        return update_letter_artists(ax, artists, ocean.render_state())

    anim = FuncAnimation(fig, update, frames=frames, interval=interval,
                         blit=False, cache_frame_data=False)
    return fig, ax, anim
