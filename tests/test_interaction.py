from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from letterocean.core.ocean import Ocean
from letterocean.ui.event_manager import EventManager
from letterocean.visualization.renderer import (
    animate, create_letter_artists, setup_figure_layout, update_letter_artists,
)


@pytest.fixture
def ocean():
    ocean = Ocean(width=400, height=300, num_letters=0, seed=1)
    ocean.add_letter('A', 100, 100, velocity=(0.0, 0.0), angle=0.0, angular_velocity=0.0)
    return ocean


@pytest.fixture
def figure(ocean):
    fig, ax = setup_figure_layout(ocean)
    yield fig, ax
    plt.close(fig)


def mouse(ax, x, y, button=1):
    return SimpleNamespace(inaxes=ax, xdata=x, ydata=y, button=button)


def test_axes_use_screen_coordinates(ocean, figure):
    _, ax = figure

    assert ax.get_xlim() == (0, 400)
    assert ax.get_ylim() == (300, 0)


def test_artists_follow_render_state(ocean, figure):
    _, ax = figure
    artists = create_letter_artists(ax, ocean.render_state())
    assert [artist.get_text() for artist in artists] == ['A']

    letter = ocean.letters[0]
    letter.position[:] = (150.0, 120.0)
    letter.angle = np.pi / 2
    update_letter_artists(ax, artists, ocean.render_state())

    assert artists[0].get_position() == pytest.approx((150.0, 120.0))
    assert artists[0].get_rotation() == pytest.approx(270.0)


def test_new_letters_get_artists(ocean, figure):
    _, ax = figure
    artists = create_letter_artists(ax, ocean.render_state())
    ocean.add_letter('B', 50, 50)
    update_letter_artists(ax, artists, ocean.render_state())

    assert [artist.get_text() for artist in artists] == ['A', 'B']


def test_animation_steps_ocean(ocean, figure):
    fig, ax = figure
    _, _, anim = animate(ocean, fig, ax, frames=3)
    anim._func(0)
    artists = anim._func(1)

    assert ocean.tick == 2
    assert [artist.get_text() for artist in artists] == ['A']


def test_press_drag_release_throws_letter(ocean, figure):
    fig, ax = figure
    events = EventManager(fig, ax, ocean)
    letter = ocean.letters[0]

    events._on_press(mouse(ax, 102, 101))
    assert ocean.dragged is letter

    for x in (110, 120):
        events.last_mouse_update = 0
        events._on_motion(mouse(ax, x, 100))
        ocean.step()
    np.testing.assert_allclose(letter.position, [120, 100])

    events._on_release(mouse(ax, 120, 100))
    assert ocean.dragged is None
    assert letter.launched


def test_press_on_open_water_moves_attractor(ocean, figure):
    fig, ax = figure
    events = EventManager(fig, ax, ocean)
    events._on_press(mouse(ax, 300, 250))

    np.testing.assert_allclose(ocean.center, [300, 250])
    assert ocean.dragged is None


def test_events_outside_axes_are_ignored(ocean, figure):
    fig, ax = figure
    events = EventManager(fig, ax, ocean)
    events._on_press(SimpleNamespace(inaxes=None, xdata=None, ydata=None, button=1))
    events._on_press(mouse(ax, 100, 100, button=3))

    assert ocean.dragged is None
    assert events.event_count == 0


def test_follow_pointer_moves_attractor(ocean, figure):
    fig, ax = figure
    events = EventManager(fig, ax, ocean, follow_pointer=True)
    events._on_motion(mouse(ax, 40, 60))

    np.testing.assert_allclose(ocean.center, [40, 60])


def test_connect_and_disconnect(ocean, figure):
    fig, ax = figure
    events = EventManager(fig, ax, ocean)
    events.connect_events()
    assert len(events.connected_handlers) == 3

    events.disconnect_events()
    assert events.connected_handlers == []
