import math

import numpy as np
import pytest

from letterocean import config
from letterocean.physics.forces import (
    ForceEngine, angle_difference, collision_torque, repulsion_force, swim,
)
from letterocean.physics.letter import Letter
from letterocean.physics.spatial_index import Rect, SpatialIndex, compute_index_bounds

WORLD = Rect(0, 0, 1000, 1000)


def place(glyph, x, y, velocity=(0.0, 0.0)):
    return Letter(glyph, x, y, velocity=velocity, rng=np.random.default_rng(0))


def index_for(letters):
    positions = np.array([letter.position for letter in letters])
    return SpatialIndex.build(letters, compute_index_bounds(positions, WORLD))


def test_repulsion_points_away_and_weakens_with_distance():
    origin = np.array([500.0, 500.0])
    direction = np.array([0.6, 0.8])
    magnitudes = []
    for distance in [1.0, 4.0, 9.0, 15.0, 19.0]:
        other = origin + direction * distance
        on_letter = repulsion_force(origin, other)
        on_other = repulsion_force(other, origin)

        assert np.dot(on_letter, origin - other) > 0
        np.testing.assert_allclose(on_letter / np.linalg.norm(on_letter), -direction)
        np.testing.assert_allclose(on_other, -on_letter)
        magnitudes.append(np.linalg.norm(on_letter))
        assert magnitudes[-1] == pytest.approx(config.REPULSION_STRENGTH / distance)

    assert all(a > b for a, b in zip(magnitudes, magnitudes[1:]))


def test_repulsion_of_coincident_points_is_skipped():
    assert repulsion_force((3.0, 4.0), (3.0, 4.0)) is None


def test_coincident_letters_do_not_raise_or_push():
    a = place('A', 500, 500)
    b = place('B', 500, 500)
    engine = ForceEngine()
    engine.apply(a, index_for([a, b]), center=(500, 500))

    np.testing.assert_allclose(a.acceleration, [0.0, 0.0])
    assert a.angular_acceleration == 0.0


def test_repulsion_is_summed_over_neighbours(monkeypatch):
    monkeypatch.setattr(config, 'REPULSION_STRENGTH', 4.0)
    letter = place('A', 500, 500)
    right = place('B', 510, 500)
    below = place('C', 500, 510)
    ForceEngine().apply(letter, index_for([letter, right, below]), center=(500, 500))

    np.testing.assert_allclose(letter.acceleration, [-0.4, -0.4])


def test_attraction_is_averaged_over_contributing_neighbours():
    letter = place('A', 500, 500)
    right = place('B', 600, 500)
    below = place('C', 500, 600)
    far = place('D', 500, 300)  # outside ATTRACTION_MAX
    ForceEngine().apply(letter, index_for([letter, right, below, far]), center=(500, 500))

    strength = config.ATTRACTION_STRENGTH
    np.testing.assert_allclose(letter.acceleration, [strength / 2, strength / 2])


def test_attraction_range_is_exclusive():
    letter = place('A', 500, 500)
    at_min = place('B', 500 + config.ATTRACTION_MIN, 500)
    ForceEngine().apply(letter, index_for([letter, at_min]), center=(500, 500))

    np.testing.assert_allclose(letter.acceleration, [0.0, 0.0])


def test_glancing_collision_creates_spin():
    a = place('A', 500, 500, velocity=(0.0, 1.0))
    b = place('B', 510, 500, velocity=(0.0, -1.0))
    a.angular_velocity = b.angular_velocity = 0.0
    ForceEngine().apply(a, index_for([a, b]), center=(500, 500))

    # normal (-1, 0), tangent (0, -1), relative velocity (0, 2)
    expected_torque = -2.0 * 2.0 * config.COLLISION_SPIN_FACTOR
    assert a.angular_acceleration == pytest.approx(expected_torque / a.moment_of_inertia)


def test_slow_contact_creates_no_spin():
    a = place('A', 500, 500, velocity=(0.0, 0.1))
    b = place('B', 510, 500, velocity=(0.0, -0.1))
    a.angular_velocity = b.angular_velocity = 0.0
    ForceEngine().apply(a, index_for([a, b]), center=(500, 500))

    assert a.angular_acceleration == 0.0


def test_spin_exchange_pulls_toward_neighbour_spin():
    a = place('A', 500, 500, velocity=(1.0, 0.0))
    b = place('B', 510, 500, velocity=(-1.0, 0.0))
    a.angular_velocity = 0.0
    b.angular_velocity = 0.2

    # Head-on: no tangential part, only the exchange term
    torque = collision_torque(a, b, -1.0, 0.0)
    assert torque == pytest.approx(0.2 * 2.0 * config.SPIN_EXCHANGE_FACTOR)


def test_spin_coupling_when_enabled(monkeypatch):
    monkeypatch.setattr(config, 'SPIN_COUPLING_RADIUS', 40)
    a = place('A', 500, 500)
    b = place('B', 530, 500)
    a.angular_velocity = 0.0
    b.angular_velocity = 0.5
    ForceEngine().apply(a, index_for([a, b]), center=(500, 500))

    expected = 0.5 * config.SPIN_COUPLING_STRENGTH / a.moment_of_inertia
    assert a.angular_acceleration == pytest.approx(expected)


def test_center_pull_has_constant_magnitude():
    engine = ForceEngine()
    for distance in [1.0, 50.0, 900.0]:
        letter = place('A', 100, 100)
        engine.pull_to_center(letter, (100 + distance, 100))
        np.testing.assert_allclose(letter.acceleration, [config.CENTER_PULL_STRENGTH, 0.0])


def test_non_ambient_letters_are_skipped_both_ways():
    a = place('A', 500, 500)
    b = place('B', 505, 500)
    b.dragging = True
    index = index_for([a, b])
    engine = ForceEngine()
    engine.apply(a, index, center=(500, 500))
    engine.apply(b, index, center=(0, 0))

    np.testing.assert_allclose(a.acceleration, [0.0, 0.0])
    np.testing.assert_allclose(b.acceleration, [0.0, 0.0])


def test_swim_steers_toward_target_with_limited_force():
    letter = place('A', 0, 0)
    letter.recruited = True
    letter.target_position = np.array([500.0, 0.0])
    swim(letter)

    limit = config.MAX_FORCE * config.SWIM_FORCE_FACTOR
    assert letter.acceleration[0] == pytest.approx(limit)
    assert letter.acceleration[1] == pytest.approx(0.0)


def test_swim_slows_inside_arrival_radius():
    letter = place('A', 0, 0)
    letter.recruited = True
    letter.target_position = np.array([10.0, 0.0])
    swim(letter)

    desired_speed = config.MAX_SPEED * config.SWIM_SPEED_FACTOR * 10.0 / config.ARRIVAL_RADIUS
    assert letter.acceleration[0] == pytest.approx(desired_speed)


def test_swim_aligns_orientation_and_damps_spin():
    letter = place('A', 0, 0)
    letter.recruited = True
    letter.target_position = np.array([0.0, 0.0])
    letter.angle = 0.5
    letter.angular_velocity = 0.1
    swim(letter, orientation=0.0)

    assert letter.angular_acceleration < 0
    assert letter.angular_velocity == pytest.approx(0.1 * config.ALIGNMENT_SPIN_DAMPING)


def test_swim_ignores_free_letters():
    letter = place('A', 0, 0)
    letter.target_position = np.array([100.0, 0.0])
    swim(letter)

    np.testing.assert_allclose(letter.acceleration, [0.0, 0.0])


def test_swim_leaves_thrown_letters_to_their_flight():
    letter = place('A', 0, 0)
    letter.recruited = True
    letter.target_position = np.array([100.0, 0.0])
    letter.angular_velocity = 0.1
    letter.launch((0.0, 5.0))
    swim(letter, orientation=1.0)

    np.testing.assert_allclose(letter.acceleration, [0.0, 0.0])
    assert letter.angular_acceleration == 0.0
    assert letter.angular_velocity == pytest.approx(0.1)


def test_angle_difference_wraps():
    assert angle_difference(math.pi - 0.1, -math.pi + 0.1) == pytest.approx(-0.2)
    assert angle_difference(0.3, 0.1) == pytest.approx(0.2)
