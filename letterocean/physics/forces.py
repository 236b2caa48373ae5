"""
Force engine module for Letter Ocean.

Per-letter force pass over a tick's spatial index: short-range repulsion
with collision spin, medium-range attraction, optional spin coupling and a
constant pull toward the ocean's center. Also hosts the swim steering that
drives recruited letters toward their word targets.

Pair tests compare squared distances; a square root is only taken for a
pair that is going to contribute a force.
"""

import math

import numpy as np

from .. import config


def repulsion_force(position, other_position, strength=None):
    """
    Repulsion on a letter at ``position`` from a neighbour at ``other_position``.

    Magnitude is ``strength / distance`` along the outward normal. Returns
    None for coincident positions, where the normal is undefined.
    """
    if strength is None:
        strength = config.REPULSION_STRENGTH
    dx = float(position[0]) - float(other_position[0])
    dy = float(position[1]) - float(other_position[1])
    d_sq = dx * dx + dy * dy
    if d_sq == 0.0:
        return None
    # (dx/d) * (strength/d)
    scale = strength / d_sq
    return np.array([dx * scale, dy * scale])


def collision_torque(letter, other, nx, ny):
    """
    Spin torque on ``letter`` from a contact with ``other``.

    Args:
        letter, other (Letter): The two letters in contact
        nx, ny (float): Unit normal pointing from ``other`` to ``letter``

    Returns:
        float: Torque, or 0.0 when the relative speed is below threshold
    """
    rvx = float(letter.velocity[0] - other.velocity[0])
    rvy = float(letter.velocity[1] - other.velocity[1])
    impact_speed = math.hypot(rvx, rvy)
    if impact_speed <= config.COLLISION_SPEED_THRESHOLD:
        return 0.0

    # Relative velocity along the contact tangent (-ny, nx): the glancing part
    tangent_speed = rvx * -ny + rvy * nx
    glancing = tangent_speed * impact_speed * config.COLLISION_SPIN_FACTOR
    exchange = ((other.angular_velocity - letter.angular_velocity)
                * impact_speed * config.SPIN_EXCHANGE_FACTOR)
    return glancing + exchange


class ForceEngine:
    """Accumulates neighbour forces and torques into letters for one tick."""

    def __init__(self):
        self.pairs_tested = 0

    def query_radius(self):
        return max(config.REPULSION_RADIUS, config.ATTRACTION_MAX, config.SPIN_COUPLING_RADIUS)

    def apply(self, letter, index, center):
        """
        Accumulate every ambient force on ``letter``.

        Args:
            letter (Letter): Letter receiving forces
            index (SpatialIndex): This tick's index; read only
            center (array-like): Centering pull target
        """
        if not letter.ambient:
            return

        px, py = float(letter.position[0]), float(letter.position[1])
        neighbours = index.query_radius(px, py, self.query_radius())

        repulsion_sq = config.REPULSION_RADIUS ** 2
        attraction_min_sq = config.ATTRACTION_MIN ** 2
        attraction_max_sq = config.ATTRACTION_MAX ** 2
        coupling_sq = config.SPIN_COUPLING_RADIUS ** 2

        rep_x = rep_y = 0.0
        att_x = att_y = 0.0
        att_count = 0
        torque = 0.0
        spin_sum = 0.0
        spin_weight = 0.0

        for other in neighbours:
            if other is letter or not other.ambient:
                continue
            self.pairs_tested += 1

            dx = px - float(other.position[0])
            dy = py - float(other.position[1])
            d_sq = dx * dx + dy * dy
            if d_sq == 0.0:
                continue

            if d_sq < repulsion_sq:
                d = math.sqrt(d_sq)
                nx, ny = dx / d, dy / d
                magnitude = config.REPULSION_STRENGTH / d
                rep_x += nx * magnitude
                rep_y += ny * magnitude
                torque += collision_torque(letter, other, nx, ny)

            if attraction_min_sq < d_sq < attraction_max_sq:
                d = math.sqrt(d_sq)
                att_x -= dx / d
                att_y -= dy / d
                att_count += 1

            if d_sq < coupling_sq:
                weight = 1.0 / (d_sq + 1.0)
                spin_sum += (other.angular_velocity - letter.angular_velocity) * weight
                spin_weight += weight

        if rep_x or rep_y:
            letter.apply_force((rep_x, rep_y))
        if torque:
            letter.apply_torque(torque)
        if att_count:
            scale = config.ATTRACTION_STRENGTH / att_count
            letter.apply_force((att_x * scale, att_y * scale))
        if spin_weight > 0.0:
            letter.apply_torque(spin_sum / spin_weight * config.SPIN_COUPLING_STRENGTH)

        self.pull_to_center(letter, center)

    def pull_to_center(self, letter, center):
        """Constant-magnitude pull toward ``center``; nothing at zero distance."""
        if not letter.ambient:
            return
        dx = float(center[0]) - float(letter.position[0])
        dy = float(center[1]) - float(letter.position[1])
        d = math.hypot(dx, dy)
        if d == 0.0:
            return
        scale = config.CENTER_PULL_STRENGTH / d
        letter.apply_force((dx * scale, dy * scale))


def swim(letter, orientation=None):
    """
    Steer a recruited letter toward its target and align it with its word.

    Desired speed is ``max_speed * SWIM_SPEED_FACTOR``, scaled down linearly
    inside ``ARRIVAL_RADIUS`` of the target. The steering force is the
    difference between desired and current velocity, limited to
    ``max_force * SWIM_FORCE_FACTOR``. With an ``orientation``, a corrective
    torque turns the glyph toward it and the spin is damped toward zero.
    """
    if (not letter.recruited or letter.dragging or letter.launched
            or letter.target_position is None):
        return

    desired = np.asarray(letter.target_position, dtype=float) - letter.position
    d = float(np.linalg.norm(desired))
    if d > 0.0:
        speed = letter.max_speed * config.SWIM_SPEED_FACTOR
        if d < config.ARRIVAL_RADIUS:
            speed *= d / config.ARRIVAL_RADIUS
        desired *= speed / d

    steer = desired - letter.velocity
    limit = letter.max_force * config.SWIM_FORCE_FACTOR
    steer_mag = float(np.linalg.norm(steer))
    if steer_mag > limit:
        steer *= limit / steer_mag
    letter.apply_force(steer)

    if orientation is not None:
        letter.apply_torque(angle_difference(orientation, letter.angle) * config.ALIGNMENT_STRENGTH)
        letter.angular_velocity *= config.ALIGNMENT_SPIN_DAMPING


def angle_difference(target, angle):
    """Signed difference ``target - angle`` wrapped into [-pi, pi)."""
    return (target - angle + math.pi) % (2 * math.pi) - math.pi
