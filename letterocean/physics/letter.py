"""
Letter module for Letter Ocean.

A letter is one glyph-shaped particle: linear and rotational state, the
flags that suspend ambient physics, and the recruitment fields a word
formation writes while it owns the letter's targeting.
"""

import math

import numpy as np

from .. import config


class Letter:
    """A single animated glyph with physics state."""

    def __init__(self, glyph, x, y, velocity=None, angle=0.0, angular_velocity=0.0,
                 rng=None, letter_id=None):
        """
        Initialize a letter.

        Args:
            glyph (str): Single character, fixed for the letter's lifetime
            x, y (float): Initial position
            velocity (array-like, optional): Initial velocity, defaults to rest
            angle (float): Initial orientation in radians
            angular_velocity (float): Initial spin in radians per tick
            rng (np.random.Generator, optional): Source of the rotational noise
            letter_id (int, optional): Stable identifier assigned by the ocean
        """
        if not isinstance(glyph, str) or len(glyph) != 1:
            raise ValueError(f"Letter glyph must be a single character, got {glyph!r}")
        self._glyph = glyph
        self.id = letter_id
        self.rng = rng if rng is not None else np.random.default_rng()

        # Linear motion
        self.position = np.array([x, y], dtype=float)
        self.velocity = (np.zeros(2) if velocity is None
                         else np.array(velocity, dtype=float))
        self.acceleration = np.zeros(2)
        self.mass = config.LETTER_MASS
        self.max_speed = config.MAX_SPEED
        self.max_force = config.MAX_FORCE

        # Rotational motion
        self.angle = float(angle)
        self.angular_velocity = float(angular_velocity)
        self.angular_acceleration = 0.0
        self.radius = config.LETTER_SIZE / 2
        self.moment_of_inertia = self.mass * self.radius * self.radius

        # Word recruitment
        self.recruited = False
        self.word_id = None
        self.target_position = None
        self.target_index = None

        # Ambient physics overrides
        self.dragging = False
        self.launch_ticks = 0

    @property
    def glyph(self):
        return self._glyph

    @property
    def launched(self):
        return self.launch_ticks > 0

    @property
    def ambient(self):
        """True while repulsion, attraction and the centering pull apply."""
        return not (self.dragging or self.launched)

    @property
    def speed(self):
        return float(math.hypot(self.velocity[0], self.velocity[1]))

    def __repr__(self):
        return (f"Letter({self._glyph!r}, x={self.position[0]:.1f}, y={self.position[1]:.1f}, "
                f"recruited={self.recruited})")

    def apply_force(self, force):
        """Accumulate ``force / mass`` into the acceleration."""
        self.acceleration += np.asarray(force, dtype=float) / self.mass

    def apply_torque(self, torque):
        """Accumulate ``torque / moment_of_inertia`` into the angular acceleration."""
        self.angular_acceleration += torque / self.moment_of_inertia

    def integrate(self):
        """
        Advance the letter by one tick.

        A dragged letter is held in place by the pointer: its velocity and
        accumulated inputs are discarded. Otherwise velocity integrates the
        acceleration, the soft speed limit bleeds off a fraction of any
        excess over ``max_speed`` (skipped while launched), and position
        integrates velocity. Spin integrates the same way, with a small
        random perturbation for letters that are not recruited.
        """
        if self.dragging:
            self.velocity[:] = 0.0
            self.acceleration[:] = 0.0
            self.angular_acceleration = 0.0
            return

        self.velocity += self.acceleration
        if not self.launched:
            self._soft_limit_speed()
        self.position += self.velocity
        self.acceleration[:] = 0.0

        self.angular_velocity += self.angular_acceleration
        if not self.recruited:
            self.angular_velocity += self.rng.uniform(-config.SPIN_NOISE, config.SPIN_NOISE)
        self.angle += self.angular_velocity
        self.angular_acceleration = 0.0

        if self.launch_ticks > 0:
            self.launch_ticks -= 1

    def _soft_limit_speed(self):
        speed = self.speed
        if speed <= self.max_speed:
            return
        new_speed = speed - (speed - self.max_speed) * config.SPEED_DECEL_FACTOR
        self.velocity *= new_speed / speed

    def wrap(self, world):
        """Re-enter a free letter on the opposite edge of ``world`` (a Rect)."""
        x, y = self.position
        if x < world.x0:
            self.position[0] = world.x1
        elif x > world.x1:
            self.position[0] = world.x0
        if y < world.y0:
            self.position[1] = world.y1
        elif y > world.y1:
            self.position[1] = world.y0

    def release(self, damping=1.0):
        """Clear recruitment state and scale the velocity by ``damping``."""
        self.recruited = False
        self.word_id = None
        self.target_position = None
        self.target_index = None
        self.velocity *= damping

    def launch(self, velocity, ticks=None):
        """Fling the letter with ``velocity``; ambient forces pause for ``ticks`` ticks."""
        if ticks is None:
            ticks = config.LAUNCH_TICKS
        self.velocity = np.array(velocity, dtype=float)
        self.launch_ticks = int(ticks)
