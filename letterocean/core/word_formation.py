"""
Word formation module for Letter Ocean.

A word formation claims free letters for the slots of one word and moves
their targets along a curved path out of the ocean's center. It holds
references to the letters it recruited but never owns them: on
dissolution it hands every letter back to ambient physics.
"""

import logging
import math
from enum import Enum

import numpy as np

from .. import config

logger = logging.getLogger(__name__)


class FormationState(Enum):
    FORMING = "forming"
    TRAVELING = "traveling"
    DISSOLVED = "dissolved"


def path_point(progress, origin, direction, max_distance=None, curve=None):
    """
    Position and heading on a word path.

    Radius ``sin(t*pi) * max_distance`` and angle ``direction + t*pi*curve``,
    both in polar form around ``origin``. The heading is the angle of the
    path's instantaneous velocity, not the radial angle.

    Args:
        progress (float): Path parameter t >= 0
        origin (array-like): Path start
        direction (float): Initial heading in radians

    Returns:
        tuple: (position as np.ndarray, heading in radians)
    """
    if max_distance is None:
        max_distance = config.PATH_MAX_DISTANCE
    if curve is None:
        curve = config.PATH_CURVE

    radius = math.sin(progress * math.pi) * max_distance
    theta = direction + progress * math.pi * curve
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    position = np.array([origin[0] + cos_t * radius, origin[1] + sin_t * radius])

    dr_dt = math.pi * math.cos(progress * math.pi) * max_distance
    r_dtheta_dt = radius * math.pi * curve
    vx = dr_dt * cos_t - r_dtheta_dt * sin_t
    vy = dr_dt * sin_t + r_dtheta_dt * cos_t
    return position, math.atan2(vy, vx)


class WordFormation:
    """One in-flight word and the letters recruited for it."""

    def __init__(self, word_id, text, origin, direction, path_speed=None):
        """
        Args:
            word_id (int): Identifier unique within the owning ocean
            text (str): Word to form; stored upper-case
            origin (array-like): Path start, fixed for the formation's life
            direction (float): Spawn direction in radians, fixed
            path_speed (float, optional): Progress per tick, defaults to config
        """
        self.id = word_id
        self.text = text.upper()
        self.origin = np.array(origin, dtype=float)
        self.direction = float(direction)
        self.path_speed = config.PATH_SPEED if path_speed is None else path_speed
        self.path_progress = 0.0
        self.position = self.origin.copy()
        self.orientation = self.direction
        self.letters = []
        self.dissolved = False

    def __repr__(self):
        return (f"WordFormation(id={self.id}, text={self.text!r}, "
                f"letters={len(self.letters)}/{len(self.text)}, state={self.state.value})")

    @property
    def state(self):
        if self.dissolved:
            return FormationState.DISSOLVED
        if self.path_progress < config.FORMING_PROGRESS:
            return FormationState.FORMING
        return FormationState.TRAVELING

    @property
    def missing(self):
        """Slot indices left without a letter."""
        filled = {letter.target_index for letter in self.letters}
        return [i for i in range(len(self.text)) if i not in filled]

    def recruit(self, candidates):
        """
        Claim the nearest free letter of the right glyph for every slot.

        Slots are filled in word order; each takes the non-recruited letter
        closest to the origin. A glyph with no free letter leaves its slot
        empty and the word forms with a gap.

        Args:
            candidates (iterable): Letters the formation may draw from

        Returns:
            int: Number of letters recruited
        """
        by_glyph = {}
        for letter in candidates:
            by_glyph.setdefault(letter.glyph, []).append(letter)

        for slot, glyph in enumerate(self.text):
            available = [letter for letter in by_glyph.get(glyph, ())
                         if not letter.recruited]
            if not available:
                logger.warning("No available letter %r for slot %d of %r", glyph, slot, self.text)
                continue

            letter = min(available, key=lambda l: float(np.sum((l.position - self.origin) ** 2)))
            letter.recruited = True
            letter.word_id = self.id
            letter.target_index = slot
            self.letters.append(letter)
            logger.debug("Recruited %r at slot %d for word %d", glyph, slot, self.id)

        return len(self.letters)

    def advance(self):
        """Move the formation one tick along its path."""
        if self.dissolved:
            return
        self.path_progress += self.path_speed
        self.position, self.orientation = path_point(self.path_progress, self.origin, self.direction)

    def slot_offset(self, slot):
        """Offset of ``slot`` from the word center before rotation."""
        return (slot - (len(self.text) - 1) / 2) * config.LETTER_SPACING

    def update_targets(self):
        """Lay the recruited letters out on the word's rotated baseline."""
        if self.dissolved:
            return
        cos_o, sin_o = math.cos(self.orientation), math.sin(self.orientation)
        for letter in self.letters:
            offset = self.slot_offset(letter.target_index)
            letter.target_position = self.position + np.array([offset * cos_o, offset * sin_o])

    def should_dissolve(self):
        return self.path_progress >= config.DISSOLVE_PROGRESS

    def dissolve(self):
        """Release every recruited letter back to ambient physics. Idempotent."""
        if self.dissolved:
            return
        for letter in self.letters:
            letter.release(damping=config.DISSOLVE_VELOCITY_DAMPING)
        self.dissolved = True
        logger.info("Dissolved word %r (id %d)", self.text, self.id)
