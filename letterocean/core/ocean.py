"""
Ocean module for Letter Ocean.

The ocean is the simulation context: it owns the letters, the active word
formations, the word-id counter, the rotating spawn direction, the pointer
attractor, the drag state and the word feed. One ``step()`` is one frame:

1. rebuild the spatial index from current positions
2. advance every active formation, dissolve and drop finished ones
3. force pass for every letter, then swim steering for recruited letters
4. integrate every letter
5. wrap free letters back into the world

``render_state()`` is the handoff to whatever draws the letters.
"""

import logging
import math
from collections import deque
from typing import NamedTuple

import numpy as np

from .. import config
from ..physics.forces import ForceEngine, swim
from ..physics.letter import Letter
from ..physics.spatial_index import Rect, SpatialIndex, compute_index_bounds
from .word_feed import WordFeed, WordScheduler
from .word_formation import WordFormation

logger = logging.getLogger(__name__)


class LetterState(NamedTuple):
    """Per-letter render handoff."""

    x: float
    y: float
    angle: float
    glyph: str
    alpha: float


class Ocean:
    """Simulation context for one ocean of letters."""

    def __init__(self, width=None, height=None, num_letters=None, seed=None,
                 alphabet=None, feed=None, clock=None):
        """
        Args:
            width, height (float, optional): World size, defaults to config
            num_letters (int, optional): Random letters to seed, defaults to config
            seed (int, optional): Seed for positions, jitter and spin noise
            alphabet (str, optional): Glyphs to draw from, defaults to config
            feed (WordFeed, optional): Word queue drained by ``pump``
            clock (callable, optional): Time source for the word scheduler
        """
        self.width = config.DEFAULT_WIDTH if width is None else width
        self.height = config.DEFAULT_HEIGHT if height is None else height
        self.world = Rect(0.0, 0.0, float(self.width), float(self.height))
        self.alphabet = (config.ALPHABET if alphabet is None else alphabet).upper()
        self.rng = np.random.default_rng(seed)

        self.letters = []
        self.formations = []
        self.center = np.array([self.width / 2, self.height / 2])
        self.spawn_direction = 0.0
        self.tick = 0
        self.forces = ForceEngine()

        self._next_word_id = 0
        self._next_letter_id = 0
        self._dragged = None
        self._drag_trail = deque(maxlen=config.THROW_HISTORY + 1)

        self.feed = feed if feed is not None else WordFeed()
        if clock is None:
            self.scheduler = WordScheduler(self.feed)
        else:
            self.scheduler = WordScheduler(self.feed, clock=clock)

        if num_letters is None:
            num_letters = config.DEFAULT_NUM_LETTERS
        if num_letters:
            self.add_letters(num_letters)
            logger.info("Ocean initialized with %d letters", len(self.letters))

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_letter(self, glyph, x, y, velocity=None, angle=None, angular_velocity=None):
        """Place a single letter; unspecified motion is randomized."""
        if velocity is None:
            velocity = self.rng.uniform(-config.INITIAL_SPEED_JITTER, config.INITIAL_SPEED_JITTER, 2)
        if angle is None:
            angle = self.rng.uniform(0.0, 2 * math.pi)
        if angular_velocity is None:
            angular_velocity = self.rng.uniform(-config.INITIAL_SPIN_JITTER, config.INITIAL_SPIN_JITTER)
        letter = Letter(glyph.upper(), x, y, velocity=velocity, angle=angle,
                        angular_velocity=angular_velocity, rng=self.rng,
                        letter_id=self._next_letter_id)
        self._next_letter_id += 1
        self.letters.append(letter)
        return letter

    def add_letters(self, count=50):
        """Add ``count`` random glyphs at random positions."""
        glyphs = self.rng.choice(list(self.alphabet), size=count)
        xs = self.rng.uniform(0.0, self.width, count)
        ys = self.rng.uniform(0.0, self.height, count)
        added = [self.add_letter(str(g), x, y) for g, x, y in zip(glyphs, xs, ys)]
        logger.debug("Added %d letters, total %d", count, len(self.letters))
        return added

    # ------------------------------------------------------------------
    # Word recruitment
    # ------------------------------------------------------------------

    def normalize_word(self, word):
        """Upper-case ``word`` and keep only glyphs this ocean can hold."""
        return "".join(ch for ch in word.upper() if ch in self.alphabet)

    def form_word(self, word, direction=None):
        """
        Start a new formation for ``word`` anchored at the current center.

        Each call creates an independent formation. Letters already owned by
        another formation are never taken; missing glyphs leave gaps.

        Args:
            word (str): Word to spell
            direction (float, optional): Spawn direction in radians,
                defaults to the ocean's rotating spawn direction
        """
        text = self.normalize_word(word)
        if not text:
            logger.warning("Ignoring word %r: no glyphs from the ocean's alphabet", word)
            return

        if direction is None:
            direction = self.spawn_direction
        formation = WordFormation(self._next_word_id, text, self.center, direction)
        self._next_word_id += 1

        logger.info("Recruiting letters for word %r", text)
        formation.recruit(self.letters)
        formation.update_targets()
        self.formations.append(formation)
        logger.info("Word formation %d started with %d/%d letters",
                    formation.id, len(formation.letters), len(text))

    def formation_for(self, letter):
        """Active formation owning ``letter``, looked up by its word id."""
        if letter.word_id is None:
            return None
        for formation in self.formations:
            if formation.id == letter.word_id:
                return formation
        return None

    def pump(self, now=None):
        """Hand any words the scheduler has released to ``form_word``."""
        words = self.scheduler.poll(now)
        for token in words:
            self.form_word(token)
        return words

    # ------------------------------------------------------------------
    # Pointer and drag
    # ------------------------------------------------------------------

    def set_center(self, x, y):
        """Move the centering-pull target (pointer attractor)."""
        self.center = np.array([x, y], dtype=float)

    def build_index(self):
        positions = np.array([letter.position for letter in self.letters]).reshape(-1, 2)
        bounds = compute_index_bounds(positions, self.world)
        return SpatialIndex.build(self.letters, bounds)

    def grab(self, x, y):
        """
        Start dragging the letter nearest to ``(x, y)`` within ``GRAB_RADIUS``.

        Returns:
            Letter | None: The grabbed letter
        """
        self.release()
        # Letters have moved since the last tick's index was built
        index = self.build_index()
        r_sq = config.GRAB_RADIUS ** 2
        best, best_sq = None, r_sq
        for letter in index.query_radius(x, y, config.GRAB_RADIUS):
            d_sq = float((letter.position[0] - x) ** 2 + (letter.position[1] - y) ** 2)
            if d_sq <= best_sq:
                best, best_sq = letter, d_sq
        if best is None:
            return None

        best.dragging = True
        best.velocity[:] = 0.0
        best.acceleration[:] = 0.0
        self._dragged = best
        self._drag_trail.clear()
        self._drag_trail.append(best.position.copy())
        return best

    def drag_to(self, x, y):
        """Move the dragged letter, clamped to the world."""
        letter = self._dragged
        if letter is None:
            return
        letter.position[0] = min(max(x, self.world.x0), self.world.x1)
        letter.position[1] = min(max(y, self.world.y0), self.world.y1)

    def release(self):
        """
        Drop the dragged letter and throw it with its recent drag velocity.

        The trail holds one position per tick, so the throw is the mean
        displacement over the last ``THROW_HISTORY`` ticks and a pointer
        held still before release throws nothing.

        Returns:
            Letter | None: The released letter
        """
        letter, self._dragged = self._dragged, None
        if letter is None:
            return None
        letter.dragging = False
        if len(self._drag_trail) >= 2:
            trail = np.array(self._drag_trail)
            velocity = (trail[-1] - trail[0]) / (len(trail) - 1) * config.THROW_SCALE
            if np.any(velocity):
                letter.launch(velocity)
        self._drag_trail.clear()
        return letter

    @property
    def dragged(self):
        return self._dragged

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def update_formations(self):
        """Advance active formations; dissolve and drop the finished ones."""
        active = []
        for formation in self.formations:
            formation.advance()
            formation.update_targets()
            if formation.should_dissolve():
                formation.dissolve()
            if formation.dissolved:
                logger.info("Word %r completed and removed", formation.text)
                continue
            active.append(formation)
        self.formations = active

    def step(self):
        """Advance the whole ocean by one tick."""
        self.spawn_direction += config.WORD_ROTATION_SPEED
        index = self.build_index()

        self.update_formations()

        for letter in self.letters:
            self.forces.apply(letter, index, self.center)
            if letter.recruited:
                formation = self.formation_for(letter)
                swim(letter, formation.orientation if formation is not None else None)

        for letter in self.letters:
            letter.integrate()
            if not letter.recruited and not letter.dragging:
                letter.wrap(self.world)

        if self._dragged is not None:
            self._drag_trail.append(self._dragged.position.copy())

        self.tick += 1

    def run(self, ticks):
        for _ in range(ticks):
            self.step()

    def render_state(self):
        """One ``LetterState`` per letter, in insertion order."""
        return [
            LetterState(
                float(letter.position[0]),
                float(letter.position[1]),
                float(letter.angle),
                letter.glyph,
                config.RECRUITED_ALPHA if letter.recruited else config.FREE_ALPHA,
            )
            for letter in self.letters
        ]
