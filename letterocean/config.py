"""
Configuration module for Letter Ocean.

This module contains the tuning constants used throughout the simulation:
world size, letter physics, force ranges, word paths, the spatial index,
drag/throw handling and the throttled word feed. Values are read as
``config.NAME`` at call time, so a caller can override them before (or
between) ticks.
"""

# World
DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 800
DEFAULT_NUM_LETTERS = 200
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Letter physics
LETTER_SIZE = 24            # glyph size; radius = size / 2 for torque
LETTER_MASS = 1.0
MAX_SPEED = 3.0             # soft limit, see SPEED_DECEL_FACTOR
MAX_FORCE = 0.2
SPEED_DECEL_FACTOR = 0.15   # fraction of the excess speed removed per tick
INITIAL_SPEED_JITTER = 0.5  # initial velocity components in [-j, j]
INITIAL_SPIN_JITTER = 0.1   # initial angular velocity in [-j, j]
SPIN_NOISE = 0.003          # random rotational perturbation for free letters

# Pairwise forces
REPULSION_RADIUS = 20
REPULSION_STRENGTH = 4.0    # summed over neighbours, not averaged
ATTRACTION_MIN = 50
ATTRACTION_MAX = 150
ATTRACTION_STRENGTH = 0.05  # averaged over contributing neighbours
CENTER_PULL_STRENGTH = 0.02

# Collision spin
COLLISION_SPEED_THRESHOLD = 0.5  # minimum relative speed to create spin
COLLISION_SPIN_FACTOR = 0.08
SPIN_EXCHANGE_FACTOR = 0.05
SPIN_COUPLING_RADIUS = 0         # 0 disables neighbour spin coupling
SPIN_COUPLING_STRENGTH = 0.008

# Swim steering (recruited letters)
SWIM_SPEED_FACTOR = 2.0     # desired speed = MAX_SPEED * factor
SWIM_FORCE_FACTOR = 4.0     # steering limit = MAX_FORCE * factor
ARRIVAL_RADIUS = 100        # slow down inside this distance of the target
ALIGNMENT_STRENGTH = 0.15
ALIGNMENT_SPIN_DAMPING = 0.9

# Word paths
PATH_SPEED = 0.0005         # path progress per tick
PATH_MAX_DISTANCE = 1000
PATH_CURVE = 1.5            # half-turns swept over a full path (1.5 -> 270 degrees)
LETTER_SPACING = 30
FORMING_PROGRESS = 0.02     # progress after which a word counts as traveling
DISSOLVE_PROGRESS = 0.2
DISSOLVE_VELOCITY_DAMPING = 0.3
WORD_ROTATION_SPEED = 0.001  # spawn direction advance per tick

# Spatial index
QUADTREE_CAPACITY = 4
QUADTREE_MAX_DEPTH = 10
INDEX_PADDING = 0.05        # fraction of the world size added around the root

# Drag and throw
GRAB_RADIUS = 30
THROW_HISTORY = 5           # drag positions used to infer the throw velocity
THROW_SCALE = 1.0
LAUNCH_TICKS = 30           # ticks a thrown letter ignores ambient forces

# Render handoff
FREE_ALPHA = 0.8
RECRUITED_ALPHA = 1.0

# Word feed (seconds)
MIN_WORD_LENGTH = 2         # tokens with this many letters or fewer are dropped
WORD_DELAY_START = 0.35
WORD_DELAY_MIN = 0.15
WORD_ACCELERATION = 0.85
PAUSE_DELAY = 0.5           # after , ; :
BURST_COOLDOWN = 1.5        # after . ! ?
IDLE_POLL = 0.1
MAX_BUFFER_SIZE = 500       # high water: producer pauses above this
RESUME_BUFFER_SIZE = 250    # low water: producer resumes below this
BACKPRESSURE_POLL = 2.0

# Animation
ANIMATION_INTERVAL = 16     # milliseconds between frames
FONT_FAMILY = "monospace"
BACKGROUND_COLOR = "white"
TEXT_COLOR = "black"
WINDOW_TITLE = "Letter Ocean"
