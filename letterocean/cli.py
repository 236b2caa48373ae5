"""
Command line entry point for Letter Ocean.

Usage:
    letterocean
    letterocean --words "the ocean keeps every letter it is given."
    some-generator | letterocean --stdin
    letterocean --headless --frames 600 --words "hello world"
"""

import argparse
import logging
import sys

from . import config
from .core.ocean import Ocean
from .core.word_feed import GenerationWorker, WordFeed

logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Letter Ocean - letters that swim together into words',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  letterocean                                  # Idle ocean, drag letters around
  letterocean --words "waves carry words."     # Queue words for the ocean
  cat story.txt | letterocean --stdin          # Stream text into the ocean
  letterocean --headless --frames 900 --words "hello there."
        """
    )
    parser.add_argument('--letters', '-n', type=int, default=config.DEFAULT_NUM_LETTERS,
                        help=f'Number of letters in the ocean (default: {config.DEFAULT_NUM_LETTERS})')
    parser.add_argument('--width', type=int, default=config.DEFAULT_WIDTH,
                        help=f'World width (default: {config.DEFAULT_WIDTH})')
    parser.add_argument('--height', type=int, default=config.DEFAULT_HEIGHT,
                        help=f'World height (default: {config.DEFAULT_HEIGHT})')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible ocean')
    parser.add_argument('--words', '-w', type=str, default=None,
                        help='Text whose words are queued for formation')
    parser.add_argument('--stdin', action='store_true',
                        help='Stream standard input into the word feed')
    parser.add_argument('--frames', '-f', type=int, default=None,
                        help='Number of frames to run (default: until closed; 600 headless)')
    parser.add_argument('--headless', action='store_true',
                        help='Run without a window and log a summary')
    parser.add_argument('--follow-pointer', action='store_true',
                        help='Move the attractor with the mouse pointer')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args(argv)


def run_headless(ocean, frames):
    """Step ``ocean`` for ``frames`` frames on a simulated frame clock."""
    frame_seconds = config.ANIMATION_INTERVAL / 1000.0
    words_formed = 0
    for frame in range(frames):
        words_formed += len(ocean.pump(frame * frame_seconds))
        ocean.step()
    recruited = sum(1 for letter in ocean.letters if letter.recruited)
    logger.info("Ran %d ticks: %d words formed, %d active, %d letters recruited, %d pairs tested",
                ocean.tick, words_formed, len(ocean.formations), recruited,
                ocean.forces.pairs_tested)
    return words_formed


def main(argv=None):
    """Build an ocean from the command line and run it."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    feed = WordFeed()
    if args.words:
        feed.push_text(args.words)

    worker = None
    if args.stdin:
        worker = GenerationWorker(feed, sys.stdin)
        worker.start()

    if args.headless:
        frames = args.frames if args.frames is not None else 600
        ocean = Ocean(args.width, args.height, num_letters=args.letters, seed=args.seed, feed=feed)
        run_headless(ocean, frames)
    else:
        # Imported lazily so headless runs never need a display backend
        import matplotlib.pyplot as plt
        from .ui.event_manager import EventManager
        from .visualization.renderer import animate, setup_figure_layout

        ocean = Ocean(args.width, args.height, num_letters=args.letters, seed=args.seed, feed=feed)
        fig, ax = setup_figure_layout(ocean)
        events = EventManager(fig, ax, ocean, follow_pointer=args.follow_pointer)
        events.connect_events()
        fig, ax, anim = animate(ocean, fig, ax, frames=args.frames)
        plt.show()

    if worker is not None:
        worker.stop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
