"""
Word feed module for Letter Ocean.

Decoupled producer/consumer between a text source (typically a language
model streaming chunks) and the ocean:

- ``TokenAssembler`` turns streamed chunks into whitespace-complete words.
- ``WordFeed`` is the bounded queue between the two sides, with a
  high/low water pair for backpressure.
- ``WordScheduler`` drains the feed at a throttled cadence: accelerating
  delays inside a burst, a pause after clause punctuation, a cooldown after
  a sentence end.
- ``GenerationWorker`` is the producer thread.
"""

import logging
import re
import threading
import time
from collections import deque

from .. import config

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"(\s+)")
SENTENCE_END = (".", "!", "?")
CLAUSE_END = (",", ";", ":")


def split_tokens(text):
    return [token for token in text.split() if token]


def letter_count(token):
    return sum(1 for ch in token if ch.isalpha())


class TokenAssembler:
    """Accumulates streamed text and emits only complete words."""

    def __init__(self):
        self.buffer = ""

    def feed(self, chunk):
        """
        Add a chunk of streamed text.

        Returns:
            list: Words completed by this chunk, in order
        """
        if not chunk:
            return []
        self.buffer += chunk
        if not _WHITESPACE.search(self.buffer):
            return []
        parts = _WHITESPACE.split(self.buffer)
        # The last part may be a word still being streamed
        self.buffer = parts[-1]
        return [part for part in parts[:-1] if part.strip()]

    def flush(self):
        """Emit the trailing partial word at end of stream."""
        word, self.buffer = self.buffer.strip(), ""
        return [word] if word else []


class WordFeed:
    """
    Thread-safe bounded word queue with a backpressure pair.

    Once the queue grows above ``high_water`` it reports saturated until it
    drains below ``low_water``. Producers poll ``saturated`` (or call
    ``wait_for_room``) before pushing more.
    """

    def __init__(self, high_water=None, low_water=None, min_length=None):
        if high_water is None:
            high_water = config.MAX_BUFFER_SIZE
        if low_water is None:
            low_water = config.RESUME_BUFFER_SIZE
        if low_water > high_water:
            raise ValueError(f"low_water ({low_water}) must not exceed high_water ({high_water})")
        self.high_water = high_water
        self.low_water = low_water
        self.min_length = config.MIN_WORD_LENGTH if min_length is None else min_length
        self._queue = deque()
        self._lock = threading.Lock()
        self._paused = False
        self.dropped = 0

    def __len__(self):
        with self._lock:
            return len(self._queue)

    def push(self, token):
        """
        Queue one token unless it is too short.

        Sentence punctuation on a dropped token is kept on the previous word
        so the burst boundary survives the filter.

        Returns:
            bool: True if the token was queued
        """
        token = token.strip()
        with self._lock:
            if letter_count(token) <= self.min_length:
                self.dropped += 1
                if token.endswith(SENTENCE_END) and self._queue:
                    last = self._queue[-1]
                    if not last.endswith(SENTENCE_END):
                        self._queue[-1] = last + token[-1]
                return False
            self._queue.append(token)
            self._update_pressure()
            return True

    def push_text(self, text):
        """Queue every whitespace-delimited token of ``text``."""
        return sum(1 for token in split_tokens(text) if self.push(token))

    def pop(self):
        """Next queued token, or None when empty."""
        with self._lock:
            if not self._queue:
                return None
            token = self._queue.popleft()
            self._update_pressure()
            return token

    def _update_pressure(self):
        size = len(self._queue)
        if not self._paused and size > self.high_water:
            self._paused = True
            logger.debug("Word feed saturated at %d words", size)
        elif self._paused and size < self.low_water:
            self._paused = False
            logger.debug("Word feed drained to %d words, resuming", size)

    @property
    def saturated(self):
        with self._lock:
            return self._paused

    def wait_for_room(self, poll_interval=None, stop_event=None):
        """
        Block while the feed is saturated, polling every ``poll_interval`` seconds.

        Returns:
            bool: False if ``stop_event`` was set while waiting
        """
        if poll_interval is None:
            poll_interval = config.BACKPRESSURE_POLL
        while self.saturated:
            logger.debug("Buffer full (%d/%d words), waiting", len(self), self.high_water)
            if stop_event is not None:
                if stop_event.wait(poll_interval):
                    return False
            else:
                time.sleep(poll_interval)
        return not (stop_event is not None and stop_event.is_set())


class WordScheduler:
    """
    Releases queued words at a throttled cadence.

    Inside a burst the delay between words starts at ``WORD_DELAY_START``
    and shrinks by ``WORD_ACCELERATION`` per word down to
    ``WORD_DELAY_MIN``. A word ending in clause punctuation is followed by
    ``PAUSE_DELAY``; a word ending a sentence closes the burst and is
    followed by ``BURST_COOLDOWN``. Both reset the acceleration.
    """

    def __init__(self, feed, clock=time.monotonic):
        self.feed = feed
        self.clock = clock
        self.current_delay = config.WORD_DELAY_START
        self.next_due = None
        self.bursts = 0

    def delay_after(self, token):
        if token.endswith(SENTENCE_END):
            self.current_delay = config.WORD_DELAY_START
            self.bursts += 1
            logger.debug("Burst %d ended on %r", self.bursts, token)
            return config.BURST_COOLDOWN
        if token.endswith(CLAUSE_END):
            self.current_delay = config.WORD_DELAY_START
            return config.PAUSE_DELAY
        delay = self.current_delay
        self.current_delay = max(config.WORD_DELAY_MIN, self.current_delay * config.WORD_ACCELERATION)
        return delay

    def poll(self, now=None):
        """
        Words due at time ``now``.

        Returns at most one word per call; when the feed is empty the next
        check is ``IDLE_POLL`` seconds away.

        Returns:
            list: Zero or one raw tokens
        """
        if now is None:
            now = self.clock()
        if self.next_due is not None and now < self.next_due:
            return []

        token = self.feed.pop()
        if token is None:
            self.next_due = now + config.IDLE_POLL
            return []
        self.next_due = now + self.delay_after(token)
        return [token]


class GenerationWorker(threading.Thread):
    """
    Producer thread feeding streamed text into a ``WordFeed``.

    ``source`` is any iterable of text chunks. Before each chunk the worker
    waits while the feed is saturated, so a fast source cannot outrun the
    ocean.
    """

    def __init__(self, feed, source, poll_interval=None):
        super().__init__(name="letterocean-generation", daemon=True)
        self.feed = feed
        self.source = source
        self.poll_interval = poll_interval
        self.assembler = TokenAssembler()
        self.stop_event = threading.Event()
        self.words_pushed = 0
        self.error = None

    def stop(self):
        self.stop_event.set()

    def run(self):
        try:
            for chunk in self.source:
                if not self.feed.wait_for_room(self.poll_interval, self.stop_event):
                    break
                for word in self.assembler.feed(chunk):
                    self._push(word)
            else:
                for word in self.assembler.flush():
                    self._push(word)
        except Exception as e:
            self.error = e
            logger.exception("Text source failed after %d words", self.words_pushed)
        logger.info("Generation worker finished, %d words pushed", self.words_pushed)

    def _push(self, word):
        if self.feed.push(word):
            self.words_pushed += 1
