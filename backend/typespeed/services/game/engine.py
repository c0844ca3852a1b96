import logging
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from typespeed.errors import TransportError, UserInputError
from .countdown import Countdown
from .scoring import ScoreRecord, build_record, percentage
from .validation import check_input
from .words import DEFAULT_LEVEL_SECONDS, WORDS_BY_LEVEL

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 10

# submit_answer outcomes
INVALID = 'invalid'
CORRECT = 'correct'
WRONG = 'wrong'

Listener = Callable[[str, Dict[str, Any]], None]


@dataclass
class RoundState:
    level: str
    seconds_per_word: int
    remaining_words: List[str]
    total: int
    current_word: str = ''
    current_input: str = ''
    score: int = 0
    active: bool = True
    started_at: float = field(default_factory=time.time)


class GameEngine:
    """Runs one typing round at a time.

    The engine holds no reference to any rendering surface. State changes
    are reported to `listener(event, payload)` with these events:

    - round_started: level, seconds, total
    - word: word, upcoming, seconds, score, total
    - tick: remaining
    - validation_error: reason, message
    - round_ended: success, score, total, percentage, message
    """

    def __init__(
        self,
        history,
        word_pools: Optional[Dict[str, List[str]]] = None,
        level_seconds: Optional[Dict[str, int]] = None,
        score_client=None,
        listener: Optional[Listener] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Callable[[int], None]] = None,
    ):
        self.history = history
        self.word_pools = word_pools or WORDS_BY_LEVEL
        self.level_seconds = level_seconds or DEFAULT_LEVEL_SECONDS
        self.score_client = score_client
        self.listener = listener
        self.rng = rng or random.Random()
        self.state: Optional[RoundState] = None
        self.countdown = Countdown(on_expire=self._on_timeout, on_tick=self._on_tick, scheduler=scheduler)
        # Ticks from a timer thread and submissions share one advance-or-end path
        self._lock = threading.RLock()

    @property
    def active(self) -> bool:
        return bool(self.state and self.state.active)

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self.listener is not None:
            self.listener(event, payload)

    def start_round(self, level: str) -> RoundState:
        if level not in self.word_pools or level not in self.level_seconds:
            raise ValueError(f'Unknown level: {level}')
        pool = list(self.word_pools[level])
        if not pool:
            raise ValueError(f'No words configured for level {level}')
        seconds = int(self.level_seconds[level])

        with self._lock:
            self.countdown.cancel()
            self.state = RoundState(
                level=level,
                seconds_per_word=seconds,
                remaining_words=pool,
                total=len(pool),
            )
            logger.info(f"[round-start] level={level} total={len(pool)} seconds={seconds}")
            self._emit('round_started', {'level': level, 'seconds': seconds, 'total': len(pool)})
            self.draw_word()
            return self.state

    def draw_word(self) -> Optional[str]:
        """Present the next word, or end the round successfully if none remain."""
        with self._lock:
            state = self.state
            if state is None or not state.active:
                return None
            if not state.remaining_words:
                self.end_round(True)
                return None

            index = self.rng.randrange(len(state.remaining_words))
            word = state.remaining_words.pop(index)
            state.current_word = word
            state.current_input = ''
            self.countdown.start(state.seconds_per_word)
            self._emit('word', {
                'word': word,
                'upcoming': self.upcoming(),
                'seconds': state.seconds_per_word,
                'score': state.score,
                'total': state.total,
            })
            return word

    def upcoming(self) -> List[str]:
        if self.state is None:
            return []
        return list(self.state.remaining_words[:PREVIEW_SIZE])

    def update_input(self, text: Optional[str]) -> None:
        with self._lock:
            if self.active:
                self.state.current_input = text or ''

    def submit_answer(self, raw_input: Optional[str] = None) -> Optional[str]:
        """Check an answer. With no argument the current input is used.

        Returns INVALID, CORRECT or WRONG, or None when no round is active.
        """
        with self._lock:
            state = self.state
            if state is None or not state.active:
                return None
            self.countdown.cancel()
            text = state.current_input if raw_input is None else raw_input

            try:
                answer = check_input(text)
            except UserInputError as exc:
                self._emit('validation_error', {'reason': exc.reason, 'message': exc.message})
                state.current_input = ''
                self.draw_word()
                return INVALID

            if answer.lower() == state.current_word.lower():
                state.score += 1
                if state.remaining_words:
                    self.draw_word()
                else:
                    self.end_round(True)
                return CORRECT

            self.end_round(False)
            return WRONG

    def tick(self, generation: Optional[int] = None) -> Optional[int]:
        with self._lock:
            return self.countdown.tick(generation)

    def _on_tick(self, remaining: int) -> None:
        self._emit('tick', {'remaining': remaining})

    def _on_timeout(self) -> None:
        self.submit_answer(None)

    def end_round(self, success: bool) -> Optional[Dict[str, Any]]:
        with self._lock:
            state = self.state
            if state is None or not state.active:
                return None
            self.countdown.cancel()
            state.active = False
            state.current_input = ''

            record = build_record(state.level, state.score, state.total)
            try:
                self.history.append(record)
            except OSError as exc:
                logger.error(f"[round-end] local history write failed: {exc}")
            self._forward(record)

            result = {
                'success': success,
                'score': record.score,
                'total': record.total,
                'percentage': record.percentage,
            }
            logger.info(
                f"[round-end] level={state.level} success={success} score={record.score}/{record.total}"
            )
            headline = 'Excellent!' if success else 'Game Over!'
            self._emit('round_ended', dict(
                result,
                message=f'{headline} You scored {record.score}/{record.total} ({record.percentage}%)',
            ))
            return result

    def _forward(self, record: ScoreRecord) -> None:
        if self.score_client is None:
            return
        try:
            score_id = self.score_client.submit(record)
            logger.info(f"[round-forward] saved remotely id={score_id}")
        except TransportError as exc:
            # Local history stays authoritative
            logger.warning(f"[round-forward] remote save failed: {exc}")

    def snapshot(self) -> Dict[str, Any]:
        state = self.state
        if state is None:
            return {'level': None, 'score': 0, 'total': 0, 'percentage': 0,
                    'active': False, 'remaining_words': 0, 'timestamp': time.time()}
        return {
            'level': state.level,
            'score': state.score,
            'total': state.total,
            'percentage': percentage(state.score, state.total),
            'active': state.active,
            'remaining_words': len(state.remaining_words),
            'timestamp': time.time(),
        }
