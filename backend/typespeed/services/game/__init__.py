"""Game domain services: word draws, countdown, validation and scoring.

Nothing here knows about HTTP or sockets; the Socket.IO adapter and the
tests drive the engine through its state-transition methods.
"""

from .countdown import Countdown
from .engine import GameEngine, RoundState, CORRECT, INVALID, WRONG
from .scoring import ScoreRecord, build_record, percentage
from .validation import InputCheck, check_input, validate_input
from .words import DEFAULT_LEVEL_SECONDS, LEVELS, WORDS_BY_LEVEL
