from typing import Callable, Optional


class Countdown:
    """Per-word countdown driven by explicit ticks.

    Every start() opens a new generation. A tick tagged with an older
    generation, or arriving after cancel(), does nothing, so cancellation
    always wins over a tick that was already on its way.

    `scheduler`, when given, is called with the new generation on every
    start so a runtime can arrange for tick(generation) once per second.
    """

    def __init__(
        self,
        on_expire: Callable[[], None],
        on_tick: Optional[Callable[[int], None]] = None,
        scheduler: Optional[Callable[[int], None]] = None,
    ):
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._scheduler = scheduler
        self.generation = 0
        self.remaining = 0
        self.running = False

    def start(self, seconds: int) -> int:
        if seconds <= 0:
            raise ValueError('seconds must be positive')
        self.generation += 1
        self.remaining = seconds
        self.running = True
        if self._scheduler is not None:
            self._scheduler(self.generation)
        return self.generation

    def cancel(self) -> None:
        self.running = False
        self.generation += 1

    def is_current(self, generation: int) -> bool:
        return self.running and generation == self.generation

    def tick(self, generation: Optional[int] = None) -> Optional[int]:
        """Advance one second. Returns the seconds left, or None if stale."""
        if not self.running:
            return None
        if generation is not None and generation != self.generation:
            return None
        self.remaining -= 1
        if self._on_tick is not None:
            self._on_tick(self.remaining)
        if self.remaining <= 0:
            self.running = False
            self._on_expire()
            return 0
        return self.remaining
