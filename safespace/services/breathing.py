"""
Breathing exercise
Tick-driven timer for the inhale / hold / exhale exercise. The UI calls tick()
once per second and renders `phase` and `second`.
"""

from enum import Enum
from safespace.utils.config import settings


class Phase(str, Enum):
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Phase.INHALE: "Inspirez",
    Phase.HOLD: "Retenez",
    Phase.EXHALE: "Expirez",
}


class BreathingCycle:
    """Breathing timer"""

    def __init__(self, inhale: int = None, hold: int = None, exhale: int = None):
        """
        Args:
            inhale: inhale seconds, defaults to settings.breathing_seconds
            hold: hold seconds, same default
            exhale: exhale seconds, same default
        """
        default = settings.breathing_seconds
        self.inhale = default if inhale is None else inhale
        self.hold = default if hold is None else hold
        self.exhale = default if exhale is None else exhale
        if min(self.inhale, self.hold, self.exhale) <= 0:
            raise ValueError("breathing phases must last at least one second")

        self.running = False
        self.second = 0
        self.phase = Phase.INHALE
        self.completed_cycles = 0

    @property
    def cycle_length(self) -> int:
        return self.inhale + self.hold + self.exhale

    def start(self):
        self.running = True
        self.completed_cycles = 0
        self._reset()

    def stop(self):
        self.running = False
        self._reset()

    def toggle(self) -> bool:
        """Start when stopped, stop when running. Returns the new running state."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def tick(self) -> Phase:
        """
        Advance the timer by one second.

        Returns:
            the phase after the tick
        """
        if not self.running:
            return self.phase

        self.second += 1
        if self.second <= self.inhale:
            self.phase = Phase.INHALE
        elif self.second <= self.inhale + self.hold:
            self.phase = Phase.HOLD
        elif self.second <= self.cycle_length:
            self.phase = Phase.EXHALE
        else:
            self.completed_cycles += 1
            self._reset()
        return self.phase

    def _reset(self):
        self.second = 0
        self.phase = Phase.INHALE
