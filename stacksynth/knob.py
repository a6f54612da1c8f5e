"""Rotary encoder knob with clamped rotation."""

import threading


class Knob:
    """A quadrature knob whose rotation counts between two limits."""

    def __init__(self, lower_limit=0, upper_limit=8):
        self.lower_limit = lower_limit
        self.upper_limit = upper_limit
        self.pressed = False
        self.loaded = False
        self._rotation = 0
        self._clockwise = False
        self._ab = 0
        self._lock = threading.Lock()

    @property
    def rotation(self):
        return self._rotation

    @rotation.setter
    def rotation(self, value):
        with self._lock:
            if self.lower_limit <= value <= self.upper_limit:
                self._rotation = value
            elif value < self.lower_limit:
                self._rotation = self.lower_limit
            else:
                self._rotation = self.upper_limit

    def load(self, a, b):
        """Take the encoder's current A and B lines as the starting state."""
        with self._lock:
            self._ab = (int(bool(a)) << 1) | int(bool(b))
            self.loaded = True

    def update_rotation(self, a, b):
        """Advance the rotation from a new reading of the A and B lines."""
        a, b = bool(a), bool(b)
        with self._lock:
            previous = self._ab
            self._ab = (int(a) << 1) | int(b)
            change = previous ^ self._ab
            if change == 2:
                self._clockwise = a != b
            if change in (2, 3):
                if self._clockwise and self._rotation < self.upper_limit:
                    self._rotation += 1
                elif not self._clockwise and self._rotation > self.lower_limit:
                    self._rotation -= 1