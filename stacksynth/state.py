"""Shared state of one keyboard board."""

from .constants import INPUT_BITS


class _Bits:
    """An integer attribute that wraps to a fixed number of bits."""

    def __init__(self, width):
        self._mask = (1 << width) - 1

    def __set_name__(self, owner, name):
        self._attr = "_" + name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return getattr(obj, self._attr)

    def __set__(self, obj, value):
        setattr(obj, self._attr, int(value) & self._mask)


class SysState:
    """Settings and readings shared between the board's tasks.

    Byte-sized settings wrap modulo 256; ``inputs`` holds the 28-bit key
    matrix scan, with a set bit meaning "not pressed".
    """

    waveform = _Bits(8)
    volume = _Bits(8)
    connections = _Bits(8)
    octave = _Bits(8)
    lowest_octave = _Bits(8)
    highest_octave = _Bits(8)
    receiver_octave = _Bits(8)
    inputs = _Bits(INPUT_BITS)

    def __init__(self):
        self.receiver = False
        self.looping = False
        self.inputs = (1 << INPUT_BITS) - 1
        self.waveform = 0
        self.volume = 0
        self.connections = 0
        self.octave = 0
        self.lowest_octave = 0
        self.highest_octave = 0xFF
        self.receiver_octave = 4

    def __repr__(self):
        fields = (
            "receiver", "looping", "inputs", "waveform", "volume", "connections",
            "octave", "lowest_octave", "highest_octave", "receiver_octave",
        )
        body = ", ".join(f"{name}={getattr(self, name)!r}" for name in fields)
        return f"SysState({body})"