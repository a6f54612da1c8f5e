"""Messages exchanged between boards, the list of sounding notes, and octave assignment."""

import threading
from dataclasses import dataclass
from enum import IntEnum

from .constants import ACCUMULATORS, NO_NOTE

# Every board sends and accepts frames with this standard identifier.
CAN_ID = 0x123

# Length in bytes of one encoded message.
MESSAGE_LENGTH = 8

# Octave given to an empty note slot.
_EMPTY_OCTAVE = 4

# The lowest and highest octaves a board can be assigned.
MIN_OCTAVE = 1
MAX_OCTAVE = 7


class MessageKind(IntEnum):
    """The first byte of a message, an ASCII letter naming what it carries."""

    PRESSED = ord("P")
    RELEASED = ord("R")
    NEW_HANDSHAKE = ord("N")
    FINAL_HANDSHAKE = ord("F")
    VOLUME = ord("V")
    WAVEFORM = ord("W")
    HIGHEST_OCTAVE = ord("H")
    LOWEST_OCTAVE = ord("L")
    TRANSMITTER = ord("T")

    @property
    def letter(self):
        return chr(self.value)


@dataclass(frozen=True)
class Message:
    """One eight-byte message.

    Byte 1 is an octave or a handshake position, byte 2 a note number or an
    assignment flag, byte 3 a volume or waveform, byte 4 the connections.
    The remaining bytes are zero.
    """

    kind: MessageKind
    octave_or_position: int = 0
    note_or_assign: int = 0
    volume: int = 0
    connections: int = 0

    def __post_init__(self):
        object.__setattr__(self, "kind", MessageKind(self.kind))
        for name in ("octave_or_position", "note_or_assign", "volume", "connections"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name}={value} does not fit in one byte")

    def encode(self):
        """Return the message as eight bytes."""
        payload = bytes(
            (
                self.kind,
                self.octave_or_position,
                self.note_or_assign,
                self.volume,
                self.connections,
            )
        )
        return payload.ljust(MESSAGE_LENGTH, b"\x00")

    @classmethod
    def from_bytes(cls, data):
        """Decode eight bytes; raises ValueError on a bad length or unknown kind."""
        data = bytes(data)
        if len(data) != MESSAGE_LENGTH:
            raise ValueError(f"a message is {MESSAGE_LENGTH} bytes, got {len(data)}")
        try:
            kind = MessageKind(data[0])
        except ValueError:
            raise ValueError(f"unknown message kind {data[0]!r}") from None
        return cls(kind, data[1], data[2], data[3], data[4])


class NoteSlots:
    """Notes currently sounding, newest first, in a fixed number of slots.

    Pressing a note pushes it to the front and drops the oldest when full;
    releasing removes the first matching note and opens a slot at the end.
    """

    def __init__(self, size=ACCUMULATORS):
        if size < 1:
            raise ValueError("there must be at least one note slot")
        self._slots = [(NO_NOTE, _EMPTY_OCTAVE)] * size
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._slots)

    def __iter__(self):
        return iter(self.slots)

    @property
    def slots(self):
        """Every slot as (note, octave); empty slots hold the no-note marker."""
        with self._lock:
            return tuple(self._slots)

    def press(self, note, octave):
        """Start sounding ``note`` in ``octave``."""
        with self._lock:
            self._slots = [(note, octave)] + self._slots[:-1]

    def release(self, note, octave):
        """Stop the first sounding copy of the note; return whether one was found."""
        with self._lock:
            try:
                index = self._slots.index((note, octave))
            except ValueError:
                return False
            del self._slots[index]
            self._slots.append((NO_NOTE, _EMPTY_OCTAVE))
            return True

    def active(self):
        """Return the sounding notes as (note, octave) pairs, newest first."""
        with self._lock:
            return [slot for slot in self._slots if slot[0] != NO_NOTE]


@dataclass(frozen=True)
class OctaveAssignment:
    """The octave a board plays and the span covered by the whole chain."""

    octave: int
    lowest_octave: int
    highest_octave: int

    @property
    def receiver(self):
        """The board in the middle octave plays the sound."""
        return self.octave == 4


def assign_octaves(max_pos, pos):
    """Work out a board's octave from its handshake position in a chain."""
    half, odd = divmod(max_pos, 2)
    octave = min(max(4 + (pos - half), MIN_OCTAVE), MAX_OCTAVE)
    lowest = max(4 - half, MIN_OCTAVE)
    highest = min(4 + half + odd, MAX_OCTAVE)
    return OctaveAssignment(octave, lowest, highest)