"""One keyboard board in a chain: key scanning, handshake, messaging and audio."""

from collections import deque

from .constants import (
    ACCUMULATORS,
    CONN_TIME_MS,
    INPUT_BITS,
    NO_NOTE,
    NOTE_NAMES,
    STEP_SIZES,
)
from .knob import Knob
from .protocol import Message, MessageKind, NoteSlots
from .protocol import assign_octaves as plan_octaves
from .state import SysState
from .waveforms import Waveform, vibrato, waveform_generator

_UINT32_MASK = 0xFFFFFFFF
_BYTE_MASK = 0xFF
_INPUT_MASK = (1 << INPUT_BITS) - 1

# Positions in the 28-bit key matrix scan (a set bit means "not pressed").
_TRANSMITTER_BIT = 21
_WEST_BIT = 23
_RECORD_BIT = 24
_LOOP_STOP_BIT = 25
_EAST_BIT = 27
_KEY_COUNT = len(NOTE_NAMES)

_WAVEFORM_KNOB = 1
_OCTAVE_KNOB = 2
_VOLUME_KNOB = 3


def _bit(value, index):
    return bool((value >> index) & 1)


def _knob_lines(knob_number):
    """Bit positions of the A and B encoder lines of a knob in the matrix scan."""
    row = 4 - knob_number // 2
    col = 2 * (1 - knob_number % 2)
    first = row * 4 + col
    return first, first + 1


class Synth:
    """The behaviour of one board.

    ``connection_reader`` returns the board's neighbours as two bits, west in
    bit 1 and east in bit 0. Messages for other boards collect in
    ``outgoing``; note messages for this board's own player in
    ``player_queue``; frames put on the bus are appended to ``sent``.
    """

    def __init__(self, connection_reader=None):
        self._read_connections = connection_reader or (lambda: 0)
        self.state = SysState()
        self.knobs = [Knob() for _ in range(4)]
        self.knobs[_WAVEFORM_KNOB].lower_limit = 0
        self.knobs[_WAVEFORM_KNOB].upper_limit = 3
        self.knobs[_OCTAVE_KNOB].lower_limit = 1
        self.knobs[_OCTAVE_KNOB].upper_limit = 7
        self.notes = NoteSlots(ACCUMULATORS)
        self.step_sizes = [0] * ACCUMULATORS
        self.outgoing = deque()
        self.player_queue = deque()
        self.sent = []

        self._phase = [0] * ACCUMULATORS

        self.handshaking = True
        self.scanning = False
        self._first_handshake = True
        self._east_most = False
        self._handshake_signal_off = False

        self._first_scan = True
        self._prev_connections = None
        self._connections_changed = False
        self._connections_change_time = 0
        self._looped = []
        self._last_record_button = True
        self._loop_pointer = 0
        self._loop_length = 0

    # Messaging -----------------------------------------------------------

    def send(self, kind, octave_or_position=0, note_or_assign=0, volume=0,
             connections=0, to_player=False):
        """Queue a message for the bus, or for this board's player."""
        message = Message(MessageKind(kind), octave_or_position, note_or_assign,
                          volume, connections)
        (self.player_queue if to_player else self.outgoing).append(message)
        return message

    def _put_on_bus(self, message):
        self.sent.append(message)

    def transmit(self):
        """Drain the outgoing queue; messages go on the bus only if a neighbour is connected."""
        frames = []
        while self.outgoing:
            message = self.outgoing.popleft()
            if self.state.connections > 0:
                self._put_on_bus(message)
                frames.append(message)
        return frames

    def _connections_now(self):
        connections = int(self._read_connections()) & _BYTE_MASK
        self.state.connections = connections
        return connections

    # Knobs ---------------------------------------------------------------

    def _init_knob(self, index, lines_of):
        a_bit, b_bit = _knob_lines(lines_of)
        inputs = self.state.inputs
        self.knobs[index].load(_bit(inputs, a_bit), _bit(inputs, b_bit))

    # Audio ---------------------------------------------------------------

    def sample(self):
        """Advance every oscillator by one sample and return the 8-bit output level."""
        waveform = self.state.waveform
        volume = self.state.volume
        total = 0
        for i, (note, octave) in enumerate(self.notes.slots):
            if note == NO_NOTE:
                continue
            step = self.step_sizes[i]
            if octave > 4:
                step = (step << (octave - 4)) & _UINT32_MASK
            else:
                step >>= 4 - octave
            self._phase[i] = (self._phase[i] + step) & _UINT32_MASK
            total += waveform_generator(self._phase[i], waveform) << 3
        total >>= max(8 - volume, 0)
        total = int(total / ACCUMULATORS)
        return min(max(total + 128, 0), 255)

    def update_step_sizes(self, joy_y):
        """Recompute each slot's step size with pitch bend from the joystick."""
        for i, (note, _octave) in enumerate(self.notes.slots):
            self.step_sizes[i] = NO_NOTE != note and vibrato(STEP_SIZES, note, joy_y) or 0
        return tuple(self.step_sizes)

    def play_note(self, message):
        """Start or stop a note, if this board is the one making sound."""
        if not self.state.receiver:
            return
        if message.kind == MessageKind.PRESSED:
            self.notes.press(message.note_or_assign, message.octave_or_position)
        else:
            self.notes.release(message.note_or_assign, message.octave_or_position)

    # Incoming messages ---------------------------------------------------

    def _finish_handshake(self):
        self.handshaking = False
        self.scanning = True

    def decode_message(self, message):
        """Act on a message received from another board."""
        kind = message.kind
        if kind in (MessageKind.PRESSED, MessageKind.RELEASED):
            self.player_queue.append(message)
        elif kind == MessageKind.NEW_HANDSHAKE:
            if self.handshaking:
                self.state.highest_octave = message.octave_or_position
        elif kind == MessageKind.FINAL_HANDSHAKE:
            if self.handshaking:
                self.handshaking = False
                self.assign_octaves(message.octave_or_position, self.state.octave)
                self.scanning = True
        elif kind == MessageKind.VOLUME:
            self.state.volume = message.volume
            self.knobs[_VOLUME_KNOB].rotation = message.volume
            self._init_knob(_VOLUME_KNOB, _VOLUME_KNOB)
        elif kind == MessageKind.WAVEFORM:
            self.state.waveform = message.volume
            self.knobs[_WAVEFORM_KNOB].rotation = message.volume
            self._init_knob(_WAVEFORM_KNOB, _VOLUME_KNOB)
        elif kind == MessageKind.HIGHEST_OCTAVE:
            self.state.highest_octave = message.octave_or_position
            if self._connections_now() == 2 and message.note_or_assign:
                self._take_octave(message.octave_or_position)
        elif kind == MessageKind.LOWEST_OCTAVE:
            self.state.lowest_octave = message.octave_or_position
            if self._connections_now() == 1 and message.note_or_assign:
                self._take_octave(message.octave_or_position)
        elif kind == MessageKind.TRANSMITTER:
            self.state.receiver = False
            self.state.receiver_octave = message.octave_or_position

    def _take_octave(self, octave):
        self._finish_handshake()
        self.state.octave = octave
        self.knobs[_OCTAVE_KNOB].rotation = octave
        self._init_knob(_OCTAVE_KNOB, _OCTAVE_KNOB)

    # Chain management ----------------------------------------------------

    def update_connections(self, new_connections):
        """Adjust the chain's octave span after a neighbour joins or leaves."""
        state = self.state
        diff = new_connections - state.connections
        this_octave = state.octave
        lowest = state.lowest_octave
        highest = state.highest_octave
        receiver_octave = state.receiver_octave

        if diff > 0:
            if self.knobs[_WAVEFORM_KNOB].loaded:
                self.send(MessageKind.WAVEFORM, 0, 0, self.knobs[_WAVEFORM_KNOB].rotation)
            if self.knobs[_VOLUME_KNOB].loaded:
                self.send(MessageKind.VOLUME, 0, 0, self.knobs[_VOLUME_KNOB].rotation)

        if abs(diff) == 1:
            new_highest = min(highest + 1, 8)
            if diff < 0:
                new_highest = (highest - 1) & _BYTE_MASK
                if receiver_octave > this_octave:
                    self.send(MessageKind.TRANSMITTER, this_octave)
                    state.receiver = True
            if this_octave > new_highest:
                new_highest = this_octave
            else:
                state.highest_octave = new_highest
            if new_connections != 0:
                self.send(MessageKind.LOWEST_OCTAVE, lowest)
                self.send(MessageKind.HIGHEST_OCTAVE, new_highest, 1)
        elif abs(diff) == 2:
            new_lowest = max(lowest - 1, 1)
            if diff < 0:
                new_lowest = (lowest + 1) & _BYTE_MASK
                if receiver_octave < this_octave:
                    self.send(MessageKind.TRANSMITTER, this_octave)
                    state.receiver = True
            if this_octave < new_lowest:
                new_lowest = this_octave
            else:
                state.lowest_octave = new_lowest
            if new_connections != 0:
                self.send(MessageKind.HIGHEST_OCTAVE, highest)
                self.send(MessageKind.LOWEST_OCTAVE, new_lowest, 1)
        state.connections = new_connections

    def assign_octaves(self, max_pos, pos):
        """Set this board's octave and span from its place in the chain."""
        plan = plan_octaves(max_pos, pos)
        self.state.octave = plan.octave
        self.state.lowest_octave = plan.lowest_octave
        self.state.highest_octave = plan.highest_octave
        if plan.receiver:
            self.state.receiver = True
        self.knobs[_OCTAVE_KNOB].rotation = plan.octave
        for number in (_WAVEFORM_KNOB, _OCTAVE_KNOB, _VOLUME_KNOB):
            self._init_knob(number, number)
        return plan

    def handshake_step(self, west, east):
        """Run one round of the start-up handshake.

        ``west`` and ``east`` tell whether a neighbour's handshake signal is
        seen on that side. Returns whether the handshake is still running.
        """
        if not self.handshaking:
            return False
        no_west, no_east = not west, not east

        if no_west and no_east and self._first_handshake:
            self.assign_octaves(0, 0)
            self._finish_handshake()
            return False
        self._first_handshake = False

        if not no_west and no_east and not self._east_most:
            self._east_most = True

        if no_west and no_east and self._east_most:
            max_pos = (self.state.highest_octave + 1) & _BYTE_MASK
            self.state.octave = max_pos
            self._put_on_bus(Message(MessageKind.FINAL_HANDSHAKE, max_pos))
            self.assign_octaves(max_pos, max_pos)
            self._finish_handshake()
            return False
        if no_west and not self._handshake_signal_off:
            max_pos = (self.state.highest_octave + 1) & _BYTE_MASK
            self.state.octave = max_pos
            self.state.highest_octave = max_pos
            self._put_on_bus(Message(MessageKind.NEW_HANDSHAKE, max_pos))
            self._handshake_signal_off = True
        return True

    # Key scanning --------------------------------------------------------

    def scan(self, inputs, now):
        """Process one 28-bit key matrix scan taken at ``now`` milliseconds.

        Returns the inputs as played, after any loop playback is merged in.
        """
        state = self.state
        inputs &= _INPUT_MASK
        prev_inputs = state.inputs

        connections = (int(not _bit(inputs, _WEST_BIT)) << 1) | int(not _bit(inputs, _EAST_BIT))
        if self._first_scan:
            self._first_scan = False
            connections = self._connections_now()
        elif connections != self._prev_connections:
            self._connections_change_time = now
            self._connections_changed = True
        if self._connections_changed and now - self._connections_change_time >= CONN_TIME_MS:
            self.update_connections(connections)
            self._connections_changed = False

        waveform_rotation = self.knobs[_WAVEFORM_KNOB].rotation
        octave_rotation = self.knobs[_OCTAVE_KNOB].rotation
        volume_rotation = self.knobs[_VOLUME_KNOB].rotation
        octave = state.octave
        volume = state.volume
        waveform = state.waveform

        if prev_inputs != inputs:
            for i, knob in enumerate(self.knobs):
                rot_idx = 18 - 2 * i
                press_idx = 20 + 4 * (1 - i // 2) + i % 2
                knob.update_rotation(_bit(inputs, rot_idx), _bit(inputs, rot_idx + 1))
                knob.pressed = _bit(inputs, press_idx)

        if waveform != waveform_rotation and self.knobs[_WAVEFORM_KNOB].loaded:
            state.waveform = waveform_rotation
            self.send(MessageKind.WAVEFORM, 0, 0, waveform_rotation)
        if octave != octave_rotation and self.knobs[_OCTAVE_KNOB].loaded:
            state.octave = octave_rotation
        if volume != volume_rotation and self.knobs[_VOLUME_KNOB].loaded:
            state.volume = volume_rotation
            self.send(MessageKind.VOLUME, 0, 0, volume_rotation)
        if not _bit(inputs, _TRANSMITTER_BIT):
            state.receiver = True
            self.send(MessageKind.TRANSMITTER, octave)

        looping = state.looping
        recording = not _bit(inputs, _RECORD_BIT)

        if looping and self._looped:
            inputs &= self._looped[self._loop_pointer]
            if self._loop_pointer == self._loop_length - 1:
                self._loop_pointer = 0
            else:
                self._loop_pointer += 1

        if recording and not looping:
            self._looped.append(inputs)

        if not recording and not looping and not self._last_record_button:
            state.looping = True
            self._loop_pointer = 0
            self._loop_length = len(self._looped)

        if not _bit(inputs, _LOOP_STOP_BIT):
            state.looping = False
            self._looped = []

        for key in range(_KEY_COUNT):
            now_up = _bit(inputs, key)
            if _bit(prev_inputs, key) != now_up:
                kind = MessageKind.RELEASED if now_up else MessageKind.PRESSED
                self.send(kind, octave, key, volume, 0, to_player=state.receiver)

        self._last_record_button = _bit(inputs, _RECORD_BIT)
        self._prev_connections = connections
        state.inputs = inputs
        return inputs

    # Display -------------------------------------------------------------

    def display_lines(self):
        """Return the three lines shown on the board's screen."""
        state = self.state
        title = "Main Board" if state.receiver else "4 Blind Men"
        if state.looping:
            title += " Looping"
        notes = " ".join(
            f"{NOTE_NAMES[note]}{octave}" for note, octave in reversed(self.notes.active())
        )
        try:
            wave = Waveform(state.waveform).label
        except ValueError:
            wave = "Invalid"
        status = f"{wave}  Oct: {state.octave}  Vol: {state.volume}"
        return title, notes, status