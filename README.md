# stacksynth

`stacksynth` holds the logic of a small keyboard synthesiser. Several of these
keyboards can be joined side by side, and each one then plays its own octave.
The package has no dependencies outside the standard library.

## Modules

- `stacksynth.cxmath`: `exp` (Taylor series), `log` (iterative refinement
  with range reduction; raises `ValueError` for values that are not
  positive), `power` and the integer-power helper `ipow`. `constants` uses
  `power` to build the pitch table.
- `stacksynth.constants`: `construct_step_size(index)` gives the 32-bit
  phase-accumulator step for semitone `index` (0 = C … 11 = B) in octave 4,
  at a sample rate of 22 kHz with A4 at 440 Hz. `STEP_SIZES` holds all twelve.
  `NOTE_NAMES`, `ACCUMULATORS` (ten note slots), `NO_NOTE` and
  `CONN_TIME_MS` are also defined here.
- `stacksynth.waveforms`: the four waveforms (`sawtooth`, `sine`, `square`,
  `triangle`), the `Waveform` enum, `waveform_generator(phase_acc,
  wave_select)` and `vibrato(step_sizes, key, joy_y)`. `waveform_generator`
  returns 0 for an unknown waveform number. `vibrato` bends the pitch up or
  down by up to a whole tone, driven by a joystick reading between 0 and 1023
  with 512 as the centre. It raises `IndexError` for a key outside 0..11.
- `stacksynth.knob`: `Knob(lower_limit, upper_limit)`, a rotary encoder.
  `load(a, b)` records its starting A/B lines and `update_rotation(a, b)`
  counts steps within the limits. Setting `rotation` clamps the value to
  those limits.
- `stacksynth.state`: `SysState`, the shared settings of one board. Its
  byte-sized fields wrap modulo 256. `inputs` is the 28-bit key matrix scan,
  where a set bit means "not pressed".
- `stacksynth.protocol`: the 8-byte messages that boards exchange
  (`MessageKind`, `Message` with `encode()` and `Message.from_bytes()`), the
  fixed-size note stack `NoteSlots`, and `assign_octaves(max_pos, pos)`, which
  returns an `OctaveAssignment`.
- `stacksynth.synth`: `Synth` ties the other modules together. It covers the
  start-up handshake (`handshake_step`), key-matrix scans with knob handling
  and loop recording and playback (`scan`), connection changes
  (`update_connections`), incoming messages (`decode_message`), note playing
  (`play_note`), pitch bend (`update_step_sizes`), sample generation
  (`sample`), the outgoing queue (`send`, `transmit`) and the text shown on
  the screen (`display_lines`).

## Examples

Build the pitch table and generate one sample:

```python
from stacksynth.constants import STEP_SIZES
from stacksynth.waveforms import Waveform, waveform_generator, vibrato

phase = (0 + STEP_SIZES[9]) % 2**32             # one step of A4
value = waveform_generator(phase, Waveform.SINE)

bent = vibrato(STEP_SIZES, 9, 1023)             # joystick pushed fully up
```

Track notes that are pressed and released:

```python
from stacksynth.protocol import NoteSlots

slots = NoteSlots(10)
slots.press(0, 4)      # C4
slots.press(7, 4)      # G4
slots.release(0, 4)
print(slots.active())  # [(7, 4)]
```

Encode and decode a message:

```python
from stacksynth.protocol import Message, MessageKind

frame = Message(MessageKind.PRESSED, 4, 9, 5).encode()
assert Message.from_bytes(frame).note_or_assign == 9
```

Work out which octave a board in a chain plays:

```python
from stacksynth.protocol import assign_octaves

print(assign_octaves(3, 1))
```

Drive a single board with no neighbours:

```python
from stacksynth.synth import Synth

synth = Synth(connection_reader=lambda: 0)
synth.handshake_step(west=False, east=False)   # alone: takes octave 4

all_up = (1 << 28) - 1
synth.scan(all_up & ~1, now=0)                 # press C
synth.play_note(synth.player_queue.popleft())
synth.update_step_sizes(512)                   # joystick centred
level = synth.sample()                         # 0..255
print(synth.display_lines())
```

## What the package does not do

The package holds only the board's logic. It reads no key matrix, joystick
or knob hardware. Scans, joystick readings and neighbour connections are
passed in by the caller. It produces no sound on a device: `Synth.sample()`
returns one output level, and playing it is up to the caller. It has no bus
driver. Frames that a board would put on the bus are collected in
`Synth.sent`, and incoming messages are given to `Synth.decode_message()`.
It draws nothing on a screen: `Synth.display_lines()` returns the text. It
runs no tasks or timers of its own and provides no command-line program.

## Running the tests

Install the `test` extra and run `pytest`.