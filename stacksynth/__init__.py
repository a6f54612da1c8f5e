"""Logic of a stackable polyphonic keyboard synthesiser."""

__version__ = "0.1.0"
__all__ = ["cxmath", "constants", "waveforms", "knob", "state", "protocol", "synth"]