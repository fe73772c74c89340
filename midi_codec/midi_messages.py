"""
Structured MIDI messages.

Channel-voice messages (NoteOn, ControlChange, ...) only become complete MIDI
messages once wrapped in a ChannelMessage that carries the logical channel
(1..16). System messages stand on their own.
"""
from typing import Annotated, Callable, Union

import pydantic


Channel = Annotated[int, pydantic.Field(ge=1, le=16)]
Controller = Annotated[int, pydantic.Field(ge=0, le=127)]
Key = Annotated[int, pydantic.Field(ge=0, le=127)]
Pressure = Annotated[int, pydantic.Field(ge=0, le=127)]
Program = Annotated[int, pydantic.Field(ge=0, le=127)]
Song = Annotated[int, pydantic.Field(ge=0, le=127)]
Value = Annotated[int, pydantic.Field(ge=0, le=127)]
Velocity = Annotated[int, pydantic.Field(ge=0, le=127)]
# SysEx payloads are passed through uninterpreted, so any byte is accepted.
Data = tuple[Annotated[int, pydantic.Field(ge=0, le=255)], ...]
# Nominally -8192..8191. Encoding saturates anything outside that range.
Pitch = int
Beats = Annotated[int, pydantic.Field(ge=0, le=16383)]
TimeStamp = Annotated[int, pydantic.Field(ge=0, le=0xFFFFFFFF)]

PITCH_MIN = -8192
DEFAULT_NOTE_OFF_VELOCITY = 64


class _MidiMessage(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")


class _ChannelVoiceMessage(_MidiMessage):
    pass


class NoteOff(_ChannelVoiceMessage):
    key: Key
    velocity: Velocity = DEFAULT_NOTE_OFF_VELOCITY

class NoteOn(_ChannelVoiceMessage):
    key: Key
    velocity: Velocity = 64

class PolyAftertouch(_ChannelVoiceMessage):
    key: Key
    pressure: Pressure

class ControlChange(_ChannelVoiceMessage):
    controller: Controller
    value: Value

class ProgramChange(_ChannelVoiceMessage):
    program: Program

class Aftertouch(_ChannelVoiceMessage):
    pressure: Pressure

class PitchWheel(_ChannelVoiceMessage):
    value: Pitch


CC = ControlChange

ChannelVoiceMessage = Union[NoteOff, NoteOn, PolyAftertouch, ControlChange, ProgramChange, Aftertouch, PitchWheel]


class ChannelMessage(_MidiMessage):
    channel: Channel
    message: ChannelVoiceMessage

class SysEx(_MidiMessage):
    """Raw System Exclusive payload, without the 0xF0 / 0xF7 framing bytes."""
    data: Data = ()

    @pydantic.field_validator("data", mode="before")
    @classmethod
    def accept_raw_bytes(cls, v):
        if isinstance(v, (bytes, bytearray)):
            return tuple(v)
        return v

class SongPosition(_MidiMessage):
    """Song position pointer, measured in MIDI beats (1/16th notes)."""
    beats: Beats

class SongSelect(_MidiMessage):
    song: Song

class TuneRequest(_MidiMessage):
    pass

class ClockTick(_MidiMessage):
    """Sent 24 times per quarter note."""

class Start(_MidiMessage):
    pass

class Continue(_MidiMessage):
    pass

class Stop(_MidiMessage):
    pass

class ActiveSensing(_MidiMessage):
    pass

class Reset(_MidiMessage):
    pass

class Undefined(_MidiMessage):
    """A system message whose sub-code has no defined meaning."""


MidiMessage = Union[
    ChannelMessage, SysEx, SongPosition, SongSelect, TuneRequest, ClockTick,
    Start, Continue, Stop, ActiveSensing, Reset, Undefined,
]


class MidiEvent(pydantic.BaseModel):
    """A MIDI message stamped with milliseconds elapsed since the clock epoch."""
    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    timestamp: TimeStamp
    message: MidiMessage


ClientCallback = Callable[[MidiEvent], None]
