"""
Translation tables between short message fields and structured messages.

Channel-voice decoders are keyed by status code (8..14) and take the two data
bytes. System decoders are keyed by the system sub-code (0..15). Encoders are
keyed by message type and return a (code, data1, data2) triple, where code is
the status code for channel-voice messages and the sub-code for system ones.
"""
from midi_codec.config import NoteOffMode
from midi_codec.midi_messages import (
    DEFAULT_NOTE_OFF_VELOCITY,
    PITCH_MIN,
    ActiveSensing,
    Aftertouch,
    ClockTick,
    Continue,
    ControlChange,
    NoteOff,
    NoteOn,
    PitchWheel,
    PolyAftertouch,
    ProgramChange,
    Reset,
    SongPosition,
    SongSelect,
    Start,
    Stop,
    TuneRequest,
    Undefined,
)


PITCH_CENTER = -PITCH_MIN
FOURTEEN_BIT_MAX = 0x3FFF


def _decode_pitch(k, v):
    return PitchWheel(value=k + (v << 7) - PITCH_CENTER)


def _encode_pitch(message):
    m = min(FOURTEEN_BIT_MAX, max(0, message.value + PITCH_CENTER))
    return 0xE, m & 0x7F, m >> 7


def _decode_note_on(k, v):
    if v > 0:
        return NoteOn(key=k, velocity=v)
    return NoteOff(key=k, velocity=DEFAULT_NOTE_OFF_VELOCITY)


CHANNEL_VOICE_DECODERS = {
    0x8: lambda k, v: NoteOff(key=k, velocity=v),
    0x9: _decode_note_on,
    0xA: lambda k, v: PolyAftertouch(key=k, pressure=v),
    0xB: lambda k, v: ControlChange(controller=k, value=v),
    0xC: lambda k, v: ProgramChange(program=k),
    0xD: lambda k, v: Aftertouch(pressure=k),
    0xE: _decode_pitch,
}

LEGACY_CHANNEL_VOICE_DECODERS = {
    **CHANNEL_VOICE_DECODERS,
    0x8: lambda k, v: NoteOn(key=k, velocity=0),
    0x9: lambda k, v: NoteOn(key=k, velocity=v),
}

CHANNEL_VOICE_ENCODERS = {
    NoteOff: lambda m: (0x8, m.key, m.velocity),
    NoteOn: lambda m: (0x9, m.key, m.velocity),
    PolyAftertouch: lambda m: (0xA, m.key, m.pressure),
    ControlChange: lambda m: (0xB, m.controller, m.value),
    ProgramChange: lambda m: (0xC, m.program, 0),
    Aftertouch: lambda m: (0xD, m.pressure, 0),
    PitchWheel: _encode_pitch,
}

LEGACY_CHANNEL_VOICE_ENCODERS = {
    **CHANNEL_VOICE_ENCODERS,
    NoteOff: lambda m: (0x9, m.key, 0),
}


def _undefined(a, b):
    return Undefined()


SYSTEM_DECODERS = {
    0x0: _undefined,
    0x1: _undefined,
    0x2: lambda a, b: SongPosition(beats=a + (b << 7)),
    0x3: lambda a, b: SongSelect(song=a),
    0x4: _undefined,
    0x5: _undefined,
    0x6: lambda a, b: TuneRequest(),
    0x7: _undefined,
    0x8: lambda a, b: ClockTick(),
    0x9: _undefined,
    0xA: lambda a, b: Start(),
    0xB: lambda a, b: Continue(),
    0xC: lambda a, b: Stop(),
    0xD: _undefined,
    0xE: lambda a, b: ActiveSensing(),
    0xF: lambda a, b: Reset(),
}

# Undefined and SysEx are deliberately absent: neither has a short message form.
SYSTEM_ENCODERS = {
    SongPosition: lambda m: (0x2, m.beats & 0x7F, m.beats >> 7),
    SongSelect: lambda m: (0x3, m.song, 0),
    TuneRequest: lambda m: (0x6, 0, 0),
    ClockTick: lambda m: (0x8, 0, 0),
    Start: lambda m: (0xA, 0, 0),
    Continue: lambda m: (0xB, 0, 0),
    Stop: lambda m: (0xC, 0, 0),
    ActiveSensing: lambda m: (0xE, 0, 0),
    Reset: lambda m: (0xF, 0, 0),
}


def channel_voice_decoders(note_off_mode):
    if note_off_mode == NoteOffMode.LEGACY_NOTE_ON_ZERO:
        return LEGACY_CHANNEL_VOICE_DECODERS
    return CHANNEL_VOICE_DECODERS


def channel_voice_encoders(note_off_mode):
    if note_off_mode == NoteOffMode.LEGACY_NOTE_ON_ZERO:
        return LEGACY_CHANNEL_VOICE_ENCODERS
    return CHANNEL_VOICE_ENCODERS
