import pydantic
import pytest

from midi_codec.codec import Codec, EncodeError, UnencodableVariant, decode, encode, sysex_bytes
from midi_codec.config import CodecConfig, NoteOffMode
from midi_codec.midi_messages import (
    ActiveSensing,
    Aftertouch,
    ChannelMessage,
    ClockTick,
    Continue,
    ControlChange,
    MidiEvent,
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
    SysEx,
    TuneRequest,
    Undefined,
)
from midi_codec.short_message import ShortMessage


@pytest.fixture
def legacy_codec():
    return Codec(note_off_mode=NoteOffMode.LEGACY_NOTE_ON_ZERO)


def test_decode_note_on():
    message = decode(ShortMessage(channel=0, status_code=9, data1=60, data2=100))
    assert message == ChannelMessage(channel=1, message=NoteOn(key=60, velocity=100))


def test_decode_pitch_wheel_center():
    message = decode(ShortMessage(channel=5, status_code=14, data1=0, data2=64))
    assert message == ChannelMessage(channel=6, message=PitchWheel(value=0))


def test_encode_program_change():
    short_message = encode(ChannelMessage(channel=1, message=ProgramChange(program=12)))
    assert short_message == ShortMessage(channel=0, status_code=12, data1=12, data2=0)


@pytest.mark.parametrize("status_code, expected", [
    (8, NoteOff(key=10, velocity=20)),
    (9, NoteOn(key=10, velocity=20)),
    (10, PolyAftertouch(key=10, pressure=20)),
    (11, ControlChange(controller=10, value=20)),
    (12, ProgramChange(program=10)),
    (13, Aftertouch(pressure=10)),
    (14, PitchWheel(value=10 + (20 << 7) - 8192)),
])
def test_decode_channel_voice_table(status_code, expected):
    message = decode(ShortMessage(channel=3, status_code=status_code, data1=10, data2=20))
    assert message == ChannelMessage(channel=4, message=expected)


@pytest.mark.parametrize("channel", [1, 9, 16])
@pytest.mark.parametrize("voice_message", [
    NoteOff(key=0, velocity=0),
    NoteOff(key=127, velocity=127),
    PolyAftertouch(key=64, pressure=33),
    ControlChange(controller=7, value=100),
    ProgramChange(program=127),
    Aftertouch(pressure=1),
    NoteOn(key=60, velocity=1),
])
def test_channel_message_round_trip(channel, voice_message):
    message = ChannelMessage(channel=channel, message=voice_message)
    assert decode(encode(message)) == message


def test_encode_uses_raw_channel():
    assert encode(ChannelMessage(channel=16, message=NoteOn(key=1, velocity=2))).channel == 15
    assert encode(ChannelMessage(channel=1, message=NoteOn(key=1, velocity=2))).channel == 0


def test_note_on_zero_velocity_decodes_as_note_off():
    message = ChannelMessage(channel=1, message=NoteOn(key=60, velocity=0))
    assert decode(encode(message)) == ChannelMessage(channel=1, message=NoteOff(key=60, velocity=64))


def test_pitch_wheel_round_trip():
    for value in range(-8192, 8192):
        message = ChannelMessage(channel=2, message=PitchWheel(value=value))
        assert decode(encode(message)) == message


def test_pitch_wheel_encoding_saturates():
    high = encode(ChannelMessage(channel=1, message=PitchWheel(value=20000)))
    assert high == encode(ChannelMessage(channel=1, message=PitchWheel(value=8191)))
    assert (high.data1, high.data2) == (127, 127)

    low = encode(ChannelMessage(channel=1, message=PitchWheel(value=-20000)))
    assert low == encode(ChannelMessage(channel=1, message=PitchWheel(value=-8192)))
    assert (low.data1, low.data2) == (0, 0)


@pytest.mark.parametrize("message, sub_code", [
    (SongPosition(beats=0), 2),
    (SongPosition(beats=1234), 2),
    (SongPosition(beats=16383), 2),
    (SongSelect(song=5), 3),
    (TuneRequest(), 6),
    (ClockTick(), 8),
    (Start(), 10),
    (Continue(), 11),
    (Stop(), 12),
    (ActiveSensing(), 14),
    (Reset(), 15),
])
def test_system_round_trip(message, sub_code):
    short_message = encode(message)
    assert short_message.status_code == 15
    assert short_message.channel == sub_code
    assert decode(short_message) == message


def test_song_position_uses_seven_bit_low_byte():
    short_message = encode(SongPosition(beats=(3 << 7) | 100))
    assert (short_message.data1, short_message.data2) == (100, 3)


@pytest.mark.parametrize("sub_code", [0, 1, 4, 5, 7, 9, 13])
def test_undefined_sub_codes(sub_code):
    assert decode(ShortMessage(channel=sub_code, status_code=15)) == Undefined()


@pytest.mark.parametrize("data1, data2", [(0, 0), (1, 2), (127, 127)])
def test_undefined_ignores_data(data1, data2):
    assert decode(ShortMessage(channel=0, status_code=15, data1=data1, data2=data2)) == Undefined()


@pytest.mark.parametrize("status_code", range(8))
def test_non_status_codes_decode_to_undefined(status_code):
    assert decode(ShortMessage(channel=3, status_code=status_code, data1=1, data2=2)) == Undefined()


def test_decode_is_total():
    for status_code in range(16):
        for channel in range(16):
            decode(ShortMessage(channel=channel, status_code=status_code, data1=127, data2=0))


def test_encode_undefined_fails():
    with pytest.raises(UnencodableVariant, match="cannot untranslate Undefined"):
        encode(Undefined())


@pytest.mark.parametrize("data", [(), (1, 2, 3), tuple(range(128)), b"\x43\x80\xff", tuple(range(256))])
def test_encode_sysex_fails(data):
    message = SysEx(data=data)
    with pytest.raises(EncodeError, match="cannot untranslate SysEx") as excinfo:
        encode(message)
    assert excinfo.value.message == message


def test_legacy_decodes_note_off_as_note_on(legacy_codec):
    message = legacy_codec.decode(ShortMessage(channel=0, status_code=8, data1=60, data2=90))
    assert message == ChannelMessage(channel=1, message=NoteOn(key=60, velocity=0))


def test_legacy_keeps_note_on_zero_velocity(legacy_codec):
    message = legacy_codec.decode(ShortMessage(channel=0, status_code=9, data1=60, data2=0))
    assert message == ChannelMessage(channel=1, message=NoteOn(key=60, velocity=0))


def test_legacy_encodes_note_off_as_note_on(legacy_codec):
    short_message = legacy_codec.encode(ChannelMessage(channel=3, message=NoteOff(key=60, velocity=90)))
    assert short_message == ShortMessage(channel=2, status_code=9, data1=60, data2=0)


def test_standard_encodes_note_off():
    short_message = Codec().encode(ChannelMessage(channel=3, message=NoteOff(key=60, velocity=90)))
    assert short_message == ShortMessage(channel=2, status_code=8, data1=60, data2=90)


def test_codec_from_config():
    codec = Codec.from_config(CodecConfig(note_off_mode="legacy"))
    assert codec.note_off_mode == NoteOffMode.LEGACY_NOTE_ON_ZERO


def test_decode_event():
    event = Codec().decode_event(1500, ShortMessage(channel=8, status_code=15))
    assert event == MidiEvent(timestamp=1500, message=ClockTick())


def test_decode_bytes():
    codec = Codec()
    assert codec.decode_bytes(b"\x91\x3c\x64") == ChannelMessage(channel=2, message=NoteOn(key=60, velocity=100))
    assert codec.decode_bytes([0xFA]) == Start()
    assert codec.decode_bytes(b"\xf0\x7e\x01\xf7") == SysEx(data=(0x7E, 0x01))
    assert codec.decode_bytes(b"\xf0\x80\xff\xf7") == SysEx(data=(0x80, 0xFF))


def test_encode_bytes():
    codec = Codec()
    assert codec.encode_bytes(ChannelMessage(channel=1, message=ProgramChange(program=5))) == b"\xc0\x05"
    assert codec.encode_bytes(Stop()) == b"\xfc"
    with pytest.raises(UnencodableVariant):
        codec.encode_bytes(SysEx(data=(1,)))


def test_sysex_bytes():
    assert sysex_bytes(SysEx(data=(0x43, 0x10))) == b"\xf0\x43\x10\xf7"


def test_out_of_range_fields_are_rejected():
    with pytest.raises(pydantic.ValidationError):
        ChannelMessage(channel=0, message=NoteOn(key=60, velocity=100))
    with pytest.raises(pydantic.ValidationError):
        NoteOn(key=128, velocity=100)
    with pytest.raises(pydantic.ValidationError):
        SongPosition(beats=16384)
