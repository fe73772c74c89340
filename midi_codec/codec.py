from typing import Iterable

from midi_codec import tables
from midi_codec.config import CodecConfig, NoteOffMode
from midi_codec.midi_messages import (
    ChannelMessage,
    MidiEvent,
    MidiMessage,
    SysEx,
    Undefined,
)
from midi_codec.short_message import SYSTEM_STATUS, ShortMessage


SYSEX_START = 0xF0
SYSEX_END = 0xF7


class EncodeError(Exception):
    pass


class UnencodableVariant(EncodeError):
    """Raised when a message has no short message representation."""

    def __init__(self, message):
        self.message = message
        super().__init__(f"cannot untranslate {type(message).__name__}")


class Codec:
    """
    Translates between ShortMessage and MidiMessage.

    The NoteOff mode is fixed for the lifetime of the codec. A codec holds no
    other state, so one instance can be shared between threads.
    """

    def __init__(self, note_off_mode=NoteOffMode.STANDARD_NOTE_OFF):
        self._note_off_mode = NoteOffMode(note_off_mode)
        self._decoders = tables.channel_voice_decoders(self._note_off_mode)
        self._encoders = tables.channel_voice_encoders(self._note_off_mode)

    @classmethod
    def from_config(cls, config: CodecConfig):
        return cls(note_off_mode=config.note_off_mode)

    @property
    def note_off_mode(self) -> NoteOffMode:
        return self._note_off_mode

    def decode(self, short_message: ShortMessage) -> MidiMessage:
        if short_message.status_code == SYSTEM_STATUS:
            decoder = tables.SYSTEM_DECODERS[short_message.channel]
            return decoder(short_message.data1, short_message.data2)

        decoder = self._decoders.get(short_message.status_code)
        if decoder is None:
            # Status codes below 8 cannot come from a real status byte.
            return Undefined()
        return ChannelMessage(
            channel=short_message.channel + 1,
            message=decoder(short_message.data1, short_message.data2),
        )

    def encode(self, message: MidiMessage) -> ShortMessage:
        if isinstance(message, ChannelMessage):
            status_code, data1, data2 = self._encoders[type(message.message)](message.message)
            return ShortMessage(channel=message.channel - 1, status_code=status_code, data1=data1, data2=data2)

        encoder = tables.SYSTEM_ENCODERS.get(type(message))
        if encoder is None:
            raise UnencodableVariant(message)
        sub_code, data1, data2 = encoder(message)
        return ShortMessage(channel=sub_code, status_code=SYSTEM_STATUS, data1=data1, data2=data2)

    def decode_event(self, timestamp: int, short_message: ShortMessage) -> MidiEvent:
        return MidiEvent(timestamp=timestamp, message=self.decode(short_message))

    def decode_bytes(self, data: Iterable[int]) -> MidiMessage:
        data = bytes(data)
        if data[:1] == bytes([SYSEX_START]):
            payload = data[1:-1] if data.endswith(bytes([SYSEX_END])) else data[1:]
            return SysEx(data=payload)
        return self.decode(ShortMessage.from_bytes(data))

    def encode_bytes(self, message: MidiMessage) -> bytes:
        return self.encode(message).to_bytes()

    def __repr__(self):
        return f"{self.__class__.__name__}(note_off_mode={self._note_off_mode})"


def sysex_bytes(message: SysEx) -> bytes:
    """Framed bytes for sending a SysEx message through a raw byte stream."""
    return bytes([SYSEX_START, *message.data, SYSEX_END])


default_codec = Codec()


def decode(short_message: ShortMessage) -> MidiMessage:
    return default_codec.decode(short_message)


def encode(message: MidiMessage) -> ShortMessage:
    return default_codec.encode(message)
