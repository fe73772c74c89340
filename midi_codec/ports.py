"""
Thin mido-backed ports that speak MidiEvent / MidiMessage.

mido (through its rtmidi backend) owns the device and the thread that delivers
incoming messages. These adapters only translate at the boundary: nothing is
buffered or queued.
"""
import logging
import time

import mido

from midi_codec.codec import Codec, default_codec
from midi_codec.midi_messages import ClientCallback, MidiEvent, MidiMessage, SysEx
from midi_codec.short_message import ShortMessage


logger = logging.getLogger("midi_codec")


TIMESTAMP_MASK = 0xFFFFFFFF


class Clock:
    """Milliseconds since the last call to start(), wrapped to 32 bits."""

    def __init__(self, time_source=time.monotonic):
        self._time_source = time_source
        self._epoch = time_source()

    def start(self):
        self._epoch = self._time_source()

    def now(self) -> int:
        return int((self._time_source() - self._epoch) * 1000) & TIMESTAMP_MASK


def to_mido(short_message: ShortMessage) -> mido.Message:
    return mido.Message.from_bytes(short_message.to_bytes())


def from_mido(message: mido.Message) -> ShortMessage | SysEx:
    if message.type == "sysex":
        return SysEx(data=tuple(message.data))
    return ShortMessage.from_bytes(message.bytes())


def get_input_names():
    return mido.get_input_names()


def get_output_names():
    return mido.get_output_names()


class MidiInput:
    def __init__(self, port_name, callback: ClientCallback, codec: Codec = None, clock: Clock = None):
        self.port_name = port_name
        self.callback = callback
        self.codec = codec or default_codec
        self.clock = clock or Clock()
        self._port = None

    def open(self):
        logger.debug(f"Opening input {self.port_name} with {self.codec}")
        self.clock.start()
        self._port = mido.open_input(self.port_name, callback=self._receive_message)
        return self

    def close(self):
        if self._port is not None:
            logger.debug(f"Closing input {self.port_name}")
            self._port.close()
            self._port = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc_info):
        self.close()

    def _receive_message(self, message):
        timestamp = self.clock.now()
        try:
            raw = from_mido(message)
        except ValueError as e:
            logger.warning(f"Dropping unreadable message from {self.port_name}: {e!r}")
            return
        if isinstance(raw, SysEx):
            event = MidiEvent(timestamp=timestamp, message=raw)
        else:
            event = self.codec.decode_event(timestamp, raw)
        self._dispatch(event)

    def _dispatch(self, event):
        # Runs on the backend's thread, so nothing may escape from here.
        try:
            self.callback(event)
        except Exception:
            logger.exception(f"Callback for {self.port_name} failed on {event}")


class MidiOutput:
    def __init__(self, port_name, codec: Codec = None):
        self.port_name = port_name
        self.codec = codec or default_codec
        self._port = None

    def open(self):
        logger.debug(f"Opening output {self.port_name} with {self.codec}")
        self._port = mido.open_output(self.port_name)
        return self

    def close(self):
        if self._port is not None:
            logger.debug(f"Closing output {self.port_name}")
            self._port.close()
            self._port = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc_info):
        self.close()

    def send(self, message: MidiMessage):
        if self._port is None:
            raise RuntimeError(f"Output {self.port_name} is not open.")
        if isinstance(message, SysEx):
            self.send_sysex(message)
            return
        self._port.send(to_mido(self.codec.encode(message)))

    def send_sysex(self, message: SysEx):
        """Raw path: SysEx has no short message form."""
        if self._port is None:
            raise RuntimeError(f"Output {self.port_name} is not open.")
        self._port.send(mido.Message("sysex", data=message.data))
