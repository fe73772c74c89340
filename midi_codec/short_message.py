from typing import Annotated, Iterable

import pydantic


Nibble = Annotated[int, pydantic.Field(ge=0, le=15)]
DataByte = Annotated[int, pydantic.Field(ge=0, le=127)]

SYSTEM_STATUS = 0xF

# Data bytes following the status byte, by status nibble (channel messages)
# and by sub-code (system messages, status nibble 0xF).
_CHANNEL_DATA_LENGTHS = {0x8: 2, 0x9: 2, 0xA: 2, 0xB: 2, 0xC: 1, 0xD: 1, 0xE: 2}
_SYSTEM_DATA_LENGTHS = {0x1: 1, 0x2: 2, 0x3: 1}


class ShortMessage(pydantic.BaseModel):
    """
    The raw wire form of a MIDI short message.

    The high nibble of the status byte is `status_code`, the low nibble is
    `channel`. For system messages (status_code 15) the low nibble is the
    system sub-code rather than a channel.
    """
    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    channel: Nibble
    status_code: Nibble
    data1: DataByte = 0
    data2: DataByte = 0

    @property
    def status_byte(self) -> int:
        return (self.status_code << 4) | self.channel

    @property
    def is_system(self) -> bool:
        return self.status_code == SYSTEM_STATUS

    @property
    def data_length(self) -> int:
        if self.is_system:
            return _SYSTEM_DATA_LENGTHS.get(self.channel, 0)
        return _CHANNEL_DATA_LENGTHS.get(self.status_code, 0)

    def to_bytes(self) -> bytes:
        return bytes([self.status_byte, self.data1, self.data2][:1 + self.data_length])

    @classmethod
    def from_bytes(cls, data: Iterable[int]) -> "ShortMessage":
        data = bytes(data)
        if not data:
            raise ValueError("A short message needs at least a status byte.")
        if len(data) > 3:
            raise ValueError(f"A short message has at most 3 bytes, got {len(data)}.")
        status, *data_bytes = data
        if status < 0x80:
            raise ValueError(f"Not a status byte: 0x{status:02x}")
        for byte in data_bytes:
            if byte > 0x7F:
                raise ValueError(f"Not a data byte: 0x{byte:02x}")
        data1, data2 = (data_bytes + [0, 0])[:2]
        return cls(channel=status & 0x0F, status_code=status >> 4, data1=data1, data2=data2)
