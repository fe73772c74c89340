from enum import Enum

import pydantic
import yaml


class NoteOffMode(Enum):
    """
    How NoteOff is represented on the wire.

    STANDARD_NOTE_OFF: status 8 is NoteOff, and a NoteOn with velocity 0 is
    read as NoteOff with velocity 64.
    LEGACY_NOTE_ON_ZERO: NoteOff is never used. Status 8 is read as a NoteOn
    with velocity 0, and NoteOff is written as NoteOn with velocity 0. Some
    keyboards (e.g. the EMU Xboard series) only ever send this form.
    """
    STANDARD_NOTE_OFF = "standard"
    LEGACY_NOTE_ON_ZERO = "legacy"


class CodecConfig(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    note_off_mode: NoteOffMode = NoteOffMode.STANDARD_NOTE_OFF

    def to_yaml(self, stream=None, sort_keys=False):
        return yaml.safe_dump(self.model_dump(mode="json"), stream=stream, sort_keys=sort_keys)

    @classmethod
    def from_yaml(cls, stream):
        return cls.model_validate(yaml.safe_load(stream) or {})


def generate_default_config():
    return CodecConfig()
