# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/data/records.py

"""
Command records and their on-disk TOML form.

A command file looks like::

    description = "commits code"
    prompt = \"\"\"
    do a commit
    \"\"\"

``description`` is always written; ``prompt`` only when non-empty. The prompt
block is a TOML multi-line basic string. Backslashes and control characters
are escaped so they come back verbatim, but double quotes are not: a prompt
that contains the closing delimiter as literal text produces a file that no
longer parses (or parses to something else). That limitation is kept as is.
"""

import tomllib
from pathlib import Path
from typing import Optional, Final

from pydantic import BaseModel, field_validator

from gemcmd.system.exceptions import ParseError

PROMPT_DELIMITER: Final = '"""'

_BASIC_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}

# Inside the multi-line block newlines and tabs stay literal and quotes are
# left alone.
_MULTILINE_ESCAPES = {
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\r": "\\r",
}


class CommandRecord(BaseModel):
    """One stored command. Its identity is its name."""
    name: str = ""
    description: str = ""
    prompt: str = ""

    @field_validator("description", "prompt", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    def to_export_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description, "prompt": self.prompt}


def _escape(text: str, table: dict[str, str]) -> str:
    out = []
    for ch in text:
        if ch in table:
            out.append(table[ch])
        elif (ord(ch) < 0x20 and ch not in "\n\t") or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return "".join(out)


def encode_record(record: CommandRecord) -> bytes:
    """Serialize a record to the TOML text stored on disk."""
    lines = [f'description = "{_escape(record.description, _BASIC_ESCAPES)}"']
    if record.prompt:
        body = _escape(record.prompt, _MULTILINE_ESCAPES)
        lines.append(f"prompt = {PROMPT_DELIMITER}\n{body}\n{PROMPT_DELIMITER}")
    return ("\n".join(lines) + "\n").encode("utf-8")


def decode_record(data: bytes, path: Optional[Path] = None, name: str = "") -> CommandRecord:
    """Parse command file content.

    Missing fields read as empty strings. The newline the encoder puts before
    the closing prompt delimiter is dropped.

    Raises:
        ParseError: Invalid UTF-8, malformed TOML, or non-string fields
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8: {e}") from e

    try:
        parsed = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(path, str(e)) from e

    description = parsed.get("description", "")
    prompt = parsed.get("prompt", "")
    for field, value in (("description", description), ("prompt", prompt)):
        if not isinstance(value, str):
            raise ParseError(path, f"'{field}' must be a string, got {type(value).__name__}")

    if prompt.endswith("\n"):
        prompt = prompt[:-1]

    return CommandRecord(name=name, description=description, prompt=prompt)


def read_record(path: Path, name: str = "") -> CommandRecord:
    """Read and decode one command file. OSError propagates to the caller."""
    return decode_record(Path(path).read_bytes(), path=path, name=name)


def write_record(path: Path, record: CommandRecord) -> None:
    Path(path).write_bytes(encode_record(record))
