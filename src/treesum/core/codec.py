"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/codec.py
Formats and parses checksum-manifest lines in the md5sum/sha*sum layout:

    <hex>  <label>     text mode   (two spaces)
    <hex> *<label>     binary mode (space, asterisk)

Labels holding a backslash, newline or carriage return are escaped the way GNU
coreutils does it: the line starts with a backslash and the label uses "\\\\",
"\\n" and "\\r".
"""

import logging

from treesum.core.models import ChecksumEntry, ChecksumMode
from treesum.core.errors import FormatError

logger = logging.getLogger(__name__)

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


class DigestLineCodec:
    """Converts between ChecksumEntry objects and manifest lines (without newline)."""

    @staticmethod
    def format(entry: ChecksumEntry) -> str:
        label = entry.file_label
        prefix = ""
        if any(ch in label for ch in _ESCAPES):
            prefix = "\\"
            label = "".join(_ESCAPES.get(ch, ch) for ch in label)
        return f"{prefix}{entry.digest_hex} {entry.mode.marker}{label}"

    @staticmethod
    def parse(raw_line: str) -> ChecksumEntry:
        """
        Split off the digest at the first space, classify the mode from the next
        character, and reduce the remaining file reference to its basename.
        Only the line terminator ("\\n" or "\\r\\n") is removed; any other
        carriage return belongs to the file name.

        Raises:
            FormatError: no digest, no mode marker, or no file name.
        """
        line = raw_line
        if line.endswith("\r\n"):
            line = line[:-2]
        elif line.endswith("\n"):
            line = line[:-1]

        escaped = line.startswith("\\")
        if escaped:
            line = line[1:]

        digest_hex, sep, rest = line.partition(" ")
        if not sep or not digest_hex:
            raise FormatError(f"No digest found in line: \"{raw_line.rstrip()}\"", raw_line)

        if rest.startswith("*"):
            mode = ChecksumMode.BINARY
        elif rest.startswith(" "):
            mode = ChecksumMode.TEXT
        else:
            raise FormatError(
                "Missing mode character (asterisk \"*\" for binary mode, "
                f"space \" \" for text mode) in line: \"{raw_line.rstrip()}\"",
                raw_line
            )

        reference = rest[1:]
        if escaped:
            reference = DigestLineCodec._unescape(reference)

        label = reference.rsplit("/", 1)[-1]
        if not label:
            raise FormatError(f"No file name in line: \"{raw_line.rstrip()}\"", raw_line)

        return ChecksumEntry(digest_hex=digest_hex, mode=mode, file_label=label)

    @staticmethod
    def _unescape(text: str) -> str:
        out = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == "\\" and i + 1 < len(text):
                nxt = text[i + 1]
                out.append(_UNESCAPES.get(nxt, nxt))
                i += 2
                continue
            out.append(ch)
            i += 1
        return "".join(out)
