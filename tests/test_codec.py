"""
Unit tests for DigestLineCodec: md5sum-compatible line formatting and parsing.
"""
import pytest
from treesum.core.codec import DigestLineCodec
from treesum.core.models import ChecksumEntry, ChecksumMode
from treesum.core.errors import FormatError
from conftest import MD5_X


class TestFormat:

    def test_text_mode_uses_two_spaces(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X, ChecksumMode.TEXT, "a.txt"))
        assert line == f"{MD5_X}  a.txt"

    def test_binary_mode_uses_asterisk(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X, ChecksumMode.BINARY, "a.txt"))
        assert line == f"{MD5_X} *a.txt"

    def test_digest_is_lowercased(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X.upper(), ChecksumMode.TEXT, "a"))
        assert line.startswith(MD5_X)

    def test_label_with_spaces_kept_verbatim(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X, ChecksumMode.TEXT, "my photo.jpg"))
        assert line == f"{MD5_X}  my photo.jpg"

    def test_label_with_newline_is_escaped(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X, ChecksumMode.TEXT, "a\nb"))
        assert line == f"\\{MD5_X}  a\\nb"
        assert "\n" not in line


class TestParse:

    def test_parses_md5sum_output_with_full_path(self):
        entry = DigestLineCodec.parse(f"{MD5_X}  /data/set/a.txt\n")
        assert entry == ChecksumEntry(MD5_X, ChecksumMode.TEXT, "a.txt")

    def test_parses_binary_marker(self):
        entry = DigestLineCodec.parse(f"{MD5_X} */data/set/a.txt")
        assert entry.mode == ChecksumMode.BINARY
        assert entry.file_label == "a.txt"

    def test_keeps_spaces_inside_name(self):
        entry = DigestLineCodec.parse(f"{MD5_X}  /x/my photo.jpg")
        assert entry.file_label == "my photo.jpg"

    def test_missing_mode_marker(self):
        with pytest.raises(FormatError, match="mode character"):
            DigestLineCodec.parse(f"{MD5_X} a.txt")

    @pytest.mark.parametrize("line", ["", "\n", "nospacehere", " leading"])
    def test_no_digest(self, line):
        with pytest.raises(FormatError):
            DigestLineCodec.parse(line)

    def test_no_file_name(self):
        with pytest.raises(FormatError, match="No file name"):
            DigestLineCodec.parse(f"{MD5_X}  /data/set/")

    def test_format_error_keeps_line(self):
        with pytest.raises(FormatError) as exc:
            DigestLineCodec.parse("abc?def")
        assert exc.value.line == "abc?def"


class TestRoundTrip:

    @pytest.mark.parametrize("mode", [ChecksumMode.TEXT, ChecksumMode.BINARY])
    @pytest.mark.parametrize("label", ["a.txt", "with space.bin", "back\\slash", "new\nline", "*star"])
    def test_parse_inverts_format(self, mode, label):
        entry = ChecksumEntry(MD5_X, mode, label)
        assert DigestLineCodec.parse(DigestLineCodec.format(entry)) == entry

    @pytest.mark.parametrize("mode", [ChecksumMode.TEXT, ChecksumMode.BINARY])
    @pytest.mark.parametrize("label", ["c\r", "a\rb", "\r\n\\"])
    def test_carriage_return_survives(self, mode, label):
        entry = ChecksumEntry(MD5_X, mode, label)
        assert DigestLineCodec.parse(DigestLineCodec.format(entry)) == entry

    def test_uppercase_digest_is_stored_lowercase(self):
        entry = ChecksumEntry(MD5_X.upper(), ChecksumMode.TEXT, "a.txt")
        assert entry.digest_hex == MD5_X
        assert DigestLineCodec.parse(DigestLineCodec.format(entry)) == entry


class TestCarriageReturn:
    """Names with "\\r" are escaped like GNU md5sum and only the terminator is stripped."""

    def test_format_escapes_carriage_return(self):
        line = DigestLineCodec.format(ChecksumEntry(MD5_X, ChecksumMode.TEXT, "a\rb"))
        assert line == f"\\{MD5_X}  a\\rb"
        assert "\r" not in line

    def test_parse_strips_crlf_terminator_only(self):
        entry = DigestLineCodec.parse(f"{MD5_X}  /d/a.txt\r\n")
        assert entry.file_label == "a.txt"

    def test_parse_keeps_unescaped_trailing_carriage_return(self):
        entry = DigestLineCodec.parse(f"{MD5_X}  /d/c\r")
        assert entry.file_label == "c\r"

    def test_parse_unescapes_carriage_return(self):
        entry = DigestLineCodec.parse(f"\\{MD5_X}  /d/a\\rb\n")
        assert entry.file_label == "a\rb"
