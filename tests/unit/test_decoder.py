"""
Unit tests for the payload decoder.
Tests: quoted-printable, HTML root location, boundary trimming, fallbacks.
"""
import base64
import quopri

import pytest

from workout_email.decoding.decoder import (
    PayloadDecodeError,
    decode,
    decode_quoted_printable,
    locate_html_root,
    strip_trailing_boundary,
)
from workout_email.models.raw_payload import RawPayload


class TestQuotedPrintable:
    """Soft line breaks are stripped before =XX decoding."""

    def test_hex_sequences(self):
        assert decode_quoted_printable('<p class=3D"h1">') == '<p class="h1">'

    def test_soft_line_break_removed(self):
        assert decode_quoted_printable("STUDIO WORK=\nOUT SUMMARY") == "STUDIO WORKOUT SUMMARY"

    def test_soft_line_break_crlf(self):
        assert decode_quoted_printable("Total =\r\nTime") == "Total Time"

    def test_soft_break_before_hex(self):
        # "=\n3D" must not be read as an escaped "=" followed by "\n3D"
        assert decode_quoted_printable("a=\n=3Db") == "a=b"

    def test_utf8_multibyte(self):
        assert decode_quoted_printable("caf=C3=A9") == "café"

    def test_lowercase_hex(self):
        assert decode_quoted_printable("=3d") == "="

    def test_round_trip_with_soft_breaks(self, full_html):
        encoded = quopri.encodestring(full_html.encode("utf-8"))
        assert b"=\n" in encoded  # long lines were wrapped
        assert decode_quoted_printable(encoded) == full_html

    def test_round_trip_non_ascii(self):
        fragment = '<p class="text-white header-studio-name">Montréal, QC – Centre</p>\n'
        encoded = quopri.encodestring(fragment.encode("utf-8")).decode("ascii")
        assert decode_quoted_printable(encoded) == fragment


class TestLocateHtmlRoot:
    def test_doctype_discards_headers(self):
        content = "Subject: hi\nX-Header: 1\n\n<!DOCTYPE html><html></html>"
        assert locate_html_root(content) == "<!DOCTYPE html><html></html>"

    def test_doctype_case_insensitive(self):
        assert locate_html_root("junk<!doctype html><html>") == "<!doctype html><html>"

    def test_first_doctype_wins(self):
        content = "x<!DOCTYPE a><p><!DOCTYPE b>"
        assert locate_html_root(content) == "<!DOCTYPE a><p><!DOCTYPE b>"

    def test_crlf_blank_line_fallback(self):
        assert locate_html_root("A: 1\r\nB: 2\r\n\r\n<html></html>") == "<html></html>"

    def test_lf_blank_line_fallback(self):
        assert locate_html_root("A: 1\n\n<html></html>") == "<html></html>"

    def test_no_marker_keeps_everything(self):
        assert locate_html_root("<html><body>x</body></html>") == "<html><body>x</body></html>"


class TestStripTrailingBoundary:
    def test_closing_boundary(self):
        assert strip_trailing_boundary("</html>\n--b1_abc--\n") == "</html>"

    def test_boundary_without_dashes_suffix(self):
        assert strip_trailing_boundary("</html>\r\n--0000000000abc123\r\n") == "</html>"

    def test_trailing_whitespace_tolerated(self):
        assert strip_trailing_boundary("</html>\n--xyz--  \n\n") == "</html>"

    def test_interior_boundary_left_alone(self):
        content = "<p>a</p>\n--inner\n<p>b</p>"
        assert strip_trailing_boundary(content) == content

    def test_html_comment_end_is_not_a_boundary(self):
        content = "<!-- note\n-->"
        assert strip_trailing_boundary(content) == content


class TestDecode:
    def test_full_eml(self, full_eml_payload, full_html):
        assert decode(full_eml_payload) == full_html

    def test_explicit_quoted_printable(self):
        raw = RawPayload(data='<p class=3D"h2 text-gray">STE=\nPS</p>', transfer_encoding="Quoted-Printable")
        assert decode(raw) == '<p class="h2 text-gray">STEPS</p>'

    def test_header_marker_triggers_qp(self):
        raw = RawPayload(
            data="Content-Transfer-Encoding: QUOTED-PRINTABLE\n\n<p class=3D\"x\">1</p>"
        )
        assert decode(raw) == '<p class="x">1</p>'

    def test_plain_html_untouched(self):
        html = '<!DOCTYPE html><html><p class="a">=3D stays</p></html>'
        assert decode(RawPayload(data=html)) == html

    def test_base64_urlsafe(self):
        html = "<!DOCTYPE html><html><body>Peak HR: 186 ??>></body></html>"
        data = base64.urlsafe_b64encode(html.encode("utf-8")).decode("ascii").rstrip("=")
        assert decode(RawPayload(data=data, transfer_encoding="base64")) == html

    def test_base64_standard(self):
        html = "<!doctype html><p>STEPS</p>"
        data = base64.b64encode(html.encode("utf-8"))
        assert decode(RawPayload(data=data, transfer_encoding="base64")) == html

    def test_undecodable_base64_falls_back_to_text(self):
        raw = RawPayload(data="<!doctype html><p>not base64!</p>", transfer_encoding="base64")
        assert decode(raw) == "<!doctype html><p>not base64!</p>"

    def test_declared_base64_but_plain_html(self, full_html):
        # Class names like "text-gray" carry URL-safe alphabet characters
        raw = RawPayload(data=full_html, transfer_encoding="base64")
        assert decode(raw) == full_html

    def test_urlsafe_base64_with_stray_characters_falls_back(self):
        raw = RawPayload(data="PGh0bWw-_<p>", transfer_encoding="base64")
        assert decode(raw) == "PGh0bWw-_<p>"

    def test_bytes_payload(self):
        raw = RawPayload(data="<!doctype html><p>Montréal</p>".encode("utf-8"))
        assert decode(raw) == "<!doctype html><p>Montréal</p>"

    def test_empty_payload(self):
        assert decode(RawPayload(data="")) == ""
        assert decode(RawPayload(data=b"")) == ""

    def test_unknown_encoding_and_no_doctype_does_not_raise(self):
        raw = RawPayload(data="X-Weird: yes\n\n<div>partial", transfer_encoding="x-uuencode")
        assert decode(raw) == "<div>partial"

    def test_unreadable_payload_raises(self):
        with pytest.raises(PayloadDecodeError):
            decode(RawPayload(data=12345))  # type: ignore[arg-type]

    def test_none_payload_raises(self):
        with pytest.raises(PayloadDecodeError):
            decode(RawPayload(data=None))  # type: ignore[arg-type]
