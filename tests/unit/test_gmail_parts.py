"""
Unit tests for Gmail API message part selection and dates.
"""
import base64
from datetime import datetime, timedelta, timezone

from workout_email.decoding.decoder import decode
from workout_email.decoding.gmail_parts import message_date, select_html_payload
from workout_email.models.raw_payload import TRANSFER_BASE64


def gmail_b64(html):
    return base64.urlsafe_b64encode(html.encode("utf-8")).decode("ascii")


class TestSelectHtmlPayload:
    def test_nested_alternative_part(self, gmail_message, full_html):
        raw = select_html_payload(gmail_message)
        assert raw is not None
        assert raw.encoding == TRANSFER_BASE64
        assert raw.mime_type == "text/html"
        assert decode(raw) == full_html

    def test_top_level_body(self):
        message = {
            "id": "a1",
            "payload": {"mimeType": "text/html", "body": {"data": gmail_b64("<p>x</p>")}},
        }
        raw = select_html_payload(message)
        assert raw is not None
        assert decode(raw) == "<p>x</p>"

    def test_first_level_html_part(self):
        message = {
            "id": "a2",
            "payload": {
                "mimeType": "multipart/alternative",
                "body": {"size": 0},
                "parts": [
                    {"mimeType": "text/plain", "body": {"data": gmail_b64("plain")}},
                    {"mimeType": "text/html", "body": {"data": gmail_b64("<b>html</b>")}},
                ],
            },
        }
        assert decode(select_html_payload(message)) == "<b>html</b>"

    def test_first_level_preferred_over_nested(self):
        message = {
            "id": "a3",
            "payload": {
                "mimeType": "multipart/mixed",
                "parts": [
                    {
                        "mimeType": "multipart/alternative",
                        "parts": [{"mimeType": "text/html", "body": {"data": gmail_b64("nested")}}],
                    },
                    {"mimeType": "text/html", "body": {"data": gmail_b64("first")}},
                ],
            },
        }
        assert decode(select_html_payload(message)) == "first"

    def test_html_part_without_data_skipped(self):
        message = {
            "id": "a4",
            "payload": {
                "mimeType": "multipart/alternative",
                "parts": [
                    {"mimeType": "text/html", "body": {"attachmentId": "att-1", "size": 2048}},
                    {"mimeType": "text/plain", "body": {"data": gmail_b64("plain")}},
                ],
            },
        }
        assert select_html_payload(message) is None

    def test_plain_text_only(self):
        message = {
            "id": "a5",
            "payload": {
                "mimeType": "multipart/alternative",
                "parts": [{"mimeType": "text/plain", "body": {"data": gmail_b64("plain")}}],
            },
        }
        assert select_html_payload(message) is None

    def test_empty_message(self):
        assert select_html_payload({}) is None


class TestMessageDate:
    def test_date_header(self, gmail_message):
        date = message_date(gmail_message)
        assert date == datetime(2024, 7, 14, 12, 5, tzinfo=timezone(timedelta(hours=-4)))

    def test_header_name_case_insensitive(self):
        message = {"payload": {"headers": [{"name": "DATE", "value": "Mon, 03 Mar 2025 09:00:00 +0000"}]}}
        assert message_date(message) == datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)

    def test_internal_date_fallback(self):
        message = {"internalDate": "1720973100000", "payload": {"headers": []}}
        assert message_date(message) == datetime(2024, 7, 14, 16, 5, tzinfo=timezone.utc)

    def test_unparseable_header_falls_back_to_internal_date(self):
        message = {
            "internalDate": "1720973100000",
            "payload": {"headers": [{"name": "Date", "value": "not a date"}]},
        }
        assert message_date(message) == datetime(2024, 7, 14, 16, 5, tzinfo=timezone.utc)

    def test_no_date_at_all_is_now(self):
        before = datetime.now(timezone.utc)
        date = message_date({"id": "x"})
        assert date.tzinfo is not None
        assert before <= date <= datetime.now(timezone.utc)
