"""
Shared test fixtures for the extraction test suite.
"""
import base64
import quopri
from pathlib import Path

import pytest

from workout_email.models.raw_payload import RawPayload

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def to_eml(html: str, boundary: str = "b1_7f3a9c") -> bytes:
    """Wrap HTML as a multipart .eml with a quoted-printable HTML part."""
    body = quopri.encodestring(html.encode("utf-8")).decode("ascii")
    return (
        "From: Studio <noreply@example.com>\n"
        "To: member@example.com\n"
        "Subject: Your Workout Summary\n"
        "Date: Sun, 14 Jul 2024 12:05:00 -0400\n"
        "Message-ID: <summary-001@example.com>\n"
        "MIME-Version: 1.0\n"
        f'Content-Type: multipart/alternative; boundary="{boundary}"\n'
        "\n"
        f"--{boundary}\n"
        "Content-Type: text/html; charset=utf-8\n"
        "Content-Transfer-Encoding: quoted-printable\n"
        "\n"
        f"{body}\n"
        f"--{boundary}--\n"
    ).encode("ascii")


def gmail_b64(html: str) -> str:
    return base64.urlsafe_b64encode(html.encode("utf-8")).decode("ascii")


# ==========================================================================
# HTML documents
# ==========================================================================

@pytest.fixture
def full_html():
    """Treadmill + rower summary."""
    return load_fixture("summary_full.html")


@pytest.fixture
def treadmill_only_html():
    return load_fixture("summary_treadmill_only.html")


# ==========================================================================
# Raw payloads
# ==========================================================================

@pytest.fixture
def full_eml(full_html):
    return to_eml(full_html)


@pytest.fixture
def full_eml_payload(full_eml):
    return RawPayload(data=full_eml)


@pytest.fixture
def gmail_message(full_html):
    """Gmail API message resource: multipart/mixed > multipart/alternative > text/html."""
    return {
        "id": "18f0c2a9d1e4b7aa",
        "internalDate": "1720973100000",
        "payload": {
            "mimeType": "multipart/mixed",
            "headers": [
                {"name": "Subject", "value": "Your Workout Summary"},
                {"name": "Date", "value": "Sun, 14 Jul 2024 12:05:00 -0400"},
            ],
            "body": {"size": 0},
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "body": {"size": 0},
                    "parts": [
                        {"mimeType": "text/plain", "body": {"data": gmail_b64("plain text")}},
                        {"mimeType": "text/html", "body": {"data": gmail_b64(full_html)}},
                    ],
                },
            ],
        },
    }


# ==========================================================================
# Expected records
# ==========================================================================

@pytest.fixture
def expected_full():
    return {
        "class_time": "10:45 AM",
        "studio_location": "New Albany, OH",
        "class_instructor": "Lamara Ambler",
        "calories_burned": 1007,
        "splat_points": 41,
        "avg_heart_rate": 167,
        "peak_heart_rate": 186,
        "steps": 4080,
        "treadmill_distance": 2.08,
        "treadmill_time": 1008,
        "treadmill_avg_speed": 7.4,
        "treadmill_max_speed": 10,
        "treadmill_avg_incline": 1,
        "treadmill_max_incline": 1,
        "treadmill_avg_pace": 486,
        "treadmill_fastest_pace": 360,
        "treadmill_elevation": 109.82,
        "rowing_distance": 4038,
        "rowing_time": 1047,
        "rowing_avg_wattage": 244,
        "rowing_max_wattage": 491,
        "rowing_avg_speed": 17.7,
        "rowing_max_speed": 22.3,
        "rowing_500m_split": 102,
        "rowing_max_500m_split": 102,
        "rowing_avg_stroke_rate": 26.3,
        "active_minutes": 57,
        "minutes_in_gray_zone": 0,
        "minutes_in_blue_zone": 1,
        "minutes_in_green_zone": 15,
        "minutes_in_orange_zone": 38,
        "minutes_in_red_zone": 3,
    }


@pytest.fixture
def expected_treadmill_only():
    return {
        "class_time": "4:15:00 PM",
        "studio_location": "Rookwood",
        "class_instructor": "Brennan",
        "calories_burned": 952,
        "splat_points": 37,
        "avg_heart_rate": 162,
        "peak_heart_rate": 193,
        "steps": 3283,
        "treadmill_distance": 1.77,
        "treadmill_time": 801,
        "treadmill_avg_speed": 7.9,
        "treadmill_max_speed": 11,
        "treadmill_avg_incline": 0,
        "treadmill_max_incline": 0,
        "treadmill_avg_pace": 457,
        "treadmill_fastest_pace": 327,
        "treadmill_elevation": 0,
        "active_minutes": 58,
        "minutes_in_gray_zone": 2,
        "minutes_in_blue_zone": 4,
        "minutes_in_green_zone": 15,
        "minutes_in_orange_zone": 19,
        "minutes_in_red_zone": 18,
    }
