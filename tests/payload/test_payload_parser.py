import pytest

from src.qr_attendance.qr_attendance.core.enums import ParseErrorKind
from src.qr_attendance.qr_attendance.core.exceptions import ParseError
from src.qr_attendance.qr_attendance.payload.parser import parse


def test_parse_registration_and_full_name():
    rec = parse("21BCE001 Jane Doe")

    assert rec.registration_number == "21BCE001"
    assert rec.first_name == "Jane"
    assert rec.last_name == "Doe"


def test_parse_multi_word_last_name_and_extra_whitespace():
    rec = parse("  21BCE003\tMary   Ann  van der Berg \n")

    assert rec.registration_number == "21BCE003"
    assert rec.first_name == "Mary"
    assert rec.last_name == "Ann van der Berg"
    assert rec.full_name == "Mary Ann van der Berg"


def test_parse_single_name_gives_empty_last_name():
    rec = parse("21BCE004 Prince")

    assert rec.first_name == "Prince"
    assert rec.last_name == ""


def test_registration_number_is_used_verbatim():
    assert parse("21bce-005/X jo").registration_number == "21bce-005/X"


@pytest.mark.parametrize("raw", ["", "   ", "21BCE002", "\n21BCE002\t"])
def test_parse_rejects_fewer_than_two_tokens(raw):
    with pytest.raises(ParseError) as exc:
        parse(raw)
    assert exc.value.kind == ParseErrorKind.INVALID_FORMAT


@pytest.mark.parametrize(
    "raw",
    ["A B", "A B C", "REG-1 Jean Luc Picard", "x  y\tz  w"],
)
def test_name_round_trips_through_first_and_last(raw):
    tokens = raw.split()
    rec = parse(raw)

    assert rec.registration_number == tokens[0]
    assert f"{rec.first_name} {rec.last_name}".strip() == " ".join(tokens[1:])
