from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel, ValidationError

from drawingtoon_network.decoding import decode_json_object, decode_string, decode_typed
from drawingtoon_network.exceptions import DecodingError, NoDataError


@dataclass
class Point:
    x: int
    y: int


class Project(BaseModel):
    name: str
    updated_at: datetime
    layers: list[str] = []


def test_typed_decode_into_dataclass():
    assert decode_typed(b'{"x": 1, "y": 2}', Point) == Point(x=1, y=2)


def test_typed_decode_type_mismatch_wraps_cause():
    with pytest.raises(DecodingError) as excinfo:
        decode_typed(b'{"x": "a"}', Point)

    assert isinstance(excinfo.value.cause, ValidationError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_typed_decode_is_strict_about_numeric_strings():
    with pytest.raises(DecodingError):
        decode_typed(b'{"x": "1", "y": 2}', Point)


def test_typed_decode_parses_iso8601_dates():
    project = decode_typed(
        b'{"name": "panel", "updated_at": "2025-09-25T10:30:00Z", "layers": ["bubble"]}',
        Project,
    )

    assert project.updated_at == datetime(2025, 9, 25, 10, 30, tzinfo=timezone.utc)
    assert project.layers == ["bubble"]


def test_typed_decode_supports_builtin_containers():
    assert decode_typed(b"[1, 2, 3]", list[int]) == [1, 2, 3]


def test_typed_decode_rejects_malformed_json():
    with pytest.raises(DecodingError):
        decode_typed(b"{not json", Point)


def test_empty_body_is_a_decoding_error():
    with pytest.raises(DecodingError) as typed_exc:
        decode_typed(b"", Point)
    with pytest.raises(DecodingError) as json_exc:
        decode_json_object(b"")

    assert isinstance(typed_exc.value, NoDataError)
    assert isinstance(json_exc.value, NoDataError)
    assert json_exc.value.cause == "Response contained no data"


def test_json_object_decode():
    assert decode_json_object(b'{"ok": true, "items": [1]}') == {"ok": True, "items": [1]}


@pytest.mark.parametrize("content", [b"[1, 2]", b'"text"', b"42", b"null"])
def test_json_object_requires_top_level_object(content):
    with pytest.raises(DecodingError):
        decode_json_object(content)


def test_json_object_rejects_invalid_bytes():
    with pytest.raises(DecodingError):
        decode_json_object(b"\xff\xfe{")


def test_string_decode_defaults_to_utf8():
    assert decode_string("말풍선".encode()) == "말풍선"


def test_string_decode_with_explicit_encoding():
    assert decode_string("café".encode("latin-1"), "latin-1") == "café"


def test_string_decode_rejects_invalid_utf8():
    with pytest.raises(DecodingError):
        decode_string(b"\xff\xfe\xfa")


@pytest.mark.parametrize("encoding", ["no-such-codec", "base64"])
def test_string_decode_rejects_unusable_encodings(encoding):
    with pytest.raises(DecodingError):
        decode_string(b"aGVsbG8=", encoding)
