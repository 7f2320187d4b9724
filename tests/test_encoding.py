import json
from urllib.parse import parse_qs, urlsplit

import pytest

from drawingtoon_network.builder import build_request
from drawingtoon_network.encoding import JSONEncoding, URLEncoding
from drawingtoon_network.exceptions import ParameterEncodingError
from drawingtoon_network.http import HTTPMethod, RequestDescriptor
from drawingtoon_network.query import encode_query, merge_query, query_pairs


def test_query_keys_are_sorted():
    request = build_request("https://api.example.com/items", parameters={"b": "2", "a": "1"})

    assert urlsplit(request.url).query == "a=1&b=2"


def test_query_round_trip():
    request = build_request("https://api.example.com/items", parameters={"foo": "bar"})

    assert parse_qs(urlsplit(request.url).query) == {"foo": ["bar"]}


def test_lists_and_nested_mappings_decompose_into_leaf_pairs():
    parameters = {
        "tags": ["a", "b"],
        "filter": {"size": "L"},
        "flag": True,
        "none": None,
        "count": 3,
    }

    assert query_pairs(parameters) == [
        ("count", "3"),
        ("filter[size]", "L"),
        ("flag", "true"),
        ("none", ""),
        ("tags", "a"),
        ("tags", "b"),
    ]
    assert encode_query(parameters) == "count=3&filter[size]=L&flag=true&none=&tags=a&tags=b"


def test_values_are_percent_encoded():
    assert encode_query({"q": "a b&c=d/é"}) == "q=a%20b%26c%3Dd%2F%C3%A9"


def test_existing_query_is_merged_and_sorted():
    assert merge_query("z=9&m=5", {"a": "1"}) == "a=1&m=5&z=9"

    request = build_request("https://api.example.com/items?z=9", parameters={"a": "1"})

    assert request.url == "https://api.example.com/items?a=1&z=9"


def test_existing_query_segments_are_kept_as_written():
    assert merge_query("flag&q=a+b", {"b": "1"}) == "b=1&flag&q=a+b"

    request = build_request("https://api.example.com/items?q=a%20b&flag", parameters={"z": "1"})

    assert request.url == "https://api.example.com/items?flag&q=a%20b&z=1"


@pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE"])
def test_url_encoding_applies_to_query_methods(method):
    request = build_request("https://api.example.com/items", method, parameters={"q": "x"})

    assert request.url == "https://api.example.com/items?q=x"
    assert request.body is None


def test_url_encoding_leaves_body_methods_untouched(caplog):
    with caplog.at_level("WARNING", logger="drawingtoon_network.encoding"):
        request = build_request(
            "https://api.example.com/items", HTTPMethod.POST, parameters={"q": "x"}
        )

    assert request.url == "https://api.example.com/items"
    assert request.body is None
    assert "Query parameters ignored" in caplog.text


def test_query_string_destination_applies_to_every_method():
    request = build_request(
        "https://api.example.com/items",
        HTTPMethod.POST,
        parameters={"q": "x"},
        encoding=URLEncoding.query_string(),
    )

    assert request.url == "https://api.example.com/items?q=x"


def test_unknown_destination_is_rejected():
    with pytest.raises(ValueError):
        URLEncoding("form")


def test_caller_parameters_are_not_mutated():
    parameters = {"b": ["2", "3"], "a": {"x": "1"}}
    snapshot = json.dumps(parameters, sort_keys=True)

    build_request("https://api.example.com/items", parameters=parameters)

    assert json.dumps(parameters, sort_keys=True) == snapshot


def test_encoding_returns_new_request():
    original = RequestDescriptor(url="https://api.example.com/items")

    encoded = URLEncoding().encode(original, {"q": "x"})

    assert encoded is not original
    assert original.url == "https://api.example.com/items"


def test_encoding_without_url_fails():
    with pytest.raises(ParameterEncodingError):
        URLEncoding().encode(RequestDescriptor(url=""), {"q": "x"})
    with pytest.raises(ParameterEncodingError):
        JSONEncoding().encode(RequestDescriptor(url="/relative"), {"q": "x"})


def test_unsupported_query_value_fails():
    with pytest.raises(ParameterEncodingError):
        build_request("https://api.example.com/items", parameters={"q": object()})


def test_json_encoding_writes_body_and_content_type():
    request = build_request(
        "https://api.example.com/items",
        HTTPMethod.POST,
        parameters={"name": "panel", "layers": [1, 2]},
        encoding=JSONEncoding(),
    )

    assert json.loads(request.body) == {"name": "panel", "layers": [1, 2]}
    assert request.headers["Content-Type"] == "application/json"
    assert request.url == "https://api.example.com/items"


def test_json_encoding_keeps_explicit_content_type():
    request = build_request(
        "https://api.example.com/items",
        HTTPMethod.POST,
        parameters={"a": 1},
        headers={"content-type": "application/vnd.toon+json"},
        encoding=JSONEncoding(),
    )

    assert request.headers["content-type"] == "application/vnd.toon+json"
    assert "Content-Type" not in request.headers


def test_json_encoding_refuses_to_replace_existing_body():
    with pytest.raises(ParameterEncodingError):
        build_request(
            "https://api.example.com/items",
            HTTPMethod.POST,
            parameters={"a": 1},
            body=b"{}",
            encoding=JSONEncoding(),
        )


def test_builder_default_headers():
    plain = build_request("https://api.example.com/items")
    with_body = build_request("https://api.example.com/items", "post", body=b"{}")

    assert dict(plain.headers) == {"Accept": "application/json"}
    assert with_body.headers["Content-Type"] == "application/json"
    assert with_body.method == "POST"


def test_builder_caller_headers_win():
    request = build_request(
        "https://api.example.com/items",
        body=b"hello",
        headers={"Accept": "text/plain", "Content-Type": "text/plain", "X-Trace": "1"},
    )

    assert request.headers["Accept"] == "text/plain"
    assert request.headers["Content-Type"] == "text/plain"
    assert request.headers["X-Trace"] == "1"


def test_request_descriptor_is_immutable():
    request = build_request("https://api.example.com/items")

    with pytest.raises(TypeError):
        request.headers["Accept"] = "text/plain"  # type: ignore[index]
    with pytest.raises(AttributeError):
        request.url = "https://other.example.com"  # type: ignore[misc]
