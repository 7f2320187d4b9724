import base64
import json

import pytest

from drawingtoon_network import GenerativeConfig, NetworkManager
from drawingtoon_network.exceptions import ConfigurationError, NoDataError, ServerError
from drawingtoon_network.resources import (
    CartoonizeOptions,
    CartoonStyle,
    GenerateContentResponse,
    GenerativeImageResource,
)

ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
IMAGE_URL = f"{ENDPOINT}/models/gemini-2.5-flash-image:generateContent"
TEXT_URL = f"{ENDPOINT}/models/gemini-2.5-flash:generateContent"

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def _text_reply(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _image_reply(data: bytes, *, camel: bool = True):
    key, mime_key = ("inlineData", "mimeType") if camel else ("inline_data", "mime_type")
    encoded = base64.b64encode(data).decode("ascii")
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your cartoon."},
                        {key: {mime_key: "image/png", "data": encoded}},
                    ]
                }
            }
        ]
    }


@pytest.fixture()
def resource():
    config = GenerativeConfig(api_key="test-key")
    with GenerativeImageResource(config) as instance:
        yield instance


def test_text_ping_returns_first_text(requests_mock, resource):
    matcher = requests_mock.post(TEXT_URL, json=_text_reply("pong"))

    assert resource.text_ping() == "pong"

    sent = matcher.last_request
    assert sent.headers["x-goog-api-key"] == "test-key"
    assert "key=" not in sent.url
    assert sent.json() == {
        "contents": [{"role": "user", "parts": [{"text": "Say: pong (short)"}]}]
    }


def test_text_ping_without_text_part(requests_mock, resource):
    requests_mock.post(TEXT_URL, json={"candidates": []})

    assert resource.text_ping("hello") == "(no text)"


def test_text_ping_falls_back_to_image_model(requests_mock):
    matcher = requests_mock.post(IMAGE_URL, json=_text_reply("pong"))
    config = GenerativeConfig(api_key="test-key", text_model=None)

    assert GenerativeImageResource(config).text_ping() == "pong"
    assert matcher.called


def test_cartoonize_returns_decoded_image(requests_mock, resource):
    matcher = requests_mock.post(IMAGE_URL, json=_image_reply(PNG_BYTES))

    result = resource.cartoonize(
        b"raw-photo",
        CartoonizeOptions(style=CartoonStyle.NOIR, intensity=0.5),
        mime_type="image/png",
    )

    assert result == PNG_BYTES
    payload = matcher.last_request.json()
    assert payload["generationConfig"] == {"responseModalities": ["IMAGE", "TEXT"]}
    prompt_part, image_part = payload["contents"][0]["parts"]
    assert "noir" in prompt_part["text"]
    assert "50% strength" in prompt_part["text"]
    assert image_part["inline_data"]["mime_type"] == "image/png"
    assert base64.b64decode(image_part["inline_data"]["data"]) == b"raw-photo"


def test_cartoonize_accepts_snake_case_parts(requests_mock, resource):
    requests_mock.post(IMAGE_URL, json=_image_reply(PNG_BYTES, camel=False))

    assert resource.cartoonize(b"raw-photo") == PNG_BYTES


def test_cartoonize_without_image_is_no_data(requests_mock, resource):
    requests_mock.post(IMAGE_URL, json=_text_reply("I cannot do that."))

    with pytest.raises(NoDataError):
        resource.cartoonize(b"raw-photo")


def test_cartoonize_rejects_empty_image(resource):
    with pytest.raises(ValueError):
        resource.cartoonize(b"")


def test_server_error_propagates(requests_mock, resource):
    requests_mock.post(IMAGE_URL, status_code=500, text="backend unavailable")

    with pytest.raises(ServerError) as excinfo:
        resource.cartoonize(b"raw-photo")

    assert excinfo.value.body == "backend unavailable"


def test_image_probe_reports_image_presence(requests_mock, resource):
    requests_mock.post(
        IMAGE_URL,
        [{"json": _image_reply(PNG_BYTES)}, {"json": _text_reply("no image")}],
    )

    assert resource.image_probe(b"photo") is True
    assert resource.image_probe(b"photo") is False


def test_missing_api_key_fails_before_request(requests_mock):
    config = GenerativeConfig(api_key="")
    resource = GenerativeImageResource(config)

    with pytest.raises(ConfigurationError):
        resource.text_ping()

    assert requests_mock.call_count == 0


def test_shared_manager_is_used(requests_mock):
    matcher = requests_mock.post(
        "https://proxy.example.com/v1/models/custom:generateContent",
        json=_text_reply("hi"),
    )
    manager = NetworkManager(default_headers={"User-Agent": "Drawingtoon/2.0"})
    config = GenerativeConfig(
        api_key="k",
        model="custom",
        text_model=None,
        endpoint="https://proxy.example.com/v1/",
    )

    assert GenerativeImageResource(config, manager).text_ping() == "hi"
    assert matcher.last_request.headers["User-Agent"] == "Drawingtoon/2.0"


def test_options_clamp_intensity_and_coerce_style():
    assert CartoonizeOptions(intensity=1.8).intensity == 1.0
    assert CartoonizeOptions(intensity=-2).intensity == 0.0
    options = CartoonizeOptions(style="edge_work")
    assert options.style is CartoonStyle.EDGE_WORK
    assert "70% strength" in options.prompt()
    assert options.prompt().endswith("Return the output as an image only (no text).")


def test_options_reject_unknown_style():
    with pytest.raises(ValueError):
        CartoonizeOptions(style="watercolor")


def test_response_model_helpers():
    response = GenerateContentResponse.model_validate(json.loads(json.dumps(_image_reply(b"x"))))

    assert response.first_text() == "Here is your cartoon."
    image = response.first_image()
    assert image is not None
    assert image.mime_type == "image/png"
    assert len(list(response.parts())) == 2
