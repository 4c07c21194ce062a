import httpx
import pytest

from recipe_match.config import Settings
from recipe_match.ingredients.caption_parser import CaptionParser
from recipe_match.vision.captioning import (
    CaptionError,
    HuggingFaceCaptioner,
    build_captioner,
    confidence_for,
    detect_ingredients,
)


def _captioner(handler, token="hf_test"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HuggingFaceCaptioner(token, model_id="org/model", client=client)


def test_successful_caption_is_parsed():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json=[{"generated_text": "a bowl of tomatoes and onions"}])

    result = detect_ingredients(_captioner(handler), CaptionParser(), b"jpeg-bytes", "bowl.jpg")

    assert seen["url"] == "https://api-inference.huggingface.co/models/org/model"
    assert seen["auth"] == "Bearer hf_test"
    assert seen["body"] == b"jpeg-bytes"
    assert result.ingredients == ["tomato", "onion"]
    assert result.raw_response == "a bowl of tomatoes and onions"
    assert result.confidence == 0.85
    assert result.provider == "huggingface"
    assert result.metadata["model"] == "org/model"


def test_model_loading_error():
    def handler(request):
        return httpx.Response(503, json={"error": "Model org/model is currently loading", "estimated_time": 20.5})

    with pytest.raises(CaptionError, match="model is loading, estimated time: 20.5 seconds"):
        _captioner(handler).caption(b"img")


def test_api_error_message():
    def handler(request):
        return httpx.Response(400, json={"error": "bad image"})

    with pytest.raises(CaptionError, match="API error: bad image"):
        _captioner(handler).caption(b"img")


def test_model_not_found():
    def handler(request):
        return httpx.Response(404, text="Not Found")

    with pytest.raises(CaptionError, match="model not found: org/model"):
        _captioner(handler).caption(b"img")


def test_empty_caption_is_an_error():
    def handler(request):
        return httpx.Response(200, json=[{"generated_text": "   "}])

    with pytest.raises(CaptionError, match="empty caption"):
        _captioner(handler).caption(b"img")


def test_unexpected_payload():
    def handler(request):
        return httpx.Response(200, json={"generated_text": "tomato"})

    with pytest.raises(CaptionError, match="no results"):
        _captioner(handler).caption(b"img")


def test_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CaptionError, match="API request failed"):
        _captioner(handler).caption(b"img")


def test_missing_token_never_calls_the_api():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[{"generated_text": "tomato"}])

    with pytest.raises(CaptionError, match="HUGGINGFACE_API_KEY"):
        _captioner(handler, token="").caption(b"img")
    assert calls == []


def test_error_message_names_provider():
    err = CaptionError("huggingface", "boom")
    assert str(err) == "vision detection error (huggingface): boom"


def test_confidence_heuristic():
    assert confidence_for(0) == 0.3
    assert confidence_for(1) == 0.6
    assert confidence_for(2) == 0.85
    assert confidence_for(7) == 0.85


def test_build_captioner_defaults_to_huggingface():
    captioner = build_captioner(Settings(huggingface_api_key="k", caption_model_id="org/other"))
    assert isinstance(captioner, HuggingFaceCaptioner)
    assert captioner.model_id == "org/other"


def test_non_numeric_estimated_time():
    def handler(request):
        return httpx.Response(503, json={"error": "loading", "estimated_time": "soon"})

    with pytest.raises(CaptionError, match="estimated time: soon"):
        _captioner(handler).caption(b"img")


def test_close_only_closes_owned_client():
    injected = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    HuggingFaceCaptioner("t", client=injected).close()
    assert not injected.is_closed

    with HuggingFaceCaptioner("t") as captioner:
        assert not captioner.client.is_closed
    assert captioner.client.is_closed
