from pathlib import Path
from typing import Dict, List

import pytest

from fbclient.core.envelope import ResponseEnvelope
from fbclient.core.exceptions import (
    FacebookApiError,
    FacebookOAuthError,
    FacebookRateLimitError,
    ProtocolError,
)
from fbclient.core.fixtures import load_response_fixture
from fbclient.graph.response import PARAM_ACCESS_TOKEN, classify_error, interpret_response, parse_oauth_body
from fbclient.graph.schemas import GraphCollection, GraphObject, OAuthAccessToken

FIXTURES = Path(__file__).parent / "fixtures" / "responses"


def _envelope(body: str, content_type: str = "text/javascript; charset=UTF-8", **kwargs) -> ResponseEnvelope:
    kwargs.setdefault("status_code", 200)
    kwargs.setdefault("response_uri", "https://graph.facebook.com/me")
    return ResponseEnvelope(content_type=content_type, body=body, **kwargs)


def test_classify_legacy_oauth_error():
    error = classify_error("api.facebook.com", {"error_code": "190", "error_msg": "Invalid OAuth token"})
    assert isinstance(error, FacebookOAuthError)
    assert error.message == "Invalid OAuth token"
    assert error.code == "190"
    assert str(error) == "(190) Invalid OAuth token"


@pytest.mark.parametrize(
    "result",
    [
        {"error_code": 4, "error_msg": "Application request limit reached"},
        {"error_code": "API_EC_TOO_MANY_CALLS"},
        {"error_code": 17, "error_msg": "User request limit reached"},
    ],
)
def test_classify_legacy_rate_limit(result):
    assert isinstance(classify_error("api-read.facebook.com", result), FacebookRateLimitError)


def test_classify_legacy_generic_error():
    error = classify_error("API.beta.facebook.com", {"error_code": 100, "error_msg": "Invalid parameter"})
    assert type(error) is FacebookApiError
    assert error.code == "100"


def test_classify_graph_error_object():
    error = classify_error("graph.facebook.com", {"error": {"type": "OAuthException", "message": "Token expired"}})
    assert isinstance(error, FacebookOAuthError)
    assert error.message == "Token expired"
    assert error.code == "OAuthException"

    error = classify_error("graph.facebook.com", {"error": {"type": "API_EC_TOO_MANY_CALLS", "message": "Slow down"}})
    assert isinstance(error, FacebookRateLimitError)

    error = classify_error("graph.facebook.com", {"error": {"type": "Exception", "message": "Page request limit reached"}})
    assert isinstance(error, FacebookRateLimitError)

    error = classify_error("graph.facebook.com", {"error": {"type": "GraphMethodException", "message": "Unsupported"}})
    assert type(error) is FacebookApiError
    assert error.code == "GraphMethodException"


def test_classify_graph_error_number():
    error = classify_error("graph.facebook.com", {"error": 190, "error_description": "Bad code"})
    assert isinstance(error, FacebookOAuthError)
    assert error.code == PARAM_ACCESS_TOKEN

    error = classify_error("graph.facebook.com", {"error": 100, "error_description": "Bad parameter"})
    assert type(error) is FacebookApiError
    assert error.code == "100"


@pytest.mark.parametrize(
    "host, result",
    [
        ("graph.facebook.com", [1, 2]),
        ("graph.facebook.com", "error"),
        ("graph.facebook.com", {"id": "4"}),
        ("graph.facebook.com", {"error": {"type": "", "message": "x"}}),
        ("graph.facebook.com", {"error": {"type": "OAuthException"}}),
        ("graph.facebook.com", {"error": 190}),
        ("graph.facebook.com", {"error": True, "error_description": "x"}),
        ("graph.facebook.com", {"error_code": "190"}),
        ("api.facebook.com", {"error": {"type": "OAuthException", "message": "x"}}),
    ],
)
def test_classify_without_error(host, result):
    assert classify_error(host, result) is None


def test_interpret_graph_json():
    envelope = load_response_fixture(FIXTURES, "graph_user.json")
    assert interpret_response(envelope) == {"id": "4", "name": "Mark Zuckerberg"}

    result = interpret_response(envelope, GraphObject)
    assert isinstance(result, GraphObject)
    assert result.id == "4"
    assert result.name == "Mark Zuckerberg"


def test_interpret_generic_shape():
    envelope = _envelope('[{"id":"1"},{"id":"2"}]')
    assert interpret_response(envelope, List[Dict[str, str]]) == [{"id": "1"}, {"id": "2"}]


def test_interpret_etag_wraps_headers():
    envelope = load_response_fixture(FIXTURES, "graph_user.json")
    result = interpret_response(envelope, contains_etag=True)
    assert result["body"] == {"id": "4", "name": "Mark Zuckerberg"}
    assert result["headers"]["etag"] == '"539feb8aee5c3d20a2ebacd02db380b27243b255"'


def test_interpret_not_modified():
    envelope = _envelope("", content_type="", status_code=304, headers={"etag": '"abc"'})
    assert interpret_response(envelope, contains_etag=True) == {"headers": {"etag": '"abc"'}, "body": None}

    with pytest.raises(ProtocolError):
        interpret_response(envelope)


def test_interpret_graph_error_raises_with_status():
    envelope = load_response_fixture(FIXTURES, "graph_oauth_error.json")
    with pytest.raises(FacebookOAuthError) as excinfo:
        interpret_response(envelope, GraphObject)
    assert excinfo.value.message == "Token expired"
    assert excinfo.value.status_code == 400

    envelope = load_response_fixture(FIXTURES, "graph_oauth_error_code.json")
    with pytest.raises(FacebookOAuthError) as excinfo:
        interpret_response(envelope)
    assert excinfo.value.code == PARAM_ACCESS_TOKEN
    assert excinfo.value.message == "Invalid verification code format."


def test_interpret_legacy_rate_limit():
    envelope = load_response_fixture(FIXTURES, "legacy_rate_limit.json")
    with pytest.raises(FacebookRateLimitError) as excinfo:
        interpret_response(envelope)
    assert excinfo.value.code == "API_EC_TOO_MANY_CALLS"
    assert excinfo.value.status_code == 200


def test_interpret_oauth_text_body():
    envelope = load_response_fixture(FIXTURES, "oauth_access_token.json")
    assert interpret_response(envelope) == {"access_token": "123456|abc", "expires": 5183999}

    token = interpret_response(envelope, OAuthAccessToken)
    assert isinstance(token, OAuthAccessToken)
    assert token.access_token == "123456|abc"
    assert token.expires == 5183999


def test_interpret_versioned_oauth_path():
    envelope = _envelope(
        "access_token=abc&expires=60",
        content_type="text/plain",
        response_uri="https://graph.facebook.com/v2.3/oauth/access_token?code=x",
    )
    assert interpret_response(envelope) == {"access_token": "abc", "expires": 60}


def test_parse_oauth_body_skips_malformed_pairs():
    assert parse_oauth_body("access_token=a&junk&x=1=2") == {"access_token": "a"}


@pytest.mark.parametrize(
    "envelope",
    [
        _envelope("hello", content_type="text/plain"),
        _envelope("access_token=a", content_type="text/plain", status_code=400,
                  response_uri="https://graph.facebook.com/oauth/access_token"),
        _envelope("<html></html>", content_type="text/html", status_code=502),
    ],
)
def test_interpret_unknown_content_is_protocol_error(envelope):
    with pytest.raises(ProtocolError) as excinfo:
        interpret_response(envelope)
    assert str(excinfo.value) == "Unknown facebook response."


def test_interpret_missing_envelope():
    with pytest.raises(ProtocolError):
        interpret_response(None)


def test_interpret_invalid_json_is_protocol_error():
    with pytest.raises(ProtocolError):
        interpret_response(_envelope("{not json"))


def test_interpret_shape_mismatch_is_protocol_error():
    with pytest.raises(ProtocolError) as excinfo:
        interpret_response(_envelope('{"data": "nope"}'), GraphCollection)
    assert excinfo.value.__cause__ is not None


def test_interpret_error_is_not_validated_against_shape():
    envelope = _envelope('{"error": {"type": "OAuthException", "message": "Expired"}}', status_code=400)
    with pytest.raises(FacebookOAuthError):
        interpret_response(envelope, GraphCollection)


def test_interpret_application_json_content_type():
    envelope = _envelope('{"data": [], "paging": {"next": "https://graph.facebook.com/4/feed?offset=2"}}',
                         content_type="application/json")
    result = interpret_response(envelope, GraphCollection)
    assert result.data == []
    assert result.paging.next == "https://graph.facebook.com/4/feed?offset=2"
