import pytest
import requests

from src.client.api import BackendClient
from src.core.errors import AuthError, ConflictError, NetworkError, ValidationError


class _Response:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def _client(response=None, error=None):
    session = _Session(response, error)
    return BackendClient("http://api.local/api/", timeout=3, session=session), session


@pytest.mark.unit
def test_signup_posts_camel_case_payload_and_returns_id():
    client, session = _client(_Response(201, {"message": "User registered successfully", "userId": 7}))
    assert client.signup("a@b.co", "A B", "abc123", "abc123") == 7

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "http://api.local/api/users/signup")
    assert kwargs["json"]["fullName"] == "A B"
    assert kwargs["json"]["confirmPassword"] == "abc123"
    assert kwargs["timeout"] == 3


@pytest.mark.unit
def test_signup_maps_conflict_and_validation_errors():
    client, _ = _client(_Response(400, {"message": "Email already in use"}))
    with pytest.raises(ConflictError):
        client.signup("a@b.co", "A", "abc123", "abc123")

    errors = [{"field": "password", "message": "Password must be at least 6 characters"}]
    client, _ = _client(_Response(400, {"errors": errors}))
    with pytest.raises(ValidationError) as exc:
        client.signup("a@b.co", "A", "abc", "abc")
    assert exc.value.errors == errors


@pytest.mark.unit
def test_login_success_and_rejection():
    body = {"token": "t", "user": {"id": 1, "email": "a@b.co", "fullName": "A"}}
    client, _ = _client(_Response(200, body))
    assert client.login("a@b.co", "abc123") == body

    client, _ = _client(_Response(400, {"message": "Invalid email or password"}))
    with pytest.raises(AuthError) as exc:
        client.login("a@b.co", "nope")
    assert exc.value.message == "Invalid email or password"


@pytest.mark.unit
def test_transport_failures_become_network_errors():
    client, _ = _client(error=requests.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        client.login("a@b.co", "abc123")

    client, _ = _client(_Response(503))
    with pytest.raises(NetworkError):
        client.signup("a@b.co", "A", "abc123", "abc123")


@pytest.mark.unit
def test_validate_token_sends_bearer_header_and_swallows_outage():
    client, session = _client(_Response(200, {"valid": True}))
    assert client.validate_token("tok") is True
    assert session.calls[0][2]["headers"] == {"Authorization": "Bearer tok"}

    client, _ = _client(_Response(401, {"error": "authentication_required"}))
    assert client.validate_token("tok") is False

    client, _ = _client(error=requests.Timeout("slow"))
    assert client.validate_token("tok") is False


@pytest.mark.unit
def test_me_returns_user_or_raises():
    client, _ = _client(_Response(200, {"user": {"id": 3}}))
    assert client.me("tok") == {"id": 3}

    client, _ = _client(_Response(401, {"error": "authentication_required"}))
    with pytest.raises(AuthError):
        client.me("tok")
