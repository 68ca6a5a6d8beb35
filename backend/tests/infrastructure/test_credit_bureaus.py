"""Tests for the credit bureau adapters."""

import pytest
import requests
from infrastructure.config import Settings
from infrastructure.credit import (
    CreditBureauError,
    HttpCreditBureau,
    MockCreditBureau,
    create_credit_bureau,
)


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class ScriptedPost:
    """Replays responses (or raises exceptions) in order and records each call."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def __call__(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def bureau(monkeypatch):
    monkeypatch.setattr(HttpCreditBureau, "BACKOFF_FACTOR", 0)
    return HttpCreditBureau("https://bureau.test/v1/", api_key="secret", timeout=3)


class TestMockCreditBureau:
    """Test the deterministic development bureau."""

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [("123-45-6789", 780), ("123456781", 620), ("123456780", 700), ("abc", 700), ("", 700)],
    )
    def test_score_from_last_digit(self, run, identifier, expected):
        assert run(MockCreditBureau().fetch_credit_score(identifier)) == expected


class TestCreditBureauFactory:
    def test_mock_provider(self):
        settings = Settings(_env_file=None, credit_bureau_provider="mock")
        assert isinstance(create_credit_bureau(settings), MockCreditBureau)

    def test_http_provider(self):
        settings = Settings(
            _env_file=None,
            credit_bureau_provider="HTTP",
            credit_bureau_url="https://bureau.test",
        )
        assert isinstance(create_credit_bureau(settings), HttpCreditBureau)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown credit bureau provider"):
            create_credit_bureau(Settings(_env_file=None, credit_bureau_provider="experian-direct"))


class TestHttpCreditBureau:
    """Test the HTTP client with a scripted session."""

    def test_requires_url(self):
        with pytest.raises(CreditBureauError, match="not configured"):
            HttpCreditBureau("")

    def test_api_key_header(self, bureau):
        assert bureau.session.headers["X-API-Key"] == "secret"
        assert bureau.base_url == "https://bureau.test/v1"

    def test_returns_score(self, run, bureau, monkeypatch):
        post = ScriptedPost(FakeResponse(200, {"score": "712"}))
        monkeypatch.setattr(bureau.session, "post", post)

        assert run(bureau.fetch_credit_score("123456789")) == 712
        assert post.calls == [("https://bureau.test/v1/scores", {"identifier": "123456789"}, 3)]

    def test_retries_on_unavailable(self, run, bureau, monkeypatch):
        post = ScriptedPost(FakeResponse(503, text="busy"), FakeResponse(200, {"score": 690}))
        monkeypatch.setattr(bureau.session, "post", post)

        assert run(bureau.fetch_credit_score("1")) == 690
        assert len(post.calls) == 2

    def test_retries_on_connection_error(self, run, bureau, monkeypatch):
        post = ScriptedPost(requests.ConnectionError("reset"), FakeResponse(200, {"score": 650}))
        monkeypatch.setattr(bureau.session, "post", post)

        assert run(bureau.fetch_credit_score("1")) == 650

    def test_gives_up_after_retries(self, run, bureau, monkeypatch):
        post = ScriptedPost(*[FakeResponse(502, text="bad gateway")] * 3)
        monkeypatch.setattr(bureau.session, "post", post)

        with pytest.raises(CreditBureauError) as exc_info:
            run(bureau.fetch_credit_score("1"))
        assert exc_info.value.status_code == 502
        assert len(post.calls) == 3

    def test_client_error_is_not_retried(self, run, bureau, monkeypatch):
        post = ScriptedPost(FakeResponse(400, text="bad identifier"))
        monkeypatch.setattr(bureau.session, "post", post)

        with pytest.raises(CreditBureauError, match="400"):
            run(bureau.fetch_credit_score("1"))
        assert len(post.calls) == 1

    def test_malformed_body(self, run, bureau, monkeypatch):
        monkeypatch.setattr(bureau.session, "post", ScriptedPost(FakeResponse(200, {"rating": "A"})))
        with pytest.raises(CreditBureauError, match="Malformed"):
            run(bureau.fetch_credit_score("1"))
