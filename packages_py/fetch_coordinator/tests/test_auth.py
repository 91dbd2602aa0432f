"""
Tests for auth handlers.
"""
import pytest

from fetch_coordinator import (
    BearerAuthHandler,
    CsrfTokenAuthHandler,
    NoAuthHandler,
    create_auth_handler,
)


class TestCsrfTokenAuthHandler:
    """Tests for CsrfTokenAuthHandler."""

    def test_adds_header(self) -> None:
        handler = CsrfTokenAuthHandler("csrf-token-secret")
        settings = {"method": "GET", "credentials": "include"}

        result = handler.authenticate(settings)

        assert result == {
            "method": "GET",
            "credentials": "include",
            "headers": {"X-CSRF-Token": "csrf-token-secret"},
        }

    def test_does_not_mutate_input(self) -> None:
        handler = CsrfTokenAuthHandler("secret")
        headers = {"Accept": "application/json"}
        settings = {"method": "POST", "headers": headers}

        result = handler.authenticate(settings)

        assert headers == {"Accept": "application/json"}
        assert "headers" in settings and settings["headers"] is headers
        assert result["headers"] == {"Accept": "application/json", "X-CSRF-Token": "secret"}

    def test_callback_wins(self) -> None:
        handler = CsrfTokenAuthHandler("static", get_token=lambda: "dynamic")
        assert handler.authenticate({})["headers"]["X-CSRF-Token"] == "dynamic"

    def test_callback_empty_falls_back(self) -> None:
        handler = CsrfTokenAuthHandler("static", get_token=lambda: None)
        assert handler.authenticate({})["headers"]["X-CSRF-Token"] == "static"

    def test_no_token_returns_settings(self) -> None:
        settings = {"method": "GET"}
        assert CsrfTokenAuthHandler().authenticate(settings) is settings

    def test_custom_header_name(self) -> None:
        handler = CsrfTokenAuthHandler("t", header_name="X-XSRF-TOKEN")
        assert handler.authenticate({})["headers"] == {"X-XSRF-TOKEN": "t"}


class TestBearerAuthHandler:
    """Tests for BearerAuthHandler."""

    def test_adds_bearer(self) -> None:
        result = BearerAuthHandler("abc").authenticate({"method": "GET"})
        assert result["headers"] == {"Authorization": "Bearer abc"}


class TestCreateAuthHandler:
    """Tests for create_auth_handler."""

    def test_none(self) -> None:
        assert isinstance(create_auth_handler(), NoAuthHandler)

    def test_csrf(self) -> None:
        assert isinstance(create_auth_handler("csrf", "t"), CsrfTokenAuthHandler)

    def test_bearer(self) -> None:
        assert isinstance(create_auth_handler("bearer", "t"), BearerAuthHandler)

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid auth type"):
            create_auth_handler("hmac")

    def test_identity(self) -> None:
        settings = {"method": "GET"}
        assert NoAuthHandler().authenticate(settings) is settings
