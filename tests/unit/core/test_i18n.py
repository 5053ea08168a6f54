import pytest
from starlette.requests import Request

from src.utils.i18n import get_request_language, get_translated_message


def _request(query: bytes = b"", headers=None) -> Request:
    return Request(
        {
            "type": "http",
            "query_string": query,
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        }
    )


@pytest.mark.parametrize(
    "key, lang, expected",
    [
        ("token_revoked", "en", "token has been revoked"),
        ("invalid_credentials", "es", "credenciales inválidas"),
        ("token_revoked", "xx", "token has been revoked"),
    ],
)
def test_translations(key, lang, expected):
    assert get_translated_message(key, lang) == expected


def test_unknown_key_falls_back_to_key():
    assert get_translated_message("no_such_key", "en") == "no_such_key"


def test_query_parameter_wins():
    request = _request(b"lang=es", {"Accept-Language": "en"})

    assert get_request_language(request) == "es"


def test_accept_language_with_region_and_quality():
    request = _request(headers={"Accept-Language": "fr-FR;q=0.9, es-MX;q=0.8"})

    assert get_request_language(request) == "es"


def test_default_language():
    assert get_request_language(_request()) == "en"
