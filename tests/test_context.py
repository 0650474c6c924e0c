from types import SimpleNamespace

import pytest

from exception_alerts.channels import NotificationOptions
from exception_alerts.channels.context import (
    EXCEPTION_DATA_KEY,
    HANDLER_KEY,
    count_word,
    extract,
    request_info,
)


@pytest.mark.parametrize(
    "class_name, expected",
    [
        ("ArgumentError", "An"),
        ("IOError", "An"),
        ("ioError", "An"),
        ("UnicodeError", "An"),
        ("EOFError", "An"),
        ("OSError", "An"),
        ("KeyError", "A"),
        ("ZeroDivisionError", "A"),
        ("YError", "A"),
    ],
)
def test_count_word_picks_article_from_first_letter(class_name, expected) -> None:
    assert count_word(class_name) == expected
    assert count_word(class_name, 1) == expected


@pytest.mark.parametrize("count", [2, 3, 17])
def test_count_word_uses_count_for_repeated_errors(count) -> None:
    assert count_word("IOError", count) == str(count)
    assert count_word("KeyError", count) == str(count)


def test_background_headline_and_data() -> None:
    data = {"job": "nightly"}
    headline, extracted = extract("ArgumentError", NotificationOptions(data=data))

    assert str(headline) == "An `ArgumentError` occurred in background"
    assert extracted == {"job": "nightly"}
    assert extracted is not data


def test_background_headline_without_data() -> None:
    headline, data = extract("KeyError", NotificationOptions())

    assert str(headline) == "A `KeyError` occurred in background"
    assert data == {}


def test_accumulated_count_overrides_article() -> None:
    headline, _ = extract("IOError", NotificationOptions(accumulated_errors_count=3))
    assert str(headline) == "3 `IOError` occurred in background"


def test_request_headline_without_handler() -> None:
    env = {"REQUEST_METHOD": "GET", "REQUEST_URI": "/x"}
    headline, data = extract("RuntimeError", NotificationOptions(env=env))

    assert str(headline) == "A `RuntimeError` occurred while `GET </x>`"
    assert "was processed by" not in str(headline)
    assert data == {"Request Method": "GET", "Request URL": "/x"}


def test_request_headline_with_handler() -> None:
    handler = SimpleNamespace(name="users", action="show")
    env = {"REQUEST_METHOD": "POST", "REQUEST_URI": "/users/1", HANDLER_KEY: handler}
    headline, _ = extract("ValueError", NotificationOptions(env=env))

    assert str(headline) == (
        "A `ValueError` occurred while `POST </users/1>` was processed by `users#show`"
    )


def test_uri_is_rebuilt_from_path_and_query() -> None:
    env = {"REQUEST_METHOD": "GET", "PATH_INFO": "/search", "QUERY_STRING": "q=1"}
    headline, data = extract("KeyError", NotificationOptions(env=env))

    assert str(headline).endswith("occurred while `GET </search?q=1>`")
    assert data["Request URL"] == "/search?q=1"
    assert data["Request Path"] == "/search"
    assert data["Request Query"] == "q=1"


def test_request_info_builds_full_url_and_skips_empty_values() -> None:
    handler = SimpleNamespace(
        name="users", action="show", params={"id": "1"}, full_path="/users/1?tab=a"
    )
    env = {
        "REQUEST_METHOD": "GET",
        "REQUEST_URI": "/users/1?tab=a",
        "PATH_INFO": "/users/1",
        "QUERY_STRING": "",
        "wsgi.url_scheme": "https",
        "HTTP_HOST": "example.com",
        "REMOTE_ADDR": "10.0.0.7",
        "HTTP_USER_AGENT": None,
        HANDLER_KEY: handler,
    }

    assert request_info(env) == {
        "Request Method": "GET",
        "Request URL": "https://example.com/users/1?tab=a",
        "Request Path": "/users/1",
        "Request IP": "10.0.0.7",
        "Request Host": "example.com",
        "Parameters": {"id": "1"},
    }


def test_request_data_merge_order() -> None:
    env = {
        "REQUEST_METHOD": "GET",
        "REQUEST_URI": "/x",
        EXCEPTION_DATA_KEY: {"foo": "bar", "user_id": 1},
    }
    options = NotificationOptions(env=env, data={"user_id": 5, "Request Method": "spoofed"})
    _, data = extract("KeyError", options)

    assert list(data) == ["foo", "user_id", "Request Method", "Request URL"]
    assert data["user_id"] == 5
    assert data["Request Method"] == "GET"


def test_data_keys_are_strings() -> None:
    _, data = extract("KeyError", NotificationOptions(data={1: "one"}))
    assert data == {"1": "one"}


def test_options_coerce_from_mapping() -> None:
    options = NotificationOptions.coerce(
        {"data": {"a": 1}, "accumulated_errors_count": "2", "channel": "#ops"}
    )

    assert options.data == {"a": 1}
    assert options.accumulated_errors_count == 2
    assert options.overrides == {"channel": "#ops"}
    assert NotificationOptions.coerce(None) == NotificationOptions()
    assert NotificationOptions.coerce(options) is options


def test_headline_render_escapes_only_dynamic_parts() -> None:
    headline, _ = extract("My_Error", NotificationOptions())
    rendered = headline.render(lambda s: s.replace("_", "\\_"))

    assert rendered == "A `My\\_Error` occurred in background"
