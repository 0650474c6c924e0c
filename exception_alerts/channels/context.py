"""
Turn an exception class plus call options into a headline and data mapping.

The request environment is a WSGI-style mapping. Two extra keys let the
framework integration pass more than the raw request:

  exception_alerts.handler         object with ``name``/``action`` (and
                                   optionally ``params``, ``full_path``)
  exception_alerts.exception_data  mapping attached to the exception earlier
"""

from typing import Any, Mapping, Optional

from exception_alerts.channels import Headline, NotificationOptions

HANDLER_KEY = "exception_alerts.handler"
EXCEPTION_DATA_KEY = "exception_alerts.exception_data"

_VOWELS = "aeiou"


def count_word(class_name: str, accumulated_errors_count: int = 0) -> str:
    """'3' for repeated errors, otherwise the English article for *class_name*."""
    if accumulated_errors_count > 1:
        return str(accumulated_errors_count)
    if class_name and class_name[0].lower() in _VOWELS:
        return "An"
    return "A"


def request_uri(env: Mapping[str, Any]) -> str:
    uri = env.get("REQUEST_URI")
    if uri:
        return uri
    path = env.get("PATH_INFO") or ""
    query = env.get("QUERY_STRING")
    return f"{path}?{query}" if query else path


def request_info(env: Mapping[str, Any]) -> dict[str, Any]:
    """Request summary entries, skipping anything null or empty."""
    handler = env.get(HANDLER_KEY)
    uri = request_uri(env)
    scheme = env.get("wsgi.url_scheme") or env.get("rack.url_scheme")
    host = env.get("HTTP_HOST")

    url = uri
    if scheme and host:
        full_path = getattr(handler, "full_path", None) or uri
        url = f"{scheme}://{host}{full_path}"

    info = {
        "Request Method": env.get("REQUEST_METHOD"),
        "Request URL": url,
        "Request Path": env.get("PATH_INFO"),
        "Request Query": env.get("QUERY_STRING"),
        "Request IP": env.get("REMOTE_ADDR"),
        "Request Host": host,
        "Request User Agent": env.get("HTTP_USER_AGENT"),
        "Parameters": getattr(handler, "params", None),
    }
    return {k: v for k, v in info.items() if v is not None and v != "" and v != {}}


def _headline(class_name: str, options: NotificationOptions) -> Headline:
    word = count_word(class_name, options.accumulated_errors_count)
    env = options.env
    if env is None:
        return Headline(count_word=word, class_name=class_name)

    handler = env.get(HANDLER_KEY)
    handler_label: Optional[str] = None
    if handler is not None:
        handler_label = f"{handler.name}#{handler.action}"

    return Headline(
        count_word=word,
        class_name=class_name,
        request=f"{env.get('REQUEST_METHOD')} <{request_uri(env)}>",
        handler=handler_label,
    )


def extract(class_name: str, options: NotificationOptions) -> tuple[Headline, dict[str, Any]]:
    """
    Build the headline and the (unredacted) data for one occurrence.

    With a request, data is the ambient exception data, then caller data,
    then the request summary; later keys win.
    """
    headline = _headline(class_name, options)
    env = options.env

    if env is None:
        return headline, {str(k): v for k, v in options.data.items()}

    data: dict[str, Any] = {}
    ambient = env.get(EXCEPTION_DATA_KEY)
    if isinstance(ambient, Mapping):
        data.update((str(k), v) for k, v in ambient.items())
    data.update((str(k), v) for k, v in options.data.items())
    data.update(request_info(env))
    return headline, data
