from __future__ import annotations

from io import BytesIO
from urllib.parse import parse_qs

from werkzeug.wrappers import Request

OVERRIDABLE_METHODS = frozenset({"PUT", "PATCH", "DELETE"})
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class MethodOverrideMiddleware:
    """Let HTML forms reach PUT and DELETE routes through POST.

    The intended method comes from the ``X-HTTP-Method-Override`` header, a
    ``_method`` query parameter or a ``_method`` form field. Only POST
    requests are rewritten.
    """

    def __init__(self, app) -> None:
        self.app = app

    def __call__(self, environ, start_response):
        if environ.get("REQUEST_METHOD", "").upper() == "POST":
            method = environ.get("HTTP_X_HTTP_METHOD_OVERRIDE")
            if not method:
                query = parse_qs(environ.get("QUERY_STRING", ""))
                method = (query.get("_method") or [""])[0]
            if not method:
                method = _form_method(environ)
            method = method.upper()
            if method in OVERRIDABLE_METHODS:
                environ["REQUEST_METHOD"] = method
        return self.app(environ, start_response)


def _form_method(environ) -> str:
    content_type = environ.get("CONTENT_TYPE", "")
    if not content_type.startswith(FORM_CONTENT_TYPES):
        return ""

    request = Request(environ)
    body = request.get_data(cache=True, parse_form_data=False)
    method = request.form.get("_method", "")

    # The body was consumed; hand the application a fresh stream over it.
    environ["wsgi.input"] = BytesIO(body)
    environ["CONTENT_LENGTH"] = str(len(body))
    return method


__all__ = ["MethodOverrideMiddleware"]
