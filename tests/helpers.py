"""Shared test helpers: canned HTTP responses and request inspection."""
import json

import requests

MAINNET = "https://flare-api.flare.network/v1"
SONGBIRD = "https://songbird-api.flare.network/v1"
API_KEY = "test-api-key"


def make_response(status_code=200, body=None, reason="OK", url=MAINNET):
    """Build a real requests.Response with the given JSON (or raw bytes) body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode()
    return response


def sent_requests(session):
    """(method, url, json, headers) of every request sent through the session."""
    return [
        (c.kwargs["method"], c.kwargs["url"], c.kwargs["json"], c.kwargs["headers"])
        for c in session.request.call_args_list
    ]
