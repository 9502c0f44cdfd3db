"""
HTTP errors.

An HttpError carries the status code it should be sent with, and can be sent
to the client as a JSON body directly.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional


class HttpError(Exception):
    "An error that maps onto an HTTP response."

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message or status_phrase(status)
        Exception.__init__(self, self.message)

    def json_encode(self) -> Dict[str, Any]:
        return {"message": self.message, "httpcode": self.status}

    def __repr__(self) -> str:
        return f"<HttpError {self.status} {self.message!r}>"


def status_phrase(status: int) -> str:
    "The reason phrase for status, or an empty string if it's unknown."
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""
