"""
The 'Basic' HTTP authentication scheme (RFC7617).

    <https://tools.ietf.org/html/rfc7617>
    <https://tools.ietf.org/html/rfc7235>

The client sends ``Authorization: Basic <token68>``, where the token68 is the
base64 encoding of ``user-id ":" password``. Requests without valid
credentials get a 401 with a challenge like:

    WWW-Authenticate: Basic realm="api", charset="UTF-8"
"""

import base64
import binascii
from typing import Optional, Tuple, TYPE_CHECKING

from wwwauth.authenticator import (
    Allowed,
    AuthOutcome,
    Authenticator,
    Denied,
    PasswordMatcher,
)
from wwwauth.challenge import AuthParam, Challenge
from wwwauth.tokenizer import extract_credentials

if TYPE_CHECKING:
    from wwwauth.request import HttpRequest  # pylint: disable=cyclic-import

AUTHORIZATION_HEADER = "Authorization"
AUTHENTICATE_HEADER = "WWW-Authenticate"
SCHEME = "Basic"
DEFAULT_CHARSET = "UTF-8"


class BasicAuthenticator(Authenticator):
    """
    Authenticate requests with HTTP Basic.

    ``password_matcher`` checks the decoded username and password; its answer
    is the authenticator's answer. ``charset`` is used to decode the
    credentials and is advertised in the challenge. RFC7617 only allows
    UTF-8, but this isn't enforced.
    """

    def __init__(
        self,
        realm: str,
        password_matcher: PasswordMatcher,
        charset: str = DEFAULT_CHARSET,
    ) -> None:
        self.realm = realm
        self.charset = charset
        self.password_matcher = password_matcher
        self.challenge = Challenge(
            SCHEME,
            auth_params=[AuthParam("realm", realm), AuthParam("charset", charset)],
        )

    def authenticate_request(self, request: "HttpRequest") -> AuthOutcome:
        credentials = self.parse_authorization(request)
        if credentials is not None:
            username, password = credentials
            if self.password_matcher.match_password(
                self.realm, username, password, request
            ):
                return Allowed(username)
        return self.deny()

    def parse_authorization(self, request: "HttpRequest") -> Optional[Tuple[str, str]]:
        """
        Extract the username and password from the request's Authorization
        header. None if the header is missing or isn't usable Basic
        credentials.
        """
        header = request.get_header(AUTHORIZATION_HEADER)
        if header is None:
            return None
        credentials = extract_credentials(header)
        if credentials is None:
            return None
        if credentials.schema.lower() != SCHEME.lower():
            return None
        if credentials.token68 is None:
            return None
        return decode_basic_token(credentials.token68, self.charset)

    def deny(self) -> Denied:
        "A 401 carrying this authenticator's challenge."
        denied = Denied()
        denied.add_header(AUTHENTICATE_HEADER, str(self.challenge))
        return denied

    def __repr__(self) -> str:
        return f"<BasicAuthenticator {self.challenge}>"


def decode_basic_token(token68: str, charset: str = DEFAULT_CHARSET) -> Optional[Tuple[str, str]]:
    """
    Decode a Basic token68 into (username, password).

    Missing '=' padding is tolerated. The user-id can't contain ':', so the
    first colon separates it from the password; later colons belong to the
    password. Returns None if the token isn't base64, doesn't decode in
    charset, or has no colon.
    """
    padded = token68 + "=" * (-len(token68) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True).decode(charset)
    except (binascii.Error, UnicodeDecodeError, LookupError, ValueError):
        return None
    username, colon, password = decoded.partition(":")
    if not colon:
        return None
    return username, password


def encode_basic_token(username: str, password: str, charset: str = DEFAULT_CHARSET) -> str:
    "The token68 a client sends for username and password."
    return base64.b64encode(f"{username}:{password}".encode(charset)).decode("ascii")
