"""
Request authentication.

An Authenticator looks at a request before any route-specific code runs and
returns an AuthOutcome. Allowed lets the request through. Denied tells the
dispatcher what to send instead:

- ``body``: an HttpError (sent as-is, with its own status), any other
  JSON-encodable payload (sent as JSON), or None (no body);
- ``status``: the HTTP status to use, 401 unless set;
- ``headers``: extra response headers, as a name -> set of values map.
"""

from abc import ABC, abstractmethod
from configparser import SectionProxy
import hmac
from typing import Any, Mapping, Optional, TYPE_CHECKING

from typing_extensions import Protocol

from wwwauth.type import HeaderMultiMapType

if TYPE_CHECKING:
    from wwwauth.request import HttpRequest  # pylint: disable=cyclic-import

DEFAULT_DENIED_STATUS = 401


class AuthOutcome:
    "The result of authenticating a request. True when the request may proceed."

    allowed: bool = False

    def __bool__(self) -> bool:
        return self.allowed


class Allowed(AuthOutcome):
    allowed = True

    def __init__(self, user: Optional[str] = None) -> None:
        self.user = user

    def __repr__(self) -> str:
        return f"<Allowed user={self.user!r}>"


class Denied(AuthOutcome):
    allowed = False

    def __init__(
        self,
        status: int = DEFAULT_DENIED_STATUS,
        body: Any = None,
        headers: Optional[HeaderMultiMapType] = None,
    ) -> None:
        self.status = status
        self.body = body
        self.headers: HeaderMultiMapType = {}
        for name, values in (headers or {}).items():
            for value in values:
                self.add_header(name, value)

    def add_header(self, name: str, value: str) -> None:
        "Add a value to the named header; values already present are kept."
        self.headers.setdefault(name, set()).add(value)

    def __repr__(self) -> str:
        return f"<Denied {self.status} headers={sorted(self.headers)}>"


class Authenticator(ABC):
    """
    Decides whether a request may proceed.

    Implementations should be immutable once built; one instance serves every
    request, possibly from several workers at once.
    """

    @abstractmethod
    def authenticate_request(self, request: "HttpRequest") -> AuthOutcome:
        """
        Authenticate request. Must not raise for anything the client sent;
        bad or missing credentials are a Denied outcome.
        """


class NullAuthenticator(Authenticator):
    "Lets everything through."

    def authenticate_request(self, request: "HttpRequest") -> AuthOutcome:
        return Allowed()


class PasswordMatcher(Protocol):
    """
    Checks a username and password against a credential store.

    Called concurrently for different requests, so implementations must be
    safe for that.
    """

    def match_password(
        self, realm: str, username: str, password: str, request: "HttpRequest"
    ) -> bool: ...


class StaticPasswordMatcher:
    """
    A PasswordMatcher backed by a fixed username -> password mapping.

    Unknown users and wrong passwords look the same to the caller.
    """

    def __init__(self, users: Mapping[str, str]) -> None:
        self._users = dict(users)

    @classmethod
    def from_config(cls, section: SectionProxy) -> "StaticPasswordMatcher":
        "Build from a config section of 'username = password' lines."
        return cls({name: section[name] for name in section})

    def match_password(
        self, realm: str, username: str, password: str, request: "HttpRequest"
    ) -> bool:
        expected = self._users.get(username)
        if expected is None:
            # same work as a real comparison
            hmac.compare_digest(password.encode("utf-8"), password.encode("utf-8"))
            return False
        return hmac.compare_digest(
            password.encode("utf-8"), expected.encode("utf-8")
        )

    def __len__(self) -> int:
        return len(self._users)
