"""
Challenges and credentials, as described in RFC7235 Section 2.1:

    challenge   = auth-scheme [ 1*SP ( token68 / #auth-param ) ]
    credentials = auth-scheme [ 1*SP ( token68 / #auth-param ) ]

A challenge (or credentials) carries either a token68 or a list of
auth-params, never both. For example, ``Basic 789ab824bed8db7da11b2=`` has a
token68, while ``Digest realm="api", nonce="9c58"`` has two auth-params.
"""

from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from wwwauth.grammar import is_token, is_token68


def _valid_token68(token68: Any) -> bool:
    return isinstance(token68, str) and is_token68(token68)


class AuthParam:
    """
    An immutable auth-param: ``key="value"``.

    Built directly, the value is prepared for serialization (backslashes and
    double quotes are escaped as quoted-pairs). Use AuthParam.parsed() for
    values taken from a client's header, which strips surrounding double
    quotes instead.
    """

    __slots__ = ("_key", "_value")

    def __init__(self, key: str, value: str) -> None:
        self._set(key, value.replace("\\", "\\\\").replace('"', '\\"'))

    @classmethod
    def parsed(cls, key: str, value: str) -> "AuthParam":
        "An auth-param whose value was extracted from a header."
        if len(value) > 1 and value[0] == value[-1] == '"':
            value = value[1:-1]
        param = cls.__new__(cls)
        param._set(key, value)  # pylint: disable=protected-access
        return param

    def _set(self, key: str, value: str) -> None:
        if not is_token(key):
            raise ValueError(f"auth-param key {key!r} is not a token")
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: Any) -> bool:
        return bool(
            isinstance(other, AuthParam)
            and self.key == other.key
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.key, self.value))

    def __str__(self) -> str:
        return f'{self.key}="{self.value}"'

    def __repr__(self) -> str:
        return f"<AuthParam {self}>"


class Challenge:
    """
    A server challenge: an authentication scheme plus either a token68 or an
    ordered list of auth-params.

    The mutators return False (and change nothing) when asked to set one form
    while the other is populated, or to set a token68 that isn't one.
    """

    def __init__(
        self,
        schema: str,
        token68: Optional[str] = None,
        auth_params: Optional[Sequence[Optional[AuthParam]]] = None,
    ) -> None:
        if not is_token(schema):
            raise ValueError(f"auth-scheme {schema!r} is not a token")
        if token68 is not None and not _valid_token68(token68):
            raise ValueError(f"{token68!r} is not a token68")
        if auth_params and token68 is not None:
            raise ValueError("a challenge has either a token68 or auth-params")
        self._schema = schema
        self._token68: Optional[str] = token68
        self._auth_params: List[Optional[AuthParam]] = list(auth_params or [])

    @property
    def schema(self) -> str:
        return self._schema

    @property
    def token68(self) -> Optional[str]:
        return self._token68

    @property
    def auth_params(self) -> Optional[List[Optional[AuthParam]]]:
        "A copy of the auth-params, or None when there are none."
        if not self._auth_params:
            return None
        return list(self._auth_params)

    def set_token68(self, token68: Optional[str]) -> bool:
        if self._auth_params:
            return False
        if token68 is not None and not _valid_token68(token68):
            return False
        self._token68 = token68
        return True

    def set_auth_params(self, *auth_params: Optional[AuthParam]) -> bool:
        if self._token68 is not None:
            return False
        self._auth_params = list(auth_params)
        return True

    def add_auth_param(
        self, param: Union[AuthParam, str], value: Optional[str] = None
    ) -> bool:
        """
        Append an auth-param, given either as an AuthParam or as a key and a
        value to be serialized.
        """
        if self._token68 is not None:
            return False
        if not isinstance(param, AuthParam):
            param = AuthParam(param, value or "")
        self._auth_params.append(param)
        return True

    def json_encode(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"schema": self.schema}
        if self._token68 is not None:
            out["token68"] = self._token68
        elif self._auth_params:
            out["auth_params"] = {p.key: p.value for p in self._auth_params if p}
        return out

    def __eq__(self, other: Any) -> bool:
        return bool(
            self.__class__ == other.__class__
            and self.schema == other.schema
            and self.token68 == other.token68
            and self._auth_params == other._auth_params
        )

    def __str__(self) -> str:
        out = [self.schema]
        if self._token68 is not None:
            out.append(f" {self._token68}")
        else:
            first = True
            for param in self._auth_params:
                if param is None:
                    continue
                out.append(f" {param}" if first else f", {param}")
                first = False
        return "".join(out)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self}>"


class Credentials(Challenge):
    """
    Client credentials, as sent in the Authorization header. Same shape as a
    Challenge.
    """

    def get_auth_param(self, key: str) -> Optional[str]:
        "The value of the first auth-param named key (case-insensitive)."
        key = key.lower()
        for param in self._auth_params:
            if param is not None and param.key.lower() == key:
                return param.value
        return None


class WwwAuthenticateHeader:
    """
    The WWW-Authenticate header (RFC7235 Section 4.1): ``1#challenge``.

    Challenges keep their insertion order; None entries are skipped when
    serializing.
    """

    name = "WWW-Authenticate"

    def __init__(self, *challenges: Optional[Challenge]) -> None:
        self.challenges: List[Optional[Challenge]] = list(challenges)

    def add_challenge(self, challenge: Optional[Challenge]) -> None:
        self.challenges.append(challenge)

    def __iter__(self) -> Iterator[Optional[Challenge]]:
        return iter(self.challenges)

    def __len__(self) -> int:
        return len(self.challenges)

    def __str__(self) -> str:
        return ", ".join(str(ch) for ch in self.challenges if ch is not None)
