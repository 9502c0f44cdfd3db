"""
Parse an Authorization header value into Credentials.

The value is first split into lexemes, then a small state machine assembles
them into a Credentials object:

    Basic 789ab824bed8db7da11b2=       -> [Basic, 789ab824bed8db7da11b2=]
    Digest realm="api", nonce="9c58"   -> [Digest, realm="api", nonce="9c58"]

Only one scheme's credentials are read from a header value.
"""

from enum import Enum
from typing import List, Optional

from wwwauth.challenge import AuthParam, Credentials
from wwwauth.grammar import (
    TCHAR,
    TOKEN68_CHAR,
    is_token,
    is_token68,
    split_auth_param,
)

# Schemes whose credentials are defined as auth-params only; a bare token
# after these is a malformed parameter, not a token68.
PARAM_ONLY_SCHEMES = frozenset(["digest"])


class ReadStatus(Enum):
    "Tokenizer states."
    BEGIN = "begin"
    SCHEMA = "schema"
    TOKEN68 = "token68"
    AUTHPARAMS = "authparams"


def extract_credentials(value: Optional[str]) -> Optional[Credentials]:
    """
    Parse value as RFC7235 credentials. Returns None when value is empty or
    doesn't follow the grammar; never raises.
    """
    if not value:
        return None
    credentials: Optional[Credentials] = None
    status = ReadStatus.BEGIN

    for lexeme in tokenize(value):
        if status is ReadStatus.BEGIN:
            if not is_token(lexeme):
                return None
            credentials = Credentials(lexeme)
            status = ReadStatus.SCHEMA

        elif status is ReadStatus.SCHEMA:
            assert credentials is not None
            if (
                is_token68(lexeme)
                and credentials.schema.lower() not in PARAM_ONLY_SCHEMES
            ):
                if not credentials.set_token68(lexeme):
                    return None
                status = ReadStatus.TOKEN68
            else:
                param = extract_auth_param(lexeme)
                if param is None:
                    return None
                credentials.add_auth_param(param)
                status = ReadStatus.AUTHPARAMS

        elif status is ReadStatus.TOKEN68:
            # token68 has to be the last thing in the header
            return None

        elif status is ReadStatus.AUTHPARAMS:
            assert credentials is not None
            param = extract_auth_param(lexeme)
            if param is None:
                return None
            credentials.add_auth_param(param)

    return credentials


def extract_auth_param(lexeme: str) -> Optional[AuthParam]:
    "An AuthParam for lexeme, or None if it isn't an auth-param."
    split = split_auth_param(lexeme)
    if split is None:
        return None
    return AuthParam.parsed(*split)


def tokenize(value: str) -> List[str]:
    """
    Split a header value into lexemes.

    At each position the longest auth-param is preferred, then the longest
    token68, then the longest token. Characters that can't begin any of these
    (whitespace, commas, stray quotes) separate lexemes and are dropped.
    """
    lexemes = []
    pos = 0
    end = len(value)
    while pos < end:
        if value[pos] not in TCHAR and value[pos] not in TOKEN68_CHAR:
            pos += 1
            continue
        stop = (
            _scan_auth_param(value, pos)
            or _scan_token68(value, pos)
            or _scan_run(value, pos, TCHAR)
        )
        lexemes.append(value[pos:stop].strip())
        pos = stop
    return lexemes


def _scan_run(value: str, pos: int, chars: frozenset) -> int:
    "End of the run of chars starting at pos."
    end = len(value)
    while pos < end and value[pos] in chars:
        pos += 1
    return pos


def _scan_auth_param(value: str, pos: int) -> int:
    "End of the auth-param starting at pos, or 0 if there isn't one."
    key_end = _scan_run(value, pos, TCHAR)
    if key_end == pos or key_end >= len(value) or value[key_end] != "=":
        return 0
    val_start = key_end + 1
    if val_start >= len(value):
        return 0
    if value[val_start] in TCHAR:
        return _scan_run(value, val_start, TCHAR)
    if value[val_start] == '"':
        close = value.find('"', val_start + 1)
        if close != -1:
            return close + 1
    return 0


def _scan_token68(value: str, pos: int) -> int:
    "End of the token68 starting at pos, or 0 if there isn't one."
    body_end = _scan_run(value, pos, TOKEN68_CHAR)
    if body_end == pos:
        return 0
    end = len(value)
    while body_end < end and value[body_end] == "=":
        body_end += 1
    return body_end
