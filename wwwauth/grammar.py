"""
Token grammar for HTTP authentication headers.

Classifies a single lexical candidate as a ``token``, a ``token68`` or an
``auth-param``, as defined by RFC7235 Section 2.1:

    auth-param     = token BWS "=" BWS ( token / quoted-string )
    token          = 1*tchar
    token68        = 1*( ALPHA / DIGIT / "-" / "." / "_" / "~" / "+" / "/" ) *"="

Lexemes produced by the tokenizer never carry whitespace, so the auth-param
check here is the strict ``token "=" ( token / quoted-string )`` form, where a
quoted-string is anything but a double quote between two double quotes.
"""

import re
import string
from typing import Optional, Tuple

from wwwauth.syntax import rfc7230, rfc7235, rfc7617

RE_FLAGS = re.VERBOSE | re.IGNORECASE

TCHAR = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")
TOKEN68_CHAR = frozenset(string.ascii_letters + string.digits + "-._~+/")

lex_quoted_string = r'(?: " [^"]* " )'
lex_auth_param = rf"(?: {rfc7230.token} = (?: {rfc7230.token} | {lex_quoted_string} ) )"

_TOKEN = re.compile(rfc7230.token, re.VERBOSE)
_TOKEN68 = re.compile(rfc7235.token68, re.VERBOSE)
_AUTH_PARAM = re.compile(lex_auth_param, re.VERBOSE)

# header name -> ABNF for a complete field value
HEADER_SYNTAX = {
    "authorization": rfc7235.Authorization,
    "proxy-authorization": rfc7235.Proxy_Authorization,
    "www-authenticate": rfc7235.WWW_Authenticate,
    "proxy-authenticate": rfc7235.Proxy_Authenticate,
}


def is_token(candidate: str) -> bool:
    "True if candidate is a non-empty run of tchar."
    return bool(candidate) and _TOKEN.fullmatch(candidate) is not None


def is_token68(candidate: str) -> bool:
    "True if candidate is a token68 (base64-like characters, then optional '=' padding)."
    return bool(candidate) and _TOKEN68.fullmatch(candidate) is not None


def is_auth_param(candidate: str) -> bool:
    "True if candidate is token=token or token=\"...\"."
    return bool(candidate) and _AUTH_PARAM.fullmatch(candidate) is not None


def split_auth_param(candidate: str) -> Optional[Tuple[str, str]]:
    """
    Split an auth-param at its first '='.

    The value is returned raw; surrounding quotes are left for the caller to
    strip (see AuthParam.parsed). Returns None when candidate is not an
    auth-param.
    """
    if not is_auth_param(candidate):
        return None
    key, value = candidate.split("=", 1)
    return key, value


def is_valid_header_value(name: str, value: str) -> bool:
    """
    Check a complete header field value against the RFC7235 ABNF for the named
    header. Unknown header names never validate.
    """
    syntax = HEADER_SYNTAX.get(name.lower())
    if syntax is None:
        return False
    return re.match(rf"^\s*(?:{syntax})\s*$", value, RE_FLAGS) is not None


def is_basic_challenge(value: str) -> bool:
    "Check a single challenge against the RFC7617 'Basic' challenge syntax."
    return re.match(rf"^\s*{rfc7617.challenge}\s*$", value, RE_FLAGS) is not None
