"""
Regex for the RFC7230 rules that authentication headers build on.

  <http://httpwg.org/specs/rfc7230.html#collected.abnf>

They should be processed with re.VERBOSE.
"""

# pylint: disable=invalid-name

from typing import Optional

from .rfc5234 import ALPHA, DIGIT, DQUOTE, HTAB, SP, VCHAR

SPEC_URL = "http://httpwg.org/specs/rfc7230"


# OWS = *( SP / HTAB )

OWS = rf"(?: {SP} | {HTAB} )*"

# BWS = OWS

BWS = OWS

# obs-text = %x80-FF

obs_text = r"[\x80-\xff]"

# tchar = "!" / "#" / "$" / "%" / "&" / "'" / "*" / "+" / "-" / "." /
#         "^" / "_" / "`" / "|" / "~" / DIGIT / ALPHA

tchar = rf"(?: ! | \# | \$ | % | & | ' | \* | \+ | \- | \. | \^ | _ | ` | \| | \~ | {DIGIT} | {ALPHA} )"

# token = 1*tchar

token = rf"{tchar}+"

# qdtext = HTAB / SP / "!" / %x23-5B / %x5D-7E / obs-text

qdtext = r"[\t !\x23-\x5b\x5d-\x7e\x80-\xff]"

# quoted-pair = "\" ( HTAB / SP / VCHAR / obs-text )

quoted_pair = rf"(?: \\ (?: {HTAB} | {SP} | {VCHAR} | {obs_text} ) )"

# quoted-string = DQUOTE *( qdtext / quoted-pair ) DQUOTE

quoted_string = rf"(?: {DQUOTE} (?: {qdtext} | {quoted_pair} )* {DQUOTE} )"


class list_rule:
    """
    Wrap a piece of ABNF in the RFC7230 "list rule" (Section 7), using the
    sender syntax.

    <http://httpwg.org/specs/rfc7230.html#abnf.extension>
    """

    def __init__(self, element: str, minimum: Optional[int] = None) -> None:
        self.element = element
        self.minimum = minimum

    def __str__(self) -> str:
        if self.minimum == 1:
            # 1#element => element *( OWS "," OWS element )
            return rf"(?: {self.element} (?: {OWS} , {OWS} {self.element} )* )"
        if self.minimum and self.minimum > 1:
            # <n>#element => element <n-1>*( OWS "," OWS element )
            return (
                rf"(?: {self.element} (?: {OWS} , {OWS} {self.element} )"
                rf"{{{self.minimum - 1},}} )"
            )
        # #element => [ 1#element ]
        return rf"(?: {self.element} (?: {OWS} , {OWS} {self.element} )* )?"
