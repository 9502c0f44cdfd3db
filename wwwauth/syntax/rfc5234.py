"""
Regex for the ABNF core rules used by HTTP authentication.

Derived from RFC5234, Appendix B.1:

  <https://tools.ietf.org/html/rfc5234#appendix-B.1>

They should be processed with re.VERBOSE.
"""

SPEC_URL = "https://tools.ietf.org/html/rfc5234"


# ALPHA          =  %x41-5A / %x61-7A   ; A-Z / a-z

ALPHA = r"[\x41-\x5A\x61-\x7A]"

# DIGIT          =  %x30-39

DIGIT = r"[\x30-\x39]"

# DQUOTE         =  %x22

DQUOTE = r"[\x22]"

# HTAB           =  %x09

HTAB = r"[\x09]"

# SP             =  %x20

SP = r"[\x20]"

# VCHAR          =  %x21-7E

VCHAR = r"[\x21-\x7E]"

# WSP            =  SP / HTAB

WSP = rf"(?: {SP} | {HTAB} )"
