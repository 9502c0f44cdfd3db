"""
Regex for RFC7617 (the 'Basic' HTTP authentication scheme).

  <https://tools.ietf.org/html/rfc7617>

They should be processed with re.VERBOSE.
"""

from .rfc7230 import BWS, OWS, quoted_string
from .rfc7235 import token68

SPEC_URL = "https://tools.ietf.org/html/rfc7617"


# charset-param = "charset" BWS "=" BWS "UTF-8" / DQUOTE "UTF-8" DQUOTE

charset_param = rf'(?: charset {BWS} = {BWS} (?: UTF-8 | "UTF-8" ) )'

# realm-param = "realm" BWS "=" BWS quoted-string

realm_param = rf"(?: realm {BWS} = {BWS} {quoted_string} )"

# challenge = "Basic" 1*SP realm-param [ OWS "," OWS charset-param ]

challenge = rf"(?: Basic [ ]+ {realm_param} (?: {OWS} , {OWS} {charset_param} )? )"

# credentials = "Basic" 1*SP token68

credentials = rf"(?: Basic [ ]+ {token68} )"
