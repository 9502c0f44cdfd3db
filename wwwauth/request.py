"""
The incoming request, as seen by authenticators and controllers.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

from wwwauth.type import RawHeaderListType


class HttpRequest:
    """
    A complete HTTP request.

    Header names and values are kept as received (bytes); lookups are
    case-insensitive on the name. ``attributes`` is per-request storage for
    controllers and is discarded with the request.
    """

    def __init__(
        self,
        method: str,
        uri: bytes,
        headers: RawHeaderListType,
        body: bytes = b"",
        client_ip: str = "",
        charset: str = "utf-8",
    ) -> None:
        self.method = method.upper()
        self.uri = uri
        self.headers = headers
        self.body = body
        self.client_ip = client_ip
        self.charset = charset
        self.remote_user: Optional[str] = None
        self.attributes: Dict[str, Any] = {}
        p_uri = urlsplit(uri)
        self.path = p_uri.path.decode(charset, "replace")
        self.query = parse_qs(p_uri.query.decode(charset, "replace"))

    def get_headers(self, name: str) -> List[str]:
        """
        All values of the named header, in the order received. Values are
        decoded as ISO-8859-1 and stripped; they are not split on commas.
        """
        norm_name = name.lower().encode("ascii")
        return [
            value.decode("iso-8859-1").strip()
            for (hdr_name, value) in self.headers
            if hdr_name.strip().lower() == norm_name
        ]

    def get_header(self, name: str) -> Optional[str]:
        "The first value of the named header, or None if it isn't present."
        values = self.get_headers(name)
        if not values:
            return None
        return values[0]

    def body_as_string(self, charset: Optional[str] = None) -> str:
        return self.body.decode(charset or self.charset, "replace")

    def __repr__(self) -> str:
        return f"<HttpRequest {self.method} {self.path} from {self.client_ip or '-'}>"
