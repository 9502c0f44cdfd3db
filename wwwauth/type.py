from typing import Callable, Dict, List, Optional, Set, Tuple

from typing_extensions import Protocol

StrHeaderListType = List[Tuple[str, str]]
RawHeaderListType = List[Tuple[bytes, bytes]]
HeaderMultiMapType = Dict[str, Set[str]]
ConsoleType = Callable[[str], Optional[int]]


class HttpResponseExchange(Protocol):
    def response_start(
        self, status_code: bytes, status_phrase: bytes, res_hdrs: RawHeaderListType
    ) -> None: ...

    def response_body(self, chunk: bytes) -> None: ...

    def response_done(self, trailers: RawHeaderListType) -> None: ...
