"""
Serve controllers over HTTP, authenticating each request first.

The Dispatcher picks a controller by path, runs its authenticator (or the
default one it was built with) and only calls the controller when the request
is allowed. Denied requests get the response the authenticator described.
"""

from configparser import SectionProxy
from functools import partial
import json
import signal
import sys
import traceback
from types import FrameType
from typing import Any, Dict, Optional

import thor
from thor.http.server import HttpServerExchange

from wwwauth.authenticator import Allowed, AuthOutcome, Authenticator, Denied
from wwwauth.error import HttpError, status_phrase
from wwwauth.request import HttpRequest
from wwwauth.type import (
    ConsoleType,
    HttpResponseExchange,
    RawHeaderListType,
    StrHeaderListType,
)


class ResponseWriter:
    "Writes a single response onto an exchange."

    def __init__(self, exchange: HttpResponseExchange, charset: str = "utf-8") -> None:
        self.exchange = exchange
        self.charset = charset
        self.started = False

    def send(
        self,
        status: int,
        body: bytes = b"",
        content_type: Optional[str] = None,
        headers: Optional[StrHeaderListType] = None,
    ) -> None:
        res_hdrs: RawHeaderListType = [
            (name.encode("ascii"), value.encode(self.charset))
            for (name, value) in headers or []
        ]
        if content_type:
            res_hdrs.append((b"Content-Type", content_type.encode("ascii")))
        res_hdrs.append((b"Content-Length", str(len(body)).encode("ascii")))
        self.started = True
        self.exchange.response_start(
            str(status).encode("ascii"),
            status_phrase(status).encode("ascii"),
            res_hdrs,
        )
        if body:
            self.exchange.response_body(body)
        self.exchange.response_done([])

    def send_json(
        self, payload: Any, status: int = 200, headers: Optional[StrHeaderListType] = None
    ) -> None:
        body = json.dumps(payload).encode(self.charset)
        self.send(status, body, f"application/json; charset={self.charset}", headers)

    def send_error(self, error: HttpError, headers: Optional[StrHeaderListType] = None) -> None:
        self.send_json(error.json_encode(), error.status, headers)


class HttpController:
    """
    Handles requests for one route.

    Override get/post/put/delete as needed; the defaults answer 501. Any
    other method gets a 405. ``authenticator`` overrides the dispatcher's
    default for this route; use NullAuthenticator to turn authentication off.
    """

    def __init__(self, authenticator: Optional[Authenticator] = None) -> None:
        self.authenticator = authenticator

    def handle(self, request: HttpRequest, writer: ResponseWriter) -> None:
        method = {
            "GET": self.get,
            "POST": self.post,
            "PUT": self.put,
            "DELETE": self.delete,
        }.get(request.method)
        if method is None:
            raise HttpError(405, "Method Not Allowed")
        method(request, writer)

    def get(self, request: HttpRequest, writer: ResponseWriter) -> None:
        raise HttpError(501, "Not Implemented")

    def post(self, request: HttpRequest, writer: ResponseWriter) -> None:
        raise HttpError(501, "Not Implemented")

    def put(self, request: HttpRequest, writer: ResponseWriter) -> None:
        raise HttpError(501, "Not Implemented")

    def delete(self, request: HttpRequest, writer: ResponseWriter) -> None:
        raise HttpError(501, "Not Implemented")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} authenticator={self.authenticator!r}>"


class Dispatcher:
    """
    Route requests to controllers.

    ``routes`` maps path prefixes to controllers; the longest matching prefix
    wins. ``default_authenticator`` applies to every controller that doesn't
    have its own; None means requests aren't authenticated.
    """

    def __init__(
        self,
        routes: Dict[str, HttpController],
        default_authenticator: Optional[Authenticator] = None,
        console: ConsoleType = sys.stderr.write,
    ) -> None:
        self.routes = routes
        self.default_authenticator = default_authenticator
        self.console = console

    def find_controller(self, path: str) -> Optional[HttpController]:
        for prefix in sorted(self.routes, key=len, reverse=True):
            base = prefix.rstrip("/")
            if path == prefix or path == base or path.startswith(base + "/"):
                return self.routes[prefix]
        return None

    def dispatch(self, request: HttpRequest, exchange: HttpResponseExchange) -> None:
        writer = ResponseWriter(exchange, request.charset)
        controller = self.find_controller(request.path)
        if controller is None:
            writer.send_error(HttpError(404, f"{request.path} not found"))
            return
        try:
            outcome = self.authenticate(controller, request)
            if not outcome:
                self.on_authentication_failure(request, outcome, writer)
                return
            if isinstance(outcome, Allowed):
                request.remote_user = outcome.user
            controller.handle(request, writer)
        except HttpError as why:
            if writer.started:
                self.error_log(request, f"{why!r} after response started")
                return
            writer.send_error(why)
        except Exception:  # pylint: disable=broad-except
            self.error_log(request, f"error in {controller!r}\n{traceback.format_exc()}")
            if not writer.started:
                writer.send_error(HttpError(500, "Internal Server Error"))

    def authenticate(self, controller: HttpController, request: HttpRequest) -> AuthOutcome:
        authenticator = controller.authenticator
        if authenticator is None:
            authenticator = self.default_authenticator
        if authenticator is None:
            return Allowed()
        return authenticator.authenticate_request(request)

    def on_authentication_failure(
        self, request: HttpRequest, outcome: AuthOutcome, writer: ResponseWriter
    ) -> None:
        """
        Send what the authenticator asked for: headers always; then a
        pre-built HttpError as-is, a JSON-encodable body as JSON, or no body.
        """
        denied = outcome if isinstance(outcome, Denied) else Denied()
        headers = [
            (name, value)
            for name, values in sorted(denied.headers.items())
            for value in sorted(values)
        ]
        self.error_log(request, f"{request.method} {request.path} denied ({denied.status})")
        body = denied.body
        if isinstance(body, HttpError):
            writer.send_error(body, headers)
        elif hasattr(body, "json_encode"):
            writer.send_json(body.json_encode(), denied.status, headers)
        elif isinstance(body, (dict, list, str, int, float, bool)):
            writer.send_json(body, denied.status, headers)
        elif body is not None:
            writer.send(
                denied.status, str(body).encode(writer.charset), "text/plain", headers
            )
        else:
            writer.send(denied.status, headers=headers)

    def error_log(self, request: HttpRequest, message: str) -> None:
        self.console(f"{request.client_ip or '-'}: {message}\n")


class AuthServer:
    "Run a Dispatcher as a standalone Web server."

    def __init__(
        self,
        config: SectionProxy,
        dispatcher: Dispatcher,
        console: ConsoleType = sys.stderr.write,
    ) -> None:
        self.config = config
        self.dispatcher = dispatcher
        self.console = console
        self.charset = config.get("server_charset", "utf-8")
        self.max_body = config.getint("max_body", fallback=1024 * 1024)
        self.handler = partial(ExchangeHandler, server=self)

        self.http_server = thor.http.HttpServer(
            self.config.get("host", "").encode("utf-8"),
            self.config.getint("port", fallback=8000),
        )
        self.http_server.on("exchange", self.handler)

        signal.signal(signal.SIGINT, self.shutdown_signal)
        signal.signal(signal.SIGTERM, self.shutdown_signal)

    def run(self) -> None:
        try:
            thor.run()
        except KeyboardInterrupt:
            self.shutdown()
            thor.run()

    def shutdown_signal(self, sig: int, frame: Optional[FrameType]) -> None:
        self.console("Shutting down...\n")
        self.shutdown()

    def shutdown(self) -> None:
        self.http_server.on("stop", thor.stop)
        self.http_server.graceful_shutdown()


class ExchangeHandler:
    "Collects one request from a thor exchange and hands it to the dispatcher."

    def __init__(self, exchange: HttpServerExchange, server: AuthServer) -> None:
        self.exchange = exchange
        self.server = server
        self.method = b""
        self.uri = b""
        self.req_hdrs: RawHeaderListType = []
        self.req_body = b""
        self.too_big = False
        self.client_ip = ""
        if not exchange.http_conn.tcp_conn:
            return
        self.client_ip = exchange.http_conn.tcp_conn.socket.getpeername()[0]
        exchange.on("request_start", self.request_start)
        exchange.on("request_body", self.request_body)
        exchange.on("request_done", self.request_done)

    def request_start(
        self, method: bytes, uri: bytes, req_hdrs: RawHeaderListType
    ) -> None:
        self.method = method
        self.uri = uri
        self.req_hdrs = req_hdrs

    def request_body(self, chunk: bytes) -> None:
        if len(self.req_body) + len(chunk) > self.server.max_body:
            self.too_big = True
            return
        self.req_body += chunk

    def request_done(self, trailers: RawHeaderListType) -> None:
        writer = ResponseWriter(self.exchange, self.server.charset)
        if self.too_big:
            writer.send_error(HttpError(413, "Request body too large"))
            return
        try:
            method = self.method.decode("ascii")
        except UnicodeDecodeError:
            writer.send_error(HttpError(400, "Bad request method"))
            return
        request = HttpRequest(
            method,
            self.uri,
            self.req_hdrs,
            self.req_body,
            self.client_ip,
            self.server.charset,
        )
        self.server.dispatcher.dispatch(request, self.exchange)
