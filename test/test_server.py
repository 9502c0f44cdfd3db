#!/usr/bin/env python3

from configparser import ConfigParser
import json
import unittest
from unittest.mock import MagicMock, patch

from wwwauth.authenticator import Allowed, AuthOutcome, Authenticator, Denied, NullAuthenticator
from wwwauth.authenticator.basic import BasicAuthenticator
from wwwauth.error import HttpError
from wwwauth.request import HttpRequest
from wwwauth.server import AuthServer, Dispatcher, HttpController, ResponseWriter


class EchoController(HttpController):
    def get(self, request: HttpRequest, writer: ResponseWriter) -> None:
        writer.send_json({"user": request.remote_user, "path": request.path})


class BrokenController(HttpController):
    def get(self, request: HttpRequest, writer: ResponseWriter) -> None:
        raise RuntimeError("boom")


class FixedAuthenticator(Authenticator):
    def __init__(self, outcome: AuthOutcome) -> None:
        self.outcome = outcome

    def authenticate_request(self, request: HttpRequest) -> AuthOutcome:
        return self.outcome


class Payload:
    def json_encode(self) -> dict:
        return {"reason": "expired"}


def make_request(method: str = "GET", uri: bytes = b"/echo", auth: str = None) -> HttpRequest:
    headers = [(b"Host", b"example.com")]
    if auth:
        headers.append((b"Authorization", auth.encode("ascii")))
    return HttpRequest(method, uri, headers, client_ip="10.0.0.1")


class DispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.matcher = MagicMock()
        self.matcher.match_password.side_effect = (
            lambda realm, user, password, request: (user, password) == ("user", "pass")
        )
        self.console = MagicMock()
        self.dispatcher = Dispatcher(
            {
                "/echo": EchoController(),
                "/open": EchoController(NullAuthenticator()),
                "/broken": BrokenController(),
                "/nothing": HttpController(),
            },
            default_authenticator=BasicAuthenticator("api", self.matcher),
            console=self.console,
        )

    def run_request(self, request: HttpRequest) -> MagicMock:
        exchange = MagicMock()
        self.dispatcher.dispatch(request, exchange)
        exchange.response_done.assert_called_once_with([])
        return exchange

    def response(self, exchange: MagicMock):
        status, phrase, headers = exchange.response_start.call_args[0]
        if exchange.response_body.called:
            body = b"".join(c[0][0] for c in exchange.response_body.call_args_list)
        else:
            body = b""
        return status, phrase, dict(headers), body

    def test_denied(self) -> None:
        exchange = self.run_request(make_request())
        status, phrase, headers, body = self.response(exchange)
        self.assertEqual((status, phrase), (b"401", b"Unauthorized"))
        self.assertEqual(headers[b"WWW-Authenticate"], b'Basic realm="api", charset="UTF-8"')
        self.assertEqual(headers[b"Content-Length"], b"0")
        self.assertEqual(body, b"")
        self.console.assert_called_once()
        self.assertTrue(self.console.call_args[0][0].startswith("10.0.0.1: GET /echo denied"))

    def test_bad_credentials(self) -> None:
        for auth in ["Basic " + "dXNlcjpub3Bl", "Bearer xyz", "Digest realm"]:
            exchange = self.run_request(make_request(auth=auth))
            status, _, headers, _ = self.response(exchange)
            self.assertEqual(status, b"401")
            self.assertIn(b"WWW-Authenticate", headers)

    def test_allowed(self) -> None:
        exchange = self.run_request(make_request(auth="Basic dXNlcjpwYXNz"))
        status, _, headers, body = self.response(exchange)
        self.assertEqual(status, b"200")
        self.assertTrue(headers[b"Content-Type"].startswith(b"application/json"))
        self.assertEqual(json.loads(body), {"user": "user", "path": "/echo"})
        self.assertEqual(headers[b"Content-Length"], str(len(body)).encode("ascii"))

    def test_route_authenticator_overrides_default(self) -> None:
        exchange = self.run_request(make_request(uri=b"/open/thing?x=1"))
        status, _, _, body = self.response(exchange)
        self.assertEqual(status, b"200")
        self.assertEqual(json.loads(body), {"user": None, "path": "/open/thing"})

    def test_no_authenticator(self) -> None:
        dispatcher = Dispatcher({"/echo": EchoController()})
        exchange = MagicMock()
        dispatcher.dispatch(make_request(), exchange)
        self.assertEqual(exchange.response_start.call_args[0][0], b"200")

    def test_denied_with_http_error(self) -> None:
        dispatcher = Dispatcher(
            {"/echo": EchoController()},
            FixedAuthenticator(
                Denied(401, HttpError(403, "Forbidden"), {"X-Reason": {"blocked"}})
            ),
            console=self.console,
        )
        exchange = MagicMock()
        dispatcher.dispatch(make_request(), exchange)
        status, phrase, headers, body = self.response(exchange)
        self.assertEqual((status, phrase), (b"403", b"Forbidden"))
        self.assertEqual(headers[b"X-Reason"], b"blocked")
        self.assertEqual(json.loads(body), {"message": "Forbidden", "httpcode": 403})

    def test_denied_with_payload(self) -> None:
        for payload, expected in [
            (Payload(), {"reason": "expired"}),
            ({"reason": "quota"}, {"reason": "quota"}),
        ]:
            dispatcher = Dispatcher(
                {"/echo": EchoController()},
                FixedAuthenticator(Denied(429, payload)),
                console=self.console,
            )
            exchange = MagicMock()
            dispatcher.dispatch(make_request(), exchange)
            status, _, headers, body = self.response(exchange)
            self.assertEqual(status, b"429")
            self.assertEqual(json.loads(body), expected)

    def test_denied_multiple_header_values(self) -> None:
        denied = Denied()
        denied.add_header("WWW-Authenticate", 'Basic realm="a"')
        denied.add_header("WWW-Authenticate", "Negotiate")
        dispatcher = Dispatcher(
            {"/echo": EchoController()}, FixedAuthenticator(denied), console=self.console
        )
        exchange = MagicMock()
        dispatcher.dispatch(make_request(), exchange)
        headers = exchange.response_start.call_args[0][2]
        self.assertIn((b"WWW-Authenticate", b'Basic realm="a"'), headers)
        self.assertIn((b"WWW-Authenticate", b"Negotiate"), headers)

    def test_falsy_outcome(self) -> None:
        dispatcher = Dispatcher(
            {"/echo": EchoController()}, FixedAuthenticator(AuthOutcome()), console=self.console
        )
        exchange = MagicMock()
        dispatcher.dispatch(make_request(), exchange)
        self.assertEqual(exchange.response_start.call_args[0][0], b"401")

    def test_not_found(self) -> None:
        for uri in [b"/", b"/echoes", b"/other/echo"]:
            exchange = self.run_request(make_request(uri=uri))
            status, _, _, body = self.response(exchange)
            self.assertEqual(status, b"404", uri)
            self.assertEqual(json.loads(body)["httpcode"], 404)

    def test_not_implemented(self) -> None:
        exchange = self.run_request(make_request(uri=b"/nothing", auth="Basic dXNlcjpwYXNz"))
        self.assertEqual(self.response(exchange)[0], b"501")

    def test_method_not_allowed(self) -> None:
        exchange = self.run_request(
            make_request(method="patch", auth="Basic dXNlcjpwYXNz")
        )
        self.assertEqual(self.response(exchange)[0], b"405")

    def test_unauthenticated_before_method_check(self) -> None:
        exchange = self.run_request(make_request(method="PATCH"))
        self.assertEqual(self.response(exchange)[0], b"401")

    def test_internal_error(self) -> None:
        exchange = self.run_request(make_request(uri=b"/broken", auth="Basic dXNlcjpwYXNz"))
        status, _, _, body = self.response(exchange)
        self.assertEqual(status, b"500")
        self.assertEqual(json.loads(body)["message"], "Internal Server Error")
        logged = self.console.call_args[0][0]
        self.assertIn("RuntimeError: boom", logged)

    def test_find_controller(self) -> None:
        echo = self.dispatcher.routes["/echo"]
        self.assertIs(self.dispatcher.find_controller("/echo"), echo)
        self.assertIs(self.dispatcher.find_controller("/echo/"), echo)
        self.assertIs(self.dispatcher.find_controller("/echo/a/b"), echo)
        self.assertIsNone(self.dispatcher.find_controller("/echoes"))


class AuthServerTests(unittest.TestCase):
    def make_server(self, config_text: str) -> AuthServer:
        conf = ConfigParser()
        conf.read_string(config_text)
        with patch("thor.http.HttpServer") as http_server, patch(
            "wwwauth.server.signal.signal"
        ):
            server = AuthServer(conf["wwwauth"], Dispatcher({}), MagicMock())
        http_server.assert_called_once_with(b"127.0.0.1", 8080)
        return server

    def test_server_charset_is_separate(self) -> None:
        server = self.make_server(
            "[wwwauth]\nhost = 127.0.0.1\nport = 8080\ncharset = ISO-8859-1\n"
        )
        self.assertEqual(server.charset, "utf-8")
        self.assertEqual(server.max_body, 1024 * 1024)

    def test_server_charset(self) -> None:
        server = self.make_server(
            "[wwwauth]\nhost = 127.0.0.1\nport = 8080\ncharset = UTF-8\n"
            + "server_charset = iso-8859-1\nmax_body = 10\n"
        )
        self.assertEqual(server.charset, "iso-8859-1")
        self.assertEqual(server.max_body, 10)


class ResponseWriterTests(unittest.TestCase):
    def test_send(self) -> None:
        exchange = MagicMock()
        writer = ResponseWriter(exchange)
        self.assertFalse(writer.started)
        writer.send(200, b"hi", "text/plain", [("X-Test", "1")])
        self.assertTrue(writer.started)
        exchange.response_start.assert_called_once_with(
            b"200",
            b"OK",
            [(b"X-Test", b"1"), (b"Content-Type", b"text/plain"), (b"Content-Length", b"2")],
        )
        exchange.response_body.assert_called_once_with(b"hi")
        exchange.response_done.assert_called_once_with([])

    def test_send_error(self) -> None:
        exchange = MagicMock()
        ResponseWriter(exchange).send_error(HttpError(409))
        self.assertEqual(exchange.response_start.call_args[0][:2], (b"409", b"Conflict"))
        body = exchange.response_body.call_args[0][0]
        self.assertEqual(json.loads(body), {"message": "Conflict", "httpcode": 409})


class HttpRequestTests(unittest.TestCase):
    def test_headers(self) -> None:
        request = HttpRequest(
            "get",
            b"/a/b?x=1&y=2",
            [
                (b"Accept", b"text/html, text/plain"),
                (b"authorization", b"  Basic abc  "),
                (b"Authorization", b"Basic def"),
            ],
            b"body",
            "127.0.0.1",
        )
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.path, "/a/b")
        self.assertEqual(request.query, {"x": ["1"], "y": ["2"]})
        self.assertEqual(request.get_header("AUTHORIZATION"), "Basic abc")
        self.assertEqual(request.get_headers("Authorization"), ["Basic abc", "Basic def"])
        self.assertEqual(request.get_header("accept"), "text/html, text/plain")
        self.assertIsNone(request.get_header("Cookie"))
        self.assertEqual(request.body_as_string(), "body")
        self.assertIsNone(request.remote_user)
        self.assertEqual(request.attributes, {})


if __name__ == "__main__":
    unittest.main()
