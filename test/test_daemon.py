#!/usr/bin/env python3

import json
import os
import tempfile
import unittest
from unittest.mock import MagicMock

from wwwauth.authenticator.basic import BasicAuthenticator, encode_basic_token
from wwwauth.daemon import build_authenticator, build_dispatcher, load_config
from wwwauth.request import HttpRequest

CONFIG = """\
[wwwauth]
realm = staff
charset = UTF-8

[users]
Alice = Wonderland
bob = builder
"""


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.path = tempfile.mkstemp(suffix=".conf")
        with os.fdopen(fd, "w") as fh:
            fh.write(CONFIG)
        self.conf = load_config(self.path)

    def tearDown(self) -> None:
        os.remove(self.path)

    def test_load_config(self) -> None:
        self.assertEqual(self.conf["wwwauth"]["realm"], "staff")
        self.assertEqual(sorted(self.conf["users"]), ["Alice", "bob"])

    def test_missing_file(self) -> None:
        conf = load_config(self.path + ".missing")
        self.assertEqual(len(conf["users"]), 0)
        authenticator = build_authenticator(conf["wwwauth"], conf["users"])
        self.assertEqual(str(authenticator.challenge), 'Basic realm="wwwauth", charset="UTF-8"')

    def test_build_basic(self) -> None:
        authenticator = build_authenticator(self.conf["wwwauth"], self.conf["users"])
        self.assertIsInstance(authenticator, BasicAuthenticator)
        self.assertEqual(str(authenticator.challenge), 'Basic realm="staff", charset="UTF-8"')
        self.assertEqual(len(authenticator.password_matcher), 2)

    def test_build_none(self) -> None:
        self.conf["wwwauth"]["auth"] = "None"
        self.assertIsNone(build_authenticator(self.conf["wwwauth"], self.conf["users"]))

    def test_build_unknown(self) -> None:
        self.conf["wwwauth"]["auth"] = "kerberos"
        with self.assertRaises(ValueError):
            build_authenticator(self.conf["wwwauth"], self.conf["users"])

    def test_nonstandard_charset_warns(self) -> None:
        console = MagicMock()
        self.conf["wwwauth"]["charset"] = "ISO-8859-1"
        build_authenticator(self.conf["wwwauth"], self.conf["users"], console)
        console.assert_called_once()
        self.assertTrue(console.call_args[0][0].startswith("WARNING"))

    def test_status(self) -> None:
        console = MagicMock()
        dispatcher = build_dispatcher(self.conf, console)
        for username, password, status, user in [
            ("Alice", "Wonderland", b"200", "Alice"),
            ("alice", "Wonderland", b"401", None),
            ("bob", "wrong", b"401", None),
        ]:
            exchange = MagicMock()
            token = encode_basic_token(username, password)
            request = HttpRequest(
                "GET", b"/status", [(b"Authorization", f"Basic {token}".encode("ascii"))]
            )
            dispatcher.dispatch(request, exchange)
            self.assertEqual(exchange.response_start.call_args[0][0], status, username)
            if user:
                body = json.loads(exchange.response_body.call_args[0][0])
                self.assertEqual(body["status"], "ok")
                self.assertEqual(body["user"], user)


if __name__ == "__main__":
    unittest.main()
