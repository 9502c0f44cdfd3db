#!/usr/bin/env python3

"""
Run an authenticated HTTP service as a daemon.

Configuration is an INI file:

    [wwwauth]
    host = 127.0.0.1
    port = 8000
    realm = api
    charset = UTF-8
    server_charset = utf-8
    auth = basic

    [users]
    alice = wonderland
"""

import argparse
from configparser import ConfigParser, SectionProxy
import os
import sys
from typing import Optional

import thor
from thor.loop import _loop

import wwwauth
from wwwauth.authenticator import Authenticator, StaticPasswordMatcher
from wwwauth.authenticator.basic import DEFAULT_CHARSET, BasicAuthenticator
from wwwauth.grammar import is_basic_challenge
from wwwauth.request import HttpRequest
from wwwauth.server import AuthServer, Dispatcher, HttpController, ResponseWriter
from wwwauth.type import ConsoleType


class StatusController(HttpController):
    "Reports that the service is up, and who asked."

    def get(self, request: HttpRequest, writer: ResponseWriter) -> None:
        writer.send_json(
            {
                "status": "ok",
                "version": wwwauth.__version__,
                "user": request.remote_user,
            }
        )


def load_config(path: str) -> ConfigParser:
    conf = ConfigParser()
    conf.optionxform = str  # type: ignore  # usernames are case-sensitive
    conf.read_dict({"wwwauth": {}, "users": {}})
    conf.read(path)
    return conf


def build_authenticator(
    config: SectionProxy, users: SectionProxy, console: ConsoleType = sys.stderr.write
) -> Optional[Authenticator]:
    """
    The authenticator named by the 'auth' option: 'basic' (the default) or
    'none'.
    """
    auth = config.get("auth", "basic").lower()
    if auth == "none":
        return None
    if auth != "basic":
        raise ValueError(f"Unknown auth scheme '{auth}'")
    authenticator = BasicAuthenticator(
        config.get("realm", "wwwauth"),
        StaticPasswordMatcher.from_config(users),
        config.get("charset", DEFAULT_CHARSET),
    )
    if not is_basic_challenge(str(authenticator.challenge)):
        console(f"WARNING: '{authenticator.challenge}' is not a valid Basic challenge.\n")
    return authenticator


def build_dispatcher(
    conf: ConfigParser, console: ConsoleType = sys.stderr.write
) -> Dispatcher:
    authenticator = build_authenticator(conf["wwwauth"], conf["users"], console)
    return Dispatcher(
        {"/status": StatusController()},
        default_authenticator=authenticator,
        console=console,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="wwwauth daemon")
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        dest="debug",
        help="Dump slow operations to STDERR",
    )
    parser.add_argument("config_file", type=str, help="configuration file")
    args = parser.parse_args()
    conf = load_config(args.config_file)

    if args.debug:
        _loop.debug = True

    try:
        dispatcher = build_dispatcher(conf)
    except ValueError as why:
        sys.stderr.write(f"Configuration error: {why}\n")
        sys.exit(1)

    sys.stderr.write(
        f"Starting wwwauth {wwwauth.__version__} on PID {os.getpid()}"
        + f" (thor {thor.__version__})\n"
        + f"http://{conf['wwwauth'].get('host', '')}:{conf['wwwauth'].get('port', '8000')}/\n"
    )

    server = AuthServer(conf["wwwauth"], dispatcher)
    server.run()


if __name__ == "__main__":
    main()
