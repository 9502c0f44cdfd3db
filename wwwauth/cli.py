#!/usr/bin/env python

"""
CLI tools for HTTP authentication headers.

    wwwauth_cli parse 'Digest realm="api", nonce="9c58"'
    wwwauth_cli challenge --realm api
    wwwauth_cli basic alice wonderland
"""

from argparse import ArgumentParser
import json
import sys
from typing import List, Optional

from wwwauth import __version__
from wwwauth.authenticator.basic import (
    DEFAULT_CHARSET,
    SCHEME,
    decode_basic_token,
    encode_basic_token,
)
from wwwauth.challenge import AuthParam, Challenge, WwwAuthenticateHeader
from wwwauth.tokenizer import extract_credentials


def main(argv: Optional[List[str]] = None) -> int:
    parser = ArgumentParser(description="HTTP authentication header tools")
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse", help="parse an Authorization header value"
    )
    parse_cmd.add_argument("value", help="header value, e.g. 'Basic dXNlcjpwYXNz'")
    parse_cmd.add_argument(
        "--charset",
        default=DEFAULT_CHARSET,
        help="charset of Basic credentials (default: %(default)s)",
    )

    challenge_cmd = subparsers.add_parser(
        "challenge", help="print a Basic WWW-Authenticate value"
    )
    challenge_cmd.add_argument("--realm", required=True)
    challenge_cmd.add_argument("--charset", default=DEFAULT_CHARSET)

    basic_cmd = subparsers.add_parser(
        "basic", help="print a Basic Authorization value"
    )
    basic_cmd.add_argument("username")
    basic_cmd.add_argument("password")
    basic_cmd.add_argument("--charset", default=DEFAULT_CHARSET)

    args = parser.parse_args(argv)

    if args.command == "parse":
        credentials = extract_credentials(args.value)
        if credentials is None:
            sys.stderr.write("Not valid RFC7235 credentials.\n")
            return 1
        result = credentials.json_encode()
        if credentials.schema.lower() == SCHEME.lower() and credentials.token68:
            decoded = decode_basic_token(credentials.token68, args.charset)
            if decoded is not None:
                result["username"] = decoded[0]
        output(json.dumps(result, indent=2) + "\n")
    elif args.command == "challenge":
        header = WwwAuthenticateHeader(
            Challenge(
                SCHEME,
                auth_params=[
                    AuthParam("realm", args.realm), AuthParam("charset", args.charset)
                ],
            )
        )
        output(f"{header.name}: {header}\n")
    elif args.command == "basic":
        try:
            token = encode_basic_token(args.username, args.password, args.charset)
        except (LookupError, UnicodeEncodeError) as why:
            sys.stderr.write(f"Can't encode credentials: {why}\n")
            return 1
        output(f"Authorization: {Challenge(SCHEME, token68=token)}\n")
    return 0


def output(out: str) -> None:
    sys.stdout.write(out)


if __name__ == "__main__":
    sys.exit(main())
