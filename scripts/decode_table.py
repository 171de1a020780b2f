#!/usr/bin/env python
"""CLI for decoding winget table output into JSON records."""
import argparse
import json
import logging
import sys
from pathlib import Path
from winget_mcp.config import Config
from winget_mcp.errors import WingetError
from winget_mcp.signatures import load_error_signatures
from winget_mcp.winget_client import WingetClient, decode_output


def _read_lines(source: str) -> list[str]:
    if source == "-":
        return sys.stdin.read().splitlines()
    return Path(source).read_text(encoding="utf-8").splitlines()


def main():
    parser = argparse.ArgumentParser(
        description="Decode winget table output. Either pass --input with captured "
                    "output, or give winget arguments to run (e.g. search vscode)."
    )
    parser.add_argument("--input", type=str, metavar="FILE", help="Decode captured output from FILE ('-' for stdin)")
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument("--signatures", type=str, metavar="FILE", help="Error signature list (default: bundled)")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("winget_args", nargs=argparse.REMAINDER, help="Arguments passed to winget")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    if args.input is None and not args.winget_args:
        parser.error("give --input FILE or winget arguments")

    config = Config.load(args.config)

    errors = config.validate(require_executable=args.input is None)
    if errors:
        for e in errors:
            logging.error(e)
        return 1

    signatures_path = args.signatures or config.error_signatures_path
    try:
        signatures = load_error_signatures(signatures_path)
    except FileNotFoundError as e:
        logging.error(e)
        return 1

    try:
        if args.input is not None:
            records = decode_output(_read_lines(args.input), signatures)
        else:
            client = WingetClient(
                executable=config.winget_path,
                timeout=config.command_timeout,
                error_signatures=signatures,
                accept_source_agreements=config.accept_source_agreements,
                force_utf8=config.force_utf8_console,
                default_source=config.default_source,
            )
            records = client.query(args.winget_args)
    except WingetError as e:
        logging.error(e)
        return 1

    print(json.dumps(records, indent=2, ensure_ascii=False))
    logging.debug(f"{len(records)} records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
