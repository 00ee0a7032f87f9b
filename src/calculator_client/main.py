"""
Command-line entrypoint.

This script:
- Opens one connection to the Calculator service
- Runs the fixed call sequence against it
- Closes the connection, whatever happened

Exit status is 0 when the sequence completes, 1 when a transport or
protocol error aborts it, 2 on invalid arguments.
"""
import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from calculator_client.client.driver import run_session
from calculator_client.client.stub import CalculatorClient
from calculator_client.client.transport import ConnectionSettings, open_transport
from calculator_client.common.logger import logger, setup_logging
from calculator_client.errors import CalculatorClientError


def parse_args(argv: Optional[List[str]] = None) -> tuple[ConnectionSettings, bool]:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, ``sys.argv[1:]`` when None

    :return: Validated connection settings and the verbose flag
    :rtype: tuple[ConnectionSettings, bool]
    """
    parser = argparse.ArgumentParser(
        description="Run the Calculator call sequence against a Thrift server"
    )
    parser.add_argument("--host", default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=9090, help="Server TCP port (default: 9090)")
    parser.add_argument(
        "--timeout",
        type=int,
        default=3000,
        help="Socket read/write timeout in milliseconds (default: 3000)",
    )
    parser.add_argument(
        "--connect-timeout",
        type=int,
        default=None,
        help="Connect timeout in milliseconds (default: socket default)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every request and reply")

    args = parser.parse_args(argv)

    try:
        settings = ConnectionSettings(
            host=args.host,
            port=args.port,
            socket_timeout=args.timeout,
            connect_timeout=args.connect_timeout,
        )
    except ValidationError as exc:
        parser.error(str(exc))

    return settings, args.verbose


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one session and return the process exit status.
    """
    settings, verbose = parse_args(argv)
    setup_logging(verbose)

    try:
        with open_transport(settings) as transport:
            print("Connected to server!")
            run_session(CalculatorClient(transport))
    except CalculatorClientError as exc:
        logger.error(f"❌ Session aborted: {exc}")
        print(f"Error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
