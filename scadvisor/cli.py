"""Command line helpers shared by the scaling advisor programs."""

from __future__ import annotations

import argparse
import enum
import sys
from datetime import timedelta
from importlib import metadata
from typing import NoReturn

from scadvisor.common_types import ServerConfig
from scadvisor.core import _parse_duration
from scadvisor.errors import InvalidOptionError

DEFAULT_QPS = 50.0
DEFAULT_BURST = 100
DEFAULT_SHUTDOWN_TIMEOUT = timedelta(seconds=6)


class ExitCode(enum.IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    ERR_PARSE_OPTS = 1
    ERR_START = 2
    ERR_SHUTDOWN = 254


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``1h2m3.5s``; raise ValueError if malformed."""
    return _parse_duration(text)


def add_server_config_arguments(
    parser: argparse.ArgumentParser, config: ServerConfig
) -> None:
    """Add server options; their destinations are the ServerConfig field names."""
    parser.add_argument(
        "-H", "--host", dest="host", default="",
        help="host name to bind this service. Use 0.0.0.0 for all interfaces",
    )
    parser.add_argument(
        "-P", "--port", dest="port", type=int, default=config.port,
        help="listen port for REST API",
    )
    parser.add_argument(
        "-p", "--pprof", dest="profiling_enabled", action="store_true", default=False,
        help="enable pprof profiling",
    )
    parser.add_argument(
        "--shutdown-timeout", dest="graceful_shutdown_timeout", type=parse_duration,
        default=DEFAULT_SHUTDOWN_TIMEOUT, help="graceful shutdown timeout",
    )


def add_qps_burst_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the client QPS and burst options, stored as ``qps`` and ``burst``."""
    parser.add_argument(
        "--kube-api-qps", dest="qps", type=float, default=DEFAULT_QPS,
        help="QPS to use while talking with kubernetes apiserver",
    )
    parser.add_argument(
        "--kube-api-burst", dest="burst", type=int, default=DEFAULT_BURST,
        help="Burst to use while talking with kubernetes apiserver",
    )


def validate_server_config(config: ServerConfig) -> None:
    """Raise InvalidOptionError if the server configuration is unusable."""
    if config.port <= 0:
        raise InvalidOptionError("--port must be greater than 0")


def print_version(program_name: str) -> None:
    """Print the installed version of the program."""
    try:
        version = metadata.version("scadvisor")
    except metadata.PackageNotFoundError:
        version = ""
    if version:
        print(f"{program_name} version: {version}")
    else:
        print(f"{program_name}: binary build info not embedded")


def handle_error_and_exit(err: BaseException) -> NoReturn:
    """Exit cleanly after a help request, otherwise report the error and exit."""
    if isinstance(err, SystemExit) and err.code in (None, 0):
        sys.exit(int(ExitCode.SUCCESS))
    print(f"Err: {err}", file=sys.stderr)
    sys.exit(int(ExitCode.ERR_PARSE_OPTS))