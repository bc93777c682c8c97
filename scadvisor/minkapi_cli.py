"""Command line options of the in-memory KAPI service."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import NoReturn

from scadvisor.cli import add_server_config_arguments, parse_duration, validate_server_config
from scadvisor.common_types import DEFAULT_MINKAPI_PORT
from scadvisor.errors import AdvisorError, InvalidOptionError, MissingOptionError
from scadvisor.minkapi import (
    DEFAULT_BASE_PREFIX,
    DEFAULT_KUBE_CONFIG_PATH,
    DEFAULT_WATCH_QUEUE_SIZE,
    DEFAULT_WATCH_TIMEOUT,
    PROGRAM_NAME,
    MinKAPIConfig,
    WatchConfig,
)

_KUBECONFIG_ENV = "KUBECONFIG"


@dataclass
class Options(MinKAPIConfig):
    """Options parsed from the command line."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise InvalidOptionError(message)


def add_watch_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the watch options, stored as ``watch_queue_size`` and ``watch_timeout``."""
    parser.add_argument(
        "-s", "--watch-queue-size", dest="watch_queue_size", type=int,
        default=DEFAULT_WATCH_QUEUE_SIZE, help="max number of events to queue per watcher",
    )
    parser.add_argument(
        "-t", "--watch-timeout", dest="watch_timeout", type=parse_duration,
        default=DEFAULT_WATCH_TIMEOUT,
        help="watch timeout after which connection is closed and watch removed",
    )


def _build_parser() -> argparse.ArgumentParser:
    kube_config_path = os.environ.get(_KUBECONFIG_ENV, "") or DEFAULT_KUBE_CONFIG_PATH
    parser = _ArgumentParser(prog=PROGRAM_NAME, allow_abbrev=False)
    parser.add_argument(
        "-k", "--kubeconfig", dest="kube_config_path", default=kube_config_path,
        help="path to master kubeconfig - fallback to KUBECONFIG env-var",
    )
    add_server_config_arguments(parser, MinKAPIConfig(port=DEFAULT_MINKAPI_PORT))
    add_watch_config_arguments(parser)
    parser.add_argument(
        "-b", "--base-prefix", dest="base_prefix", default=DEFAULT_BASE_PREFIX,
        help="base path prefix for the base view of the minkapi service",
    )
    return parser


def _validate(opts: Options) -> None:
    errors: list[AdvisorError] = []
    try:
        validate_server_config(opts)
    except AdvisorError as exc:
        errors.append(exc)
    if not opts.kube_config_path.strip():
        errors.append(MissingOptionError("--kubeconfig/-k"))
    if len(errors) == 1:
        raise errors[0]
    if errors:
        combined = InvalidOptionError("\n".join(str(err) for err in errors))
        combined.errors = errors
        raise combined


def parse_program_flags(args: list[str] | None = None) -> Options:
    """Parse and validate the command line; raise an AdvisorError on bad input."""
    ns = _build_parser().parse_args(args)
    opts = Options(
        host=ns.host,
        port=ns.port,
        kube_config_path=ns.kube_config_path,
        profiling_enabled=ns.profiling_enabled,
        graceful_shutdown_timeout=ns.graceful_shutdown_timeout,
        base_prefix=ns.base_prefix,
        watch_config=WatchConfig(queue_size=ns.watch_queue_size, timeout=ns.watch_timeout),
    )
    _validate(opts)
    return opts