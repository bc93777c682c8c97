import argparse

import pytest

from scadvisor.cli import ExitCode, parse_duration
from scadvisor.common_types import DEFAULT_MINKAPI_PORT
from scadvisor.errors import InvalidOptionError, MissingOptionError
from scadvisor.minkapi import (
    DEFAULT_BASE_PREFIX,
    DEFAULT_KUBE_CONFIG_PATH,
    DEFAULT_WATCH_QUEUE_SIZE,
    DEFAULT_WATCH_TIMEOUT,
    WatchConfig,
)
from scadvisor.minkapi_cli import Options, add_watch_config_arguments, parse_program_flags


@pytest.fixture(autouse=True)
def _no_kubeconfig_env(monkeypatch):
    monkeypatch.delenv("KUBECONFIG", raising=False)


def test_defaults():
    opts = parse_program_flags([])
    assert opts.kube_config_path == DEFAULT_KUBE_CONFIG_PATH
    assert opts.port == DEFAULT_MINKAPI_PORT
    assert opts.base_prefix == DEFAULT_BASE_PREFIX
    assert opts.watch_config == WatchConfig(DEFAULT_WATCH_QUEUE_SIZE, DEFAULT_WATCH_TIMEOUT)
    assert opts.profiling_enabled is False


def test_kubeconfig_from_environment(monkeypatch):
    monkeypatch.setenv("KUBECONFIG", "/etc/kube/config.yaml")
    assert parse_program_flags([]).kube_config_path == "/etc/kube/config.yaml"


def test_flags_override_defaults():
    opts = parse_program_flags(
        ["-k", "/a.yaml", "-P", "9999", "-b", "sandbox", "-s", "5", "-t", "30s", "-H", "127.0.0.1"]
    )
    assert isinstance(opts, Options)
    assert opts.kube_config_path == "/a.yaml"
    assert opts.port == 9999
    assert opts.host == "127.0.0.1"
    assert opts.base_prefix == "sandbox"
    assert opts.watch_config == WatchConfig(queue_size=5, timeout=parse_duration("30s"))


def test_invalid_port_is_rejected():
    with pytest.raises(InvalidOptionError, match="--port"):
        parse_program_flags(["-P", "0"])


def test_blank_kubeconfig_is_rejected():
    with pytest.raises(MissingOptionError, match="--kubeconfig"):
        parse_program_flags(["-k", "   "])


def test_both_problems_are_reported():
    with pytest.raises(InvalidOptionError) as excinfo:
        parse_program_flags(["-k", " ", "-P", "0"])
    assert "--port" in str(excinfo.value)
    assert "--kubeconfig" in str(excinfo.value)


@pytest.mark.parametrize("args", [["--bogus"], ["-t", "xyz"], ["-P", "abc"]])
def test_malformed_arguments_raise(args):
    with pytest.raises(InvalidOptionError):
        parse_program_flags(args)


def test_help_exits_successfully(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_program_flags(["--help"])
    assert excinfo.value.code == ExitCode.SUCCESS
    assert "--watch-queue-size" in capsys.readouterr().out


def test_add_watch_config_arguments():
    parser = argparse.ArgumentParser()
    add_watch_config_arguments(parser)
    defaults = parser.parse_args([])
    assert defaults.watch_queue_size == DEFAULT_WATCH_QUEUE_SIZE
    assert defaults.watch_timeout == DEFAULT_WATCH_TIMEOUT
    given = parser.parse_args(["--watch-queue-size", "7", "--watch-timeout", "2m"])
    assert given.watch_queue_size == 7
    assert given.watch_timeout == parse_duration("120s")