"""Operator configuration: types, defaulting and validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, ClassVar

from scadvisor.common_types import (
    DEFAULT_OPERATOR_HEALTH_PROBE_PORT,
    DEFAULT_OPERATOR_METRICS_PORT,
    DEFAULT_OPERATOR_PROFILING_PORT,
    DEFAULT_OPERATOR_SERVER_PORT,
    KIND_SCALING_ADVISOR_CONFIGURATION,
    OPERATOR_CONFIG_GROUP_NAME,
    CloudProvider,
    HostPort,
    NodeScoringStrategy,
    ServerConfig,
)

_DEFAULT_LEADER_ELECTION_RESOURCE_LOCK = "leases"
_DEFAULT_LEADER_ELECTION_RESOURCE_NAME = "scalingadvisor-operator-leader-election"
_ZERO = timedelta(0)


@dataclass
class ClientConnectionConfiguration:
    """Settings for constructing a kube client."""

    qps: float = 0.0
    burst: int = 0
    content_type: str = ""
    accept_content_types: str = ""


@dataclass
class LeaderElectionConfiguration:
    """Settings for leader election among operator replicas."""

    enabled: bool = False
    lease_duration: timedelta = _ZERO
    renew_deadline: timedelta = _ZERO
    retry_period: timedelta = _ZERO
    resource_lock: str = ""
    resource_name: str = ""
    resource_namespace: str = ""


@dataclass
class ScalingAdvisorServerConfiguration(ServerConfig):
    """Server settings plus the endpoints for probes, metrics and profiling."""

    health_probes: HostPort = field(default_factory=HostPort)
    metrics: HostPort = field(default_factory=HostPort)
    profiling: HostPort = field(default_factory=HostPort)


@dataclass
class ScalingConstraintsControllerConfiguration:
    """Settings for the controller that reconciles scaling constraints."""

    concurrent_syncs: int | None = None
    scoring_strategy: NodeScoringStrategy | None = None
    cloud_provider: CloudProvider | None = None


@dataclass
class ControllersConfiguration:
    """Settings for the controllers run by the operator."""

    scaling_constraints: ScalingConstraintsControllerConfiguration = field(
        default_factory=ScalingConstraintsControllerConfiguration
    )


@dataclass
class ScalingAdvisorConfiguration:
    """Top-level configuration of the scaling advisor operator."""

    API_VERSION: ClassVar[str] = f"{OPERATOR_CONFIG_GROUP_NAME}/v1alpha1"
    KIND: ClassVar[str] = KIND_SCALING_ADVISOR_CONFIGURATION

    client_connection: ClientConnectionConfiguration = field(
        default_factory=ClientConnectionConfiguration
    )
    leader_election: LeaderElectionConfiguration = field(
        default_factory=LeaderElectionConfiguration
    )
    server: ScalingAdvisorServerConfiguration = field(
        default_factory=ScalingAdvisorServerConfiguration
    )
    controllers: ControllersConfiguration = field(default_factory=ControllersConfiguration)


@dataclass(frozen=True)
class FieldError:
    """An invalid value found at a field path."""

    path: str
    value: Any
    detail: str

    def __str__(self) -> str:
        value = json.dumps(self.value) if isinstance(self.value, str) else str(self.value)
        return f"{self.path}: Invalid value: {value}: {self.detail}"


def set_defaults_client_connection(config: ClientConnectionConfiguration) -> None:
    """Fill unset QPS and burst."""
    if config.qps == 0.0:
        config.qps = 100.0
    if config.burst == 0:
        config.burst = 120


def set_defaults_leader_election(config: LeaderElectionConfiguration) -> None:
    """Fill unset durations and the lock resource."""
    if config.lease_duration == _ZERO:
        config.lease_duration = timedelta(seconds=15)
    if config.renew_deadline == _ZERO:
        config.renew_deadline = timedelta(seconds=10)
    if config.retry_period == _ZERO:
        config.retry_period = timedelta(seconds=2)
    if not config.resource_lock:
        config.resource_lock = _DEFAULT_LEADER_ELECTION_RESOURCE_LOCK
    if not config.resource_name:
        config.resource_name = _DEFAULT_LEADER_ELECTION_RESOURCE_NAME


def set_defaults_server(config: ScalingAdvisorServerConfiguration) -> None:
    """Fill unset ports and the graceful shutdown timeout."""
    if config.port == 0:
        config.port = DEFAULT_OPERATOR_SERVER_PORT
    if config.graceful_shutdown_timeout == _ZERO:
        config.graceful_shutdown_timeout = timedelta(seconds=5)
    if config.health_probes.port == 0:
        config.health_probes.port = DEFAULT_OPERATOR_HEALTH_PROBE_PORT
    if config.metrics.port == 0:
        config.metrics.port = DEFAULT_OPERATOR_METRICS_PORT
    if config.profiling.port == 0:
        config.profiling.port = DEFAULT_OPERATOR_PROFILING_PORT


def set_defaults_scaling_constraints_controller(
    config: ScalingConstraintsControllerConfiguration,
) -> None:
    """Fill an unset concurrent sync count."""
    if config.concurrent_syncs is None:
        config.concurrent_syncs = 1


def set_defaults(config: ScalingAdvisorConfiguration) -> None:
    """Apply every defaulting rule to a whole configuration in place."""
    set_defaults_client_connection(config.client_connection)
    set_defaults_leader_election(config.leader_election)
    set_defaults_server(config.server)
    set_defaults_scaling_constraints_controller(config.controllers.scaling_constraints)


def _validate_client_connection(
    config: ClientConnectionConfiguration, path: str
) -> list[FieldError]:
    if config.burst < 0:
        return [FieldError(f"{path}.burst", config.burst, "burst must be non-negative")]
    return []


def _positive_duration(duration: timedelta, path: str) -> list[FieldError]:
    if duration <= _ZERO:
        return [FieldError(path, duration, "must be greater than 0")]
    return []


def _validate_leader_election(
    config: LeaderElectionConfiguration, path: str
) -> list[FieldError]:
    if not config.enabled:
        return []
    errors = [
        *_positive_duration(config.lease_duration, f"{path}.leaseDuration"),
        *_positive_duration(config.renew_deadline, f"{path}.renewDeadline"),
        *_positive_duration(config.retry_period, f"{path}.retryPeriod"),
    ]
    if config.lease_duration <= config.renew_deadline:
        errors.append(
            FieldError(
                f"{path}.leaseDuration",
                config.renew_deadline,
                "LeaseDuration must be greater than RenewDeadline",
            )
        )
    required = (
        ("resourceLock", config.resource_lock),
        ("resourceNamespace", config.resource_namespace),
        ("resourceName", config.resource_name),
    )
    for name, value in required:
        if not value:
            errors.append(FieldError(f"{path}.{name}", value, f"{name} is required"))
    return errors


def validate_scaling_advisor_configuration(
    config: ScalingAdvisorConfiguration,
) -> list[FieldError]:
    """Return every problem found in the configuration; empty when it is valid."""
    return [
        *_validate_client_connection(config.client_connection, "clientConnection"),
        *_validate_leader_election(config.leader_election, "leaderElection"),
    ]