"""Types and constants shared by the scaling advisor components."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from datetime import timedelta

from scadvisor.errors import UnsupportedCloudProviderError

OPERATOR_NAME = "scalingadvisor"
OPERATOR_CONFIG_GROUP_NAME = "config.sa.gardener.cloud"
OPERATOR_GROUP_NAME = "sa.gardener.cloud"

KIND_SCALING_ADVISOR_CONFIGURATION = "ScalingAdvisorConfiguration"
KIND_CLUSTER_SCALING_ADVICE = "ClusterScalingAdvice"
KIND_CLUSTER_SCALING_CONSTRAINT = "ClusterScalingConstraint"

ANNOTATION_ENABLE_SCALING_DIAGNOSTICS = "sa.gardener.cloud/enable-scaling-diagnostics"

LABEL_SIMULATION_NAME = "sa.gardener.cloud/simulation-name"
LABEL_SIMULATION_GROUP_PASS_NUM = "sa.gardener.cloud/simulation-group-pass-num"
LABEL_NODE_POOL_NAME = "sa.gardener.cloud/node-pool-name"
LABEL_NODE_TEMPLATE_NAME = "sa.gardener.cloud/node-template-name"
LABEL_REQUEST_ID = "sa.gardener.cloud/request-id"
LABEL_CORRELATION_ID = "sa.gardener.cloud/correlation-id"

DEFAULT_OPERATOR_SERVER_PORT = 8080
DEFAULT_OPERATOR_HEALTH_PROBE_PORT = 8081
DEFAULT_OPERATOR_METRICS_PORT = 8082
DEFAULT_OPERATOR_PROFILING_PORT = 8083
DEFAULT_ADVISOR_SERVICE_PORT = 8090
DEFAULT_MINKAPI_PORT = 8091


class Service(abc.ABC):
    """A component that can be started and stopped."""

    @abc.abstractmethod
    def start(self) -> None:
        """Start the service; a server implementation may block."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop the service without blocking."""


@dataclass
class HostPort:
    """Host and port a service listens on."""

    host: str = ""
    port: int = 0


@dataclass
class ServerConfig:
    """Common configuration of a server."""

    host: str = ""
    port: int = 0
    kube_config_path: str = ""
    profiling_enabled: bool = False
    graceful_shutdown_timeout: timedelta = timedelta(0)

    @property
    def host_port(self) -> HostPort:
        return HostPort(self.host, self.port)


@dataclass
class QPSBurst:
    """Client QPS and burst settings."""

    qps: float = 0.0
    burst: int = 0


@dataclass
class ConstraintReference:
    """Reference to the ClusterScalingConstraint an advice is generated for."""

    name: str = ""
    namespace: str = ""


class NodeScoringStrategy(str, enum.Enum):
    LEAST_WASTE = "LeastWaste"
    LEAST_COST = "LeastCost"


class CloudProvider(str, enum.Enum):
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"
    ALI = "ali"
    OPENSTACK = "openstack"


class ClientAccessMode(str, enum.Enum):
    NETWORK = "Network"
    IN_MEMORY = "InMemory"


def as_cloud_provider(name: str) -> CloudProvider:
    """Return the CloudProvider for ``name`` or raise UnsupportedCloudProviderError."""
    try:
        return CloudProvider(name)
    except ValueError:
        raise UnsupportedCloudProviderError(name) from None