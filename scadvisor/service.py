"""Requests, snapshots and simulation results of the scaling advisor service."""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from scadvisor.common_types import (
    LABEL_NODE_POOL_NAME,
    LABEL_NODE_TEMPLATE_NAME,
    CloudProvider,
    QPSBurst,
    ServerConfig,
)
from scadvisor.core import (
    ClusterScalingAdvice,
    ClusterScalingConstraint,
    ClusterScalingFeedback,
    NodePlacement,
)
from scadvisor.errors import MissingRequiredLabelError
from scadvisor.minkapi import MinKAPIConfig

PROGRAM_NAME = "scadsvc"

LABEL_TOPOLOGY_REGION = "topology.kubernetes.io/region"
LABEL_TOPOLOGY_ZONE = "topology.kubernetes.io/zone"


class ActivityStatus(str, enum.Enum):
    """Operational status of an activity such as a simulation."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESS = "Success"
    FAILURE = "Failure"


@dataclass(frozen=True, order=True)
class NamespacedName:
    """Namespace and name identifying an object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ScalingAdviceRequestRef:
    """Identifiers of a scaling advice request."""

    id: str = ""
    correlation_id: str = ""


@dataclass
class ClusterSnapshot:
    """Scheduling-relevant state of a cluster at one point in time."""

    pods: list[PodInfo] = field(default_factory=list)
    nodes: list[NodeInfo] = field(default_factory=list)
    priority_classes: list[dict[str, Any]] = field(default_factory=list)
    runtime_classes: list[dict[str, Any]] = field(default_factory=list)

    def get_unscheduled_pods(self) -> list[PodInfo]:
        """Return the pods not yet bound to a node, in snapshot order."""
        return [pod for pod in self.pods if not pod.node_name]

    def get_node_count_by_placement(self) -> dict[NodePlacement, int]:
        """Count nodes per placement; raise MissingRequiredLabelError if a label lacks."""
        counts: Counter[NodePlacement] = Counter()
        for node in self.nodes:
            counts[_node_placement(node)] += 1
        return dict(counts)


def _node_placement(node: NodeInfo) -> NodePlacement:
    labels = node.labels
    values = {}
    for label in (
        LABEL_NODE_TEMPLATE_NAME,
        LABEL_NODE_POOL_NAME,
        LABEL_TOPOLOGY_REGION,
        LABEL_TOPOLOGY_ZONE,
    ):
        if label not in labels:
            raise MissingRequiredLabelError(label)
        values[label] = labels[label]
    return NodePlacement(
        node_pool_name=values[LABEL_NODE_POOL_NAME],
        node_template_name=values[LABEL_NODE_TEMPLATE_NAME],
        instance_type=node.instance_type,
        region=values[LABEL_TOPOLOGY_REGION],
        availability_zone=values[LABEL_TOPOLOGY_ZONE],
    )


@dataclass
class ScalingAdviceRequest(ScalingAdviceRequestRef):
    """Parameters of a request for scaling advice."""

    constraint: ClusterScalingConstraint = field(default_factory=ClusterScalingConstraint)
    snapshot: ClusterSnapshot | None = None
    feedback: ClusterScalingFeedback | None = None
    enable_diagnostics: bool = False

    @property
    def ref(self) -> ScalingAdviceRequestRef:
        return ScalingAdviceRequestRef(self.id, self.correlation_id)


@dataclass
class ScalingAdviceResponse:
    """A piece of scaling advice produced for a request."""

    request_ref: ScalingAdviceRequestRef = field(default_factory=ScalingAdviceRequestRef)
    message: str = ""
    scaling_advice: ClusterScalingAdvice | None = None


@dataclass
class ScalingAdvisorServiceConfig(ServerConfig):
    """Configuration of the scaling advisor service."""

    minkapi_config: MinKAPIConfig = field(default_factory=MinKAPIConfig)
    qps: float = 0.0
    burst: int = 0
    cloud_provider: CloudProvider | None = None
    max_parallel_simulations: int = 0

    @property
    def qps_burst(self) -> QPSBurst:
        return QPSBurst(self.qps, self.burst)


@dataclass
class ResourceMeta:
    """Identity and metadata shared by pod and node descriptions."""

    uid: str = ""
    namespace: str = ""
    name: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    deletion_timestamp: datetime | None = None
    owner_references: list[dict[str, Any]] = field(default_factory=list)

    @property
    def namespaced_name(self) -> NamespacedName:
        return NamespacedName(self.namespace, self.name)


@dataclass
class PodResourceInfo:
    """A pod's identity and its aggregated resource requests."""

    uid: str = ""
    namespaced_name: NamespacedName = field(default_factory=NamespacedName)
    aggregated_requests: dict[str, int] = field(default_factory=dict)

    @property
    def namespace(self) -> str:
        return self.namespaced_name.namespace

    @property
    def name(self) -> str:
        return self.namespaced_name.name


@dataclass
class NodeResourceInfo:
    """The part of a node description a scorer needs."""

    name: str = ""
    instance_type: str = ""
    capacity: dict[str, int] = field(default_factory=dict)
    allocatable: dict[str, int] = field(default_factory=dict)


@dataclass
class PodInfo(ResourceMeta):
    """The pod information the scheduler needs."""

    aggregated_requests: dict[str, int] = field(default_factory=dict)
    volumes: list[dict[str, Any]] = field(default_factory=list)
    node_selector: dict[str, str] = field(default_factory=dict)
    node_name: str = ""
    affinity: dict[str, Any] | None = None
    scheduler_name: str = ""
    tolerations: list[dict[str, Any]] = field(default_factory=list)
    priority_class_name: str = ""
    priority: int | None = None
    preemption_policy: str | None = None
    runtime_class_name: str | None = None
    overhead: dict[str, int] = field(default_factory=dict)
    topology_spread_constraints: list[dict[str, Any]] = field(default_factory=list)
    resource_claims: list[dict[str, Any]] = field(default_factory=list)

    def get_resource_info(self) -> PodResourceInfo:
        """Return the pod's identity with its aggregated requests."""
        return PodResourceInfo(
            uid=self.uid,
            namespaced_name=self.namespaced_name,
            aggregated_requests=self.aggregated_requests,
        )


@dataclass
class NodeInfo(ResourceMeta):
    """The node information the scheduler needs."""

    instance_type: str = ""
    unschedulable: bool = False
    taints: list[dict[str, Any]] = field(default_factory=list)
    capacity: dict[str, int] = field(default_factory=dict)
    allocatable: dict[str, int] = field(default_factory=dict)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    csi_driver_volume_maximums: dict[str, int] = field(default_factory=dict)

    def get_resource_info(self) -> NodeResourceInfo:
        """Return the node's name, instance type and resources."""
        return NodeResourceInfo(
            name=self.name,
            instance_type=self.instance_type,
            capacity=self.capacity,
            allocatable=self.allocatable,
        )


@dataclass
class NodePodAssignment:
    """A node with the pods scheduled onto it."""

    node: NodeResourceInfo = field(default_factory=NodeResourceInfo)
    scheduled_pods: list[PodResourceInfo] = field(default_factory=list)


@dataclass
class InstancePriceInfo:
    """Price and size of an instance type in a region."""

    instance_type: str = ""
    region: str = ""
    vcpu: int = 0
    memory: float = 0.0
    hourly_price: float = 0.0
    os: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "instancetype": self.instance_type,
            "region": self.region,
            "VCPU": self.vcpu,
            "memory": self.memory,
            "hourlyPrice": self.hourly_price,
            "os": self.os,
        }

    @classmethod
    def from_dict(cls, data: Any) -> InstancePriceInfo:
        data = data or {}
        return cls(
            instance_type=data.get("instancetype", ""),
            region=data.get("region", ""),
            vcpu=int(data.get("VCPU", 0)),
            memory=float(data.get("memory", 0.0)),
            hourly_price=float(data.get("hourlyPrice", 0.0)),
            os=data.get("os", ""),
        )


@dataclass(frozen=True)
class PriceKey:
    """Key of an instance type price within a cloud provider."""

    name: str = ""
    region: str = ""


@dataclass
class NodeScorerArgs:
    """Input from which a node scorer computes a NodeScore."""

    id: str = ""
    placement: NodePlacement = field(default_factory=NodePlacement)
    scaled_assignment: NodePodAssignment | None = None
    other_assignments: list[NodePodAssignment] = field(default_factory=list)
    unscheduled_pods: list[NamespacedName] = field(default_factory=list)


@dataclass
class NodeScore:
    """Score of a simulated scaled node."""

    id: str = ""
    placement: NodePlacement = field(default_factory=NodePlacement)
    unscheduled_pods: list[NamespacedName] = field(default_factory=list)
    value: int = 0
    scaled_node_resource: NodeResourceInfo = field(default_factory=NodeResourceInfo)


@dataclass
class SimRunResult(NodeScorerArgs):
    """Result of one simulation run."""

    name: str = ""
    scaled_node: dict[str, Any] | None = None


@dataclass(frozen=True, order=True)
class SimGroupKey:
    """Partition key of a simulation group."""

    node_pool_priority: int = 0
    node_template_priority: int = 0

    def __str__(self) -> str:
        return f"({self.node_pool_priority}:{self.node_template_priority})"


@dataclass
class SimGroupRunResult:
    """Results of running all simulations of one group."""

    name: str = ""
    key: SimGroupKey = field(default_factory=SimGroupKey)
    simulation_results: list[SimRunResult] = field(default_factory=list)


@dataclass
class SimGroupScores:
    """Scores of a simulation group and its winner, if any."""

    all_node_scores: list[NodeScore] = field(default_factory=list)
    winner_node_score: NodeScore | None = None
    winner_node: dict[str, Any] | None = None