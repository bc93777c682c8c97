"""Scaling advisor resources: constraints, advice and feedback."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from scadvisor.common_types import (
    KIND_CLUSTER_SCALING_ADVICE,
    KIND_CLUSTER_SCALING_CONSTRAINT,
    OPERATOR_GROUP_NAME,
    ConstraintReference,
)

GROUP_VERSION = "v1alpha1"
KIND_CLUSTER_SCALING_CONSTRAINT_LIST = "ClusterScalingConstraintList"
KIND_CLUSTER_SCALING_FEEDBACK = "ClusterScalingFeedback"


@dataclass(frozen=True)
class GroupVersionKind:
    """Identifies the type of an API object."""

    group: str = ""
    version: str = ""
    kind: str = ""

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> GroupVersionKind:
        group, sep, version = api_version.rpartition("/")
        if not sep:
            return cls("", api_version, kind)
        return cls(group, version, kind)

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


SCHEME_API_VERSION = GroupVersionKind(OPERATOR_GROUP_NAME, GROUP_VERSION).api_version


def known_kinds() -> list[GroupVersionKind]:
    """Return the kinds registered for the scaling advisor API group."""
    return [
        GroupVersionKind(OPERATOR_GROUP_NAME, GROUP_VERSION, kind)
        for kind in (
            KIND_CLUSTER_SCALING_CONSTRAINT,
            KIND_CLUSTER_SCALING_CONSTRAINT_LIST,
            KIND_CLUSTER_SCALING_FEEDBACK,
        )
    ]


# Durations are written in the compact "1h2m3.5s" notation used by the API.
_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def _parse_duration(text: str) -> timedelta:
    raw = text.strip()
    body = raw.lstrip("+-")
    negative = raw.startswith("-")
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total = Decimal(0)
    pos = 0
    for match in _DURATION_PART.finditer(body):
        if match.start() != pos:
            raise ValueError(f"invalid duration {text!r}")
        try:
            total += Decimal(match.group(1)) * _UNITS_NS[match.group(2)]
        except InvalidOperation:
            raise ValueError(f"invalid duration {text!r}") from None
        pos = match.end()
    if pos != len(body):
        raise ValueError(f"invalid duration {text!r}")
    micros = int(total / 1000)
    return timedelta(microseconds=-micros if negative else micros)


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(frac).zfill(digits).rstrip('0')}"


def _format_duration(duration: timedelta) -> str:
    total_ns = (
        duration.days * 86_400_000_000 + duration.seconds * 1_000_000 + duration.microseconds
    ) * 1000
    if total_ns == 0:
        return "0s"
    sign = "-" if total_ns < 0 else ""
    ns = abs(total_ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_with_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_with_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, _UNITS_NS["h"])
    minutes, rest = divmod(rest, _UNITS_NS["m"])
    seconds = _with_fraction(rest, _UNITS_NS["s"])
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _str_map(data: Any) -> dict[str, str]:
    return {str(key): str(value) for key, value in (data or {}).items()}


def _ref_to_dict(ref: ConstraintReference) -> dict[str, Any]:
    return {"name": ref.name, "namespace": ref.namespace}


def _ref_from_dict(data: Any) -> ConstraintReference:
    data = data or {}
    return ConstraintReference(name=data.get("name", ""), namespace=data.get("namespace", ""))


@dataclass
class ObjectMeta:
    """Metadata carried by every persisted API object."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in (
            ("name", self.name),
            ("namespace", self.namespace),
            ("uid", self.uid),
            ("resourceVersion", self.resource_version),
            ("labels", dict(self.labels)),
            ("annotations", dict(self.annotations)),
        ):
            if value:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Any) -> ObjectMeta:
        data = data or {}
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
            resource_version=str(data.get("resourceVersion", "")),
            labels=_str_map(data.get("labels")),
            annotations=_str_map(data.get("annotations")),
        )


@dataclass(frozen=True)
class NodePlacement:
    """Where a node is placed: pool, template, instance type, region and zone."""

    node_pool_name: str = ""
    node_template_name: str = ""
    instance_type: str = ""
    region: str = ""
    availability_zone: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodePoolName": self.node_pool_name,
            "nodeTemplateName": self.node_template_name,
            "instanceType": self.instance_type,
            "region": self.region,
            "availabilityZone": self.availability_zone,
        }

    @classmethod
    def from_dict(cls, data: Any) -> NodePlacement:
        data = data or {}
        return cls(
            node_pool_name=data.get("nodePoolName", ""),
            node_template_name=data.get("nodeTemplateName", ""),
            instance_type=data.get("instanceType", ""),
            region=data.get("region", ""),
            availability_zone=data.get("availabilityZone", ""),
        )


@dataclass
class ScaleOutItem:
    """Scale-out advice for one node placement."""

    placement: NodePlacement = field(default_factory=NodePlacement)
    current_replicas: int = 0
    delta: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.placement.to_dict(),
            "currentReplicas": self.current_replicas,
            "delta": self.delta,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScaleOutItem:
        data = data or {}
        return cls(
            placement=NodePlacement.from_dict(data),
            current_replicas=int(data.get("currentReplicas", 0)),
            delta=int(data.get("delta", 0)),
        )


@dataclass
class ScaleInItem:
    """Scale-in advice naming one node to remove."""

    placement: NodePlacement = field(default_factory=NodePlacement)
    node_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {**self.placement.to_dict(), "nodeName": self.node_name}

    @classmethod
    def from_dict(cls, data: Any) -> ScaleInItem:
        data = data or {}
        return cls(placement=NodePlacement.from_dict(data), node_name=data.get("nodeName", ""))


@dataclass
class ScaleOutPlan:
    """Plan for scaling out across node pools."""

    unsatisfied_pod_names: list[str] = field(default_factory=list)
    items: list[ScaleOutItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unsatisfiedPodNames": list(self.unsatisfied_pod_names),
            "Items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScaleOutPlan:
        data = data or {}
        return cls(
            unsatisfied_pod_names=list(data.get("unsatisfiedPodNames") or []),
            items=[ScaleOutItem.from_dict(item) for item in data.get("Items") or []],
        )


@dataclass
class ScaleInPlan:
    """Plan for scaling in node pools or specific nodes."""

    items: list[ScaleInItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: Any) -> ScaleInPlan:
        data = data or {}
        return cls(items=[ScaleInItem.from_dict(item) for item in data.get("items") or []])


@dataclass
class ClusterScalingAdviceSpec:
    """Desired state of a ClusterScalingAdvice."""

    constraint_ref: ConstraintReference = field(default_factory=ConstraintReference)
    scale_out_plan: ScaleOutPlan | None = None
    scale_in_plan: ScaleInPlan | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "constraintRef": _ref_to_dict(self.constraint_ref),
            "scaleOutPlan": self.scale_out_plan.to_dict() if self.scale_out_plan else None,
            "scaleInPlan": self.scale_in_plan.to_dict() if self.scale_in_plan else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingAdviceSpec:
        data = data or {}
        out_plan = data.get("scaleOutPlan")
        in_plan = data.get("scaleInPlan")
        return cls(
            constraint_ref=_ref_from_dict(data.get("constraintRef")),
            scale_out_plan=ScaleOutPlan.from_dict(out_plan) if out_plan is not None else None,
            scale_in_plan=ScaleInPlan.from_dict(in_plan) if in_plan is not None else None,
        )


@dataclass
class ScalingSimRunResult:
    """Outcome of one simulation run."""

    node_pool_name: str = ""
    node_template_name: str = ""
    availability_zone: str = ""
    node_score: int = 0
    scheduled_pod_names: list[str] = field(default_factory=list)
    num_unscheduled_pods: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodePoolName": self.node_pool_name,
            "nodeTemplateName": self.node_template_name,
            "availabilityZone": self.availability_zone,
            "nodeScore": self.node_score,
            "scheduledPodNames": list(self.scheduled_pod_names),
            "numUnscheduledPods": self.num_unscheduled_pods,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScalingSimRunResult:
        data = data or {}
        return cls(
            node_pool_name=data.get("nodePoolName", ""),
            node_template_name=data.get("nodeTemplateName", ""),
            availability_zone=data.get("availabilityZone", ""),
            node_score=int(data.get("nodeScore", 0)),
            scheduled_pod_names=list(data.get("scheduledPodNames") or []),
            num_unscheduled_pods=int(data.get("numUnscheduledPods", 0)),
        )


@dataclass
class ScalingAdviceDiagnostic:
    """Diagnostics attached to a scaling advice."""

    sim_run_results: list[ScalingSimRunResult] = field(default_factory=list)
    trace_log_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "simRunResults": [result.to_dict() for result in self.sim_run_results],
            "traceLogURL": self.trace_log_url,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScalingAdviceDiagnostic:
        data = data or {}
        return cls(
            sim_run_results=[
                ScalingSimRunResult.from_dict(item) for item in data.get("simRunResults") or []
            ],
            trace_log_url=data.get("traceLogURL", ""),
        )


@dataclass
class ClusterScalingAdviceStatus:
    """Observed state of a ClusterScalingAdvice."""

    diagnostic: ScalingAdviceDiagnostic | None = None
    conditions: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.diagnostic is not None:
            out["diagnostic"] = self.diagnostic.to_dict()
        if self.conditions:
            out["conditions"] = [dict(c) for c in self.conditions]
        return out

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingAdviceStatus:
        data = data or {}
        diagnostic = data.get("diagnostic")
        return cls(
            diagnostic=(
                ScalingAdviceDiagnostic.from_dict(diagnostic) if diagnostic is not None else None
            ),
            conditions=[dict(c) for c in data.get("conditions") or []],
        )


@dataclass
class ClusterScalingAdvice:
    """Scaling advice generated for a cluster."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterScalingAdviceSpec = field(default_factory=ClusterScalingAdviceSpec)
    status: ClusterScalingAdviceStatus = field(default_factory=ClusterScalingAdviceStatus)
    api_version: str = SCHEME_API_VERSION
    kind: str = KIND_CLUSTER_SCALING_ADVICE

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version(self.api_version, self.kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingAdvice:
        data = data or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ClusterScalingAdviceSpec.from_dict(data.get("spec")),
            status=ClusterScalingAdviceStatus.from_dict(data.get("status")),
            api_version=data.get("apiVersion", SCHEME_API_VERSION),
            kind=data.get("kind", KIND_CLUSTER_SCALING_ADVICE),
        )


class ScalingAdviceGenerationMode(str, enum.Enum):
    """How scaling advice is handed out."""

    INCREMENTAL = "Incremental"
    ALL_AT_ONCE = "AllAtOnce"


@dataclass
class BackoffPolicy:
    """Backoff applied after a failed scaling operation."""

    initial_backoff: timedelta = timedelta(0)
    max_backoff: timedelta = timedelta(0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "initialBackoff": _format_duration(self.initial_backoff),
            "maxBackoff": _format_duration(self.max_backoff),
        }

    @classmethod
    def from_dict(cls, data: Any) -> BackoffPolicy:
        data = data or {}
        return cls(
            initial_backoff=_parse_duration(str(data.get("initialBackoff", "0"))),
            max_backoff=_parse_duration(str(data.get("maxBackoff", "0"))),
        )


@dataclass
class ScaleInPolicy:
    """Policy applied when scaling in a node pool; it carries no settings yet."""

    def to_dict(self) -> dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, data: Any) -> ScaleInPolicy:
        return cls()


@dataclass
class NodeTemplate:
    """Template from which nodes of one instance type are created."""

    name: str = ""
    architecture: str = ""
    instance_type: str = ""
    priority: int = 0
    capacity: dict[str, str] = field(default_factory=dict)
    kube_reserved: dict[str, str] = field(default_factory=dict)
    system_reserved: dict[str, str] = field(default_factory=dict)
    max_volumes: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "architecture": self.architecture,
            "instanceType": self.instance_type,
            "priority": self.priority,
            "capacity": dict(self.capacity),
        }
        if self.kube_reserved:
            out["kubeReservedCapacity"] = dict(self.kube_reserved)
        if self.system_reserved:
            out["systemReservedCapacity"] = dict(self.system_reserved)
        out["maxVolumes"] = self.max_volumes
        return out

    @classmethod
    def from_dict(cls, data: Any) -> NodeTemplate:
        data = data or {}
        return cls(
            name=data.get("name", ""),
            architecture=data.get("architecture", ""),
            instance_type=data.get("instanceType", ""),
            priority=int(data.get("priority", 0)),
            capacity=_str_map(data.get("capacity")),
            kube_reserved=_str_map(data.get("kubeReservedCapacity")),
            system_reserved=_str_map(data.get("systemReservedCapacity")),
            max_volumes=int(data.get("maxVolumes", 0)),
        )


@dataclass
class NodePool:
    """A node pool a cluster may scale."""

    name: str = ""
    region: str = ""
    priority: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    taints: list[dict[str, Any]] = field(default_factory=list)
    availability_zones: list[str] = field(default_factory=list)
    node_templates: list[NodeTemplate] = field(default_factory=list)
    quota: dict[str, str] = field(default_factory=dict)
    scale_in_policy: ScaleInPolicy | None = None
    backoff_policy: BackoffPolicy | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "region": self.region,
            "priority": self.priority,
            "labels": dict(self.labels),
            "annotations": dict(self.annotations),
            "taints": [dict(t) for t in self.taints],
            "availabilityZones": list(self.availability_zones),
            "nodeTemplates": [t.to_dict() for t in self.node_templates],
            "quota": dict(self.quota),
            "scaleInPolicy": self.scale_in_policy.to_dict() if self.scale_in_policy else None,
            "defaultBackoffPolicy": (
                self.backoff_policy.to_dict() if self.backoff_policy else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Any) -> NodePool:
        data = data or {}
        scale_in = data.get("scaleInPolicy")
        backoff = data.get("defaultBackoffPolicy")
        return cls(
            name=data.get("name", ""),
            region=data.get("region", ""),
            priority=int(data.get("priority", 0)),
            labels=_str_map(data.get("labels")),
            annotations=_str_map(data.get("annotations")),
            taints=[dict(t) for t in data.get("taints") or []],
            availability_zones=list(data.get("availabilityZones") or []),
            node_templates=[NodeTemplate.from_dict(t) for t in data.get("nodeTemplates") or []],
            quota=_str_map(data.get("quota")),
            scale_in_policy=ScaleInPolicy.from_dict(scale_in) if scale_in is not None else None,
            backoff_policy=BackoffPolicy.from_dict(backoff) if backoff is not None else None,
        )


@dataclass
class InstancePricing:
    """Pricing of an instance type."""

    instance_type: str = ""
    price: float = 0.0
    unit_cpu_price: float | None = None
    unit_memory_price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"instanceType": self.instance_type, "price": self.price}
        if self.unit_cpu_price is not None:
            out["unitCPUPrice"] = self.unit_cpu_price
        if self.unit_memory_price is not None:
            out["unitMemoryPrice"] = self.unit_memory_price
        return out

    @classmethod
    def from_dict(cls, data: Any) -> InstancePricing:
        data = data or {}
        cpu = data.get("unitCPUPrice")
        memory = data.get("unitMemoryPrice")
        return cls(
            instance_type=data.get("instanceType", ""),
            price=float(data.get("price", 0.0)),
            unit_cpu_price=float(cpu) if cpu is not None else None,
            unit_memory_price=float(memory) if memory is not None else None,
        )


@dataclass
class ClusterScalingConstraintSpec:
    """Specification of a ClusterScalingConstraint."""

    consumer_id: str = ""
    advice_generation_mode: ScalingAdviceGenerationMode | None = None
    node_pools: list[NodePool] = field(default_factory=list)
    default_backoff_policy: BackoffPolicy | None = None
    scale_in_policy: ScaleInPolicy | None = None

    def to_dict(self) -> dict[str, Any]:
        mode = self.advice_generation_mode
        return {
            "consumerID": self.consumer_id,
            "adviceGenerationMode": mode.value if mode is not None else "",
            "nodePools": [pool.to_dict() for pool in self.node_pools],
            "defaultBackoffPolicy": (
                self.default_backoff_policy.to_dict() if self.default_backoff_policy else None
            ),
            "scaleInPolicy": self.scale_in_policy.to_dict() if self.scale_in_policy else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingConstraintSpec:
        data = data or {}
        mode = data.get("adviceGenerationMode") or ""
        backoff = data.get("defaultBackoffPolicy")
        scale_in = data.get("scaleInPolicy")
        return cls(
            consumer_id=data.get("consumerID", ""),
            advice_generation_mode=ScalingAdviceGenerationMode(mode) if mode else None,
            node_pools=[NodePool.from_dict(pool) for pool in data.get("nodePools") or []],
            default_backoff_policy=(
                BackoffPolicy.from_dict(backoff) if backoff is not None else None
            ),
            scale_in_policy=ScaleInPolicy.from_dict(scale_in) if scale_in is not None else None,
        )


@dataclass
class ClusterScalingConstraint:
    """Constraints from which cluster scaling advice is created."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterScalingConstraintSpec = field(default_factory=ClusterScalingConstraintSpec)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    api_version: str = SCHEME_API_VERSION
    kind: str = KIND_CLUSTER_SCALING_CONSTRAINT

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version(self.api_version, self.kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": {"conditions": [dict(c) for c in self.conditions]},
        }

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingConstraint:
        data = data or {}
        status = data.get("status") or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ClusterScalingConstraintSpec.from_dict(data.get("spec")),
            conditions=[dict(c) for c in status.get("conditions") or []],
            api_version=data.get("apiVersion", SCHEME_API_VERSION),
            kind=data.get("kind", KIND_CLUSTER_SCALING_CONSTRAINT),
        )


class ScalingErrorType(str, enum.Enum):
    """Kind of failure reported back for a scaling operation."""

    RESOURCE_EXHAUSTED = "ResourceExhaustedError"
    CREATION_TIMEOUT = "CreationTimeoutError"


@dataclass
class ScaleOutErrorInfo:
    """Failed scale-out for one instance type and zone."""

    availability_zone: str = ""
    instance_type: str = ""
    fail_count: int = 0
    error_type: ScalingErrorType = ScalingErrorType.RESOURCE_EXHAUSTED

    def to_dict(self) -> dict[str, Any]:
        return {
            "availabilityZone": self.availability_zone,
            "instanceType": self.instance_type,
            "failCount": self.fail_count,
            "errorType": self.error_type.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScaleOutErrorInfo:
        data = data or {}
        return cls(
            availability_zone=data.get("availabilityZone", ""),
            instance_type=data.get("instanceType", ""),
            fail_count=int(data.get("failCount", 0)),
            error_type=ScalingErrorType(
                data.get("errorType", ScalingErrorType.RESOURCE_EXHAUSTED.value)
            ),
        )


@dataclass
class ScaleInErrorInfo:
    """Nodes that could not be deleted during scale-in."""

    node_names: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"nodeNames": list(self.node_names)}

    @classmethod
    def from_dict(cls, data: Any) -> ScaleInErrorInfo:
        data = data or {}
        return cls(node_names=list(data.get("nodeNames") or []))


@dataclass
class ClusterScalingFeedbackSpec:
    """Specification of a ClusterScalingFeedback."""

    constraint_ref: ConstraintReference = field(default_factory=ConstraintReference)
    scale_out_error_infos: list[ScaleOutErrorInfo] = field(default_factory=list)
    scale_in_error_info: ScaleInErrorInfo = field(default_factory=ScaleInErrorInfo)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"constraintRef": _ref_to_dict(self.constraint_ref)}
        if self.scale_out_error_infos:
            out["scaleOutErrorInfos"] = [i.to_dict() for i in self.scale_out_error_infos]
        out["scaleInErrorInfo"] = self.scale_in_error_info.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingFeedbackSpec:
        data = data or {}
        return cls(
            constraint_ref=_ref_from_dict(data.get("constraintRef")),
            scale_out_error_infos=[
                ScaleOutErrorInfo.from_dict(i) for i in data.get("scaleOutErrorInfos") or []
            ],
            scale_in_error_info=ScaleInErrorInfo.from_dict(data.get("scaleInErrorInfo")),
        )


@dataclass
class ClusterScalingFeedback:
    """Scale-out and scale-in error feedback from the lifecycle manager."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterScalingFeedbackSpec = field(default_factory=ClusterScalingFeedbackSpec)
    api_version: str = SCHEME_API_VERSION
    kind: str = KIND_CLUSTER_SCALING_FEEDBACK

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version(self.api_version, self.kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ClusterScalingFeedback:
        data = data or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ClusterScalingFeedbackSpec.from_dict(data.get("spec")),
            api_version=data.get("apiVersion", SCHEME_API_VERSION),
            kind=data.get("kind", KIND_CLUSTER_SCALING_FEEDBACK),
        )