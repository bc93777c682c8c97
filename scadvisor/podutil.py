"""Helpers for pods held as plain mappings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from scadvisor.objutil import int_map_to_resource_list, resource_list_to_int_map
from scadvisor.service import NamespacedName, PodInfo, PodResourceInfo


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def get_pod_condition(
    status: Mapping[str, Any] | None, condition_type: str
) -> tuple[int, dict[str, Any] | None]:
    """Return the index and the first condition of the given type, or (-1, None)."""
    if status is None:
        return -1, None
    for index, condition in enumerate(status.get("conditions") or []):
        if condition.get("type") == condition_type:
            return index, condition
    return -1, None


def update_pod_condition(status: dict[str, Any], condition: dict[str, Any]) -> bool:
    """Add or update a condition in ``status``; report whether anything changed."""
    condition["lastTransitionTime"] = _now()
    index, old = get_pod_condition(status, condition.get("type", ""))
    if old is None:
        status.setdefault("conditions", []).append(condition)
        return True
    if condition.get("status") == old.get("status"):
        condition["lastTransitionTime"] = old.get("lastTransitionTime")
    unchanged = all(
        condition.get(key) == old.get(key)
        for key in ("status", "reason", "message", "lastProbeTime", "lastTransitionTime")
    )
    status["conditions"][index] = condition
    return not unchanged


def as_pod(info: PodInfo) -> dict[str, Any]:
    """Build a pod object from a PodInfo, with one container holding the aggregated requests."""
    spec: dict[str, Any] = {
        "volumes": info.volumes,
        "nodeSelector": info.node_selector,
        "nodeName": info.node_name,
        "affinity": info.affinity,
        "schedulerName": info.scheduler_name,
        "tolerations": info.tolerations,
        "priorityClassName": info.priority_class_name,
        "priority": info.priority,
        "runtimeClassName": info.runtime_class_name,
        "preemptionPolicy": info.preemption_policy,
        "overhead": int_map_to_resource_list(info.overhead),
        "topologySpreadConstraints": info.topology_spread_constraints,
        "resourceClaims": info.resource_claims,
        "containers": [
            {
                "name": f"{info.name}-aggregated-container",
                "resources": {"requests": int_map_to_resource_list(info.aggregated_requests)},
            }
        ],
    }
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": info.name,
            "namespace": info.namespace,
            "labels": info.labels,
            "annotations": info.annotations,
            "uid": info.uid,
            "ownerReferences": info.owner_references,
        },
        "spec": spec,
    }


def pod_resource_infos_from_pod_infos(pod_infos: Iterable[PodInfo]) -> list[PodResourceInfo]:
    """Return the resource info of each PodInfo."""
    return [info.get_resource_info() for info in pod_infos]


def pod_resource_infos_from_pods(pods: Iterable[Mapping[str, Any]]) -> list[PodResourceInfo]:
    """Return the resource info of each pod object."""
    return [pod_resource_info_from_pod(pod) for pod in pods]


def pod_resource_info_from_pod(pod: Mapping[str, Any]) -> PodResourceInfo:
    """Return a pod object's identity and aggregated requests."""
    meta = pod.get("metadata") or {}
    return PodResourceInfo(
        uid=meta.get("uid", ""),
        namespaced_name=NamespacedName(meta.get("namespace", ""), meta.get("name", "")),
        aggregated_requests=aggregate_pod_requests(pod),
    )


def aggregate_pod_requests(pod: Mapping[str, Any]) -> dict[str, int]:
    """Sum the resource requests of all init and regular containers."""
    spec = pod.get("spec") or {}
    total: Counter[str] = Counter()
    for container in [*(spec.get("initContainers") or []), *(spec.get("containers") or [])]:
        requests = (container.get("resources") or {}).get("requests")
        for name, value in resource_list_to_int_map(requests).items():
            total[name] += value
    return dict(total)


def object_names_from_pod_resource_infos(pods: Iterable[PodResourceInfo]) -> list[str]:
    """Return ``namespace/name`` for each pod."""
    return [str(pod.namespaced_name) for pod in pods]