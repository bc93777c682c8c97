"""Helpers for nodes held as plain mappings."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from scadvisor.common_types import LABEL_SIMULATION_GROUP_PASS_NUM, LABEL_SIMULATION_NAME
from scadvisor.core import NodePool, NodeTemplate
from scadvisor.objutil import int_map_to_resource_list, subtract_resources
from scadvisor.service import LABEL_TOPOLOGY_REGION, LABEL_TOPOLOGY_ZONE, NodeInfo

LABEL_INSTANCE_TYPE = "node.kubernetes.io/instance-type"
LABEL_ARCH = "kubernetes.io/arch"
LABEL_OS = "kubernetes.io/os"
LABEL_HOSTNAME = "kubernetes.io/hostname"


def _timestamp(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def get_instance_type(node: Mapping[str, Any]) -> str:
    """Return the node's instance type label, or ''."""
    return ((node.get("metadata") or {}).get("labels") or {}).get(LABEL_INSTANCE_TYPE, "")


def as_node(info: NodeInfo) -> dict[str, Any]:
    """Build a node object from a NodeInfo."""
    metadata: dict[str, Any] = {
        "name": info.name,
        "labels": info.labels,
        "annotations": info.annotations,
    }
    if info.deletion_timestamp is not None:
        metadata["deletionTimestamp"] = _timestamp(info.deletion_timestamp)
    return {
        "apiVersion": "v1",
        "kind": "Node",
        "metadata": metadata,
        "spec": {"taints": info.taints, "unschedulable": info.unschedulable},
        "status": {
            "capacity": int_map_to_resource_list(info.capacity),
            "allocatable": int_map_to_resource_list(info.allocatable),
            "conditions": info.conditions,
        },
    }


def compute_allocatable(
    capacity: Mapping[str, Any],
    system_reserved: Mapping[str, Any] | None,
    kube_reserved: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Return capacity less system and kube reserved resources."""
    allocatable = dict(capacity)
    subtract_resources(allocatable, system_reserved or {})
    subtract_resources(allocatable, kube_reserved or {})
    return allocatable


def build_ready_conditions(transition_time: datetime) -> list[dict[str, Any]]:
    """Return the conditions of a ready node."""
    return [{"type": "Ready", "status": "True", "lastTransitionTime": _timestamp(transition_time)}]


def create_node_labels(
    simulation_name: str,
    node_pool: NodePool,
    node_template: NodeTemplate,
    az: str,
    group_run_pass_num: int,
    node_name: str,
) -> dict[str, str]:
    """Return the labels of a simulated node."""
    labels = dict(node_pool.labels)
    labels.update({
        LABEL_SIMULATION_NAME: simulation_name,
        LABEL_SIMULATION_GROUP_PASS_NUM: str(group_run_pass_num),
        LABEL_INSTANCE_TYPE: node_template.instance_type,
        LABEL_ARCH: node_template.architecture,
        LABEL_TOPOLOGY_ZONE: az,
        LABEL_TOPOLOGY_REGION: node_pool.region,
        LABEL_OS: "linux",
        LABEL_HOSTNAME: node_name,
    })
    return labels