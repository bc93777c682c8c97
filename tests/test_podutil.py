import copy

import pytest

from scadvisor.podutil import (
    aggregate_pod_requests,
    as_pod,
    get_pod_condition,
    object_names_from_pod_resource_infos,
    pod_resource_info_from_pod,
    pod_resource_infos_from_pod_infos,
    pod_resource_infos_from_pods,
    update_pod_condition,
)
from scadvisor.service import NamespacedName, PodInfo

TRANSITION = "2025-01-01T00:00:00Z"

TEST_STATUS = {
    "phase": "Running",
    "conditions": [
        {"type": "PodScheduled", "status": "False", "lastTransitionTime": TRANSITION},
        {"type": "ContainersReady", "status": "True", "lastTransitionTime": TRANSITION},
        {"type": "Initialized", "status": "True", "lastTransitionTime": TRANSITION},
        {"type": "Initialized", "status": "False", "lastTransitionTime": TRANSITION},
    ],
}


@pytest.mark.parametrize(
    "status, ctype, index",
    [
        (TEST_STATUS, "Initialized", 2),
        (TEST_STATUS, "ContainersReady", 1),
        (TEST_STATUS, "Ready", -1),
        ({}, "", -1),
        (None, "", -1),
        ({"phase": "Pending"}, "", -1),
    ],
)
def test_get_pod_condition(status, ctype, index):
    got_index, got = get_pod_condition(status, ctype)
    assert got_index == index
    if index == -1:
        assert got is None
    else:
        assert got is TEST_STATUS["conditions"][index]
        assert got["type"] == ctype


@pytest.mark.parametrize(
    "condition, changed",
    [
        ({"type": "PodScheduled", "status": "True"}, True),
        ({"type": "PodResizePending", "status": "True"}, True),
        ({}, True),
        (copy.deepcopy(TEST_STATUS["conditions"][0]), False),
        ({"type": "PodScheduled", "status": "False", "lastTransitionTime": "2030-01-01T00:00:00Z"}, False),
    ],
)
def test_update_pod_condition(condition, changed):
    status = copy.deepcopy(TEST_STATUS)
    condition = copy.deepcopy(condition)
    assert update_pod_condition(status, condition) is changed
    _, stored = get_pod_condition(status, condition.get("type", ""))
    assert stored == condition
    if not changed:
        assert stored["lastTransitionTime"] == TRANSITION


def _info():
    return PodInfo(
        uid="u1", namespace="ns", name="p", labels={"a": "b"},
        aggregated_requests={"cpu": 2, "memory": 1024}, node_name="n1",
    )


def test_as_pod_round_trip():
    pod = as_pod(_info())
    assert pod["metadata"]["name"] == "p"
    assert pod["spec"]["containers"][0]["name"] == "p-aggregated-container"
    info = pod_resource_info_from_pod(pod)
    assert info.namespaced_name == NamespacedName("ns", "p")
    assert info.uid == "u1"
    assert info.aggregated_requests == {"cpu": 2, "memory": 1024}


def test_aggregate_includes_init_containers():
    pod = {"spec": {
        "initContainers": [{"resources": {"requests": {"cpu": "1"}}}],
        "containers": [{"resources": {"requests": {"cpu": "2", "memory": "1Ki"}}}, {}],
    }}
    assert aggregate_pod_requests(pod) == {"cpu": 3, "memory": 1024}


def test_resource_infos_and_names():
    infos = pod_resource_infos_from_pod_infos([_info()])
    assert infos[0].aggregated_requests == {"cpu": 2, "memory": 1024}
    from_pods = pod_resource_infos_from_pods([as_pod(_info())])
    assert from_pods == infos
    assert object_names_from_pod_resource_infos(infos) == ["ns/p"]