import pytest

from scadvisor.common_types import LABEL_NODE_POOL_NAME, LABEL_NODE_TEMPLATE_NAME
from scadvisor.core import NodePlacement
from scadvisor.errors import MissingRequiredLabelError
from scadvisor.service import (
    LABEL_TOPOLOGY_REGION,
    LABEL_TOPOLOGY_ZONE,
    ClusterSnapshot,
    InstancePriceInfo,
    NamespacedName,
    NodeInfo,
    PodInfo,
    ScalingAdviceRequest,
    SimGroupKey,
)


def _labels(pool="np-a", template="nt-a", region="eu-west-1", zone="eu-west-1a"):
    return {
        LABEL_NODE_POOL_NAME: pool,
        LABEL_NODE_TEMPLATE_NAME: template,
        LABEL_TOPOLOGY_REGION: region,
        LABEL_TOPOLOGY_ZONE: zone,
    }


def test_namespaced_name_str():
    assert str(NamespacedName("default", "bingo")) == "default/bingo"


def test_sim_group_key_str():
    assert str(SimGroupKey(1, 2)) == "(1:2)"


def test_sim_group_key_ordering():
    keys = [SimGroupKey(2, 1), SimGroupKey(1, 2), SimGroupKey(1, 1)]
    assert sorted(keys) == [SimGroupKey(1, 1), SimGroupKey(1, 2), SimGroupKey(2, 1)]


def test_unscheduled_pods():
    a = PodInfo(name="a", namespace="default")
    b = PodInfo(name="b", namespace="default", node_name="node-1")
    c = PodInfo(name="c", namespace="default")
    snapshot = ClusterSnapshot(pods=[a, b, c])
    assert [p.name for p in snapshot.get_unscheduled_pods()] == ["a", "c"]


def test_unscheduled_pods_empty_snapshot():
    assert ClusterSnapshot().get_unscheduled_pods() == []


def test_node_count_by_placement():
    nodes = [
        NodeInfo(name="n1", instance_type="m5.large", labels=_labels()),
        NodeInfo(name="n2", instance_type="m5.large", labels=_labels()),
        NodeInfo(name="n3", instance_type="m5.large", labels=_labels(zone="eu-west-1b")),
    ]
    counts = ClusterSnapshot(nodes=nodes).get_node_count_by_placement()
    first = NodePlacement("np-a", "nt-a", "m5.large", "eu-west-1", "eu-west-1a")
    second = NodePlacement("np-a", "nt-a", "m5.large", "eu-west-1", "eu-west-1b")
    assert counts == {first: 2, second: 1}
    assert sum(counts.values()) == len(nodes)


@pytest.mark.parametrize(
    "missing",
    [LABEL_NODE_TEMPLATE_NAME, LABEL_NODE_POOL_NAME, LABEL_TOPOLOGY_REGION, LABEL_TOPOLOGY_ZONE],
)
def test_node_count_missing_label(missing):
    labels = _labels()
    del labels[missing]
    snapshot = ClusterSnapshot(nodes=[NodeInfo(name="n1", labels=labels)])
    with pytest.raises(MissingRequiredLabelError) as info:
        snapshot.get_node_count_by_placement()
    assert info.value.detail == missing
    assert missing in str(info.value)


def test_pod_resource_info():
    pod = PodInfo(
        uid="uid-1",
        name="bingo",
        namespace="default",
        aggregated_requests={"cpu": 2, "memory": 1024},
    )
    info = pod.get_resource_info()
    assert info.uid == "uid-1"
    assert info.namespaced_name == NamespacedName("default", "bingo")
    assert info.name == "bingo"
    assert info.aggregated_requests == {"cpu": 2, "memory": 1024}


def test_node_resource_info():
    node = NodeInfo(
        name="n1",
        instance_type="m5.large",
        capacity={"cpu": 4},
        allocatable={"cpu": 3},
    )
    info = node.get_resource_info()
    assert (info.name, info.instance_type) == ("n1", "m5.large")
    assert info.capacity == {"cpu": 4}
    assert info.allocatable == {"cpu": 3}


def test_request_ref():
    req = ScalingAdviceRequest(id="r1", correlation_id="c1")
    assert req.ref.id == "r1"
    assert req.ref.correlation_id == "c1"


def test_instance_price_info_round_trip():
    info = InstancePriceInfo("m5.large", "eu-west-1", 2, 8.0, 0.1, "linux")
    data = info.to_dict()
    assert data["instancetype"] == "m5.large"
    assert data["VCPU"] == 2
    assert InstancePriceInfo.from_dict(data) == info


def test_resource_meta_namespaced_name():
    node = NodeInfo(name="n1", namespace="")
    assert node.namespaced_name == NamespacedName("", "n1")
    assert str(node.namespaced_name) == "/n1"