import copy

import pytest

from scadvisor.core import GroupVersionKind
from scadvisor.errors import AdvisorError, PatchError, UnexpectedTypeError
from scadvisor.objutil import (
    PatchType,
    cache_name,
    cast,
    format_quantity,
    generate_name,
    int_map_to_resource_list,
    is_resource_list_equal,
    load_yaml_object,
    max_resource_version,
    parse_object_resource_version,
    parse_quantity,
    parse_resource_version,
    patch_object,
    patch_object_status,
    resource_list_to_int_map,
    set_meta_object_gvk,
    subtract_resources,
    to_yaml,
    write_yaml_object,
)
from scadvisor.service import NamespacedName

POD_GVK = GroupVersionKind("", "v1", "Pod")


def test_resource_list_to_int_map_and_back():
    src = {"memory": "1Ki", "cpu": "2", "ephemeral-storage": "100Mi"}
    target = resource_list_to_int_map(src)
    assert target == {"memory": 1024, "cpu": 2, "ephemeral-storage": 100 * 1024 * 1024}
    assert is_resource_list_equal(int_map_to_resource_list(target), src)


def test_quantities():
    assert parse_quantity("500m") == 1
    assert parse_quantity("1k") == 1000
    assert format_quantity(1024) == "1024"
    assert format_quantity(2000) == "2k"
    with pytest.raises(ValueError):
        parse_quantity("abc")


def test_resource_list_inequality():
    assert not is_resource_list_equal({"cpu": "1"}, {"cpu": "2"})
    assert not is_resource_list_equal({"cpu": "1"}, {"cpu": "1", "memory": "1"})


def test_subtract_resources_ignores_missing():
    a = {"cpu": "4", "memory": "1Gi"}
    subtract_resources(a, {"cpu": "500m", "gpu": "1"})
    assert a["cpu"] == "3500m"
    assert "gpu" not in a
    assert a["memory"] == "1Gi"


@pytest.mark.parametrize(
    "content, error",
    [
        ("apiVersion: v1\nkind: Pod\nmetadata:\n  name: pod-a\n", None),
        ("kind: Pod\nmetadata:\n  name: [unclosed\n", "failed to unmarshal object"),
        ("just some words", "failed to unmarshal object"),
        (None, "failed to read"),
    ],
)
def test_load_yaml_object(tmp_path, content, error):
    path = tmp_path / "pod-a.yaml"
    if content is not None:
        path.write_text(content)
    if error is None:
        assert load_yaml_object(path)["metadata"]["name"] == "pod-a"
    else:
        with pytest.raises(AdvisorError, match=error):
            load_yaml_object(path)


def test_yaml_round_trip(tmp_path):
    obj = {"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "bingo"}}
    path = tmp_path / "out.yaml"
    write_yaml_object(obj, path)
    assert load_yaml_object(path) == obj
    assert "kind: Pod" in to_yaml(obj)


@pytest.mark.parametrize(
    "type_meta, expected",
    [
        ({"apiVersion": "v1", "kind": "Pod"}, ("v1", "Pod")),
        ({"apiVersion": "v1"}, ("v1", None)),
        ({"kind": "Pod"}, (None, "Pod")),
        ({}, ("v1", "Pod")),
    ],
)
def test_set_meta_object_gvk(type_meta, expected):
    pod = {"metadata": {"name": "bingo", "namespace": "default"}, **type_meta}
    set_meta_object_gvk(pod, POD_GVK)
    assert (pod.get("apiVersion"), pod.get("kind")) == expected


STATUS_PATCH = """{
"status" : {
    "conditions" : [ {
      "lastProbeTime" : null,
      "lastTransitionTime" : "2025-05-08T08:21:44Z",
      "message" : "no nodes available to schedule pods",
      "reason" : "Unschedulable",
      "status" : "False",
      "type" : "PodScheduled"
    } ]
  }
}"""


def _pod():
    return {"metadata": {"name": "bingo", "namespace": "default"}, "status": {}}


@pytest.mark.parametrize(
    "key, patch, error, nil",
    [
        ("default/bingo", STATUS_PATCH, None, False),
        ("default/bingo", '{"status": {"conditions": "not-an-array"}}', "failed to unmarshal patched status", False),
        ("default/bingo", STATUS_PATCH, "non-nil pointer", True),
        ("default/bingo", "{}", "does not contain a 'status'", False),
        ("default/bingo", "{{}", "failed to parse patch", False),
        ("default/abc", STATUS_PATCH, None, False),
    ],
)
def test_patch_object_status(key, patch, error, nil):
    pod = _pod()
    name = NamespacedName("default", key)
    if error:
        with pytest.raises(PatchError, match=error):
            patch_object_status(None if nil else pod, name, patch.encode())
    else:
        patch_object_status(pod, name, patch.encode())
        assert pod["status"]["conditions"][0]["reason"] == "Unschedulable"


SERIES_PATCH = '{"series": {"count": 2, "lastObservedTime": "2025-05-08T09:05:57.028064Z"}}'


@pytest.mark.parametrize(
    "content_type, patch, error, nil",
    [
        ("application/strategic-merge-patch+json", SERIES_PATCH, None, False),
        ("application/merge-patch+json", SERIES_PATCH, None, False),
        ("application/json-patch+json", SERIES_PATCH, "unsupported patch type", False),
        ("application/strategic-merge-patch+json", "{}}", "invalid JSON", False),
        ("application/merge-patch+json", "{}}", "Invalid JSON", False),
        ("application/merge-patch+json", '{ "metadata": "abcdefgh"}', "failed to unmarshal patched JSON", False),
        ("application/merge-patch+json", SERIES_PATCH, "non-nil pointer", True),
    ],
)
def test_patch_object_event(content_type, patch, error, nil):
    event = {"metadata": {"name": "a-bingo.aaabbb", "namespace": "default"}}
    original = copy.deepcopy(event)
    name = NamespacedName("default", "a-bingo.aaabbb")
    if error:
        with pytest.raises(PatchError, match=error):
            patch_object(None if nil else event, name, content_type, patch)
        assert event == original
    else:
        patch_object(event, name, content_type, patch)
        assert event["series"]["count"] == 2
        assert event["metadata"] == original["metadata"]


def test_strategic_merge_merges_conditions_by_type():
    pod = {"status": {"conditions": [{"type": "Ready", "status": "False"}, {"type": "X", "status": "True"}]}}
    patch_object(pod, "p", PatchType.STRATEGIC_MERGE, '{"status": {"conditions": [{"type": "Ready", "status": "True"}]}}')
    assert pod["status"]["conditions"] == [{"type": "Ready", "status": "True"}, {"type": "X", "status": "True"}]


def test_resource_versions():
    assert parse_resource_version("") == 0
    assert parse_resource_version("42") == 42
    with pytest.raises(ValueError, match="cannot parse resource version"):
        parse_resource_version("x1")
    assert parse_object_resource_version({"metadata": {"resourceVersion": "7"}}) == 7
    objs = [{"metadata": {"resourceVersion": v}} for v in ("3", "9", "5")]
    assert max_resource_version(objs) == 9
    assert max_resource_version([]) == 0
    with pytest.raises(ValueError):
        max_resource_version([{"metadata": {"name": "a", "resourceVersion": "bad"}}])


def test_cache_name_and_generate_name():
    assert cache_name({"metadata": {"name": "a", "namespace": "ns"}}) == NamespacedName("ns", "a")
    name = generate_name("pod-")
    assert name.startswith("pod-") and len(name) == len("pod-") + 5
    assert len(generate_name("x" * 300)) == 253


def test_cast():
    assert cast({"a": 1}, dict) == {"a": 1}
    with pytest.raises(UnexpectedTypeError):
        cast("text", dict)