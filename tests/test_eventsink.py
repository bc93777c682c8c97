import pytest

from scadvisor.errors import NotFoundError, PatchError
from scadvisor.eventsink import InMemEventSink


def _event(name, note=""):
    return {"metadata": {"name": name, "namespace": "default"}, "note": note}


def test_create_and_list():
    sink = InMemEventSink()
    sink.create(_event("a"))
    sink.create(_event("b"))
    assert [e["metadata"]["name"] for e in sink.list()] == ["a", "b"]


def test_update_replaces():
    sink = InMemEventSink()
    sink.create(_event("a", "one"))
    sink.update(_event("a", "two"))
    assert sink.list() == [_event("a", "two")]


def test_update_missing_raises():
    with pytest.raises(NotFoundError):
        InMemEventSink().update(_event("x"))


def test_patch():
    sink = InMemEventSink()
    sink.create(_event("a"))
    apply_patch = sink.patch
    result = apply_patch(_event("a"), '{"series": {"count": 2}}')
    assert result["series"]["count"] == 2
    assert sink.list()[0] == result


def test_patch_missing_event_raises():
    sink = InMemEventSink()
    sink.create(_event("a"))
    apply_patch = sink.patch
    with pytest.raises(NotFoundError):
        apply_patch(_event("zz"), "{}")


def test_patch_corrupt_data_raises():
    sink = InMemEventSink()
    sink.create(_event("a"))
    apply_patch = sink.patch
    with pytest.raises(PatchError):
        apply_patch(_event("a"), "{}}")


def test_delete_and_reset():
    sink = InMemEventSink()
    sink.create(_event("a"))
    sink.create(_event("b"))
    sink.delete(_event("a"))
    assert sink.list() == [_event("b")]
    sink.reset()
    assert sink.list() == []