from datetime import timedelta

import pytest

from scadvisor.core import ObjectMeta
from scadvisor.minkapi import (
    DEFAULT_BASE_PREFIX,
    DEFAULT_WATCH_QUEUE_SIZE,
    DEFAULT_WATCH_TIMEOUT,
    MATCH_ALL_CRITERIA,
    LabelSelector,
    MatchCriteria,
    MinKAPIConfig,
    ViewType,
    WatchConfig,
    parse_label_selector,
    selector_from_set,
)


@pytest.fixture
def pod_meta():
    return ObjectMeta(name="bingo", namespace="default", labels={"k1": "v1", "k2": "v2"})


@pytest.mark.parametrize(
    "criteria,expected",
    [
        (MatchCriteria(names={"abcd"}), False),
        (MatchCriteria(names={"bingo"}), True),
        (MatchCriteria(names={"bingo"}, namespace="default"), True),
        (MatchCriteria(names={"bingo"}, namespace="test"), False),
        (
            MatchCriteria(namespace="default", label_selector=selector_from_set({"k1": "v1"})),
            True,
        ),
        (
            MatchCriteria(namespace="default", label_selector=selector_from_set({"k1": "v2"})),
            False,
        ),
    ],
    ids=[
        "not matching name",
        "matching name",
        "matching name and namespace",
        "matching name but different namespace",
        "matching namespace and label",
        "matching namespace but not label",
    ],
)
def test_match_criteria(pod_meta, criteria, expected):
    assert criteria.matches(pod_meta) is expected


def test_match_all_criteria_matches_anything(pod_meta):
    assert MATCH_ALL_CRITERIA.matches(pod_meta)
    assert MATCH_ALL_CRITERIA.matches({"metadata": {}})


def test_match_criteria_on_mapping():
    obj = {"metadata": {"name": "bingo", "namespace": "default", "labels": {"k1": "v1"}}}
    assert MatchCriteria(names=["bingo"], label_selector=parse_label_selector("k1")).matches(obj)
    assert not MatchCriteria(namespace="other").matches(obj)


def test_match_criteria_names_become_frozenset():
    assert MatchCriteria(names=["a", "b", "a"]).names == frozenset({"a", "b"})


@pytest.mark.parametrize(
    "selector,expected",
    [
        ("k1=v1", True),
        ("k1==v1", True),
        ("k1!=v1", False),
        ("k1=v1,k2=v2", True),
        ("k1=v1,k2=other", False),
        ("k1 in (v1, v9)", True),
        ("k1 notin (v1,v9)", False),
        ("k3 notin (v1)", True),
        ("k1", True),
        ("!k1", False),
        ("!k3", True),
        ("n>5", True),
        ("n<5", False),
        ("k1>5", False),
        ("", True),
    ],
)
def test_parse_label_selector_matching(selector, expected):
    labels = {"k1": "v1", "k2": "v2", "n": "7"}
    assert parse_label_selector(selector).matches(labels) is expected


@pytest.mark.parametrize(
    "selector",
    ["k1 in (a", "k1 in ()", "=v", "k1=v!x", "n>x", "bad key=v", "a,,b", ")"],
)
def test_parse_label_selector_rejects_malformed(selector):
    with pytest.raises(ValueError):
        parse_label_selector(selector)


@pytest.mark.parametrize("text", ["b=2,a!=1", "x in (c,a,b),!y", "z,n>3"])
def test_label_selector_string_round_trip(text):
    selector = parse_label_selector(text)
    assert parse_label_selector(str(selector)) == selector


def test_selector_from_set_is_order_independent():
    assert selector_from_set({"a": "1", "b": "2"}) == parse_label_selector("b=2,a=1")


def test_empty_selectors_match_everything():
    assert LabelSelector().empty
    assert selector_from_set({}).matches({"x": "y"})
    assert parse_label_selector("   ").matches(None)


def test_minkapi_config_defaults():
    config = MinKAPIConfig()
    assert config.base_prefix == DEFAULT_BASE_PREFIX
    assert config.watch_config == WatchConfig(DEFAULT_WATCH_QUEUE_SIZE, DEFAULT_WATCH_TIMEOUT)
    assert DEFAULT_WATCH_TIMEOUT == timedelta(minutes=5)


def test_view_type_values():
    assert ViewType("sandbox") is ViewType.SANDBOX
    assert ViewType.BASE.value == "base"