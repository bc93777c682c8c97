"""Configuration and object matching for the minimal in-memory KAPI service."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from scadvisor.common_types import ServerConfig

PROGRAM_NAME = "minkapi"
DEFAULT_WATCH_QUEUE_SIZE = 100
DEFAULT_WATCH_TIMEOUT = timedelta(minutes=5)
DEFAULT_KUBE_CONFIG_PATH = "/tmp/minkapi.yaml"
DEFAULT_BASE_PREFIX = "base"


@dataclass
class WatchConfig:
    """Settings for watchers."""

    queue_size: int = DEFAULT_WATCH_QUEUE_SIZE
    timeout: timedelta = DEFAULT_WATCH_TIMEOUT


@dataclass
class MinKAPIConfig(ServerConfig):
    """Configuration of the in-memory KAPI service."""

    base_prefix: str = DEFAULT_BASE_PREFIX
    watch_config: WatchConfig = field(default_factory=WatchConfig)


class ViewType(str, enum.Enum):
    """Kind of a view onto the object repository."""

    BASE = "base"
    SANDBOX = "sandbox"


class _Operator(str, enum.Enum):
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    EQUALS = "="
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"
    GREATER_THAN = ">"
    LESS_THAN = "<"


_NAME = re.compile(r"[A-Za-z0-9](?:[-A-Za-z0-9_.]*[A-Za-z0-9])?")
_PREFIX = re.compile(r"[a-z0-9](?:[-a-z0-9]*[a-z0-9])?(?:\.[a-z0-9](?:[-a-z0-9]*[a-z0-9])?)*")
_KEY_CHARS = r"[^\s!=<>(),]+"
_SET_RE = re.compile(rf"({_KEY_CHARS})\s+(in|notin)\s*\(([^()]*)\)")
_CMP_RE = re.compile(rf"({_KEY_CHARS})\s*(==|!=|=|>|<)\s*(.*)")
_KEY_RE = re.compile(_KEY_CHARS)


def _validate_key(key: str) -> None:
    prefix, sep, name = key.rpartition("/")
    if sep and (not prefix or len(prefix) > 253 or not _PREFIX.fullmatch(prefix)):
        raise ValueError(f"invalid label key {key!r}")
    if not name or len(name) > 63 or not _NAME.fullmatch(name):
        raise ValueError(f"invalid label key {key!r}")


def _validate_value(value: str) -> None:
    if value and (len(value) > 63 or not _NAME.fullmatch(value)):
        raise ValueError(f"invalid label value {value!r}")


@dataclass(frozen=True)
class _Requirement:
    key: str
    operator: _Operator
    values: tuple[str, ...] = ()

    def matches(self, labels: Mapping[str, str]) -> bool:
        present = self.key in labels
        op = self.operator
        if op is _Operator.EXISTS:
            return present
        if op is _Operator.DOES_NOT_EXIST:
            return not present
        if op in (_Operator.EQUALS, _Operator.DOUBLE_EQUALS, _Operator.IN):
            return present and labels[self.key] in self.values
        if op in (_Operator.NOT_EQUALS, _Operator.NOT_IN):
            return not present or labels[self.key] not in self.values
        if not present:
            return False
        try:
            actual = int(labels[self.key])
        except ValueError:
            return False
        bound = int(self.values[0])
        return actual > bound if op is _Operator.GREATER_THAN else actual < bound

    def __str__(self) -> str:
        op = self.operator
        if op is _Operator.EXISTS:
            return self.key
        if op is _Operator.DOES_NOT_EXIST:
            return f"!{self.key}"
        if op in (_Operator.IN, _Operator.NOT_IN):
            return f"{self.key} {op.value} ({','.join(self.values)})"
        return f"{self.key}{op.value}{self.values[0]}"


def _split_requirements(text: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced parenthesis in selector {text!r}")
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if depth:
        raise ValueError(f"unbalanced parenthesis in selector {text!r}")
    parts.append("".join(current))
    return parts


def _parse_requirement(text: str) -> _Requirement:
    part = text.strip()
    if not part:
        raise ValueError("empty requirement in label selector")
    if part.startswith("!"):
        key = part[1:].strip()
        _validate_key(key)
        return _Requirement(key, _Operator.DOES_NOT_EXIST)
    match = _SET_RE.fullmatch(part)
    if match:
        key, op, inner = match.groups()
        _validate_key(key)
        if not inner.strip():
            raise ValueError(f"set operator {op!r} needs at least one value")
        values = {value.strip() for value in inner.split(",")}
        for value in values:
            _validate_value(value)
        return _Requirement(key, _Operator(op), tuple(sorted(values)))
    match = _CMP_RE.fullmatch(part)
    if match:
        key, op, value = match.group(1), match.group(2), match.group(3).strip()
        _validate_key(key)
        operator = _Operator(op)
        if operator in (_Operator.GREATER_THAN, _Operator.LESS_THAN):
            try:
                int(value)
            except ValueError:
                raise ValueError(f"operator {op!r} needs an integer value, got {value!r}") from None
        else:
            _validate_value(value)
        return _Requirement(key, operator, (value,))
    if _KEY_RE.fullmatch(part):
        _validate_key(part)
        return _Requirement(part, _Operator.EXISTS)
    raise ValueError(f"cannot parse label requirement {part!r}")


@dataclass(frozen=True)
class LabelSelector:
    """A conjunction of label requirements; with none it matches everything."""

    requirements: tuple[_Requirement, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.requirements

    def matches(self, labels: Mapping[str, str] | None) -> bool:
        """Report whether every requirement holds for ``labels``."""
        labels = labels or {}
        return all(req.matches(labels) for req in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(req) for req in self.requirements)


EVERYTHING = LabelSelector()


def parse_label_selector(text: str) -> LabelSelector:
    """Parse selector text such as ``a=b,c!=d,e in (f,g),!h``; raise ValueError if malformed."""
    if not text.strip():
        return EVERYTHING
    requirements = sorted(
        (_parse_requirement(part) for part in _split_requirements(text)),
        key=lambda req: req.key,
    )
    return LabelSelector(tuple(requirements))


def selector_from_set(labels: Mapping[str, str]) -> LabelSelector:
    """Return a selector requiring each given label to have its given value."""
    return LabelSelector(
        tuple(_Requirement(key, _Operator.EQUALS, (labels[key],)) for key in sorted(labels))
    )


def _meta_fields(obj: Any) -> tuple[str, str, Mapping[str, str]]:
    if isinstance(obj, Mapping):
        meta = obj.get("metadata", obj) or {}
        return meta.get("namespace") or "", meta.get("name") or "", meta.get("labels") or {}
    meta = getattr(obj, "metadata", obj)
    return (
        getattr(meta, "namespace", "") or "",
        getattr(meta, "name", "") or "",
        getattr(meta, "labels", None) or {},
    )


@dataclass(frozen=True)
class MatchCriteria:
    """Filter for objects by namespace, name and labels; unset parts match anything."""

    namespace: str = ""
    names: frozenset[str] = frozenset()
    label_selector: LabelSelector | None = None

    def __post_init__(self) -> None:
        names: Iterable[str] = self.names
        object.__setattr__(self, "names", frozenset(names))

    def matches(self, obj: Any) -> bool:
        """Report whether an object (or its metadata, or a mapping) meets the criteria."""
        namespace, name, labels = _meta_fields(obj)
        if self.namespace and namespace != self.namespace:
            return False
        if self.names and name not in self.names:
            return False
        if self.label_selector is not None and not self.label_selector.matches(labels):
            return False
        return True


MATCH_ALL_CRITERIA = MatchCriteria()