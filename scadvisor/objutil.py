"""Helpers for API objects held as plain mappings: quantities, patches, YAML and versions."""

from __future__ import annotations

import copy
import enum
import json
import math
import random
import re
from collections.abc import Mapping, MutableMapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, TypeVar

import yaml

from scadvisor.core import GroupVersionKind
from scadvisor.errors import AdvisorError, PatchError, UnexpectedTypeError
from scadvisor.service import NamespacedName

T = TypeVar("T")

DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_NAME_SUFFIX_CHARS = "bcdfghjklmnpqrstvwxz2456789"
_NAME_SUFFIX_LEN = 5


class PatchType(str, enum.Enum):
    """Content types of patches."""

    JSON = "application/json-patch+json"
    MERGE = "application/merge-patch+json"
    STRATEGIC_MERGE = "application/strategic-merge-patch+json"
    APPLY = "application/apply-patch+yaml"


_BINARY_SUFFIXES = {"Ki": 1, "Mi": 2, "Gi": 3, "Ti": 4, "Pi": 5, "Ei": 6}
_DECIMAL_SUFFIXES = {"n": -9, "u": -6, "m": -3, "": 0, "k": 3, "M": 6, "G": 9, "T": 12, "P": 15, "E": 18}
_QUANTITY_RE = re.compile(r"([+-]?(?:\d+\.?\d*|\.\d+))(.*)")
_EXPONENT_RE = re.compile(r"[eE]([+-]?\d+)")


def _quantity_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"invalid quantity {value!r}")
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    text = str(value).strip()
    match = _QUANTITY_RE.fullmatch(text)
    if not match:
        raise ValueError(f"invalid quantity {value!r}")
    try:
        number = Decimal(match.group(1))
    except InvalidOperation:
        raise ValueError(f"invalid quantity {value!r}") from None
    suffix = match.group(2)
    if suffix in _BINARY_SUFFIXES:
        return number * (1024 ** _BINARY_SUFFIXES[suffix])
    if suffix in _DECIMAL_SUFFIXES:
        return number.scaleb(_DECIMAL_SUFFIXES[suffix])
    exp = _EXPONENT_RE.fullmatch(suffix)
    if exp:
        return number.scaleb(int(exp.group(1)))
    raise ValueError(f"invalid quantity {value!r}")


def parse_quantity(text: Any) -> int:
    """Return the integer value of a quantity such as ``100Mi`` or ``500m``, rounded up."""
    return math.ceil(_quantity_decimal(text))


def format_quantity(value: int) -> str:
    """Format an integer in canonical decimal notation, e.g. 2000 as ``2k``."""
    suffixes = ("", "k", "M", "G", "T", "P", "E")
    index = 0
    while value and value % 1000 == 0 and index < len(suffixes) - 1:
        value //= 1000
        index += 1
    return f"{value}{suffixes[index]}"


def _format_decimal(value: Decimal) -> str:
    if value == value.to_integral_value():
        return format_quantity(int(value))
    milli = value * 1000
    if milli == milli.to_integral_value():
        return f"{int(milli)}m"
    return str(value.normalize())


def resource_list_to_int_map(resources: Mapping[str, Any] | None) -> dict[str, int]:
    """Convert resource quantities to their integer values."""
    return {name: parse_quantity(qty) for name, qty in (resources or {}).items()}


def int_map_to_resource_list(values: Mapping[str, int] | None) -> dict[str, str]:
    """Convert integer resource values to quantity strings."""
    return {name: format_quantity(int(v)) for name, v in (values or {}).items()}


def is_resource_list_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    """Report whether both lists name the same resources with equal quantities."""
    if set(a) != set(b):
        return False
    return all(_quantity_decimal(a[k]) == _quantity_decimal(b[k]) for k in a)


def subtract_resources(a: MutableMapping[str, Any], b: Mapping[str, Any]) -> None:
    """Subtract quantities in ``b`` from those in ``a``; resources missing from ``a`` are ignored."""
    for name, qty in b.items():
        if name in a:
            a[name] = _format_decimal(_quantity_decimal(a[name]) - _quantity_decimal(qty))


def _metadata(obj: Any) -> Mapping[str, Any]:
    if isinstance(obj, Mapping):
        return obj.get("metadata") or {}
    return getattr(obj, "metadata", None) or {}


def _meta_value(obj: Any, key: str, attr: str) -> str:
    meta = _metadata(obj)
    if isinstance(meta, Mapping):
        return str(meta.get(key) or "")
    return str(getattr(meta, attr, "") or "")


def set_meta_object_gvk(obj: MutableMapping[str, Any], gvk: GroupVersionKind) -> None:
    """Set apiVersion and kind from ``gvk`` when the object carries neither."""
    if not obj.get("kind") and not obj.get("apiVersion"):
        obj["apiVersion"] = gvk.api_version
        obj["kind"] = gvk.kind


_MERGE_KEYS = {
    "conditions": "type",
    "containers": "name",
    "initContainers": "name",
    "volumes": "name",
    "env": "name",
    "volumeMounts": "mountPath",
    "ports": "containerPort",
}
_DICT_FIELDS = {"metadata", "spec", "status", "labels", "annotations", "series", "resources", "requests", "limits"}
_LIST_FIELDS = {"conditions", "containers", "initContainers", "volumes", "tolerations", "taints"}


def _merge_patch(original: Any, patch: Any) -> Any:
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result = copy.deepcopy(original) if isinstance(original, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = _merge_patch(result.get(key), value)
    return result


def _merge_list(original: list[Any], patch: list[Any], key: str) -> list[Any]:
    items = [item for item in (original + patch) if isinstance(item, dict)]
    if len(items) != len(original) + len(patch) or any(key not in item for item in items):
        return copy.deepcopy(patch)
    result = copy.deepcopy(original)
    for item in patch:
        for i, existing in enumerate(result):
            if existing.get(key) == item[key]:
                result[i] = _strategic_merge(existing, item)
                break
        else:
            result.append(copy.deepcopy(item))
    return result


def _strategic_merge(original: Any, patch: Any) -> Any:
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result = copy.deepcopy(original) if isinstance(original, dict) else {}
    for key, value in patch.items():
        if key.startswith("$"):
            continue
        current = result.get(key)
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(current, dict):
            result[key] = _strategic_merge(current, value)
        elif isinstance(value, list) and isinstance(current, list) and key in _MERGE_KEYS:
            result[key] = _merge_list(current, value, _MERGE_KEYS[key])
        else:
            result[key] = copy.deepcopy(value)
    return result


def _check_shape(value: Any, path: str = "") -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            where = f"{path}.{key}" if path else key
            if item is not None and key in _DICT_FIELDS and not isinstance(item, dict):
                raise ValueError(f"field {where} must be an object")
            if item is not None and key in _LIST_FIELDS and not isinstance(item, list):
                raise ValueError(f"field {where} must be an array")
            _check_shape(item, where)
    elif isinstance(value, list):
        for item in value:
            _check_shape(item, path)


def _load_json(patch: bytes | str) -> Any:
    return json.loads(patch)


def patch_object(
    obj: MutableMapping[str, Any] | None,
    name: Any,
    patch_type: PatchType | str,
    patch: bytes | str,
) -> None:
    """Apply a merge or strategic merge patch to ``obj`` in place; raise PatchError on failure."""
    if obj is None or not isinstance(obj, MutableMapping):
        raise PatchError(f"object {str(name)!r} must be a non-nil pointer")
    try:
        kind = PatchType(patch_type)
    except ValueError:
        kind = None
    if kind is PatchType.STRATEGIC_MERGE:
        try:
            patched = _strategic_merge(dict(obj), _load_json(patch))
        except ValueError as exc:
            raise PatchError(
                f"failed to apply strategic merge patch for object {str(name)!r}: invalid JSON: {exc}"
            ) from exc
    elif kind is PatchType.MERGE:
        try:
            patched = _merge_patch(dict(obj), _load_json(patch))
        except ValueError as exc:
            raise PatchError(
                f"failed to apply merge-patch for object {str(name)!r}: Invalid JSON Patch: {exc}"
            ) from exc
    else:
        value = patch_type.value if isinstance(patch_type, PatchType) else patch_type
        raise PatchError(f"unsupported patch type {value!r} for object {str(name)!r}")
    try:
        if not isinstance(patched, dict):
            raise ValueError("patched document is not an object")
        _check_shape(patched)
    except ValueError as exc:
        raise PatchError(
            f"failed to unmarshal patched JSON back into obj {str(name)!r}: {exc}"
        ) from exc
    obj.clear()
    obj.update(patched)


def patch_object_status(obj: MutableMapping[str, Any] | None, name: Any, patch: bytes | str) -> None:
    """Apply the ``status`` part of ``patch`` to the object's status by strategic merge."""
    if obj is None or not isinstance(obj, MutableMapping):
        raise PatchError(f"object {str(name)!r} must be a non-nil pointer")
    try:
        wrapper = _load_json(patch)
        if not isinstance(wrapper, dict):
            raise ValueError("patch is not a JSON object")
    except ValueError as exc:
        raise PatchError(f"failed to parse patch for {str(name)!r} as JSON object: {exc}") from exc
    if "status" not in wrapper:
        raise PatchError(f"patch for {str(name)!r} does not contain a 'status' objName")
    status = _strategic_merge(obj.get("status") or {}, wrapper["status"])
    try:
        if not isinstance(status, dict):
            raise ValueError("status is not an object")
        _check_shape(status, "status")
    except ValueError as exc:
        raise PatchError(
            f"failed to unmarshal patched status for object {str(name)!r}: {exc}"
        ) from exc
    obj["status"] = status


def to_yaml(obj: Mapping[str, Any]) -> str:
    """Serialize an object to YAML."""
    return yaml.safe_dump(dict(obj), sort_keys=False, default_flow_style=False)


def load_yaml_object(path: str | Path) -> dict[str, Any]:
    """Read an object from a YAML file; raise AdvisorError if it cannot be read or parsed."""
    try:
        data = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise AdvisorError(f"failed to read {str(path)!r}: {exc}") from exc
    try:
        obj = yaml.safe_load(data)
        if not isinstance(obj, dict):
            raise ValueError("document is not a mapping")
    except (yaml.YAMLError, ValueError) as exc:
        raise AdvisorError(f"failed to unmarshal object from data: {exc}") from exc
    return obj


def write_yaml_object(obj: Mapping[str, Any], path: str | Path) -> None:
    """Write an object to a YAML file."""
    try:
        Path(path).write_text(to_yaml(obj), encoding="utf-8")
    except OSError as exc:
        raise AdvisorError(f"failed to write YAML to {str(path)!r}: {exc}") from exc


_INT_RE = re.compile(r"[+-]?\d+")


def _parse_int64(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not -(2**63) <= value < 2**63:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_resource_version(text: str) -> int:
    """Parse a resource version; the empty string means 0."""
    if text == "":
        return 0
    try:
        return _parse_int64(text)
    except ValueError as exc:
        raise ValueError(f"cannot parse resource version {text!r}: {exc}") from exc


def parse_object_resource_version(obj: Any) -> int:
    """Parse the resource version of an object."""
    version = _meta_value(obj, "resourceVersion", "resource_version")
    try:
        return parse_resource_version(version)
    except ValueError as exc:
        raise ValueError(
            f"cannot parse resource version {version!r} for object "
            f"{_meta_value(obj, 'name', 'name')!r} in ns {_meta_value(obj, 'namespace', 'namespace')!r}: {exc}"
        ) from exc


def max_resource_version(objs: Any) -> int:
    """Return the largest resource version among the objects, 0 if there are none."""
    highest = 0
    for obj in objs:
        version = _meta_value(obj, "resourceVersion", "resource_version")
        try:
            value = _parse_int64(version)
        except ValueError as exc:
            raise ValueError(
                f"failed to parse resource version {version!r} from obj {cache_name(obj)}: {exc}"
            ) from exc
        highest = max(highest, value)
    return highest


def cache_name(obj: Any) -> NamespacedName:
    """Return the namespace and name of an object."""
    return NamespacedName(
        _meta_value(obj, "namespace", "namespace"), _meta_value(obj, "name", "name")
    )


def generate_name(base: str) -> str:
    """Append a random five character suffix to ``base``, keeping within subdomain length."""
    suffix = "".join(random.choice(_NAME_SUFFIX_CHARS) for _ in range(_NAME_SUFFIX_LEN))
    limit = DNS1123_SUBDOMAIN_MAX_LENGTH - len(suffix)
    return base[:limit] + suffix


def cast(obj: Any, expected_type: type[T]) -> T:
    """Return ``obj`` if it is an ``expected_type``, else raise UnexpectedTypeError."""
    if not isinstance(obj, expected_type):
        raise UnexpectedTypeError(
            f"obj has type {type(obj).__qualname__}, expected "
            f"{expected_type.__module__}.{expected_type.__qualname__}"
        )
    return obj