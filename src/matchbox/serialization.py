"""
Serialization helpers for parsed conditions.

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit:
every node dict carries a "type" tag, and values that are not JSON scalars
are wrapped in a tagged dict too.
"""
from __future__ import annotations

import json
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

import yaml

from matchbox.conditions import (
    Condition,
    Wildcard,
    Literal,
    Operator,
    Apply,
    FieldPath,
    Entries,
    AllOf,
    AnyOf,
    Not,
    Sequence,
)

_SCALARS = (type(None), bool, int, float, str)


def value_to_dict(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, list):
        return {"type": "list", "items": [value_to_dict(v) for v in value]}
    if isinstance(value, tuple):
        return {"type": "tuple", "items": [value_to_dict(v) for v in value]}
    if isinstance(value, dict):
        return {
            "type": "map",
            "entries": [[value_to_dict(k), value_to_dict(v)] for k, v in value.items()],
        }
    if isinstance(value, Decimal):
        return {"type": "decimal", "value": str(value)}
    if isinstance(value, datetime):
        return {"type": "datetime", "value": value.isoformat()}
    if isinstance(value, re.Pattern):
        return {"type": "pattern", "source": value.pattern, "flags": value.flags}
    if isinstance(value, range):
        return {"type": "range", "start": value.start, "stop": value.stop, "step": value.step}
    raise TypeError(f"Unsupported value type: {type(value)}")


def value_from_dict(d: Any) -> Any:
    if isinstance(d, _SCALARS):
        return d
    t = d.get("type")
    if t == "list":
        return [value_from_dict(v) for v in d["items"]]
    if t == "tuple":
        return tuple(value_from_dict(v) for v in d["items"])
    if t == "map":
        return {value_from_dict(k): value_from_dict(v) for k, v in d["entries"]}
    if t == "decimal":
        return Decimal(d["value"])
    if t == "datetime":
        return datetime.fromisoformat(d["value"])
    if t == "pattern":
        return re.compile(d["source"], d.get("flags", 0))
    if t == "range":
        return range(d["start"], d["stop"], d.get("step", 1))
    raise TypeError(f"Unsupported value dict type: {t}")


def condition_to_dict(node: Condition) -> Dict[str, Any]:
    if isinstance(node, Wildcard):
        return {"type": "wildcard"}
    if isinstance(node, Literal):
        return {"type": "literal", "value": value_to_dict(node.value)}
    if isinstance(node, Operator):
        return {"type": "operator", "name": value_to_dict(node.name)}
    if isinstance(node, Apply):
        return {
            "type": "apply",
            "operator": value_to_dict(node.operator),
            "operand": value_to_dict(node.operand),
        }
    if isinstance(node, FieldPath):
        return {
            "type": "field",
            "key": value_to_dict(node.key),
            "condition": condition_to_dict(node.condition),
        }
    if isinstance(node, Not):
        return {"type": "not", "condition": condition_to_dict(node.condition)}
    if isinstance(node, Entries):
        return {"type": "entries", "conditions": [condition_to_dict(c) for c in node.conditions]}
    if isinstance(node, AllOf):
        return {"type": "all", "conditions": [condition_to_dict(c) for c in node.conditions]}
    if isinstance(node, AnyOf):
        return {"type": "any", "conditions": [condition_to_dict(c) for c in node.conditions]}
    if isinstance(node, Sequence):
        return {"type": "sequence", "conditions": [condition_to_dict(c) for c in node.conditions]}
    raise TypeError(f"Unsupported Condition type: {type(node)}")


def condition_from_dict(d: Dict[str, Any]) -> Condition:
    t = d.get("type")
    if t == "wildcard":
        return Wildcard()
    if t == "literal":
        return Literal(value_from_dict(d["value"]))
    if t == "operator":
        return Operator(value_from_dict(d["name"]))
    if t == "apply":
        return Apply(value_from_dict(d["operator"]), value_from_dict(d["operand"]))
    if t == "field":
        return FieldPath(value_from_dict(d["key"]), condition_from_dict(d["condition"]))
    if t == "not":
        return Not(condition_from_dict(d["condition"]))
    if t == "entries":
        return Entries(tuple(condition_from_dict(c) for c in d["conditions"]))
    if t == "all":
        return AllOf(tuple(condition_from_dict(c) for c in d["conditions"]))
    if t == "any":
        return AnyOf(tuple(condition_from_dict(c) for c in d["conditions"]))
    if t == "sequence":
        return Sequence(tuple(condition_from_dict(c) for c in d["conditions"]))
    raise TypeError(f"Unsupported condition dict type: {t}")


def condition_to_json(node: Condition) -> str:
    return json.dumps(condition_to_dict(node), sort_keys=True)


def condition_from_json(s: str) -> Condition:
    d = json.loads(s)
    return condition_from_dict(d)


def condition_to_yaml(node: Condition) -> str:
    return yaml.safe_dump(condition_to_dict(node))


def condition_from_yaml(s: str) -> Condition:
    d = yaml.safe_load(s)
    return condition_from_dict(d)
