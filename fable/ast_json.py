"""JSON serialization/deserialization for classified Fable stories.

This module converts between `fable.ast` dataclasses and plain Python
dict/list structures suitable for JSON encoding. Each node becomes a dict
tagged with its class name under `"__type__"`; conditional branches nest
the same way.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from .ast import (
    Node,
    Story,
    Empty,
    LabelDecl,
    Comment,
    BlankOutput,
    Goto,
    Conditional,
    Assign,
    Choice,
    Input,
    Pause,
    Clear,
    Print,
    Invalid,
)

NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Empty, LabelDecl, Comment, BlankOutput, Goto, Conditional,
        Assign, Choice, Input, Pause, Clear, Print, Invalid,
    )
}


def node_to_obj(node: Any) -> Any:
    if node is None or isinstance(node, (int, str)):
        return node
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"__type__": type(node).__name__}
        for f in fields(node):
            obj[f.name] = node_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for JSON serialization: {type(node)}")


def node_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, str)):
        return obj
    if isinstance(obj, dict) and "__type__" in obj:
        t = obj["__type__"]
        if t not in NODE_TYPES:
            raise ValueError(f"Unknown node type in JSON: {t}")
        kwargs = {k: node_from_obj(v) for k, v in obj.items() if k != "__type__"}
        return NODE_TYPES[t](**kwargs)
    raise ValueError(f"Invalid JSON for story node: {obj!r}")


def story_to_obj(story: Story) -> Dict[str, Any]:
    return {"__type__": "Story", "lines": [node_to_obj(n) for n in story.lines]}


def story_from_obj(obj: Dict[str, Any]) -> Story:
    if obj.get("__type__") != "Story":
        raise ValueError("JSON root is not a Story")
    return Story([node_from_obj(n) for n in obj.get("lines", [])])
