from __future__ import annotations
import enum
import json
import typing
from dataclasses import dataclass, fields
from enum import auto
from typing import Any, Optional


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Object:
    pass


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Int(Object):
    value: int


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Float(Object):
    value: float


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class String(Object):
    value: str


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Var(Object):
    name: str


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Spread(Object):
    name: Optional[str] = None


class BinopKind(enum.Enum):
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    FLOOR_DIV = auto()
    MOD = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    GREATER = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()
    BOOL_AND = auto()
    BOOL_OR = auto()
    STRING_CONCAT = auto()
    LIST_CONS = auto()
    LIST_APPEND = auto()
    PIPE = auto()
    REVERSE_PIPE = auto()

    @classmethod
    def from_str(cls, x: str) -> "BinopKind":
        return {
            "+": cls.ADD,
            "-": cls.SUB,
            "*": cls.MUL,
            "/": cls.DIV,
            "//": cls.FLOOR_DIV,
            "%": cls.MOD,
            "==": cls.EQUAL,
            "/=": cls.NOT_EQUAL,
            "<": cls.LESS,
            ">": cls.GREATER,
            "<=": cls.LESS_EQUAL,
            ">=": cls.GREATER_EQUAL,
            "&&": cls.BOOL_AND,
            "||": cls.BOOL_OR,
            "++": cls.STRING_CONCAT,
            ">+": cls.LIST_CONS,
            "+<": cls.LIST_APPEND,
            "|>": cls.PIPE,
            "<|": cls.REVERSE_PIPE,
        }[x]

    @classmethod
    def to_str(cls, binop_kind: "BinopKind") -> str:
        return {
            cls.ADD: "+",
            cls.SUB: "-",
            cls.MUL: "*",
            cls.DIV: "/",
            cls.FLOOR_DIV: "//",
            cls.MOD: "%",
            cls.EQUAL: "==",
            cls.NOT_EQUAL: "/=",
            cls.LESS: "<",
            cls.GREATER: ">",
            cls.LESS_EQUAL: "<=",
            cls.GREATER_EQUAL: ">=",
            cls.BOOL_AND: "&&",
            cls.BOOL_OR: "||",
            cls.STRING_CONCAT: "++",
            cls.LIST_CONS: ">+",
            cls.LIST_APPEND: "+<",
            cls.PIPE: "|>",
            cls.REVERSE_PIPE: "<|",
        }[binop_kind]


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Binop(Object):
    op: BinopKind
    left: Object
    right: Object


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class List(Object):
    items: typing.List[Object]


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Assign(Object):
    name: Var
    value: Object


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Function(Object):
    arg: Var
    body: Object


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Apply(Object):
    func: Object
    arg: Object


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class Where(Object):
    body: Object
    binding: Assign


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class MatchCase(Object):
    pattern: Object
    body: Object


@dataclass(eq=True, frozen=True, unsafe_hash=True)
class MatchFunction(Object):
    cases: typing.List[MatchCase]


NODE_CLASSES: dict[str, type[Object]] = {
    cls.__name__: cls
    for cls in (Int, Float, String, Var, Spread, Binop, List, Assign, Function, Apply, Where, MatchCase, MatchFunction)
}


CHILD_KINDS: dict[tuple[type[Object], str], type[Object]] = {
    (Function, "arg"): Var,
    (Assign, "name"): Var,
    (Where, "binding"): Assign,
}


class DecodeError(ValueError):
    pass


def from_json(data: Any) -> Object:
    """Build a tree from the plain-JSON shape {"kind": "<Node>", ...fields}."""
    if not isinstance(data, dict):
        raise DecodeError(f"expected an object, got {type(data).__name__}")
    kind = data.get("kind")
    cls = NODE_CLASSES.get(kind)  # type: ignore [arg-type]
    if cls is None:
        raise DecodeError(f"unknown node kind {kind!r}")
    kwargs: dict[str, Any] = {}
    for field in fields(cls):
        if field.name not in data:
            if cls is Spread:
                continue
            raise DecodeError(f"{kind} is missing field {field.name!r}")
        kwargs[field.name] = _decode_field(cls, field.name, data[field.name])
    return cls(**kwargs)


def _decode_field(cls: type[Object], name: str, value: Any) -> Any:
    if cls is Binop and name == "op":
        try:
            return BinopKind.from_str(value)
        except (KeyError, TypeError):
            raise DecodeError(f"unknown operator {value!r}") from None
    if cls in (List, MatchFunction):
        if not isinstance(value, list):
            raise DecodeError(f"{cls.__name__}.{name} must be a list")
        items = [_expression(from_json(item)) for item in value]
        if cls is MatchFunction and not all(isinstance(item, MatchCase) for item in items):
            raise DecodeError("MatchFunction.cases must all be MatchCase")
        return items
    if cls in (Int, Float, String, Var, Spread):
        expected: tuple[type, ...] = {
            Int: (int,),
            Float: (int, float),
            String: (str,),
            Var: (str,),
            Spread: (str, type(None)),
        }[cls]
        if isinstance(value, bool) or not isinstance(value, expected):
            raise DecodeError(f"{cls.__name__}.{name} has the wrong type {type(value).__name__}")
        return float(value) if cls is Float else value
    child = from_json(value)
    expected_child = CHILD_KINDS.get((cls, name))
    if expected_child is None:
        return _expression(child)
    if not isinstance(child, expected_child):
        raise DecodeError(f"{cls.__name__}.{name} must be a {expected_child.__name__}")
    return child


def _expression(node: Object) -> Object:
    if isinstance(node, Assign):
        raise DecodeError("Assign is only allowed as the binding of a Where")
    return node


def loads(text: str) -> Object:
    try:
        return _expression(from_json(json.loads(text)))
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e
    except RecursionError:
        raise DecodeError("syntax tree is nested too deeply") from None
