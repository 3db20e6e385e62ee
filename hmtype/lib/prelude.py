from __future__ import annotations

from hmtype.lib.types import (
    BoolType,
    Context,
    FloatType,
    Forall,
    IntType,
    StringType,
    TyVar,
    func_type,
    list_type,
)

_a = TyVar(0)
_b = TyVar(1)

_int_binop = Forall((), func_type(IntType, IntType, IntType))
_bool_binop = Forall((), func_type(BoolType, BoolType, BoolType))
_compare = Forall((_a,), func_type(_a, _a, BoolType))

OPERATORS: dict[str, Forall] = {
    "+": _int_binop,
    "-": _int_binop,
    "*": _int_binop,
    "/": Forall((), func_type(IntType, IntType, FloatType)),
    "//": _int_binop,
    "%": _int_binop,
    "==": _compare,
    "/=": _compare,
    "<": _compare,
    ">": _compare,
    "<=": _compare,
    ">=": _compare,
    "&&": _bool_binop,
    "||": _bool_binop,
    "++": Forall((), func_type(StringType, StringType, StringType)),
    ">+": Forall((_a,), func_type(_a, list_type(_a), list_type(_a))),
    "+<": Forall((_a,), func_type(list_type(_a), _a, list_type(_a))),
    "|>": Forall((_a, _b), func_type(_a, func_type(_a, _b), _b)),
    "<|": Forall((_a, _b), func_type(func_type(_a, _b), _a, _b)),
}


def prelude_context() -> Context:
    return dict(OPERATORS)
