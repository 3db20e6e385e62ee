from __future__ import annotations
import dataclasses
import logging

from hmtype.lib.arena import Arena
from hmtype.lib.ast import (
    Apply,
    Binop,
    BinopKind,
    Float,
    Function,
    Int,
    List,
    MatchCase,
    MatchFunction,
    Object,
    Spread,
    String,
    Var,
    Where,
)
from hmtype.lib.config import DEFAULT_MAX_DEPTH
from hmtype.lib.errors import InvalidPattern, InvariantViolation, RecursionDepthExceeded, UnboundVariable
from hmtype.lib.scheme import generalize, instantiate
from hmtype.lib.types import (
    Context,
    FloatType,
    Forall,
    IntType,
    MonoType,
    StringType,
    func_type,
    list_type,
)
from hmtype.lib.unify import unify_type

logger = logging.getLogger(__name__)


def collect_vars_in_pattern(arena: Arena, pattern: Object) -> dict[str, Forall]:
    if isinstance(pattern, (Int, Float, String)):
        return {}
    if isinstance(pattern, Var):
        return {pattern.name: Forall((), arena.fresh_variable())}
    if isinstance(pattern, List):
        result: dict[str, Forall] = {}
        for item in pattern.items:
            if isinstance(item, Spread):
                if item.name is not None:
                    result[item.name] = Forall((), list_type(arena.fresh_variable()))
                break
            result.update(collect_vars_in_pattern(arena, item))
        return result
    raise InvalidPattern(pattern)


def is_recursive_binding(value: Object) -> bool:
    # Only functions may refer to themselves; anything else is a plain let.
    return isinstance(value, (Function, MatchFunction))


def binop_as_apply(expr: Binop) -> Apply:
    op = Var(BinopKind.to_str(expr.op))
    return Apply(Apply(op, expr.left), expr.right)


def lookup(ctx: Context, name: str) -> Forall:
    scheme = ctx.get(name)
    if scheme is None:
        raise UnboundVariable(name)
    return scheme


@dataclasses.dataclass
class Typer:
    """Infers types by unifying in place, through the arena's union-find."""

    arena: Arena = dataclasses.field(default_factory=Arena)
    max_depth: int = DEFAULT_MAX_DEPTH

    def fresh(self) -> MonoType:
        return self.arena.fresh_variable()

    def unify(self, left: MonoType, right: MonoType) -> None:
        unify_type(self.arena, left, right)

    def infer(self, expr: Object, ctx: Context, depth: int = 0) -> MonoType:
        if depth > self.max_depth:
            raise RecursionDepthExceeded(self.max_depth)
        depth += 1
        if isinstance(expr, Var):
            return instantiate(self.arena, lookup(ctx, expr.name))
        if isinstance(expr, Int):
            return IntType
        if isinstance(expr, Float):
            return FloatType
        if isinstance(expr, String):
            return StringType
        if isinstance(expr, Function):
            arg_tyvar = self.fresh()
            body_ctx = {**ctx, expr.arg.name: Forall((), arg_tyvar)}
            body_ty = self.infer(expr.body, body_ctx, depth)
            return func_type(arg_tyvar, body_ty)
        if isinstance(expr, Binop):
            return self.infer(binop_as_apply(expr), ctx, depth)
        if isinstance(expr, Where):
            name, value, body = expr.binding.name.name, expr.binding.value, expr.body
            if is_recursive_binding(value):
                # Letrec
                func_ty = self.fresh()
                value_ty = self.infer(value, {**ctx, name: Forall((), func_ty)}, depth)
                self.unify(func_ty, value_ty)
            else:
                # Let
                value_ty = self.infer(value, ctx, depth)
            value_scheme = generalize(self.arena, value_ty, ctx)
            return self.infer(body, {**ctx, name: value_scheme}, depth)
        if isinstance(expr, List):
            list_item_ty = self.fresh()
            for item in expr.items:
                if isinstance(item, Spread):
                    if item.name is not None:
                        rest_ty = instantiate(self.arena, lookup(ctx, item.name))
                        self.unify(list_type(list_item_ty), rest_ty)
                    break
                item_ty = self.infer(item, ctx, depth)
                self.unify(list_item_ty, item_ty)
            return list_type(list_item_ty)
        if isinstance(expr, MatchCase):
            pattern_ctx = collect_vars_in_pattern(self.arena, expr.pattern)
            body_ctx = {**ctx, **pattern_ctx}
            pattern_ty = self.infer(expr.pattern, body_ctx, depth)
            body_ty = self.infer(expr.body, body_ctx, depth)
            return func_type(pattern_ty, body_ty)
        if isinstance(expr, Apply):
            func_ty = self.infer(expr.func, ctx, depth)
            arg_ty = self.infer(expr.arg, ctx, depth)
            result = self.fresh()
            self.unify(func_ty, func_type(arg_ty, result))
            return result
        if isinstance(expr, MatchFunction):
            result = self.fresh()
            for case in expr.cases:
                case_ty = self.infer(case, ctx, depth)
                self.unify(result, case_ty)
            return result
        if isinstance(expr, Spread):
            # Spreads only mean something inside a list.
            raise InvalidPattern(expr)
        raise InvariantViolation(f"Unexpected expression {type(expr).__name__}")


def infer_type(arena: Arena, expr: Object, ctx: Context, max_depth: int = DEFAULT_MAX_DEPTH) -> MonoType:
    """Infer a monotype for `expr`, leaving the bindings behind in `arena`."""
    return Typer(arena, max_depth).infer(expr, ctx)
