from __future__ import annotations
import dataclasses
import logging

from hmtype.lib.arena import Arena
from hmtype.lib.ast import (
    Apply,
    Binop,
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
from hmtype.lib.errors import InvalidPattern, InvariantViolation, RecursionDepthExceeded
from hmtype.lib.infer import binop_as_apply, collect_vars_in_pattern, is_recursive_binding, lookup
from hmtype.lib.scheme import generalize, instantiate
from hmtype.lib.subst import EMPTY, Substitution, unify
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

logger = logging.getLogger(__name__)

Inferred = tuple[Substitution, MonoType]


@dataclasses.dataclass
class SubstTyper:
    """Algorithm W: every step returns the substitution it discovered.

    The arena is only used to hand out fresh variables; nothing is ever bound
    in it, so `generalize` and `instantiate` see types exactly as given.
    """

    arena: Arena = dataclasses.field(default_factory=Arena)
    max_depth: int = DEFAULT_MAX_DEPTH

    def fresh(self) -> MonoType:
        return self.arena.fresh_variable()

    def infer(self, expr: Object, ctx: Context, depth: int = 0) -> Inferred:
        if depth > self.max_depth:
            raise RecursionDepthExceeded(self.max_depth)
        depth += 1
        if isinstance(expr, Var):
            return EMPTY, instantiate(self.arena, lookup(ctx, expr.name))
        if isinstance(expr, Int):
            return EMPTY, IntType
        if isinstance(expr, Float):
            return EMPTY, FloatType
        if isinstance(expr, String):
            return EMPTY, StringType
        if isinstance(expr, Function):
            arg_tyvar = self.fresh()
            body_ctx = {**ctx, expr.arg.name: Forall((), arg_tyvar)}
            s1, body_ty = self.infer(expr.body, body_ctx, depth)
            return s1, func_type(s1.apply(arg_tyvar), body_ty)
        if isinstance(expr, Binop):
            return self.infer(binop_as_apply(expr), ctx, depth)
        if isinstance(expr, Where):
            name, value, body = expr.binding.name.name, expr.binding.value, expr.body
            if is_recursive_binding(value):
                func_ty = self.fresh()
                s1, value_ty = self.infer(value, {**ctx, name: Forall((), func_ty)}, depth)
                s1 = unify(func_ty, value_ty, s1)
            else:
                s1, value_ty = self.infer(value, ctx, depth)
            value_ctx = s1.apply_ctx(ctx)
            value_scheme = generalize(self.arena, s1.apply(value_ty), value_ctx)
            s2, body_ty = self.infer(body, {**value_ctx, name: value_scheme}, depth)
            return s2.compose(s1), body_ty
        if isinstance(expr, List):
            subst = EMPTY
            list_item_ty = self.fresh()
            for item in expr.items:
                if isinstance(item, Spread):
                    if item.name is not None:
                        rest_ty = instantiate(self.arena, lookup(subst.apply_ctx(ctx), item.name))
                        subst = unify(list_type(list_item_ty), rest_ty, subst)
                    break
                s, item_ty = self.infer(item, subst.apply_ctx(ctx), depth)
                subst = unify(list_item_ty, item_ty, s.compose(subst))
            return subst, list_type(subst.apply(list_item_ty))
        if isinstance(expr, MatchCase):
            pattern_ctx = collect_vars_in_pattern(self.arena, expr.pattern)
            body_ctx = {**ctx, **pattern_ctx}
            s1, pattern_ty = self.infer(expr.pattern, body_ctx, depth)
            s2, body_ty = self.infer(expr.body, s1.apply_ctx(body_ctx), depth)
            subst = s2.compose(s1)
            return subst, func_type(subst.apply(pattern_ty), body_ty)
        if isinstance(expr, Apply):
            s1, func_ty = self.infer(expr.func, ctx, depth)
            s2, arg_ty = self.infer(expr.arg, s1.apply_ctx(ctx), depth)
            result = self.fresh()
            subst = unify(func_ty, func_type(arg_ty, result), s2.compose(s1))
            return subst, subst.apply(result)
        if isinstance(expr, MatchFunction):
            subst = EMPTY
            result = self.fresh()
            for case in expr.cases:
                s, case_ty = self.infer(case, subst.apply_ctx(ctx), depth)
                subst = unify(result, case_ty, s.compose(subst))
            return subst, subst.apply(result)
        if isinstance(expr, Spread):
            raise InvalidPattern(expr)
        raise InvariantViolation(f"Unexpected expression {type(expr).__name__}")


def infer_w(arena: Arena, expr: Object, ctx: Context, max_depth: int = DEFAULT_MAX_DEPTH) -> Inferred:
    return SubstTyper(arena, max_depth).infer(expr, ctx)
