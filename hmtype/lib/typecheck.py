from __future__ import annotations
import logging
import typing

from hmtype.lib.algw import infer_w
from hmtype.lib.arena import Arena
from hmtype.lib.ast import Object
from hmtype.lib.config import Formulation, InferenceOptions
from hmtype.lib.infer import infer_type
from hmtype.lib.scheme import freshen, generalize, max_tyvar_id, minimize
from hmtype.lib.types import Context, Forall, MonoType

logger = logging.getLogger(__name__)


def new_arena(ctx: Context) -> tuple[Arena, Context]:
    """Make the arena for one run and adopt `ctx` into it.

    Free variables of `ctx` keep their ids. Quantified ones are renamed so they
    can never be confused with a free variable that happens to share an id.
    """
    arena = Arena()
    arena.reserve(max_tyvar_id(ctx) + 1)
    return arena, {name: freshen(arena, scheme) for name, scheme in ctx.items()}


def infer_monotype(
    expr: Object, ctx: Context, options: InferenceOptions, arena: Arena
) -> tuple[MonoType, Context]:
    """Run one formulation; return the resolved type and the context as it now reads."""
    if options.formulation is Formulation.UNION_FIND:
        return arena.resolve(infer_type(arena, expr, ctx, options.max_depth)), ctx
    if options.formulation is Formulation.SUBSTITUTION:
        subst, ty = infer_w(arena, expr, ctx, options.max_depth)
        logger.debug("final substitution has %d bindings", len(subst))
        return subst.apply(ty), subst.apply_ctx(ctx)
    raise ValueError(f"unknown formulation {options.formulation}")


def typecheck(
    expr: Object,
    ctx: typing.Optional[Context] = None,
    options: typing.Optional[InferenceOptions] = None,
) -> Forall:
    """Infer the principal type scheme of a whole program.

    Each call gets its own Arena, so calls never share type variables. The
    first error aborts the call and propagates as an InferenceError.
    """
    if ctx is None:
        ctx = {}
    if options is None:
        options = InferenceOptions()
    arena, ctx = new_arena(ctx)
    ty, final_ctx = infer_monotype(expr, ctx, options, arena)
    result = minimize(generalize(arena, ty, final_ctx))
    logger.debug("%s: %s (%d type variables)", options.formulation.value, result, len(arena))
    return result
