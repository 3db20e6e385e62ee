from __future__ import annotations
import itertools
import logging

from hmtype.lib.arena import Arena
from hmtype.lib.subst import apply_ty
from hmtype.lib.types import Context, Forall, MonoType, TyVar, walk

logger = logging.getLogger(__name__)


def ftv_ty(arena: Arena, ty: MonoType) -> set[TyVar]:
    return {node for node in walk(ty, arena.find) if isinstance(node, TyVar)}


def ftv_scheme(arena: Arena, scheme: Forall) -> set[TyVar]:
    return ftv_ty(arena, scheme.ty) - set(scheme.tyvars)


def ftv_ctx(arena: Arena, ctx: Context) -> set[TyVar]:
    return set().union(*(ftv_scheme(arena, scheme) for scheme in ctx.values()))


def generalize(arena: Arena, ty: MonoType, ctx: Context) -> Forall:
    """Quantify over the variables of `ty` that `ctx` does not mention.

    Both `ty` and `ctx` are read through the arena's current bindings, so the
    substitution-passing driver has to apply its substitution first.
    """
    ty = arena.resolve(ty)
    tyvars = ftv_ty(arena, ty) - ftv_ctx(arena, ctx)
    result = Forall(tuple(sorted(tyvars, key=lambda tyvar: tyvar.id)), ty)
    logger.debug("generalize %s", result)
    return result


def instantiate(arena: Arena, scheme: Forall) -> MonoType:
    fresh = {tyvar.id: arena.fresh_variable() for tyvar in scheme.tyvars}
    return apply_ty(arena.resolve(scheme.ty), fresh)


def max_tyvar_id(ctx: Context) -> int:
    result = -1
    for scheme in ctx.values():
        for tyvar in scheme.tyvars:
            result = max(result, tyvar.id)
        result = max(result, _max_id(scheme.ty))
    return result


def _max_id(ty: MonoType) -> int:
    return max((node.id for node in walk(ty) if isinstance(node, TyVar)), default=-1)


def _in_order(ty: MonoType) -> list[TyVar]:
    return list(dict.fromkeys(node for node in walk(ty) if isinstance(node, TyVar)))


def minimize(scheme: Forall) -> Forall:
    """Renumber the quantified variables in order of first appearance.

    Quantified variables take the smallest ids not already used by a free
    variable of the body, so free variables keep their identity.
    """
    bound = set(scheme.tyvars)
    order = _in_order(scheme.ty)
    taken = {tyvar.id for tyvar in order if tyvar not in bound}
    ids = (idx for idx in itertools.count() if idx not in taken)
    subst = {tyvar.id: TyVar(next(ids)) for tyvar in order if tyvar in bound}
    return Forall(tuple(subst.values()), apply_ty(scheme.ty, subst))


def freshen(arena: Arena, scheme: Forall) -> Forall:
    """Rename the quantified variables of `scheme` to fresh arena variables."""
    fresh = {tyvar.id: arena.fresh_variable() for tyvar in scheme.tyvars}
    return Forall(tuple(fresh.values()), apply_ty(scheme.ty, fresh))
