from __future__ import annotations
import logging

from hmtype.lib.arena import Arena
from hmtype.lib.errors import ArityMismatch, ConstructorMismatch, InvariantViolation, OccursCheckFailure
from hmtype.lib.types import MonoType, TyCon, TyVar

logger = logging.getLogger(__name__)


def bind_var(arena: Arena, var: TyVar, ty: MonoType) -> None:
    if ty == var:
        return
    if arena.occurs_in(var, ty):
        raise OccursCheckFailure(var, arena.resolve(ty))
    arena.bind(var, ty)


def unify_type(arena: Arena, ty1: MonoType, ty2: MonoType) -> None:
    # Leftmost pair on top, so arguments are unified left to right.
    pending = [(ty1, ty2)]
    while pending:
        left, right = pending.pop()
        left = arena.find(left)
        right = arena.find(right)
        logger.debug("unify %s ~ %s", left, right)
        if isinstance(left, TyVar):
            bind_var(arena, left, right)
            continue
        if isinstance(right, TyVar):  # Mirror
            bind_var(arena, right, left)
            continue
        if isinstance(left, TyCon) and isinstance(right, TyCon):
            if left.name != right.name:
                raise ConstructorMismatch(arena.resolve(left), arena.resolve(right))
            if len(left.args) != len(right.args):
                raise ArityMismatch(arena.resolve(left), arena.resolve(right))
            pending.extend(reversed(list(zip(left.args, right.args))))
            continue
        raise InvariantViolation(f"Unexpected types {type(left)} and {type(right)}")
