from __future__ import annotations
import dataclasses
import logging
import typing

from hmtype.lib.errors import ArityMismatch, ConstructorMismatch, InvariantViolation, OccursCheckFailure
from hmtype.lib.types import Context, Forall, MonoType, TyCon, TyVar, map_tyvars, walk

logger = logging.getLogger(__name__)


def apply_ty(ty: MonoType, subst: typing.Mapping[int, MonoType]) -> MonoType:
    """Simultaneous substitution: every variable is replaced at most once."""
    return map_tyvars(ty, lambda var: subst.get(var.id, var))


@dataclasses.dataclass(frozen=True)
class Substitution:
    """A sequence of single-variable bindings, most recent first.

    Applying a Substitution applies the oldest binding first and the newest
    last, so a binding made later is reflected in the ranges of the earlier
    ones. `s2.compose(s1)` means "s1, then s2" and just concatenates.
    """

    bindings: tuple[tuple[TyVar, MonoType], ...] = ()

    @staticmethod
    def single(var: TyVar, ty: MonoType) -> Substitution:
        return Substitution(((var, ty),))

    def __bool__(self) -> bool:
        return bool(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def compose(self, earlier: Substitution) -> Substitution:
        return Substitution(self.bindings + earlier.bindings)

    def apply(self, ty: MonoType) -> MonoType:
        for var, replacement in reversed(self.bindings):
            ty = apply_ty(ty, {var.id: replacement})
        return ty

    def apply_scheme(self, scheme: Forall) -> Forall:
        bound = {tyvar.id for tyvar in scheme.tyvars}
        visible = Substitution(tuple((var, ty) for var, ty in self.bindings if var.id not in bound))
        return Forall(scheme.tyvars, visible.apply(scheme.ty))

    def apply_ctx(self, ctx: Context) -> Context:
        if not self.bindings:
            return ctx
        return {name: self.apply_scheme(scheme) for name, scheme in ctx.items()}

    def __str__(self) -> str:
        return "[" + ", ".join(f"{var} := {ty}" for var, ty in self.bindings) + "]"


EMPTY = Substitution()


def occurs_in(var: TyVar, ty: MonoType) -> bool:
    return var in walk(ty)


def bind_var(var: TyVar, ty: MonoType) -> Substitution:
    if ty == var:
        return EMPTY
    if occurs_in(var, ty):
        raise OccursCheckFailure(var, ty)
    logger.debug("bind %s := %s", var, ty)
    return Substitution.single(var, ty)


def most_general_unifier(ty1: MonoType, ty2: MonoType) -> Substitution:
    result = EMPTY
    # Leftmost pair on top, so arguments are unified left to right.
    pending = [(ty1, ty2)]
    while pending:
        left, right = pending.pop()
        # Each pair sees everything the earlier pairs decided.
        left, right = result.apply(left), result.apply(right)
        logger.debug("unify %s ~ %s", left, right)
        if isinstance(left, TyVar):
            result = bind_var(left, right).compose(result)
            continue
        if isinstance(right, TyVar):
            result = bind_var(right, left).compose(result)
            continue
        if isinstance(left, TyCon) and isinstance(right, TyCon):
            if left.name != right.name:
                raise ConstructorMismatch(left, right)
            if len(left.args) != len(right.args):
                raise ArityMismatch(left, right)
            pending.extend(reversed(list(zip(left.args, right.args))))
            continue
        raise InvariantViolation(f"Unexpected types {type(left)} and {type(right)}")
    return result


def unify(ty1: MonoType, ty2: MonoType, subst: Substitution = EMPTY) -> Substitution:
    """Unify under `subst` and return `subst` extended with the new bindings."""
    return most_general_unifier(subst.apply(ty1), subst.apply(ty2)).compose(subst)
