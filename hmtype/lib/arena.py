from __future__ import annotations
import dataclasses
import logging
import typing

from hmtype.lib.errors import InvariantViolation
from hmtype.lib.types import MonoType, TyVar, map_tyvars, walk

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Arena:
    """Owns every type variable allocated during one inference run.

    Variables are plain indices into `parents`. A slot holding None is an
    unbound variable; otherwise it is the type the variable was unified with.
    Nothing is ever freed: the whole arena is dropped when the run is over.
    """

    parents: list[typing.Optional[MonoType]] = dataclasses.field(default_factory=list)

    def fresh_variable(self) -> TyVar:
        result = TyVar(len(self.parents))
        self.parents.append(None)
        return result

    def __len__(self) -> int:
        return len(self.parents)

    def _slot(self, var: TyVar) -> typing.Optional[MonoType]:
        if not 0 <= var.id < len(self.parents):
            raise InvariantViolation(f"{var} was not allocated by this arena")
        return self.parents[var.id]

    def is_bound(self, var: TyVar) -> bool:
        return self._slot(var) is not None

    def find(self, ty: MonoType) -> MonoType:
        result = ty
        while isinstance(result, TyVar):
            it = self._slot(result)
            if it is None:
                return result
            result = it
        return result

    def bind(self, var: TyVar, ty: MonoType) -> None:
        if self._slot(var) is not None:
            raise InvariantViolation(f"{var} is already bound to {self.parents[var.id]}")
        if self.find(ty) == var:
            raise InvariantViolation(f"cannot bind {var} to itself")
        logger.debug("bind %s := %s", var, ty)
        self.parents[var.id] = ty

    def resolve(self, ty: MonoType) -> MonoType:
        return map_tyvars(ty, lambda var: var, self.find)

    def occurs_in(self, var: TyVar, ty: MonoType) -> bool:
        return var in walk(ty, self.find)

    def reserve(self, count: int) -> None:
        # Variables that arrive from outside the run (free variables of an
        # input context) keep their ids; fresh ones are allocated past them.
        while len(self.parents) < count:
            self.parents.append(None)
