from __future__ import annotations
import typing

if typing.TYPE_CHECKING:
    from hmtype.lib.ast import Object
    from hmtype.lib.types import MonoType, TyCon, TyVar


class InferenceError(TypeError):
    """Base class for every error that aborts a single inference run.

    Each subclass keeps the structured payload as attributes so that a
    diagnostics layer can render it however it likes; `str()` gives a plain
    one-line message.
    """


class UnboundVariable(InferenceError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unbound variable {name}")
        self.name = name


class ConstructorMismatch(InferenceError):
    def __init__(self, left: TyCon, right: TyCon) -> None:
        super().__init__(f"Unification failed for {left} and {right}")
        self.left = left
        self.right = right

    @property
    def name_a(self) -> str:
        return self.left.name

    @property
    def name_b(self) -> str:
        return self.right.name


class ArityMismatch(InferenceError):
    def __init__(self, left: TyCon, right: TyCon) -> None:
        super().__init__(
            f"Unification failed for {left} and {right}: "
            f"{left.name} applied to {len(left.args)} and {len(right.args)} arguments"
        )
        self.left = left
        self.right = right

    @property
    def name(self) -> str:
        return self.left.name

    @property
    def arity_a(self) -> int:
        return len(self.left.args)

    @property
    def arity_b(self) -> int:
        return len(self.right.args)


class OccursCheckFailure(InferenceError):
    def __init__(self, var: TyVar, ty: MonoType) -> None:
        super().__init__(f"Occurs check failed: {var} occurs in {ty}")
        self.var = var
        self.ty = ty


class InvalidPattern(InferenceError):
    def __init__(self, node: Object) -> None:
        super().__init__(f"Unexpected pattern {type(node).__name__}")
        self.node = node


class RecursionDepthExceeded(InferenceError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Expression nested deeper than {limit} levels")
        self.limit = limit


class InvariantViolation(RuntimeError):
    pass
