from typing import Callable

import pytest

from hmtype.lib.arena import Arena
from hmtype.lib.errors import ArityMismatch, ConstructorMismatch, InferenceError, InvariantViolation, OccursCheckFailure
from hmtype.lib.types import FloatType, IntType, MonoType, StringType, TyCon, TyVar, func_type, list_type
from hmtype.lib.unify import unify_type

PairBuilder = Callable[[TyVar, TyVar], tuple[MonoType, MonoType]]

PAIRS: list[PairBuilder] = [
    lambda a, b: (a, IntType),
    lambda a, b: (a, b),
    lambda a, b: (func_type(a, IntType), func_type(FloatType, b)),
    lambda a, b: (func_type(a, a), func_type(IntType, b)),
    lambda a, b: (list_type(a), IntType),
    lambda a, b: (func_type(a, a), func_type(IntType, FloatType)),
    lambda a, b: (a, list_type(a)),
    lambda a, b: (func_type(a, b), func_type(b, list_type(a))),
    lambda a, b: (TyCon("pair", (a,)), TyCon("pair", (a, b))),
]


def attempt(build: PairBuilder, flip: bool) -> tuple[bool, tuple[MonoType, MonoType]]:
    arena = Arena()
    a, b = arena.fresh_variable(), arena.fresh_variable()
    left, right = build(a, b)
    if flip:
        left, right = right, left
    try:
        unify_type(arena, left, right)
    except InferenceError:
        return False, (a, b)
    return True, (arena.resolve(a), arena.resolve(b))


class TestUnify:
    def test_unify_var_binds_var(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        unify_type(arena, a, IntType)
        assert arena.find(a) == IntType

    def test_unify_var_on_the_right_binds_var(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        unify_type(arena, IntType, a)
        assert arena.find(a) == IntType

    def test_unify_same_var_binds_nothing(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        unify_type(arena, a, a)
        assert not arena.is_bound(a)

    def test_unify_with_itself_binds_nothing(self) -> None:
        arena = Arena()
        a, b = arena.fresh_variable(), arena.fresh_variable()
        ty = func_type(a, list_type(b), IntType)
        unify_type(arena, ty, ty)
        assert not arena.is_bound(a)
        assert not arena.is_bound(b)

    def test_later_arguments_see_earlier_bindings(self) -> None:
        arena = Arena()
        a, b = arena.fresh_variable(), arena.fresh_variable()
        unify_type(arena, func_type(a, a), func_type(IntType, b))
        assert arena.resolve(b) == IntType

    def test_later_argument_conflicts_with_earlier_binding(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        with pytest.raises(ConstructorMismatch, match="Unification failed for int and string"):
            unify_type(arena, func_type(a, a), func_type(IntType, StringType))

    def test_constructor_mismatch_carries_both_sides(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        with pytest.raises(ConstructorMismatch) as info:
            unify_type(arena, IntType, func_type(IntType, a))
        assert info.value.name_a == "int"
        assert info.value.name_b == "->"
        assert info.value.right == func_type(IntType, a)

    def test_arity_mismatch(self) -> None:
        arena = Arena()
        with pytest.raises(ArityMismatch) as info:
            unify_type(arena, TyCon("pair", (IntType,)), TyCon("pair", (IntType, IntType)))
        assert info.value.name == "pair"
        assert (info.value.arity_a, info.value.arity_b) == (1, 2)

    def test_occurs_check(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        with pytest.raises(OccursCheckFailure) as info:
            unify_type(arena, a, func_type(a, IntType))
        assert info.value.var == a
        assert not arena.is_bound(a)

    def test_occurs_check_through_binding(self) -> None:
        arena = Arena()
        a, b = arena.fresh_variable(), arena.fresh_variable()
        unify_type(arena, b, list_type(a))
        with pytest.raises(OccursCheckFailure):
            unify_type(arena, a, func_type(IntType, b))

    def test_errors_are_type_errors(self) -> None:
        with pytest.raises(TypeError):
            unify_type(Arena(), IntType, FloatType)

    def test_unknown_type_is_invariant_violation(self) -> None:
        with pytest.raises(InvariantViolation):
            unify_type(Arena(), MonoType(), IntType)

    @pytest.mark.parametrize("build", PAIRS)
    def test_unify_is_symmetric_in_outcome(self, build: PairBuilder) -> None:
        ok, resolved = attempt(build, flip=False)
        flipped_ok, flipped_resolved = attempt(build, flip=True)
        assert ok == flipped_ok
        if ok:
            left_a, left_b = resolved
            right_a, right_b = flipped_resolved
            # Only concrete parts are compared; which variable ends up the
            # representative may differ.
            assert (isinstance(left_a, TyVar), isinstance(left_b, TyVar)) == (
                isinstance(right_a, TyVar),
                isinstance(right_b, TyVar),
            )
            if not isinstance(left_a, TyVar):
                assert left_a == right_a
            if not isinstance(left_b, TyVar):
                assert left_b == right_b

    def test_deep_types(self) -> None:
        arena = Arena()
        a = arena.fresh_variable()
        left, right = a, IntType
        for _ in range(5000):
            left, right = list_type(left), list_type(right)
        unify_type(arena, left, right)
        assert arena.find(a) == IntType
