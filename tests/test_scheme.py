from hmtype.lib.arena import Arena
from hmtype.lib.scheme import freshen, ftv_ctx, ftv_ty, generalize, instantiate, max_tyvar_id, minimize
from hmtype.lib.types import FloatType, Forall, IntType, TyVar, func_type, list_type
from hmtype.lib.unify import unify_type


def arena_with(count: int) -> tuple[Arena, list[TyVar]]:
    arena = Arena()
    return arena, [arena.fresh_variable() for _ in range(count)]


class TestFreeVars:
    def test_ftv_ty(self) -> None:
        arena, (a, b) = arena_with(2)
        assert ftv_ty(arena, func_type(a, list_type(b), IntType)) == {a, b}

    def test_ftv_ty_follows_bindings(self) -> None:
        arena, (a, b) = arena_with(2)
        arena.bind(a, list_type(b))
        assert ftv_ty(arena, a) == {b}

    def test_ftv_ctx_ignores_bound_tyvars(self) -> None:
        arena, (a, b) = arena_with(2)
        ctx = {"f": Forall((a,), func_type(a, b)), "g": Forall((), IntType)}
        assert ftv_ctx(arena, ctx) == {b}


class TestGeneralize:
    def test_empty_ctx_quantifies_everything(self) -> None:
        arena, (a, b) = arena_with(2)
        assert generalize(arena, func_type(a, b), {}) == Forall((a, b), func_type(a, b))

    def test_ctx_tyvars_stay_free(self) -> None:
        arena, (a, b) = arena_with(2)
        ctx = {"x": Forall((), a)}
        assert generalize(arena, func_type(a, b), ctx) == Forall((b,), func_type(a, b))

    def test_ctx_tyvars_stay_free_through_bindings(self) -> None:
        arena, (a, b, c) = arena_with(3)
        arena.bind(a, list_type(b))
        ctx = {"x": Forall((), a)}
        assert generalize(arena, func_type(b, c), ctx) == Forall((c,), func_type(b, c))

    def test_body_is_resolved(self) -> None:
        arena, (a, b) = arena_with(2)
        arena.bind(a, IntType)
        assert generalize(arena, func_type(a, b), {}) == Forall((b,), func_type(IntType, b))

    def test_monotype_has_no_tyvars(self) -> None:
        arena, _ = arena_with(0)
        assert generalize(arena, IntType, {}) == Forall((), IntType)


class TestInstantiate:
    def test_instantiate_tyvar(self) -> None:
        arena, (a,) = arena_with(1)
        assert instantiate(arena, Forall((a,), a)) == TyVar(1)

    def test_instantiate_keeps_free_tyvars(self) -> None:
        arena, (a, b) = arena_with(2)
        assert instantiate(arena, Forall((a,), func_type(a, b))) == func_type(TyVar(2), b)

    def test_instantiations_are_independent(self) -> None:
        arena, (a,) = arena_with(1)
        scheme = Forall((a,), func_type(a, a))
        first = instantiate(arena, scheme)
        second = instantiate(arena, scheme)
        unify_type(arena, first, func_type(IntType, IntType))
        unify_type(arena, second, func_type(FloatType, FloatType))
        assert arena.resolve(first) == func_type(IntType, IntType)
        assert arena.resolve(second) == func_type(FloatType, FloatType)
        assert not arena.is_bound(a)

    def test_generalize_then_instantiate_unifies_with_original(self) -> None:
        arena, (a, b, c) = arena_with(3)
        ctx = {"y": Forall((), c)}
        ty = func_type(a, list_type(b), c)
        scheme = generalize(arena, ty, ctx)
        copy = instantiate(arena, scheme)
        assert copy != ty
        unify_type(arena, copy, ty)
        assert not arena.is_bound(c)
        assert arena.resolve(ctx["y"].ty) == c


class TestMinimize:
    def test_renumbers_in_order_of_appearance(self) -> None:
        scheme = Forall((TyVar(3), TyVar(7)), func_type(TyVar(7), TyVar(3), TyVar(7)))
        assert minimize(scheme) == Forall((TyVar(0), TyVar(1)), func_type(TyVar(0), TyVar(1), TyVar(0)))

    def test_free_tyvars_keep_their_ids(self) -> None:
        scheme = Forall((TyVar(5),), func_type(TyVar(0), TyVar(5)))
        assert minimize(scheme) == Forall((TyVar(1),), func_type(TyVar(0), TyVar(1)))

    def test_monotype(self) -> None:
        assert minimize(Forall((), IntType)) == Forall((), IntType)


class TestMaxTyvarId:
    def test_empty(self) -> None:
        assert max_tyvar_id({}) == -1

    def test_looks_at_bound_and_free(self) -> None:
        ctx = {"f": Forall((TyVar(4),), TyVar(4)), "g": Forall((), list_type(TyVar(9)))}
        assert max_tyvar_id(ctx) == 9


class TestFreshen:
    def test_renames_bound_tyvars_only(self) -> None:
        arena = Arena()
        arena.reserve(2)
        scheme = Forall((TyVar(0),), func_type(TyVar(0), TyVar(1)))
        assert freshen(arena, scheme) == Forall((TyVar(2),), func_type(TyVar(2), TyVar(1)))

    def test_monotype_allocates_nothing(self) -> None:
        arena = Arena()
        freshen(arena, Forall((), IntType))
        assert len(arena) == 0
