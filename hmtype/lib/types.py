from __future__ import annotations
import dataclasses
import string
import typing

from hmtype.lib.errors import InvariantViolation


@dataclasses.dataclass(frozen=True)
class MonoType:
    pass


@dataclasses.dataclass(frozen=True)
class TyVar(MonoType):
    # Index into the owning Arena. Only unique within one inference run.
    id: int

    @property
    def name(self) -> str:
        if self.id < len(string.ascii_lowercase):
            return string.ascii_lowercase[self.id]
        return f"t{self.id}"

    def __str__(self) -> str:
        return f"'{self.name}"


@dataclasses.dataclass(frozen=True)
class TyCon(MonoType):
    name: str
    args: tuple[MonoType, ...] = ()

    def __str__(self) -> str:
        return _render(self)


@dataclasses.dataclass(frozen=True)
class Forall:
    tyvars: tuple[TyVar, ...]
    ty: MonoType

    def __str__(self) -> str:
        if not self.tyvars:
            return str(self.ty)
        return f"(forall {', '.join(map(str, self.tyvars))}. {self.ty})"


Context = typing.Mapping[str, Forall]


IntType = TyCon("int")
FloatType = TyCon("float")
StringType = TyCon("string")
BoolType = TyCon("bool")


def func_type(*args: MonoType) -> TyCon:
    assert len(args) >= 2
    if len(args) == 2:
        return TyCon("->", tuple(args))
    return TyCon("->", (args[0], func_type(*args[1:])))


def list_type(arg: MonoType) -> TyCon:
    return TyCon("list", (arg,))


def mono(ty: MonoType) -> Forall:
    return Forall((), ty)


# Let-polymorphism can double a type's depth with every binding, so nothing
# below recurses over the structure of a type.


def walk(
    ty: MonoType,
    find: typing.Optional[typing.Callable[[MonoType], MonoType]] = None,
) -> typing.Iterator[MonoType]:
    """Yield every node of `ty` in left-to-right preorder.

    When `find` is given, each node is passed through it before being
    yielded or descended into.
    """
    stack = [ty]
    while stack:
        node = stack.pop()
        if find is not None:
            node = find(node)
        if isinstance(node, TyCon):
            stack.extend(reversed(node.args))
        elif not isinstance(node, TyVar):
            raise InvariantViolation(f"Unknown type: {node!r}")
        yield node


def map_tyvars(
    ty: MonoType,
    replace: typing.Callable[[TyVar], MonoType],
    find: typing.Optional[typing.Callable[[MonoType], MonoType]] = None,
) -> MonoType:
    """Rebuild `ty` with every variable swapped for `replace(var)`.

    Replacements are not walked again. `find` works as in `walk`.
    """
    built: list[MonoType] = []
    stack: list[tuple[MonoType, bool]] = [(ty, False)]
    while stack:
        node, ready = stack.pop()
        if ready:
            assert isinstance(node, TyCon)
            args = tuple(built[-len(node.args) :])
            del built[-len(node.args) :]
            built.append(TyCon(node.name, args))
            continue
        if find is not None:
            node = find(node)
        if isinstance(node, TyVar):
            built.append(replace(node))
        elif isinstance(node, TyCon):
            if not node.args:
                built.append(node)
                continue
            stack.append((node, True))
            stack.extend((arg, False) for arg in reversed(node.args))
        else:
            raise InvariantViolation(f"Unknown type: {node!r}")
    return built[0]


def _render(ty: MonoType) -> str:
    rendered: list[str] = []
    stack: list[tuple[MonoType, bool]] = [(ty, False)]
    while stack:
        node, ready = stack.pop()
        if not isinstance(node, TyCon):
            rendered.append(str(node))
        elif not node.args:
            rendered.append(node.name)
        elif not ready:
            stack.append((node, True))
            stack.extend((arg, False) for arg in reversed(node.args))
        else:
            args = rendered[-len(node.args) :]
            del rendered[-len(node.args) :]
            if len(args) == 1:
                rendered.append(f"({args[0]} {node.name})")
            else:
                rendered.append(f"({node.name.join(args)})")
    return rendered[0]
