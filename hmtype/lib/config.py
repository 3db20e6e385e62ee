from __future__ import annotations
import dataclasses
import enum
import os
import typing

DEFAULT_MAX_DEPTH = 200


class Formulation(enum.Enum):
    UNION_FIND = "union_find"
    SUBSTITUTION = "substitution"

    @classmethod
    def from_str(cls, x: str) -> "Formulation":
        try:
            return cls(x.strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"unknown formulation {x!r} (expected one of {choices})") from None


@dataclasses.dataclass(frozen=True)
class InferenceOptions:
    formulation: Formulation = Formulation.UNION_FIND
    # Deepest expression nesting a single run will walk before giving up.
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "InferenceOptions":
        if environ is None:
            environ = os.environ
        kwargs: dict[str, typing.Any] = {}
        formulation = environ.get("HMTYPE_FORMULATION")
        if formulation:
            try:
                kwargs["formulation"] = Formulation.from_str(formulation)
            except ValueError as e:
                raise ValueError(f"HMTYPE_FORMULATION: {e}") from None
        result = cls(**kwargs)
        max_depth = environ.get("HMTYPE_MAX_DEPTH")
        if max_depth:
            try:
                depth = int(max_depth)
            except ValueError:
                raise ValueError(f"HMTYPE_MAX_DEPTH: expected an integer, got {max_depth!r}") from None
            try:
                result = dataclasses.replace(result, max_depth=depth)
            except ValueError as e:
                raise ValueError(f"HMTYPE_MAX_DEPTH: {e}") from None
        return result

    def replace(self, **changes: typing.Any) -> "InferenceOptions":
        changes = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **changes)
