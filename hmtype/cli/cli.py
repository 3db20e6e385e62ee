import logging
import sys
from typing import Optional

import click
from click import File

from hmtype.lib.ast import DecodeError, Object, loads
from hmtype.lib.config import Formulation, InferenceOptions
from hmtype.lib.errors import InferenceError
from hmtype.lib.prelude import prelude_context
from hmtype.lib.typecheck import typecheck
from hmtype.lib.types import Forall

logger = logging.getLogger(__name__)


def load_program(program_file: File) -> Object:
    text = program_file.read()  # type: ignore [attr-defined]
    try:
        return loads(text)
    except DecodeError as e:
        raise click.UsageError(f"bad syntax tree: {e}") from e


def run(program_file: File, formulation: Optional[str], max_depth: Optional[int], prelude: bool, debug: bool) -> Forall:
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        options = InferenceOptions.from_env().replace(
            formulation=Formulation.from_str(formulation) if formulation else None,
            max_depth=max_depth,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    ast = load_program(program_file)
    logger.debug("AST: %s", ast)
    ctx = prelude_context() if prelude else {}
    try:
        return typecheck(ast, ctx, options)
    except InferenceError as e:
        click.echo(f"Type error: {e}", err=True)
        sys.exit(1)


def common_options(func):  # type: ignore [no-untyped-def]
    func = click.option("--debug", is_flag=True)(func)
    func = click.option("--prelude/--no-prelude", default=True, help="Type operators with the builtin schemes.")(func)
    func = click.option("--max-depth", type=click.IntRange(min=1), default=None)(func)
    func = click.option(
        "--formulation",
        type=click.Choice([f.value for f in Formulation], case_sensitive=False),
        default=None,
        help="Inference algorithm; overrides HMTYPE_FORMULATION.",
    )(func)
    func = click.argument("program-file", type=File(), default="-")(func)
    return func


@click.group()
def main() -> None:
    """Hindley-Milner type inference over JSON syntax trees."""


@main.command(name="infer")
@common_options
def infer_command(
    program_file: File, formulation: Optional[str], max_depth: Optional[int], prelude: bool, debug: bool
) -> None:
    print(run(program_file, formulation, max_depth, prelude, debug))


@main.command(name="check")
@common_options
def check_command(
    program_file: File, formulation: Optional[str], max_depth: Optional[int], prelude: bool, debug: bool
) -> None:
    run(program_file, formulation, max_depth, prelude, debug)
    print("ok")


if __name__ == "__main__":
    main()
