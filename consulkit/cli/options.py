from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar, cast

from consulkit.api.features import Blocking, ConsistencyMode, Features

from .click_compat import click
from .context import CLIContext
from .errors import CLIError

F = TypeVar("F", bound=Callable[..., object])


def _set_output(ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return value
    obj = ctx.obj
    if isinstance(obj, CLIContext):
        obj.output = value  # type: ignore[assignment]
    return value


def _set_json(ctx: click.Context, _param: click.Parameter, value: bool) -> bool:
    if not value:
        return value
    obj = ctx.obj
    if isinstance(obj, CLIContext):
        obj.output = "json"
    return value


def output_options(fn: F) -> F:
    fn = click.option(
        "--output",
        type=click.Choice(["table", "json"]),
        default=None,
        help="Override output format for this command.",
        callback=_set_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        is_flag=True,
        help="Alias for --output json.",
        callback=_set_json,
        expose_value=False,
    )(fn)
    return fn


_FEATURE_PARAMS = (
    "stale",
    "consistent",
    "filter_expr",
    "index",
    "wait",
    "cached",
    "cache_control",
)


def build_features(
    *,
    stale: bool = False,
    consistent: bool = False,
    filter_expr: str | None = None,
    index: int | None = None,
    wait: str | None = None,
    cached: bool = False,
    cache_control: str | None = None,
) -> Features | None:
    """Translate read options into ``Features`` (``None`` when nothing was requested)."""
    if stale and consistent:
        raise CLIError.usage("--stale and --consistent are mutually exclusive.")
    if wait is not None and index is None:
        raise CLIError.usage("--wait requires --index.")

    mode = ConsistencyMode.STALE if stale else ConsistencyMode.CONSISTENT if consistent else None
    blocking = Blocking(index=index, wait=wait) if index is not None else None
    cache = cache_control if cache_control is not None else ("" if cached else None)
    if mode is None and blocking is None and filter_expr is None and cache is None:
        return None
    return Features(mode=mode, blocking=blocking, filter=filter_expr, cached=cache)


def features_options(fn: F) -> F:
    """
    Add the common read options and pass the result as ``features=``.

    The wrapped command receives a single ``features: Features | None`` keyword
    instead of the individual options.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        values = {name: kwargs.pop(name) for name in _FEATURE_PARAMS}
        try:
            features = build_features(**values)
        except CLIError as exc:
            raise click.UsageError(exc.message) from exc
        return fn(*args, features=features, **kwargs)

    decorated: Any = wrapper
    decorated = click.option(
        "--cache-control",
        type=str,
        default=None,
        help="Cache-Control directives for agent caching (implies --cached).",
    )(decorated)
    decorated = click.option(
        "--cached", is_flag=True, help="Allow the agent to answer from its cache."
    )(decorated)
    decorated = click.option(
        "--wait", type=str, default=None, help="Blocking query wait time (e.g. 30s)."
    )(decorated)
    decorated = click.option(
        "--index",
        type=click.IntRange(min=0),
        default=None,
        help="Block until the index is past this value.",
    )(decorated)
    decorated = click.option(
        "--filter", "filter_expr", type=str, default=None, help="Server-side filter expression."
    )(decorated)
    decorated = click.option(
        "--consistent", is_flag=True, help="Require a consistent read through the leader."
    )(decorated)
    decorated = click.option(
        "--stale", is_flag=True, help="Allow any server to answer (may be stale)."
    )(decorated)
    return cast(F, decorated)
