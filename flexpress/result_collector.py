# flexpress/result_collector.py

import inspect

from flexpress.config import logger
from flexpress.errors import PathNotSetError, ResolutionError


async def _drain(producer):
    """
    Yields the elements of a producer of unknown cardinality: an async
    iterable, a plain iterable, an awaitable, or a bare value.
    """
    if hasattr(producer, "__aiter__"):
        async for value in producer:
            yield value
        return
    if inspect.isawaitable(producer):
        producer = await producer
        if producer is not None:
            async for value in _drain(producer):
                yield value
        return
    if hasattr(producer, "__iter__") and not isinstance(producer, (str, bytes)):
        for value in producer:
            yield value
        return
    yield producer


async def resolve_and_collect(entry_path, path_expression) -> list[str]:
    """
    Resolves the path expression against the entry path and drains the result.

    The resolver hands back the same sequence protocol whether the expression
    denotes one value or many, and a single value can come back more than once.
    Values are therefore collected by their string form, keeping first-seen order.
    """
    if path_expression is None or not str(path_expression).strip():
        raise PathNotSetError("Invalid LDflex data path: Data path not set")
    expression = str(path_expression).strip()

    seen: set[str] = set()
    out: list[str] = []
    try:
        producer = entry_path.resolve(expression)
        async for value in _drain(producer):
            text = str(value)
            if text in seen:
                continue
            seen.add(text)
            out.append(text)
    except Exception as e:
        raise ResolutionError(f"Query execution failed: {e}") from e

    logger.debug(f"resolve_and_collect: {expression} -> {len(out)} value(s)")
    return out
