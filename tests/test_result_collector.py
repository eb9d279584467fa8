import pytest

from flexpress.errors import PathNotSetError, ResolutionError
from flexpress.result_collector import resolve_and_collect


async def _agen(values, error=None):
    for value in values:
        yield value
    if error is not None:
        raise error


class _Value:
    """Mimics a resolved term: not a str, but converts to one."""

    def __init__(self, text):
        self.text = text

    def __str__(self):
        return self.text


class _EntryPath:
    def __init__(self, producer):
        self.producer = producer
        self.expressions = []

    def resolve(self, expression):
        self.expressions.append(expression)
        return self.producer


async def test_single_value_yielded_twice_collects_once() -> None:
    entry_path = _EntryPath(_agen([_Value("Alice"), _Value("Alice")]))

    assert await resolve_and_collect(entry_path, ".name") == ["Alice"]


async def test_duplicates_removed_in_insertion_order() -> None:
    entry_path = _EntryPath(_agen(["A", "B", "A"]))

    assert await resolve_and_collect(entry_path, ".interest") == ["A", "B"]


async def test_empty_producer_collects_to_empty_list() -> None:
    assert await resolve_and_collect(_EntryPath(_agen([])), ".interest") == []


async def test_plain_iterable_and_scalar_producers() -> None:
    assert await resolve_and_collect(_EntryPath(["x", "y", "x"]), ".a") == ["x", "y"]
    assert await resolve_and_collect(_EntryPath("scalar"), ".a") == ["scalar"]


async def test_awaitable_producer_is_awaited() -> None:
    async def single():
        return _Value("Alice")

    assert await resolve_and_collect(_EntryPath(single()), ".name") == ["Alice"]


async def test_expression_is_trimmed_before_resolving() -> None:
    entry_path = _EntryPath(_agen(["A"]))

    await resolve_and_collect(entry_path, "  .name  ")

    assert entry_path.expressions == [".name"]


@pytest.mark.parametrize("expression", ["", "   ", None])
async def test_empty_expression_raises_path_not_set(expression) -> None:
    entry_path = _EntryPath(_agen(["A"]))

    with pytest.raises(PathNotSetError):
        await resolve_and_collect(entry_path, expression)

    assert entry_path.expressions == []


async def test_failure_while_draining_is_wrapped() -> None:
    entry_path = _EntryPath(_agen(["A"], RuntimeError("endpoint rejected query")))

    with pytest.raises(ResolutionError) as exc_info:
        await resolve_and_collect(entry_path, ".name")

    assert "endpoint rejected query" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
