import pytest

from flexpress.errors import (
    ContextParseError,
    EmptySubjectError,
    PathNotSetError,
    PropertyEnumerationError,
    ResolutionError,
    SourceEnumerationError,
    ValidationError,
)
from flexpress.query_context import QueryContext


async def test_execute_builds_chain_once_and_collects(resolver) -> None:
    qc = QueryContext(resolver)

    result = await qc.execute(
        "https://example.org/profile",
        '{"@vocab":"http://xmlns.com/foaf/0.1/"}',
        "https://example.org/profile#me",
        ".name",
    )

    assert result == ["Alice"]
    assert resolver.calls == {"make_engine": 1, "make_path_factory": 1, "create_path": 1}
    assert resolver.resolved == [("https://example.org/profile#me", ".name")]
    assert qc.tracker.is_stale() is False


async def test_execute_with_empty_subject_touches_nothing(resolver, inputs) -> None:
    qc = QueryContext(resolver)

    with pytest.raises(ValidationError) as exc_info:
        await qc.execute(inputs["source"], inputs["context"], "", ".name")

    assert isinstance(exc_info.value, EmptySubjectError)
    assert resolver.calls == {"make_engine": 0, "make_path_factory": 0, "create_path": 0}


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"source": "nope"}, ValidationError),
        ({"context": "   "}, ValidationError),
        ({"context": "{oops"}, ContextParseError),
        ({"path_expression": ""}, PathNotSetError),
    ],
)
async def test_execute_validation_failures(resolver, inputs, overrides, error) -> None:
    qc = QueryContext(resolver)
    args = dict(inputs, path_expression=".name")
    args.update(overrides)

    with pytest.raises(error):
        await qc.execute(args["source"], args["context"], args["subject"], args["path_expression"])

    assert resolver.calls["make_engine"] == 0


async def test_repeated_execute_reuses_chain(resolver, inputs) -> None:
    qc = QueryContext(resolver)
    await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".name")

    result = await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".knows")

    assert result == ["https://example.org/bob#me", "https://example.org/carol#me"]
    assert qc.chain.rebuild_counts == {"engine": 1, "path_factory": 1, "entry_path": 1}


async def test_input_change_marks_matching_flag(resolver, inputs) -> None:
    qc = QueryContext(resolver)
    await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".name")

    qc.on_input_changed("context")

    assert qc.tracker.snapshot() == {"source_changed": False, "context_changed": True, "subject_changed": False}
    with pytest.raises(ValueError):
        qc.on_input_changed("output_format")


async def test_resolution_error_keeps_chain_and_flags(make_resolver, inputs) -> None:
    resolver = make_resolver(resolve_errors={".bad": RuntimeError("unknown predicate")})
    qc = QueryContext(resolver)

    with pytest.raises(ResolutionError):
        await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".bad")

    assert qc.tracker.is_stale() is False
    await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".name")
    assert resolver.calls == {"make_engine": 1, "make_path_factory": 1, "create_path": 1}


async def test_chain_construction_failure_becomes_resolution_error(make_resolver, inputs) -> None:
    class BrokenEngineResolver(make_resolver):
        def make_engine(self, source):
            raise OSError("cannot reach source")

    qc = QueryContext(BrokenEngineResolver())

    with pytest.raises(ResolutionError, match="cannot reach source"):
        await qc.execute(inputs["source"], inputs["context"], inputs["subject"], ".name")

    assert qc.tracker.must_rebuild_engine() is True


async def test_list_subjects_builds_engine_only(resolver, inputs) -> None:
    qc = QueryContext(resolver)

    subjects = await qc.list_subjects(inputs["source"])

    assert subjects == ["https://example.org/profile#me", "https://example.org/bob#me"]
    assert qc.chain.rebuild_counts == {"engine": 1, "path_factory": 0, "entry_path": 0}
    assert qc.tracker.must_rebuild_engine() is False


async def test_list_subjects_failure_remarks_source(make_resolver, inputs) -> None:
    resolver = make_resolver(subjects_error=OSError("404 Not Found"))
    qc = QueryContext(resolver)

    with pytest.raises(SourceEnumerationError, match="404 Not Found"):
        await qc.list_subjects(inputs["source"])

    assert qc.tracker.must_rebuild_engine() is True


async def test_list_subjects_with_invalid_source(resolver) -> None:
    qc = QueryContext(resolver)

    with pytest.raises(SourceEnumerationError, match="Invalid source URL"):
        await qc.list_subjects("")

    assert resolver.calls["make_engine"] == 0
    assert qc.tracker.must_rebuild_engine() is True


async def test_list_properties_uses_current_engine(resolver, inputs) -> None:
    qc = QueryContext(resolver)
    await qc.list_subjects(inputs["source"])

    properties = await qc.list_properties(inputs["subject"])

    assert properties == ["http://xmlns.com/foaf/0.1/name", "http://xmlns.com/foaf/0.1/knows"]
    assert resolver.calls["make_engine"] == 1


async def test_list_properties_requires_subject_and_engine(resolver, inputs) -> None:
    qc = QueryContext(resolver)

    with pytest.raises(PropertyEnumerationError, match="No subject selected"):
        await qc.list_properties(None)
    with pytest.raises(PropertyEnumerationError, match="Query engine not instantiated"):
        await qc.list_properties(inputs["subject"])
