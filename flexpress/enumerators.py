# flexpress/enumerators.py
#
# Side queries against the engine, bypassing the context-bound path factory.
# Both listings inherit a scoping defect of the underlying library: subjects
# are those of the whole loaded document, not just children of the source node.

from flexpress.errors import PropertyEnumerationError, SourceEnumerationError


async def enumerate_subjects(engine, source, *, resolver) -> list[str]:
    """Named subjects of the source document; blank nodes are filtered out."""
    try:
        # No context needed: we list identifiers, we don't evaluate a data path.
        path_factory = resolver.make_path_factory(None, engine)
        source_path = path_factory.create_path(source)
        subjects = []
        async for subject in source_path.subjects:
            subject_uri = str(subject)
            if subject_uri.startswith("http"):
                subjects.append(subject_uri)
        return subjects
    except Exception as e:
        raise SourceEnumerationError(str(e)) from e


async def enumerate_properties(engine, subject, *, resolver) -> list[str]:
    try:
        if engine is None:
            raise RuntimeError("Query engine not instantiated.")
        path_factory = resolver.make_path_factory(None, engine)
        subject_path = path_factory.create_path(subject)
        properties = []
        async for prop in subject_path.properties:
            properties.append(str(prop))
        return properties
    except Exception as e:
        raise PropertyEnumerationError(str(e)) from e
