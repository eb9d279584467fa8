import pytest


async def agen(values, error=None):
    for value in values:
        yield value
    if error is not None:
        raise error


class FakeEngine:
    def __init__(self, source):
        self.source = source


class FakePathFactory:
    def __init__(self, resolver, context, engine):
        self.resolver = resolver
        self.context = context
        self.engine = engine

    def create_path(self, subject):
        self.resolver.calls["create_path"] += 1
        return FakeEntryPath(self.resolver, self, subject)


class FakeEntryPath:
    def __init__(self, resolver, factory, subject):
        self.resolver = resolver
        self.factory = factory
        self.subject = subject

    def resolve(self, expression):
        self.resolver.resolved.append((self.subject, expression))
        if expression in self.resolver.resolve_errors:
            return agen([], self.resolver.resolve_errors[expression])
        return agen(self.resolver.results.get(expression, []))

    @property
    def subjects(self):
        return agen(self.resolver.subjects, self.resolver.subjects_error)

    @property
    def properties(self):
        return agen(self.resolver.properties, self.resolver.properties_error)


class FakeResolver:
    """Stands in for the linked-data collaborator and counts every construction."""

    def __init__(self, results=None, subjects=(), properties=(), subjects_error=None,
                 properties_error=None, resolve_errors=None):
        self.results = dict(results or {})
        self.subjects = list(subjects)
        self.properties = list(properties)
        self.subjects_error = subjects_error
        self.properties_error = properties_error
        self.resolve_errors = dict(resolve_errors or {})
        self.calls = {"make_engine": 0, "make_path_factory": 0, "create_path": 0}
        self.resolved = []

    def make_engine(self, source):
        self.calls["make_engine"] += 1
        return FakeEngine(source)

    def make_path_factory(self, context=None, engine=None):
        self.calls["make_path_factory"] += 1
        return FakePathFactory(self, context, engine)


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def resolver():
    return FakeResolver(
        results={
            ".name": ["Alice", "Alice"],
            ".knows": ["https://example.org/bob#me", "https://example.org/carol#me", "https://example.org/bob#me"],
        },
        subjects=["https://example.org/profile#me", "_:b0", "https://example.org/bob#me"],
        properties=["http://xmlns.com/foaf/0.1/name", "http://xmlns.com/foaf/0.1/knows"],
    )


SOURCE = "https://example.org/profile"
CONTEXT = '{"@vocab": "http://xmlns.com/foaf/0.1/"}'
SUBJECT = "https://example.org/profile#me"


@pytest.fixture
def inputs():
    return {"source": SOURCE, "context": CONTEXT, "subject": SUBJECT}
