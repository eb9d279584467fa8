# flexpress/rdf_resolver.py
"""
Linked-data query resolution on top of rdflib.

    RdfResolver.make_engine(source)                 -> RdfEngine
    RdfResolver.make_path_factory(context, engine)  -> PathFactory
    PathFactory.create_path(subject)                -> EntryPath
    EntryPath.resolve(".interest.label")            -> async iterator of rdflib terms
    EntryPath.subjects / EntryPath.properties       -> async iterators of identifiers

Data paths follow the LDflex notation: a chain of `.term` segments and
`["iri or term"]` segments, with terms expanded through the JSON-LD context.
"""

import asyncio
import re
from urllib.parse import urldefrag

from rdflib import Graph, URIRef

from flexpress.config import logger

_SEGMENT_RE = re.compile(
    r"""\s*(?:\.\s*(?P<name>[^.\[\]\s"']+)|\[\s*(?P<quote>["'])(?P<key>.*?)(?P=quote)\s*\])"""
)


def parse_path_expression(expression: str) -> list[str]:
    """
    Splits a data path into its property terms.

    >>> parse_path_expression('.friends["http://xmlns.com/foaf/0.1/name"]')
    ['friends', 'http://xmlns.com/foaf/0.1/name']
    """
    terms = []
    pos = 0
    text = expression.strip()
    while pos < len(text):
        m = _SEGMENT_RE.match(text, pos)
        if not m:
            raise ValueError(f"Invalid data path '{expression}' at position {pos}")
        terms.append(m.group("name") if m.group("name") is not None else m.group("key"))
        pos = m.end()
    if not terms:
        raise ValueError(f"Invalid data path '{expression}'")
    return terms


def _flatten_context(context) -> dict:
    if context is None:
        return {}
    if isinstance(context, dict) and "@context" in context:
        context = context["@context"]
    if isinstance(context, list):
        merged = {}
        for item in context:
            merged.update(_flatten_context(item))
        return merged
    if isinstance(context, dict):
        return dict(context)
    raise ValueError("Remote JSON-LD contexts are not supported")


class RdfEngine:
    """
    Query engine over one source document. The document is fetched lazily, so
    an unreachable source only fails when the engine is first queried.
    """

    def __init__(self, source: str, format: str | None = None, graph: Graph | None = None):
        self.source = source
        self.format = format
        self._graph = graph
        self._lock = None

    async def graph(self) -> Graph:
        if self._graph is None:
            if self._lock is None:
                self._lock = asyncio.Lock()
            async with self._lock:
                if self._graph is None:
                    document, _ = urldefrag(self.source)
                    logger.info(f"[RDF] Loading source document: {document}")
                    graph = Graph()
                    await asyncio.to_thread(graph.parse, document, format=self.format)
                    logger.debug(f"[RDF] Loaded {len(graph)} triples from {document}")
                    self._graph = graph
        return self._graph


class PathFactory:
    def __init__(self, context=None, engine: RdfEngine | None = None):
        self.context = _flatten_context(context)
        self.engine = engine

    def _context_iri(self, key):
        value = self.context.get(key)
        if isinstance(value, dict):
            value = value.get("@id")
        return value if isinstance(value, str) else None

    def _expand_iri(self, value: str) -> URIRef:
        if ":" in value:
            prefix, local = value.split(":", 1)
            if not local.startswith("//"):
                namespace = self._context_iri(prefix)
                if namespace:
                    return URIRef(namespace + local)
            return URIRef(value)
        vocab = self.context.get("@vocab")
        if vocab:
            return URIRef(vocab + value)
        raise ValueError(f"Cannot expand term '{value}': no matching context entry and no @vocab")

    def expand_term(self, term: str) -> URIRef:
        if not term.startswith("@"):
            mapped = self._context_iri(term)
            if term in self.context and mapped is None:
                raise ValueError(f"Context term '{term}' has no @id")
            if mapped and mapped != term:
                return self._expand_iri(mapped)
        return self._expand_iri(term)

    def create_path(self, subject: str) -> "EntryPath":
        return EntryPath(self, URIRef(subject))


class EntryPath:
    def __init__(self, factory: PathFactory, subject: URIRef):
        self.factory = factory
        self.subject = subject

    async def _graph(self) -> Graph:
        if self.factory.engine is None:
            raise RuntimeError("Query engine not instantiated.")
        return await self.factory.engine.graph()

    async def _resolve(self, expression: str):
        predicates = [self.factory.expand_term(term) for term in parse_path_expression(expression)]
        graph = await self._graph()
        frontier = [self.subject]
        for predicate in predicates:
            frontier = [obj for node in frontier for obj in graph.objects(node, predicate)]
        for node in frontier:
            yield node

    def resolve(self, expression: str):
        return self._resolve(expression)

    @property
    def subjects(self):
        return self._subjects()

    async def _subjects(self):
        # Every subject in the loaded document, not only those reachable from self.subject.
        graph = await self._graph()
        seen = set()
        for subject in graph.subjects():
            if subject in seen:
                continue
            seen.add(subject)
            yield subject

    @property
    def properties(self):
        return self._properties()

    async def _properties(self):
        graph = await self._graph()
        seen = set()
        for predicate in graph.predicates(self.subject, None):
            if predicate in seen:
                continue
            seen.add(predicate)
            yield predicate


class RdfResolver:
    def __init__(self, format: str | None = None):
        self.format = format

    def make_engine(self, source: str) -> RdfEngine:
        return RdfEngine(source, format=self.format)

    def make_path_factory(self, context=None, engine: RdfEngine | None = None) -> PathFactory:
        return PathFactory(context=context, engine=engine)
