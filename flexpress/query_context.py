# flexpress/query_context.py

from flexpress.base_utils import BaseUtils
from flexpress.config import logger
from flexpress.enumerators import enumerate_properties, enumerate_subjects
from flexpress.errors import FlexpressError, PropertyEnumerationError, ResolutionError, SourceEnumerationError
from flexpress.resource_chain import ResourceChain
from flexpress.result_collector import resolve_and_collect
from flexpress.staleness import StalenessTracker

INPUTS = ("source", "context", "subject")


class QueryContext(BaseUtils):
    """
    Owns the staleness flags and the resource chain of one user. Callers keep
    the instance and pass it around; nothing here is process-wide.

    Only one operation is expected to be outstanding per instance at a time.
    """

    def __init__(self, resolver):
        self.resolver = resolver
        self.tracker = StalenessTracker(source_changed=True)
        self.chain = ResourceChain(resolver, self.tracker)

    def on_input_changed(self, which: str) -> None:
        if which == "source":
            self.tracker.mark_source_changed()
        elif which == "context":
            self.tracker.mark_context_changed()
        elif which == "subject":
            self.tracker.mark_subject_changed()
        else:
            raise ValueError(f"Unknown input: {which}. Expected one of {INPUTS}")

    async def execute(self, source, context, subject, path_expression) -> list[str]:
        # Validate everything before the chain is touched.
        self._validate_source(source)
        self._validate_subject(subject)
        self._parse_context(context)
        expression = self._validate_path_expression(path_expression)

        try:
            entry_path = self.chain.ensure_fresh(source, context, subject)
        except FlexpressError:
            raise
        except Exception as e:
            raise ResolutionError(f"Query execution failed: {e}") from e

        return await resolve_and_collect(entry_path, expression)

    async def list_subjects(self, source) -> list[str]:
        try:
            src = self._validate_source(source)
            engine = self.chain.ensure_engine_fresh(src)
            return await enumerate_subjects(engine, src, resolver=self.resolver)
        except Exception as e:
            # A source that cannot be listed is not trusted for anything downstream.
            self.tracker.mark_source_changed()
            logger.debug(f"list_subjects failed, source re-marked as changed: {e}")
            if isinstance(e, SourceEnumerationError):
                raise
            raise SourceEnumerationError(str(e)) from e

    async def list_properties(self, subject) -> list[str]:
        if self._is_blank(subject):
            raise PropertyEnumerationError("Error: No subject selected.")
        subj = str(subject).strip()
        return await enumerate_properties(self.chain.engine, subj, resolver=self.resolver)
