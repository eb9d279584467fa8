# flexpress/resource_chain.py

from dataclasses import dataclass
from typing import Any, Optional

from flexpress.base_utils import BaseUtils
from flexpress.config import logger
from flexpress.staleness import StalenessTracker


@dataclass
class _Slot:
    value: Any = None
    # Inputs the value was built from; compared on the next refresh.
    built_from: tuple = ()


class ResourceChain(BaseUtils):
    """
    The LDflex query context: three memoized resources built in strict order.

        engine:       f(source)
        path_factory: f(context, engine)
        entry_path:   f(path_factory, subject)

    The engine need only change if the source changes, the path factory if the
    context or the engine changed, the entry path if the path factory or the
    subject changed. Resources are never mutated once built; a rebuild replaces
    the slot and the previous instance is dropped.
    """

    def __init__(self, resolver, tracker: Optional[StalenessTracker] = None):
        self.resolver = resolver
        # Nothing built yet: behave as if the source had just been entered.
        self.tracker = tracker if tracker is not None else StalenessTracker(source_changed=True)
        self._engine = _Slot()
        self._path_factory = _Slot()
        self._entry_path = _Slot()
        self.rebuild_counts = {"engine": 0, "path_factory": 0, "entry_path": 0}

    @property
    def engine(self):
        return self._engine.value

    @property
    def path_factory(self):
        return self._path_factory.value

    @property
    def entry_path(self):
        return self._entry_path.value

    # -----------------------
    # Staleness of individual slots
    # -----------------------

    def _engine_outdated(self, source: str) -> bool:
        return self._engine.value is None or self._engine.built_from != (source,)

    def _path_factory_outdated(self, context_obj) -> bool:
        slot = self._path_factory
        if slot.value is None:
            return True
        built_context, built_engine = slot.built_from
        return built_engine is not self._engine.value or built_context != context_obj

    def _entry_path_outdated(self, subject: str) -> bool:
        slot = self._entry_path
        if slot.value is None:
            return True
        built_factory, built_subject = slot.built_from
        return built_factory is not self._path_factory.value or built_subject != subject

    # -----------------------
    # Refresh
    # -----------------------

    def _build_engine(self, source: str) -> None:
        logger.debug(f"ResourceChain: building engine for source={source}")
        engine = self.resolver.make_engine(source)
        self._engine = _Slot(engine, (source,))
        self.rebuild_counts["engine"] += 1

    def ensure_engine_fresh(self, source):
        """
        Rebuilds only the engine slot. Used by the subject/property listings,
        which need neither a context nor a subject. Only the source flag is
        cleared; context and subject flags are left for the next full refresh.
        """
        src = self._validate_source(source)
        if self.tracker.must_rebuild_engine() or self._engine_outdated(src):
            self._build_engine(src)
        self.tracker.clear_source()
        return self._engine.value

    def ensure_fresh(self, source, context, subject):
        """
        Validates the three inputs, rebuilds whatever is stale and returns the
        entry path. Raises ValidationError / EmptySubjectError / ContextParseError
        before any slot is touched.
        """
        src = self._validate_source(source)
        subj = self._validate_subject(subject)
        context_obj = self._parse_context(context)

        # Decide everything up front, then act.
        rebuild_engine = self.tracker.must_rebuild_engine() or self._engine_outdated(src)
        rebuild_factory = (
            rebuild_engine
            or self.tracker.must_rebuild_path_factory()
            or self._path_factory_outdated(context_obj)
        )
        rebuild_entry = (
            rebuild_factory
            or self.tracker.must_rebuild_entry_path()
            or self._entry_path_outdated(subj)
        )

        if rebuild_engine:
            self._build_engine(src)

        if rebuild_factory:
            logger.debug("ResourceChain: building path factory")
            factory = self.resolver.make_path_factory(context_obj, self._engine.value)
            self._path_factory = _Slot(factory, (context_obj, self._engine.value))
            self.rebuild_counts["path_factory"] += 1

        if rebuild_entry:
            logger.debug(f"ResourceChain: building entry path for subject={subj}")
            entry_path = self._path_factory.value.create_path(subj)
            self._entry_path = _Slot(entry_path, (self._path_factory.value, subj))
            self.rebuild_counts["entry_path"] += 1

        self.tracker.clear_all()
        return self._entry_path.value
