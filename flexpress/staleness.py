# flexpress/staleness.py


class StalenessTracker:
    """
    Independent "changed" flags over the three inputs of the query context:
    source, context and subject.

    A flag is set as soon as its input changes and is only cleared once the
    resources depending on it have been rebuilt. The must_rebuild_* predicates
    encode the cascade engine -> path factory -> entry path: a change upstream
    makes every downstream resource stale as well.
    """

    def __init__(self, source_changed: bool = False, context_changed: bool = False, subject_changed: bool = False):
        self.source_changed = source_changed
        self.context_changed = context_changed
        self.subject_changed = subject_changed

    def mark_source_changed(self) -> None:
        self.source_changed = True

    def mark_context_changed(self) -> None:
        self.context_changed = True

    def mark_subject_changed(self) -> None:
        self.subject_changed = True

    def is_stale(self) -> bool:
        return self.source_changed or self.context_changed or self.subject_changed

    def must_rebuild_engine(self) -> bool:
        return self.source_changed

    def must_rebuild_path_factory(self) -> bool:
        return self.source_changed or self.context_changed

    def must_rebuild_entry_path(self) -> bool:
        return self.source_changed or self.context_changed or self.subject_changed

    def clear_source(self) -> None:
        self.source_changed = False

    def clear_all(self) -> None:
        self.source_changed = False
        self.context_changed = False
        self.subject_changed = False

    def snapshot(self) -> dict:
        return {
            "source_changed": self.source_changed,
            "context_changed": self.context_changed,
            "subject_changed": self.subject_changed,
        }

    def __repr__(self):
        return f"StalenessTracker({self.snapshot()})"
