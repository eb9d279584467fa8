# flexpress/session.py

from urllib.parse import urlparse, urlunparse

from flexpress.base_utils import BaseUtils
from flexpress.config import (
    DEFAULT_CONTEXT,
    DEFAULT_DATA_PATH,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SOURCE,
    logger,
)
from flexpress.errors import FlexpressError
from flexpress.permalink import get_query_string_params, make_query_permalink
from flexpress.query_context import QueryContext
from flexpress.rendering import FORMAT_VALUES, query_result_metadata, render_query_result


class QuerySession(BaseUtils):
    """
    Form state of one browser user around a QueryContext.

    Every public operation returns a response envelope
    {"status": "success" | "error", "message": str, "data": ...}
    and never raises: failures become a status message plus the partial
    reset the failing operation calls for.
    """

    def __init__(self, resolver, page_url: str | None = None):
        self.query_context = QueryContext(resolver)
        self.page_url = page_url

        params = get_query_string_params(page_url) if page_url else {}
        self.source = params.get("source") or DEFAULT_SOURCE
        self.context = params.get("context") or DEFAULT_CONTEXT
        self.data_path = params.get("query") or DEFAULT_DATA_PATH
        fmt = params.get("format")
        self.output_format = fmt if fmt in FORMAT_VALUES else DEFAULT_OUTPUT_FORMAT

        self.subject = None
        self.property = None
        self.subjects: list[str] = []
        self.properties: list[str] = []
        self.query_result = None
        self.status = None
        # Advisory only; nothing blocks on it.
        self.response_pending = False

    # -----------------------
    # Envelopes
    # -----------------------

    def _success(self, data=None, message: str = "") -> dict:
        return {"status": "success", "message": message, "data": data}

    def _error(self, e: Exception) -> dict:
        code = getattr(e, "code", "INTERNAL_ERROR")
        return {"status": "error", "message": self.status or str(e), "data": {"code": code, "state": self.state()}}

    def state(self) -> dict:
        return {
            "source": self.source,
            "context": self.context,
            "subject": self.subject,
            "property": self.property,
            "data_path": self.data_path,
            "output_format": self.output_format,
            "subjects": list(self.subjects),
            "properties": list(self.properties),
            "query_result": self.query_result,
            "status": self.status,
            "response_pending": self.response_pending,
            "stale": self.query_context.tracker.snapshot(),
        }

    # -----------------------
    # Form inputs
    # -----------------------

    def clear(self) -> dict:
        self.query_result = None
        self.status = None
        return self._success(self.state())

    def _clear_subject(self) -> None:
        self.subject = None
        self.property = None
        self.subjects = []
        self.properties = []

    def set_source(self, value) -> None:
        self.clear()
        self._clear_subject()
        self.source = value
        self.query_context.on_input_changed("source")

    def set_context(self, value) -> None:
        self.clear()
        self.context = value
        self.query_context.on_input_changed("context")

    def set_subject(self, value) -> None:
        self.clear()
        self.subject = value
        self.query_context.on_input_changed("subject")

    def set_property(self, value) -> None:
        # The selected property does not feed the data path yet.
        self.property = value
        self.clear()

    def set_data_path(self, value) -> None:
        self.clear()
        self.data_path = value

    def set_output_format(self, value) -> None:
        if value not in FORMAT_VALUES:
            raise ValueError(f"Unknown output format: {value}")
        self.output_format = value

    def set_input(self, field: str, value) -> dict:
        setters = {
            "source": self.set_source,
            "context": self.set_context,
            "subject": self.set_subject,
            "property": self.set_property,
            "data_path": self.set_data_path,
            "output_format": self.set_output_format,
        }
        setter = setters.get(field)
        if setter is None:
            self.status = f"Unknown input field: {field}"
            return self._error(ValueError(self.status))
        try:
            setter(value)
        except ValueError as e:
            self.status = str(e)
            return self._error(e)
        return self._success(self.state())

    def reset_defaults(self) -> dict:
        self.clear()
        self._clear_subject()
        self.source = DEFAULT_SOURCE
        self.context = DEFAULT_CONTEXT
        self.data_path = DEFAULT_DATA_PATH
        self.output_format = DEFAULT_OUTPUT_FORMAT
        self.query_context.on_input_changed("source")

        # Drop any permalink query string the page was opened with.
        if self.page_url:
            self.page_url = urlunparse(urlparse(self.page_url)._replace(query=""))
        data = self.state()
        data["page_url"] = self.page_url
        return self._success(data)

    # -----------------------
    # Query operations
    # -----------------------

    async def execute(self) -> dict:
        self.clear()
        self.response_pending = True
        try:
            result = await self.query_context.execute(self.source, self.context, self.subject, self.data_path)
        except FlexpressError as e:
            self.status = str(e)
            self.color_print(f"execute(): {e}", color="red")
            return self._error(e)
        except Exception as e:
            self.status = f"Query execution failed: {e}"
            self.color_print(f"execute(): unexpected error -> {e}", color="red")
            return self._error(e)
        finally:
            self.response_pending = False

        self.query_result = result
        logger.debug(f"execute(): {self.data_path} -> {result}")
        return self._success({
            "query_result": result,
            "rendered": render_query_result(result, self.output_format),
            "metadata": query_result_metadata(self.context, result),
        })

    async def list_subjects(self) -> dict:
        self.clear()
        self.subjects = []
        self.response_pending = True
        try:
            subjects = await self.query_context.list_subjects(self.source)
        except Exception as e:
            self.status = str(e)
            self.subject = None
            self.color_print(f"list_subjects(): {e}", color="red")
            return self._error(e)
        finally:
            self.response_pending = False

        self.subjects = subjects
        if subjects:
            self.subject = subjects[0]
            self.query_context.on_input_changed("subject")
        return self._success({"subjects": list(subjects), "subject": self.subject})

    async def list_properties(self) -> dict:
        self.properties = []
        self.response_pending = True
        try:
            properties = await self.query_context.list_properties(self.subject)
        except Exception as e:
            self.status = str(e)
            self.property = None
            self.color_print(f"list_properties(): {e}", color="red")
            return self._error(e)
        finally:
            self.response_pending = False

        self.properties = properties
        if properties:
            self.property = properties[0]
        return self._success({"properties": list(properties), "property": self.property})

    # -----------------------
    # Output
    # -----------------------

    def permalink(self, page_url: str | None = None) -> dict:
        base = page_url or self.page_url
        if not base:
            self.status = "No page URL to build a permalink from."
            return self._error(ValueError(self.status))
        return self._success({"permalink": make_query_permalink(base, self.source, self.context, self.output_format)})

    def render(self, output_format: str | None = None) -> dict:
        fmt = output_format or self.output_format
        if self.query_result is None:
            return self._success({"rendered": None, "output_format": fmt})
        return self._success({"rendered": render_query_result(self.query_result, fmt), "output_format": fmt})
