# flexpress/backend.py

import json

from flexpress.base_utils import BaseUtils
from flexpress.config import SESSION_TTL_SECONDS, defaults, logger
from flexpress.rdf_resolver import RdfResolver
from flexpress.session import QuerySession
from flexpress.session_cache import SessionCache


class QueryBackend(BaseUtils):
    def __init__(self, resolver=None, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.resolver = resolver if resolver is not None else RdfResolver()
        self.sessions = SessionCache(ttl_seconds, lambda page_url: QuerySession(self.resolver, page_url))

    def sweep(self) -> None:
        removed = self.sessions.sweep_expired()
        if removed:
            logger.debug("SessionCache sweep: removed %d expired sessions", removed)

    async def process_request(self, request_data: dict) -> dict:
        """
        Core request handling logic.
        Takes a parsed event dict {type, session_id, payload} and returns the response_data dict.
        """
        self.sweep()

        request_type = request_data.get("type")
        payload = request_data.get("payload") or {}
        if not isinstance(payload, dict):
            return {"status": "error", "message": "payload must be a JSON object", "session_id": request_data.get("session_id")}

        try:
            preview = json.dumps(request_data, indent=2)
        except (TypeError, ValueError):
            preview = str(request_data)
        logger.debug(f"process_request request {preview}")

        if request_type == "defaults":
            return {"status": "success", "message": "", "data": defaults()}

        session_id, session = self.sessions.get_or_create(request_data.get("session_id"), payload.get("page_url"))

        if request_type == "init":
            response_data = {"status": "success", "message": "", "data": session.state()}

        elif request_type == "set_input":
            response_data = session.set_input(payload.get("field"), payload.get("value"))

        elif request_type == "execute":
            response_data = await session.execute()

        elif request_type == "list_subjects":
            response_data = await session.list_subjects()

        elif request_type == "list_properties":
            response_data = await session.list_properties()

        elif request_type == "clear":
            response_data = session.clear()

        elif request_type == "reset_defaults":
            response_data = session.reset_defaults()

        elif request_type == "permalink":
            response_data = session.permalink(payload.get("page_url"))

        elif request_type == "render":
            response_data = session.render(payload.get("output_format"))

        else:
            response_data = {"status": "error", "message": f"Unknown request type: {request_type}", "data": None}

        response_data["session_id"] = session_id
        return response_data
