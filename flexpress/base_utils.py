# flexpress/base_utils.py

from collections import OrderedDict
from urllib.parse import urlparse

import commentjson

from flexpress.config import logger
from flexpress.errors import ContextParseError, EmptySubjectError, PathNotSetError, ValidationError


class BaseUtils():

    # -----------------------
    # General Utils
    # -----------------------

    def color_print(self, text, color=None, end_value=None):
        COLOR_CODES = {
            'black': '30', 'red': '31', 'green': '32', 'yellow': '33', 'blue': '34', 'magenta': '35',
            'cyan': '36', 'white': '37', 'bright_black': '90', 'bright_red': '91', 'bright_green': '92',
            'bright_yellow': '93', 'bright_blue': '94', 'bright_magenta': '95', 'bright_cyan': '96', 'bright_white': '97'
        }
        if color and color.lower() in COLOR_CODES:
            color_code = COLOR_CODES[color.lower()]
            start = f"\033[{color_code}m"
            end = "\033[0m"
            text = f"{start}{text}{end}"
        logger.info(str(text))
        return False

    def _is_blank(self, value) -> bool:
        return value is None or not str(value).strip()

    # -----------------------
    # Input validation
    # -----------------------

    def _validate_source(self, source) -> str:
        """
        Returns the trimmed source URI.
        Only absolute URIs with a scheme and an authority are accepted (no file:, urn:, data: ...).
        """
        try:
            if self._is_blank(source):
                raise ValueError("Empty string")
            src = str(source).strip()
            parsed = urlparse(src)
            if not parsed.scheme or not parsed.netloc:
                raise ValueError("URL parsing error")
            return src
        except ValueError as e:
            raise ValidationError(f"Invalid source URL: {e}") from e

    def _validate_subject(self, subject) -> str:
        if self._is_blank(subject):
            raise EmptySubjectError("Invalid subject URI: No subject selected.")
        return str(subject).strip()

    def _parse_context(self, context) -> OrderedDict:
        """
        Parses the JSON-LD context text into an ordered mapping.
        The result is treated as an opaque document; only the path factory looks inside.
        """
        if self._is_blank(context):
            raise ValidationError("Invalid context: Empty JSON-LD context")
        try:
            data = commentjson.loads(str(context), object_pairs_hook=OrderedDict)
        except Exception as e:
            raise ContextParseError(f"Invalid context: {e}") from e
        if not isinstance(data, dict):
            raise ContextParseError("Invalid context: JSON-LD context must be an object")
        return data

    def _validate_path_expression(self, path_expression) -> str:
        if self._is_blank(path_expression):
            raise PathNotSetError("Invalid LDflex data path: Data path not set")
        return str(path_expression).strip()
