# flexpress/rendering.py

import json
from collections import OrderedDict

import commentjson

from flexpress.config import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS

FORMAT_VALUES = [f["value"] for f in OUTPUT_FORMATS]


def _render_tree(data, indent: int = 0) -> list[str]:
    pad = "  " * indent
    lines = []
    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                lines.append(f"{pad}{key}:")
                lines.extend(_render_tree(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {json.dumps(value, ensure_ascii=False)}")
    elif isinstance(data, list):
        for i, value in enumerate(data):
            if isinstance(value, (dict, list)):
                lines.append(f"{pad}{i}:")
                lines.extend(_render_tree(value, indent + 1))
            else:
                lines.append(f"{pad}{i}: {json.dumps(value, ensure_ascii=False)}")
    else:
        lines.append(f"{pad}{json.dumps(data, ensure_ascii=False)}")
    return lines


def render_query_result(query_result, output_format: str = DEFAULT_OUTPUT_FORMAT) -> str:
    if output_format == "fmt_tree":
        return "\n".join(_render_tree(query_result))
    if output_format == "fmt_json":
        return json.dumps(query_result, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(query_result, indent=2, ensure_ascii=False)


def query_result_metadata(context_text, query_result):
    """
    JSON-LD document embedded in the page next to a result: the parsed context
    plus a queryResult member. None when there is no result.
    """
    if query_result is None:
        return None
    metadata = OrderedDict()
    if context_text and str(context_text).strip():
        parsed = commentjson.loads(str(context_text), object_pairs_hook=OrderedDict)
        if isinstance(parsed, dict):
            metadata = parsed
    metadata["queryResult"] = query_result
    return metadata
