# flexpress/permalink.py

from urllib.parse import parse_qs, quote, unquote, urlparse, urlunparse

QUERY_PARAMS = ("source", "query", "context", "format")


def _encode_component(value: str) -> str:
    # Same reserved set as JavaScript's encodeURIComponent.
    return quote(value, safe="-_.!~*'()")


def get_query_string_params(page_url) -> dict:
    """
    Reads source / query / context / format from a page URL.
    Missing parameters map to None; an unusable URL gives {}.
    """
    try:
        parsed = urlparse(str(page_url))
        if not parsed.scheme or not parsed.netloc:
            return {}
        params = parse_qs(parsed.query, keep_blank_values=True)
        out = {}
        for key in QUERY_PARAMS:
            values = params.get(key)
            out[key] = unquote(values[0]).strip() if values else None
        return out
    except ValueError:
        return {}


def make_query_permalink(page_url, source, context, output_format) -> str:
    """
    Bookmark for the current query. Queries that have not executed successfully
    are allowed, but a source and a context are required for any parameters
    to be written.
    """
    t_context = (context or "").strip()
    t_source = (source or "").strip()

    parsed = urlparse(str(page_url))
    query = ""
    if t_context and t_source:
        query = (
            f"source={_encode_component(t_source)}"
            f"&format={_encode_component(output_format or '')}"
            f"&context={_encode_component(t_context)}"
        )
    return urlunparse(parsed._replace(query=query))
