# flexpress/config.py

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("FLEXPRESS_LOG_LEVEL", "DEBUG"),
    format="%(asctime)s | %(levelname)s | %(name)s\n%(message)s\n"
)

logger = logging.getLogger("flexpress_backend")

# --- Configuration ---
HOST                = os.getenv("FLEXPRESS_HOST", "0.0.0.0")
PORT                = int(os.getenv("FLEXPRESS_PORT", "8000"))
SESSION_TTL_SECONDS = int(os.getenv("FLEXPRESS_SESSION_TTL_SECONDS", str(24 * 3600)))
CORS_ORIGINS        = [o.strip() for o in os.getenv("FLEXPRESS_CORS_ORIGINS", "*").split(",") if o.strip()]

DEFAULT_SOURCE = os.getenv("FLEXPRESS_DEFAULT_SOURCE", "https://ruben.verborgh.org/profile/")

DEFAULT_CONTEXT = """
{
  "@context": {
    "@vocab": "http://xmlns.com/foaf/0.1/",
    "friends": "knows",
    "label": "http://www.w3.org/2000/01/rdf-schema#label"
  }
}
""".strip()

# Stopgap until data paths can be built interactively from the subject properties.
DATA_PATH_PRESETS = [
    ".interest.label",
    ".interest",
    ".name",
]

DEFAULT_DATA_PATH = DATA_PATH_PRESETS[0]

OUTPUT_FORMATS = [
    {"label": "Tree", "value": "fmt_tree"},
    {"label": "JSON (Compact)", "value": "fmt_json"},
    {"label": "JSON (Formatted)", "value": "fmt_json_formatted"},
]

DEFAULT_OUTPUT_FORMAT = "fmt_json_formatted"


def defaults() -> dict:
    return {
        "source": DEFAULT_SOURCE,
        "context": DEFAULT_CONTEXT,
        "data_path": DEFAULT_DATA_PATH,
        "data_path_presets": list(DATA_PATH_PRESETS),
        "output_format": DEFAULT_OUTPUT_FORMAT,
        "output_formats": [dict(f) for f in OUTPUT_FORMATS],
    }
