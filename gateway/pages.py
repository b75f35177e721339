"""Static page rendering: homepage listing and favicon."""

import html
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from common.formatting import format_file_size
from gateway.catalog import Catalog

STATIC_DIR = Path(__file__).parent / "static"


@lru_cache(maxsize=1)
def load_homepage_template() -> str:
    return (STATIC_DIR / "index.html").read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def load_favicon() -> bytes:
    return (STATIC_DIR / "favicon.ico").read_bytes()


def render_homepage(catalog: Catalog) -> str:
    """
    Render the object list and total stored size into the homepage template.

    Args:
        catalog: Catalog to list

    Returns:
        HTML document
    """
    links = [
        f'<p><a href="/{quote(name)}">{html.escape(name)}</a></p>'
        for name in catalog.names()
    ]
    return (
        load_homepage_template()
        .replace("{{PLACE_HOLDER}}", "\n".join(links))
        .replace("{{SIZE}}", format_file_size(catalog.meta.total_size))
    )
