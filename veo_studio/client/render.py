import os
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from veo_studio.client.records import RecordBook
from veo_studio.models.video import GenerationRecord

# Length of the cosmetic progress animation; the bridge reports no real progress
PROGRESS_ANIMATION_SECONDS = 30
# How often the studio page reloads itself while something is pending
REFRESH_SECONDS = 5

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

def render_records(records: Iterable[GenerationRecord]) -> str:
    """Renders the record list as an HTML fragment. Pure function of its input."""
    template = _env.get_template("records.html")
    return template.render(records=list(records), progress_seconds=PROGRESS_ANIMATION_SECONDS)

def render_studio_page(book: RecordBook, alert: Optional[str] = None, prompt: str = "") -> str:
    """Full studio page: submission form, status summary and the record grid.

    The API key field is always rendered empty.
    """
    template = _env.get_template("index.html")
    return template.render(
        records=book.records,
        counts={status.value: count for status, count in book.counts().items()},
        is_generating=book.is_generating,
        alert=alert,
        prompt=prompt,
        progress_seconds=PROGRESS_ANIMATION_SECONDS,
        refresh_seconds=REFRESH_SECONDS,
    )
