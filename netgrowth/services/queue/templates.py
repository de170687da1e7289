"""Message template selection and {{token}} rendering."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from netgrowth.models import Contact, Template

TEMPLATE_MAX_LENGTH: int = 300
EXCEEDS_LENGTH_NOTE: str = "EXCEEDS_300_CHARS: Requires manual editing"

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")

# Placeholders with no data source yet; rendered empty
UNPOPULATED_TOKENS: tuple[str, ...] = (
    "mutual_connection",
    "recent_post",
    "category_context",
    "custom",
)


def render_template(body: str, data: dict[str, str]) -> str:
    """Substitute {{token}} placeholders. Unknown tokens render as empty strings."""
    return _TOKEN_RE.sub(lambda m: data.get(m.group(1)) or "", body)


def build_token_data(contact: Contact) -> dict[str, str]:
    data = {
        "first_name": contact.first_name or "",
        "last_name": contact.last_name or "",
        "company": contact.company or "",
        "title": contact.title or "",
    }
    for token in UNPOPULATED_TOKENS:
        data[token] = ""
    return data


def select_template(
    templates: Sequence[Template], category_ids: Iterable[int]
) -> Template | None:
    """Pick a template from active templates ordered by times_used ascending.

    The first template whose category is one of the contact's categories wins;
    otherwise the least-used template overall. None when there are no templates.
    """
    if not templates:
        return None
    wanted = set(category_ids)
    if wanted:
        for template in templates:
            if template.category_id is not None and template.category_id in wanted:
                return template
    return templates[0]


def exceeds_length(message: str | None) -> bool:
    return message is not None and len(message) > TEMPLATE_MAX_LENGTH
