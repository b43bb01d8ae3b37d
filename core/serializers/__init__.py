import html

import bleach


def clean_text(value) -> str:
    """Strip markup from free text and keep the characters the user typed.

    ``bleach.clean`` escapes ``&`` and ``<``; the stored value is plain
    text rendered as JSON, so the entities are decoded again.
    """
    return html.unescape(bleach.clean((value or '').strip(), tags=set(), strip=True)).strip()
