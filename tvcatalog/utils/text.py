"""
Text helpers for upstream HTML-bearing fields.
"""
import logging

from lxml import etree, html  # type: ignore


logger = logging.getLogger(__name__)


def clean_html(value: str | None) -> str:
    """
    Strip markup from an HTML fragment and collapse whitespace.

    Upstream summaries look like '<p>Some <b>text</b></p>'. Unparseable
    fragments fall back to the raw string.
    """
    if not value:
        return ""
    try:
        fragment = html.fragment_fromstring(value, create_parent="div")
    except (etree.LxmlError, ValueError) as exc:
        logger.debug("Could not parse HTML fragment: %s", exc)
        return value.strip()
    return " ".join(fragment.text_content().split())
