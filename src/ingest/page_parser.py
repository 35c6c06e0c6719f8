"""Page element parsing.

This module maps one ``<page>`` element subtree onto the typed page model.
Tag lookups ignore the export namespace so any dump schema version parses.
"""

from __future__ import annotations

from xml.etree.ElementTree import Element

from core.constants import XML_NAMESPACE_URI
from core.types import Contributor, Page, Revision, RevisionText

_XML_SPACE_ATTRIBUTE = f"{{{XML_NAMESPACE_URI}}}space"
_EMPTY_REVISION = Revision(revision_id="", text=RevisionText(body=""))


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def parse_page_element(element: Element) -> Page:
    """Build a page model from a fully-parsed ``<page>`` element.

    Args:
        element: Completed page element.

    Returns:
        Parsed page. The title is empty when the element has none.
    """
    title = _child_text(element, "title")
    redirect = _find_child(element, "redirect")
    revisions = _find_children(element, "revision")
    revision = _parse_revision(revisions[-1]) if revisions else _EMPTY_REVISION
    return Page(
        title=title,
        namespace=_child_text(element, "ns"),
        page_id=_child_text(element, "id"),
        redirect_title=redirect.get("title", "") if redirect is not None else None,
        revision=revision,
    )


def _parse_revision(element: Element) -> Revision:
    """Build the revision model from a ``<revision>`` element.

    Args:
        element: Revision element.

    Returns:
        Parsed revision with every missing field left empty.
    """
    text_element = _find_child(element, "text")
    if text_element is None:
        text = RevisionText(body="")
    else:
        text = RevisionText(
            body=text_element.text or "",
            byte_count=text_element.get("bytes", ""),
            space=text_element.get(_XML_SPACE_ATTRIBUTE, ""),
        )
    contributor_element = _find_child(element, "contributor")
    contributor = (
        Contributor(
            username=_child_text(contributor_element, "username"),
            contributor_id=_child_text(contributor_element, "id"),
            ip=_child_text(contributor_element, "ip"),
        )
        if contributor_element is not None
        else Contributor()
    )
    return Revision(
        revision_id=_child_text(element, "id"),
        parent_id=_child_text(element, "parentid"),
        timestamp=_child_text(element, "timestamp"),
        contributor=contributor,
        comment=_child_text(element, "comment"),
        model=_child_text(element, "model"),
        content_format=_child_text(element, "format"),
        text=text,
        sha1=_child_text(element, "sha1"),
    )


def _find_children(element: Element, name: str) -> list[Element]:
    """Return direct children whose local tag name matches."""
    return [child for child in element if local_name(child.tag) == name]


def _find_child(element: Element, name: str) -> Element | None:
    """Return the first direct child whose local tag name matches."""
    for child in element:
        if local_name(child.tag) == name:
            return child
    return None


def _child_text(element: Element, name: str) -> str:
    """Return the text of a named child.

    Args:
        element: Parent element.
        name: Local tag name of the child.

    Returns:
        Child text, or an empty string when the child or its text is absent.
    """
    child = _find_child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text
