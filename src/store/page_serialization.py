"""Page XML serialization.

This module renders a page model back into a ``<page>`` element string
in the export schema layout. The checksum is copied, not recomputed.
"""

from __future__ import annotations

import re
from xml.etree import ElementTree
from xml.etree.ElementTree import Element, SubElement

from core.constants import RECORD_INDENT, XML_NAMESPACE_URI
from core.errors import WikiCleanStoreError
from core.types import Contributor, Page, Revision

_XML_SPACE_ATTRIBUTE = f"{{{XML_NAMESPACE_URI}}}space"
# Code points outside the XML 1.0 Char production.
_ILLEGAL_XML_CHARACTERS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def serialize_page(page: Page, indent: bool = True) -> str:
    """Serialize one page to an XML string.

    Args:
        page: Page to render.
        indent: Pretty-print child elements when True.

    Returns:
        The ``<page>`` element as text.

    Raises:
        WikiCleanStoreError: If the page cannot be serialized.
    """
    element = build_page_element(page)
    if indent:
        ElementTree.indent(element, space=RECORD_INDENT)
    try:
        return ElementTree.tostring(element, encoding="unicode")
    except (TypeError, ValueError) as error:
        raise WikiCleanStoreError(
            f"Failed to serialize page '{page.title}': {error}."
        ) from error


def has_illegal_xml_characters(text: str) -> bool:
    """Return whether text holds code points an XML 1.0 document cannot carry.

    ElementTree escapes markup but writes control characters through as-is,
    so a body containing them would make the whole output dump unparseable.
    """
    return _ILLEGAL_XML_CHARACTERS.search(text) is not None


def build_page_element(page: Page) -> Element:
    """Build the element tree for one page."""
    element = Element("page")
    _text_child(element, "title", page.title)
    _text_child(element, "ns", page.namespace)
    _text_child(element, "id", page.page_id)
    if page.redirect_title is not None:
        SubElement(element, "redirect", {"title": page.redirect_title})
    _append_revision(element, page.revision)
    return element


def _append_revision(parent: Element, revision: Revision) -> None:
    """Append the ``<revision>`` block in export schema order.

    Args:
        parent: Page element receiving the block.
        revision: Revision metadata and body.
    """
    element = SubElement(parent, "revision")
    _text_child(element, "id", revision.revision_id)
    _text_child(element, "parentid", revision.parent_id)
    _text_child(element, "timestamp", revision.timestamp)
    _append_contributor(element, revision.contributor)
    _text_child(element, "comment", revision.comment)
    _text_child(element, "model", revision.model)
    _text_child(element, "format", revision.content_format)
    attributes: dict[str, str] = {}
    if revision.text.byte_count:
        attributes["bytes"] = revision.text.byte_count
    if revision.text.space:
        attributes[_XML_SPACE_ATTRIBUTE] = revision.text.space
    text_element = SubElement(element, "text", attributes)
    text_element.text = revision.text.body
    _text_child(element, "sha1", revision.sha1)


def _append_contributor(parent: Element, contributor: Contributor) -> None:
    """Append the ``<contributor>`` block.

    Anonymous edits carry only an address; registered edits carry the
    user name and id.

    Args:
        parent: Revision element receiving the block.
        contributor: Author metadata.
    """
    element = SubElement(parent, "contributor")
    if contributor.ip:
        _text_child(element, "ip", contributor.ip)
        return
    _text_child(element, "username", contributor.username)
    _text_child(element, "id", contributor.contributor_id)


def _text_child(parent: Element, tag: str, text: str) -> Element:
    """Append a child element holding only text.

    Args:
        parent: Element receiving the child.
        tag: Child tag name.
        text: Child text, empty for an empty element.

    Returns:
        The new child element.
    """
    child = SubElement(parent, tag)
    child.text = text
    return child
