"""Generic XML -> JSON-style tree conversion for the MBS XML release."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from models import ITEMS_COLLECTION
from normalizer import StructuralError

ATTRIBUTE_PREFIX = "-"
CONTENT_KEY = "#content"

MBS_ROOT_TAG = "MBS_XML"
MBS_ITEM_TAG = "Data"


def xml_to_tree(xml_bytes: bytes) -> dict[str, Any]:
    """Convert an XML document to ``{root_tag: value}``.

    Leaf elements without attributes become their stripped text. Attributes are
    stored under ``-name`` keys, and text next to children or attributes under
    ``#content``. Repeated child tags collapse into a list in document order.
    """
    try:
        root = ET.fromstring(xml_bytes)
    except ET.ParseError as exc:
        raise StructuralError(f"malformed XML: {exc}") from exc
    return {_local_name(root.tag): _element_value(root)}


def extract_items_document(tree: Any) -> dict[str, Any]:
    """Re-root the MBS item list under ITEMS_COLLECTION."""
    mbs_xml = tree.get(MBS_ROOT_TAG) if isinstance(tree, dict) else None
    if not isinstance(mbs_xml, dict):
        raise StructuralError(f"unexpected JSON structure: missing {MBS_ROOT_TAG} object")
    if MBS_ITEM_TAG not in mbs_xml:
        raise StructuralError(f"unexpected JSON structure: missing {MBS_ITEM_TAG} object")
    return {ITEMS_COLLECTION: mbs_xml[MBS_ITEM_TAG]}


def _element_value(element: ET.Element) -> Any:
    text = (element.text or "").strip()
    children = list(element)

    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {
        f"{ATTRIBUTE_PREFIX}{_local_name(name)}": value for name, value in element.attrib.items()
    }
    for child in children:
        key = _local_name(child.tag)
        value = _element_value(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]
    if text:
        node[CONTENT_KEY] = text
    return node


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}name".
    return tag.rsplit("}", 1)[-1]
