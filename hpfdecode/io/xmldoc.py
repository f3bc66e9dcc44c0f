# hpfdecode/io/xmldoc.py
"""
Thin wrapper over xml.etree.ElementTree for the documents embedded in chunks.

Decoders only need: parse bytes, get the root, iterate children, read text.

QuickDAQ writes these documents without an XML declaration, in whatever
code page the recording machine used. Undeclared documents are read as
UTF-8 when they are valid UTF-8 and as Windows-1252 otherwise.
"""
from __future__ import annotations

import logging
import re
from typing import Iterator
from xml.etree import ElementTree as ET

from hpfdecode.core.exceptions import MalformedDocument, UnexpectedRoot

logger = logging.getLogger(__name__)

Element = ET.Element

_DECLARED_ENCODING = re.compile(rb"^\s*<\?xml[^>]*\bencoding\s*=")
FALLBACK_ENCODING = "cp1252"


def decode_document(data: bytes) -> str | bytes:
    """
    Text of an undeclared document, or the bytes unchanged when the
    document names its own encoding.
    """
    if _DECLARED_ENCODING.match(data):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug("document is not UTF-8 (%s), reading it as %s", e.reason, FALLBACK_ENCODING)
        return data.decode(FALLBACK_ENCODING, errors="replace")


def parse(data: bytes) -> Element:
    """Parse a document and return its root element."""
    data = bytes(data).split(b"\0", 1)[0]
    if not data.strip():
        raise UnexpectedRoot("root of XML not found: document is empty")
    try:
        return ET.fromstring(decode_document(data))
    except ET.ParseError as e:
        raise MalformedDocument(f"document is not well-formed XML: {e}") from e


def require_root(data: bytes, name: str) -> Element:
    root = parse(data)
    if root.tag != name:
        raise UnexpectedRoot(f"<{name}> not found in doc, instead found <{root.tag}>")
    return root


def children(element: Element) -> Iterator[Element]:
    return iter(element)


def text(element: Element) -> str:
    return element.text or ""
