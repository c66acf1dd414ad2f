#
# admx-catalog - ADMX/ADML policy catalog generator
#
# Copyright (C) 2025-2026 BaseALT Ltd.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""
XML access helpers shared by the ADMX and ADML readers.

Optional attributes and children are returned as None when absent or
blank. Only malformed values that are present raise.
"""

import io
import re
from pathlib import Path
import xml.etree.ElementTree as ET

from .errors import SourceFileError

UNICODE_ENCODING = re.compile(br"encoding\s*=\s*(?P<quote>['\"])unicode(?P=quote)", re.IGNORECASE)
UNICODE_ENCODING_TEXT = re.compile(r"encoding\s*=\s*(?P<quote>['\"])unicode(?P=quote)", re.IGNORECASE)


def strip_ns(tag: str) -> str:
    """Remove XML namespace from tag."""
    return tag.split("}", 1)[-1]


def normalize_unicode_encoding(raw: bytes) -> bytes | None:
    """
    Rewrite an encoding="unicode" declaration to one expat knows.

    A declaration readable as plain bytes means the file is UTF-8 (or ASCII)
    and is relabelled utf-8. Otherwise the content is tried as UTF-16 in
    each byte order and relabelled utf-16. None when no such declaration
    is found.
    """
    if UNICODE_ENCODING.search(raw):
        return UNICODE_ENCODING.sub(lambda m: b"encoding=" + m.group("quote") + b"utf-8" + m.group("quote"),
                                    raw, count=1)

    for encoding in ("utf-16", "utf-16-le", "utf-16-be"):
        try:
            decoded = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if UNICODE_ENCODING_TEXT.search(decoded):
            decoded = UNICODE_ENCODING_TEXT.sub(lambda m: f"encoding={m.group('quote')}utf-16{m.group('quote')}",
                                                decoded, count=1)
            return decoded.encode(encoding)
    return None


def load_document(path: Path) -> ET.Element:
    """
    Parse an ADMX/ADML document and return its root element.

    Some vendor files declare encoding="unicode", which expat rejects;
    those are relabelled by normalize_unicode_encoding and parsed again.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise SourceFileError(path, e) from e

    try:
        return ET.parse(io.BytesIO(raw)).getroot()
    except (ET.ParseError, LookupError) as e:
        fixed = normalize_unicode_encoding(raw)
        if fixed is None:
            raise SourceFileError(path, e) from e

    try:
        return ET.parse(io.BytesIO(fixed)).getroot()
    except (ET.ParseError, LookupError) as e:
        raise SourceFileError(path, e) from e


def children(el: ET.Element | None, name: str) -> list[ET.Element]:
    """Direct children with the given local name."""
    if el is None:
        return []
    return [ch for ch in el if strip_ns(ch.tag) == name]


def child(el: ET.Element | None, name: str) -> ET.Element | None:
    if el is None:
        return None
    for ch in el:
        if strip_ns(ch.tag) == name:
            return ch
    return None


def sections(root: ET.Element, name: str):
    """Yield every element with the given local name anywhere below root."""
    for el in root.iter():
        if strip_ns(el.tag) == name:
            yield el


def attr(el: ET.Element | None, name: str) -> str | None:
    """Stripped attribute value or None when absent or blank."""
    if el is None:
        return None
    value = el.attrib.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def text(el: ET.Element | None) -> str | None:
    if el is None:
        return None
    value = (el.text or "").strip()
    return value or None


def flag(el: ET.Element | None, name: str) -> bool:
    return (attr(el, name) or "").lower() == "true"


def int_attr(el: ET.Element | None, name: str) -> int | None:
    """Integer attribute; raises ValueError if present but not a number."""
    value = attr(el, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"attribute {name}={value!r} is not an integer") from None
