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
Registry information of a <policy> node.

A policy may carry both a top-level valueName with enabled/disabled
values and an <elements> list; both are kept.
"""

import xml.etree.ElementTree as ET

from .config import DISABLED_LABEL, ENABLED_LABEL
from .documents import attr, child, children, flag, int_attr, strip_ns
from .errors import RunReport, STRUCTURAL_AMBIGUITY
from .models import (
    RegistryElement,
    RegistryInfo,
    RegistryOption,
    TYPE_DWORD,
    TYPE_EXPAND_SZ,
    TYPE_MULTI_SZ,
    TYPE_QWORD,
    TYPE_SZ,
    TYPE_UNKNOWN,
)

ENABLED_TOKEN = f"$(string.{ENABLED_LABEL})"
DISABLED_TOKEN = f"$(string.{DISABLED_LABEL})"
DELETE_KIND = "delete"


def normalize_key(key: str | None) -> str | None:
    if key is None:
        return None
    return key.replace("/", "\\")


def _to_num_or_str(v: str | None):
    if v is None:
        return None
    v = v.strip()
    if v.isdigit() or (v.startswith("-") and v[1:].isdigit()):
        return int(v)
    return v


def read_value(container: ET.Element | None) -> tuple[str | None, int | str | None]:
    """
    Read a value container such as <enabledValue> or an <item><value>.

    Returns (kind, value) where kind is "decimal", "longDecimal",
    "string", "delete" or None when the container holds nothing known.
    """
    if container is None:
        return None, None
    for x in container:
        local = strip_ns(x.tag)
        if local in ("decimal", "longDecimal"):
            return local, _to_num_or_str(attr(x, "value"))
        if local == "string":
            return local, (x.text or "").strip()
        if local == DELETE_KIND:
            return local, None
    return None, None


def enabled_disabled_options(enabled, disabled, enabled_kind=None, disabled_kind=None) -> list[RegistryOption]:
    """On/off option pair; a <delete/> side is flagged rather than given a value."""
    return [
        RegistryOption(enabled, ENABLED_TOKEN, ENABLED_LABEL, delete=enabled_kind == DELETE_KIND),
        RegistryOption(disabled, DISABLED_TOKEN, DISABLED_LABEL, delete=disabled_kind == DELETE_KIND),
    ]


def _parse_enum(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_DWORD
    for item in children(el, "item"):
        kind, value = read_value(child(item, "value"))
        if kind is None:
            continue
        if kind == "string":
            element.type = TYPE_SZ
        disp_raw = attr(item, "displayName")
        if kind == DELETE_KIND:
            element.options.append(RegistryOption(None, disp_raw, DELETE_KIND, delete=True))
        else:
            element.options.append(RegistryOption(value, disp_raw, str(value)))


def _parse_boolean(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_DWORD
    true_kind, true_v = read_value(child(el, "trueValue"))
    false_kind, false_v = read_value(child(el, "falseValue"))
    # absent values default to 1/0, <delete/> stays a deletion
    element.options = enabled_disabled_options(
        1 if true_kind is None else true_v,
        0 if false_kind is None else false_v,
        true_kind,
        false_kind,
    )


def _parse_decimal(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_QWORD if strip_ns(el.tag) == "longDecimal" else TYPE_DWORD
    element.min_value = int_attr(el, "minValue")
    element.max_value = int_attr(el, "maxValue")


def _parse_text(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_EXPAND_SZ if flag(el, "expandable") else TYPE_SZ
    element.max_length = int_attr(el, "maxLength")


def _parse_multi_text(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_MULTI_SZ
    element.max_length = int_attr(el, "maxLength")


def _parse_list(el: ET.Element, element: RegistryElement) -> None:
    element.type = TYPE_EXPAND_SZ if flag(el, "expandable") else TYPE_SZ
    element.additive = flag(el, "additive")


ELEMENT_PARSERS = {
    "enum": _parse_enum,
    "boolean": _parse_boolean,
    "decimal": _parse_decimal,
    "longDecimal": _parse_decimal,
    "text": _parse_text,
    "multiText": _parse_multi_text,
    "list": _parse_list,
}


def extract_element(el: ET.Element, policy_id: str, report: RunReport,
                    source=None) -> RegistryElement | None:
    local = strip_ns(el.tag)
    parse = ELEMENT_PARSERS.get(local)
    if parse is None:
        report.add(STRUCTURAL_AMBIGUITY,
                   f"Policy '{policy_id}' has unsupported element kind '{local}', skipped",
                   source)
        return None

    element = RegistryElement(
        id=attr(el, "id") or "",
        type=TYPE_UNKNOWN,
        value_name=attr(el, "valueName"),
        key=normalize_key(attr(el, "key")),
        required=flag(el, "required"),
    )
    try:
        parse(el, element)
    except ValueError as e:
        report.add(STRUCTURAL_AMBIGUITY,
                   f"Policy '{policy_id}' element '{element.id}' is malformed ({e}), skipped",
                   source)
        return None
    return element


def extract_registry(pol: ET.Element, policy_id: str, report: RunReport,
                     source=None) -> RegistryInfo:
    """Build RegistryInfo for a <policy> element."""
    info = RegistryInfo(
        key=normalize_key(attr(pol, "key")),
        value_name=attr(pol, "valueName") or attr(pol, "valuename"),
    )

    if info.value_name:
        en_kind, enabled = read_value(child(pol, "enabledValue"))
        dis_kind, disabled = read_value(child(pol, "disabledValue"))
        value_kinds = {en_kind, dis_kind} - {DELETE_KIND}

        if en_kind is None or dis_kind is None:
            report.add(STRUCTURAL_AMBIGUITY,
                       f"Policy '{policy_id}' value '{info.value_name}' has incomplete "
                       f"enabled/disabled values, type unknown",
                       source)
            info.enabled_value = enabled
            info.disabled_value = disabled
        elif value_kinds and value_kinds <= {"decimal", "longDecimal"}:
            info.type = TYPE_QWORD if "longDecimal" in value_kinds else TYPE_DWORD
        elif value_kinds == {"string"}:
            info.type = TYPE_SZ
        else:
            report.add(STRUCTURAL_AMBIGUITY,
                       f"Policy '{policy_id}' mixes {en_kind}/{dis_kind} enabled/disabled values",
                       source)

        if en_kind is not None and dis_kind is not None:
            info.enabled_value = enabled
            info.disabled_value = disabled
            info.options = enabled_disabled_options(enabled, disabled, en_kind, dis_kind)

    elements_node = child(pol, "elements")
    for el in (elements_node if elements_node is not None else []):
        element = extract_element(el, policy_id, report, source)
        if element is not None:
            info.elements.append(element)

    if info.value_name and info.elements:
        report.add(STRUCTURAL_AMBIGUITY,
                   f"Policy '{policy_id}' has both value '{info.value_name}' "
                   f"and {len(info.elements)} element(s)",
                   source)

    return info
