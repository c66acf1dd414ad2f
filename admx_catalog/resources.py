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
ADML language resources: string table and presentation templates.

    <source root>/<language>/*.adml
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
import xml.etree.ElementTree as ET

from .config import RESOURCE_SUFFIX
from .documents import attr, child, children, load_document, sections, strip_ns, text
from .errors import (
    DUPLICATE_IDENTIFIER,
    MISSING_IDENTIFIER,
    RunReport,
    SOURCE_FILE_ERROR,
    SourceFileError,
    STRUCTURAL_AMBIGUITY,
    UNRESOLVED_REFERENCE,
)
from .models import CatalogGraph
from .namespaces import qualify
from .strings import resolve_string

logger = logging.getLogger('admx_catalog.resources')


@dataclass
class LanguageResources:
    language: str
    strings: dict[str, str] = field(default_factory=dict)
    presentations: dict[str, dict] = field(default_factory=dict)


def find_language_dir(source_root: Path, language: str) -> Path | None:
    """Locale folder for language, matched case-insensitively."""
    exact = source_root / language
    if exact.is_dir():
        return exact
    wanted = language.lower()
    for d in sorted(p for p in source_root.iterdir() if p.is_dir()):
        if d.name.lower() == wanted:
            return d
    return None


def find_resource_files(source_root: Path, language: str) -> list[Path]:
    lang_dir = find_language_dir(source_root, language)
    if lang_dir is None:
        return []
    return sorted(p for p in lang_dir.rglob("*")
                  if p.suffix.lower() == RESOURCE_SUFFIX and p.is_file())


def load_string_table(documents: list[tuple[Path, ET.Element]], report: RunReport) -> dict[str, str]:
    """Merge <string id="..."> entries of all documents; later files overwrite."""
    strings = {}
    origin = {}
    for adml_file, root in documents:
        for table in sections(root, "stringTable"):
            for el in children(table, "string"):
                sid = attr(el, "id")
                if not sid:
                    report.add(MISSING_IDENTIFIER, "String without an id, skipped", adml_file)
                    continue
                if sid in strings:
                    report.add(DUPLICATE_IDENTIFIER,
                               f"String '{sid}' already defined in {origin[sid]}, overwritten",
                               adml_file)
                strings[sid] = (el.text or "").strip()
                origin[sid] = adml_file
    return strings


def _numeric(value: str | None):
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def _control_label(ctrl: ET.Element, strings: dict[str, str]) -> str | None:
    label = text(ctrl) or text(child(ctrl, "label"))
    if label is None:
        return None
    return resolve_string(label, strings)


def _control_default(ctrl: ET.Element):
    local = strip_ns(ctrl.tag)
    if local == "checkBox":
        value = attr(ctrl, "defaultChecked")
        return None if value is None else value.lower() == "true"
    if local == "dropdownList":
        return _numeric(attr(ctrl, "defaultItem"))
    if local in ("decimalTextBox", "longDecimalTextBox"):
        return _numeric(attr(ctrl, "defaultValue"))
    if local == "textBox":
        return text(child(ctrl, "defaultValue"))
    if local == "comboBox":
        return text(child(ctrl, "default"))
    return attr(ctrl, "defaultValue")


def parse_presentation(pres: ET.Element, strings: dict[str, str]) -> dict:
    """
    {"id": "...", "elements": [{"type", "refId", "label", "default"}, ...]}

    Absent fields are left out of each element.
    """
    elements = []
    for ctrl in pres:
        info = {"type": strip_ns(ctrl.tag)}
        ref_id = attr(ctrl, "refId")
        if ref_id:
            info["refId"] = ref_id
        label = _control_label(ctrl, strings)
        if label is not None:
            info["label"] = label
        default = _control_default(ctrl)
        if default is not None:
            info["default"] = default
        elements.append(info)
    return {"id": attr(pres, "id"), "elements": elements}


def load_presentations(documents: list[tuple[Path, ET.Element]], graph: CatalogGraph,
                       strings: dict[str, str], report: RunReport) -> dict[str, dict]:
    """
    Presentation templates keyed by namespace::presentationId.

    The namespace is the target namespace of the ADMX file with the same
    stem as the ADML file.
    """
    presentations = {}
    for adml_file, root in documents:
        tables = list(sections(root, "presentationTable"))
        if not any(len(t) for t in tables):
            continue

        sources = graph.sources_for_stem(adml_file.stem)
        if not sources:
            report.add(UNRESOLVED_REFERENCE,
                       f"No source file matches '{adml_file.stem}', presentations skipped",
                       adml_file)
            continue
        if len(sources) > 1:
            report.add(STRUCTURAL_AMBIGUITY,
                       f"Source files {', '.join(s for s, _ in sources)} share the stem "
                       f"'{adml_file.stem}', presentations bound to {sources[0][1]}",
                       adml_file)
        namespace = sources[0][1]

        for table in tables:
            for pres in children(table, "presentation"):
                pres_id = attr(pres, "id")
                if not pres_id:
                    report.add(MISSING_IDENTIFIER, "Presentation without an id, skipped", adml_file)
                    continue
                key = qualify(namespace, pres_id)
                if key in presentations:
                    report.add(DUPLICATE_IDENTIFIER,
                               f"Presentation '{key}' defined twice, overwritten",
                               adml_file)
                presentations[key] = parse_presentation(pres, strings)
    return presentations


def load_language(source_root, language: str, graph: CatalogGraph,
                  report: RunReport) -> LanguageResources | None:
    """
    Load the string table and presentations of one language.

    Returns None when the language has no readable resource files.
    """
    files = find_resource_files(Path(source_root), language)
    documents = []
    for adml_file in files:
        try:
            documents.append((adml_file, load_document(adml_file)))
        except SourceFileError as e:
            report.add(SOURCE_FILE_ERROR, f"Parse error: {e.reason}", adml_file)

    if not documents:
        return None

    resources = LanguageResources(language=language)
    resources.strings = load_string_table(documents, report)
    resources.presentations = load_presentations(documents, graph, resources.strings, report)
    logger.info(f"{language}: {len(resources.strings)} strings, "
                f"{len(resources.presentations)} presentations from {len(documents)} files")
    return resources
