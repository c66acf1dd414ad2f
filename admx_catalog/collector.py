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
Definition collector

Reads every ADMX document under the source root into a FileDefinitions
record, then folds the records into one CatalogGraph.
"""

import logging
from pathlib import Path

from .config import POLICY_CLASSES, SOURCE_SUFFIX
from .documents import attr, child, children, load_document, sections
from .errors import (
    DUPLICATE_IDENTIFIER,
    MISSING_IDENTIFIER,
    NoSourceFilesError,
    RunReport,
    SOURCE_FILE_ERROR,
    STRUCTURAL_AMBIGUITY,
    SourceFileError,
)
from .models import CatalogGraph, Category, FileDefinitions, Policy, SupportedOnDefinition
from .namespaces import read_namespaces
from .registry import extract_registry

logger = logging.getLogger('admx_catalog.collector')


def find_source_files(source_root: Path) -> list[Path]:
    """ADMX files below source_root, extension matched case-insensitively."""
    return sorted(p for p in source_root.rglob("*")
                  if p.suffix.lower() == SOURCE_SUFFIX and p.is_file())


def _parse_supported_on(root, part: FileDefinitions, report: RunReport) -> None:
    for block in sections(root, "supportedOn"):
        for definitions in children(block, "definitions"):
            for definition in children(definitions, "definition"):
                name = attr(definition, "name")
                if not name:
                    report.add(MISSING_IDENTIFIER,
                               "supportedOn definition without a name, skipped",
                               part.source_file)
                    continue
                part.supported_on.append(SupportedOnDefinition(
                    name=name,
                    display_name_token=attr(definition, "displayName"),
                    source_file=part.source_file,
                ))


def _parse_categories(root, part: FileDefinitions, report: RunReport) -> None:
    ns_map = part.namespaces
    for cats_block in sections(root, "categories"):
        for cat in children(cats_block, "category"):
            name = attr(cat, "name")
            if not name:
                report.add(MISSING_IDENTIFIER, "Category without a name, skipped",
                           part.source_file)
                continue

            parent_ref = attr(child(cat, "parentCategory"), "ref")
            part.categories.append(Category(
                name=name,
                namespace=ns_map.target,
                display_name_token=attr(cat, "displayName"),
                source_file=part.source_file,
                parent_ref=parent_ref,
                parent_ref_id=ns_map.resolve(parent_ref),
            ))


def _parse_policies(root, part: FileDefinitions, report: RunReport) -> None:
    ns_map = part.namespaces
    for pol_block in sections(root, "policies"):
        for pol in children(pol_block, "policy"):
            name = attr(pol, "name")
            if not name:
                report.add(MISSING_IDENTIFIER, "Policy without a name, skipped",
                           part.source_file)
                continue

            policy = Policy(
                name=name,
                namespace=ns_map.target,
                policy_class=attr(pol, "class"),
                source_file=part.source_file,
                display_name_token=attr(pol, "displayName"),
                explain_text_token=attr(pol, "explainText"),
                presentation_token=attr(pol, "presentation"),
                supported_on_ref=attr(child(pol, "supportedOn"), "ref"),
            )
            for local in ("parentCategory", "category"):
                ref = attr(child(pol, local), "ref")
                if ref:
                    policy.parent_category_ref = ref
                    break

            if policy.policy_class not in POLICY_CLASSES:
                report.add(STRUCTURAL_AMBIGUITY,
                           f"Policy '{policy.unique_id}' has unknown class '{policy.policy_class}'",
                           part.source_file)

            policy.registry = extract_registry(pol, policy.unique_id, report, part.source_file)
            part.policies.append(policy)


def collect_file(path: Path, report: RunReport) -> FileDefinitions | None:
    """
    Read one ADMX document.

    Raises SourceFileError if the document cannot be parsed. Returns None
    when it declares no target namespace.
    """
    root = load_document(path)
    source_file = str(path)

    ns_map = read_namespaces(root)
    if ns_map is None:
        report.add(SOURCE_FILE_ERROR, "No target namespace declared, file skipped", source_file)
        return None

    part = FileDefinitions(source_file=source_file, namespaces=ns_map)
    _parse_supported_on(root, part, report)
    _parse_categories(root, part, report)
    _parse_policies(root, part, report)

    logger.debug(f"{path.name}: {len(part.categories)} categories, {len(part.policies)} policies")
    return part


def merge_definitions(graph: CatalogGraph, part: FileDefinitions, report: RunReport) -> None:
    """
    Fold one file's definitions into the graph.

    Categories and policies: the last definition wins. supportedOn
    definitions: the first one wins. Every collision is reported.
    """
    graph.namespaces[part.source_file] = part.namespaces
    graph.source_files.append(part.source_file)

    for definition in part.supported_on:
        existing = graph.supported_on.get(definition.name)
        if existing is not None:
            report.add(DUPLICATE_IDENTIFIER,
                       f"supportedOn '{definition.name}' already defined in "
                       f"{existing.source_file}, keeping the first definition",
                       part.source_file)
            continue
        graph.supported_on[definition.name] = definition

    for cat in part.categories:
        existing = graph.categories.get(cat.unique_id)
        if existing is not None:
            report.add(DUPLICATE_IDENTIFIER,
                       f"Category '{cat.unique_id}' already defined in "
                       f"{existing.source_file}, overwritten",
                       part.source_file)
        graph.categories[cat.unique_id] = cat

    for policy in part.policies:
        existing = graph.policies.get(policy.unique_id)
        if existing is not None:
            report.add(DUPLICATE_IDENTIFIER,
                       f"Policy '{policy.unique_id}' already defined in "
                       f"{existing.source_file}, overwritten",
                       part.source_file)
        graph.policies[policy.unique_id] = policy


def collect_sources(source_root, report: RunReport) -> CatalogGraph:
    """Collect all ADMX documents below source_root into a new graph."""
    base_dir = Path(source_root)
    if not base_dir.is_dir():
        raise NoSourceFilesError(f"Policy definitions path does not exist: {base_dir}")

    files = find_source_files(base_dir)
    if not files:
        raise NoSourceFilesError(f"No *{SOURCE_SUFFIX} files found in {base_dir}")

    graph = CatalogGraph()
    for admx_file in files:
        try:
            part = collect_file(admx_file, report)
        except SourceFileError as e:
            report.add(SOURCE_FILE_ERROR, f"Parse error: {e.reason}", admx_file)
            continue
        if part is not None:
            merge_definitions(graph, part, report)

    logger.info(f"Collected {len(graph.categories)} categories and {len(graph.policies)} "
                f"policies from {len(graph.source_files)} of {len(files)} files")
    return graph


def supported_on_token(graph: CatalogGraph, ref: str | None) -> str | None:
    """
    Display token of a policy's supportedOn reference.

    Falls back to the reference itself, which the string resolver
    understands in its vendor:SUPPORTED_X form.
    """
    if not ref:
        return None
    definition = graph.supported_on.get(ref)
    if definition is None and ":" in ref:
        definition = graph.supported_on.get(ref.split(":", 1)[1])
    if definition is None or not definition.display_name_token:
        return ref
    return definition.display_name_token
