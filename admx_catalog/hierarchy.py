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
Category tree and policy-to-category links

Both passes reset what they set, so running them again gives the same
graph.
"""

import logging

from .errors import RunReport, STRUCTURAL_AMBIGUITY, UNRESOLVED_REFERENCE
from .models import CatalogGraph

logger = logging.getLogger('admx_catalog.hierarchy')


def detect_and_break_cycles(graph: CatalogGraph, report: RunReport) -> None:
    """Detect and break circular parent references in categories."""
    categories = graph.categories
    for cat_id in sorted(categories):
        current = cat_id
        path = []
        while current is not None:
            if current in path:
                cycle = path[path.index(current):] + [current]
                broken_cat = cycle[-2]
                categories[broken_cat].parent_id = None
                report.add(STRUCTURAL_AMBIGUITY,
                           f"Circular parent reference {' -> '.join(cycle)}, "
                           f"'{broken_cat}' made top-level",
                           categories[broken_cat].source_file)
                break
            path.append(current)
            current = categories[current].parent_id


def link_categories(graph: CatalogGraph, report: RunReport) -> None:
    categories = graph.categories

    for c in categories.values():
        c.parent_id = None
        c.children_ids = []

    for cat_id, c in categories.items():
        if not c.parent_ref:
            continue
        if c.parent_ref_id == cat_id:
            report.add(STRUCTURAL_AMBIGUITY,
                       f"Category '{cat_id}' is its own parent, treated as top-level",
                       c.source_file)
        elif c.parent_ref_id in categories:
            c.parent_id = c.parent_ref_id
        else:
            report.add(UNRESOLVED_REFERENCE,
                       f"Category '{cat_id}' references unknown parent '{c.parent_ref}', "
                       f"treated as top-level",
                       c.source_file)

    detect_and_break_cycles(graph, report)

    for cat_id, c in categories.items():
        if c.parent_id is not None:
            categories[c.parent_id].children_ids.append(cat_id)
    for c in categories.values():
        c.children_ids.sort()


def associate_policies(graph: CatalogGraph, report: RunReport) -> None:
    """
    Attach every policy to its parent category.

    The reference is resolved with the prefixes of the file that defines
    the policy.
    """
    categories = graph.categories

    for c in categories.values():
        c.policy_ids = []

    for pol_id, policy in graph.policies.items():
        policy.category_id = None
        if not policy.parent_category_ref:
            report.add(UNRESOLVED_REFERENCE,
                       f"Policy '{pol_id}' has no parent category",
                       policy.source_file)
            continue

        ns_map = graph.namespaces.get(policy.source_file)
        cat_id = ns_map.resolve(policy.parent_category_ref) if ns_map else None
        if cat_id not in categories:
            report.add(UNRESOLVED_REFERENCE,
                       f"Policy '{pol_id}' references unknown category "
                       f"'{policy.parent_category_ref}'",
                       policy.source_file)
            continue

        policy.category_id = cat_id
        categories[cat_id].policy_ids.append(pol_id)

    for c in categories.values():
        c.policy_ids.sort()


def resolve_hierarchy(graph: CatalogGraph, report: RunReport) -> CatalogGraph:
    link_categories(graph, report)
    associate_policies(graph, report)
    orphans = sum(1 for p in graph.policies.values() if p.category_id is None)
    logger.info(f"Hierarchy resolved: {len(graph.top_level_categories())} top-level categories, "
                f"{orphans} uncategorized policies")
    return graph
