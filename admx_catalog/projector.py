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
Language projection of the policy graph.

Output shape read by the browsing UI:

    {
      "language": "en-US",
      "allCategories": [{"id": "ROOT", ...}, {"id", "name", "namespace",
                        "displayName", "parent", "children", "policies"}],
      "allPolicies": [{"id", "name", "namespace", "class", "displayName",
                       "explainText", "supportedOn", "categoryId",
                       "admxFile", "registry", "presentation"?}]
    }
"""

import json
import logging
from pathlib import Path

from .collector import supported_on_token
from .config import (
    DEFAULT_MAX_DEPTH,
    NO_DESCRIPTION,
    NOT_SPECIFIED,
    ROOT_CATEGORY_ID,
    ROOT_CATEGORY_NAME,
    get_output_path,
)
from .errors import RunReport, STRUCTURAL_AMBIGUITY, UNRESOLVED_REFERENCE
from .models import CatalogGraph, Category, Policy, RegistryElement, RegistryInfo, RegistryOption
from .namespaces import qualify
from .resources import LanguageResources
from .strings import resolve_presentation_id, resolve_string

logger = logging.getLogger('admx_catalog.projector')


def _option(opt: RegistryOption, strings: dict[str, str]) -> dict:
    record = {"value": opt.value, "display": resolve_string(opt.display_token, strings, opt.fallback)}
    if opt.delete:
        record["delete"] = True
    return record


def _element(el: RegistryElement, strings: dict[str, str]) -> dict:
    record = {
        "id": el.id,
        "valueName": el.value_name,
        "type": el.type,
        "required": el.required,
    }
    if el.key:
        record["key"] = el.key
    if el.options:
        record["options"] = [_option(o, strings) for o in el.options]
    for name, value in (("minValue", el.min_value), ("maxValue", el.max_value),
                        ("maxLength", el.max_length), ("additive", el.additive)):
        if value is not None:
            record[name] = value
    return record


def project_registry(info: RegistryInfo | None, strings: dict[str, str]) -> dict | None:
    if info is None:
        return None
    record = {"key": info.key, "type": info.type}
    if info.value_name:
        record["valueName"] = info.value_name
    if info.enabled_value is not None:
        record["enabledValue"] = info.enabled_value
    if info.disabled_value is not None:
        record["disabledValue"] = info.disabled_value
    if info.options:
        record["options"] = [_option(o, strings) for o in info.options]
    if info.elements:
        record["elements"] = [_element(e, strings) for e in info.elements]
    return record


def project_category(cat_id: str, cat: Category, strings: dict[str, str]) -> dict:
    return {
        "id": cat_id,
        "name": cat.name,
        "namespace": cat.namespace,
        "displayName": resolve_string(cat.display_name_token, strings, cat.name),
        "parent": cat.parent_id,
        "children": list(cat.children_ids),
        "policies": list(cat.policy_ids),
    }


def root_category(graph: CatalogGraph) -> dict:
    return {
        "id": ROOT_CATEGORY_ID,
        "name": ROOT_CATEGORY_NAME,
        "namespace": None,
        "displayName": ROOT_CATEGORY_NAME,
        "parent": None,
        "children": graph.top_level_categories(),
        "policies": [],
    }


def project_policy(pol_id: str, policy: Policy, graph: CatalogGraph,
                   resources: LanguageResources, report: RunReport) -> dict:
    strings = resources.strings
    record = {
        "id": pol_id,
        "name": policy.name,
        "namespace": policy.namespace,
        "class": policy.policy_class,
        "displayName": resolve_string(policy.display_name_token, strings, policy.name),
        "explainText": resolve_string(policy.explain_text_token, strings, NO_DESCRIPTION),
        "supportedOn": resolve_string(supported_on_token(graph, policy.supported_on_ref),
                                      strings, NOT_SPECIFIED),
        "categoryId": policy.category_id,
        "admxFile": Path(policy.source_file).name,
        "registry": project_registry(policy.registry, strings),
    }

    if policy.presentation_token:
        pres_id = resolve_presentation_id(policy.presentation_token)
        presentation = resources.presentations.get(qualify(policy.namespace, pres_id)) if pres_id else None
        if presentation is not None:
            record["presentation"] = presentation
        else:
            report.add(UNRESOLVED_REFERENCE,
                       f"{resources.language}: policy '{pol_id}' references unknown "
                       f"presentation '{policy.presentation_token}'",
                       policy.source_file)

    return record


def project_language(graph: CatalogGraph, resources: LanguageResources, report: RunReport) -> dict:
    """Build the flat record set of one language. The graph is only read."""
    strings = resources.strings
    all_categories = [root_category(graph)]
    all_categories.extend(project_category(cat_id, graph.categories[cat_id], strings)
                          for cat_id in sorted(graph.categories))
    all_policies = [project_policy(pol_id, graph.policies[pol_id], graph, resources, report)
                    for pol_id in sorted(graph.policies)]
    return {
        "language": resources.language,
        "allCategories": all_categories,
        "allPolicies": all_policies,
    }


def limit_depth(obj, max_depth: int, report: RunReport | None = None, _depth: int = 0, _path: str = "$"):
    """
    Copy of obj where containers nested deeper than max_depth are replaced
    by their compact JSON text.
    """
    if not isinstance(obj, (dict, list)):
        return obj
    if _depth >= max_depth:
        if report is not None:
            report.add(STRUCTURAL_AMBIGUITY,
                       f"{_path} exceeds serialization depth {max_depth}, stored as text")
        return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    if isinstance(obj, dict):
        return {k: limit_depth(v, max_depth, report, _depth + 1, f"{_path}.{k}")
                for k, v in obj.items()}
    return [limit_depth(v, max_depth, report, _depth + 1, f"{_path}[{i}]")
            for i, v in enumerate(obj)]


def dumps(obj: dict, *, ensure_ascii: bool = False, indent: int | None = 2) -> str:
    if indent is None:
        return json.dumps(obj, ensure_ascii=ensure_ascii, separators=(",", ":"))
    return json.dumps(obj, ensure_ascii=ensure_ascii, indent=indent)


def write_record_set(record_set: dict, output_dir, *, max_depth: int = DEFAULT_MAX_DEPTH,
                     indent: int | None = 2, report: RunReport | None = None) -> Path:
    """Write one language's record set as data_<lang>.json and return its path."""
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = Path(get_output_path(out_dir, record_set["language"]))
    payload = limit_depth(record_set, max_depth, report)
    out_path.write_text(dumps(payload, indent=indent) + "\n", encoding="utf-8")
    logger.info(f"Wrote {out_path}")
    return out_path
