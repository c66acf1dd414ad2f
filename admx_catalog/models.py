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
Language-neutral policy graph

Display fields hold raw tokens such as "$(string.X)"; they are turned
into text per language by the projector.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .namespaces import NamespaceMap, qualify

TYPE_UNKNOWN = "Unknown"
TYPE_DWORD = "REG_DWORD"
TYPE_QWORD = "REG_QWORD"
TYPE_SZ = "REG_SZ"
TYPE_EXPAND_SZ = "REG_EXPAND_SZ"
TYPE_MULTI_SZ = "REG_MULTI_SZ"


@dataclass
class SupportedOnDefinition:
    name: str
    display_name_token: str | None
    source_file: str


@dataclass
class Category:
    name: str
    namespace: str
    display_name_token: str | None
    source_file: str
    parent_ref: str | None = None
    parent_ref_id: str | None = None
    parent_id: str | None = None
    children_ids: list[str] = field(default_factory=list)
    policy_ids: list[str] = field(default_factory=list)

    @property
    def unique_id(self) -> str:
        return qualify(self.namespace, self.name)


@dataclass
class RegistryOption:
    value: int | str | None
    display_token: str | None
    fallback: str
    delete: bool = False


@dataclass
class RegistryElement:
    id: str
    type: str
    value_name: str | None = None
    key: str | None = None
    required: bool = False
    options: list[RegistryOption] = field(default_factory=list)
    min_value: int | None = None
    max_value: int | None = None
    max_length: int | None = None
    additive: bool | None = None


@dataclass
class RegistryInfo:
    key: str | None
    value_name: str | None = None
    type: str = TYPE_UNKNOWN
    enabled_value: int | str | None = None
    disabled_value: int | str | None = None
    options: list[RegistryOption] = field(default_factory=list)
    elements: list[RegistryElement] = field(default_factory=list)


@dataclass
class Policy:
    name: str
    namespace: str
    policy_class: str | None
    source_file: str
    display_name_token: str | None = None
    explain_text_token: str | None = None
    supported_on_ref: str | None = None
    presentation_token: str | None = None
    parent_category_ref: str | None = None
    category_id: str | None = None
    registry: RegistryInfo | None = None

    @property
    def unique_id(self) -> str:
        return qualify(self.namespace, self.name)


@dataclass
class FileDefinitions:
    """Everything read from one ADMX document before it is merged."""

    source_file: str
    namespaces: NamespaceMap
    supported_on: list[SupportedOnDefinition] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    policies: list[Policy] = field(default_factory=list)


@dataclass
class CatalogGraph:
    """
    Graph construction state of one pipeline run.

    Built by the collector, linked by the hierarchy resolver and read
    by every language projection.
    """

    namespaces: dict[str, NamespaceMap] = field(default_factory=dict)
    supported_on: dict[str, SupportedOnDefinition] = field(default_factory=dict)
    categories: dict[str, Category] = field(default_factory=dict)
    policies: dict[str, Policy] = field(default_factory=dict)
    source_files: list[str] = field(default_factory=list)

    def sources_for_stem(self, stem: str) -> list[tuple[str, str]]:
        """(source file, target namespace) of every ADMX document with the given file stem."""
        stem = stem.lower()
        return [(source_file, ns_map.target) for source_file, ns_map in self.namespaces.items()
                if Path(source_file).stem.lower() == stem]

    def top_level_categories(self) -> list[str]:
        return sorted(cid for cid, c in self.categories.items() if c.parent_id is None)

