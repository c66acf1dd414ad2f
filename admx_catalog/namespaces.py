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
Per-file namespace prefixes and namespace-qualified ids.

    <policyNamespaces>
      <target prefix="alt" namespace="BaseALT.Policies.System"/>
      <using prefix="windows" namespace="Microsoft.Policies.Windows"/>
    </policyNamespaces>

"alt:System" and "System" both resolve to "BaseALT.Policies.System::System"
in that file, "windows:Network" to "Microsoft.Policies.Windows::Network".
"""

import logging
from dataclasses import dataclass, field

from .config import NAMESPACE_SEPARATOR
from .documents import attr, children, sections

logger = logging.getLogger('admx_catalog.namespaces')


def qualify(namespace: str, name: str) -> str:
    return f"{namespace}{NAMESPACE_SEPARATOR}{name}"


@dataclass
class NamespaceMap:
    target: str
    prefixes: dict[str, str] = field(default_factory=dict)

    def resolve(self, name: str | None) -> str | None:
        return resolve_name(name, self.prefixes, self.target)


def resolve_name(name: str | None, prefixes: dict[str, str], default_uri: str) -> str | None:
    """
    Resolve a possibly prefixed reference to a namespace-qualified id.

    An unknown prefix is logged and the reference is returned unchanged,
    so lookups with it simply miss.
    """
    if name is None:
        return None
    name = name.strip()
    if not name:
        return None

    if ":" in name:
        prefix, local = name.split(":", 1)
        uri = prefixes.get(prefix)
        if uri is None:
            logger.warning(f"Unknown namespace prefix '{prefix}' in reference '{name}'")
            return name
        return qualify(uri, local)

    return qualify(default_uri, name)


def read_namespaces(root) -> NamespaceMap | None:
    """
    Build the prefix map of one ADMX document.

    Returns None when the document declares no target namespace.
    """
    target_uri = None
    prefixes = {}

    for block in sections(root, "policyNamespaces"):
        for target in children(block, "target"):
            uri = attr(target, "namespace")
            if not uri:
                continue
            target_uri = uri
            prefix = attr(target, "prefix")
            if prefix:
                prefixes[prefix] = uri
        for using in children(block, "using"):
            prefix = attr(using, "prefix")
            uri = attr(using, "namespace")
            if prefix and uri:
                prefixes[prefix] = uri

    if target_uri is None:
        return None
    return NamespaceMap(target=target_uri, prefixes=prefixes)
