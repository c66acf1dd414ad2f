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
Error taxonomy and run report

Only an empty source root is fatal. Everything else is recorded as an
Issue on the RunReport of the current run and logged as a warning.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

logger = logging.getLogger('admx_catalog')

MISSING_IDENTIFIER = 'MissingIdentifier'
DUPLICATE_IDENTIFIER = 'DuplicateIdentifier'
UNRESOLVED_REFERENCE = 'UnresolvedReference'
STRUCTURAL_AMBIGUITY = 'StructuralAmbiguity'
SOURCE_FILE_ERROR = 'SourceFileError'
MISSING_LANGUAGE_RESOURCES = 'MissingLanguageResources'

ISSUE_KINDS = (
    MISSING_IDENTIFIER,
    DUPLICATE_IDENTIFIER,
    UNRESOLVED_REFERENCE,
    STRUCTURAL_AMBIGUITY,
    SOURCE_FILE_ERROR,
    MISSING_LANGUAGE_RESOURCES,
)


class CatalogError(RuntimeError):
    """Base class for catalog generation errors."""


class SourceFileError(CatalogError):
    """A source or resource document could not be read or parsed."""

    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class NoSourceFilesError(CatalogError):
    """The source root holds no ADMX documents."""


@dataclass(frozen=True)
class Issue:
    kind: str
    message: str
    source: str | None = None

    def __str__(self) -> str:
        if self.source:
            return f"[{self.kind}] {self.source}: {self.message}"
        return f"[{self.kind}] {self.message}"


@dataclass
class RunReport:
    """Warnings accumulated over one pipeline run."""

    issues: list[Issue] = field(default_factory=list)

    def add(self, kind: str, message: str, source=None) -> Issue:
        issue = Issue(kind, message, str(source) if source is not None else None)
        self.issues.append(issue)
        logger.warning(str(issue))
        return issue

    def of_kind(self, kind: str) -> list[Issue]:
        return [i for i in self.issues if i.kind == kind]

    def counts(self) -> dict[str, int]:
        return dict(Counter(i.kind for i in self.issues))

    def __len__(self) -> int:
        return len(self.issues)
