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
CatalogPipeline - one run from a PolicyDefinitions tree to data_<lang>.json files
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .collector import collect_sources
from .config import DEFAULT_MAX_DEPTH
from .errors import MISSING_LANGUAGE_RESOURCES, RunReport
from .hierarchy import resolve_hierarchy
from .models import CatalogGraph
from .projector import project_language, write_record_set
from .resources import load_language

logger = logging.getLogger('admx_catalog')


@dataclass
class RunResult:
    graph: CatalogGraph
    report: RunReport
    outputs: dict[str, Path] = field(default_factory=dict)
    record_sets: dict[str, dict] = field(default_factory=dict)
    skipped_languages: list[str] = field(default_factory=list)


class CatalogPipeline:
    """
    Converts an ADMX/ADML source tree into one flat record set per language.

    Typical usage:
        pipeline = CatalogPipeline('/usr/share/PolicyDefinitions')
        result = pipeline.run(['en-US', 'ru-RU'], output_dir='/var/www/gpo')
    """

    def __init__(self, source_root, report: RunReport | None = None):
        self.source_root = Path(source_root)
        self.report = report if report is not None else RunReport()
        self.graph = None

    def build_graph(self) -> CatalogGraph:
        """Collect definitions and link the hierarchy. Raises NoSourceFilesError."""
        graph = collect_sources(self.source_root, self.report)
        self.graph = resolve_hierarchy(graph, self.report)
        return self.graph

    def project(self, language: str) -> dict | None:
        """Record set for language, or None when it has no resources."""
        if self.graph is None:
            self.build_graph()
        resources = load_language(self.source_root, language, self.graph, self.report)
        if resources is None:
            self.report.add(MISSING_LANGUAGE_RESOURCES,
                            f"No resource files for language '{language}', skipped",
                            self.source_root)
            return None
        return project_language(self.graph, resources, self.report)

    def run(self, languages, output_dir=None, *, max_depth: int = DEFAULT_MAX_DEPTH,
            indent: int | None = 2) -> RunResult:
        """
        Project every requested language and write it to output_dir.

        With output_dir None the record sets are only returned.
        """
        if self.graph is None:
            self.build_graph()

        result = RunResult(graph=self.graph, report=self.report)
        for language in languages:
            record_set = self.project(language)
            if record_set is None:
                result.skipped_languages.append(language)
                continue
            result.record_sets[language] = record_set
            if output_dir is not None:
                result.outputs[language] = write_record_set(
                    record_set, output_dir, max_depth=max_depth, indent=indent, report=self.report)
        return result
