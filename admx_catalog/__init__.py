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
admx-catalog - ADMX/ADML policy templates as flat per-language data sets
for the policy browser
"""

from .errors import CatalogError, NoSourceFilesError, RunReport, SourceFileError
from .pipeline import CatalogPipeline, RunResult
from .strings import resolve_string

__version__ = "0.1.0"

__all__ = [
    "CatalogError",
    "CatalogPipeline",
    "NoSourceFilesError",
    "RunReport",
    "RunResult",
    "SourceFileError",
    "resolve_string",
]
