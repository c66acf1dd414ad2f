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

import os
import logging

logger = logging.getLogger('admx_catalog')

DEFAULT_SOURCE_ROOT = "/usr/share/PolicyDefinitions"
DEFAULT_OUTPUT_DIR = "."
DEFAULT_LANGUAGES = ["en-US"]
DEFAULT_MAX_DEPTH = 20

ENV_SOURCE_ROOT = "ADMX_CATALOG_SOURCE_ROOT"
ENV_OUTPUT_DIR = "ADMX_CATALOG_OUTPUT_DIR"
ENV_LANGUAGES = "ADMX_CATALOG_LANGUAGES"

SOURCE_SUFFIX = ".admx"
RESOURCE_SUFFIX = ".adml"
OUTPUT_FILE_TEMPLATE = "data_{language}.json"

ROOT_CATEGORY_ID = "ROOT"
ROOT_CATEGORY_NAME = "Root"
NAMESPACE_SEPARATOR = "::"

NO_DESCRIPTION = "no description"
NOT_SPECIFIED = "not specified"
ENABLED_LABEL = "Enabled"
DISABLED_LABEL = "Disabled"

POLICY_CLASSES = ("Machine", "User", "Both")


def get_source_root(override=None):
    """Source root from argument, environment or default"""
    if override:
        return override
    path = os.environ.get(ENV_SOURCE_ROOT)
    if path:
        logger.info(f"Using source root from {ENV_SOURCE_ROOT}: {path}")
        return path
    logger.info(f"Using default source root: {DEFAULT_SOURCE_ROOT}")
    return DEFAULT_SOURCE_ROOT


def get_output_dir(override=None):
    if override:
        return override
    return os.environ.get(ENV_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR


def get_languages(override=None):
    if override:
        return list(override)
    raw = os.environ.get(ENV_LANGUAGES)
    if raw:
        languages = [lang.strip() for lang in raw.split(",") if lang.strip()]
        if languages:
            return languages
    return list(DEFAULT_LANGUAGES)


def get_output_file_name(language):
    return OUTPUT_FILE_TEMPLATE.format(language=language.replace("-", "_"))


def get_output_path(output_dir, language):
    return os.path.join(output_dir, get_output_file_name(language))
