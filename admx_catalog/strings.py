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
Symbolic reference tokens

    $(string.ID)                 text of ID in the language string table
    windows:SUPPORTED_WinXP      text of SUPPORTED_WinXP (vendor prefix dropped)
    $(presentation.ID)           presentation template ID

Anything else is literal text and is returned as is.
"""

import re

# $(string.ID)
STRING_REF = re.compile(r"\$\(\s*string\.([A-Za-z0-9_.-]+)\s*\)")
# $(presentation.ID)
PRESENTATION_REF = re.compile(r"\$\(\s*presentation\.([A-Za-z0-9_.-]+)\s*\)")
# vendor:SUPPORTED_ID
SUPPORTED_REF = re.compile(r"[A-Za-z0-9_.-]+:(SUPPORTED_[A-Za-z0-9_.-]+)")


def resolve_string(value: str | None, strings: dict[str, str], fallback: str | None = None) -> str | None:
    """
    Resolve a symbolic token against a string table.

    Unresolvable references yield fallback when given, otherwise the token
    itself. Literal text is never altered, so resolving twice is harmless.
    """
    if value is None or not value.strip():
        return fallback

    token = value.strip()

    m = STRING_REF.fullmatch(token)
    if m:
        sid = m.group(1)
    else:
        m = SUPPORTED_REF.fullmatch(token)
        if not m:
            return value
        sid = m.group(1)

    if sid in strings:
        return strings[sid]
    return fallback if fallback is not None else value


def resolve_presentation_id(value: str | None) -> str | None:
    """
    Resolve $(presentation.X) -> X
    If not resolvable, return None.
    """
    if not value:
        return None
    m = PRESENTATION_REF.fullmatch(value.strip())
    if not m:
        return None
    return m.group(1)
