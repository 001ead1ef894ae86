"""License header registry and materialization.

Each template is an ordered list of comment lines. Lines may embed the
``%s`` placeholder, which ``materialize`` replaces with the licensor name.
The registry is read-only; materializing never mutates a template.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from .errors import ConfigurationError

PLACEHOLDER = "%s"

_HEADERS: Dict[str, Tuple[str, ...]] = {
    "ASL2": (
        "// Licensed to %s under one or more contributor",
        "// license agreements. See the NOTICE file distributed with",
        "// this work for additional information regarding copyright",
        "// ownership. %s licenses this file to you under",
        '// the Apache License, Version 2.0 (the "License"); you may',
        "// not use this file except in compliance with the License.",
        "// You may obtain a copy of the License at",
        "//",
        "//     http://www.apache.org/licenses/LICENSE-2.0",
        "//",
        "// Unless required by applicable law or agreed to in writing,",
        "// software distributed under the License is distributed on an",
        '// "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY',
        "// KIND, either express or implied.  See the License for the",
        "// specific language governing permissions and limitations",
        "// under the License.",
    ),
    "ASL2-Short": (
        "// Licensed to %s under one or more agreements.",
        "// %s licenses this file to you under the Apache 2.0 License.",
        "// See the LICENSE file in the project root for more information.",
    ),
    "Elastic": (
        "// Copyright %s and/or licensed to %s under one",
        "// or more contributor license agreements. Licensed under the Elastic License;",
        "// you may not use this file except in compliance with the Elastic License.",
    ),
    "Elasticv2": (
        "// Copyright %s and/or licensed to %s under one",
        "// or more contributor license agreements. Licensed under the Elastic License 2.0;",
        "// you may not use this file except in compliance with the Elastic License 2.0.",
    ),
    "Cloud": (
        "// ELASTICSEARCH CONFIDENTIAL",
        "// __________________",
        "//",
        "//  Copyright %s All Rights Reserved.",
        "//",
        "// NOTICE:  All information contained herein is, and remains",
        "// the property of %s and its suppliers, if any.",
        "// The intellectual and technical concepts contained herein",
        "// are proprietary to %s and its suppliers and",
        "// may be covered by U.S. and Foreign Patents, patents in",
        "// process, and are protected by trade secret or copyright",
        "// law.  Dissemination of this information or reproduction of",
        "// this material is strictly forbidden unless prior written",
        "// permission is obtained from %s.",
    ),
}

HEADERS: Mapping[str, Tuple[str, ...]] = MappingProxyType(_HEADERS)


@dataclass(frozen=True)
class MaterializedHeader:
    license: str
    lines: Tuple[str, ...]
    data: bytes

    def __len__(self) -> int:
        return len(self.lines)


def license_types() -> List[str]:
    """Sorted registry identifiers (used for CLI help)."""
    return sorted(HEADERS)


def lookup(license_id: str) -> Tuple[str, ...]:
    try:
        return HEADERS[license_id]
    except KeyError:
        raise ConfigurationError(f"unknown license: {license_id}") from None


def materialize(license_id: str, licensor: str) -> MaterializedHeader:
    """Expand the template for ``license_id`` with ``licensor``.

    Every placeholder occurrence is substituted; lines without one pass
    through unchanged. ``data`` holds the lines joined with a newline after
    each line, including the last. Pure function of its inputs.
    """
    template = lookup(license_id)
    lines = tuple(line.replace(PLACEHOLDER, licensor) for line in template)
    data = "".join(line + "\n" for line in lines).encode("utf-8")
    return MaterializedHeader(license=license_id, lines=lines, data=data)


__all__ = [
    "PLACEHOLDER",
    "HEADERS",
    "MaterializedHeader",
    "license_types",
    "lookup",
    "materialize",
]
