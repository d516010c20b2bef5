#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses
import logging
import re
from types import MappingProxyType
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple

import saneyaml

from purlkit import settings

logger = logging.getLogger(__name__)

"""
Read-only table of per-type Package URL metadata: descriptions, default
registries, registry URL templates and reverse parsing patterns.

The table is loaded once from a YAML file and then shared by every parser and
mapper. Nothing in purlkit ever modifies it.
"""

# saneyaml loads all scalars as strings: requirements are string enums
REQUIRED = "required"
OPTIONAL = "optional"

TEMPLATE_KINDS = ("default", "default_versioned", "namespaced", "namespaced_versioned")

REVERSE_GROUP_NAMES = ("namespace", "name", "version")


@dataclasses.dataclass(frozen=True)
class ComponentRules:
    namespace: str = OPTIONAL
    version: str = OPTIONAL

    @property
    def namespace_required(self):
        return self.namespace == REQUIRED

    @property
    def version_required(self):
        return self.version == REQUIRED

    @classmethod
    def from_mapping(cls, mapping):
        mapping = mapping or {}
        return cls(
            namespace=mapping.get("namespace") or OPTIONAL,
            version=mapping.get("version") or OPTIONAL,
        )


@dataclasses.dataclass(frozen=True)
class RegistryConfig:
    """
    How to build a registry URL for one type and, optionally, how to parse one
    back. ``templates`` maps a template kind to a string using the
    ``{base_url}``, ``{namespace}``, ``{name}`` and ``{version}`` placeholders.
    ``reverse_groups`` names what each capture group of ``reverse_regex`` holds.
    """

    base_url: str
    templates: Mapping[str, str]
    reverse_regex: Optional[str] = None
    reverse_groups: Tuple[str, ...] = ()

    def __post_init__(self):
        unknown = set(self.templates) - set(TEMPLATE_KINDS)
        if unknown:
            raise ValueError(f"Unknown registry URL template kinds: {sorted(unknown)!r}")
        for group in self.reverse_groups:
            if group not in REVERSE_GROUP_NAMES:
                raise ValueError(f"Unknown reverse parsing group: {group!r}")
        if self.reverse_regex:
            # fail at load time rather than on first use
            re.compile(self.reverse_regex)

    @property
    def supports_reverse_parsing(self):
        return bool(self.reverse_regex and self.reverse_groups)

    @property
    def route_patterns(self) -> List[str]:
        """
        Return the templates rendered on the default base URL as
        ``:placeholder`` route patterns.
        """
        patterns = []
        for kind in TEMPLATE_KINDS:
            template = self.templates.get(kind)
            if not template:
                continue
            pattern = template.replace("{base_url}", self.base_url)
            for placeholder in REVERSE_GROUP_NAMES:
                pattern = pattern.replace("{" + placeholder + "}", ":" + placeholder)
            patterns.append(pattern)
        return patterns

    @classmethod
    def from_mapping(cls, mapping):
        return cls(
            base_url=mapping["base_url"].rstrip("/"),
            templates=MappingProxyType(dict(mapping.get("templates") or {})),
            reverse_regex=mapping.get("reverse_regex") or None,
            reverse_groups=tuple(mapping.get("reverse_groups") or ()),
        )


@dataclasses.dataclass(frozen=True)
class TypeConfig:
    type: str
    description: Optional[str] = None
    default_registry: Optional[str] = None
    examples: Tuple[str, ...] = ()
    ecosystems_registry: Optional[str] = None
    components: ComponentRules = ComponentRules()
    registry_config: Optional[RegistryConfig] = None

    @classmethod
    def from_mapping(cls, type, mapping):
        registry_config = mapping.get("registry_config")
        return cls(
            type=type,
            description=mapping.get("description") or None,
            default_registry=mapping.get("default_registry") or None,
            examples=tuple(mapping.get("examples") or ()),
            ecosystems_registry=mapping.get("ecosystems_registry") or None,
            components=ComponentRules.from_mapping(mapping.get("components")),
            registry_config=registry_config and RegistryConfig.from_mapping(registry_config),
        )


class EcosystemConfig:
    """
    Immutable lookup table of ``TypeConfig`` keyed by lowercase type, in
    configuration order.
    """

    def __init__(self, types, version=None, description=None, source=None, last_updated=None):
        self._types = MappingProxyType(dict(types))
        self.version = version
        self.description = description
        self.source = source
        self.last_updated = last_updated

    @classmethod
    def from_mapping(cls, mapping):
        types = {}
        for type_name, type_mapping in (mapping.get("types") or {}).items():
            type_name = type_name.lower()
            types[type_name] = TypeConfig.from_mapping(type_name, type_mapping or {})
        return cls(
            types=types,
            version=mapping.get("version"),
            description=mapping.get("description"),
            source=mapping.get("source"),
            last_updated=mapping.get("last_updated"),
        )

    @classmethod
    def from_file(cls, location):
        with open(location) as f:
            mapping = saneyaml.load(f.read())
        config = cls.from_mapping(mapping)
        logger.debug(f"Loaded {len(config)} PURL types from {location}")
        return config

    def __len__(self):
        return len(self._types)

    def __contains__(self, type):
        return str(type).lower() in self._types

    def __iter__(self):
        return iter(self._types.values())

    @property
    def types(self) -> Mapping[str, TypeConfig]:
        return self._types

    def known_types(self) -> List[str]:
        return sorted(self._types)

    def is_known_type(self, type) -> bool:
        return type is not None and str(type).lower() in self._types

    def type_config(self, type) -> Optional[TypeConfig]:
        if type is None:
            return
        return self._types.get(str(type).lower())

    def registry_config(self, type) -> Optional[RegistryConfig]:
        type_config = self.type_config(type)
        return type_config and type_config.registry_config

    def type_description(self, type):
        type_config = self.type_config(type)
        return type_config and type_config.description

    def default_registry(self, type):
        type_config = self.type_config(type)
        return type_config and type_config.default_registry

    def type_examples(self, type) -> List[str]:
        type_config = self.type_config(type)
        if not type_config:
            return []
        return list(type_config.examples)

    def metadata(self):
        types = self._types.values()
        return dict(
            version=self.version,
            description=self.description,
            source=self.source,
            last_updated=self.last_updated,
            total_types=len(self._types),
            registry_supported_types=len([t for t in types if t.registry_config]),
            types_with_default_registry=len([t for t in types if t.default_registry]),
        )


DEFAULT_CONFIG = EcosystemConfig.from_file(settings.TYPES_CONFIG_FILE)
