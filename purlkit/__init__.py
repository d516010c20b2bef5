#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

__version__ = "1.0.0"

from purlkit.ecosystem import DEFAULT_CONFIG  # NOQA
from purlkit.ecosystem import EcosystemConfig  # NOQA
from purlkit.errors import *  # NOQA
from purlkit.package_url import PackageURL  # NOQA
from purlkit.registry_url import DEFAULT_MAPPER  # NOQA
from purlkit.registry_url import RegistryURLMapper  # NOQA


def parse(purl_string) -> PackageURL:
    return PackageURL.from_string(purl_string)


def from_registry_url(url, type=None) -> PackageURL:
    """
    Return a PackageURL parsed from a registry ``url``. Use the optional
    ``type`` to parse a URL of a private registry or mirror of this type.
    """
    return DEFAULT_MAPPER.from_url(url, type_hint=type)


def known_types():
    return DEFAULT_CONFIG.known_types()


def is_known_type(type):
    return DEFAULT_CONFIG.is_known_type(type)


def registry_supported_types():
    return DEFAULT_MAPPER.supported_types()


def reverse_parsing_supported_types():
    return DEFAULT_MAPPER.supported_reverse_types()


def type_config(type):
    return DEFAULT_CONFIG.type_config(type)


def type_description(type):
    return DEFAULT_CONFIG.type_description(type)


def type_examples(type):
    return DEFAULT_CONFIG.type_examples(type)


def default_registry(type):
    return DEFAULT_CONFIG.default_registry(type)


def types_config_metadata():
    return DEFAULT_CONFIG.metadata()


def type_info(type):
    """
    Return a mapping of everything known about a PURL ``type``.
    """
    type = str(type).lower()
    type_config = DEFAULT_CONFIG.type_config(type)
    return dict(
        type=type,
        known=DEFAULT_CONFIG.is_known_type(type),
        description=DEFAULT_CONFIG.type_description(type),
        default_registry=DEFAULT_CONFIG.default_registry(type),
        examples=DEFAULT_CONFIG.type_examples(type),
        namespace_required=bool(type_config and type_config.components.namespace_required),
        version_required=bool(type_config and type_config.components.version_required),
        registry_url_generation=DEFAULT_MAPPER.supports(type),
        reverse_parsing=DEFAULT_MAPPER.supports_reverse_parsing(type),
        route_patterns=DEFAULT_MAPPER.route_patterns_for(type),
    )


def all_type_info():
    types = set(DEFAULT_CONFIG.known_types()) | set(DEFAULT_MAPPER.supported_types())
    return {type: type_info(type) for type in sorted(types)}
