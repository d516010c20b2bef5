#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import logging
import re
from typing import Dict
from typing import List
from typing import Optional

from purlkit.ecosystem import DEFAULT_CONFIG
from purlkit.ecosystem import EcosystemConfig
from purlkit.ecosystem import RegistryConfig
from purlkit.errors import MissingRegistryInfoError
from purlkit.errors import UnsupportedTypeError
from purlkit.package_url import PackageURL

logger = logging.getLogger(__name__)

"""
Convert between PackageURLs and the human-facing web URLs of package
registries, such as https://rubygems.org/gems/rails for pkg:gem/rails.

URLs are built from per-type templates and parsed back with per-type regular
expressions, both read from an EcosystemConfig. The conversion is lossy for
some registries: a registry URL may not carry the version or the namespace of
the PackageURL it was built from.
"""


def extract_by_groups(match, reverse_groups):
    """
    Return a mapping of raw namespace, name and version values taken from a
    regex ``match`` whose capture groups are named in order by ``reverse_groups``.
    """
    components = dict(namespace=None, name=None, version=None)
    for index, component in enumerate(reverse_groups, start=1):
        components[component] = match.group(index) or None
    return components


def extract_pypi(match, reverse_groups):
    components = extract_by_groups(match, reverse_groups)
    # the project page URL can repeat the name where a version is expected
    if components["version"] == components["name"]:
        components["version"] = None
    return components


def extract_elm(match, reverse_groups):
    components = extract_by_groups(match, reverse_groups)
    if components["version"] == "latest":
        components["version"] = None
    return components


REVERSE_EXTRACTORS = {
    "elm": extract_elm,
    "pypi": extract_pypi,
}


def domain_agnostic_regex(reverse_regex):
    """
    Return a ``reverse_regex`` string where the literal host is replaced by a
    pattern matching any host.

    For example::
    >>> domain_agnostic_regex(r"^https?://rubygems\\.org/gems/([^/?#]+)")
    '^https?://[^/]+/gems/([^/?#]+)'
    """
    scheme, separator, rest = reverse_regex.partition("://")
    if not separator:
        return reverse_regex
    _host, slash, path = rest.partition("/")
    return f"{scheme}://[^/]+{slash}{path}"


class RegistryURLMapper:
    """
    Build registry URLs from PackageURLs and parse registry URLs back in
    PackageURLs using the registry configuration of each type.
    """

    def __init__(self, config: EcosystemConfig):
        self.config = config
        self.registry_configs: Dict[str, RegistryConfig] = {
            type_config.type: type_config.registry_config
            for type_config in config
            if type_config.registry_config
        }
        self.reverse_regexes = {}
        self.agnostic_regexes = {}
        for type, registry_config in self.registry_configs.items():
            if not registry_config.supports_reverse_parsing:
                continue
            self.reverse_regexes[type] = re.compile(registry_config.reverse_regex)
            self.agnostic_regexes[type] = re.compile(
                domain_agnostic_regex(registry_config.reverse_regex)
            )

    def supported_types(self) -> List[str]:
        return sorted(self.registry_configs)

    def supports(self, type) -> bool:
        return type is not None and str(type).lower() in self.registry_configs

    def supported_reverse_types(self) -> List[str]:
        return sorted(self.reverse_regexes)

    def supports_reverse_parsing(self, type) -> bool:
        return type is not None and str(type).lower() in self.reverse_regexes

    def route_patterns_for(self, type) -> List[str]:
        registry_config = self.registry_configs.get(str(type).lower())
        if not registry_config:
            return []
        return registry_config.route_patterns

    def all_route_patterns(self) -> Dict[str, List[str]]:
        return {
            type: registry_config.route_patterns
            for type, registry_config in self.registry_configs.items()
        }

    def get_registry_config(self, purl: PackageURL) -> RegistryConfig:
        registry_config = self.registry_configs.get(purl.type)
        if not registry_config:
            supported = self.supported_types()
            raise UnsupportedTypeError(
                f"No registry URL pattern defined for type {purl.type!r}. "
                f"Supported types: {', '.join(supported)}",
                type=purl.type,
                supported_types=supported,
            )
        return registry_config

    def select_template(self, purl: PackageURL, registry_config, versioned=False):
        """
        Return the template to use for a ``purl``. Use a versioned template
        only if ``versioned`` is True and the purl has a version.
        """
        templates = registry_config.templates
        use_version = versioned and purl.version

        template = None
        if purl.namespace:
            if use_version:
                template = templates.get("namespaced_versioned")
            template = template or templates.get("namespaced")

        if not template:
            if use_version:
                template = templates.get("default_versioned")
            template = template or templates.get("default")

        if not template:
            raise MissingRegistryInfoError(
                f"{purl.type.capitalize()} packages require a namespace",
                type=purl.type,
                missing="namespace",
            )

        if not use_version and "{version}" in template:
            raise MissingRegistryInfoError(
                f"{purl.type.capitalize()} registry URLs require a version",
                type=purl.type,
                missing="version",
            )
        return template

    def generate(self, purl: PackageURL, base_url=None, versioned=False) -> str:
        """
        Return a registry URL for a ``purl``. An optional ``base_url`` replaces
        the configured base URL to target a private registry or mirror.
        """
        registry_config = self.get_registry_config(purl)
        template = self.select_template(purl, registry_config, versioned=versioned)
        base_url = (base_url or registry_config.base_url).rstrip("/")
        return (
            template.replace("{base_url}", base_url)
            .replace("{namespace}", purl.namespace or "")
            .replace("{name}", purl.name)
            .replace("{version}", purl.version or "")
        )

    def generate_with_version(self, purl: PackageURL, base_url=None) -> str:
        """
        Return a registry URL for the ``purl`` version if the registry has
        version pages, or the package registry URL otherwise.
        """
        return self.generate(purl, base_url=base_url, versioned=True)

    def match(self, type, url, regexes) -> Optional[PackageURL]:
        regex = regexes.get(type)
        if not regex:
            return
        match = regex.match(url)
        if not match:
            return

        logger.debug(f"Registry URL {url!r} matched type {type!r}")
        registry_config = self.registry_configs[type]
        extract = REVERSE_EXTRACTORS.get(type, extract_by_groups)
        components = extract(match, registry_config.reverse_groups)
        # reverse-parsed components are raw strings: validate them in full
        return PackageURL(type=type, **components)

    def from_url(self, url, type_hint=None) -> PackageURL:
        """
        Return a PackageURL parsed from a registry ``url``.

        With a ``type_hint``, first try the pattern of that type on any host,
        for private registries and mirrors. Then try the pattern of each
        configured type on its own registry host, in configuration order.
        Raise an UnsupportedTypeError if no pattern matches.
        """
        if type_hint:
            purl = self.match(str(type_hint).lower(), url, self.agnostic_regexes)
            if purl:
                return purl

        for type in self.reverse_regexes:
            purl = self.match(type, url, self.reverse_regexes)
            if purl:
                return purl

        supported = self.supported_reverse_types()
        raise UnsupportedTypeError(
            f"Unable to parse registry URL: {url}. No matching pattern found.",
            type=type_hint,
            supported_types=supported,
        )


DEFAULT_MAPPER = RegistryURLMapper(DEFAULT_CONFIG)
