#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from typing import Optional
from urllib.parse import quote_plus
from urllib.parse import urlparse

from purlkit import settings
from purlkit.errors import RegistryError
from purlkit.registry_url import DEFAULT_MAPPER

"""
Build https://packages.ecosyste.ms API URLs for PackageURLs.
"""

# ecosyste.ms names these packages as "namespace/name"
NAMESPACED_PACKAGE_TYPES = {"npm", "composer", "maven", "golang", "swift", "elm", "clojars"}


def registry_name(purl, mapper=DEFAULT_MAPPER) -> Optional[str]:
    """
    Return the ecosyste.ms registry name of a ``purl`` or None.
    This is the registry name configured for the type in the ``mapper``
    configuration, if any, or else the host of the registry URL built by the
    ``mapper`` without its "www." prefix.
    """
    type_config = mapper.config.type_config(purl.type)
    if type_config and type_config.ecosystems_registry:
        return type_config.ecosystems_registry

    if not mapper.supports(purl.type):
        return
    try:
        host = urlparse(mapper.generate(purl)).hostname
    except RegistryError:
        return
    if not host:
        return
    return host[4:] if host.startswith("www.") else host


def package_name_for_api(purl):
    if purl.namespace and purl.type in NAMESPACED_PACKAGE_TYPES:
        return f"{purl.namespace}/{purl.name}"
    return purl.name


def package_api_url(purl, mapper=DEFAULT_MAPPER) -> Optional[str]:
    registry = registry_name(purl, mapper=mapper)
    if not registry:
        return
    name = quote_plus(package_name_for_api(purl))
    return f"{settings.PACKAGES_API_BASE}/registries/{registry}/packages/{name}"


def version_api_url(purl, mapper=DEFAULT_MAPPER) -> Optional[str]:
    if not purl.version:
        return
    package_url = package_api_url(purl, mapper=mapper)
    if not package_url:
        return
    return f"{package_url}/versions/{quote_plus(purl.version)}"


def api_url(purl, mapper=DEFAULT_MAPPER) -> Optional[str]:
    """
    Return the version API URL of a ``purl`` with a version or its package
    API URL otherwise.
    """
    if purl.version:
        return version_api_url(purl, mapper=mapper)
    return package_api_url(purl, mapper=mapper)
