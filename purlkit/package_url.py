#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from types import MappingProxyType
from typing import Dict
from typing import Optional

from purlkit.parser import parse_components
from purlkit.serializer import serialize
from purlkit.validators import validate_components

COMPONENT_NAMES = ("type", "namespace", "name", "version", "qualifiers", "subpath")


class PackageURL:
    """
    An immutable and validated Package URL.

    A PackageURL is built either from explicit components or by parsing a
    string: both run the same full validation and there is no partially valid
    PackageURL. Two PackageURLs are equal when their canonical strings are
    equal.

    For example::
    >>> purl = PackageURL.from_string("pkg:npm/%40babel/core@7.0.0")
    >>> purl.namespace, purl.name, purl.version
    ('@babel', 'core', '7.0.0')
    >>> str(purl.with_(version="7.1.0"))
    'pkg:npm/%40babel/core@7.1.0'
    """

    __slots__ = (
        "_type",
        "_namespace",
        "_name",
        "_version",
        "_qualifiers",
        "_subpath",
        "_canonical",
    )

    def __init__(
        self,
        type,
        name,
        namespace=None,
        version=None,
        qualifiers=None,
        subpath=None,
    ):
        components = validate_components(
            type=type,
            name=name,
            namespace=namespace,
            version=version,
            qualifiers=qualifiers,
            subpath=subpath,
        )
        self._type = components["type"]
        self._namespace = components["namespace"]
        self._name = components["name"]
        self._version = components["version"]
        qualifiers = components["qualifiers"]
        self._qualifiers = qualifiers and MappingProxyType(qualifiers)
        self._subpath = components["subpath"]
        self._canonical = serialize(**components)

    @classmethod
    def from_string(cls, purl_string) -> "PackageURL":
        """
        Return a PackageURL parsed from a ``purl_string``.
        Raise a ParseError or a ValidationError if the string is not valid.
        """
        return cls(**parse_components(purl_string))

    @property
    def type(self) -> str:
        return self._type

    @property
    def namespace(self) -> Optional[str]:
        return self._namespace

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> Optional[str]:
        return self._version

    @property
    def qualifiers(self) -> Optional[Dict[str, str]]:
        if self._qualifiers is None:
            return
        return dict(self._qualifiers)

    @property
    def subpath(self) -> Optional[str]:
        return self._subpath

    def to_string(self) -> str:
        return self._canonical

    def __str__(self):
        return self._canonical

    def __repr__(self):
        return f"PackageURL({self._canonical!r})"

    def __eq__(self, other):
        if not isinstance(other, PackageURL):
            return NotImplemented
        return self._canonical == other._canonical

    def __hash__(self):
        return hash(self._canonical)

    def to_dict(self):
        return dict(
            type=self.type,
            namespace=self.namespace,
            name=self.name,
            version=self.version,
            qualifiers=self.qualifiers,
            subpath=self.subpath,
        )

    def with_(self, **changes) -> "PackageURL":
        """
        Return a new PackageURL with the ``changes`` components replaced.
        The new PackageURL is validated in full; this one is left unchanged.
        """
        unknown = set(changes) - set(COMPONENT_NAMES)
        if unknown:
            raise TypeError(f"Unknown PackageURL components: {', '.join(sorted(unknown))}")
        components = self.to_dict()
        components.update(changes)
        return PackageURL(**components)

    def versionless(self) -> "PackageURL":
        return self.with_(version=None)

    def registry_url(self, base_url=None, mapper=None):
        mapper = mapper or get_default_registry_mapper()
        return mapper.generate(self, base_url=base_url)

    def registry_url_with_version(self, base_url=None, mapper=None):
        mapper = mapper or get_default_registry_mapper()
        return mapper.generate_with_version(self, base_url=base_url)

    def supports_registry_url(self, mapper=None):
        mapper = mapper or get_default_registry_mapper()
        return mapper.supports(self.type)

    def download_url(self, base_url=None):
        from purlkit.download_url import DownloadURLGenerator

        return DownloadURLGenerator.generate(self, base_url=base_url)

    def supports_download_url(self):
        from purlkit.download_url import DownloadURLGenerator

        return DownloadURLGenerator.supports(self.type)

    def ecosystems_registry(self):
        from purlkit.ecosystems_url import registry_name

        return registry_name(self)

    def ecosystems_api_url(self):
        from purlkit.ecosystems_url import api_url

        return api_url(self)


def get_default_registry_mapper():
    from purlkit.registry_url import DEFAULT_MAPPER

    return DEFAULT_MAPPER
