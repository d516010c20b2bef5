#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import re
from typing import Mapping
from typing import Optional
from urllib.parse import unquote_plus

from purlkit.errors import InvalidNameError
from purlkit.errors import InvalidNamespaceError
from purlkit.errors import InvalidQualifierError
from purlkit.errors import InvalidTypeError
from purlkit.errors import TypeSpecificRuleError
from purlkit.serializer import normalize_subpath

"""
Validation and normalization of each Package URL component.

Every function either returns the normalized value or raises a
``ValidationError`` subclass naming the component, the offending value and
the violated rule. These functions are pure: they never modify their inputs.
"""

VALID_TYPE_CHARS = re.compile(r"^[a-zA-Z0-9.+\-]+$")
VALID_QUALIFIER_KEY_CHARS = re.compile(r"^[a-zA-Z0-9.\-_]+$")


def pypi_name(name):
    return name.lower().replace("_", "-")


# Per-type case folding, keyed by normalized type
NAME_NORMALIZERS = {
    "bitbucket": str.lower,
    "composer": str.lower,
    "github": str.lower,
    "pypi": pypi_name,
}

NAMESPACE_NORMALIZERS = {
    "bitbucket": str.lower,
    "composer": str.lower,
    "github": str.lower,
}

VERSION_NORMALIZERS = {
    "huggingface": str.lower,
}


def validate_type(type) -> str:
    """
    Return a lowercase ``type`` or raise an InvalidTypeError.
    An empty string is accepted as-is.
    """
    if type is None:
        raise InvalidTypeError("Type cannot be None", component="type", value=type)

    if type == "":
        return ""

    type_str = str(type).strip()
    if not type_str:
        raise InvalidTypeError(
            "Type cannot contain only whitespace",
            component="type",
            value=type,
            rule="non-blank type required",
        )

    if not VALID_TYPE_CHARS.match(type_str):
        raise InvalidTypeError(
            "Type can only contain ASCII letters, numbers, '.', '+', and '-'",
            component="type",
            value=type,
            rule="ASCII letters, numbers, '.', '+', '-' only",
        )

    if type_str[0].isdigit():
        raise InvalidTypeError(
            "Type cannot start with a number",
            component="type",
            value=type,
            rule="cannot start with number",
        )

    return type_str.lower()


def validate_name(name, type="") -> str:
    if name is None:
        raise InvalidNameError(
            "Name is required", component="name", value=name, rule="name required"
        )

    name_str = str(name)
    if not name_str:
        raise InvalidNameError(
            "Name cannot be empty", component="name", value=name, rule="non-empty name required"
        )

    name_str = name_str.strip()
    if not name_str:
        raise InvalidNameError(
            "Name cannot contain only whitespace",
            component="name",
            value=name,
            rule="non-blank name required",
        )

    normalize = NAME_NORMALIZERS.get(type)
    if normalize:
        return normalize(name_str)
    return name_str


def validate_namespace(namespace, type="") -> Optional[str]:
    """
    Return a normalized ``namespace`` or None if empty.
    A namespace segment that still contains a '/' once decoded is rejected:
    this is the sign of a double-encoded or malformed input.
    """
    if namespace is None:
        return

    namespace_str = str(namespace).strip()
    if not namespace_str:
        return

    for segment in namespace_str.split("/"):
        if "/" in unquote_plus(segment):
            raise InvalidNamespaceError(
                "Namespace segments cannot contain '/' after URL decoding",
                component="namespace",
                value=namespace,
                rule="no '/' in decoded segments",
            )

    normalize = NAMESPACE_NORMALIZERS.get(type)
    if normalize:
        return normalize(namespace_str)
    return namespace_str


def validate_version(version, type="") -> Optional[str]:
    if version is None:
        return

    version_str = str(version).strip()
    if not version_str:
        return

    normalize = VERSION_NORMALIZERS.get(type)
    if normalize:
        return normalize(version_str)
    return version_str


def validate_qualifiers(qualifiers: Optional[Mapping]) -> Optional[dict]:
    """
    Return a new dict of ``qualifiers`` with lowercase keys and string values,
    or None if there are no qualifiers. Values are never decoded.
    """
    if not qualifiers:
        return

    validated = {}
    for key, value in qualifiers.items():
        key_str = str(key).strip() if key is not None else ""

        if not key_str:
            raise InvalidQualifierError(
                "Qualifier key cannot be empty",
                component="qualifiers",
                value=key,
                rule="non-empty key required",
            )

        if not VALID_QUALIFIER_KEY_CHARS.match(key_str):
            raise InvalidQualifierError(
                "Qualifier key can only contain ASCII letters, numbers, '.', '-', and '_'",
                component="qualifiers",
                value=key,
                rule="ASCII letters, numbers, '.', '-', '_' only",
            )

        normalized_key = key_str.lower()
        if normalized_key in validated:
            raise InvalidQualifierError(
                f"Duplicate qualifier key: {key_str}",
                component="qualifiers",
                value=key,
                rule="unique keys required",
            )

        validated[normalized_key] = "" if value is None else str(value)

    return validated


def validate_subpath(subpath) -> Optional[str]:
    """
    Return a trimmed and normalized ``subpath`` or None if nothing remains.
    """
    if subpath is None:
        return

    return normalize_subpath(str(subpath).strip())


def validate_conan(components):
    namespace = components["namespace"]
    qualifiers = components["qualifiers"] or {}

    if namespace and not qualifiers:
        raise TypeSpecificRuleError(
            "Conan PURLs with namespace require qualifiers to be unambiguous",
            component="qualifiers",
            value=components["qualifiers"],
            rule="conan packages with namespace need qualifiers for disambiguation",
        )

    if "channel" in qualifiers and "user" not in qualifiers and not namespace:
        raise TypeSpecificRuleError(
            "Conan PURLs with 'channel' qualifier require 'user' qualifier to be unambiguous",
            component="qualifiers",
            value=qualifiers,
            rule="conan packages with channel need user qualifier",
        )
    return components


def validate_cran(components):
    if not components["version"]:
        raise TypeSpecificRuleError(
            "CRAN PURLs require a version to be unambiguous",
            component="version",
            value=components["version"],
            rule="cran packages need version",
        )
    return components


def validate_swift(components):
    if not components["namespace"]:
        raise TypeSpecificRuleError(
            "Swift PURLs require a namespace to be unambiguous",
            component="namespace",
            value=components["namespace"],
            rule="swift packages need namespace",
        )

    if not components["version"]:
        raise TypeSpecificRuleError(
            "Swift PURLs require a version to be unambiguous",
            component="version",
            value=components["version"],
            rule="swift packages need version",
        )
    return components


# Known CPAN module/distribution name conflicts as (namespace, name, rule).
# A None namespace matches any namespace. This is a literal table: there is no
# general rule behind these entries.
CPAN_CONFLICTING_NAMES = [
    (None, "Perl-Version", "cpan module vs distribution name conflict"),
    ("GDT", "URI::PackageURL", "cpan distribution vs module name conflict"),
]


def validate_cpan(components):
    namespace = components["namespace"]
    name = components["name"]

    for conflicting_namespace, conflicting_name, rule in CPAN_CONFLICTING_NAMES:
        if name != conflicting_name:
            continue
        if conflicting_namespace is not None and namespace != conflicting_namespace:
            continue
        value = f"{namespace}/{name}" if namespace else name
        raise TypeSpecificRuleError(
            f"CPAN name {value!r} conflicts with CPAN naming rules",
            component="name",
            value=value,
            rule=rule,
        )
    return components


def validate_mlflow(components):
    """
    Azure Databricks MLflow registries are case insensitive: lowercase the
    name. Names from any other MLflow registry are case sensitive.
    """
    qualifiers = components["qualifiers"] or {}
    if "azuredatabricks" in qualifiers.get("repository_url", ""):
        return dict(components, name=components["name"].lower())
    return components


TYPE_SPECIFIC_VALIDATORS = {
    "conan": validate_conan,
    "cpan": validate_cpan,
    "cran": validate_cran,
    "mlflow": validate_mlflow,
    "swift": validate_swift,
}


def validate_components(
    type,
    name,
    namespace=None,
    version=None,
    qualifiers=None,
    subpath=None,
) -> dict:
    """
    Return a mapping of all the validated and normalized components of a PURL.
    Raise a ValidationError on the first invalid component.
    """
    type = validate_type(type)
    components = dict(
        type=type,
        name=validate_name(name, type),
        namespace=validate_namespace(namespace, type),
        version=validate_version(version, type),
        qualifiers=validate_qualifiers(qualifiers),
        subpath=validate_subpath(subpath),
    )

    type_validator = TYPE_SPECIFIC_VALIDATORS.get(type)
    if type_validator:
        components = type_validator(components)
    return components
