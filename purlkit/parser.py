#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from urllib.parse import parse_qsl
from urllib.parse import unquote_plus

from purlkit.errors import DuplicateQualifierError
from purlkit.errors import InvalidNameError
from purlkit.errors import InvalidNamespaceError
from purlkit.errors import InvalidQualifierError
from purlkit.errors import InvalidSchemeError
from purlkit.errors import InvalidSubpathError
from purlkit.errors import InvalidTypeError
from purlkit.errors import InvalidVersionError
from purlkit.errors import MalformedPurlError

"""
Split a raw Package URL string in its raw, decoded components.

The split order matters and must not change: qualifiers are split at the
first "?", the subpath at the first "#" and the version at the last "@" so
that a namespace such as the npm "@scope" does not break version extraction.
The returned components are not validated: pass them to ``PackageURL`` for
that.
"""

PURL_SCHEME = "pkg:"

DECODING_ERRORS = {
    "type": InvalidTypeError,
    "namespace": InvalidNamespaceError,
    "name": InvalidNameError,
    "version": InvalidVersionError,
    "qualifiers": InvalidQualifierError,
    "subpath": InvalidSubpathError,
}


def invalid_encoding(component, value):
    error_class = DECODING_ERRORS[component]
    return error_class(
        f"PURL {component} is not valid percent-encoded UTF-8: {value!r}",
        component=component,
        value=value,
        rule="valid UTF-8 required",
    )


def decode(segment, component):
    """
    Return a percent-decoded ``segment`` of a ``component``. Raise the
    ValidationError of this component if the decoded bytes are not UTF-8.

    For example::
    >>> decode("%40babel", "namespace")
    '@babel'
    """
    try:
        return unquote_plus(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise invalid_encoding(component, segment) from e


def decode_path(segments, component):
    return "/".join(decode(segment, component) for segment in segments)


def parse_qualifiers(query_string):
    """
    Return a dict of qualifiers parsed from a ``query_string``. Keys are
    lowercased. Raise a DuplicateQualifierError on duplicated keys.

    For example::
    >>> parse_qualifiers("os=linux&Arch=x86_64")
    {'os': 'linux', 'arch': 'x86_64'}
    """
    qualifiers = {}
    if not query_string:
        return qualifiers

    try:
        pairs = parse_qsl(query_string, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as e:
        raise invalid_encoding("qualifiers", query_string) from e

    for key, value in pairs:
        normalized_key = key.lower()
        if normalized_key in qualifiers:
            raise DuplicateQualifierError(
                f"Duplicate qualifier key in query string: {key}",
                component="qualifiers",
                value=key,
                rule="unique keys required",
            )
        qualifiers[normalized_key] = value
    return qualifiers


def parse_subpath(subpath):
    """
    Return a decoded ``subpath`` or None if it has no segment.
    Each segment is decoded on its own.
    """
    subpath = subpath.strip().strip("/")
    if not subpath:
        return
    return decode_path(subpath.split("/"), "subpath")


def parse_components(purl_string):
    """
    Return a mapping of raw decoded components parsed from a ``purl_string``.
    Raise a ParseError if the string cannot be split in components.

    For example::
    >>> components = parse_components("pkg:npm/%40babel/core@7.0.0#lib/index.js")
    >>> components["namespace"], components["name"], components["version"]
    ('@babel', 'core', '7.0.0')
    >>> components["subpath"]
    'lib/index.js'
    """
    if not isinstance(purl_string, str) or not purl_string.startswith(PURL_SCHEME):
        raise InvalidSchemeError(f"PURL must start with {PURL_SCHEME!r}: {purl_string!r}")

    # leading slashes after the scheme are not significant
    remainder = purl_string[len(PURL_SCHEME) :].lstrip("/")

    query_string = None
    if "?" in remainder:
        remainder, _, query_string = remainder.partition("?")

    subpath = None
    if "#" in remainder:
        remainder, _, raw_subpath = remainder.partition("#")
        subpath = parse_subpath(raw_subpath)

    version = None
    if "@" in remainder:
        remainder, _, raw_version = remainder.rpartition("@")
        if raw_version:
            version = decode(raw_version, "version")

    # a trailing slash means an empty name: everything left is a namespace
    empty_name = remainder.endswith("/")
    if empty_name:
        remainder = remainder[:-1]

    if not remainder:
        raise MalformedPurlError(f"PURL path cannot be empty: {purl_string!r}")

    segments = remainder.split("/")
    type = decode(segments.pop(0), "type")
    if not segments:
        raise MalformedPurlError(f"PURL must have a name component: {purl_string!r}")

    if empty_name:
        name = None
        namespace = decode_path(segments, "namespace")
    else:
        name = decode(segments.pop(), "name")
        namespace = decode_path(segments, "namespace") if segments else None

    qualifiers = None
    if query_string is not None:
        qualifiers = parse_qualifiers(query_string)

    return dict(
        type=type,
        namespace=namespace,
        name=name,
        version=version,
        qualifiers=qualifiers,
        subpath=subpath,
    )
