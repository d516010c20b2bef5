#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from typing import Optional
from urllib.parse import quote

"""
Render validated Package URL components in their canonical string form:

    pkg:type/namespace/name@version#subpath?qualifiers

Rendering never fails: its inputs have already been validated.
"""


def encode_segment(segment, safe=""):
    return quote(segment, safe=safe)


def encode_path(path):
    """
    Return a '/'-separated ``path`` with each segment percent-encoded.
    """
    return "/".join(encode_segment(segment) for segment in path.split("/"))


def encode_version(version, type):
    # the colon in a docker digest is a separator, not data
    if type == "docker" and "sha256:" in version:
        return encode_segment(version, safe=":")
    return encode_segment(version)


def normalize_subpath(subpath) -> Optional[str]:
    """
    Return ``subpath`` without its ".", ".." and empty segments, or None if
    nothing remains.

    For example::
    >>> normalize_subpath("googleapis/../api/./annotations/")
    'googleapis/api/annotations'
    >>> normalize_subpath("/./")
    """
    if not subpath:
        return
    segments = [s for s in subpath.split("/") if s not in ("", ".", "..")]
    if not segments:
        return
    return "/".join(segments)


def serialize_qualifiers(qualifiers):
    """
    Return a query string of ``qualifiers`` sorted by key. Values are not
    encoded.
    """
    return "&".join(f"{key}={value}" for key, value in sorted(qualifiers.items()))


def serialize(
    type,
    name,
    namespace=None,
    version=None,
    qualifiers=None,
    subpath=None,
) -> str:
    """
    Return the canonical PURL string built from validated components.
    """
    type = type.lower()
    parts = ["pkg:", type]

    if namespace:
        parts.append("/")
        parts.append(encode_path(namespace))

    parts.append("/")
    parts.append(encode_segment(name))

    if version:
        parts.append("@")
        parts.append(encode_version(version, type))

    subpath = normalize_subpath(subpath)
    if subpath:
        parts.append("#")
        parts.append(encode_path(subpath))

    if qualifiers:
        parts.append("?")
        parts.append(serialize_qualifiers(qualifiers))

    return "".join(parts)
