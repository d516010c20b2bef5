#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import pytest

import purlkit
from purlkit.errors import MalformedPurlError
from purlkit.errors import TypeSpecificRuleError
from purlkit.package_url import PackageURL
from purlkit.serializer import encode_version
from purlkit.serializer import normalize_subpath
from purlkit.serializer import serialize


def test_end_to_end_maven_purl():
    purl_string = "pkg:maven/org.apache.commons/commons-lang3@3.12.0"
    purl = purlkit.parse(purl_string)
    assert purl.to_dict() == dict(
        type="maven",
        namespace="org.apache.commons",
        name="commons-lang3",
        version="3.12.0",
        qualifiers=None,
        subpath=None,
    )
    assert str(purl) == purl_string


def test_scoped_npm_name_disambiguation():
    purl = purlkit.parse("pkg:npm/@babel/core@7.0.0")
    assert purl.namespace == "@babel"
    assert purl.name == "core"
    assert purl.version == "7.0.0"


def test_qualifier_order_does_not_matter():
    first = purlkit.parse("pkg:gem/rails@7.0.0?os=linux&arch=x86_64")
    second = purlkit.parse("pkg:gem/rails@7.0.0?arch=x86_64&os=linux")
    assert first == second
    assert hash(first) == hash(second)


def test_subpath_is_normalized():
    purl = purlkit.parse("pkg:golang/google.golang.org/genproto#googleapis/../api/./annotations")
    assert purl.subpath == "googleapis/api/annotations"


@pytest.mark.parametrize(
    "components",
    [
        dict(type="gem", name="rails"),
        dict(type="npm", namespace="@angular", name="core", version="15.0.0"),
        dict(type="generic", name="a name with spaces", version="1.0 beta"),
        dict(type="generic", namespace="a/b/c", name="d", subpath="e/f"),
        dict(type="docker", name="nginx", version="sha256:244fd47e07d10"),
        dict(type="oci", name="debian", version="sha256:244fd47e07d10"),
        dict(type="deb", namespace="debian", name="curl", qualifiers={"arch": "i386", "distro": "jessie"}),
        dict(type="maven", namespace="org.apache", name="batik", qualifiers={"classifier": "sources"}),
        dict(type="generic", name="name", version="1@2#3?4"),
    ],
)
def test_round_trip(components):
    purl = PackageURL(**components)
    reparsed = PackageURL.from_string(purl.to_string())
    assert reparsed == purl
    assert reparsed.to_string() == purl.to_string()
    assert PackageURL.from_string(reparsed.to_string()).to_string() == purl.to_string()


def test_serialize_places_subpath_before_qualifiers():
    purl = PackageURL(
        type="generic",
        name="openssl",
        version="1.1.1",
        qualifiers={"os": "linux"},
        subpath="lib/ssl",
    )
    assert str(purl) == "pkg:generic/openssl@1.1.1#lib/ssl?os=linux"


def test_serialize_percent_encodes_components():
    purl = PackageURL(type="generic", namespace="my ns", name="a@b", version="1.0 rc")
    assert str(purl) == "pkg:generic/my%20ns/a%40b@1.0%20rc"


def test_serialize_keeps_docker_digest_colon_only():
    assert encode_version("sha256:abc", "docker") == "sha256:abc"
    assert encode_version("sha256:abc", "oci") == "sha256%3Aabc"
    assert encode_version("1:2", "docker") == "1%3A2"


def test_serialize_sorts_qualifiers():
    assert (
        serialize(type="GEM", name="rails", qualifiers={"platform": "java", "arch": "x86"})
        == "pkg:gem/rails?arch=x86&platform=java"
    )


def test_normalize_subpath():
    assert normalize_subpath("a//./b/../c") == "a/b/c"
    assert normalize_subpath("") is None
    assert normalize_subpath("../.") is None


def test_qualifier_values_with_separators_are_not_reencoded():
    purl = PackageURL(type="generic", name="name", qualifiers={"query": "a&b=c"})
    assert str(purl) == "pkg:generic/name?query=a&b=c"

    # the canonical string of such a value does not parse back to the same value
    reparsed = PackageURL.from_string(str(purl))
    assert reparsed.qualifiers == {"query": "a", "b": "c"}
    assert reparsed != purl


def test_qualifier_values_plus_sign_is_decoded_as_space_when_parsed_again():
    purl = PackageURL.from_string("pkg:generic/name?vcs_url=git%2Bhttps://example.com/repo")
    assert purl.qualifiers == {"vcs_url": "git+https://example.com/repo"}
    assert str(purl) == "pkg:generic/name?vcs_url=git+https://example.com/repo"

    reparsed = PackageURL.from_string(str(purl))
    assert reparsed.qualifiers == {"vcs_url": "git https://example.com/repo"}


def test_empty_qualifiers_are_none():
    assert PackageURL(type="gem", name="rails", qualifiers={}).qualifiers is None
    assert PackageURL.from_string("pkg:gem/rails?").qualifiers is None


def test_qualifiers_cannot_be_modified():
    purl = PackageURL(type="gem", name="rails", qualifiers={"os": "linux"})
    qualifiers = purl.qualifiers
    qualifiers["os"] = "mac"
    assert purl.qualifiers == {"os": "linux"}
    assert str(purl) == "pkg:gem/rails?os=linux"


def test_attributes_are_read_only():
    purl = PackageURL(type="gem", name="rails")
    with pytest.raises(AttributeError):
        purl.name = "sinatra"


def test_equality_uses_canonical_form():
    assert PackageURL(type="PyPI", name="Django_Allauth") == PackageURL.from_string(
        "pkg:pypi/django-allauth"
    )
    assert PackageURL(type="gem", name="rails") != PackageURL(type="gem", name="rails", version="7")
    assert PackageURL(type="gem", name="rails") != "pkg:gem/rails"
    assert len({PackageURL(type="gem", name="rails"), purlkit.parse("pkg:gem/rails")}) == 1


def test_repr():
    assert repr(purlkit.parse("pkg:gem/rails@7.0.0")) == "PackageURL('pkg:gem/rails@7.0.0')"


def test_with_returns_a_new_validated_purl():
    purl = purlkit.parse("pkg:gem/rails@7.0.0")
    updated = purl.with_(version="7.1.0", qualifiers={"platform": "java"})
    assert str(updated) == "pkg:gem/rails@7.1.0?platform=java"
    assert str(purl) == "pkg:gem/rails@7.0.0"


def test_with_revalidates():
    purl = purlkit.parse("pkg:cran/A3@1.0.0")
    with pytest.raises(TypeSpecificRuleError):
        purl.with_(version=None)


def test_with_rejects_unknown_components():
    with pytest.raises(TypeError):
        purlkit.parse("pkg:gem/rails").with_(homepage="https://rubyonrails.org")


def test_versionless():
    purl = purlkit.parse("pkg:npm/%40babel/core@7.0.0?foo=bar")
    assert str(purl.versionless()) == "pkg:npm/%40babel/core?foo=bar"


def test_empty_type_is_accepted_but_does_not_round_trip():
    purl = PackageURL(type="", name="foo")
    assert purl.type == ""
    assert str(purl) == "pkg:/foo"

    # leading slashes are not significant: "foo" is read back as the type
    with pytest.raises(MalformedPurlError):
        PackageURL.from_string(str(purl))
