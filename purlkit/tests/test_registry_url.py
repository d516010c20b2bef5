#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import pytest

import purlkit
from purlkit.errors import MissingRegistryInfoError
from purlkit.errors import RegistryError
from purlkit.errors import TypeSpecificRuleError
from purlkit.errors import UnsupportedTypeError
from purlkit.registry_url import DEFAULT_MAPPER
from purlkit.registry_url import RegistryURLMapper
from purlkit.registry_url import domain_agnostic_regex


@pytest.mark.parametrize(
    "purl, expected",
    [
        ("pkg:gem/rails@7.0.0", "https://rubygems.org/gems/rails"),
        ("pkg:npm/lodash@4.17.21", "https://www.npmjs.com/package/lodash"),
        ("pkg:npm/%40babel/core@7.0.0", "https://www.npmjs.com/package/@babel/core"),
        ("pkg:pypi/django@1.11.1", "https://pypi.org/project/django/"),
        ("pkg:cargo/rand@0.7.2", "https://crates.io/crates/rand"),
        (
            "pkg:maven/org.apache.commons/commons-lang3@3.12.0",
            "https://mvnrepository.com/artifact/org.apache.commons/commons-lang3",
        ),
        ("pkg:composer/laravel/laravel", "https://packagist.org/packages/laravel/laravel"),
        ("pkg:docker/nginx", "https://hub.docker.com/_/nginx"),
        ("pkg:docker/bitnami/redis", "https://hub.docker.com/r/bitnami/redis"),
        ("pkg:elm/elm/core@1.0.5", "https://package.elm-lang.org/packages/elm/core/latest"),
        (
            "pkg:golang/github.com/gorilla/context",
            "https://pkg.go.dev/github.com/gorilla/context",
        ),
        ("pkg:cran/A3@1.0.0", "https://cran.r-project.org/web/packages/A3"),
        ("pkg:hackage/aeson", "https://hackage.haskell.org/package/aeson"),
    ],
)
def test_generate(purl, expected):
    assert purlkit.parse(purl).registry_url() == expected


@pytest.mark.parametrize(
    "purl, expected",
    [
        ("pkg:gem/rails@7.0.0", "https://rubygems.org/gems/rails/versions/7.0.0"),
        ("pkg:npm/%40babel/core@7.0.0", "https://www.npmjs.com/package/@babel/core/v/7.0.0"),
        ("pkg:pypi/django@1.11.1", "https://pypi.org/project/django/1.11.1/"),
        (
            "pkg:maven/org.apache.commons/commons-lang3@3.12.0",
            "https://mvnrepository.com/artifact/org.apache.commons/commons-lang3/3.12.0",
        ),
        ("pkg:elm/elm/core@1.0.5", "https://package.elm-lang.org/packages/elm/core/1.0.5"),
        ("pkg:hackage/aeson@2.1.1.0", "https://hackage.haskell.org/package/aeson-2.1.1.0"),
        ("pkg:deno/oak@12.6.1", "https://deno.land/x/oak@12.6.1"),
        # no version page
        ("pkg:composer/laravel/laravel@5.5.0", "https://packagist.org/packages/laravel/laravel"),
        # no version
        ("pkg:gem/rails", "https://rubygems.org/gems/rails"),
    ],
)
def test_generate_with_version(purl, expected):
    assert purlkit.parse(purl).registry_url_with_version() == expected


def test_generate_with_base_url_keeps_path_shape():
    purl = purlkit.parse("pkg:gem/rails@7.0.0")
    assert purl.registry_url(base_url="https://gems.internal.com/gems/") == (
        "https://gems.internal.com/gems/rails"
    )
    assert purl.registry_url_with_version(base_url="https://gems.internal.com/gems") == (
        "https://gems.internal.com/gems/rails/versions/7.0.0"
    )


@pytest.mark.parametrize(
    "purl",
    [
        "pkg:maven/commons-lang3@3.12.0",
        "pkg:composer/laravel",
        "pkg:elm/core@1.0.5",
    ],
)
def test_generate_requires_namespace(purl):
    with pytest.raises(MissingRegistryInfoError) as excinfo:
        purlkit.parse(purl).registry_url()
    assert excinfo.value.missing == "namespace"
    assert excinfo.value.type == purlkit.parse(purl).type


def test_generate_rejects_unsupported_types():
    purl = purlkit.parse("pkg:deb/debian/curl@7.50.3-1")
    assert not purl.supports_registry_url()
    with pytest.raises(UnsupportedTypeError) as excinfo:
        purl.registry_url()
    assert excinfo.value.type == "deb"
    assert "gem" in excinfo.value.supported_types
    assert "deb" not in excinfo.value.supported_types


def test_registry_errors_share_a_base_class():
    with pytest.raises(RegistryError):
        purlkit.parse("pkg:generic/openssl@1.1.1").registry_url()


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://rubygems.org/gems/rails", "pkg:gem/rails"),
        ("https://rubygems.org/gems/rails/versions/7.0.0", "pkg:gem/rails@7.0.0"),
        ("https://www.npmjs.com/package/lodash", "pkg:npm/lodash"),
        ("https://www.npmjs.com/package/@babel/core", "pkg:npm/%40babel/core"),
        ("https://www.npmjs.com/package/@babel/core/v/7.0.0", "pkg:npm/%40babel/core@7.0.0"),
        ("https://npmjs.com/package/lodash/v/4.17.21", "pkg:npm/lodash@4.17.21"),
        ("https://pypi.org/project/Django/", "pkg:pypi/django"),
        ("https://pypi.org/project/django/1.11.1/", "pkg:pypi/django@1.11.1"),
        ("https://crates.io/crates/rand/0.7.2", "pkg:cargo/rand@0.7.2"),
        (
            "https://mvnrepository.com/artifact/org.apache.commons/commons-lang3/3.12.0",
            "pkg:maven/org.apache.commons/commons-lang3@3.12.0",
        ),
        ("https://packagist.org/packages/Laravel/Laravel", "pkg:composer/laravel/laravel"),
        ("https://hub.docker.com/_/nginx", "pkg:docker/nginx"),
        ("https://hub.docker.com/r/bitnami/redis", "pkg:docker/bitnami/redis"),
        ("https://package.elm-lang.org/packages/elm/core/latest", "pkg:elm/elm/core"),
        ("https://package.elm-lang.org/packages/elm/core/1.0.5", "pkg:elm/elm/core@1.0.5"),
        ("https://pkg.go.dev/github.com/gorilla/context", "pkg:golang/github.com/gorilla/context"),
        ("https://pkg.go.dev/golang.org/x/net@v0.1.0", "pkg:golang/golang.org/x/net@v0.1.0"),
        ("https://hackage.haskell.org/package/aeson-2.1.1.0", "pkg:hackage/aeson@2.1.1.0"),
        ("https://hackage.haskell.org/package/3d-graphics-examples", "pkg:hackage/3d-graphics-examples"),
        ("https://clojars.org/ring", "pkg:clojars/ring"),
        ("https://clojars.org/org.clojure/clojure", "pkg:clojars/org.clojure/clojure"),
        ("https://deno.land/x/oak@12.6.1", "pkg:deno/oak@12.6.1"),
        ("https://github.com/package-url/purl-spec", "pkg:github/package-url/purl-spec"),
    ],
)
def test_from_url(url, expected):
    assert str(purlkit.from_registry_url(url)) == expected


@pytest.mark.parametrize(
    "url, type, expected",
    [
        ("https://npm.company.com/package/@babel/core", "npm", "pkg:npm/%40babel/core"),
        ("https://gems.internal.com/gems/rails/versions/7.0.0", "gem", "pkg:gem/rails@7.0.0"),
        ("http://mirror.local/project/requests/", "PyPI", "pkg:pypi/requests"),
    ],
)
def test_from_url_with_type_hint_matches_any_host(url, type, expected):
    assert str(purlkit.from_registry_url(url, type=type)) == expected


def test_from_url_with_type_hint_falls_back_to_known_registries():
    assert str(purlkit.from_registry_url("https://rubygems.org/gems/rails", type="npm")) == (
        "pkg:gem/rails"
    )


def test_from_url_without_type_hint_needs_a_known_host():
    with pytest.raises(UnsupportedTypeError):
        purlkit.from_registry_url("https://npm.company.com/package/@babel/core")


def test_from_url_rejects_unknown_urls():
    with pytest.raises(UnsupportedTypeError) as excinfo:
        purlkit.from_registry_url("https://example.com/some/package")
    supported = excinfo.value.supported_types
    assert supported == DEFAULT_MAPPER.supported_reverse_types()
    assert "gem" in supported
    assert "cran" not in supported


def test_from_url_validates_components():
    # the registry URL has no version: not a valid swift PURL
    with pytest.raises(TypeSpecificRuleError):
        purlkit.from_registry_url("https://swiftpackageindex.com/Alamofire/Alamofire")


@pytest.mark.parametrize(
    "purl",
    [
        "pkg:gem/rails@7.0.0",
        "pkg:npm/%40babel/core@7.0.0",
        "pkg:cargo/rand@0.7.2",
        "pkg:maven/org.apache.commons/commons-lang3@3.12.0",
        "pkg:pypi/django@1.11.1",
        "pkg:hex/jason@1.1.2",
        "pkg:pub/characters@1.2.0",
    ],
)
def test_registry_url_round_trip_keeps_type_and_name(purl):
    purl = purlkit.parse(purl)
    reparsed = purlkit.from_registry_url(purl.registry_url())
    assert reparsed.type == purl.type
    assert reparsed.name == purl.name
    assert reparsed.namespace == purl.namespace


def test_gem_registry_url_round_trip_is_lossless_with_version():
    purl = purlkit.parse("pkg:gem/rails@7.0.0")
    assert purlkit.from_registry_url(purl.registry_url_with_version()) == purl


def test_domain_agnostic_regex():
    assert domain_agnostic_regex(r"^https?://(?:www\.)?nuget\.org/packages/([^/?#]+)") == (
        r"^https?://[^/]+/packages/([^/?#]+)"
    )
    assert domain_agnostic_regex(r"^no-scheme") == r"^no-scheme"


def test_supported_types():
    assert "gem" in purlkit.registry_supported_types()
    assert "cran" in purlkit.registry_supported_types()
    assert "deb" not in purlkit.registry_supported_types()
    assert "cran" not in purlkit.reverse_parsing_supported_types()
    assert DEFAULT_MAPPER.supports("NPM")
    assert not DEFAULT_MAPPER.supports(None)


def test_route_patterns():
    assert DEFAULT_MAPPER.route_patterns_for("npm") == [
        "https://www.npmjs.com/package/:name",
        "https://www.npmjs.com/package/:name/v/:version",
        "https://www.npmjs.com/package/:namespace/:name",
        "https://www.npmjs.com/package/:namespace/:name/v/:version",
    ]
    assert DEFAULT_MAPPER.route_patterns_for("deb") == []
    all_patterns = DEFAULT_MAPPER.all_route_patterns()
    assert sorted(all_patterns) == DEFAULT_MAPPER.supported_types()


def test_mapper_uses_its_own_config(mini_config):
    mapper = RegistryURLMapper(mini_config)
    assert mapper.supported_types() == ["gem"]
    purl = purlkit.parse("pkg:gem/rails@7.0.0")
    assert purl.registry_url(mapper=mapper) == "https://rubygems.org/gems/rails"
    assert purl.supports_registry_url(mapper=mapper)
    assert not purlkit.parse("pkg:npm/lodash").supports_registry_url(mapper=mapper)
    with pytest.raises(UnsupportedTypeError):
        mapper.from_url("https://www.npmjs.com/package/lodash")
