#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses
from typing import Callable
from typing import List
from typing import Optional

from purlkit.errors import MissingVersionError
from purlkit.errors import UnsupportedTypeError

"""
Build direct download URLs of package archives from versioned PackageURLs,
such as https://rubygems.org/downloads/rails-7.0.4.gem for pkg:gem/rails@7.0.4.
"""


def gem_path(purl):
    return f"{purl.name}-{purl.version}.gem"


def npm_path(purl):
    if purl.namespace:
        return f"{purl.namespace}/{purl.name}/-/{purl.name}-{purl.version}.tgz"
    return f"{purl.name}/-/{purl.name}-{purl.version}.tgz"


def cargo_path(purl):
    return f"{purl.name}/{purl.name}-{purl.version}.crate"


def nuget_path(purl):
    name = purl.name.lower()
    return f"{name}/{purl.version}/{name}.{purl.version}.nupkg"


def hex_path(purl):
    return f"{purl.name}-{purl.version}.tar"


def hackage_path(purl):
    return f"{purl.name}-{purl.version}/{purl.name}-{purl.version}.tar.gz"


def pub_path(purl):
    return f"{purl.name}/versions/{purl.version}.tar.gz"


def escape_module_path(path: str) -> str:
    """
    Return a case-encoded Go module ``path``: every uppercase letter is
    replaced by an exclamation mark followed by its lowercase letter.
    See https://golang.org/ref/mod#goproxy-protocol

    For example::
    >>> escape_module_path("github.com/Azure/azure-sdk-for-go")
    'github.com/!azure/azure-sdk-for-go'
    """
    escaped_path = ""
    for c in path:
        if "A" <= c <= "Z":
            escaped_path += "!" + c.lower()
        else:
            escaped_path += c
    return escaped_path


def golang_path(purl):
    path = f"{purl.namespace}/{purl.name}" if purl.namespace else purl.name
    return f"{escape_module_path(path)}/@v/{purl.version}.zip"


def maven_layout_path(group_id, artifact_id, version):
    group_path = group_id.replace(".", "/")
    return f"{group_path}/{artifact_id}/{version}/{artifact_id}-{version}.jar"


def maven_path(purl):
    if not purl.namespace:
        return
    return maven_layout_path(purl.namespace, purl.name, purl.version)


def clojars_path(purl):
    # the group id defaults to the artifact id
    return maven_layout_path(purl.namespace or purl.name, purl.name, purl.version)


def r_source_path(purl):
    return f"{purl.name}_{purl.version}.tar.gz"


def elm_path(purl):
    if not purl.namespace:
        return
    return f"{purl.namespace}/{purl.name}/archive/{purl.version}.zip"


def github_path(purl):
    if not purl.namespace:
        return
    return f"{purl.namespace}/{purl.name}/archive/refs/tags/{purl.version}.tar.gz"


def gitlab_path(purl):
    if not purl.namespace:
        return
    return f"{purl.namespace}/{purl.name}/-/archive/{purl.version}/{purl.name}-{purl.version}.tar.gz"


def bitbucket_path(purl):
    if not purl.namespace:
        return
    return f"{purl.namespace}/{purl.name}/get/{purl.version}.tar.gz"


def luarocks_path(purl):
    if not purl.namespace:
        return
    return f"{purl.namespace}/{purl.name}-{purl.version}.src.rock"


SWIFT_HOSTS = {
    "github.com": github_path,
    "gitlab.com": gitlab_path,
    "bitbucket.org": bitbucket_path,
}


def swift_url(purl):
    """
    Return an absolute archive URL for a swift ``purl`` whose namespace is a
    source host and an owner such as "github.com/Alamofire".
    """
    if not purl.namespace:
        return
    host, _, owner = purl.namespace.partition("/")
    path_builder = SWIFT_HOSTS.get(host)
    if not owner or not path_builder:
        return
    return f"https://{host}/{path_builder(purl.with_(namespace=owner))}"


@dataclasses.dataclass(frozen=True)
class DownloadPattern:
    base_url: Optional[str]
    build: Optional[Callable] = None
    note: Optional[str] = None


DOWNLOAD_PATTERNS = {
    "gem": DownloadPattern("https://rubygems.org/downloads", gem_path),
    "npm": DownloadPattern("https://registry.npmjs.org", npm_path),
    "cargo": DownloadPattern("https://static.crates.io/crates", cargo_path),
    "nuget": DownloadPattern("https://api.nuget.org/v3-flatcontainer", nuget_path),
    "hex": DownloadPattern("https://repo.hex.pm/tarballs", hex_path),
    "hackage": DownloadPattern("https://hackage.haskell.org/package", hackage_path),
    "pub": DownloadPattern("https://pub.dev/packages", pub_path),
    "golang": DownloadPattern("https://proxy.golang.org", golang_path),
    "maven": DownloadPattern("https://repo.maven.apache.org/maven2", maven_path),
    "cran": DownloadPattern("https://cran.r-project.org/src/contrib", r_source_path),
    "bioconductor": DownloadPattern(
        "https://bioconductor.org/packages/release/bioc/src/contrib", r_source_path
    ),
    "clojars": DownloadPattern("https://repo.clojars.org", clojars_path),
    "elm": DownloadPattern("https://github.com", elm_path),
    "github": DownloadPattern("https://github.com", github_path),
    "gitlab": DownloadPattern("https://gitlab.com", gitlab_path),
    "bitbucket": DownloadPattern("https://bitbucket.org", bitbucket_path),
    "luarocks": DownloadPattern("https://luarocks.org/manifests", luarocks_path),
    "swift": DownloadPattern(None, swift_url),
    "composer": DownloadPattern(
        None, note="Composer packages are downloaded from source repositories, not Packagist"
    ),
    "cocoapods": DownloadPattern(
        None, note="CocoaPods packages are downloaded from source repositories"
    ),
}


class DownloadURLGenerator:
    @classmethod
    def supported_types(cls) -> List[str]:
        return sorted(t for t, pattern in DOWNLOAD_PATTERNS.items() if pattern.build)

    @classmethod
    def supports(cls, type) -> bool:
        pattern = type and DOWNLOAD_PATTERNS.get(str(type).lower())
        return bool(pattern and pattern.build)

    @classmethod
    def unsupported(cls, message, purl):
        return UnsupportedTypeError(
            message,
            type=purl.type,
            supported_types=cls.supported_types(),
        )

    @classmethod
    def generate(cls, purl, base_url=None) -> str:
        """
        Return a download URL for a ``purl``.

        The base URL is the first available of ``base_url``, the
        "repository_url" qualifier of the ``purl`` and the default base URL of
        the type. Raise a MissingVersionError if the ``purl`` has no version
        and an UnsupportedTypeError if no download URL can be built.
        """
        if not purl.version:
            raise MissingVersionError("Download URL requires a version", type=purl.type)

        pattern = DOWNLOAD_PATTERNS.get(purl.type)
        if not pattern:
            supported = ", ".join(cls.supported_types())
            raise cls.unsupported(
                f"No download URL pattern defined for type {purl.type!r}. "
                f"Supported types: {supported}",
                purl,
            )

        path = pattern.build and pattern.build(purl)
        if not path:
            raise cls.unsupported(
                f"Could not generate download URL for {purl.type!r}. {pattern.note or ''}".strip(),
                purl,
            )

        if path.startswith(("http://", "https://")):
            return path

        qualifiers = purl.qualifiers or {}
        base_url = base_url or qualifiers.get("repository_url") or pattern.base_url
        if not base_url:
            raise cls.unsupported(
                f"Download URLs are not available for type {purl.type!r}.", purl
            )
        return f"{base_url.rstrip('/')}/{path}"
