#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import logging
from typing import Dict
from typing import List
from typing import Optional
from urllib.parse import quote_plus

import requests

from purlkit import settings
from purlkit.errors import AdvisoryLookupError
from purlkit.errors import PackageLookupError
from purlkit.package_url import PackageURL

logger = logging.getLogger(__name__)

"""
Thin clients for the package metadata and security advisory APIs of
https://ecosyste.ms. Requests are not retried.
"""

NOT_FOUND = object()


def get_json(url, error_class, params=None, user_agent=None, timeout=None):
    """
    Return the decoded JSON of a GET request on ``url`` or NOT_FOUND on a 404.
    Raise an ``error_class`` exception on any other failure.
    """
    headers = {"User-Agent": user_agent or settings.USER_AGENT}
    timeout = timeout or settings.HTTP_TIMEOUT
    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        logger.error(f"Timeout while fetching {url!r}: {e}")
        raise error_class(f"Request timeout: {e}") from e
    except requests.RequestException as e:
        logger.error(f"Error while fetching {url!r}: {e}")
        raise error_class(f"Lookup failed: {e}") from e

    if response.status_code == 404:
        return NOT_FOUND
    if response.status_code != 200:
        logger.error(f"Error while fetching {url!r}: {response.status_code!r}")
        raise error_class(f"API request failed with status {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise error_class(f"Failed to parse API response: {e}") from e


def to_purl(purl) -> PackageURL:
    if isinstance(purl, PackageURL):
        return purl
    return PackageURL.from_string(str(purl))


def compact(mapping):
    return {key: value for key, value in mapping.items() if value is not None}


class PackageLookup:
    """
    Look up package and version metadata by PURL on packages.ecosyste.ms.
    """

    def __init__(self, user_agent=None, timeout=None, api_base=None):
        self.user_agent = user_agent
        self.timeout = timeout
        self.api_base = api_base or settings.PACKAGES_API_BASE

    def get_json(self, url, params=None):
        return get_json(
            url,
            error_class=PackageLookupError,
            params=params,
            user_agent=self.user_agent,
            timeout=self.timeout,
        )

    def package_info(self, purl) -> Optional[Dict]:
        """
        Return a mapping of package metadata for a ``purl`` or None if the
        package is not known. For a ``purl`` with a version, the mapping also
        has the metadata of this version under "version" when available.
        """
        purl = to_purl(purl)
        data = self.get_json(f"{self.api_base}/packages/lookup", params={"purl": str(purl)})
        if data is NOT_FOUND or not isinstance(data, list) or not data:
            return

        package_data = data[0]
        result = dict(purl=str(purl), package=extract_package_info(package_data))
        versions_url = package_data.get("versions_url")
        if purl.version and versions_url:
            try:
                version = self.fetch_version_info(versions_url, purl.version)
            except PackageLookupError as e:
                logger.warning(f"Returning package data without version data for {purl}: {e}")
                version = None
            if version:
                result["version"] = version
        return result

    def version_info(self, purl) -> Optional[Dict]:
        """
        Return a mapping of metadata for the version of a ``purl`` or None.
        Raise a ValueError if the ``purl`` has no version.
        """
        purl = to_purl(purl)
        if not purl.version:
            raise ValueError("PURL must include a version")

        package = self.package_info(purl.versionless())
        versions_url = package and package["package"].get("versions_url")
        if not versions_url:
            return
        return self.fetch_version_info(versions_url, purl.version)

    def fetch_version_info(self, versions_url, version) -> Optional[Dict]:
        data = self.get_json(f"{versions_url}/{quote_plus(version)}")
        if data is NOT_FOUND or not isinstance(data, dict):
            return
        return extract_version_info(data)


def extract_package_info(package_data):
    maintainers = package_data.get("maintainers")
    if isinstance(maintainers, list):
        maintainers = [
            compact(dict(login=m.get("login"), name=m.get("name"), url=m.get("url")))
            for m in maintainers
        ]
    else:
        maintainers = None

    return dict(
        name=package_data.get("name"),
        ecosystem=package_data.get("ecosystem"),
        description=package_data.get("description"),
        homepage=package_data.get("homepage"),
        repository_url=package_data.get("repository_url"),
        registry_url=package_data.get("registry_url"),
        licenses=package_data.get("licenses"),
        latest_version=package_data.get("latest_release_number"),
        latest_version_published_at=package_data.get("latest_release_published_at"),
        versions_count=package_data.get("versions_count"),
        keywords=package_data.get("keywords_array"),
        install_command=package_data.get("install_command"),
        documentation_url=package_data.get("documentation_url"),
        maintainers=maintainers,
        versions_url=package_data.get("versions_url"),
    )


def extract_version_info(data):
    version_info = dict(
        number=data.get("number"),
        published_at=data.get("published_at"),
        version_url=data.get("version_url"),
        download_url=data.get("download_url"),
        registry_url=data.get("registry_url"),
        documentation_url=data.get("documentation_url"),
        install_command=data.get("install_command"),
    )

    metadata = data.get("metadata") or {}
    if metadata.get("downloads"):
        version_info["downloads"] = metadata["downloads"]
    size = metadata.get("crate_size") or metadata.get("size")
    if size:
        version_info["size"] = size
    if "yanked" in metadata:
        version_info["yanked"] = metadata["yanked"]

    published_by = metadata.get("published_by")
    if isinstance(published_by, dict) and published_by.get("login"):
        login = published_by["login"]
        name = published_by.get("name")
        version_info["published_by"] = f"{name} ({login})" if name else login
    return version_info


class AdvisoryLookup:
    """
    Look up security advisories by PURL on advisories.ecosyste.ms.
    """

    def __init__(self, user_agent=None, timeout=None, api_base=None):
        self.user_agent = user_agent
        self.timeout = timeout
        self.api_base = api_base or settings.ADVISORIES_API_BASE

    def lookup(self, purl) -> List[Dict]:
        """
        Return a list of advisory mappings affecting a ``purl``, possibly empty.
        """
        purl = to_purl(purl)
        data = get_json(
            f"{self.api_base}/advisories/lookup",
            error_class=AdvisoryLookupError,
            params={"purl": str(purl)},
            user_agent=self.user_agent,
            timeout=self.timeout,
        )
        if data is NOT_FOUND or not isinstance(data, list):
            return []
        # TODO: filter by version once affected version ranges are parsed
        return [extract_advisory_info(advisory) for advisory in data]


def extract_advisory_info(advisory_data):
    return compact(
        dict(
            id=advisory_data.get("uuid"),
            title=advisory_data.get("title"),
            description=advisory_data.get("description"),
            severity=advisory_data.get("severity"),
            cvss_score=advisory_data.get("cvss_score"),
            cvss_vector=advisory_data.get("cvss_vector"),
            url=advisory_data.get("url"),
            repository_url=advisory_data.get("repository_url"),
            published_at=advisory_data.get("published_at"),
            updated_at=advisory_data.get("updated_at"),
            withdrawn_at=advisory_data.get("withdrawn_at"),
            source_kind=advisory_data.get("source_kind"),
            origin=advisory_data.get("origin"),
            classification=advisory_data.get("classification"),
            affected_packages=extract_affected_packages(advisory_data.get("packages")),
            references=advisory_data.get("references"),
            identifiers=advisory_data.get("identifiers"),
        )
    )


def extract_affected_packages(packages):
    if not isinstance(packages, list):
        return []

    affected = []
    for package in packages:
        versions = package.get("versions") or [{}]
        version_info = versions[0]
        affected.append(
            compact(
                dict(
                    ecosystem=package.get("ecosystem"),
                    name=package.get("package_name"),
                    purl=package.get("purl"),
                    vulnerable_version_range=version_info.get("vulnerable_version_range"),
                    first_patched_version=version_info.get("first_patched_version"),
                )
            )
        )
    return affected
