#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from unittest import mock

import pytest

from purlkit.ecosystem import EcosystemConfig


@pytest.fixture
def mini_config():
    return EcosystemConfig.from_mapping(
        {
            "version": "0.1",
            "description": "test types",
            "types": {
                "Gem": {
                    "description": "RubyGems",
                    "default_registry": "https://rubygems.org",
                    "examples": ["pkg:gem/rails@7.0.4"],
                    "registry_config": {
                        "base_url": "https://rubygems.org/gems/",
                        "templates": {
                            "default": "{base_url}/{name}",
                            "default_versioned": "{base_url}/{name}/versions/{version}",
                        },
                        "reverse_regex": r"^https?://rubygems\.org/gems/([^/?#]+)(?:/versions/([^/?#]+))?",
                        "reverse_groups": ["name", "version"],
                    },
                },
                "deb": {
                    "description": "Debian packages",
                    "components": {"namespace": "required"},
                },
            },
        }
    )


@pytest.fixture
def mock_get():
    with mock.patch("purlkit.lookup.requests.get") as mocked:
        yield mocked
