#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from pathlib import Path

import environ

from purlkit import __version__

PURLKIT_VERSION = __version__

PROJECT_DIR = Path(__file__).resolve().parent
ROOT_DIR = PROJECT_DIR.parent

# Environment

ENV_FILE = "/etc/purlkit/.env"
if not Path(ENV_FILE).exists():
    ENV_FILE = ROOT_DIR / ".env"

env = environ.Env()
environ.Env.read_env(str(ENV_FILE))

# Ecosystem configuration

DEFAULT_TYPES_CONFIG_FILE = PROJECT_DIR / "data" / "purl_types.yml"

TYPES_CONFIG_FILE = env.str("PURLKIT_TYPES_CONFIG", default=str(DEFAULT_TYPES_CONFIG_FILE))

# Package metadata and advisory APIs

PACKAGES_API_BASE = env.str(
    "PURLKIT_PACKAGES_API_BASE", default="https://packages.ecosyste.ms/api/v1"
)

ADVISORIES_API_BASE = env.str(
    "PURLKIT_ADVISORIES_API_BASE", default="https://advisories.ecosyste.ms/api/v1"
)

USER_AGENT = env.str("PURLKIT_USER_AGENT", default=f"purlkit/{PURLKIT_VERSION}")

HTTP_TIMEOUT = env.int("PURLKIT_HTTP_TIMEOUT", default=10)
