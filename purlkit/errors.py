#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

"""
Exceptions raised while parsing, validating and converting Package URLs.

Catch ``PurlError`` to handle every failure uniformly or one of the more
specific classes for differentiated messaging.
"""


class PurlError(Exception):
    pass


class ValidationError(PurlError):
    """
    A PURL component failed validation. ``component`` is the name of the
    failing component, ``value`` the offending value and ``rule`` a short
    description of the violated rule.
    """

    def __init__(self, message, component=None, value=None, rule=None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.value = value
        self.rule = rule


class InvalidTypeError(ValidationError):
    pass


class InvalidNameError(ValidationError):
    pass


class InvalidNamespaceError(ValidationError):
    pass


class InvalidVersionError(ValidationError):
    pass


class InvalidQualifierError(ValidationError):
    pass


class InvalidSubpathError(ValidationError):
    pass


class TypeSpecificRuleError(ValidationError):
    """
    An otherwise valid PURL was rejected by an ecosystem-specific rule.
    """


class ParseError(PurlError):
    pass


class InvalidSchemeError(ParseError):
    pass


class MalformedPurlError(ParseError):
    pass


class RegistryError(PurlError):
    def __init__(self, message, type=None):
        super().__init__(message)
        self.message = message
        self.type = type


class UnsupportedTypeError(RegistryError):
    def __init__(self, message, type=None, supported_types=None):
        super().__init__(message, type=type)
        self.supported_types = list(supported_types or [])


class MissingRegistryInfoError(RegistryError):
    def __init__(self, message, type=None, missing=None):
        super().__init__(message, type=type)
        self.missing = missing


class MissingVersionError(RegistryError):
    pass


class PackageLookupError(PurlError):
    pass


class AdvisoryLookupError(PurlError):
    pass


class DuplicateQualifierError(InvalidQualifierError, ParseError):
    """
    A qualifier key occurs more than once in a PURL query string.
    """
