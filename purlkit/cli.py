#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import json

import click
from texttable import Texttable

import purlkit
from purlkit.errors import PurlError
from purlkit.lookup import AdvisoryLookup
from purlkit.lookup import PackageLookup
from purlkit.package_url import PackageURL


def parse_or_fail(purl_string) -> PackageURL:
    try:
        return PackageURL.from_string(purl_string)
    except PurlError as e:
        raise click.ClickException(str(e)) from e


def echo_json(data):
    click.echo(json.dumps(data, indent=2))


def echo_mapping(mapping):
    width = max((len(key) for key in mapping), default=0)
    for key, value in mapping.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        elif isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items())
        click.echo(f"{key.replace('_', ' ').capitalize():<{width}}  {value}")


@click.group()
@click.version_option(purlkit.__version__, "-V", "--version", prog_name="purlkit")
@click.help_option("-h", "--help")
def cli():
    """
    Parse, validate and convert Package URLs (PURLs).
    """


@cli.command()
@click.argument("purl")
@click.option("--json", "json_output", is_flag=True, help="Print output as JSON.")
def parse(purl, json_output):
    """
    Parse PURL and print its components.
    """
    parsed = parse_or_fail(purl)
    if json_output:
        echo_json(dict(purl=str(parsed), components=parsed.to_dict()))
        return
    click.echo(f"Valid PURL: {parsed}")
    echo_mapping(parsed.to_dict())


@cli.command()
@click.argument("purl")
def validate(purl):
    """
    Check that PURL is valid and print its canonical form.
    """
    parsed = parse_or_fail(purl)
    click.echo(f"Valid PURL: {parsed}")


@cli.command()
@click.argument("url")
@click.option("--type", "type_hint", metavar="TYPE", help="PURL type of a private registry URL.")
def convert(url, type_hint):
    """
    Convert a package registry URL to a PURL.
    """
    try:
        purl = purlkit.from_registry_url(url, type=type_hint)
    except PurlError as e:
        raise click.ClickException(str(e)) from e
    click.echo(str(purl))


@cli.command()
@click.option("--type", "type", required=True, help="Package type.")
@click.option("--name", required=True, help="Package name.")
@click.option("--namespace", help="Package namespace.")
@click.option("--version", help="Package version.")
@click.option(
    "--qualifier",
    "qualifiers",
    multiple=True,
    metavar="KEY=VALUE",
    help="Package qualifier. Repeat for multiple qualifiers.",
)
@click.option("--subpath", help="Path within the package.")
def generate(type, name, namespace, version, qualifiers, subpath):
    """
    Build a PURL from its components.
    """
    qualifiers_mapping = {}
    seen_keys = set()
    for qualifier in qualifiers:
        key, separator, value = qualifier.partition("=")
        if not separator:
            raise click.BadParameter(
                f"{qualifier!r} is not in KEY=VALUE format", param_hint="--qualifier"
            )
        normalized_key = key.strip().lower()
        if normalized_key in seen_keys:
            raise click.BadParameter(
                f"duplicate qualifier key {key!r}", param_hint="--qualifier"
            )
        seen_keys.add(normalized_key)
        qualifiers_mapping[key] = value

    try:
        purl = PackageURL(
            type=type,
            namespace=namespace,
            name=name,
            version=version,
            qualifiers=qualifiers_mapping or None,
            subpath=subpath,
        )
    except PurlError as e:
        raise click.ClickException(str(e)) from e
    click.echo(str(purl))


@cli.command()
@click.argument("type", required=False)
@click.option("--json", "json_output", is_flag=True, help="Print output as JSON.")
def info(type, json_output):
    """
    Print information about PURL types or a single TYPE.
    """
    if type:
        type_info = purlkit.type_info(type)
        if json_output:
            echo_json(type_info)
        else:
            echo_mapping(type_info)
        return

    all_info = purlkit.all_type_info()
    if json_output:
        echo_json(dict(metadata=purlkit.types_config_metadata(), types=all_info))
        return

    table = Texttable()
    table.set_deco(Texttable.HEADER)
    table.set_cols_dtype(["t", "t", "t", "t"])
    table.set_cols_align(["l", "c", "c", "l"])
    table.set_max_width(0)
    table.header(["TYPE", "REGISTRY URL", "REVERSE", "DEFAULT REGISTRY"])
    for type_name, type_info in all_info.items():
        table.add_row(
            [
                type_name,
                "yes" if type_info["registry_url_generation"] else "",
                "yes" if type_info["reverse_parsing"] else "",
                type_info["default_registry"] or "",
            ]
        )
    metadata = purlkit.types_config_metadata()
    click.echo(
        f"{metadata['total_types']} known types, "
        f"{metadata['registry_supported_types']} with registry URLs\n"
    )
    click.echo(table.draw())


@cli.command()
@click.argument("purl")
@click.option("--with-version", "with_version", is_flag=True, help="Link to the version page.")
@click.option("--base-url", "base_url", help="Base URL of a private registry or mirror.")
def url(purl, with_version, base_url):
    """
    Print the registry URL of PURL.
    """
    parsed = parse_or_fail(purl)
    try:
        if with_version:
            registry_url = parsed.registry_url_with_version(base_url=base_url)
        else:
            registry_url = parsed.registry_url(base_url=base_url)
    except PurlError as e:
        raise click.ClickException(str(e)) from e
    click.echo(registry_url)


@cli.command()
@click.argument("purl")
@click.option("--base-url", "base_url", help="Base URL of a private registry or mirror.")
def download(purl, base_url):
    """
    Print the download URL of the package archive of PURL.
    """
    parsed = parse_or_fail(purl)
    try:
        download_url = parsed.download_url(base_url=base_url)
    except PurlError as e:
        raise click.ClickException(str(e)) from e
    click.echo(download_url)


@cli.command()
@click.argument("purl")
@click.option("--json", "json_output", is_flag=True, help="Print output as JSON.")
def lookup(purl, json_output):
    """
    Look up package metadata of PURL on ecosyste.ms.
    """
    parsed = parse_or_fail(purl)
    try:
        package_info = PackageLookup().package_info(parsed)
    except PurlError as e:
        raise click.ClickException(str(e)) from e

    if not package_info:
        raise click.ClickException(f"Package not found: {parsed}")

    if json_output:
        echo_json(package_info)
        return

    click.echo(f"Package: {parsed}")
    echo_mapping(
        {
            key: value
            for key, value in package_info["package"].items()
            if key not in ("maintainers", "versions_url")
        }
    )
    version_info = package_info.get("version")
    if version_info:
        click.echo("")
        click.echo(f"Version: {parsed.version}")
        echo_mapping(version_info)


@cli.command()
@click.argument("purl")
@click.option("--json", "json_output", is_flag=True, help="Print output as JSON.")
def advisories(purl, json_output):
    """
    Look up security advisories affecting PURL on ecosyste.ms.
    """
    parsed = parse_or_fail(purl)
    try:
        found = AdvisoryLookup().lookup(parsed)
    except PurlError as e:
        raise click.ClickException(str(e)) from e

    if json_output:
        echo_json(found)
        return

    if not found:
        click.echo(f"No advisories found for {parsed}")
        return

    click.echo(f"{len(found)} advisories found for {parsed}")
    for advisory in found:
        click.echo("")
        echo_mapping(
            {
                "id": advisory.get("id"),
                "title": advisory.get("title"),
                "severity": advisory.get("severity"),
                "url": advisory.get("url"),
                "published_at": advisory.get("published_at"),
            }
        )


if __name__ == "__main__":
    cli()
