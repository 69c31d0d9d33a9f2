import json

import pytest

"""
Shared fixtures for the test suite:
- `syft_document`, `spdx_document`, `cyclonedx_document`: minimal SBOM
  documents in each supported layout.
- `sbom_file`: writes a document to a temporary JSON file and returns its path.
- `make_report`: builds a PackageLicenseReport from raw license fields.
"""


@pytest.fixture
def syft_document():
    """A Syft document covering plain, detailed, compound and broken license fields."""
    return {
        "artifacts": [
            {
                "name": "requests",
                "version": "2.31.0",
                "type": "python",
                "purl": "pkg:pypi/requests@2.31.0",
                "language": "python",
                "licenses": ["Apache-2.0"],
            },
            {
                "name": "serde",
                "version": "1.0.188",
                "type": "rust-crate",
                "licenses": [
                    {"value": "MIT OR Apache-2.0", "spdxExpression": "MIT OR Apache-2.0", "type": "declared"},
                ],
            },
            {
                "name": "openjdk",
                "version": "17",
                "type": "binary",
                "licenses": [
                    {"value": "GPL-2.0 with classpath", "spdxExpression": "GPL-2.0-only WITH Classpath-exception-2.0"},
                ],
            },
            {
                "name": "legacy",
                "version": "0.1",
                "type": "npm",
                "licenses": [{"value": "MIT AND", "spdxExpression": ""}],
            },
            {
                "name": "no-license",
                "type": "go-module",
                "licenses": [],
            },
        ],
        "source": {"type": "directory", "target": "."},
        "descriptor": {"name": "syft", "version": "0.90.0"},
    }


@pytest.fixture
def spdx_document():
    return {
        "spdxVersion": "SPDX-2.3",
        "packages": [
            {
                "name": "zlib",
                "versionInfo": "1.3",
                "licenseConcluded": "Zlib",
                "licenseDeclared": "Zlib",
                "externalRefs": [
                    {"referenceCategory": "PACKAGE-MANAGER", "referenceType": "purl",
                     "referenceLocator": "pkg:deb/debian/zlib@1.3"},
                ],
            },
            {
                "name": "busybox",
                "versionInfo": "1.36",
                "licenseConcluded": "NOASSERTION",
                "licenseDeclared": "GPL-2.0-only",
            },
        ],
    }


@pytest.fixture
def cyclonedx_document():
    return {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "components": [
            {
                "type": "library",
                "name": "lodash",
                "version": "4.17.21",
                "purl": "pkg:npm/lodash@4.17.21",
                "licenses": [{"license": {"id": "MIT"}}],
            },
            {
                "type": "library",
                "name": "jackson",
                "version": "2.15",
                "licenses": [{"expression": "Apache-2.0 AND (MIT OR BSD-3-Clause)"}],
            },
            {
                "type": "library",
                "name": "custom",
                "version": "1.0",
                "licenses": [{"license": {"name": "Proprietary; Internal"}}],
            },
        ],
    }


@pytest.fixture
def sbom_file(tmp_path):
    """Returns a helper writing a document to a JSON file."""
    def _write(doc, name="sbom.json"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def make_report():
    from sbom_licenses.models.schemas import PackageRecord
    from sbom_licenses.services.license_workflow import process_package

    def _make(name="pkg", version="1.0", type="python", licenses=()):  # pylint: disable=redefined-builtin
        return process_package(PackageRecord(
            name=name, version=version, type=type, license_expressions=list(licenses),
        ))
    return _make
