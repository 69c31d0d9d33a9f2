"""
SBOM Loader Module.

Reads SBOM JSON documents and yields one `PackageRecord` per package with
its raw license fields. Supported layouts:

- Syft JSON ("artifacts"): license items are plain strings or objects, in
  which case 'spdxExpression' is preferred over 'value'.
- SPDX JSON ("packages"): 'licenseConcluded' and 'licenseDeclared' are kept
  as independent fields.
- CycloneDX JSON ("components"): 'expression', 'license.id' or 'license.name'.

Each field is an independent expression; no aggregation happens here.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from sbom_licenses.models.schemas import PackageRecord

logger = logging.getLogger(__name__)

SYFT = "syft"
SPDX = "spdx"
CYCLONEDX = "cyclonedx"

UNKNOWN = "Unknown"
# Placeholder some scanners write for "no license"
NONE_LITERAL = "None"

_OPERATOR_RE = re.compile(r"\s(AND|OR|WITH)\s")


class SbomLoadError(ValueError):
    """Raised when an SBOM document cannot be read or understood."""


def detect_format(doc: Dict[str, Any]) -> str:
    """
    Returns 'syft', 'spdx' or 'cyclonedx' depending on the SBOM structure.

    An empty object is taken as Syft output, whose parser then reports the
    missing artifacts.

    Raises:
        SbomLoadError: If the document matches none of the known layouts.
    """
    if not isinstance(doc, dict):
        raise SbomLoadError("SBOM document must be a JSON object")
    if str(doc.get("bomFormat", "")).lower() == "cyclonedx" or isinstance(doc.get("components"), list):
        return CYCLONEDX
    if "spdxVersion" in doc or isinstance(doc.get("packages"), list):
        return SPDX
    if not doc or "artifacts" in doc or "descriptor" in doc or "source" in doc:
        return SYFT
    raise SbomLoadError("Unrecognized SBOM format: expected Syft, SPDX or CycloneDX JSON")


def _text(value: Any, default: str = UNKNOWN) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def split_license_field(field: str) -> List[str]:
    """
    Splits a raw license field into independent expressions.

    Semicolon-separated lists ('MIT; BSD-3-Clause') become several fields
    unless the text already uses SPDX operators, in which case it is kept
    whole. Blank parts and the literal placeholder "None" are dropped.
    """
    trimmed = (field or "").strip()
    if ";" in trimmed and not _OPERATOR_RE.search(trimmed):
        parts = [part.strip() for part in trimmed.split(";")]
    else:
        parts = [trimmed]
    return [part for part in parts if part and part != NONE_LITERAL]


def _collect(fields: List[Optional[str]]) -> List[str]:
    """Splits fields and removes duplicates while keeping order."""
    out: List[str] = []
    for field in fields:
        if not isinstance(field, str):
            continue
        for part in split_license_field(field):
            if part not in out:
                out.append(part)
    return out


def _syft_license_fields(licenses: Any) -> List[Optional[str]]:
    fields: List[Optional[str]] = []
    for item in licenses or []:
        if isinstance(item, str):
            fields.append(item)
        elif isinstance(item, dict):
            fields.append(item.get("spdxExpression") or item.get("value"))
    return fields


def _cdx_license_fields(licenses: Any) -> List[Optional[str]]:
    fields: List[Optional[str]] = []
    for item in licenses or []:
        if not isinstance(item, dict):
            continue
        if item.get("expression"):
            fields.append(item["expression"])
            continue
        lic = item.get("license") or {}
        fields.append(lic.get("id") or lic.get("name"))
    return fields


def _purl_type(purl: Optional[str]) -> Optional[str]:
    # pkg:type/namespace/name@version
    if not purl or not purl.startswith("pkg:"):
        return None
    return purl[4:].split("/", 1)[0] or None


def _parse_syft(doc: Dict[str, Any]) -> List[PackageRecord]:
    artifacts = doc.get("artifacts")
    if artifacts is None:
        raise SbomLoadError("No artifacts found in Syft output")
    if not isinstance(artifacts, list):
        raise SbomLoadError("Syft 'artifacts' must be a list")

    records = []
    for artifact in artifacts:
        if not isinstance(artifact, dict):
            logger.warning("Skipping malformed Syft artifact: %r", artifact)
            continue
        records.append(PackageRecord(
            name=_text(artifact.get("name")),
            version=_text(artifact.get("version")),
            type=_text(artifact.get("type")),
            purl=artifact.get("purl"),
            language=artifact.get("language") or None,
            license_expressions=_collect(_syft_license_fields(artifact.get("licenses"))),
        ))
    return records


def _parse_spdx(doc: Dict[str, Any]) -> List[PackageRecord]:
    records = []
    for package in doc.get("packages") or []:
        if not isinstance(package, dict):
            logger.warning("Skipping malformed SPDX package: %r", package)
            continue
        purl = None
        for ref in package.get("externalRefs") or []:
            if isinstance(ref, dict) and ref.get("referenceType") == "purl":
                purl = ref.get("referenceLocator")
                break
        records.append(PackageRecord(
            name=_text(package.get("name")),
            version=_text(package.get("versionInfo")),
            type=_text(_purl_type(purl) or package.get("primaryPackagePurpose")),
            purl=purl,
            license_expressions=_collect([
                package.get("licenseConcluded"),
                package.get("licenseDeclared"),
            ]),
        ))
    return records


def _parse_cyclonedx(doc: Dict[str, Any]) -> List[PackageRecord]:
    records = []
    for component in doc.get("components") or []:
        if not isinstance(component, dict):
            logger.warning("Skipping malformed CycloneDX component: %r", component)
            continue
        records.append(PackageRecord(
            name=_text(component.get("name")),
            version=_text(component.get("version")),
            type=_text(_purl_type(component.get("purl")) or component.get("type")),
            purl=component.get("purl"),
            license_expressions=_collect(_cdx_license_fields(component.get("licenses"))),
        ))
    return records


_PARSERS = {
    SYFT: _parse_syft,
    SPDX: _parse_spdx,
    CYCLONEDX: _parse_cyclonedx,
}


def parse_sbom(doc: Dict[str, Any], sbom_format: Optional[str] = None) -> List[PackageRecord]:
    """
    Extracts package records from an already decoded SBOM document.

    Args:
        doc (Dict[str, Any]): The decoded JSON document.
        sbom_format (Optional[str]): Force a format instead of detecting it.

    Returns:
        List[PackageRecord]: Packages in document order.

    Raises:
        SbomLoadError: If the format is unknown or the document is malformed.
    """
    fmt = sbom_format or detect_format(doc)
    parser = _PARSERS.get(fmt)
    if parser is None:
        raise SbomLoadError(f"Unsupported SBOM format: {fmt}")
    records = parser(doc)
    logger.info("Loaded %d packages from %s document", len(records), fmt)
    return records


def loads_sbom(content) -> Dict[str, Any]:
    """
    Decodes SBOM JSON text (str or bytes).

    Raises:
        SbomLoadError: If the content is not valid JSON.
    """
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SbomLoadError(f"Error parsing SBOM JSON: {exc}") from exc


def load_sbom(path: str) -> Dict[str, Any]:
    """
    Reads and decodes an SBOM JSON file.

    Raises:
        SbomLoadError: If the file cannot be read or is not valid JSON.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as exc:
        raise SbomLoadError(f"Error reading file {path}: {exc}") from exc
    return loads_sbom(content)
