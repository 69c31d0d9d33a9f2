"""
License Workflow Module.

This module orchestrates the per-package license processing:
- Loading an SBOM document into package records.
- Analyzing every raw license field of every package independently.
- Collecting the enriched reports in the original package order.

A failure on one field is logged and recorded as a diagnostic; it never
stops the processing of other fields or packages.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from sbom_licenses.models.schemas import (
    PackageLicenseReport,
    PackageRecord,
    SbomReportResponse,
)
from sbom_licenses.services.expression import analyze_expression
from sbom_licenses.services.sbom.loader import detect_format, parse_sbom
from sbom_licenses.utility.config import MAX_WORKERS

logger = logging.getLogger(__name__)


def process_package(record: PackageRecord) -> PackageLicenseReport:
    """
    Analyzes all license fields of a single package.

    Args:
        record (PackageRecord): The package as loaded from the SBOM.

    Returns:
        PackageLicenseReport: The package with its entries and diagnostics.
    """
    analyses = [analyze_expression(raw) for raw in record.license_expressions]

    for analysis in analyses:
        for diag in analysis.diagnostics:
            logger.warning(
                "Package %s@%s: cannot parse license %r (%s: %s)",
                record.name, record.version, diag.expression, diag.kind, diag.message,
            )

    return PackageLicenseReport(
        name=record.name,
        version=record.version,
        type=record.type,
        purl=record.purl,
        expressions=analyses,
    )


def process_packages(
        records: Sequence[PackageRecord],
        max_workers: Optional[int] = None,
) -> List[PackageLicenseReport]:
    """
    Analyzes a batch of packages.

    With more than one worker the packages are spread over a thread pool;
    results are always returned in input order.

    Args:
        records (Sequence[PackageRecord]): Packages to process.
        max_workers (Optional[int]): Pool size; defaults to MAX_WORKERS.

    Returns:
        List[PackageLicenseReport]: One report per input record, same order.
    """
    workers = MAX_WORKERS if max_workers is None else max_workers
    if workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {workers}")

    if workers == 1 or len(records) < 2:
        return [process_package(record) for record in records]

    logger.debug("Processing %d packages on %d workers", len(records), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # map() yields results in submission order
        return list(pool.map(process_package, records))


def count_failures(reports: Sequence[PackageLicenseReport]) -> int:
    """Returns the number of license fields that could not be parsed."""
    return sum(len(report.diagnostics) for report in reports)


def analyze_document(doc: dict, max_workers: Optional[int] = None) -> Tuple[str, List[PackageLicenseReport]]:
    """
    Loads the packages of a decoded SBOM document and analyzes them.

    Returns:
        Tuple[str, List[PackageLicenseReport]]: The detected format and the reports.

    Raises:
        SbomLoadError: If the document cannot be understood.
    """
    fmt = detect_format(doc)
    records = parse_sbom(doc, fmt)
    reports = process_packages(records, max_workers=max_workers)

    failures = count_failures(reports)
    if failures:
        logger.info("%d license field(s) could not be parsed", failures)
    return fmt, reports


def build_report(doc: dict, max_workers: Optional[int] = None) -> SbomReportResponse:
    """Builds the API response for a decoded SBOM document."""
    fmt, reports = analyze_document(doc, max_workers=max_workers)
    return SbomReportResponse(
        format=fmt,
        total_packages=len(reports),
        failed_expressions=count_failures(reports),
        packages=reports,
    )
