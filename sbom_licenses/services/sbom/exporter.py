"""
Exporter Module.

Projects `PackageLicenseReport` objects into rows and renders them either as
CSV or as a formatted grid (via `tabulate`).

Two layouts are supported:
- "package": one row per package, license labels joined in one column.
- "entry": one row per effective license entry.
"""

import csv
import io
from typing import List, Sequence, TextIO

from tabulate import tabulate

from sbom_licenses.models.schemas import ALTERNATIVE, LicenseEntry, PackageLicenseReport
from sbom_licenses.utility.config import CSV_SEPARATOR, TABLE_FORMAT

PACKAGE_LAYOUT = "package"
ENTRY_LAYOUT = "entry"
LAYOUTS = (PACKAGE_LAYOUT, ENTRY_LAYOUT)

NO_LICENSE = "None"

PACKAGE_HEADERS = ["Name", "Version", "Type", "Licenses"]
ENTRY_HEADERS = ["Name", "Version", "Type", "License", "Exception", "Context", "Group", "Option", "Status"]


def entry_label(entry: LicenseEntry) -> str:
    """
    Returns the display text of an entry.

    Examples:
        'ISC', 'MIT [OR 1]', 'GPL-2.0-only WITH Classpath-exception-2.0',
        'Apache License 2.0 [unparsed]'.
    """
    label = entry.label
    if entry.degraded:
        return f"{label} [unparsed]"
    if entry.combinator_context == ALTERNATIVE:
        return f"{label} [OR {entry.group_label}]"
    return label


def _check_layout(layout: str) -> None:
    if layout not in LAYOUTS:
        raise ValueError(f"Unknown layout '{layout}'. Expected one of: {', '.join(LAYOUTS)}")


def package_rows(reports: Sequence[PackageLicenseReport], joiner: str) -> List[List[str]]:
    """Builds one row per package; licenses are joined with `joiner`."""
    rows = []
    for report in reports:
        labels = [entry_label(entry) for entry in report.entries]
        rows.append([
            report.name,
            report.version,
            report.type,
            joiner.join(labels) if labels else NO_LICENSE,
        ])
    return rows


def entry_rows(reports: Sequence[PackageLicenseReport]) -> List[List[str]]:
    """Builds one row per effective license entry (one 'None' row for unlicensed packages)."""
    rows = []
    for report in reports:
        entries = report.entries
        if not entries:
            rows.append([report.name, report.version, report.type, NO_LICENSE, "", "", "", "", ""])
            continue
        for entry in entries:
            rows.append([
                report.name,
                report.version,
                report.type,
                entry.identifier,
                entry.exception or "",
                entry.combinator_context,
                entry.group_label,
                str(entry.option) if entry.option is not None else "",
                "unparsed" if entry.degraded else "parsed",
            ])
    return rows


def write_csv(
        stream: TextIO,
        reports: Sequence[PackageLicenseReport],
        layout: str = PACKAGE_LAYOUT,
        separator: str = CSV_SEPARATOR,
) -> int:
    """
    Writes the reports as CSV.

    Args:
        stream (TextIO): Destination, opened with newline=''.
        reports (Sequence[PackageLicenseReport]): Reports in output order.
        layout (str): "package" or "entry".
        separator (str): Joiner of the license column in the package layout.

    Returns:
        int: Number of data rows written.
    """
    _check_layout(layout)
    writer = csv.writer(stream)
    if layout == PACKAGE_LAYOUT:
        writer.writerow(PACKAGE_HEADERS)
        rows = package_rows(reports, separator)
    else:
        writer.writerow(ENTRY_HEADERS)
        rows = entry_rows(reports)
    writer.writerows(rows)
    return len(rows)


def to_csv(reports: Sequence[PackageLicenseReport], layout: str = PACKAGE_LAYOUT) -> str:
    """Returns the CSV rendering as a string."""
    buffer = io.StringIO(newline="")
    write_csv(buffer, reports, layout)
    return buffer.getvalue()


def export_csv_file(path: str, reports: Sequence[PackageLicenseReport], layout: str = PACKAGE_LAYOUT) -> int:
    """
    Writes the CSV rendering to a file.

    Returns:
        int: Number of data rows written.

    Raises:
        OSError: If the file cannot be created.
    """
    with open(path, "w", newline="", encoding="utf-8") as f:
        return write_csv(f, reports, layout)


def render_table(
        reports: Sequence[PackageLicenseReport],
        layout: str = PACKAGE_LAYOUT,
        tablefmt: str = TABLE_FORMAT,
) -> str:
    """
    Renders the reports as a formatted grid followed by the artifact total.

    In the package layout each license label sits on its own line inside
    the cell.
    """
    _check_layout(layout)
    if not reports:
        return "No artifacts found."

    # versions such as '1.10' must not be reformatted as numbers
    if layout == PACKAGE_LAYOUT:
        table = tabulate(package_rows(reports, "\n"), headers=PACKAGE_HEADERS,
                         tablefmt=tablefmt, disable_numparse=True)
    else:
        table = tabulate(entry_rows(reports), headers=ENTRY_HEADERS,
                         tablefmt=tablefmt, disable_numparse=True)
    return f"{table}\n\nTotal artifacts: {len(reports)}"
