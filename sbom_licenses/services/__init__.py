from .license_workflow import (
    analyze_document,
    build_report,
    count_failures,
    process_package,
    process_packages,
)
from .expression import analyze_expression
from .sbom.loader import load_sbom, parse_sbom
from .sbom.exporter import export_csv_file, render_table

__all__ = [
    "analyze_document",
    "build_report",
    "count_failures",
    "process_package",
    "process_packages",
    "analyze_expression",
    "load_sbom",
    "parse_sbom",
    "export_csv_file",
    "render_table",
]
