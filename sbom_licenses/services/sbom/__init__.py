from .loader import (
    SbomLoadError,
    detect_format,
    load_sbom,
    loads_sbom,
    parse_sbom,
    split_license_field,
)
from .exporter import (
    ENTRY_LAYOUT,
    LAYOUTS,
    PACKAGE_LAYOUT,
    entry_label,
    export_csv_file,
    render_table,
    to_csv,
    write_csv,
)

__all__ = [
    "SbomLoadError",
    "detect_format",
    "load_sbom",
    "loads_sbom",
    "parse_sbom",
    "split_license_field",
    "ENTRY_LAYOUT",
    "LAYOUTS",
    "PACKAGE_LAYOUT",
    "entry_label",
    "export_csv_file",
    "render_table",
    "to_csv",
    "write_csv",
]
