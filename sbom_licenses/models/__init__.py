from .schemas import (
    ExpressionAnalysis,
    ExpressionRequest,
    LicenseEntry,
    PackageLicenseReport,
    PackageRecord,
    ParseDiagnostic,
    SbomReportResponse,
)

__all__ = [
    "ExpressionAnalysis",
    "ExpressionRequest",
    "LicenseEntry",
    "PackageLicenseReport",
    "PackageRecord",
    "ParseDiagnostic",
    "SbomReportResponse",
]
