"""
Schemas Module.

This module defines the Pydantic models shared by the license-expression
core, the SBOM loader, the exporters and the HTTP API. It covers the
effective license entries produced by flattening, the parse diagnostics
reported for unparseable fields, and the per-package reports.
"""

from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, computed_field

REQUIRED = "required"
ALTERNATIVE = "alternative"

CombinatorContext = Literal["required", "alternative"]
Summary = Literal["none", "required", "alternative", "mixed"]

# ------------------------------------------------------------------
# LICENSE EXPRESSION MODELS
# ------------------------------------------------------------------

class LicenseEntry(BaseModel):
    """
    A single effective license entry derived from a license expression.

    Attributes:
        identifier (str): The license identifier (or the raw text of a degraded field).
        exception (Optional[str]): The exception attached via 'WITH', if any.
        combinator_context (str): "required" when the entry sits outside any OR
            group, "alternative" when it is one of the choices of a group.
        group_id (Tuple[int, ...]): Path of OR groups from the root; empty when
            the entry is required. A child group extends its parent's path.
        option (Optional[int]): 1-based index of the OR branch the entry came
            from inside its innermost group.
        degraded (bool): True for the fallback entry of an unparseable or
            empty field.
    """
    identifier: str
    exception: Optional[str] = None
    combinator_context: CombinatorContext = REQUIRED
    group_id: Tuple[int, ...] = ()
    option: Optional[int] = None
    degraded: bool = False

    @property
    def group_label(self) -> str:
        """Dotted form of the group path ('1.2'), empty when not grouped."""
        return ".".join(str(part) for part in self.group_id)

    @property
    def label(self) -> str:
        """The SPDX-style text of the entry, e.g. 'GPL-2.0-only WITH Classpath-exception-2.0'."""
        if self.exception:
            return f"{self.identifier} WITH {self.exception}"
        return self.identifier


class ParseDiagnostic(BaseModel):
    """
    Describes why a license field could not be decomposed.

    Attributes:
        kind (str): Error variant name (e.g. "LexError", "MissingOperandError").
        message (str): Human-readable description.
        expression (str): The offending raw text.
        offset (Optional[int]): Byte offset of the error in the raw text.
        position (Optional[int]): Token index of the error.
        symbols (List[str]): Best-effort identifiers salvaged from the raw text.
    """
    kind: str
    message: str
    expression: str
    offset: Optional[int] = None
    position: Optional[int] = None
    symbols: List[str] = Field(default_factory=list)


class ExpressionAnalysis(BaseModel):
    """
    The outcome of analyzing one raw license field.

    Attributes:
        expression (str): The raw field as received.
        canonical (Optional[str]): Canonical rendering of the parsed expression,
            None when parsing failed.
        entries (List[LicenseEntry]): Ordered effective license entries.
        summary (str): Combinator summary of the entries: "none", "required",
            "alternative" or "mixed".
        diagnostics (List[ParseDiagnostic]): Failures, empty on success.
    """
    expression: str
    canonical: Optional[str] = None
    entries: List[LicenseEntry] = Field(default_factory=list)
    summary: Summary = "none"
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class ExpressionRequest(BaseModel):
    """Request payload for analyzing a single expression."""
    expression: str


# ------------------------------------------------------------------
# PACKAGE MODELS
# ------------------------------------------------------------------

class PackageRecord(BaseModel):
    """
    One package as read from an SBOM document.

    Attributes:
        name (str): Package name ("Unknown" when missing).
        version (str): Package version ("Unknown" when missing).
        type (str): Package type reported by the scanner ("Unknown" when missing).
        purl (Optional[str]): Package URL, if present.
        language (Optional[str]): Ecosystem language, if present.
        license_expressions (List[str]): Raw license fields, each one an
            independent expression.
    """
    name: str = "Unknown"
    version: str = "Unknown"
    type: str = "Unknown"
    purl: Optional[str] = None
    language: Optional[str] = None
    license_expressions: List[str] = Field(default_factory=list)


class PackageLicenseReport(BaseModel):
    """
    A package enriched with its decomposed license data.

    Attributes:
        name (str): Package name.
        version (str): Package version.
        type (str): Package type.
        purl (Optional[str]): Package URL.
        expressions (List[ExpressionAnalysis]): One analysis per raw license field.
    """
    name: str
    version: str
    type: str
    purl: Optional[str] = None
    expressions: List[ExpressionAnalysis] = Field(default_factory=list)

    @computed_field
    @property
    def entries(self) -> List[LicenseEntry]:
        """All entries of all fields, in field order."""
        return [entry for analysis in self.expressions for entry in analysis.entries]

    @computed_field
    @property
    def diagnostics(self) -> List[ParseDiagnostic]:
        """All diagnostics of all fields, in field order."""
        return [diag for analysis in self.expressions for diag in analysis.diagnostics]


# ------------------------------------------------------------------
# RESPONSE MODELS
# ------------------------------------------------------------------

class SbomReportResponse(BaseModel):
    """
    Response payload for an uploaded SBOM.

    Attributes:
        format (str): Detected SBOM format ("syft", "spdx" or "cyclonedx").
        total_packages (int): Number of packages in the document.
        failed_expressions (int): Number of license fields that failed to parse.
        packages (List[PackageLicenseReport]): Per-package reports, in document order.
    """
    format: str
    total_packages: int
    failed_expressions: int
    packages: List[PackageLicenseReport]
