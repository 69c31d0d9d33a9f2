"""
SBOM Controller Module.

This module exposes the license-expression core and the SBOM workflow over
HTTP:
- Analysis of a single license expression.
- Upload of an SBOM JSON document, returned as structured JSON or as CSV.
"""

from fastapi import APIRouter, Body, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from sbom_licenses.models.schemas import ExpressionAnalysis, ExpressionRequest, SbomReportResponse
from sbom_licenses.services.expression import analyze_expression
from sbom_licenses.services.license_workflow import analyze_document, build_report
from sbom_licenses.services.sbom.exporter import LAYOUTS, to_csv
from sbom_licenses.services.sbom.loader import loads_sbom
from sbom_licenses.utility.config import DEFAULT_LAYOUT

router = APIRouter()


# ------------------------------------------------------------------
# 1. SINGLE EXPRESSION
# ------------------------------------------------------------------

@router.post("/expression", response_model=ExpressionAnalysis)
def parse_expression(payload: ExpressionRequest = Body(...)) -> ExpressionAnalysis:
    """
    Tokenizes, parses and flattens one license expression.

    Unparseable expressions are not an HTTP error: the response carries the
    diagnostic and the degraded entry.

    Args:
        payload (ExpressionRequest): JSON body containing "expression".

    Returns:
        ExpressionAnalysis: Entries, canonical form and diagnostics.
    """
    return analyze_expression(payload.expression)


# ------------------------------------------------------------------
# 2. SBOM UPLOAD
# ------------------------------------------------------------------

def _read_upload(uploaded_file: UploadFile) -> dict:
    try:
        content = uploaded_file.file.read()
    finally:
        uploaded_file.file.close()
    return loads_sbom(content)


@router.post("/sbom", response_model=SbomReportResponse)
def upload_sbom(uploaded_file: UploadFile = File(...)) -> SbomReportResponse:
    """
    Analyzes the license fields of every package of an uploaded SBOM.

    Args:
        uploaded_file (UploadFile): Syft, SPDX or CycloneDX JSON document.

    Returns:
        SbomReportResponse: Per-package reports in document order.

    Raises:
        HTTPException:
            - 400: If the document is not valid JSON or not a known SBOM format.
            - 500: If an internal error occurs.
    """
    try:
        doc = _read_upload(uploaded_file)
        return build_report(doc)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve)) from ve
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}") from e


@router.post("/sbom/csv")
def upload_sbom_csv(
        uploaded_file: UploadFile = File(...),
        layout: str = Form(DEFAULT_LAYOUT),
) -> Response:
    """
    Analyzes an uploaded SBOM and returns the report as CSV.

    Args:
        uploaded_file (UploadFile): Syft, SPDX or CycloneDX JSON document.
        layout (str): "package" (one row per package) or "entry" (one row per license).

    Returns:
        Response: A text/csv attachment.

    Raises:
        HTTPException:
            - 400: If the layout is unknown or the document is invalid.
            - 500: If an internal error occurs.
    """
    if layout not in LAYOUTS:
        raise HTTPException(status_code=400, detail=f"Unknown layout '{layout}'")

    try:
        doc = _read_upload(uploaded_file)
        _, reports = analyze_document(doc)
        content = to_csv(reports, layout)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve)) from ve
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}") from e

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="licenses.csv"'},
    )
