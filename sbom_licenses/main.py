from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sbom_licenses import __version__
from sbom_licenses.controllers.sbom import router as sbom_router
from sbom_licenses.utility.config import ALLOWED_ORIGINS

app = FastAPI(
    title="SBOM License Reporter",
    version=__version__,
)

# Main API
app.include_router(sbom_router, prefix="/api", tags=["SBOM"])

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"message": "SBOM License Reporter is running"}
