"""SBOM license reporting: SPDX expression parsing for scanner output."""

__version__ = "0.1.0"
