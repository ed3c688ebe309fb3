"""
EDINET Filing Downloader Module

Lists securities reports through the EDINET API v2 and downloads their XBRL
archives for statement extraction.
"""

__version__ = "1.0.0"

from .models import DocumentEntry
from .edinet_client import EdinetClient, EdinetError
from .filing_source import EdinetDocumentPayload, EdinetFilingSource

__all__ = [
    "DocumentEntry",
    "EdinetClient",
    "EdinetError",
    "EdinetDocumentPayload",
    "EdinetFilingSource",
]
