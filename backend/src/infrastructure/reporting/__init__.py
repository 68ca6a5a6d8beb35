"""Document rendering and email delivery."""

from .pdf_generator import LeaseDocumentGenerator
from .smtp_client import EmailClient

__all__ = ["LeaseDocumentGenerator", "EmailClient"]
