"""
Document Service - extract plain text from uploaded study material.
"""
import io
import os

import pdfplumber
from flask import current_app

from studyquest_app.core.error_handlers import ValidationError

TEXT_EXTENSIONS = ('.txt', '.md', '.markdown')
# Longer documents are truncated before they are sent to the model
MAX_DOCUMENT_CHARS = 60000


class DocumentService:

    @staticmethod
    def _is_pdf(filename: str, mimetype: str, head: bytes) -> bool:
        return (
            filename.lower().endswith('.pdf')
            or mimetype == 'application/pdf'
            or head.startswith(b'%PDF')
        )

    @staticmethod
    def _extract_pdf_text(file_bytes: bytes) -> str:
        extracted = []
        with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
            for page in pdf.pages:
                text = page.extract_text()
                if text:
                    extracted.append(text)
        return "\n".join(extracted).strip()

    @staticmethod
    def extract_text(file_storage) -> str:
        """
        Return the text of an uploaded PDF or plain-text file.

        Raises ValidationError for unsupported, unreadable or empty files.
        """
        filename = os.path.basename(file_storage.filename or 'document')
        mimetype = (file_storage.mimetype or '').lower()
        file_bytes = file_storage.read()
        if not file_bytes:
            raise ValidationError('Uploaded file is empty')

        if DocumentService._is_pdf(filename, mimetype, file_bytes[:5]):
            try:
                text = DocumentService._extract_pdf_text(file_bytes)
            except Exception as e:  # pdfplumber surfaces pdfminer parser errors of several types
                current_app.logger.warning(f"DocumentService: PDF '{filename}' không đọc được: {e}")
                raise ValidationError('Uploaded PDF could not be read') from e
        elif mimetype.startswith('text/') or filename.lower().endswith(TEXT_EXTENSIONS):
            text = file_bytes.decode('utf-8', errors='replace').strip()
        else:
            raise ValidationError('Unsupported file type; upload a PDF or a text file')

        if not text:
            raise ValidationError('No readable text found in the uploaded file')

        if len(text) > MAX_DOCUMENT_CHARS:
            current_app.logger.info(
                f"DocumentService: '{filename}' có {len(text)} ký tự, cắt còn {MAX_DOCUMENT_CHARS}."
            )
            text = text[:MAX_DOCUMENT_CHARS]
        return text
