from __future__ import annotations

import logging
from pathlib import Path

import docx
import pdfplumber
from pypdf import PdfReader

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".pdf", ".docx"}


class ResumeParser:
    def extract_text(self, file_path: str) -> str:
        suffix = Path(file_path).suffix.lower()
        if suffix == ".pdf":
            return self._read_pdf(file_path)
        if suffix == ".docx":
            return self._read_docx(file_path)
        raise ValueError(f"Unsupported resume file type: {suffix or file_path}")

    def _read_pdf(self, file_path: str) -> str:
        texts: list[str] = []
        try:
            with pdfplumber.open(file_path) as pdf:
                for page in pdf.pages:
                    texts.append(page.extract_text() or "")
        except Exception as exc:
            logger.warning("pdfplumber could not read %s: %s", file_path, exc)
            texts = []
        if any(t.strip() for t in texts):
            return "\n".join(texts).strip()

        # Some generated PDFs only yield text through pypdf.
        with open(file_path, "rb") as handle:
            reader = PdfReader(handle)
            texts = [page.extract_text() or "" for page in reader.pages]
        return "\n".join(texts).strip()

    def _read_docx(self, file_path: str) -> str:
        document = docx.Document(file_path)
        return "\n".join(paragraph.text for paragraph in document.paragraphs).strip()
