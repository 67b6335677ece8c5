
#backend/app/core/pdf_parser.py
from io import BytesIO
from typing import Union
from pathlib import Path

import docx
from PyPDF2 import PdfReader

PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class UnsupportedFileType(ValueError):
    pass


class TextExtractionError(ValueError):
    pass


class PDFParser:
    """Handles PDF text extraction."""

    def extract_text(self, file: Union[Path, bytes]) -> str:
        if isinstance(file, Path):
            with open(file, "rb") as f:
                return self._read(f)
        elif isinstance(file, bytes):
            return self._read(BytesIO(file))
        else:
            raise ValueError("Unsupported file type for PDFParser.")

    def _read(self, stream) -> str:
        try:
            reader = PdfReader(stream)
            return self._extract_all(reader)
        except Exception as e:
            # malformed files surface as PdfReadError, KeyError, ValueError and others
            raise TextExtractionError(f"Unreadable PDF: {e}") from e

    def _extract_all(self, reader: PdfReader) -> str:
        text = ""
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text += page_text + "\n"
        return text.strip()


class ResumeTextExtractor:
    """Picks an extraction strategy from the resume's declared MIME type."""

    def __init__(self, pdf_parser: PDFParser | None = None):
        self.pdf = pdf_parser or PDFParser()

    def extract(self, content: bytes, file_type: str, file_name: str = "") -> str:
        kind = self.detect(file_type, file_name)
        if kind == "pdf":
            return self.pdf.extract_text(content)
        if kind == "docx":
            return self._extract_docx(content)
        return self._decode_text(content)

    @staticmethod
    def is_pdf(file_type: str) -> bool:
        return "pdf" in (file_type or "").lower()

    def detect(self, file_type: str, file_name: str = "") -> str:
        ft = (file_type or "").lower().split(";")[0].strip()
        name = (file_name or "").lower()
        if ft in PDF_TYPES or self.is_pdf(ft):
            return "pdf"
        if ft in DOCX_TYPES or (not ft and name.endswith(".docx")):
            return "docx"
        if ft.startswith("text/") or (not ft and name.endswith(".txt")):
            return "text"
        raise UnsupportedFileType(f"Unsupported file type: {file_type or 'unknown'}")

    @staticmethod
    def _extract_docx(content: bytes) -> str:
        try:
            d = docx.Document(BytesIO(content))
        except Exception as e:
            # python-docx surfaces zip/xml errors of several types
            raise TextExtractionError(f"Unreadable Word document: {e}") from e
        return "\n".join(p.text for p in d.paragraphs).strip()

    @staticmethod
    def _decode_text(content: bytes) -> str:
        return content.decode("utf-8", errors="replace").replace("\x00", " ").strip()
