"""
PDF Client - PDF text extraction for the read_file tool

Uses pdfplumber so the model can read local PDF documents the same way
it reads plain text files.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

import pdfplumber

logger = logging.getLogger(__name__)


def is_pdf(file_path: Union[str, Path]) -> bool:
    """True when the path has a .pdf extension."""
    return Path(file_path).suffix.lower() == ".pdf"


def extract_text_from_pdf(file_path: Union[str, Path]) -> str:
    """
    Extract all text content from a PDF file.

    Pages after the first are preceded by a "--- Page N ---" marker.
    Pages without extractable text (scanned images) are skipped.

    Args:
        file_path: Path to the PDF file

    Returns:
        Extracted text, empty when nothing could be extracted

    Raises:
        FileNotFoundError: If the PDF file doesn't exist
        ValueError: If the file is not a PDF
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"PDF file not found: {file_path}")

    if not is_pdf(file_path):
        raise ValueError(f"File is not a PDF: {file_path.suffix}")

    logger.info(f"📄 Extracting text from PDF: {file_path.name}")

    chunks: List[str] = []
    with pdfplumber.open(file_path) as pdf:
        if len(pdf.pages) == 0:
            logger.warning("⚠️  PDF has no pages")
            return ""

        for page_num, page in enumerate(pdf.pages, start=1):
            page_text = page.extract_text()
            if not page_text:
                logger.debug(f"Page {page_num} has no extractable text")
                continue
            if page_num > 1:
                chunks.append(f"\n--- Page {page_num} ---\n")
            chunks.append(page_text)

    full_text = clean_extracted_text("\n".join(chunks))
    if not full_text:
        logger.warning("⚠️  No text extracted from PDF (might be scanned images)")
        return ""

    logger.info(f"✅ Extracted {len(full_text)} characters from PDF")
    return full_text


def clean_extracted_text(text: str) -> str:
    """
    Collapse blank-line runs and repeated spaces left by extraction.

    Args:
        text: Raw extracted text

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r" {2,}", " ", text)
    return text.strip()
