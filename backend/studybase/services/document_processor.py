"""Text extraction from uploaded PDF documents."""
import io

import pdfplumber

from studybase.exceptions import ExtractionError
from studybase.utils.logger import logger


def extract_text_from_pdf(content: bytes) -> str:
    """
    Extract text from a PDF using pdfplumber.

    Args:
        content: Raw PDF bytes

    Returns:
        Text of all pages joined by newlines

    Raises:
        ExtractionError: If the PDF cannot be opened or read
    """
    pages_text = []

    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page_num, page in enumerate(pdf.pages, 1):
                try:
                    pages_text.append(page.extract_text() or "")
                except Exception as e:
                    logger.warning(f"Error extracting text from PDF page {page_num}: {str(e)}")
                    pages_text.append("")
    except Exception as e:
        logger.error(f"Error opening PDF file: {str(e)}")
        raise ExtractionError(f"Failed to process PDF file: {str(e)}") from e

    text = "\n".join(pages_text)
    logger.info(
        f"Extracted {len(text):,} characters from {len(pages_text)} pages"
    )
    return text
