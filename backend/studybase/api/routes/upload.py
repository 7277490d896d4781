"""Upload endpoints for document ingestion."""
from typing import Annotated

from fastapi import APIRouter, Depends, File, Header, HTTPException, UploadFile

from studybase.api.schemas import SegmentPreviewResponse, UploadResponse
from studybase.exceptions import (
    ExtractionError,
    ServiceUnavailableError,
    StudybaseError,
    ValidationError,
)
from studybase.prompts import SAMPLE_MATERIAL
from studybase.services.entry_upload_service import EntryUploadService
from studybase.services.segmenter import Segmenter
from studybase.utils.logger import logger

router = APIRouter()


def get_upload_service() -> EntryUploadService:
    """Get upload service from main app."""
    from studybase.main import upload_service
    if upload_service is None:
        raise HTTPException(status_code=503, detail="Upload service not initialized")
    return upload_service


def get_segmenter() -> Segmenter:
    """Get the configured segmenter from main app."""
    from studybase.main import segmenter
    if segmenter is None:
        raise HTTPException(status_code=503, detail="Segmenter not initialized")
    return segmenter


def get_user_id(x_user_id: Annotated[str, Header()] = "anonymous") -> str:
    """Resolve the calling user from the X-User-Id header."""
    return x_user_id


def to_http_error(e: StudybaseError) -> HTTPException:
    """Map ingestion errors to HTTP responses."""
    if isinstance(e, (ValidationError, ExtractionError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ServiceUnavailableError):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=500, detail=f"Document processing failed: {str(e)}")


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: Annotated[UploadFile, File(...)],
    upload_service: EntryUploadService = Depends(get_upload_service),
    user_id: str = Depends(get_user_id),
):
    """
    Upload a PDF and turn it into knowledge entries.

    Args:
        file: PDF file to upload
        upload_service: Upload service instance
        user_id: Owner of the resulting entries

    Returns:
        UploadResponse with chunk, entry and per-type counts
    """
    try:
        content = await file.read()
        result = await upload_service.upload_pdf(content, file.filename or "", user_id)
        return UploadResponse(**result)

    except StudybaseError as e:
        raise to_http_error(e)

    except Exception as e:
        logger.error(f"Unexpected error uploading document: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process document")


@router.post("/sample-upload", response_model=UploadResponse)
async def upload_sample(
    skip_ai: bool = False,
    upload_service: EntryUploadService = Depends(get_upload_service),
    user_id: str = Depends(get_user_id),
):
    """
    Ingest the bundled sample material.

    Args:
        skip_ai: Store placeholder entries without classification
        upload_service: Upload service instance
        user_id: Owner of the resulting entries
    """
    try:
        result = await upload_service.upload_sample(user_id, skip_ai=skip_ai)
        message = (
            "Sample entries created (classification skipped)"
            if skip_ai
            else "Sample entries created with classification"
        )
        return UploadResponse(**result, message=message)

    except StudybaseError as e:
        raise to_http_error(e)

    except Exception as e:
        logger.error(f"Unexpected error ingesting sample material: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process sample material")


@router.get("/segment-preview", response_model=SegmentPreviewResponse)
async def segment_preview(segmenter: Segmenter = Depends(get_segmenter)):
    """Report how many chunks the sample material segments into with the configured settings."""
    return SegmentPreviewResponse(
        usage="POST /api/sample-upload to create sample entries (?skip_ai=true skips classification)",
        sample_chunks=len(segmenter.segment(SAMPLE_MATERIAL)),
    )
