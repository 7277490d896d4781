"""Pydantic schemas for API requests and responses."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response schema for document upload."""

    upload_id: str = Field(..., description="Unique identifier for the upload")
    doc_name: str = Field(..., description="Original document name")
    total_chunks: int = Field(..., description="Number of chunks sent to classification")
    processed_entries: int = Field(..., description="Number of entries stored")
    parse_errors: int = Field(..., description="Number of chunks that fell back to an unparsed entry")
    by_type: Dict[str, int] = Field(default_factory=dict, description="Stored entries by type")
    message: str = Field(default="Document uploaded and classified successfully")


class EntryResponse(BaseModel):
    """Schema for a stored knowledge entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    upload_id: str
    doc_name: str
    chunk_raw: str
    chunk_clean: str
    type: str
    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_template: bool
    parse_error: bool
    created_at: datetime


class EntriesResponse(BaseModel):
    """Response schema for listing entries."""

    entries: List[EntryResponse]


class SegmentPreviewResponse(BaseModel):
    """Response schema for the sample material preview."""

    usage: str
    sample_chunks: int


class QuizEntryResponse(BaseModel):
    """Entry fields needed to ask a quiz question."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    title: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class QuizResponse(BaseModel):
    """Response schema for a quiz selection."""

    entries: List[QuizEntryResponse]
    total_available: int = Field(..., description="Entries matching the requested types")
    counts_by_type: Dict[str, int] = Field(
        default_factory=dict, description="All non-template entries of the user by type"
    )
