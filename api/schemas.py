"""
Pydantic schemas for API request/response validation.
"""
from typing import List, Optional
from pydantic import BaseModel


class MergeRecordResponse(BaseModel):
    """Response for a stored merge record."""
    id: str
    filenames: List[str]
    input_count: int
    total_pages: int
    bookmark_titles: List[str]
    output_size: int
    created_at: Optional[str] = None


class OutlineEntry(BaseModel):
    """One outline (bookmark) entry of a PDF."""
    level: int
    title: str
    page: int


class PageInfo(BaseModel):
    """Geometry of one page."""
    page_number: int
    width: float
    height: float
    rotation: int = 0


class InspectResponse(BaseModel):
    """Response for PDF inspection."""
    filename: Optional[str] = None
    page_count: int
    pages: List[PageInfo]
    outline: List[OutlineEntry]


class ErrorDetail(BaseModel):
    """Structured merge error."""
    error: str
    message: str
    input_index: Optional[int] = None
    filename: Optional[str] = None
    role: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned by /merge and /inspect."""
    detail: ErrorDetail
