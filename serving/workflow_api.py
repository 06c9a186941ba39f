"""
Workflow API for PDF merging.

Provides endpoints for:
- Merging uploaded PDFs into one document with a generated outline
- Inspecting a PDF (pages, outline)
- Listing stored merge records
"""
import logging
from typing import List

from fastapi import FastAPI, File, UploadFile, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy.orm import Session

from api.dependencies import get_db, get_merge_service
from api.schemas import ErrorResponse, InspectResponse, MergeRecordResponse
from core.exceptions import MergeError, MergeInputError, SerializationError
from config.settings import settings
from data.database import init_database
from services.merge_service import MergeService
from utils.pdf_utils import get_pdf_summary
from .storage_service import MergeStorageService

logger = logging.getLogger(__name__)


# Create FastAPI app
workflow_app = FastAPI(
    title="PDF Merge API",
    description="Merge PDF documents into one, with one bookmark per input",
    version="1.0.0"
)


# Initialize database on startup
@workflow_app.on_event("startup")
async def startup_event():
    """Configure logging and initialize database tables on startup."""
    logging.basicConfig(level=settings.log_level.upper())
    init_database()
    logger.info("Merge API initialized")


MERGE_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request (no files, limits exceeded)"},
    422: {"model": ErrorResponse, "description": "Unreadable or structurally unusable input"},
    500: {"model": ErrorResponse, "description": "Merged document could not be written"},
}
INSPECT_ERROR_RESPONSES = {422: MERGE_ERROR_RESPONSES[422]}


def merge_error_to_http(error: MergeError) -> HTTPException:
    """Map a merge error onto an HTTP error with a structured detail."""
    if isinstance(error, MergeInputError):
        status_code = 400
    elif isinstance(error, SerializationError):
        status_code = 500
    else:
        status_code = 422
    return HTTPException(status_code=status_code, detail=error.to_dict())


@workflow_app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok", "message": "Hello, docmerge"}


@workflow_app.post("/merge", responses=MERGE_ERROR_RESPONSES)
async def merge_documents(
    files: List[UploadFile] = File(..., description="PDF files in merge order"),
    store_to_db: bool = Query(False, description="Store a merge record to database"),
    db: Session = Depends(get_db),
    service: MergeService = Depends(get_merge_service)
):
    """
    Merge uploaded PDFs into one PDF.

    Pages keep upload order; the output outline has one bookmark per
    uploaded file pointing at its first page.

    Args:
        files: PDF files, order is significant
        store_to_db: Whether to persist a merge record
        db: Database session
        service: Merge service

    Returns:
        The merged PDF (application/pdf)
    """
    uploads = [
        (file.filename or f"input_{index}.pdf", await file.read())
        for index, file in enumerate(files)
    ]

    try:
        outcome = await run_in_threadpool(
            service.merge_files, uploads, db, store_to_db
        )
    except MergeError as e:
        logger.warning(f"Merge failed: {e.to_dict()}")
        raise merge_error_to_http(e)

    headers = {
        "Content-Disposition": 'attachment; filename="merged.pdf"',
        "X-Page-Count": str(outcome.page_count),
        "X-Input-Count": str(outcome.input_count),
    }
    if outcome.record_id:
        headers["X-Merge-Record-Id"] = outcome.record_id

    return Response(
        content=outcome.pdf_bytes,
        media_type="application/pdf",
        headers=headers
    )


@workflow_app.post(
    "/inspect", response_model=InspectResponse, responses=INSPECT_ERROR_RESPONSES
)
async def inspect_document(file: UploadFile = File(...)):
    """
    Report page geometry and outline of a PDF.

    Args:
        file: PDF file

    Returns:
        Page count, page sizes and outline entries
    """
    content = await file.read()

    try:
        summary = await run_in_threadpool(get_pdf_summary, content)
    except MergeError as e:
        e.filename = file.filename
        raise merge_error_to_http(e)

    return InspectResponse(filename=file.filename, **summary)


@workflow_app.get("/merges", response_model=List[MergeRecordResponse])
async def list_merges(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """
    List stored merge records, newest first.

    Args:
        limit: Maximum number of records to return
        offset: Number of records to skip
        db: Database session
    """
    storage = MergeStorageService(db)
    return [record.to_dict() for record in storage.list_records(limit=limit, offset=offset)]


@workflow_app.get("/merges/{record_id}", response_model=MergeRecordResponse)
async def get_merge(record_id: str, db: Session = Depends(get_db)):
    """Retrieve one merge record."""
    record = MergeStorageService(db).get_record(record_id)

    if not record:
        raise HTTPException(status_code=404, detail="Merge record not found")

    return record.to_dict()


@workflow_app.delete("/merges/{record_id}")
async def delete_merge(record_id: str, db: Session = Depends(get_db)):
    """Delete one merge record."""
    if not MergeStorageService(db).delete_record(record_id):
        raise HTTPException(status_code=404, detail="Merge record not found")

    return {"deleted": record_id}


@workflow_app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "PDF Merge API",
        "version": "1.0.0",
        "endpoints": {
            "health": "GET /health",
            "merge": "POST /merge",
            "inspect": "POST /inspect",
            "list_merges": "GET /merges",
            "get_merge": "GET /merges/{record_id}",
            "delete_merge": "DELETE /merges/{record_id}"
        }
    }


# Export app for uvicorn
app = workflow_app
