# =============================================================================
# app/routers/transfer.py - CSV Import/Export Endpoints
# =============================================================================
# Handles CSV uploads (import) and downloads (export) of songs.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import PlainTextResponse, Response

from app.config import settings
from app.dependencies import SongRepoDep
from app.exceptions import FileTooLargeError, InvalidFileTypeError
from core.models.song import ImportResult
from core.services.transfer_service import EXAMPLE_CSV, EXPORT_MEDIA_TYPE, TransferService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/import", response_model=ImportResult, status_code=201)
async def import_songs(
    file: Annotated[UploadFile, File(description="CSV file to import")],
    repo: SongRepoDep,
):
    """
    Import songs from a CSV file.

    This endpoint:
    1. Validates the file (extension, size)
    2. Decodes it as UTF-8
    3. Parses and validates every row
    4. Inserts all songs in one batch

    A format or row error aborts the import before anything is written;
    the error message names the offending line.
    """
    filename = file.filename or "import.csv"
    file_ext = "." + filename.split(".")[-1].lower() if "." in filename else ""

    if file_ext not in settings.allowed_extensions_list:
        raise InvalidFileTypeError(filename, settings.allowed_extensions_list)

    content = await file.read()
    file_size_bytes = len(content)

    if file_size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(file_size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    logger.info(f"Processing import: {filename} ({file_size_bytes} bytes)")

    text = TransferService.decode(content, filename)
    return TransferService.import_csv(repo, text)


@router.get("/import/example", response_class=PlainTextResponse)
async def import_example():
    """A small CSV file showing the expected columns and quoting."""
    return PlainTextResponse(EXAMPLE_CSV, media_type=EXPORT_MEDIA_TYPE)


@router.get("/export")
async def export_songs(repo: SongRepoDep):
    """
    Download all songs as CSV.

    Every column of every song is written, quoted, even when empty.
    """
    csv_text = TransferService.export_csv(repo)

    return Response(
        content=csv_text.encode("utf-8"),
        media_type=EXPORT_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}"',
        },
    )
