"""Media uploads, PDF exports and the files they are served from.

Uploads take the raw file as the request body with its ``Content-Type``
header, the way the browser's ``fetch`` sends a ``Blob``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import FileResponse

from src.api.dependencies import AdminPrincipal, Principal, get_media_service
from src.api.schemas.media import (
    MediaUploadResponse,
    PdfCleanupResponse,
    PdfExportResponse,
)
from src.core.exceptions import NotFoundError, ValidationError
from src.domain.sharing import ExportDocumentType
from src.infrastructure.storage import (
    LocalBlobStorage,
    get_blob_storage,
    guess_content_type,
)
from src.services.media import MediaService

router = APIRouter(tags=["media"])
files_router = APIRouter(tags=["files"])

MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]


async def read_limited_body(request: Request, max_bytes: int) -> bytes:
    """Read the request body, refusing it as soon as it exceeds ``max_bytes``.

    A declared ``Content-Length`` above the limit is refused before reading.

    Raises:
        ValidationError: If the body is larger than ``max_bytes``.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise _body_too_large(int(declared), max_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise _body_too_large(len(body), max_bytes)
    return bytes(body)


def _body_too_large(size: int, max_bytes: int) -> ValidationError:
    return ValidationError(
        "Request body is too large", context={"size": size, "max_bytes": max_bytes}
    )


@router.post(
    "/media/{bucket}",
    response_model=MediaUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_media(
    bucket: str,
    request: Request,
    service: MediaServiceDep,
    _principal: Principal,
) -> MediaUploadResponse:
    content_type = request.headers.get("content-type")
    limit = service.upload_limit(bucket, content_type)
    data = await read_limited_body(request, limit)
    stored = await service.upload_media(bucket, data, content_type)
    return MediaUploadResponse(path=stored.path, public_url=stored.public_url)


@router.post(
    "/pdfs",
    response_model=PdfExportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def export_pdf(
    request: Request,
    service: MediaServiceDep,
    _principal: Principal,
    document_type: Annotated[ExportDocumentType, Query()],
    document_number: Annotated[str, Query(min_length=1, max_length=30)],
    client_name: Annotated[str, Query(max_length=255)] = "",
    client_phone: Annotated[str | None, Query(max_length=20)] = None,
) -> PdfExportResponse:
    """Store an order or quote PDF and return a WhatsApp link to share it."""
    export = await service.export_pdf(
        await read_limited_body(request, service.pdf_limit),
        document_type,
        document_number,
        client_name,
        client_phone,
    )
    return PdfExportResponse(
        public_url=export.public_url,
        share_url=export.share_url,
        file_name=export.file_name,
    )


@router.post("/pdfs/cleanup", response_model=PdfCleanupResponse)
async def cleanup_pdfs(
    service: MediaServiceDep, _admin: AdminPrincipal
) -> PdfCleanupResponse:
    result = await service.cleanup_pdfs()
    deleted = len(result.deleted_files)
    return PdfCleanupResponse(
        message=(
            f"Removed {deleted} PDF files older than {result.max_age_days} days"
            if deleted
            else "No old files to remove"
        ),
        total_files=result.total_files,
        deleted=deleted,
        deleted_files=result.deleted_files,
    )


@files_router.get("/files/{bucket}/{name}", response_class=FileResponse)
async def serve_file(
    bucket: str,
    name: str,
    storage: Annotated[LocalBlobStorage, Depends(get_blob_storage)],
) -> FileResponse:
    """Serve a stored object; these URLs are what ``public_url`` points at."""
    path = storage.local_path(bucket, name)
    if not path.is_file():
        raise NotFoundError("File not found", context={"bucket": bucket, "name": name})
    return FileResponse(path, media_type=guess_content_type(name))
