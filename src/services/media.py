"""Uploads of testimonial videos and product images, and PDF exports.

PDF exports are stored under a unique, timestamped name and returned with a
WhatsApp link that sends the client a message pointing at the file. Exports
older than ``pdf_max_age_days`` are removed by :meth:`MediaService.cleanup_pdfs`.
"""

import mimetypes
import secrets
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Final

from loguru import logger

from src.core.config import BusinessConfig, StorageConfig
from src.core.exceptions import NotFoundError, ValidationError
from src.core.observability import trace_operation
from src.domain.sharing import ExportDocumentType, build_share_url, pdf_file_name
from src.infrastructure.storage.blob import BlobStorage

PDF_CONTENT_TYPE: Final[str] = "application/pdf"
PDF_MAGIC: Final[bytes] = b"%PDF"
MEGABYTE: Final[int] = 1024 * 1024


@dataclass(frozen=True, slots=True)
class BucketRule:
    """What a media bucket accepts."""

    content_type_prefix: str
    max_bytes: int
    name_prefix: str = ""


MEDIA_BUCKETS: Final[dict[str, BucketRule]] = {
    "video-testimonials": BucketRule("video/", 50 * MEGABYTE, name_prefix="video-"),
    "product-images": BucketRule("image/", 5 * MEGABYTE),
}


@dataclass(frozen=True, slots=True)
class StoredMedia:
    path: str
    public_url: str


@dataclass(frozen=True, slots=True)
class PdfExport:
    public_url: str
    share_url: str
    file_name: str


@dataclass(frozen=True, slots=True)
class CleanupResult:
    total_files: int
    deleted_files: list[str]
    max_age_days: int


def _extension_for(content_type: str) -> str:
    extension = mimetypes.guess_extension(content_type) or ""
    return extension.lstrip(".") or content_type.rsplit("/", 1)[-1].split("+")[0]


class MediaService:
    """Stores media and PDF exports in blob storage."""

    def __init__(
        self,
        storage: BlobStorage,
        storage_config: StorageConfig,
        business_config: BusinessConfig,
    ) -> None:
        self.storage = storage
        self.storage_config = storage_config
        self.business_config = business_config

    @staticmethod
    def _media_rule(bucket: str, content_type: str | None) -> tuple[BucketRule, str]:
        rule = MEDIA_BUCKETS.get(bucket)
        if rule is None:
            raise NotFoundError("Unknown media bucket", context={"bucket": bucket})

        media_type = (content_type or "").split(";")[0].strip().lower()
        if not media_type.startswith(rule.content_type_prefix):
            raise ValidationError(
                f"Only {rule.content_type_prefix}* files are accepted",
                context={"content_type": media_type},
            )
        return rule, media_type

    def upload_limit(self, bucket: str, content_type: str | None) -> int:
        """Largest upload accepted by ``bucket``, checked before the body is read.

        Raises:
            NotFoundError: The bucket does not accept uploads.
            ValidationError: The content type is not accepted by the bucket.
        """
        rule, _ = self._media_rule(bucket, content_type)
        return rule.max_bytes

    @property
    def pdf_limit(self) -> int:
        return self.storage_config.max_pdf_bytes

    async def upload_media(
        self, bucket: str, data: bytes, content_type: str | None
    ) -> StoredMedia:
        """Store a video or image under a generated unique name.

        Args:
            bucket: ``video-testimonials`` or ``product-images``.
            data: File contents.
            content_type: MIME type sent by the client.

        Returns:
            StoredMedia: Object path and public URL.

        Raises:
            NotFoundError: The bucket does not accept uploads.
            ValidationError: Empty file, wrong type or too large.
        """
        rule, media_type = self._media_rule(bucket, content_type)
        if not data:
            raise ValidationError("Empty file")
        if len(data) > rule.max_bytes:
            raise ValidationError(
                f"File exceeds the {rule.max_bytes // MEGABYTE} MB limit",
                context={"size": len(data), "max_bytes": rule.max_bytes},
            )

        name = (
            f"{rule.name_prefix}{int(time.time() * 1000)}-{secrets.token_hex(5)}."
            f"{_extension_for(media_type)}"
        )
        path = await self.storage.upload(bucket, name, data, media_type)
        return StoredMedia(path=path, public_url=self.storage.public_url(bucket, path))

    async def export_pdf(
        self,
        data: bytes,
        document_type: ExportDocumentType,
        document_number: str,
        client_name: str,
        client_phone: str | None = None,
    ) -> PdfExport:
        """Store a generated order or quote PDF and build its share link.

        Args:
            data: PDF bytes.
            document_type: Order or quote.
            document_number: Number including its ``PED``/``ORC`` prefix.
            client_name: Used in the greeting of the share message.
            client_phone: Chat target; the company number is used when missing.

        Returns:
            PdfExport: Public URL, WhatsApp share URL and stored file name.

        Raises:
            ValidationError: The body is not a PDF or is too large.
        """
        if not data.startswith(PDF_MAGIC):
            raise ValidationError("Body is not a PDF document")
        if len(data) > self.storage_config.max_pdf_bytes:
            raise ValidationError(
                "PDF is too large",
                context={
                    "size": len(data),
                    "max_bytes": self.storage_config.max_pdf_bytes,
                },
            )

        bucket = self.storage_config.pdf_bucket
        file_name = pdf_file_name(
            document_type, document_number, int(time.time() * 1000)
        )
        with trace_operation("pdf.export", document_type=document_type.value):
            path = await self.storage.upload(bucket, file_name, data, PDF_CONTENT_TYPE)

        public_url = self.storage.public_url(bucket, path)
        share_url = build_share_url(
            public_url,
            document_type,
            document_number,
            client_name,
            client_phone,
            self.business_config.whatsapp_number,
        )
        logger.info(
            "Exported {} {} as {}", document_type.value, document_number, file_name
        )
        return PdfExport(
            public_url=public_url, share_url=share_url, file_name=file_name
        )

    async def cleanup_pdfs(self, now: datetime | None = None) -> CleanupResult:
        """Delete PDF exports older than the configured maximum age.

        Args:
            now: Reference time, defaults to the current time.

        Returns:
            CleanupResult: Number of files seen and names of those deleted.
        """
        bucket = self.storage_config.pdf_bucket
        max_age_days = self.storage_config.pdf_max_age_days
        cutoff = (now or datetime.now(UTC)) - timedelta(days=max_age_days)

        objects = await self.storage.list(bucket)
        expired = [obj.name for obj in objects if obj.created_at < cutoff]
        deleted = await self.storage.remove(bucket, expired) if expired else []

        logger.info(
            "PDF cleanup removed {} of {} files",
            len(deleted),
            len(objects),
            max_age_days=max_age_days,
        )
        return CleanupResult(
            total_files=len(objects), deleted_files=deleted, max_age_days=max_age_days
        )
