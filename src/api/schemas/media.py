"""Bodies of the media upload and PDF export endpoints."""

from pydantic import BaseModel, Field


class MediaUploadResponse(BaseModel):
    path: str = Field(..., examples=["1718000000000-a1b2c3d4e5.jpg"])
    public_url: str


class PdfExportResponse(BaseModel):
    public_url: str
    share_url: str = Field(..., examples=["https://wa.me/5574981138033?text=Ol%C3%A1"])
    file_name: str = Field(..., examples=["Pedido_00012_1718000000000.pdf"])


class PdfCleanupResponse(BaseModel):
    message: str
    total_files: int
    deleted: int
    deleted_files: list[str]
