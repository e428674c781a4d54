"""Validation and masking of Brazilian documents, phones, CEPs and amounts."""

from collections.abc import Callable

from fastapi import APIRouter

from src.api.schemas.documents import (
    FormatKind,
    FormatRequest,
    FormatResponse,
    ValidateDocumentRequest,
    ValidateDocumentResponse,
)
from src.domain import documents

router = APIRouter(prefix="/documents", tags=["documents"])

FORMATTERS: dict[FormatKind, Callable[[str], str]] = {
    FormatKind.PHONE: documents.mask_phone,
    FormatKind.CPF: documents.mask_cpf,
    FormatKind.CNPJ: documents.mask_cnpj,
    FormatKind.CPF_OR_CNPJ: documents.mask_cpf_or_cnpj,
    FormatKind.CEP: documents.mask_cep,
    FormatKind.CURRENCY: documents.mask_currency,
}


@router.post("/validate", response_model=ValidateDocumentResponse)
async def validate_document(body: ValidateDocumentRequest) -> ValidateDocumentResponse:
    """Check a CPF or CNPJ and return it masked."""
    result = documents.validate_cpf_or_cnpj(body.value)
    return ValidateDocumentResponse(
        valid=result.valid,
        type=result.type,
        masked=documents.mask_cpf_or_cnpj(body.value),
    )


@router.post("/format", response_model=FormatResponse)
async def format_value(body: FormatRequest) -> FormatResponse:
    return FormatResponse(
        kind=body.kind,
        formatted=FORMATTERS[body.kind](body.value),
        digits=documents.unmask(body.value),
    )
