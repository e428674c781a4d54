"""Bodies of the document validation and formatting endpoints."""

from enum import StrEnum

from pydantic import BaseModel, Field


class FormatKind(StrEnum):
    PHONE = "phone"
    CPF = "cpf"
    CNPJ = "cnpj"
    CPF_OR_CNPJ = "cpf_or_cnpj"
    CEP = "cep"
    CURRENCY = "currency"


class ValidateDocumentRequest(BaseModel):
    value: str = Field(..., max_length=64, examples=["529.982.247-25"])


class ValidateDocumentResponse(BaseModel):
    valid: bool
    type: str | None = Field(default=None, examples=["cpf", "cnpj"])
    masked: str


class FormatRequest(BaseModel):
    kind: FormatKind
    value: str = Field(..., max_length=64, examples=["11987654321"])


class FormatResponse(BaseModel):
    kind: FormatKind
    formatted: str
    digits: str
