"""WhatsApp share links and file names for exported order and quote PDFs."""

from enum import StrEnum
from typing import Final
from urllib.parse import quote

from src.domain.documents import ORDER_PREFIX, QUOTE_PREFIX, unmask

WHATSAPP_BASE_URL: Final[str] = "https://wa.me"
# Characters left as-is by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE: Final[str] = "-_.!~*'()"


class ExportDocumentType(StrEnum):
    """Kinds of document that can be exported as PDF."""

    ORDER = "order"
    QUOTE = "quote"

    @property
    def label(self) -> str:
        """Label shown to the client."""
        return "Pedido" if self is ExportDocumentType.ORDER else "Orçamento"

    @property
    def file_label(self) -> str:
        """ASCII label used in stored file names."""
        return "Pedido" if self is ExportDocumentType.ORDER else "Orcamento"

    @property
    def prefix(self) -> str:
        return ORDER_PREFIX if self is ExportDocumentType.ORDER else QUOTE_PREFIX


def display_number(document_type: ExportDocumentType, document_number: str) -> str:
    """Remove the type's prefix from a document number (``PED00012`` -> ``00012``)."""
    return document_number.replace(document_type.prefix, "", 1)


def pdf_file_name(
    document_type: ExportDocumentType, document_number: str, timestamp_ms: int
) -> str:
    """Build a unique storage name such as ``Pedido_00012_1718000000000.pdf``.

    Args:
        document_type: Order or quote.
        document_number: Number including its prefix.
        timestamp_ms: Unix time in milliseconds, keeps names unique.

    Returns:
        str: The object name inside the PDF bucket.
    """
    number = display_number(document_type, document_number)
    return f"{document_type.file_label}_{number}_{timestamp_ms}.pdf"


def build_share_message(
    pdf_url: str,
    document_type: ExportDocumentType,
    document_number: str,
    client_name: str,
) -> str:
    """Compose the message sent to the client along with the PDF link."""
    greeting = f"Olá, {client_name}!" if client_name else "Olá!"
    number = display_number(document_type, document_number)
    return (
        f"{greeting} 🙂\n\n"
        f"Segue o link do seu *{document_type.label} #{number}*:\n\n"
        f"📄 {pdf_url}\n\n"
        "Qualquer dúvida, estamos à disposição!"
    )


def build_share_url(
    pdf_url: str,
    document_type: ExportDocumentType,
    document_number: str,
    client_name: str,
    client_phone: str | None,
    fallback_phone: str,
) -> str:
    """Build a ``wa.me`` link that opens a chat with the PDF message pre-filled.

    Args:
        pdf_url: Public URL of the stored PDF.
        document_type: Order or quote.
        document_number: Number including its prefix.
        client_name: Client name used in the greeting, may be empty.
        client_phone: Client phone in any format.
        fallback_phone: Company number used when the client has no phone.

    Returns:
        str: The share link.
    """
    phone = unmask(client_phone or "") or fallback_phone
    message = build_share_message(pdf_url, document_type, document_number, client_name)
    text = quote(message, safe=_URI_COMPONENT_SAFE)
    return f"{WHATSAPP_BASE_URL}/{phone}?text={text}"
