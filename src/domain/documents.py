"""Masks and validators for Brazilian documents, phones, postal codes and BRL.

Every mask strips the input down to its digits first and then formats them
progressively, so partially typed input produces a partial mask and a mask
applied to its own output returns the same string:

    >>> mask_cpf("1234567")
    '123.456.7'
    >>> mask_cpf(mask_cpf("12345678901"))
    '123.456.789-01'

Validators never raise. Anything that is not a well-formed document simply
validates as ``False``.

Document numbers (orders ``PED`` and quotes ``ORC``) are a prefix followed
by a five digit, zero padded sequence.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Final, Literal

type DocumentType = Literal["cpf", "cnpj"]

CPF_LENGTH: Final[int] = 11
CNPJ_LENGTH: Final[int] = 14
CEP_LENGTH: Final[int] = 8
PHONE_MAX_LENGTH: Final[int] = 11
DOCUMENT_NUMBER_WIDTH: Final[int] = 5
ORDER_PREFIX: Final[str] = "PED"
QUOTE_PREFIX: Final[str] = "ORC"

CURRENCY_SYMBOL: Final[str] = "R$"
NBSP: Final[str] = "\u00a0"
CENTS: Final[Decimal] = Decimal("0.01")

_NON_DIGITS = re.compile(r"\D")
# Weights for the second CNPJ check digit; the first digit uses the tail
_CNPJ_WEIGHTS: Final[tuple[int, ...]] = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


@dataclass(frozen=True, slots=True)
class DocumentValidation:
    """Outcome of validating a value that may be a CPF or a CNPJ."""

    valid: bool
    type: DocumentType | None


def unmask(value: str) -> str:
    """Remove every non-digit character."""
    return _NON_DIGITS.sub("", value)


def mask_phone(value: str) -> str:
    """Format a phone as ``(DD) XXXX-XXXX`` or, for mobiles, ``(DD) XXXXX-XXXX``."""
    digits = unmask(value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 6:
        return f"({digits[:2]}) {digits[2:]}"
    if len(digits) <= 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:PHONE_MAX_LENGTH]}"


def mask_cpf(value: str) -> str:
    """Format as ``XXX.XXX.XXX-XX``, truncating to 11 digits."""
    digits = unmask(value)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:CPF_LENGTH]}"


def mask_cnpj(value: str) -> str:
    """Format as ``XX.XXX.XXX/XXXX-XX``, truncating to 14 digits."""
    digits = unmask(value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 5:
        return f"{digits[:2]}.{digits[2:]}"
    if len(digits) <= 8:
        return f"{digits[:2]}.{digits[2:5]}.{digits[5:]}"
    if len(digits) <= 12:
        return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:]}"
    return (
        f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-"
        f"{digits[12:CNPJ_LENGTH]}"
    )


def mask_cpf_or_cnpj(value: str) -> str:
    """Apply the CPF mask up to 11 digits and the CNPJ mask beyond."""
    if len(unmask(value)) <= CPF_LENGTH:
        return mask_cpf(value)
    return mask_cnpj(value)


def mask_cep(value: str) -> str:
    """Format a postal code as ``XXXXX-XXX``."""
    digits = unmask(value)
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:CEP_LENGTH]}"


def _all_same_digit(digits: str) -> bool:
    return len(set(digits)) == 1


def _cpf_check_digit(digits: str) -> int:
    first_weight = len(digits) + 1
    total = sum(
        int(digit) * weight
        for digit, weight in zip(digits, range(first_weight, 1, -1), strict=True)
    )
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def validate_cpf(value: str) -> bool:
    """Check the length and both mod-11 check digits of a CPF.

    Args:
        value: CPF, masked or not.

    Returns:
        bool: True for a structurally valid CPF.
    """
    digits = unmask(value)
    if len(digits) != CPF_LENGTH or _all_same_digit(digits):
        return False
    if _cpf_check_digit(digits[:9]) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10]) == int(digits[10])


def _cnpj_check_digit(digits: str) -> int:
    weights = _CNPJ_WEIGHTS[-len(digits) :]
    remainder = sum(int(d) * w for d, w in zip(digits, weights, strict=True)) % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cnpj(value: str) -> bool:
    """Check the length and both check digits of a CNPJ.

    Args:
        value: CNPJ, masked or not.

    Returns:
        bool: True for a structurally valid CNPJ.
    """
    digits = unmask(value)
    if len(digits) != CNPJ_LENGTH or _all_same_digit(digits):
        return False
    if _cnpj_check_digit(digits[:12]) != int(digits[12]):
        return False
    return _cnpj_check_digit(digits[:13]) == int(digits[13])


def validate_cpf_or_cnpj(value: str) -> DocumentValidation:
    """Detect the document type from the digit count and validate it.

    Args:
        value: CPF or CNPJ, masked or not.

    Returns:
        DocumentValidation: ``type`` is ``"cpf"`` for 11 digits, ``"cnpj"``
            for 14 and ``None`` for any other length (always invalid).
    """
    digits = unmask(value)
    if len(digits) == CPF_LENGTH:
        return DocumentValidation(valid=validate_cpf(digits), type="cpf")
    if len(digits) == CNPJ_LENGTH:
        return DocumentValidation(valid=validate_cnpj(digits), type="cnpj")
    return DocumentValidation(valid=False, type=None)


def _format_brl(amount: Decimal) -> str:
    rounded = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    integer_part, cents = f"{abs(rounded):.2f}".split(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    return f"{sign}{CURRENCY_SYMBOL}{NBSP}{grouped},{cents}"


def mask_currency(value: str | int | float | Decimal) -> str:
    """Format a value as Brazilian reais (``R$ 1.234,56``).

    Numbers are formatted as they are. Strings are treated as typed input:
    their digits are read as an amount in cents, so ``"1234"`` becomes
    ``R$ 12,34``. A string without digits yields an empty string.

    Args:
        value: Amount as a number, or raw typed input.

    Returns:
        str: The formatted amount, with a no-break space after ``R$``.
    """
    if isinstance(value, str):
        digits = unmask(value)
        if not digits:
            return ""
        return _format_brl(Decimal(int(digits)) / 100)
    if isinstance(value, float):
        # Shortest round-tripping repr, so 1.005 rounds to 1.01
        return _format_brl(Decimal(repr(value)))
    return _format_brl(Decimal(value))


def parse_currency_to_number(value: str) -> Decimal:
    """Read the digits of a masked amount as cents.

    Args:
        value: Masked amount such as ``"R$ 1.234,56"``.

    Returns:
        Decimal: The amount in reais, or ``0`` for input without digits.
    """
    digits = unmask(value or "")
    if not digits:
        return Decimal(0)
    return Decimal(int(digits)) / 100


def format_document_number(prefix: str, sequence: int) -> str:
    """Build a document number such as ``PED00012``."""
    return f"{prefix}{sequence:0{DOCUMENT_NUMBER_WIDTH}d}"


def next_document_number(prefix: str, existing: Iterable[str]) -> str:
    """Return the number following the highest existing one for ``prefix``.

    Numbers with another prefix or a non-numeric tail are ignored.

    Args:
        prefix: Document prefix, ``PED`` or ``ORC``.
        existing: Numbers already issued.

    Returns:
        str: The next document number, ``<prefix>00001`` when none exist.
    """
    highest = 0
    for number in existing:
        if not number.startswith(prefix):
            continue
        tail = number[len(prefix) :]
        if tail.isascii() and tail.isdigit():
            highest = max(highest, int(tail))
    return format_document_number(prefix, highest + 1)


def strip_document_prefix(number: str) -> str:
    """Drop the ``PED`` or ``ORC`` prefix used for display."""
    for prefix in (ORDER_PREFIX, QUOTE_PREFIX):
        if number.startswith(prefix):
            return number[len(prefix) :]
    return number
