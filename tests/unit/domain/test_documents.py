"""Unit tests for Brazilian document masks, validators and numbering."""

from decimal import Decimal

import pytest
import pytest_check

from src.domain.documents import (
    NBSP,
    DocumentValidation,
    format_document_number,
    mask_cep,
    mask_cnpj,
    mask_cpf,
    mask_cpf_or_cnpj,
    mask_currency,
    mask_phone,
    next_document_number,
    parse_currency_to_number,
    strip_document_prefix,
    unmask,
    validate_cnpj,
    validate_cpf,
    validate_cpf_or_cnpj,
)

VALID_CPF = "52998224725"
VALID_CNPJ = "11222333000181"


@pytest.mark.unit
class TestMasks:
    def test_unmask_keeps_only_digits(self) -> None:
        assert unmask("(74) 98113-8033 ramal 2") == "749811380332"
        assert unmask("") == ""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("7", "7"),
            ("74", "74"),
            ("749", "(74) 9"),
            ("749811", "(74) 9811"),
            ("7432211234", "(74) 3221-1234"),
            ("74981138033", "(74) 98113-8033"),
            ("749811380339999", "(74) 98113-8033"),
        ],
    )
    def test_mask_phone_progressive(self, raw: str, expected: str) -> None:
        assert mask_phone(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("529", "529"),
            ("52998", "529.98"),
            ("52998224", "529.982.24"),
            ("5299822472", "529.982.247-2"),
            ("529982247251234", "529.982.247-25"),
        ],
    )
    def test_mask_cpf_progressive(self, raw: str, expected: str) -> None:
        assert mask_cpf(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("11", "11"),
            ("1122", "11.22"),
            ("1122233", "11.222.33"),
            ("112223330001", "11.222.333/0001"),
            ("11222333000181", "11.222.333/0001-81"),
            ("1122233300018199", "11.222.333/0001-81"),
        ],
    )
    def test_mask_cnpj_progressive(self, raw: str, expected: str) -> None:
        assert mask_cnpj(raw) == expected

    def test_mask_cpf_or_cnpj_switches_on_digit_count(self) -> None:
        with pytest_check.check:
            assert mask_cpf_or_cnpj(VALID_CPF) == "529.982.247-25"
        with pytest_check.check:
            assert mask_cpf_or_cnpj("112223330001") == "11.222.333/0001"

    def test_mask_cep(self) -> None:
        with pytest_check.check:
            assert mask_cep("48900") == "48900"
        with pytest_check.check:
            assert mask_cep("48900000") == "48900-000"
        with pytest_check.check:
            assert mask_cep("4890000099") == "48900-000"

    @pytest.mark.parametrize(
        "mask", [mask_phone, mask_cpf, mask_cnpj, mask_cpf_or_cnpj, mask_cep]
    )
    @pytest.mark.parametrize("raw", ["1", "12345", "123456789", "123456789012345"])
    def test_masks_are_idempotent(self, mask: object, raw: str) -> None:
        once = mask(raw)  # type: ignore[operator]
        assert mask(once) == once  # type: ignore[operator]


@pytest.mark.unit
class TestValidators:
    def test_valid_cpf_masked_or_not(self) -> None:
        assert validate_cpf(VALID_CPF)
        assert validate_cpf("529.982.247-25")

    @pytest.mark.parametrize(
        "value", ["52998224724", "11111111111", "5299822472", "", "abc"]
    )
    def test_invalid_cpf(self, value: str) -> None:
        assert not validate_cpf(value)

    def test_valid_cnpj_masked_or_not(self) -> None:
        assert validate_cnpj(VALID_CNPJ)
        assert validate_cnpj("11.222.333/0001-81")

    @pytest.mark.parametrize(
        "value", ["11222333000182", "00000000000000", "1122233300018", "x" * 14]
    )
    def test_invalid_cnpj(self, value: str) -> None:
        assert not validate_cnpj(value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (VALID_CPF, DocumentValidation(valid=True, type="cpf")),
            ("52998224724", DocumentValidation(valid=False, type="cpf")),
            (VALID_CNPJ, DocumentValidation(valid=True, type="cnpj")),
            ("123", DocumentValidation(valid=False, type=None)),
        ],
    )
    def test_validate_cpf_or_cnpj(
        self, value: str, expected: DocumentValidation
    ) -> None:
        assert validate_cpf_or_cnpj(value) == expected


@pytest.mark.unit
class TestCurrency:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1234.56, f"R${NBSP}1.234,56"),
            (0, f"R${NBSP}0,00"),
            (Decimal("1000000"), f"R${NBSP}1.000.000,00"),
            (-15.5, f"-R${NBSP}15,50"),
            (1.005, f"R${NBSP}1,01"),
        ],
    )
    def test_numbers_are_formatted_directly(
        self, value: float | Decimal, expected: str
    ) -> None:
        assert mask_currency(value) == expected

    def test_typed_input_is_read_as_cents(self) -> None:
        with pytest_check.check:
            assert mask_currency("1234") == f"R${NBSP}12,34"
        with pytest_check.check:
            assert mask_currency("R$ 1.234,56") == f"R${NBSP}1.234,56"
        with pytest_check.check:
            assert mask_currency("abc") == ""

    def test_currency_mask_is_idempotent(self) -> None:
        once = mask_currency("123456")
        assert mask_currency(once) == once

    def test_parse_currency_to_number(self) -> None:
        with pytest_check.check:
            assert parse_currency_to_number(f"R${NBSP}1.234,56") == Decimal("1234.56")
        with pytest_check.check:
            assert parse_currency_to_number("") == 0
        with pytest_check.check:
            assert parse_currency_to_number("R$") == 0


@pytest.mark.unit
class TestDocumentNumbers:
    def test_format_document_number(self) -> None:
        assert format_document_number("PED", 12) == "PED00012"

    def test_next_document_number_ignores_other_prefixes_and_garbage(self) -> None:
        existing = ["PED00003", "PED00010", "ORC00099", "PEDabc", "PED"]
        assert next_document_number("PED", existing) == "PED00011"

    def test_next_document_number_starts_at_one(self) -> None:
        assert next_document_number("ORC", []) == "ORC00001"

    @pytest.mark.parametrize(
        ("number", "expected"),
        [("PED00012", "00012"), ("ORC00007", "00007"), ("X-1", "X-1")],
    )
    def test_strip_document_prefix(self, number: str, expected: str) -> None:
        assert strip_document_prefix(number) == expected
