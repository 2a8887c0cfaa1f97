from decimal import Decimal

import pytest

from app.api.pagamentos.models.documento import Documento, TipoDocumentoEnum
from app.api.pagamentos.models.money import Money
from app.core.exceptions import ValidationError
from app.utils.cep import format_cep, is_valid_cep, validar_cep


# ---------------- CEP ----------------
def test_cep_valido_com_e_sem_mascara():
    assert validar_cep("01310-100") == "01310100"
    assert validar_cep(" 01310100 ") == "01310100"
    assert is_valid_cep("01.310-100")


@pytest.mark.parametrize("cep", ["", "1234567", "123456789", "abcdefgh", None])
def test_cep_invalido_levanta_validation_error(cep):
    with pytest.raises(ValidationError) as exc:
        validar_cep(cep)
    assert exc.value.field == "cep"


def test_format_cep():
    assert format_cep("01310100") == "01310-100"
    assert format_cep("123") == "123"


# ---------------- Documento ----------------
def test_cpf_valido():
    doc = Documento.create("529.982.247-25")
    assert doc.raw == "52998224725"
    assert doc.is_cpf() and not doc.is_cnpj()
    assert doc.document_type == TipoDocumentoEnum.CPF
    assert doc.formatted == "529.982.247-25"


def test_cnpj_valido():
    doc = Documento.create("11222333000181")
    assert doc.is_cnpj()
    assert doc.formatted == "11.222.333/0001-81"
    assert doc.to_dict()["type"] == "CNPJ"


@pytest.mark.parametrize(
    "valor",
    [
        "11111111111",      # dígitos repetidos
        "52998224724",      # 2º dígito verificador errado
        "52998224735",      # 1º dígito verificador errado
        "11222333000182",   # CNPJ com dígito errado
        "00000000000000",
        "1234",
    ],
)
def test_documento_invalido(valor):
    with pytest.raises(ValidationError):
        Documento.create(valor)


def test_documentos_iguais_pelos_digitos():
    assert Documento.create("529.982.247-25") == Documento.create("52998224725")
    assert Documento.create("52998224725") != Documento.create("11222333000181")


def test_documento_imutavel():
    doc = Documento.create("52998224725")
    with pytest.raises(AttributeError):
        doc.raw = "11111111111"


# ---------------- Money ----------------
def test_money_from_decimal():
    m = Money.from_decimal(10.5)
    assert m.in_cents == 1050
    assert m.value == Decimal("10.5")
    assert m.value == 10.5


def test_money_from_decimal_arredonda_para_o_centavo():
    assert Money.from_decimal("0.105").in_cents == 11
    assert Money.from_decimal(19.99).in_cents == 1999


@pytest.mark.parametrize("cents", [0, 1, 99, 1050, 123456789])
def test_money_from_cents_preserva_valor(cents):
    assert Money.from_cents(cents).in_cents == cents


def test_money_rejeita_negativo_e_nao_inteiro():
    with pytest.raises(ValidationError):
        Money.from_decimal(-0.01)
    with pytest.raises(ValidationError):
        Money.from_cents(-1)
    with pytest.raises(ValidationError):
        Money.from_cents(10.5)


def test_money_operacoes():
    a = Money.from_cents(1000)
    b = Money.from_cents(250)
    assert a.add(b) == Money.from_cents(1250)
    assert a - b == Money.from_cents(750)
    assert b.multiply(1.5).in_cents == 375
    assert a > b and b < a
    assert Money.zero().is_zero()


def test_money_subtracao_nunca_fica_negativa():
    with pytest.raises(ValidationError):
        Money.from_cents(100).subtract(Money.from_cents(101))


def test_money_moedas_diferentes():
    with pytest.raises(ValidationError):
        Money.from_cents(100, "BRL").add(Money.from_cents(100, "USD"))
    with pytest.raises(ValidationError):
        Money.from_cents(100, "BRL") < Money.from_cents(100, "USD")


def test_money_format():
    assert Money.from_cents(123450).format() == "R$ 1.234,50"
    assert Money.from_cents(5).format() == "R$ 0,05"
