from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from app.core.exceptions import ValidationError


class TipoDocumentoEnum(str, Enum):
    CPF = "CPF"
    CNPJ = "CNPJ"


def _digito_cpf(digitos: str) -> int:
    # pesos decrescentes a partir de len+1 (10 para o 1º dígito, 11 para o 2º)
    peso_inicial = len(digitos) + 1
    soma = sum(int(d) * (peso_inicial - i) for i, d in enumerate(digitos))
    resto = (soma * 10) % 11
    return 0 if resto == 10 else resto


def _digito_cnpj(digitos: str) -> int:
    pesos = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2][-len(digitos):]
    soma = sum(int(d) * p for d, p in zip(digitos, pesos))
    resto = soma % 11
    return 0 if resto < 2 else 11 - resto


def is_valid_cpf(cpf: str) -> bool:
    if len(cpf) != 11 or not cpf.isdigit() or len(set(cpf)) == 1:
        return False
    return _digito_cpf(cpf[:9]) == int(cpf[9]) and _digito_cpf(cpf[:10]) == int(cpf[10])


def is_valid_cnpj(cnpj: str) -> bool:
    if len(cnpj) != 14 or not cnpj.isdigit() or len(set(cnpj)) == 1:
        return False
    return _digito_cnpj(cnpj[:12]) == int(cnpj[12]) and _digito_cnpj(cnpj[:13]) == int(cnpj[13])


@dataclass(frozen=True, slots=True)
class Documento:
    """
    Value Object para CPF ou CNPJ.

    Sempre validado na criação (``Documento.create``); dois documentos são
    iguais quando os dígitos são iguais.
    """

    raw: str
    tipo: TipoDocumentoEnum = field(compare=False)

    @classmethod
    def create(cls, valor: str) -> "Documento":
        digitos = re.sub(r"\D", "", valor or "")

        if len(digitos) == 11:
            if not is_valid_cpf(digitos):
                raise ValidationError("CPF inválido", field="document", value=valor)
            return cls(digitos, TipoDocumentoEnum.CPF)

        if len(digitos) == 14:
            if not is_valid_cnpj(digitos):
                raise ValidationError("CNPJ inválido", field="document", value=valor)
            return cls(digitos, TipoDocumentoEnum.CNPJ)

        raise ValidationError(
            "Documento deve ser um CPF (11 dígitos) ou CNPJ (14 dígitos) válido",
            field="document",
            value=valor,
        )

    @property
    def document_type(self) -> TipoDocumentoEnum:
        return self.tipo

    def is_cpf(self) -> bool:
        return self.tipo == TipoDocumentoEnum.CPF

    def is_cnpj(self) -> bool:
        return self.tipo == TipoDocumentoEnum.CNPJ

    @property
    def formatted(self) -> str:
        """CPF: 000.000.000-00 / CNPJ: 00.000.000/0000-00"""
        d = self.raw
        if self.is_cpf():
            return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"
        return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"

    def to_dict(self) -> dict:
        return {"value": self.raw, "type": self.tipo.value, "formatted": self.formatted}

    def __str__(self) -> str:
        return self.formatted
