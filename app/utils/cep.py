import re
from typing import Optional

from app.core.exceptions import ValidationError


def limpar_cep(cep: Optional[str]) -> str:
    """Remove caracteres não numéricos do CEP."""
    return re.sub(r"\D", "", cep or "")


def is_valid_cep(cep: Optional[str]) -> bool:
    """CEP é válido quando tem exatamente 8 dígitos após a limpeza."""
    return len(limpar_cep(cep)) == 8


def validar_cep(cep: Optional[str]) -> str:
    """
    Valida o CEP e retorna apenas os dígitos.

    Raises:
        ValidationError: se o CEP não tiver 8 dígitos
    """
    cep_limpo = limpar_cep(cep)
    if len(cep_limpo) != 8:
        raise ValidationError("CEP inválido", field="cep", value=cep)
    return cep_limpo


def format_cep(cep: str) -> str:
    """Formata CEP para exibição (00000-000). Entradas inválidas voltam sem alteração."""
    cep_limpo = limpar_cep(cep)
    if len(cep_limpo) != 8:
        return cep
    return f"{cep_limpo[:5]}-{cep_limpo[5:]}"
