"""
Erros de domínio compartilhados entre frete, localização e pagamentos.

Erros de domínio herdam de ``DomainError`` e sempre carregam uma mensagem
legível para o usuário final. Falhas de infraestrutura (rede, status HTTP
inesperado) usam ``ExternalServiceError``.
"""
from typing import Any, Optional


class DomainError(Exception):
    """Base para todos os erros de domínio."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Entrada malformada (CEP, documento, valor). Sempre corrigível pelo chamador."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(DomainError):
    """O serviço externo informou explicitamente que o recurso não existe."""

    def __init__(self, entity: str, identifier: Optional[str] = None):
        message = f"{entity} não encontrado: {identifier}" if identifier else f"{entity} não encontrado"
        super().__init__(message)
        self.entity = entity
        self.identifier = identifier


class GeocodingError(DomainError):
    """Não foi possível obter coordenadas para o endereço."""


class RoutingError(DomainError):
    """O serviço de rotas não retornou uma rota utilizável."""


class ExternalServiceError(Exception):
    """Falha de transporte ao consultar um serviço externo (rede, HTTP != 2xx, corpo inválido)."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"[{service}] {message}")
        self.service = service
        self.message = message
        self.status_code = status_code
