from typing import Optional

from pydantic import BaseModel


class EnderecoCep(BaseModel):
    """Endereço postal retornado pelo ViaCEP."""
    cep: str
    logradouro: str = ""
    complemento: str = ""
    bairro: str = ""
    localidade: str = ""
    uf: str = ""
    ibge: Optional[str] = None
    ddd: Optional[str] = None
    erro: Optional[bool] = None

    def endereco_entrega(self) -> str:
        """Endereço de entrega legível: `Rua, Bairro, Cidade - UF`."""
        return f"{self.logradouro}, {self.bairro}, {self.localidade} - {self.uf}"

    def consulta_geocodificacao(self) -> str:
        """Texto livre enviado ao geocodificador."""
        return f"{self.logradouro}, {self.bairro}, {self.localidade}, {self.uf}, Brazil"


class RotaCalculada(BaseModel):
    """Distância (metros) e duração (segundos) de uma rota de carro."""
    distance_meters: float
    duration_seconds: float
