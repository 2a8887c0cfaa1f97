from pydantic import BaseModel, ConfigDict, Field
from typing import Tuple


class Coordenadas(BaseModel):
    """Value Object para representar coordenadas geográficas."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_tuple(self) -> Tuple[float, float]:
        """Converte para tupla (latitude, longitude)."""
        return (self.latitude, self.longitude)

    @classmethod
    def from_tuple(cls, coords: Tuple[float, float]) -> "Coordenadas":
        """Cria a partir de uma tupla (latitude, longitude)."""
        return cls(latitude=coords[0], longitude=coords[1])

    def to_osrm(self) -> str:
        """Formato `lon,lat` usado nas URLs do OSRM."""
        return f"{self.longitude},{self.latitude}"
