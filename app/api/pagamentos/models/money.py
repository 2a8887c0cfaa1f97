from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from app.core.exceptions import ValidationError

Numero = Union[int, float, Decimal, str]


@dataclass(frozen=True, slots=True)
class Money:
    """
    Valor monetário em centavos (inteiro) + moeda.

    Operações entre moedas diferentes levantam ValidationError.
    """

    cents: int
    currency: str = "BRL"

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise ValidationError("Centavos devem ser um inteiro", field="cents", value=self.cents)
        if self.cents < 0:
            raise ValidationError("Valor não pode ser negativo", field="cents", value=self.cents)

    @classmethod
    def from_cents(cls, cents: int, currency: str = "BRL") -> "Money":
        return cls(cents, currency)

    @classmethod
    def from_decimal(cls, amount: Numero, currency: str = "BRL") -> "Money":
        """Cria a partir de um valor decimal (ex.: 10.50), arredondando para o centavo."""
        try:
            valor = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except InvalidOperation as e:
            raise ValidationError("Valor inválido", field="amount", value=amount) from e
        if not valor.is_finite():
            raise ValidationError("Valor inválido", field="amount", value=amount)
        if valor < 0:
            raise ValidationError("Valor não pode ser negativo", field="amount", value=amount)
        cents = int((valor * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return cls(cents, currency)

    @classmethod
    def zero(cls, currency: str = "BRL") -> "Money":
        return cls(0, currency)

    @property
    def in_cents(self) -> int:
        return self.cents

    @property
    def value(self) -> Decimal:
        return Decimal(self.cents) / 100

    @property
    def currency_code(self) -> str:
        return self.currency

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(self.cents + other.cents, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        resultado = self.cents - other.cents
        if resultado < 0:
            raise ValidationError("Subtração resultaria em valor negativo")
        return Money(resultado, self.currency)

    def multiply(self, factor: Numero) -> "Money":
        fator = factor if isinstance(factor, Decimal) else Decimal(str(factor))
        cents = int((Decimal(self.cents) * fator).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return Money(cents, self.currency)

    def is_zero(self) -> bool:
        return self.cents == 0

    def format(self) -> str:
        """Formata no padrão brasileiro (ex.: R$ 1.234,50)."""
        inteiro, centavos = divmod(self.cents, 100)
        milhar = f"{inteiro:,}".replace(",", ".")
        simbolo = "R$" if self.currency == "BRL" else self.currency
        return f"{simbolo} {milhar},{centavos:02d}"

    def to_dict(self) -> dict:
        return {
            "cents": self.cents,
            "value": float(self.value),
            "currency": self.currency,
            "formatted": self.format(),
        }

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Não é possível operar moedas diferentes: {self.currency} vs {other.currency}"
            )

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply

    def __lt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.cents >= other.cents
