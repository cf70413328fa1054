import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, Optional, Tuple


# ===== Типы данных =====

@dataclass(frozen=True)
class CurrencyDefinition:
    """
    Описание одной валюты.
    triggers: слова/символы, по которым валюта ищется в тексте (без учёта регистра)
    drop_limit: выше этого значения результат округляется до целых
    """
    code: str
    triggers: Tuple[str, ...]
    symbol: str
    drop_limit: float

    @cached_property
    def pattern(self) -> re.Pattern:
        # число (только ASCII-цифры), потом что угодно в той же строке, потом триггер
        triggers = "|".join(re.escape(t) for t in self.triggers)
        return re.compile(rf"([0-9]+([.,][0-9]+)?).*({triggers})", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class DetectionResult:
    currency: str = ""
    value: float = 0.0


@dataclass(frozen=True)
class ConversionLine:
    symbol: str
    value: str


@dataclass(frozen=True)
class RateTable:
    """
    Снимок курсов относительно базовой валюты провайдера.
    is_stable = False -> data может быть пустым, конвертации пропускаются
    """
    is_stable: bool = False
    last_update: float = 0
    data: Dict[str, float] = field(default_factory=dict)


# ===== Реестр =====

class CurrencyRegistry:
    """
    Неизменяемый набор валют и групп.
    Порядок definitions() - это порядок поиска в тексте.
    """

    def __init__(self, definitions, groups):
        self._definitions = tuple(definitions)
        self._by_code = {d.code: d for d in self._definitions}
        if len(self._by_code) != len(self._definitions):
            raise ValueError("Duplicate currency code in registry")

        self._groups = tuple(tuple(g) for g in groups)
        seen = set()
        for group in self._groups:
            for code in group:
                if code not in self._by_code:
                    raise ValueError(f"Unknown currency in group: {code}")
                if code in seen:
                    raise ValueError(f"Currency {code} is in more than one group")
                seen.add(code)

    def lookup(self, code: str) -> CurrencyDefinition:
        return self._by_code[code]

    def definitions(self) -> Tuple[CurrencyDefinition, ...]:
        return self._definitions

    def groups(self) -> Tuple[Tuple[str, ...], ...]:
        return self._groups

    def group_of(self, code: str) -> Optional[Tuple[str, ...]]:
        for group in self._groups:
            if code in group:
                return group
        return None

    def codes(self):
        return [d.code for d in self._definitions]


# ===== Списки валют =====

CURRENCIES = [
    CurrencyDefinition("USD", ("USD", "$", "доллар"), "$", 10),
    CurrencyDefinition("EUR", ("EUR", "€", "евро"), "€", 10),
    CurrencyDefinition("UAH", ("UAH", "₴", "грн", "гривен"), "₴", 400),
    CurrencyDefinition("GEL", ("GEL", "₾", "лари"), "₾", 30),
    CurrencyDefinition("RSD", ("RSD", "динар"), "Д", 500),
    CurrencyDefinition("RUB", ("RUB", "₽", "рубл"), "₽", 500),
    CurrencyDefinition("TRY", ("TRY", "₺", "лир"), "₺", 300),
]

# Валюты, которые показываются вместе
CURRENCY_GROUPS = [
    ["USD", "EUR"],
    ["RUB", "GEL", "UAH"],
    ["RSD", "TRY"],
]


def build_registry(definitions=None, groups=None) -> CurrencyRegistry:
    """
    Собирает реестр один раз при старте.
    Без аргументов - стандартный набор валют.
    """
    return CurrencyRegistry(
        CURRENCIES if definitions is None else definitions,
        CURRENCY_GROUPS if groups is None else groups,
    )
