import asyncio
import logging
import math
import sys
import time
from typing import List, Optional

import aiohttp

from models import ConversionLine, CurrencyRegistry, DetectionResult, RateTable
from rates import STALE_AFTER, RateCache, rate_table_from_response
from report import format_amount, format_report

logger = logging.getLogger(__name__)

# fixer.io базовый URL
FIXER_URL = "http://data.fixer.io/api/latest"

# поправка на представление float перед округлением до десятых
EPSILON = sys.float_info.epsilon


async def fetch_rates(token: str) -> Optional[dict]:
    """
    Запрос курсов с fixer.io.
    Ответ: {"success": bool, "timestamp": ..., "base": "EUR", "date": ..., "rates": {...}}
    При любой ошибке возвращает None, исключения наружу не летят.
    """
    timeout = aiohttp.ClientTimeout(total=10)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(FIXER_URL, params={"access_key": token}) as resp:
                if resp.status != 200:
                    logger.warning("Fixer API error: %s", resp.status)
                    return None
                return await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.warning("Fixer API request failed: %r", e)
        return None


# ===== ПОИСК ВАЛЮТЫ =====

def detect_currency(text: str, registry: CurrencyRegistry) -> DetectionResult:
    """
    Ищет "число ... триггер" в тексте.
    Валюты проверяются в порядке реестра, первая найденная выигрывает.
    "10 USD" -> USD 10, "USD 10" не находится (число должно идти раньше).
    """
    for definition in registry.definitions():
        match = definition.pattern.search(text)
        if match:
            return DetectionResult(
                currency=definition.code,
                value=float(match.group(1).replace(",", ".")),
            )

    return DetectionResult()


# ===== КОНВЕРТАЦИЯ =====

def render_value(value: float, drop_limit: float) -> str:
    """
    Больше drop_limit -> целые, иначе десятые.
    Если округлилось в ноль - показываем два знака, чтобы не было "0".
    inf/nan округлять нельзя, отдаём как есть.
    """
    if not math.isfinite(value):
        return format_amount(value)

    if value > drop_limit:
        rounded = math.floor(value + 0.5)
        text = format_amount(rounded)
    else:
        rounded = math.floor((value + EPSILON) * 10 + 0.5) / 10
        text = f"{rounded:.1f}"

    if rounded == 0:
        return f"{value:.2f}"
    return text


def convert_amount(amount: float, from_currency: str, table: RateTable,
                   registry: CurrencyRegistry) -> List[ConversionLine]:
    """
    Кросс-курс через базовую валюту таблицы: amount / rate[from] * rate[to].
    Валюты без курса просто пропускаются.
    """
    if not table.is_stable or registry.group_of(from_currency) is None:
        return []

    self_rate = table.data.get(from_currency)
    if not self_rate:
        return []

    lines = []
    for group in registry.groups():
        for currency in group:
            if currency == from_currency:
                continue

            exchange_rate = table.data.get(currency)
            if not exchange_rate:
                continue

            definition = registry.lookup(currency)
            exchange_value = amount / self_rate * exchange_rate
            lines.append(ConversionLine(
                symbol=definition.symbol,
                value=render_value(exchange_value, definition.drop_limit),
            ))

    return lines


# ===== ПОЛНЫЙ ЦИКЛ =====

async def currency_reply(text: str, cache: RateCache, token: str, registry: CurrencyRegistry,
                         fetcher=fetch_rates, now: float = None,
                         stale_after: float = STALE_AFTER) -> Optional[str]:
    """
    Текст -> валюта -> (при необходимости обновить курсы) -> конвертация -> сообщение.
    None, если в тексте нет суммы с валютой.
    """
    result = detect_currency(text, registry)
    if not result.currency:
        return None

    async with cache.lock:
        moment = time.time() if now is None else now
        if cache.is_stale_at(moment, stale_after):
            try:
                response = await fetcher(token)
            except Exception:
                logger.exception("Rates fetcher failed")
                response = None
            cache.refresh(rate_table_from_response(response, moment))
            logger.info("Currency data updated, stable=%s", cache.current().is_stable)

    lines = convert_amount(result.value, result.currency, cache.current(), registry)
    return format_report(result, lines)
