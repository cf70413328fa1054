import asyncio
import logging

from models import RateTable

logger = logging.getLogger(__name__)

# Курсы считаются устаревшими через 6 часов
STALE_AFTER = 6 * 60 * 60


def rate_table_from_response(response, now: float) -> RateTable:
    """
    Превращает ответ fixer.io в RateTable.
    None, success=False или кривые rates -> нестабильная пустая таблица,
    но last_update всё равно сдвигается, чтобы не долбить API на каждой ошибке.
    """
    if not response or not response.get("success"):
        return RateTable(is_stable=False, last_update=now, data={})

    rates = response.get("rates")
    if not isinstance(rates, dict):
        logger.warning("Rates response without rates mapping")
        return RateTable(is_stable=False, last_update=now, data={})

    data = {
        code: float(rate)
        for code, rate in rates.items()
        if isinstance(rate, (int, float)) and not isinstance(rate, bool)
    }
    return RateTable(is_stable=True, last_update=now, data=data)


class RateCache:
    """
    Последняя загруженная таблица курсов.
    Сам ничего не загружает: вызывающий проверяет is_stale_at() и делает refresh().
    lock - чтобы на один кэш шла максимум одна загрузка одновременно.
    """

    def __init__(self, table: RateTable = None):
        self._table = table or RateTable(is_stable=False, last_update=0, data={})
        self.lock = asyncio.Lock()

    def is_stale_at(self, now: float, threshold: float = STALE_AFTER) -> bool:
        return now - self._table.last_update >= threshold

    def refresh(self, table: RateTable):
        # полная замена, старые курсы не сохраняем
        self._table = table
        logger.debug("Rate table replaced, stable=%s, %d rates", table.is_stable, len(table.data))

    def current(self) -> RateTable:
        return self._table
