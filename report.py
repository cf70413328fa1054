from typing import List

from aiogram.utils.text_decorations import markdown_decoration

from models import ConversionLine, DetectionResult


def format_amount(value: float) -> str:
    """100.0 -> "100", 10.5 -> "10.5", 1e23 -> "1e+23" """
    value = float(value)
    # выше 1e16 float уже не хранит все цифры, str(int()) напечатал бы мусор
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_report(result: DetectionResult, lines: List[ConversionLine]) -> str:
    """
    Сообщение для Telegram (MarkdownV2):

    💵 *100 USD *

    `€       92`
    `₽     9000`

    Все значения выровнены вправо по одной ширине, чтобы в моноширинном
    шрифте столбик был ровным.
    """
    amount = format_amount(result.value)
    out = f"💵 *{markdown_decoration.quote(amount)} {result.currency} *\n\n"

    width = len(amount) + len(result.currency) + 2
    for line in lines:
        width = max(width, len(line.value))

    out += "\n".join(
        markdown_decoration.code(f"{line.symbol} {markdown_decoration.quote(line.value.rjust(width))}")
        for line in lines
    )
    return out
