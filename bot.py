import logging
import asyncio
import traceback

from aiogram import Bot, Dispatcher, types
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties
from aiogram.filters import Command, CommandObject
from aiogram.utils.text_decorations import markdown_decoration

from config import ADMIN_ID, BOT_TOKEN, CHAT_ID, FIXER_TOKEN, RATES_TTL_SECONDS, SPAM_WAIT_SECONDS
from command import COMMANDS
from convert import currency_reply
from models import build_registry
from session import SessionStore

logger = logging.getLogger(__name__)


# ===== Состояние =====
registry = build_registry()
sessions = SessionStore()

dp = Dispatcher()


# ===== MIDDLEWARES =====
async def check_access(handler, event: types.Message, data: dict):
    """
    Пропускает только разрешённый чат и админа.
    Обо всех остальных пишем админу.
    """
    chat_id = event.chat.id if event.chat else None
    if not chat_id or chat_id not in (CHAT_ID, ADMIN_ID):
        logger.debug("mid: skip message from -- %s", chat_id)
        if ADMIN_ID:
            await event.bot.send_message(
                ADMIN_ID,
                markdown_decoration.quote(f"Access warning! From {chat_id}, text: {event.text}"),
            )
        return None

    return await handler(event, data)


dp.message.outer_middleware(check_access)


def extract_payload(message: types.Message, command: CommandObject) -> str:
    """
    Текст для поиска валюты: сообщение, на которое ответили (текст или подпись),
    иначе аргументы команды.
    """
    reply = message.reply_to_message
    if reply is not None and (reply.text or reply.caption):
        return reply.text or reply.caption
    return command.args or ""


# ===== START / HELP =====
@dp.message(Command("start", "help"))
async def help_handler(message: types.Message):
    """
    Инструкция
    """
    text = (
        "💱 Ответьте на сообщение с суммой командой /currency (или /q), "
        "либо напишите /q 100 USD.\n\n"
        "Валюты: " + ", ".join(registry.codes())
    )
    await message.answer(markdown_decoration.quote(text))


# ===== КОНВЕРТАЦИЯ =====
@dp.message(Command("currency", "q"))
async def currency_handler(message: types.Message, command: CommandObject):
    """
    Находит сумму в тексте и отвечает пересчётом во все валюты.
    Курсы обновляются не чаще раза в RATES_TTL_SECONDS.
    """
    session = sessions.get(message.chat.id)
    if session.throttle("currency", SPAM_WAIT_SECONDS):
        return

    payload = extract_payload(message, command)
    if not payload:
        return

    out = await currency_reply(payload, session.rates, FIXER_TOKEN, registry, stale_after=RATES_TTL_SECONDS)
    if out is None:
        logger.debug("No currency in message %s", message.message_id)
        return

    await message.reply(out)


# ===== ОШИБКИ =====
@dp.errors()
async def error_handler(event: types.ErrorEvent, bot: Bot):
    """
    Любое необработанное исключение из хендлеров отправляется админу
    вместе со стеком.
    """
    error = event.exception
    logger.error("Update %s failed: %r", getattr(event.update, "update_id", None), error, exc_info=error)
    if not ADMIN_ID:
        return True

    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    # лимит Telegram - 4096 символов уже после экранирования, хвост стека важнее
    stack = stack[-1500:]
    await bot.send_message(
        ADMIN_ID,
        f"🧨 *{markdown_decoration.quote((str(error) or type(error).__name__)[:500])}*\n"
        f"```\n{markdown_decoration.quote(stack)}```",
    )
    return True


# ====== MAIN ======
async def main():
    """
    Точка входу для запуску Telegram-бота.
    """
    logging.basicConfig(level=logging.INFO)
    bot = Bot(
        token=BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.MARKDOWN_V2)
    )
    logger.info("Started, chat_id=%s, admin_id=%s", CHAT_ID, ADMIN_ID)
    await bot.set_my_commands(COMMANDS)
    # накопившиеся за простой апдейты не обрабатываем
    await bot.delete_webhook(drop_pending_updates=True)
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
