from aiogram.types import BotCommand

COMMANDS = [
    BotCommand(command="currency", description="Конвертировать сумму из сообщения"),
    BotCommand(command="q", description="То же, что /currency"),
    BotCommand(command="help", description="Инструкция"),
]
