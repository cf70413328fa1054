import os

from dotenv import load_dotenv

load_dotenv()

BOT_TOKEN = os.getenv("BOT_TOKEN", "")
FIXER_TOKEN = os.getenv("FIXER_TOKEN", "")

# Бот отвечает только в этом чате и админу
CHAT_ID = int(os.getenv("CHAT_ID", "0"))
ADMIN_ID = int(os.getenv("ADMIN_ID", "0"))

RATES_TTL_SECONDS = float(os.getenv("RATES_TTL_SECONDS", str(6 * 60 * 60)))
SPAM_WAIT_SECONDS = float(os.getenv("SPAM_WAIT_SECONDS", "1"))
