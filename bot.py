import asyncio
import logging
import sys
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from address import EmptyInput, ParseError
from settings import Settings, load_settings
from wol import WakeResult, prepare, send_wake

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'

logger = logging.getLogger(__name__)

MSG_EMPTY = 'Please enter MAC and IP addresses'
MSG_INVALID = 'Invalid MAC or IP address.'
MSG_SENDING = 'Sending Wake-on-LAN packet...'
MSG_SENT = 'Wake-on-LAN packet sent successfully!'
MSG_FAILED = 'Failed to send Wake-on-LAN packet.'

button_wake_data = [[InlineKeyboardButton("🚀 wake up", callback_data="wake")]]


def setup_logging(log_file: str) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, encoding='utf-8')
        ]
    )


def is_user_authorized(user_id: int, settings: Settings) -> bool:
    """Проверяет, авторизован ли пользователь."""
    logger.info(f'Проверка авторизации пользователя: {user_id}, список: {settings.allowed_users}')
    return user_id in settings.allowed_users


async def deny_if_unauthorized(update: Update, settings: Settings) -> bool:
    user = update.effective_user
    if is_user_authorized(user.id, settings):
        return False
    logger.warning(f"Доступ запрещен для пользователя {user.id}")
    await update.effective_message.reply_html(
        f"❌ Доступ запрещен! Ваш ID: {user.id}\n"
        f"Обратитесь к администратору для получения доступа."
    )
    return True


async def wake_and_report(message, mac_text: str, ip_text: str) -> Optional[WakeResult]:
    """
    Проверяет ввод, отправляет пакет и сообщает итог ровно один раз

    Args:
        message: Сообщение Telegram, в ответ на которое пишем
        mac_text (str): MAC-адрес
        ip_text (str): IP-адрес назначения

    Returns:
        WakeResult или None, если ввод неверный
    """
    try:
        mac, target = prepare(mac_text, ip_text)
    except EmptyInput:
        await message.reply_text(MSG_EMPTY)
        return None
    except ParseError as e:
        logger.info(f"Неверный ввод: {e}")
        await message.reply_text(MSG_INVALID)
        return None

    await message.reply_text(MSG_SENDING)
    # send_wake блокирующая, поэтому в executor
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, send_wake, mac, target)

    if result.ok:
        await message.reply_text(MSG_SENT)
    else:
        await message.reply_text(f"{MSG_FAILED}\n{result.detail}")
    return result


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send a message when the command /start is issued."""
    settings = context.bot_data['settings']
    user = update.effective_user
    logger.info(f"Пользователь {user.id} вызвал /start")
    if await deny_if_unauthorized(update, settings):
        return
    await update.message.reply_html(
        rf"Hi {user.mention_html()}!" "\n"
        f"target: {settings.pc_mac_address} via {settings.broadcast_ip}",
        reply_markup=InlineKeyboardMarkup(button_wake_data),
    )


async def wake_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/wake <mac> <ip>"""
    settings = context.bot_data['settings']
    user = update.effective_user
    logger.info(f"Пользователь {user.id} вызвал /wake {context.args}")
    if await deny_if_unauthorized(update, settings):
        return
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text(MSG_EMPTY)
        return
    await wake_and_report(update.message, args[0], args[1])


async def button(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings = context.bot_data['settings']
    query = update.callback_query
    user_id = query.from_user.id
    logger.info(f"Пользователь {user_id} нажал кнопку: {query.data}")
    await query.answer()
    if await deny_if_unauthorized(update, settings):
        return
    if query.data == "wake":
        await wake_and_report(query.message, settings.pc_mac_address, settings.broadcast_ip)


def build_application(settings: Settings) -> Application:
    application = Application.builder().token(settings.telegram_bot_token).build()
    application.bot_data['settings'] = settings

    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("wake", wake_command))
    application.add_handler(CallbackQueryHandler(button))
    return application


def main() -> None:
    """Start the bot."""
    try:
        settings = load_settings()
    except (ValueError, LookupError) as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Ошибка конфигурации: {e}")
        sys.exit(1)

    setup_logging(settings.log_file)
    if not settings.telegram_bot_token:
        logger.error("Не установлена переменная окружения TELEGRAM_BOT_TOKEN")
        sys.exit(1)
    logger.info(f"Разрешенные пользователи: {settings.allowed_users}")

    application = build_application(settings)
    logger.info("Бот Telegram инициализирован")

    # Run the bot until the user presses Ctrl-C
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
