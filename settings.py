import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from network import get_broadcast_address

# Значения по умолчанию, которыми заполнена форма
DEFAULT_MAC_ADDRESS = 'e0:73:e7:bc:9c:82'
DEFAULT_BROADCAST_IP = '192.168.1.255'
DEFAULT_LOG_FILE = 'bot.log'


@dataclass
class Settings:
    telegram_bot_token: Optional[str] = None
    pc_mac_address: str = DEFAULT_MAC_ADDRESS
    broadcast_ip: str = DEFAULT_BROADCAST_IP
    interface: Optional[str] = None
    allowed_users: List[int] = field(default_factory=list)
    log_file: str = DEFAULT_LOG_FILE


def parse_users(raw: Optional[str]) -> List[int]:
    """
    Разбирает список разрешённых пользователей Telegram

    Args:
        raw (str): "[123,456]" или "123,456"

    Returns:
        list: ID пользователей

    Raises:
        ValueError: Если ID не является числом
    """
    if not raw:
        return []
    raw = raw.strip()
    if raw.startswith('[') and raw.endswith(']'):
        raw = raw[1:-1]

    users = []
    for item in raw.split(','):
        item = item.strip()
        if not item:
            continue
        try:
            users.append(int(item))
        except ValueError:
            raise ValueError(f'Неверный ID пользователя в USERS: {item!r}') from None
    return users


def load_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file)

    interface = os.getenv('INTERFACE') or None
    broadcast_ip = os.getenv('BROADCAST_IP')
    if not broadcast_ip:
        broadcast_ip = get_broadcast_address(interface) if interface else DEFAULT_BROADCAST_IP

    return Settings(
        telegram_bot_token=os.getenv('TELEGRAM_BOT_TOKEN') or None,
        pc_mac_address=os.getenv('PC_MAC_ADDRESS') or DEFAULT_MAC_ADDRESS,
        broadcast_ip=broadcast_ip,
        interface=interface,
        allowed_users=parse_users(os.getenv('USERS')),
        log_file=os.getenv('LOG_FILE') or DEFAULT_LOG_FILE,
    )
