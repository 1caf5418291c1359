import argparse
import asyncio
import ipaddress
import logging
import socket
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from address import EmptyInput, MacAddress, ParseError, parse_ip, parse_mac
from network import get_broadcast_address, list_interfaces

logger = logging.getLogger(__name__)

# Стандартный порт для Wake-on-LAN
WOL_PORT = 9
SYNC_STREAM = b'\xff' * 6
MAC_REPEATS = 16
PACKET_SIZE = len(SYNC_STREAM) + MAC_REPEATS * 6

LIMITED_BROADCAST_IP = '255.255.255.255'


class SendError(Exception):
    """Сетевая ошибка при отправке пакета. Не фатальна: компьютер может быть просто недоступен."""


class ResolutionFailed(SendError):
    pass


class TransmitFailed(SendError):
    pass


class Outcome(str, Enum):
    SENT = 'sent'
    INVALID_INPUT = 'invalid_input'
    RESOLUTION_FAILED = 'resolution_failed'
    TRANSMIT_FAILED = 'transmit_failed'


@dataclass(frozen=True)
class WakeResult:
    outcome: Outcome
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SENT


def build_magic_packet(mac: MacAddress) -> bytes:
    """
    Собирает Wake-on-LAN пакет

    WoL пакет состоит из:
    - 6 байт 0xFF (магическая последовательность)
    - 16 повторений MAC-адреса (96 байт)

    Args:
        mac (MacAddress): MAC-адрес компьютера

    Returns:
        bytes: пакет длиной 102 байта
    """
    if not isinstance(mac, MacAddress):
        raise TypeError(f'Ожидается MacAddress, получено {type(mac).__name__}')
    return SYNC_STREAM + bytes(mac) * MAC_REPEATS


def send_packet(packet: bytes, target, port: int = WOL_PORT) -> None:
    """
    Отправляет пакет одной UDP-датаграммой. Подтверждение не ожидается.

    Args:
        packet (bytes): Содержимое датаграммы
        target: IPv4-адрес назначения (IPv4Address или строка)
        port (int): UDP порт

    Raises:
        ResolutionFailed: Если адрес назначения не удалось разрешить
        TransmitFailed: Если сокет не принял датаграмму
    """
    try:
        addr_info = socket.getaddrinfo(str(target), port, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionFailed(f'Не удалось разрешить адрес {target}: {e}') from e
    if not addr_info:
        raise ResolutionFailed(f'Не удалось разрешить адрес {target}')
    sockaddr = addr_info[0][4]

    try:
        # Сокет закрывается на любом пути выхода
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sent = sock.sendto(packet, sockaddr)
    except OSError as e:
        raise TransmitFailed(f'Ошибка отправки на {sockaddr[0]}:{port}: {e}') from e

    if sent != len(packet):
        raise TransmitFailed(f'Отправлено {sent} из {len(packet)} байт на {sockaddr[0]}:{port}')

    logger.debug(f'Датаграмма {len(packet)} байт отправлена на {sockaddr[0]}:{port}')


def prepare(mac_text: str, ip_text: str) -> Tuple[MacAddress, ipaddress.IPv4Address]:
    """Проверяет ввод до любой сетевой операции. Бросает ParseError."""
    if not mac_text or not ip_text:
        raise EmptyInput('Please enter MAC and IP addresses')
    return parse_mac(mac_text), parse_ip(ip_text)


def send_wake(mac: MacAddress, target) -> WakeResult:
    """Собирает и отправляет magic packet. Сетевые ошибки превращаются в результат."""
    packet = build_magic_packet(mac)
    try:
        send_packet(packet, target, WOL_PORT)
    except ResolutionFailed as e:
        logger.error(f'WOL для {mac}: {e}')
        return WakeResult(Outcome.RESOLUTION_FAILED, str(e))
    except TransmitFailed as e:
        logger.error(f'WOL для {mac}: {e}')
        return WakeResult(Outcome.TRANSMIT_FAILED, str(e))

    logger.info(f'WOL пакет отправлен на {mac} через {target}:{WOL_PORT}')
    return WakeResult(Outcome.SENT)


def wake(mac_text: str, ip_text: str) -> WakeResult:
    """
    Полный цикл: проверка ввода, сборка пакета, отправка.
    Никогда не бросает исключений из-за ввода или сети.
    """
    try:
        mac, target = prepare(mac_text, ip_text)
    except ParseError as e:
        logger.warning(f'Неверный ввод: {e}')
        return WakeResult(Outcome.INVALID_INPUT, str(e))
    return send_wake(mac, target)


async def wake_async(mac_text: str, ip_text: str) -> WakeResult:
    # Отправка блокирующая, поэтому в executor
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, wake, mac_text, ip_text)


def wake_in_background(mac_text: str, ip_text: str,
                       callback: Callable[[WakeResult], None]) -> threading.Thread:
    """
    Запускает отправку в отдельном потоке и вызывает callback ровно один раз

    Args:
        mac_text (str): MAC-адрес
        ip_text (str): IP-адрес назначения
        callback: Получает WakeResult по завершении

    Returns:
        threading.Thread: уже запущенный поток
    """
    def run():
        callback(wake(mac_text, ip_text))

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Отправка Wake-on-LAN magic packet')
    p.add_argument('mac', nargs='?', help='MAC-адрес в формате XX:XX:XX:XX:XX:XX')
    p.add_argument('ip', nargs='?', help=f'IP-адрес назначения (по умолчанию {LIMITED_BROADCAST_IP})')
    p.add_argument('-i', '--interface', help='взять broadcast-адрес этого сетевого интерфейса')
    p.add_argument('--list-interfaces', action='store_true', help='показать сетевые интерфейсы и выйти')
    p.add_argument('-v', '--verbose', action='store_true', help='подробный лог')
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(asctime)s %(message)s',
    )

    if args.list_interfaces:
        for iface in list_interfaces():
            print(f'{iface.name}: ip={iface.ipv4} broadcast={iface.broadcast} mac={iface.mac or "-"}')
        return 0

    if not args.mac:
        print('Please enter MAC and IP addresses', file=sys.stderr)
        return 2

    ip = args.ip
    if ip is None and args.interface:
        try:
            ip = get_broadcast_address(args.interface)
        except LookupError as e:
            print(str(e), file=sys.stderr)
            return 2
    if ip is None:
        ip = LIMITED_BROADCAST_IP

    result = wake(args.mac, ip)
    if result.ok:
        print(f'✅ WOL пакет отправлен на {args.mac} через {ip}')
        return 0
    print(f'❌ {result.detail}', file=sys.stderr)
    return 2 if result.outcome is Outcome.INVALID_INPUT else 1


# Запуск
if __name__ == '__main__':
    sys.exit(main())
