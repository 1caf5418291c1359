import ipaddress
import re
from dataclasses import dataclass

# Шесть групп по две hex-цифры через двоеточие, регистр не важен
MAC_PATTERN = re.compile(r'([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}')
# Четыре октета 0-255 через точку, без ведущих нулей. Только ASCII-цифры
OCTET = r'(25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])'
IP_PATTERN = re.compile(rf'({OCTET}\.){{3}}{OCTET}')


class ParseError(ValueError):
    """Некорректный ввод адреса. Сообщается вызывающему до любой сетевой операции."""


class EmptyInput(ParseError):
    pass


class MalformedMac(ParseError):
    pass


class MalformedIp(ParseError):
    pass


@dataclass(frozen=True)
class MacAddress:
    """MAC-адрес: ровно 6 байт."""

    octets: bytes

    def __post_init__(self):
        if not isinstance(self.octets, (bytes, bytearray)):
            raise MalformedMac(f'MAC-адрес должен быть bytes, получено {type(self.octets).__name__}')
        object.__setattr__(self, 'octets', bytes(self.octets))
        if len(self.octets) != 6:
            raise MalformedMac(f'MAC-адрес должен содержать 6 байт, получено {len(self.octets)}')

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return ':'.join(f'{byte:02x}' for byte in self.octets)


def validate_mac(text: str) -> bool:
    """Проверяет, что строка имеет вид XX:XX:XX:XX:XX:XX."""
    return MAC_PATTERN.fullmatch(text) is not None


def validate_ip(text: str) -> bool:
    """Проверяет, что строка - IPv4-адрес из четырёх октетов 0-255."""
    return IP_PATTERN.fullmatch(text) is not None


def parse_mac(text: str) -> MacAddress:
    """
    Разбирает MAC-адрес из строки

    Args:
        text (str): MAC-адрес в формате XX:XX:XX:XX:XX:XX

    Returns:
        MacAddress: 6 байт адреса

    Raises:
        EmptyInput: Если строка пустая
        MalformedMac: Если строка не является MAC-адресом
    """
    if not text or not text.strip():
        raise EmptyInput('Не указан MAC-адрес')

    groups = text.split(':')
    if len(groups) != 6:
        raise MalformedMac(f'Неверный MAC-адрес: {text!r}. Ожидается 6 групп через двоеточие')

    octets = bytearray()
    for group in groups:
        # int(..., 16) пропускает пробелы, знак и "0x", поэтому проверяем сами
        if len(group) != 2 or not all(c in '0123456789abcdefABCDEF' for c in group):
            raise MalformedMac(f'Неверный MAC-адрес: {text!r}. Группа {group!r} не является байтом')
        octets.append(int(group, 16))

    return MacAddress(bytes(octets))


def parse_ip(text: str) -> ipaddress.IPv4Address:
    """
    Разбирает IPv4-адрес назначения (обычный или broadcast)

    Raises:
        EmptyInput: Если строка пустая
        MalformedIp: Если строка не является IPv4-адресом
    """
    if not text or not text.strip():
        raise EmptyInput('Не указан IP-адрес')
    if not validate_ip(text):
        raise MalformedIp(f'Неверный IP-адрес: {text!r}')
    try:
        return ipaddress.IPv4Address(text)
    except ipaddress.AddressValueError as e:
        raise MalformedIp(f'Неверный IP-адрес: {text!r}: {e}') from e
