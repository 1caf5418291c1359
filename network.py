import ipaddress
import socket
from collections import namedtuple
from typing import List

import psutil

Interface = namedtuple('Interface', ['name', 'ipv4', 'netmask', 'broadcast', 'mac'])


def _interface_from_addresses(name: str, addresses) -> Interface:
    ip_addr = netmask = broadcast = mac_addr = None

    # Перебираем все адреса интерфейса
    for addr in addresses:
        if addr.family == socket.AF_INET and ip_addr is None:
            ip_addr = addr.address
            netmask = addr.netmask
            broadcast = addr.broadcast
        elif addr.family == psutil.AF_LINK:
            # Формат MAC зависит от ОС, приводим к XX:XX:XX:XX:XX:XX в нижнем регистре
            if addr.address and addr.address != '00:00:00:00:00:00':
                mac_addr = addr.address.replace('-', ':').lower()

    if ip_addr is not None and not broadcast and netmask:
        # Не все ОС сообщают broadcast, считаем по маске
        network = ipaddress.ip_network(f'{ip_addr}/{netmask}', strict=False)
        broadcast = str(network.broadcast_address)

    return Interface(name, ip_addr, netmask, broadcast, mac_addr)


def list_interfaces() -> List[Interface]:
    """
    Возвращает сетевые интерфейсы с IPv4-адресом, кроме loopback

    Returns:
        list: Interface(name, ipv4, netmask, broadcast, mac) для каждого интерфейса
    """
    interfaces = []
    for name, addresses in psutil.net_if_addrs().items():
        iface = _interface_from_addresses(name, addresses)
        if iface.ipv4 is None or ipaddress.ip_address(iface.ipv4).is_loopback:
            continue
        interfaces.append(iface)
    return interfaces


def get_broadcast_address(interface_name: str) -> str:
    """
    Получает broadcast-адрес указанного сетевого интерфейса

    Args:
        interface_name (str): Имя сетевого интерфейса

    Returns:
        str: broadcast-адрес, например 192.168.1.255

    Raises:
        LookupError: Если интерфейса нет или у него нет IPv4-адреса
    """
    addresses = psutil.net_if_addrs().get(interface_name)
    if addresses is None:
        raise LookupError(f'Сетевой интерфейс {interface_name} не найден')

    iface = _interface_from_addresses(interface_name, addresses)
    if iface.ipv4 is None or iface.broadcast is None:
        raise LookupError(f'Не удалось получить broadcast-адрес интерфейса {interface_name}')
    return iface.broadcast
