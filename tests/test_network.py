"""Tests for interface lookup via psutil."""

import socket
from collections import namedtuple
from unittest.mock import patch

import psutil
import pytest

from network import get_broadcast_address, list_interfaces

snicaddr = namedtuple("snicaddr", ["family", "address", "netmask", "broadcast", "ptp"])

ADDRS = {
    "lo": [
        snicaddr(socket.AF_INET, "127.0.0.1", "255.0.0.0", None, None),
        snicaddr(psutil.AF_LINK, "00:00:00:00:00:00", None, None, None),
    ],
    "eth0": [
        snicaddr(socket.AF_INET, "192.168.1.20", "255.255.255.0", "192.168.1.255", None),
        snicaddr(socket.AF_INET6, "fe80::1", "ffff:ffff:ffff:ffff::", None, None),
        snicaddr(psutil.AF_LINK, "E0-73-E7-BC-9C-82", None, "ff:ff:ff:ff:ff:ff", None),
    ],
    "wlan0": [
        snicaddr(socket.AF_INET, "10.0.5.7", "255.255.252.0", None, None),
    ],
    "wg0": [
        snicaddr(socket.AF_INET6, "fd00::2", None, None, None),
    ],
}


@pytest.fixture(autouse=True)
def fake_addrs():
    with patch("network.psutil.net_if_addrs", return_value=ADDRS):
        yield


def test_list_interfaces_skips_loopback_and_ipv6_only():
    names = [iface.name for iface in list_interfaces()]
    assert names == ["eth0", "wlan0"]


def test_list_interfaces_normalizes_mac():
    eth0 = list_interfaces()[0]
    assert eth0.ipv4 == "192.168.1.20"
    assert eth0.mac == "e0:73:e7:bc:9c:82"


def test_broadcast_reported_by_os():
    assert get_broadcast_address("eth0") == "192.168.1.255"


def test_broadcast_computed_from_netmask():
    assert get_broadcast_address("wlan0") == "10.0.7.255"


def test_unknown_interface():
    with pytest.raises(LookupError):
        get_broadcast_address("eth9")


def test_interface_without_ipv4():
    with pytest.raises(LookupError):
        get_broadcast_address("wg0")
