"""
CIDR notation expanded to address ranges.

    src_ip:10.0/8 => {"range": {"src_ip": {"gte": "10.0.0.0", "lte": "10.255.255.255"}}}

IPv4 short forms are padded with zero octets. IPv6 blocks work the same
way: ``src_ip:2001:db8::/32``.
"""

import ipaddress
import re
from typing import List, Optional

from loguru import logger

from es_types.tokens import TokenResult
from querystring.plugin import Plugin
from utils.query_builder import build_range_query


# Not exact address matchers, just cheap filters before ipaddress
IPV4_CIDR = re.compile(r"^\d{1,3}(?:\.\d{1,3}){1,3}/\d+$")
IPV6_CIDR = re.compile(r"^[0-9a-fA-F:]+/\d+$")


def _pad_ipv4(cidr: str) -> str:
    address, _, prefix = cidr.partition("/")
    octets = address.split(".")
    octets.extend(["0"] * (4 - len(octets)))
    return f"{'.'.join(octets)}/{prefix}"


class IP(Plugin):
    priority = 25

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        field, _, match = token.partition(":")
        if not field or not match:
            return None

        if IPV4_CIDR.match(match):
            cidr = _pad_ipv4(match)
        elif IPV6_CIDR.match(match):
            cidr = match
        else:
            return None

        try:
            network = ipaddress.ip_network(cidr, strict=False)
        except ValueError as e:
            logger.debug("{} - not a network '{}': {}", self.name, match, e)
            return None

        bounds = {
            "gte": str(network.network_address),
            "lte": str(network.broadcast_address),
        }
        return [TokenResult.from_condition(build_range_query(field, bounds))]
