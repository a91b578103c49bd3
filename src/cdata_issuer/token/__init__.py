"""Token construction and inspection."""
from .callback import CardEvent, CardStateCallback, create_callback_token
from .header import CERTIFICATE_ID, CONTENT_TYPE, FORMAT_VERSION, CardHeader
from .inspect import TokenInfo, inspect_token
from .issuer import CDataIssuer, issue
from .links import ATW_BASE_URL, LinkType, data_fetch_link, data_transmit_link

__all__ = [
    "ATW_BASE_URL",
    "CDataIssuer",
    "CERTIFICATE_ID",
    "CONTENT_TYPE",
    "CardEvent",
    "CardHeader",
    "CardStateCallback",
    "FORMAT_VERSION",
    "LinkType",
    "TokenInfo",
    "create_callback_token",
    "data_fetch_link",
    "data_transmit_link",
    "inspect_token",
    "issue",
]
