"""Add-to-Wallet (ATW) links.

Two link shapes exist. A data-transmit link carries the CDATA token itself
in its fragment; a data-fetch link carries only a partner reference that
the wallet later exchanges for card data. Building a link is pure string
formatting, nothing is sent anywhere.
"""
from __future__ import annotations

from enum import Enum
from typing import Final
from urllib.parse import quote

from ..exceptions import LinkError

ATW_BASE_URL: Final[str] = "https://a.swallet.link/atw/v3"


class LinkType(str, Enum):
    DATA_TRANSMIT = "data_transmit"
    DATA_FETCH = "data_fetch"

    @classmethod
    def parse(cls, value: "LinkType | str | None") -> "LinkType":
        if value is None or value == "":
            return cls.DATA_TRANSMIT
        try:
            return cls(value)
        except ValueError as exc:
            raise LinkError(f"Unsupported link type: {value}") from exc


def _segment(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise LinkError(f"{what} is required")
    return quote(value.strip(), safe="")


def data_transmit_link(card_id: str, cdata: str, *, base_url: str = ATW_BASE_URL) -> str:
    """``{base}/{cardId}#Clip?cdata={cdata}``"""
    card = _segment(card_id, "card id")
    if not isinstance(cdata, str) or cdata.count(".") != 2:
        raise LinkError("cdata must be a compact JWS token")
    return f"{base_url.rstrip('/')}/{card}#Clip?cdata={cdata}"


def data_fetch_link(
    certificate_id: str, card_id: str, ref_id: str, *, base_url: str = ATW_BASE_URL
) -> str:
    """``{base}/{certificateId}/{cardId}#Clip?pdata={refId}``"""
    certificate = _segment(certificate_id, "certificate id")
    card = _segment(card_id, "card id")
    reference = _segment(ref_id, "reference id")
    return f"{base_url.rstrip('/')}/{certificate}/{card}#Clip?pdata={reference}"


__all__ = ["ATW_BASE_URL", "LinkType", "data_fetch_link", "data_transmit_link"]
