"""Read what a CDATA token declares, without verifying or decrypting it."""
from __future__ import annotations

import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jwcrypto.common import base64url_decode

from ..exceptions import MalformedToken
from .header import CERTIFICATE_ID_KEY, PARTNER_ID_KEY, UTC_KEY, VERSION_KEY


@dataclass(slots=True)
class TokenInfo:
    header: Dict[str, Any]
    inner_header: Dict[str, Any]
    inner_segments: int
    partner_id: Optional[str] = None
    certificate_id: Optional[str] = None
    version: Optional[str] = None
    utc: Optional[int] = None
    content_type: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def _decode_segment(segment: str, what: str) -> bytes:
    try:
        return base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise MalformedToken(f"{what} is not valid base64url") from exc


def _decode_json(segment: str, what: str) -> Dict[str, Any]:
    raw = _decode_segment(segment, what)
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedToken(f"{what} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedToken(f"{what} must be a JSON object")
    return data


def inspect_token(token: str) -> TokenInfo:
    """Split ``token`` and decode its headers; the signature is not checked"""
    if not isinstance(token, str):
        raise MalformedToken("Token must be a string")
    segments = token.strip().split(".")
    if len(segments) != 3:
        raise MalformedToken(f"Expected 3 JWS segments, found {len(segments)}")

    header = _decode_json(segments[0], "JWS protected header")
    try:
        inner = _decode_segment(segments[1], "JWS payload").decode("ascii")
    except UnicodeDecodeError as exc:
        raise MalformedToken("JWS payload is not a compact JWE") from exc
    inner_segments = inner.split(".")
    if len(inner_segments) != 5:
        raise MalformedToken(f"Expected 5 JWE segments, found {len(inner_segments)}")
    inner_header = _decode_json(inner_segments[0], "JWE protected header")

    known = {"alg", "cty", PARTNER_ID_KEY, CERTIFICATE_ID_KEY, VERSION_KEY, UTC_KEY}
    utc = header.get(UTC_KEY)
    return TokenInfo(
        header=header,
        inner_header=inner_header,
        inner_segments=len(inner_segments),
        partner_id=header.get(PARTNER_ID_KEY),
        certificate_id=header.get(CERTIFICATE_ID_KEY),
        version=header.get(VERSION_KEY),
        utc=int(utc) if isinstance(utc, (int, float)) and not isinstance(utc, bool) else None,
        content_type=header.get("cty"),
        extra={key: value for key, value in header.items() if key not in known},
    )


__all__ = ["TokenInfo", "inspect_token"]
