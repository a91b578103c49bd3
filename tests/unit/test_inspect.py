from __future__ import annotations

import pytest
from jwcrypto.common import base64url_encode

from cdata_issuer.exceptions import MalformedToken
from cdata_issuer.token import inspect_token, issue


def test_inspect_reports_outer_claims(platform_key, partner_key) -> None:
    token = issue(
        "partner-7",
        platform_key.public_key,
        partner_key.public_key,
        partner_key.private_key,
        '{"card":{}}',
        now=lambda: 1_650_000_000_000,
    )
    info = inspect_token(token)

    assert info.partner_id == "partner-7"
    assert info.certificate_id == "YMtt"
    assert info.version == "3"
    assert info.utc == 1_650_000_000_000
    assert info.content_type == "CARD"
    assert info.header["alg"] == "RS256"
    assert info.inner_segments == 5
    assert info.inner_header == {"alg": "RSA1_5", "enc": "A128GCM"}
    assert info.extra == {}


def _segment(raw: str) -> str:
    return base64url_encode(raw.encode("utf-8"))


@pytest.mark.parametrize(
    "token",
    [
        "",
        "a.b",
        "a.b.c.d",
        "!!.e30.sig",
        f"{_segment('not json')}.{_segment('a.b.c.d.e')}.sig",
        f"{_segment('[1]')}.{_segment('a.b.c.d.e')}.sig",
        f"{_segment('{}')}.{_segment('only.three.parts')}.sig",
        f"{_segment('{}')}.{_segment('x.b.c.d.e')}.sig",
    ],
)
def test_inspect_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(MalformedToken):
        inspect_token(token)


def test_inspect_rejects_non_string() -> None:
    with pytest.raises(MalformedToken):
        inspect_token(b"a.b.c")
