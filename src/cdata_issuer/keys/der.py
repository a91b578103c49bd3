"""Just enough DER to wrap legacy PKCS#1 RSA structures.

Only definite-length encoding is produced. Lengths below 128 use the short
form, anything longer uses the long form with the minimal number of length
octets, so keys of any modulus size can be rewrapped.
"""
from __future__ import annotations

from typing import Final

TAG_INTEGER: Final[int] = 0x02
TAG_BIT_STRING: Final[int] = 0x03
TAG_OCTET_STRING: Final[int] = 0x04
TAG_NULL: Final[int] = 0x05
TAG_OID: Final[int] = 0x06
TAG_SEQUENCE: Final[int] = 0x30

# 1.2.840.113549.1.1.1
RSA_ENCRYPTION_OID: Final[bytes] = bytes.fromhex("2a864886f70d010101")


def encode_length(length: int) -> bytes:
    if length < 0:
        raise ValueError("DER length must be non-negative")
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, byteorder="big")
    if len(body) > 0x7E:
        raise ValueError("DER length too large")
    return bytes([0x80 | len(body)]) + body


def tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + encode_length(len(value)) + value


def sequence(*items: bytes) -> bytes:
    return tlv(TAG_SEQUENCE, b"".join(items))


def rsa_algorithm_identifier() -> bytes:
    """AlgorithmIdentifier { rsaEncryption, NULL }"""
    return sequence(tlv(TAG_OID, RSA_ENCRYPTION_OID), tlv(TAG_NULL, b""))


__all__ = [
    "RSA_ENCRYPTION_OID",
    "TAG_BIT_STRING",
    "TAG_INTEGER",
    "TAG_NULL",
    "TAG_OCTET_STRING",
    "TAG_OID",
    "TAG_SEQUENCE",
    "encode_length",
    "rsa_algorithm_identifier",
    "sequence",
    "tlv",
]
