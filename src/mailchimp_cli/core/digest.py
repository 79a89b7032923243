"""MD5 digest and subscriber identity keys.

Mailchimp addresses list members by the MD5 hash of their lowercased email
address. The digest is computed here in pure Python (RFC 1321) so the value is
bit-exact with the one the API computes on its side.
"""

import struct

_MASK = 0xFFFFFFFF

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

# Per-round left-rotation amounts, cycled every four steps.
_SHIFTS = (
    (7, 12, 17, 22),
    (5, 9, 14, 20),
    (4, 11, 16, 23),
    (6, 10, 15, 21),
)

# floor(abs(sin(i + 1)) * 2**32) for i in 0..63
_CONSTANTS = (
    0xD76AA478, 0xE8C7B756, 0x242070DB, 0xC1BDCEEE,
    0xF57C0FAF, 0x4787C62A, 0xA8304613, 0xFD469501,
    0x698098D8, 0x8B44F7AF, 0xFFFF5BB1, 0x895CD7BE,
    0x6B901122, 0xFD987193, 0xA679438E, 0x49B40821,
    0xF61E2562, 0xC040B340, 0x265E5A51, 0xE9B6C7AA,
    0xD62F105D, 0x02441453, 0xD8A1E681, 0xE7D3FBC8,
    0x21E1CDE6, 0xC33707D6, 0xF4D50D87, 0x455A14ED,
    0xA9E3E905, 0xFCEFA3F8, 0x676F02D9, 0x8D2A4C8A,
    0xFFFA3942, 0x8771F681, 0x6D9D6122, 0xFDE5380C,
    0xA4BEEA44, 0x4BDECFA9, 0xF6BB4B60, 0xBEBFBC70,
    0x289B7EC6, 0xEAA127FA, 0xD4EF3085, 0x04881D05,
    0xD9D4D039, 0xE6DB99E5, 0x1FA27CF8, 0xC4AC5665,
    0xF4292244, 0x432AFF97, 0xAB9423A7, 0xFC93A039,
    0x655B59C3, 0x8F0CCC92, 0xFFEFF47D, 0x85845DD1,
    0x6FA87E4F, 0xFE2CE6E0, 0xA3014314, 0x4E0811A1,
    0xF7537E82, 0xBD3AF235, 0x2AD7D2BB, 0xEB86D391,
)


def _rotate_left(value: int, amount: int) -> int:
    return ((value << amount) | (value >> (32 - amount))) & _MASK


def _pad(message: bytes) -> bytes:
    """Pad a message to a whole number of 64-byte blocks.

    Appends 0x80, zero bytes up to 56 mod 64, then the original length in
    bits as a 64-bit little-endian integer.
    """
    bit_length = (len(message) * 8) & 0xFFFFFFFFFFFFFFFF
    padding = b"\x80" + b"\x00" * ((55 - len(message)) % 64)
    return message + padding + struct.pack("<Q", bit_length)


def _compress(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    """Run the 64 mixing steps of one 512-bit block."""
    words = struct.unpack("<16I", block)
    a, b, c, d = state

    for step in range(64):
        round_index = step // 16
        if round_index == 0:
            mixed = (b & c) | (~b & d)
            index = step
        elif round_index == 1:
            mixed = (b & d) | (c & ~d)
            index = (5 * step + 1) % 16
        elif round_index == 2:
            mixed = b ^ c ^ d
            index = (3 * step + 5) % 16
        else:
            mixed = c ^ (b | ~d)
            index = (7 * step) % 16

        total = (a + (mixed & _MASK) + _CONSTANTS[step] + words[index]) & _MASK
        rotated = _rotate_left(total, _SHIFTS[round_index][step % 4])
        a, b, c, d = d, (b + rotated) & _MASK, b, c

    return (
        (state[0] + a) & _MASK,
        (state[1] + b) & _MASK,
        (state[2] + c) & _MASK,
        (state[3] + d) & _MASK,
    )


def md5_hex(data: bytes | bytearray | str) -> str:
    """Compute the MD5 digest of ``data`` as 32 lowercase hex characters.

    Args:
        data: Bytes to hash. A ``str`` is hashed as its UTF-8 encoding.

    Returns:
        Hex digest string
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    padded = _pad(bytes(data))
    state = _INITIAL_STATE
    for offset in range(0, len(padded), 64):
        state = _compress(state, padded[offset : offset + 64])

    return struct.pack("<4I", *state).hex()


def normalize_email(email: str) -> str:
    """Trim surrounding whitespace and lowercase an email address."""
    return email.strip().lower()


def identity_key(email: str) -> str:
    """Return the subscriber hash Mailchimp uses to address a list member.

    Args:
        email: Email address in any case, optionally padded with whitespace

    Returns:
        MD5 hex digest of the normalized address
    """
    return md5_hex(normalize_email(email).encode("utf-8"))
