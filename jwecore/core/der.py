"""Scoped ASN.1 DER builder.

A thin stateful facade over ``pyasn1`` values and its DER encoder. Values are
appended in order; ``begin``/``end`` (or the ``sequence``/``tagged`` context
managers) open and close constructed containers which may nest freely.

Usage:
    builder = DerBuilder()
    with builder.sequence():
        builder.append_integer_from_be_slice(n)
        builder.append_integer_from_be_slice(e)
    der = builder.build()
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from pyasn1.codec.der import encoder
from pyasn1.type import base, tag, univ


class DerType(str, Enum):
    """Universal constructed types the builder can open."""

    SEQUENCE = "sequence"


class DerClass(str, Enum):
    """ASN.1 tag classes."""

    UNIVERSAL = "universal"
    APPLICATION = "application"
    CONTEXT_SPECIFIC = "context_specific"
    PRIVATE = "private"

    @property
    def tag_class(self) -> int:
        return _TAG_CLASSES[self]


_TAG_CLASSES = {
    DerClass.UNIVERSAL: tag.tagClassUniversal,
    DerClass.APPLICATION: tag.tagClassApplication,
    DerClass.CONTEXT_SPECIFIC: tag.tagClassContext,
    DerClass.PRIVATE: tag.tagClassPrivate,
}


class DerBuilder:
    """Builds a DER encoding from a flat stream of begin/append/end calls."""

    def __init__(self) -> None:
        self._values: list[base.Asn1Item] = []
        # Open containers: (empty pyasn1 container, children appended so far)
        self._stack: list[tuple[univ.Sequence, list[base.Asn1Item]]] = []

    # ==================== Containers ====================

    def begin(self, der_type: DerType = DerType.SEQUENCE) -> None:
        """Open a universal constructed value."""
        if der_type != DerType.SEQUENCE:
            raise ValueError(f"Unsupported DER type: {der_type}")
        self._stack.append((univ.Sequence(), []))

    def begin_other(self, der_class: DerClass, tag_number: int) -> None:
        """Open a constructed value with an arbitrary class and tag number.

        Used for the ``[n]`` wrappers of RSAES-OAEP-params, where the children
        are encoded as the content of the tagged value.
        """
        if tag_number < 0:
            raise ValueError(f"Tag number must not be negative: {tag_number}")
        container = univ.Sequence().subtype(
            implicitTag=tag.Tag(der_class.tag_class, tag.tagFormatConstructed, tag_number)
        )
        self._stack.append((container, []))

    def end(self) -> None:
        """Close the innermost open container."""
        if not self._stack:
            raise ValueError("end() called without a matching begin()")
        container, children = self._stack.pop()
        if not children:
            raise ValueError("Empty constructed values are not supported")
        for idx, child in enumerate(children):
            container.setComponentByPosition(idx, child)
        self._append(container)

    @contextmanager
    def sequence(self) -> Iterator["DerBuilder"]:
        self.begin(DerType.SEQUENCE)
        yield self
        self.end()

    @contextmanager
    def tagged(self, der_class: DerClass, tag_number: int) -> Iterator["DerBuilder"]:
        self.begin_other(der_class, tag_number)
        yield self
        self.end()

    # ==================== Primitives ====================

    def append_integer_from_be_slice(self, value: bytes, signed: bool = False) -> None:
        """Append an INTEGER given as big-endian bytes.

        Args:
            value: Big-endian magnitude (or two's complement when signed)
            signed: Interpret ``value`` as two's complement
        """
        if not value:
            raise ValueError("An integer needs at least one byte")
        if not signed:
            self._append(univ.Integer(int.from_bytes(value, "big")))
            return

        # pyasn1 widens some negative values, so the TLV is written here
        content = _minimal_twos_complement(value)
        self._append(univ.Any(b"\x02" + _encode_length(len(content)) + content))

    def append_integer_from_int(self, value: int) -> None:
        if value < 0:
            length = (value.bit_length() + 8) // 8
            self.append_integer_from_be_slice(value.to_bytes(length, "big", signed=True), signed=True)
            return
        self._append(univ.Integer(value))

    def append_object_identifier(self, oid: univ.ObjectIdentifier) -> None:
        self._append(univ.ObjectIdentifier(oid))

    def append_null(self) -> None:
        self._append(univ.Null(""))

    def append_bit_string_from_slice(self, value: bytes, unused_bits: int = 0) -> None:
        if not 0 <= unused_bits <= 7:
            raise ValueError(f"Unused bits must be between 0 and 7: {unused_bits}")
        if unused_bits and not value:
            raise ValueError("An empty bit string cannot have unused bits")
        self._append(univ.BitString.fromOctetString(value, padding=unused_bits))

    def append_octet_string_from_slice(self, value: bytes) -> None:
        self._append(univ.OctetString(value))

    # ==================== Output ====================

    def build(self) -> bytes:
        """Encode everything appended so far.

        Raises:
            ValueError: If a container is still open
        """
        if self._stack:
            raise ValueError(f"{len(self._stack)} constructed value(s) not closed")
        return b"".join(encoder.encode(value) for value in self._values)

    def _append(self, value: base.Asn1Item) -> None:
        if self._stack:
            self._stack[-1][1].append(value)
        else:
            self._values.append(value)


def _minimal_twos_complement(value: bytes) -> bytes:
    """Drop leading bytes that only repeat the sign bit."""
    start = 0
    while start < len(value) - 1:
        first, second = value[start], value[start + 1]
        if (first == 0x00 and second < 0x80) or (first == 0xFF and second >= 0x80):
            start += 1
        else:
            break
    return value[start:]


def _encode_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    octets = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(octets)]) + octets
