import pytest

from jclassdump.binary.codecs.bytecursor import Cursor
from jclassdump.binary.errors import OutOfBounds


def test_big_endian_reads_advance_position():
    cur = Cursor(bytes([0xFF, 0xFE, 0x00, 0x01, 0x80, 0x00, 0x00, 0x00, 0xAB]))
    assert cur.s16() == -2
    assert cur.u16() == 1
    assert cur.s32() == -(2**31)
    assert cur.tell() == 8
    assert cur.u8() == 0xAB
    assert cur.remaining() == 0


def test_same_byte_signed_and_unsigned():
    assert Cursor(b"\xff").u8() == 255
    assert Cursor(b"\xff").s8() == -1
    assert Cursor(b"\xff\xff").u16() == 0xFFFF
    assert Cursor(b"\xff\xff").s16() == -1


def test_take_returns_raw_run():
    cur = Cursor(b"\xca\xfe\xba\xbe\x00")
    assert cur.take(4) == b"\xca\xfe\xba\xbe"
    assert cur.remaining() == 1


@pytest.mark.parametrize("read", [
    lambda c: c.take(5),
    lambda c: c.u32(),
    lambda c: c.s32(),
    lambda c: c.peek(4),
])
def test_overrun_fails_without_moving(read):
    cur = Cursor(b"\x01\x02\x03")
    with pytest.raises(OutOfBounds) as exc:
        read(cur)
    assert exc.value.offset == 0
    assert exc.value.available == 3
    assert cur.tell() == 0


def test_overrun_after_partial_reads_reports_offset():
    cur = Cursor(b"\x00\x01\x02")
    cur.u16()
    with pytest.raises(OutOfBounds) as exc:
        cur.u16()
    assert exc.value.offset == 2
    assert exc.value.need == 2


def test_negative_length_is_out_of_bounds():
    with pytest.raises(OutOfBounds):
        Cursor(b"\x00\x00").take(-1)


def test_text_agrees_with_raw_bytes():
    raw = "héllo".encode("utf-8")
    assert Cursor(raw).text(len(raw)) == "héllo"
    # modified UTF-8 NUL is not valid UTF-8 but must survive byte for byte
    odd = b"a\xc0\x80b"
    assert Cursor(odd).text(4).encode("utf-8", "surrogateescape") == odd


def test_buffer_is_a_private_copy():
    data = bytearray(b"\x00\x07")
    cur = Cursor(data)
    data[1] = 0x09
    assert cur.u16() == 7
