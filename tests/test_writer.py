import io

import pytest

from avroschema.writer import Writer


class _ErrorWriter:
    def write(self, data):
        raise OSError("test error")


def test_reset():
    buf = io.BytesIO()
    w = Writer(None)
    w.reset(buf)
    w.write(b"test")

    w.flush()

    assert buf.getvalue() == b"test"


def test_buffer():
    w = Writer(None)
    w.write(b"test")

    assert w.buffered() == 4
    assert w.buffer() == b"test"


def test_flush():
    buf = io.BytesIO()
    w = Writer(buf)
    w.write(b"test")

    w.flush()

    assert buf.getvalue() == b"test"
    assert w.buffered() == 0


def test_flush_no_writer_keeps_buffer():
    w = Writer(None)
    w.write(b"test")

    w.flush()

    assert w.buffer() == b"test"


def test_flush_raises_writer_error():
    w = Writer(io.BytesIO())
    w.error = ValueError("test")

    with pytest.raises(ValueError, match="test"):
        w.flush()


def test_flush_raises_underlying_writer_error():
    w = Writer(_ErrorWriter())
    w.write(b"test")

    with pytest.raises(OSError):
        w.flush()
    assert isinstance(w.error, OSError)


def test_write():
    w = Writer(None)

    w.write(bytes([0xBC, 0xDC, 0x06, 0x00, 0x10, 0x0A]))

    assert w.buffer() == bytes([0xBC, 0xDC, 0x06, 0x00, 0x10, 0x0A])


@pytest.mark.parametrize("data, want", [(False, b"\x00"), (True, b"\x01")])
def test_write_bool(data, want):
    w = Writer(None)
    w.write_bool(data)
    assert w.buffer() == want


INT_CASES = [
    (27, [0x36]),
    (-8, [0x0F]),
    (-1, [0x01]),
    (0, [0x00]),
    (1, [0x02]),
    (-64, [0x7F]),
    (64, [0x80, 0x01]),
    (123456789, [0xAA, 0xB4, 0xDE, 0x75]),
    (987654321, [0xE2, 0xA2, 0xF3, 0xAD, 0x07]),
]


@pytest.mark.parametrize("data, want", INT_CASES)
def test_write_int(data, want):
    w = Writer(None)
    w.write_int(data)
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "data, want",
    INT_CASES
    + [
        (9223372036854775807, [0xFE, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x01]),
        (-9223372036854775808, [0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x01]),
        (-5468631321897454687, [0xBD, 0xB1, 0xAE, 0xD4, 0xD2, 0xCD, 0xBD, 0xE4, 0x97, 0x01]),
    ],
)
def test_write_long(data, want):
    w = Writer(None)
    w.write_long(data)
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "data, want",
    [
        (0.0, [0x00, 0x00, 0x00, 0x00]),
        (1.0, [0x00, 0x00, 0x80, 0x3F]),
        (1.15, [0x33, 0x33, 0x93, 0x3F]),
        (-53.964, [0x23, 0xDB, 0x57, 0xC2]),
        (-123456789.123, [0xA3, 0x79, 0xEB, 0xCC]),
        (987654.111115, [0x62, 0x20, 0x71, 0x49]),
    ],
)
def test_write_float(data, want):
    w = Writer(None)
    w.write_float(data)
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "data, want",
    [
        (0.0, [0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00]),
        (1.0, [0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0xF0, 0x3F]),
        (1.15, [0x66, 0x66, 0x66, 0x66, 0x66, 0x66, 0xF2, 0x3F]),
        (-53.964, [0x08, 0xAC, 0x1C, 0x5A, 0x64, 0xFB, 0x4A, 0xC0]),
        (-123456789.123, [0xB6, 0xF3, 0x7D, 0x54, 0x34, 0x6F, 0x9D, 0xC1]),
        (987654.111115, [0xB6, 0x10, 0xE4, 0x38, 0x0C, 0x24, 0x2E, 0x41]),
        (123456789.123456789, [0x75, 0x6B, 0x7E, 0x54, 0x34, 0x6F, 0x9D, 0x41]),
        (9999999.99999999999999999999999, [0x00, 0x00, 0x00, 0x00, 0xD0, 0x12, 0x63, 0x41]),
        (916734926348163.01973408746523, [0x18, 0xFC, 0x1A, 0xDD, 0x1F, 0x0E, 0x0A, 0x43]),
        (-267319348967891263.1928357138913857, [0x0A, 0x8F, 0xA6, 0x40, 0xAC, 0xAD, 0x8D, 0xC3]),
    ],
)
def test_write_double(data, want):
    w = Writer(None)
    w.write_double(data)
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "data, want",
    [
        ([0x02], [0x02, 0x02]),
        ([0x03, 0xFF], [0x04, 0x03, 0xFF]),
        ([0xEC, 0xAB, 0x44, 0x00], [0x08, 0xEC, 0xAB, 0x44, 0x00]),
        ([0xAC, 0xDC, 0x01, 0x00, 0x10, 0x0F], [0x0C, 0xAC, 0xDC, 0x01, 0x00, 0x10, 0x0F]),
    ],
)
def test_write_bytes(data, want):
    w = Writer(None)
    w.write_bytes(bytes(data))
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "data, want",
    [
        ("", [0x00]),
        ("foo", [0x06, 0x66, 0x6F, 0x6F]),
        ("avro", [0x08, 0x61, 0x76, 0x72, 0x6F]),
        ("apache", [0x0C, 0x61, 0x70, 0x61, 0x63, 0x68, 0x65]),
        (
            "oppan gangnam style!",
            [0x28, 0x6F, 0x70, 0x70, 0x61, 0x6E, 0x20, 0x67, 0x61, 0x6E, 0x67, 0x6E,
             0x61, 0x6D, 0x20, 0x73, 0x74, 0x79, 0x6C, 0x65, 0x21],
        ),
        (
            "че-то по русски",
            [0x36, 0xD1, 0x87, 0xD0, 0xB5, 0x2D, 0xD1, 0x82, 0xD0, 0xBE, 0x20, 0xD0,
             0xBF, 0xD0, 0xBE, 0x20, 0xD1, 0x80, 0xD1, 0x83, 0xD1, 0x81, 0xD1, 0x81,
             0xD0, 0xBA, 0xD0, 0xB8],
        ),
        ("世界", [0x0C, 0xE4, 0xB8, 0x96, 0xE7, 0x95, 0x8C]),
        (
            '!№;%:?*"()@#$^&',
            [0x22, 0x21, 0xE2, 0x84, 0x96, 0x3B, 0x25, 0x3A, 0x3F, 0x2A, 0x22, 0x28,
             0x29, 0x40, 0x23, 0x24, 0x5E, 0x26],
        ),
    ],
)
def test_write_string(data, want):
    w = Writer(None)
    w.write_string(data)
    assert w.buffer() == bytes(want)


@pytest.mark.parametrize(
    "length, size, want",
    [(64, 0, [0x80, 0x01]), (64, 64, [0x7F, 0x80, 0x01])],
)
def test_write_block_header(length, size, want):
    w = Writer(None)
    w.write_block_header(length, size)
    assert w.buffer() == bytes(want)


def test_write_block_cb():
    w = Writer(None)

    def callback(writer):
        writer.write_string("foo")
        writer.write_string("avro")
        return 2

    wrote = w.write_block_cb(callback)

    assert w.buffer() == bytes(
        [0x03, 0x12, 0x06, 0x66, 0x6F, 0x6F, 0x08, 0x61, 0x76, 0x72, 0x6F]
    )
    assert wrote == 2