import pytest

import gifplay

def test_reads_advance ():
    cursor = gifplay.Cursor (b'\x01\x02\x03\x04\x05')
    assert cursor.read_byte () == 0x01
    assert cursor.read_u16 () == 0x0302
    assert cursor.read_bytes (2) == b'\x04\x05'
    assert cursor.remaining () == 0

def test_peek_does_not_advance ():
    cursor = gifplay.Cursor (b'\x2c\x3b')
    assert cursor.peek_byte () == 0x2c
    assert cursor.peek_byte () == 0x2c
    assert cursor.tell () == 0

@pytest.mark.parametrize ('read', [
    lambda c: c.read_byte (),
    lambda c: c.read_u16 (),
    lambda c: c.read_bytes (3),
    lambda c: c.peek_byte (),
])
def test_reads_past_end (read):
    cursor = gifplay.Cursor (b'\xff\xff', offset = 1)
    cursor.read_byte ()
    with pytest.raises (gifplay.UnexpectedEndOfStream):
        read (cursor)

def test_failed_read_keeps_position ():
    cursor = gifplay.Cursor (b'\x00')
    with pytest.raises (gifplay.UnexpectedEndOfStream):
        cursor.read_u16 ()
    assert cursor.tell () == 0

def test_seek ():
    cursor = gifplay.Cursor (b'abcdef')
    cursor.seek (4)
    assert cursor.read_bytes (2) == b'ef'
    cursor.seek (6)
    assert cursor.remaining () == 0
    with pytest.raises (gifplay.UnexpectedEndOfStream):
        cursor.seek (7)

def test_subblocks ():
    cursor = gifplay.Cursor (b'\x02ab\x01c\x00\x3b')
    assert gifplay.read_subblocks (cursor) == [ b'ab', b'c' ]
    assert cursor.read_byte () == 0x3b

def test_skip_truncated_subblocks ():
    cursor = gifplay.Cursor (b'\x05ab')
    with pytest.raises (gifplay.UnexpectedEndOfStream):
        gifplay.skip_subblocks (cursor)

def test_truncated_data_subblock ():
    cursor = gifplay.Cursor (b'\x02ab\x09abc')
    with pytest.raises (gifplay.TruncatedLZWStream):
        gifplay.read_data_subblocks (cursor)

def test_missing_data_terminator ():
    cursor = gifplay.Cursor (b'\x02ab')
    with pytest.raises (gifplay.TruncatedLZWStream):
        gifplay.read_data_subblocks (cursor)
