import random

import pytest

import gifplay
from gifmaker import lzw_encode

def pack_codes (codes):
    # Pack (code, size) pairs least significant bit first
    bits = 0
    n_bits = 0
    for (code, size) in codes:
        bits |= code << n_bits
        n_bits += size
    return bits.to_bytes ((n_bits + 7) // 8, 'little')

def test_literal_codes ():
    data = pack_codes ([ (4, 3), (1, 3), (1, 3), (5, 3) ])
    assert gifplay.decode_lzw (data, 2, 2) == bytearray ([ 1, 1 ])

def test_kwkwk_code ():
    # 1, then code 6 which is not defined yet: 1 + 1
    data = pack_codes ([ (4, 3), (1, 3), (6, 3), (5, 3) ])
    assert gifplay.decode_lzw (data, 2, 3) == bytearray ([ 1, 1, 1 ])

def test_clear_resets_table ():
    data = pack_codes ([ (4, 3), (2, 3), (3, 3), (4, 3), (6, 3), (5, 3) ])
    # After the clear, code 6 is unknown and there is no previous code
    with pytest.raises (gifplay.InvalidLZWCode):
        gifplay.decode_lzw (data, 2, 4)

def test_clear_mid_stream ():
    data = pack_codes ([ (4, 3), (2, 3), (3, 3), (4, 3), (3, 3), (2, 3), (6, 3), (5, 3) ])
    assert gifplay.decode_lzw (data, 2, 6) == bytearray ([ 2, 3, 3, 2, 3, 2 ])

def test_missing_clear_code ():
    data = pack_codes ([ (1, 3), (1, 3), (5, 3) ])
    assert gifplay.decode_lzw (data, 2, 2) == bytearray ([ 1, 1 ])

def test_invalid_code ():
    data = pack_codes ([ (4, 3), (1, 3), (7, 3), (5, 3) ])
    with pytest.raises (gifplay.InvalidLZWCode):
        gifplay.decode_lzw (data, 2, 3)

@pytest.mark.parametrize ('min_code_size', [ 0, 1, 9, 11, 12 ])
def test_invalid_min_code_size (min_code_size):
    with pytest.raises (gifplay.InvalidLZWCode):
        gifplay.decode_lzw (b'\x00\x02', min_code_size, 1)

def test_end_code_too_early ():
    data = pack_codes ([ (4, 3), (1, 3), (5, 3) ])
    with pytest.raises (gifplay.TruncatedLZWStream):
        gifplay.decode_lzw (data, 2, 4)

def test_out_of_data ():
    data = lzw_encode ([ 1, 2, 3, 0 ] * 10, 2, send_eoi = False)
    with pytest.raises (gifplay.TruncatedLZWStream):
        gifplay.decode_lzw (data[:3], 2, 40)

def test_stops_at_pixel_count ():
    data = lzw_encode ([ 3 ] * 20 + [ 1 ] * 20, 2)
    assert gifplay.decode_lzw (data, 2, 20) == bytearray ([ 3 ] * 20)

def test_no_end_code_needed ():
    values = [ 0, 1, 2, 3 ] * 8
    data = lzw_encode (values, 2, send_eoi = False)
    assert gifplay.decode_lzw (data, 2, len (values)) == bytearray (values)

def test_zero_pixels ():
    assert gifplay.decode_lzw (b'', 2, 0) == bytearray ()

def test_code_size_growth ():
    # Enough distinct pairs to push the codes from 3 up to 5 bits
    values = [ 0, 1, 2, 3, 0, 2, 1, 3, 3, 1, 0, 0, 2, 2, 3, 3, 1, 1, 0, 3, 2, 0, 1 ] * 3
    data = lzw_encode (values, 2)
    assert gifplay.decode_lzw (data, 2, len (values)) == bytearray (values)

@pytest.mark.parametrize ('min_code_size', [ 2, 4, 8 ])
def test_random_data_fills_table (min_code_size):
    # Random data forces the table to 4096 entries and a clear code
    generator = random.Random (min_code_size)
    values = [ generator.randrange (2 ** min_code_size) for i in range (20000) ]
    data = lzw_encode (values, min_code_size)
    assert gifplay.decode_lzw (data, min_code_size, len (values)) == bytearray (values)

def test_full_table_without_clear ():
    # Encoders may keep using a full table without sending a clear code
    generator = random.Random (1)
    values = [ generator.randrange (16) for i in range (30000) ]
    codes = [ (16, 5) ]
    table = { (i,): i for i in range (16) }
    next_code = 18
    n_codes = 0
    w = ()
    def add (code):
        nonlocal n_codes
        codes.append ((code, min (max (5, (17 + n_codes).bit_length ()), 12)))
        n_codes += 1
    for value in values:
        if w + (value,) in table:
            w = w + (value,)
            continue
        add (table[w])
        if next_code < 4096:
            table[w + (value,)] = next_code
            next_code += 1
        w = (value,)
    add (table[w])
    assert next_code == 4096
    assert gifplay.decode_lzw (pack_codes (codes), 4, len (values)) == bytearray (values)
