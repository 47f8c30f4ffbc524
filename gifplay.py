#!/usr/bin/python3

__version__ = '1.0.1'

__all__ = [ 'open', 'decode_frames', 'play', 'play_async', 'load_settings',
            'Session', 'Settings', 'Frame', 'EndOfSequence', 'DecodeError',
            'DisposalMethod', 'GIFError', 'FormatError', 'UnexpectedEndOfStream',
            'TruncatedColorTable', 'TruncatedLZWStream', 'InvalidLZWCode', 'MissingColorTable' ]

import asyncio
import builtins
import configparser
import enum
import logging
import struct
import time

import PIL.Image

log = logging.getLogger (__name__)

MAX_CODE_SIZE = 12
MAX_CODES = 1 << MAX_CODE_SIZE

class GIFError (Exception):
    kind = 'GIFError'

class FormatError (GIFError):
    kind = 'FormatError'

class UnexpectedEndOfStream (GIFError):
    kind = 'UnexpectedEndOfStream'

class TruncatedColorTable (GIFError):
    kind = 'TruncatedColorTable'

class TruncatedLZWStream (GIFError):
    kind = 'TruncatedLzwStream'

class InvalidLZWCode (GIFError):
    kind = 'InvalidLzwCode'

class MissingColorTable (GIFError):
    kind = 'MissingColorTable'

class Cursor:
    def __init__ (self, buffer, offset = 0):
        self.buffer = bytes (buffer)
        self.offset = 0
        self.seek (offset)

    def tell (self):
        return self.offset

    def remaining (self):
        return len (self.buffer) - self.offset

    def seek (self, offset):
        if not 0 <= offset <= len (self.buffer):
            raise UnexpectedEndOfStream ('Seek to %d outside buffer of %d bytes' % (offset, len (self.buffer)))
        self.offset = offset

    def _require (self, n):
        if n > self.remaining ():
            raise UnexpectedEndOfStream ('Need %d bytes at offset %d, only %d remain' % (n, self.offset, self.remaining ()))

    def peek_byte (self):
        self._require (1)
        return self.buffer[self.offset]

    def read_byte (self):
        self._require (1)
        value = self.buffer[self.offset]
        self.offset += 1
        return value

    def read_u16 (self):
        self._require (2)
        (value,) = struct.unpack_from ('<H', self.buffer, self.offset)
        self.offset += 2
        return value

    def read_bytes (self, n):
        self._require (n)
        data = self.buffer[self.offset: self.offset + n]
        self.offset += n
        return data

    def unpack (self, fmt):
        size = struct.calcsize (fmt)
        self._require (size)
        values = struct.unpack_from (fmt, self.buffer, self.offset)
        self.offset += size
        return values

def read_subblocks (cursor):
    subblocks = []
    while True:
        subblock_size = cursor.read_byte ()
        if subblock_size == 0:
            return subblocks
        subblocks.append (cursor.read_bytes (subblock_size))

def skip_subblocks (cursor):
    while True:
        subblock_size = cursor.read_byte ()
        if subblock_size == 0:
            return
        cursor.seek (cursor.tell () + subblock_size)

def read_data_subblocks (cursor):
    # Image data is the one place a short sub-block means a broken LZW stream
    data = bytearray ()
    while True:
        try:
            subblock_size = cursor.read_byte ()
        except UnexpectedEndOfStream:
            raise TruncatedLZWStream ('Image data ended without a terminating sub-block')
        if subblock_size == 0:
            return bytes (data)
        if subblock_size > cursor.remaining ():
            raise TruncatedLZWStream ('Image data sub-block of %d bytes but only %d remain' % (subblock_size, cursor.remaining ()))
        data += cursor.read_bytes (subblock_size)

class ColorTable:
    def __init__ (self, colors):
        self.colors = colors
        self.rgba = [ bytes ((red, green, blue, 0xff)) for (red, green, blue) in colors ]
        # Indices past the end of the table render as opaque black
        self.rgba += [ b'\x00\x00\x00\xff' ] * (256 - len (self.rgba))

    def __len__ (self):
        return len (self.colors)

    def __getitem__ (self, index):
        return self.colors[index]

def read_color_table (cursor, size_field):
    n_colors = 2 << size_field
    if cursor.remaining () < n_colors * 3:
        raise TruncatedColorTable ('Color table of %d entries needs %d bytes, only %d remain' % (n_colors, n_colors * 3, cursor.remaining ()))
    data = cursor.read_bytes (n_colors * 3)
    colors = []
    for i in range (n_colors):
        offset = i * 3
        colors.append ((data[offset], data[offset + 1], data[offset + 2]))
    return ColorTable (colors)

def decode_lzw (data, min_code_size, pixel_count):
    """
    Decompress GIF LZW image data into exactly pixel_count palette indices.

    The code table is stored as (prefix code, suffix byte) pairs and strings
    are rebuilt by walking the prefix chain, so no per-code strings are kept.
    """
    if not 2 <= min_code_size <= 8:
        raise InvalidLZWCode ('Invalid LZW minimum code size %d' % min_code_size)

    values = bytearray ()
    if pixel_count <= 0:
        return values

    clear_code = 1 << min_code_size
    eoi_code = clear_code + 1

    prefixes = [ -1 ] * MAX_CODES
    suffixes = bytearray (MAX_CODES)
    firsts = bytearray (MAX_CODES)
    lengths = [ 0 ] * MAX_CODES
    for i in range (clear_code):
        suffixes[i] = i
        firsts[i] = i
        lengths[i] = 1

    code_size = min_code_size + 1
    next_code = eoi_code + 1
    last_code = -1

    # Code currently being decoded
    bits = 0
    n_bits = 0
    offset = 0
    n_data = len (data)

    while True:
        while n_bits < code_size:
            if offset >= n_data:
                raise TruncatedLZWStream ('LZW data ran out after %d of %d pixels' % (len (values), pixel_count))
            bits |= data[offset] << n_bits
            offset += 1
            n_bits += 8
        code = bits & ((1 << code_size) - 1)
        bits >>= code_size
        n_bits -= code_size

        if code == clear_code:
            code_size = min_code_size + 1
            next_code = eoi_code + 1
            last_code = -1
            continue

        if code == eoi_code:
            raise TruncatedLZWStream ('LZW end of information after %d of %d pixels' % (len (values), pixel_count))

        if code < next_code:
            string_code = code
            extra = None
        elif code == next_code and last_code >= 0:
            string_code = last_code
            extra = firsts[last_code]
        else:
            raise InvalidLZWCode ('Unexpected LZW code %d (next code %d)' % (code, next_code))

        # Rebuild the string backwards from the prefix chain
        length = lengths[string_code]
        string = bytearray (length)
        c = string_code
        for i in range (length - 1, -1, -1):
            string[i] = suffixes[c]
            c = prefixes[c]
        if extra is not None:
            string.append (extra)
        values += string

        if last_code >= 0 and next_code < MAX_CODES:
            prefixes[next_code] = last_code
            suffixes[next_code] = string[0]
            firsts[next_code] = firsts[last_code]
            lengths[next_code] = lengths[last_code] + 1
            next_code += 1
            if next_code == 1 << code_size and code_size < MAX_CODE_SIZE:
                code_size += 1
        last_code = code

        if len (values) >= pixel_count:
            del values[pixel_count:]
            return values

def interlaced_rows (height):
    for (start, step) in ((0, 8), (4, 8), (2, 4), (1, 2)):
        for row in range (start, height, step):
            yield row

def deinterlace (pixels, width, height):
    result = bytearray (len (pixels))
    for (i, row) in enumerate (interlaced_rows (height)):
        result[row * width: (row + 1) * width] = pixels[i * width: (i + 1) * width]
    return result

class DisposalMethod (enum.IntEnum):
    UNSPECIFIED = 0
    DO_NOT_DISPOSE = 1
    RESTORE_BACKGROUND = 2
    RESTORE_PREVIOUS = 3

class GraphicControl:
    def __init__ (self, disposal_method = DisposalMethod.UNSPECIFIED, delay_time = 0, user_input = False, has_transparent = False, transparent_color = 0):
        self.disposal_method = disposal_method
        self.delay_time = delay_time
        self.user_input = user_input
        self.has_transparent = has_transparent
        self.transparent_color = transparent_color

class Block:
    def __init__ (self, offset, length):
        self.offset = offset
        self.length = length

class Extension (Block):
    def __init__ (self, offset, length, label, subblocks):
        Block.__init__ (self, offset, length)
        self.label = label
        self.subblocks = subblocks

class GraphicControlExtension (Extension):
    def __init__ (self, offset, length, subblocks, control):
        Extension.__init__ (self, offset, length, 0xf9, subblocks)
        self.control = control

class CommentExtension (Extension):
    def __init__ (self, offset, length, subblocks):
        Extension.__init__ (self, offset, length, 0xfe, subblocks)

    def get_comment (self, encoding = 'utf-8'):
        return b''.join (self.subblocks).decode (encoding, errors = 'replace')

class ApplicationExtension (Extension):
    def __init__ (self, offset, length, subblocks, identifier, authentication_code):
        Extension.__init__ (self, offset, length, 0xff, subblocks)
        self.identifier = identifier
        self.authentication_code = authentication_code

    def get_data (self):
        return self.subblocks[1:]

class NetscapeExtension (ApplicationExtension):
    def __init__ (self, offset, length, subblocks, identifier, authentication_code):
        ApplicationExtension.__init__ (self, offset, length, subblocks, identifier, authentication_code)
        self.loop_count = None
        self.buffer_size = None
        for subblock in self.get_data ():
            if len (subblock) == 0:
                continue
            id = subblock[0]
            if id == 1 and len (subblock) >= 3:
                (self.loop_count,) = struct.unpack_from ('<H', subblock, 1)
            elif id == 2 and len (subblock) >= 5:
                (self.buffer_size,) = struct.unpack_from ('<I', subblock, 1)

class Image (Block):
    def __init__ (self, offset, length, left, top, width, height, color_table, interlace, lzw_min_code_size, control, pixels):
        Block.__init__ (self, offset, length)
        self.left = left
        self.top = top
        self.width = width
        self.height = height
        self.color_table = color_table
        self.interlace = interlace
        self.lzw_min_code_size = lzw_min_code_size
        self.control = control
        self.pixels = pixels

class Trailer (Block):
    pass

def is_netscape_identifier (identifier):
    return identifier[:8] == b'NETSCAPE'

def make_application_extension (offset, length, subblocks):
    if len (subblocks) > 0:
        header = subblocks[0]
    else:
        header = b''
    identifier = header[:8]
    authentication_code = header[8:11]
    if is_netscape_identifier (identifier):
        return NetscapeExtension (offset, length, subblocks, identifier, authentication_code)
    return ApplicationExtension (offset, length, subblocks, identifier, authentication_code)

class ScreenDescriptor:
    def __init__ (self, version, width, height, color_table, background_color, pixel_aspect_ratio, color_resolution, color_table_sorted):
        self.version = version
        self.width = width
        self.height = height
        self.color_table = color_table
        self.background_color = background_color
        self.pixel_aspect_ratio = pixel_aspect_ratio
        self.color_resolution = color_resolution
        self.color_table_sorted = color_table_sorted

    @property
    def has_color_table (self):
        return self.color_table is not None

    def get_background_rgba (self):
        if self.color_table is None:
            return b'\x00\x00\x00\x00'
        if self.background_color >= len (self.color_table):
            log.warning ('Background color %d outside global color table of %d entries', self.background_color, len (self.color_table))
            return b'\x00\x00\x00\x00'
        return self.color_table.rgba[self.background_color]

def read_screen_descriptor (cursor):
    if cursor.remaining () < 6:
        raise FormatError ('Not a GIF file')
    signature = cursor.read_bytes (6)
    if signature not in (b'GIF87a', b'GIF89a'):
        raise FormatError ('Not a GIF file (signature %r)' % signature)

    (width, height, flags, background_color, pixel_aspect_ratio) = cursor.unpack ('<HHBBB')
    if width == 0 or height == 0:
        raise FormatError ('Invalid screen size %dx%d' % (width, height))
    has_color_table = flags & 0x80 != 0
    color_resolution = ((flags >> 4) & 0x7) + 1
    color_table_sorted = flags & 0x08 != 0
    color_table_size = flags & 0x7

    color_table = None
    if has_color_table:
        color_table = read_color_table (cursor, color_table_size)

    return ScreenDescriptor (signature[3:], width, height, color_table, background_color, pixel_aspect_ratio, color_resolution, color_table_sorted)

def scan_loop_count (cursor):
    """
    Find the loop count declared by NETSCAPE extensions without decoding any
    image data. The last extension found wins; None means none was present.
    The cursor is left where it started.
    """
    start = cursor.tell ()
    loop_count = None
    try:
        while cursor.remaining () > 0:
            block_start = cursor.tell ()
            block_type = cursor.read_byte ()

            # Extension
            if block_type == 0x21:
                label = cursor.read_byte ()
                if label == 0xff:
                    block = make_application_extension (block_start, cursor.tell () - block_start, read_subblocks (cursor))
                    if isinstance (block, NetscapeExtension) and block.loop_count is not None:
                        loop_count = block.loop_count
                else:
                    skip_subblocks (cursor)

            # Image
            elif block_type == 0x2c:
                (flags,) = cursor.unpack ('<8xB')
                if flags & 0x80 != 0:
                    cursor.read_bytes ((2 << (flags & 0x7)) * 3)
                cursor.read_byte ()
                skip_subblocks (cursor)

            # Trailer
            elif block_type == 0x3b:
                break
    except UnexpectedEndOfStream:
        log.debug ('Loop count scan stopped at truncated data')
    finally:
        cursor.seek (start)
    return loop_count

class Parser:
    """
    Walks the blocks after the screen descriptor, yielding one block at a
    time. Image blocks come out fully decoded with the graphic control that
    applies to them.
    """

    def __init__ (self, cursor, screen):
        self.cursor = cursor
        self.screen = screen
        self.control = GraphicControl ()

    def parse_blocks (self):
        self.control = GraphicControl ()
        while True:
            block_start = self.cursor.tell ()
            try:
                block_type = self.cursor.read_byte ()
            except UnexpectedEndOfStream:
                log.debug ('Data ended without a trailer at offset %d', block_start)
                return

            if block_type == 0x21:
                yield self.parse_extension (block_start)
            elif block_type == 0x2c:
                block = self.parse_image (block_start)
                self.control = GraphicControl ()
                yield block
            elif block_type == 0x3b:
                yield Trailer (block_start, 1)
                return
            else:
                log.debug ('Skipping unknown block type 0x%02x at offset %d', block_type, block_start)

    def parse_extension (self, block_start):
        label = self.cursor.read_byte ()
        subblocks = read_subblocks (self.cursor)
        block_length = self.cursor.tell () - block_start

        if label == 0xf9:
            if len (subblocks) == 0 or len (subblocks[0]) < 4:
                log.warning ('Ignoring malformed Graphic Control Extension at offset %d', block_start)
                return Extension (block_start, block_length, label, subblocks)
            (flags, delay_time, transparent_color) = struct.unpack_from ('<BHB', subblocks[0])
            disposal_method = flags >> 2 & 0x7
            if disposal_method > DisposalMethod.RESTORE_PREVIOUS:
                log.debug ('Treating reserved disposal method %d as unspecified', disposal_method)
                disposal_method = DisposalMethod.UNSPECIFIED
            self.control = GraphicControl (DisposalMethod (disposal_method), delay_time, flags & 0x02 != 0, flags & 0x01 != 0, transparent_color)
            return GraphicControlExtension (block_start, block_length, subblocks, self.control)
        elif label == 0xff:
            return make_application_extension (block_start, block_length, subblocks)
        elif label == 0xfe:
            return CommentExtension (block_start, block_length, subblocks)
        else:
            log.debug ('Skipping extension 0x%02x at offset %d', label, block_start)
            return Extension (block_start, block_length, label, subblocks)

    def parse_image (self, block_start):
        (left, top, width, height, flags) = self.cursor.unpack ('<HHHHB')
        has_color_table = flags & 0x80 != 0
        interlace = flags & 0x40 != 0
        color_table_size = flags & 0x7

        color_table = None
        if has_color_table:
            color_table = read_color_table (self.cursor, color_table_size)
        if color_table is None and self.screen.color_table is None:
            raise MissingColorTable ('Image at offset %d has no local or global color table' % block_start)

        lzw_min_code_size = self.cursor.read_byte ()
        data = read_data_subblocks (self.cursor)
        pixels = decode_lzw (data, lzw_min_code_size, width * height)
        if interlace:
            pixels = deinterlace (pixels, width, height)

        return Image (block_start, self.cursor.tell () - block_start, left, top, width, height, color_table, interlace, lzw_min_code_size, self.control, pixels)

class Compositor:
    """
    Owns the canvas and draws each image onto it, applying the disposal
    method of the image drawn before it.
    """

    def __init__ (self, width, height, background):
        self.width = width
        self.height = height
        self.background = background
        self.canvas = bytearray (background * (width * height))
        self.start_pass ()

    def start_pass (self):
        self.previous_disposal = DisposalMethod.UNSPECIFIED
        self.previous_rect = None
        self.snapshot = None

    def clip (self, left, top, width, height):
        right = min (left + width, self.width)
        bottom = min (top + height, self.height)
        return (left, top, max (right - left, 0), max (bottom - top, 0))

    def fill_rect (self, rect, color):
        (left, top, width, height) = self.clip (*rect)
        if width == 0:
            return
        row = color * width
        for y in range (top, top + height):
            offset = (y * self.width + left) * 4
            self.canvas[offset: offset + width * 4] = row

    def dispose (self):
        if self.previous_disposal == DisposalMethod.RESTORE_BACKGROUND and self.previous_rect is not None:
            self.fill_rect (self.previous_rect, self.background)
        elif self.previous_disposal == DisposalMethod.RESTORE_PREVIOUS and self.snapshot is not None:
            self.canvas[:] = self.snapshot
        self.snapshot = None

    def composite (self, image, color_table):
        self.dispose ()

        control = image.control
        if control.disposal_method == DisposalMethod.RESTORE_PREVIOUS:
            self.snapshot = bytes (self.canvas)

        colors = color_table.rgba
        (left, top, width, height) = self.clip (image.left, image.top, image.width, image.height)
        pixels = image.pixels
        for row in range (height):
            src = row * image.width
            dest = ((top + row) * self.width + left) * 4
            indices = pixels[src: src + width]
            if not control.has_transparent:
                self.canvas[dest: dest + width * 4] = b''.join ([ colors[i] for i in indices ])
                continue
            transparent_color = control.transparent_color
            for i in indices:
                if i != transparent_color:
                    self.canvas[dest: dest + 4] = colors[i]
                dest += 4

        self.previous_disposal = control.disposal_method
        self.previous_rect = (image.left, image.top, image.width, image.height)

    def view (self):
        return memoryview (self.canvas).toreadonly ()

    def clear (self):
        self.canvas[:] = bytes (len (self.canvas))

    def release (self):
        self.canvas = bytearray ()
        self.snapshot = None

class Frame:
    def __init__ (self, pixels, delay, loop_index, index, width, height):
        self.pixels = pixels
        self.delay = delay
        self.loop_index = loop_index
        self.index = index
        self.width = width
        self.height = height

    def __repr__ (self):
        return '<Frame %d of pass %d, %dx%d, %.3fs>' % (self.index, self.loop_index, self.width, self.height, self.delay)

    def to_bytes (self):
        return bytes (self.pixels)

    def get_pixel (self, x, y):
        offset = (y * self.width + x) * 4
        return tuple (self.pixels[offset: offset + 4])

    def to_image (self):
        return PIL.Image.frombytes ('RGBA', (self.width, self.height), self.to_bytes ())

class EndOfSequence:
    def __repr__ (self):
        return '<EndOfSequence>'

class DecodeError:
    def __init__ (self, error):
        self.error = error
        self.kind = error.kind

    def __repr__ (self):
        return '<DecodeError %s: %s>' % (self.kind, self.error)

class Session:
    """
    Decodes one GIF into composited frames, one frame per next_frame () call.
    """

    def __init__ (self, data, force_infinite_loop = False, minimum_frame_delay = 0.02):
        self.force_infinite_loop = force_infinite_loop
        self.minimum_frame_delay = minimum_frame_delay

        self.cursor = Cursor (data)
        self.screen = read_screen_descriptor (self.cursor)
        self.blocks_offset = self.cursor.tell ()

        self.declared_loop_count = scan_loop_count (self.cursor)
        self.loop_count = self.declared_loop_count

        self.compositor = Compositor (self.screen.width, self.screen.height, self.screen.get_background_rgba ())
        self.parser = Parser (self.cursor, self.screen)
        self.blocks = None
        self.passes_completed = 0
        self.frames_decoded = 0
        self.pass_frames = 0
        self.result = None
        self.closed = False

        log.info ('Opened GIF%s %dx%d, loop count %s', self.screen.version.decode ('ascii'), self.screen.width, self.screen.height, self.describe_loop_count ())

    def describe_loop_count (self):
        if self.force_infinite_loop or self.loop_count == 0:
            return 'infinite'
        if self.loop_count is None:
            return 'none'
        return str (self.loop_count)

    def __enter__ (self):
        return self

    def __exit__ (self, exc_type, exc_value, traceback):
        self.close ()

    def __iter__ (self):
        while True:
            event = self.next_frame ()
            if isinstance (event, Frame):
                yield event
            elif isinstance (event, DecodeError):
                raise event.error
            else:
                return

    def has_another_pass (self):
        if self.force_infinite_loop or self.loop_count == 0:
            return True
        if self.loop_count is None:
            return self.passes_completed < 1
        return self.passes_completed < self.loop_count

    def start_pass (self):
        log.debug ('Starting pass %d', self.passes_completed)
        self.cursor.seek (self.blocks_offset)
        self.compositor.start_pass ()
        self.blocks = self.parser.parse_blocks ()
        self.pass_frames = 0

    def end_pass (self):
        self.blocks = None
        self.passes_completed += 1
        if self.pass_frames == 0:
            log.debug ('Pass %d produced no frames, stopping', self.passes_completed - 1)
            self.result = EndOfSequence ()
        elif not self.has_another_pass ():
            self.result = EndOfSequence ()

    def next_frame (self):
        if self.closed:
            raise ValueError ('next_frame on closed GIF session')
        if self.result is not None:
            return self.result
        try:
            return self.decode_next_frame ()
        except GIFError as e:
            log.error ('GIF decoding failed: %s', e)
            self.result = DecodeError (e)
            self.blocks = None
            return self.result

    def decode_next_frame (self):
        while self.result is None:
            if self.blocks is None:
                self.start_pass ()

            for block in self.blocks:
                if isinstance (block, NetscapeExtension) and block.loop_count is not None:
                    self.loop_count = block.loop_count
                elif isinstance (block, Image):
                    return self.composite (block)

            self.end_pass ()
        return self.result

    def composite (self, image):
        color_table = image.color_table
        if color_table is None:
            color_table = self.screen.color_table
        self.compositor.composite (image, color_table)

        delay = max (image.control.delay_time / 100, self.minimum_frame_delay)
        frame = Frame (self.compositor.view (), delay, self.passes_completed, self.pass_frames, self.screen.width, self.screen.height)
        self.pass_frames += 1
        self.frames_decoded += 1
        return frame

    def close (self):
        if self.closed:
            return
        self.closed = True
        self.blocks = None
        self.compositor.release ()

def open (data, force_infinite_loop = None, minimum_frame_delay = None, settings = None):
    if settings is None:
        settings = Settings ()
    if force_infinite_loop is None:
        force_infinite_loop = settings.force_infinite_loop
    if minimum_frame_delay is None:
        minimum_frame_delay = settings.minimum_frame_delay
    return Session (data, force_infinite_loop, minimum_frame_delay)

def decode_frames (data, max_passes = 1, force_infinite_loop = False, minimum_frame_delay = 0.02):
    frames = []
    with Session (data, force_infinite_loop, minimum_frame_delay) as session:
        for frame in session:
            if frame.loop_index >= max_passes:
                break
            frames.append ((frame.to_bytes (), frame.delay))
    return frames

class Settings:
    def __init__ (self, force_infinite_loop = False, minimum_frame_delay = 0.02, log_level = 'WARNING'):
        if minimum_frame_delay < 0:
            raise ValueError ('Minimum frame delay must not be negative')
        self.force_infinite_loop = force_infinite_loop
        self.minimum_frame_delay = minimum_frame_delay
        self.log_level = log_level

def load_settings (path):
    config = configparser.ConfigParser ()
    with builtins.open (path) as f:
        config.read_file (f)
    settings = Settings ()
    if not config.has_section ('gifplay'):
        return settings
    section = config['gifplay']
    force_infinite_loop = section.getboolean ('loop-forever', fallback = settings.force_infinite_loop)
    minimum_frame_delay = section.getfloat ('minimum-frame-delay', fallback = settings.minimum_frame_delay)
    log_level = section.get ('log-level', fallback = settings.log_level).upper ()
    if not isinstance (logging.getLevelName (log_level), int):
        raise ValueError ('Unknown log level %s' % log_level)
    return Settings (force_infinite_loop, minimum_frame_delay, log_level)

def _finish_playback (session, sink, clear_on_finish, close):
    if clear_on_finish and not session.closed:
        session.compositor.clear ()
        sink (Frame (session.compositor.view (), 0.0, session.passes_completed, 0, session.screen.width, session.screen.height))
    if close:
        session.close ()

def play (session, sink, sleep = time.sleep, max_passes = None, clear_on_finish = True, close = False):
    n_frames = 0
    try:
        while True:
            event = session.next_frame ()
            if isinstance (event, DecodeError):
                raise event.error
            if not isinstance (event, Frame):
                break
            if max_passes is not None and event.loop_index >= max_passes:
                break
            sink (event)
            n_frames += 1
            sleep (event.delay)
    finally:
        _finish_playback (session, sink, clear_on_finish, close)
    return n_frames

async def play_async (session, sink, max_passes = None, clear_on_finish = True, close = False):
    n_frames = 0
    try:
        while True:
            # LZW decoding is CPU bound, keep it off the event loop
            event = await asyncio.to_thread (session.next_frame)
            if isinstance (event, DecodeError):
                raise event.error
            if not isinstance (event, Frame):
                break
            if max_passes is not None and event.loop_index >= max_passes:
                break
            sink (event)
            n_frames += 1
            await asyncio.sleep (event.delay)
    finally:
        _finish_playback (session, sink, clear_on_finish, close)
    return n_frames
