#!/usr/bin/python3

import argparse
import logging
import os
import sys

import gifplay

def get_disposal_method_string (disposal_method):
    if disposal_method == gifplay.DisposalMethod.UNSPECIFIED:
        return 'none'
    elif disposal_method == gifplay.DisposalMethod.DO_NOT_DISPOSE:
        return 'keep'
    elif disposal_method == gifplay.DisposalMethod.RESTORE_BACKGROUND:
        return 'restore background'
    elif disposal_method == gifplay.DisposalMethod.RESTORE_PREVIOUS:
        return 'restore previous'
    else:
        return str (disposal_method)

def describe_loop_count (loop_count):
    if loop_count is None:
        return 'none (play once)'
    elif loop_count == 0:
        return 'infinite'
    else:
        return '%d' % loop_count

def decode_gif (f, settings, passes, output_dir):
    with open (f, 'rb') as file:
        data = file.read ()

    try:
        session = gifplay.open (data, settings = settings)
    except gifplay.GIFError as e:
        print ('%s: %s' % (e.kind, e))
        return False

    with session:
        screen = session.screen
        print ('Version: GIF%s' % screen.version.decode ('ascii'))
        print ('Size: %dx%d pixels' % (screen.width, screen.height))
        print ('Original Depth: %d bits' % screen.color_resolution)
        if screen.has_color_table:
            colors = [ '#%02x%02x%02x' % color for color in screen.color_table.colors ]
            print ('Colors (%d): %s' % (len (colors), ', '.join (colors)))
            print ('Background Color: %d' % screen.background_color)
        print ('Loop Count: %s' % describe_loop_count (session.declared_loop_count))

        if output_dir is not None:
            os.makedirs (output_dir, exist_ok = True)

        while True:
            event = session.next_frame ()
            if isinstance (event, gifplay.DecodeError):
                print ('%s: %s' % (event.kind, event.error))
                return False
            if not isinstance (event, gifplay.Frame) or event.loop_index >= passes:
                break
            print ('Frame %d (pass %d): delay %.2fs' % (event.index, event.loop_index, event.delay))
            if output_dir is not None:
                filename = os.path.join (output_dir, 'frame-%03d-%04d.png' % (event.loop_index, event.index))
                event.to_image ().save (filename)

    return True

def main (args = None):
    parser = argparse.ArgumentParser (description = 'Decode an animated GIF into composited frames')
    parser.add_argument ('file', help = 'GIF file to decode')
    parser.add_argument ('--config', help = 'settings file')
    parser.add_argument ('--loop-forever', action = 'store_true', help = 'ignore the loop count in the file')
    parser.add_argument ('--minimum-delay', type = float, help = 'minimum frame delay in seconds')
    parser.add_argument ('--passes', type = int, default = 1, help = 'number of passes to decode at most')
    parser.add_argument ('--output', help = 'directory to write PNG frames to')
    parser.add_argument ('--verbose', action = 'store_true', help = 'show debug messages')
    args = parser.parse_args (args)

    settings = gifplay.Settings ()
    if args.config is not None:
        settings = gifplay.load_settings (args.config)
    if args.loop_forever:
        settings.force_infinite_loop = True
    if args.minimum_delay is not None:
        settings.minimum_frame_delay = args.minimum_delay

    if args.verbose:
        logging.basicConfig (level = logging.DEBUG)
    else:
        logging.basicConfig (level = settings.log_level)

    if not decode_gif (args.file, settings, args.passes, args.output):
        return 1
    return 0

if __name__ == '__main__':
    sys.exit (main ())
