#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from argparse import ArgumentParser
from sys import argv, exit, stdout
import logging

from bootimg_compress.file_utils import compress_file, decompress_file
from bootimg_compress.errors import BootCompressError, UnsupportedFormat
from bootimg_compress.formats import SUPPORTED_METHODS


def build_argument_parser() -> ArgumentParser:
    
    args = ArgumentParser(description = 'Add or remove the compression of ' +
        'boot image payloads (ramdisks, kernels)')
    
    args.add_argument('--verbose', '-v', action = 'store_true', help = 'Log ' +
        'the details of each compression stream')
    
    commands = args.add_subparsers(dest = 'command', metavar = 'COMMAND')
    commands.required = True
    
    decompress_args = commands.add_parser('decompress', help = 'Detect the ' +
        'format of a compressed file and decompress it. Without an output ' +
        'path, the extension is stripped and the input file is removed')
    
    decompress_args.add_argument('input_file', help = 'Path to the .gz/.xz/' +
        '.lzma/.bz2/.lz4 file to decompress')
    decompress_args.add_argument('output_file', nargs = '?', help = 'Path ' +
        'to the decompressed file to output')
    
    compress_args = commands.add_parser('compress', help = 'Compress a file ' +
        'with the given method. Without an output path, the extension of the ' +
        'method is appended and the input file is removed')
    
    compress_args.add_argument('method', help = 'One of: ' + ' '.join(SUPPORTED_METHODS))
    compress_args.add_argument('input_file', help = 'Path to the file to compress')
    compress_args.add_argument('output_file', nargs = '?', help = 'Path ' +
        'to the compressed file to output')
    
    return args


def main(arguments = None):
    
    args = build_argument_parser().parse_args(argv[1:] if arguments is None else arguments)
    
    logging.basicConfig(stream=stdout, level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(message)s')
    
    try:
        if args.command == 'decompress':
            decompress_file(args.input_file, args.output_file)
        else:
            compress_file(args.method, args.input_file, args.output_file)
    
    except UnsupportedFormat as error:
        exit('[!] %s' % error)
    
    except (BootCompressError, OSError) as error:
        exit('[!] Could not %s %s: %s' % (args.command, args.input_file, error))


if __name__ == '__main__':
    
    main()
