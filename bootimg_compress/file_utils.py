#!/usr/bin/env python3
#-*- encoding: Utf-8 -*-
from os.path import splitext
from typing import Optional
from os import remove
import logging

from bootimg_compress.formats import FORMAT_EXTENSIONS, detect_format, format_from_method
from bootimg_compress.errors import BadExtension, UnsupportedFormat
from bootimg_compress.dispatcher import compress, decompress

"""
    File-level commands around the engine: read the whole source in
    memory, write the transformed stream to a new file, and drop the
    source when the destination name was derived from it.
    
    A failed transform removes what was written of the destination,
    as its content can't be trusted.
"""


def _run_to_file(operation, format_tag, destination : str, contents : bytes) -> int:
    
    try:
        with open(destination, 'wb') as output_file:
            return operation(format_tag, output_file, contents)
    
    except Exception:
        logging.error('[!] Failed to write %s, removing it' % destination)
        try:
            remove(destination)
        except FileNotFoundError:
            pass
        raise


def decompress_file(source : str, destination : Optional[str] = None) -> int:
    
    with open(source, 'rb') as input_file:
        contents = input_file.read()
    
    format_tag = detect_format(contents)
    
    if format_tag is None:
        raise UnsupportedFormat("Provided file '%s' is not a supported archive format" % source)
    
    base_name, extension = splitext(source)
    
    # File type and extension should match
    if extension != '.' + FORMAT_EXTENSIONS[format_tag]:
        raise BadExtension("Bad filename extension '%s' for %s data" % (extension, format_tag.name))
    
    remove_source = destination is None
    if remove_source:
        destination = base_name
    
    logging.info('Decompressing to [%s]' % destination)
    
    total = _run_to_file(decompress, format_tag, destination, contents)
    
    logging.info('[+] %d bytes written (%s)' % (total, format_tag.name))
    
    if remove_source:
        remove(source)
    
    return total


def compress_file(method : str, source : str, destination : Optional[str] = None) -> int:
    
    format_tag = format_from_method(method)
    
    with open(source, 'rb') as input_file:
        contents = input_file.read()
    
    remove_source = destination is None
    if remove_source:
        destination = '%s.%s' % (source, FORMAT_EXTENSIONS[format_tag])
    
    logging.info('Compressing to [%s]' % destination)
    
    total = _run_to_file(compress, format_tag, destination, contents)
    
    logging.info('[+] %d bytes written (%s)' % (total, format_tag.name))
    
    if remove_source:
        remove(source)
    
    return total
