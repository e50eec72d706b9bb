#!/usr/bin/python3

from setuptools import setup

setup(name='bootimg-compress',
      version='1.0',
      description='Streaming compression and decompression of boot image payloads (gzip, xz, lzma, bzip2, lz4 and legacy lz4)',
      author='',
      author_email='',
      install_requires=['lz4'],
      extras_require={'test': ['pytest']},
      python_requires='>=3.8',
      packages=['bootimg_compress', 'bootimg_compress.drivers'],
      scripts=['bootimg-compress']
     )
