#!/usr/bin/env python3
"""
Build a small FIT tree in memory, verify it, and print its listing.
Then tamper with the kernel and show the resulting verification failure.
"""

import hashlib
import time
import zlib

from fitinfo import Fit, FitError, Node, codec, log, report

kernel = bytes.fromhex('04 e0 2d e5 00 00 9f e5 04 f0 9d e4 ee ff c0 00')
dtb = b'\xd0\x0d\xfe\xed' + bytes(28)

tree = Node.from_dict('/', {
    'description': codec.text('Example FIT'),
    '#address-cells': codec.u32(1),
    'timestamp': codec.u32(int(time.time())),
    'images': {
        'kernel@1': {
            'type': codec.text('kernel'),
            'arch': codec.text('arm'),
            'os': codec.text('linux'),
            'compression': codec.text('none'),
            'data': kernel,
            'hash@1': {'algo': codec.text('crc32'), 'value': codec.u32(zlib.crc32(kernel))},
            'hash@2': {'algo': codec.text('sha1'), 'value': hashlib.sha1(kernel).digest()},
        },
        'fdt@1': {
            'type': codec.text('flat_dt'),
            'arch': codec.text('arm'),
            'compression': codec.text('none'),
            'data': dtb,
            'hash': {'algo': codec.text('md5'), 'value': hashlib.md5(dtb).digest()},
        },
    },
    'configurations': {
        'default': codec.text('conf@1'),
        'conf@1': {
            'description': codec.text('Example board'),
            'kernel': codec.text('kernel@1'),
            'fdt': codec.text('fdt@1'),
        },
    },
})

fit = Fit.build(tree, load_base=0x8200_0000)
print(report.to_text(fit))

tree.child('images').child('kernel@1').set_prop('data', kernel[:-1] + b'\x01')

try:
    Fit.build(tree)
except FitError as error:
    log.error(str(error))
