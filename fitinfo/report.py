# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Text and JSON-friendly summaries of a :py:class:`~fitinfo.Fit`.

Images and configurations are always listed in name order.
"""

import json
import os

from textwrap import indent

_INDENT = 2 * ' '


def _image_dict(image) -> dict:
    return {
        'description': image.description,
        'type': image.type,
        'arch': image.arch,
        'os': image.os,
        'compression': image.compression,
        'size': image.size,
        'load': image.load,
        'entry': image.entry,
        'hashes': [{'name': h.name, 'algo': h.algorithm, 'value': h.expected.hex()}
                   for h in sorted(image.hashes, key=lambda h: h.name)],
    }


def _config_dict(config) -> dict:
    return {
        'description': config.description,
        'images': [{'field': entry.field,
                    'image': entry.image.name,
                    'load_address': entry.load_address} for entry in config.image_list],
    }


def to_dict(fit) -> dict:
    """
    Return a dictionary describing *fit*, suitable for serialization to JSON.
    Image payloads are not included, only their sizes and digests.
    """
    return {
        'description': fit.description,
        'address_cells': fit.address_cells,
        'timestamp': fit.timestamp,
        'default': fit.default_config_name,
        'images': {name: _image_dict(fit.images[name]) for name in sorted(fit.images)},
        'configurations': {name: _config_dict(fit.configs[name]) for name in sorted(fit.configs)},
    }


def to_json(fit, **kwargs) -> str:
    """
    Return :py:func:`to_dict()` output as a JSON string.
    Keyword arguments are passed to :py:func:`json.dumps()`.
    """
    kwargs.setdefault('indent', 4)
    return json.dumps(to_dict(fit), **kwargs)


def _image_text(image) -> str:
    lines = []
    if image.description:
        lines.append('Description:  ' + image.description)
    lines.append('Type:         ' + image.type)
    lines.append('Architecture: ' + image.arch)
    if image.os is not None:
        lines.append('OS:           ' + image.os)
    lines.append('Compression:  ' + image.compression)
    lines.append('Data Size:    {:d} Bytes'.format(image.size))
    if image.load is not None:
        lines.append('Load Address: 0x{:08x}'.format(image.load))
    if image.entry is not None:
        lines.append('Entry Point:  0x{:08x}'.format(image.entry))

    for record in sorted(image.hashes, key=lambda h: h.name):
        lines.append('Hash ({:s}):  {:s} {:s}'.format(record.name, record.algorithm, record.expected.hex()))

    return os.linesep.join(lines)


def _config_text(config, is_default: bool) -> str:
    lines = []
    if config.description is not None:
        lines.append('Description:  ' + config.description)
    if is_default:
        lines.append('(default)')

    for entry in config.image_list:
        lines.append('{:<8s}      0x{:08x}  {:s}'.format(entry.field, entry.load_address, entry.image.name))

    return os.linesep.join(lines)


def to_text(fit) -> str:
    """
    Return a human-readable listing of *fit*.
    """
    created = fit.build_time.strftime('%a %b %d %H:%M:%S %Y UTC')

    out = 'FIT description: ' + fit.description + os.linesep
    out += 'Created:         ' + created + os.linesep
    out += 'Address cells:   {:d}'.format(fit.address_cells) + os.linesep

    for name in sorted(fit.images):
        out += os.linesep + 'Image ' + name + os.linesep
        out += indent(_image_text(fit.images[name]), _INDENT) + os.linesep

    out += os.linesep + 'Default Configuration: ' + fit.default_config_name + os.linesep

    for name in sorted(fit.configs):
        out += os.linesep + 'Configuration ' + name + os.linesep
        is_default = name == fit.default_config_name
        out += indent(_config_text(fit.configs[name], is_default), _INDENT) + os.linesep

    return out
