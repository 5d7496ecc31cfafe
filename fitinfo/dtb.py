# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Conversion of a Flattened Device Tree blob (DTB) into a :py:class:`~fitinfo.node.Node` tree.

The blob itself is decoded by the `fdt <https://pypi.org/project/fdt/>`_ package.
That package infers a type for each property (strings, cells, or bytes); this module
encodes those values back into the raw bytes stored in the blob, which is what the
rest of fitinfo operates upon.
"""

import fdt

from . import codec
from .errors import DtbError
from .log import FitLog
from .node import Node

_log = FitLog('(dtb)')

_FDT_MAGIC = b'\xd0\x0d\xfe\xed'


def raw_value(prop) -> bytes:
    """
    Return the raw bytes of an ``fdt`` property object.
    """
    if isinstance(prop, fdt.PropStrings):
        return b''.join(codec.text(s) for s in prop.data)

    if isinstance(prop, fdt.PropWords):
        size = prop.word_size // 8
        return b''.join(word.to_bytes(size, 'big') for word in prop.data)

    if isinstance(prop, fdt.PropBytes):
        return bytes(prop.data)

    if isinstance(prop, fdt.Property):
        # Empty (boolean) property
        return b''

    raise TypeError('Unexpected property type: ' + type(prop).__name__)


def convert(fdt_node, name=None) -> Node:
    """
    Recursively convert an ``fdt.Node`` into a :py:class:`~fitinfo.node.Node`.
    """
    node = Node(fdt_node.name if name is None else name)
    for prop in fdt_node.props:
        node.set_prop(prop.name, raw_value(prop))

    for child in fdt_node.nodes:
        node.add_child(convert(child))

    return node


def parse(data: bytes) -> Node:
    """
    Decode DTB *data* and return its root :py:class:`~fitinfo.node.Node`.

    :py:exc:`~fitinfo.DtbError` is raised if *data* does not begin with the FDT magic
    value, or if it cannot otherwise be decoded.
    """
    if data[:4] != _FDT_MAGIC:
        raise DtbError('Data does not begin with the FDT magic value (d00dfeed)')

    _log.debug('Parsing {:d}-byte DTB'.format(len(data)))
    try:
        tree = fdt.parse_dtb(bytes(data))
    except Exception as error:  # pylint: disable=broad-except
        # fdt reports truncated or corrupt blobs with a bare Exception
        raise DtbError('Failed to decode DTB: ' + str(error)) from error
    return convert(tree.root, '/')


def load(filename: str) -> Node:
    """
    Read a DTB from *filename* and return its root :py:class:`~fitinfo.node.Node`.
    """
    with open(filename, 'rb') as infile:
        return parse(infile.read())
