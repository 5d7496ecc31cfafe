# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Conversion between raw device tree property values and Python types.

Device tree cells are big-endian 32-bit words. Strings are NUL-terminated.
Decoders raise :py:exc:`~fitinfo.MalformedProperty` when a value does not
have the required shape. The optional *node* and *name* arguments are only
used to give that exception some context.
"""

from .errors import MalformedProperty

_CELL_SIZE = 4


def as_text(raw: bytes, node=None, name='') -> str:
    """
    Return the string stored in *raw*, up to but excluding the first NUL byte.
    If no NUL is present, the entire value is used.
    """
    # pylint: disable=unused-argument
    end = raw.find(b'\x00')
    if end >= 0:
        raw = raw[:end]
    return raw.decode('utf-8', errors='replace')


def as_u32(raw: bytes, node=None, name='') -> int:
    """
    Decode a single big-endian 32-bit cell. *raw* must be exactly 4 bytes.
    """
    if len(raw) != _CELL_SIZE:
        msg = 'expected {:d} bytes, got {:d}'.format(_CELL_SIZE, len(raw))
        raise MalformedProperty(node, name, msg)
    return int.from_bytes(raw, 'big')


def as_u32_array(raw: bytes, node=None, name='') -> tuple:
    """
    Decode a sequence of big-endian 32-bit cells.
    The length of *raw* must be a multiple of 4 bytes.
    """
    if len(raw) % _CELL_SIZE != 0:
        msg = 'length {:d} is not a multiple of {:d}'.format(len(raw), _CELL_SIZE)
        raise MalformedProperty(node, name, msg)

    return tuple(int.from_bytes(raw[i:i + _CELL_SIZE], 'big')
                 for i in range(0, len(raw), _CELL_SIZE))


def as_cells(raw: bytes, node=None, name='') -> int:
    """
    Combine one or more cells into a single integer, most significant cell first.
    This is how 64-bit addresses are stored when ``#address-cells = <2>``.
    """
    cells = as_u32_array(raw, node, name)
    if not cells:
        raise MalformedProperty(node, name, 'no cells present')

    value = 0
    for cell in cells:
        value = (value << 32) | cell
    return value


def as_bytes(raw: bytes, node=None, name='') -> bytes:
    """
    Return *raw* unchanged.
    """
    # pylint: disable=unused-argument
    return raw


def text(value: str) -> bytes:
    """
    Encode *value* as a NUL-terminated string property.
    """
    return value.encode('utf-8') + b'\x00'


def u32(value: int) -> bytes:
    """
    Encode *value* as a single big-endian cell.
    """
    return value.to_bytes(_CELL_SIZE, 'big')


def u32_array(values) -> bytes:
    """
    Encode an iterable of integers as consecutive big-endian cells.
    """
    return b''.join(u32(value) for value in values)
