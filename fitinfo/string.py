# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
"""
String conversion helpers used by the command-line interface
"""

# Uppercase'd for case-insensitivity. Longest suffixes are checked first.
_BYTE_LENGTH_SUFFIXES = (
    ('KIB',  1024),
    ('MIB',  1024 * 1024),
    ('GIB',  1024 * 1024 * 1024),
    ('KB',   1000),
    ('MB',   1000 * 1000),
    ('GB',   1000 * 1000 * 1000),
    ('K',    1024),
    ('M',    1024 * 1024),
    ('G',    1024 * 1024 * 1024),
)


def to_positive_int(string: str, desc='value') -> int:
    """
    Convert a string (decimal, or ``0x``-prefixed hexadecimal, etc.) to a
    non-negative integer. A :py:exc:`ValueError` is raised if this is not possible.
    """
    try:
        ret = int(string, 0)
    except ValueError:
        raise ValueError('Invalid {:s}: {:s}'.format(desc, string)) from None

    if ret < 0:
        raise ValueError('{:s} cannot be negative. Got: {:s}'.format(desc.capitalize(), string))

    return ret


def length_to_int(len_str: str, desc='length') -> int:
    """
    Convert a numeric string with one of the following (case insensitive) suffixes
    into its corresponding integer representation.

    +-----------+---------------------------+
    |   Suffix  | Multiplication Factor     |
    +===========+===========================+
    |     kB    | 1,000                     |
    +-----------+---------------------------+
    |  K or KiB | 1,024                     |
    +-----------+---------------------------+
    |     MB    | 1,000,000 (1,000 ^ 2)     |
    +-----------+---------------------------+
    |  M or MiB | 1,048,576 (1,024 ^ 2)     |
    +-----------+---------------------------+
    |     GB    | 1,000,000,000 (1,000 ^ 3) |
    +-----------+---------------------------+
    |  G or GiB | 1,073,741,824 (1,024 ^ 3) |
    +-----------+---------------------------+

    """
    _len_str = len_str.replace(' ', '').upper()

    # Don't mistake the "B" in a "0x...B" hex value for a suffix
    if _len_str.startswith('0X'):
        return to_positive_int(len_str, desc)

    for suffix, factor in _BYTE_LENGTH_SUFFIXES:
        if _len_str.endswith(suffix):
            return to_positive_int(_len_str[:-len(suffix)], desc) * factor

    return to_positive_int(len_str, desc)
