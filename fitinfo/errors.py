# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Exceptions raised while building a :py:class:`~fitinfo.Fit` from a tree.

Every failure is terminal; a partially built model is never returned.
All exceptions derive from :py:exc:`FitError`, so callers that only
need to report a failure can catch that alone.
"""


class FitError(Exception):
    """
    Base class for all fitinfo failures.

    The exception message describes the failing node path and the
    nature of the failure.
    """


class MalformedProperty(FitError):
    """
    Raised when a property's raw value does not have the shape required by
    the type it is being decoded as (e.g. a u32 that is not exactly 4 bytes).
    """
    def __init__(self, node, name: str, reason: str):
        self.node = node
        self.name = name
        self.reason = reason
        super().__init__('Malformed property "{:s}" in {:s}: {:s}'.format(name, _path(node), reason))


class MissingProperty(FitError):
    """
    Raised when a required property, including the ``algo`` and ``value``
    properties of a hash record, is not present on a node.
    """
    def __init__(self, node, name: str):
        self.node = node
        self.name = name
        super().__init__('Required property "{:s}" missing from {:s}'.format(name, _path(node)))


class StructuralError(FitError):
    """
    Raised when a required part of the FIT layout is absent. *what* names it,
    e.g. ``'images'``, ``'default'``, or ``'configuration conf@2'``.
    """
    def __init__(self, what: str):
        self.what = what
        super().__init__('FIT structure is missing ' + what)


class ImageReferenceError(FitError):
    """
    Raised when a configuration refers to an image that is not present
    in the FIT's image table.
    """
    def __init__(self, configuration: str, field: str, missing_name: str):
        self.configuration = configuration
        self.field = field
        self.missing_name = missing_name
        msg = 'Configuration "{:s}" {:s}="{:s}" does not name an existing image'
        super().__init__(msg.format(configuration, field, missing_name))


class LoadAddressError(FitError):
    """
    Raised when a load base, or an image placed sequentially after it,
    does not fit within the 64-bit address space.

    *field* is ``None`` when the base address itself is out of range.
    """
    def __init__(self, configuration: str, field, address: int):
        self.configuration = configuration
        self.field = field
        self.address = address
        if field is None:
            msg = 'Load base {:#x} is outside the 64-bit address space'.format(address)
        else:
            msg = 'Configuration "{:s}" {:s} at {:#x} extends beyond the 64-bit address space'
            msg = msg.format(configuration, field, address)
        super().__init__(msg)


class DtbError(FitError):
    """
    Raised when data cannot be decoded as a Flattened Device Tree blob.
    """


class HashError(FitError):
    """
    Base class for the reasons a single hash record fails verification.
    """


class DigestMismatch(HashError):
    """
    The digest computed over an image's data differs from the stored value.

    *expected* and *computed* are ``bytes`` for byte-compared digests and
    ``int`` for numerically compared checksums (``crc32``).
    """
    def __init__(self, algorithm: str, expected, computed):
        self.algorithm = algorithm
        self.expected = expected
        self.computed = computed
        msg = '{:s} mismatch: expected {:s}, computed {:s}'
        super().__init__(msg.format(algorithm, _digest_str(expected), _digest_str(computed)))


class UnsupportedAlgorithm(HashError):
    """
    A hash record names an algorithm that cannot be verified.
    """
    def __init__(self, name: str):
        self.name = name
        super().__init__('Unsupported hash algorithm: "{:s}"'.format(name))


class IntegrityError(FitError):
    """
    Raised when an image fails verification against one of its hash records.

    The underlying :py:exc:`DigestMismatch` or :py:exc:`UnsupportedAlgorithm`
    is available as *reason*.
    """
    def __init__(self, image: str, record: str, reason: HashError):
        self.image = image
        self.record = record
        self.reason = reason
        msg = 'Image "{:s}" failed verification against {:s}: {:s}'
        super().__init__(msg.format(image, record, str(reason)))


def _path(node) -> str:
    if node is None:
        return '<unknown node>'
    return getattr(node, 'path', str(node))


def _digest_str(value) -> str:
    if isinstance(value, int):
        return '0x{:08x}'.format(value)
    return bytes(value).hex()
