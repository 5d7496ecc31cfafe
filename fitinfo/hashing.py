# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Verification of image data against FIT hash records.

The set of supported algorithms is closed and is defined by :py:class:`HashAlgorithm`.
A record naming any other algorithm fails verification with
:py:exc:`~fitinfo.UnsupportedAlgorithm`; it is never skipped.
"""

import enum
import hashlib
import zlib

from . import codec
from .errors import DigestMismatch, UnsupportedAlgorithm
from .log import FitLog
from .progress import Progress

_log = FitLog('(hash)')

# Payloads are hashed in chunks of this size, so that progress can be shown
_CHUNK_SIZE = 256 * 1024


class HashAlgorithm(enum.Enum):
    """
    Digest algorithms that may appear in a hash record's ``algo`` property.
    """

    SHA1 = 'sha1'
    MD5 = 'md5'
    CRC32 = 'crc32'

    @classmethod
    def lookup(cls, name: str):
        """
        Return the :py:class:`HashAlgorithm` named *name*.

        :py:exc:`~fitinfo.UnsupportedAlgorithm` is raised if there is none.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithm(name) from None

    @property
    def digest_size(self) -> int:
        """
        Size of the stored digest, in bytes
        """
        if self is HashAlgorithm.CRC32:
            return 4
        return hashlib.new(self.value).digest_size

    def compute(self, data: bytes, show_progress=False):
        """
        Compute this algorithm's digest over *data*.

        ``crc32`` yields an ``int``; the other algorithms yield ``bytes``.
        """
        desc = 'Computing ' + self.value
        view = memoryview(data)
        show = show_progress and len(view) > _CHUNK_SIZE

        if self is HashAlgorithm.CRC32:
            state = 0
        else:
            state = hashlib.new(self.value)

        with Progress.create(len(view), desc, show=show) as progress:
            for offset in range(0, len(view), _CHUNK_SIZE):
                chunk = view[offset:offset + _CHUNK_SIZE]
                if self is HashAlgorithm.CRC32:
                    state = zlib.crc32(chunk, state)
                else:
                    state.update(chunk)
                progress.update(len(chunk))

        if self is HashAlgorithm.CRC32:
            return state & 0xffffffff
        return state.digest()

    def decode_expected(self, expected: bytes, node=None):
        """
        Convert a stored ``value`` property into the form returned by :py:meth:`compute()`.
        """
        if self is HashAlgorithm.CRC32:
            return codec.as_u32(expected, node, 'value')

        if len(expected) != self.digest_size:
            _log.warning('Stored {:s} value is {:d} bytes, not {:d}'.format(
                self.value, len(expected), self.digest_size))
        return bytes(expected)


def verify(algorithm: str, expected: bytes, data: bytes, **kwargs):
    """
    Recompute the *algorithm* digest of *data* and compare it to the *expected* value
    stored in a hash record.

    ``sha1`` and ``md5`` digests are compared byte-for-byte. A ``crc32`` value is
    decoded as a big-endian 32-bit integer and compared numerically.

    Raises :py:exc:`~fitinfo.DigestMismatch` when the values differ and
    :py:exc:`~fitinfo.UnsupportedAlgorithm` when *algorithm* is not supported.

    **Optional Keyword Arguments**:

        *node* - Hash record node, used only for error context.

        *show_progress* - Show a progress bar while hashing large payloads. Default: ``False``
    """
    algo = HashAlgorithm.lookup(algorithm)
    expected_value = algo.decode_expected(expected, kwargs.get('node', None))
    computed = algo.compute(data, kwargs.get('show_progress', False))

    if computed != expected_value:
        raise DigestMismatch(algo.value, expected_value, computed)


class HashRecord:
    """
    An algorithm name and expected digest, as stored in a ``hash`` or ``hash@N`` node.
    """

    def __init__(self, name: str, algorithm: str, expected: bytes):
        self._name = name
        self._algorithm = algorithm
        self._expected = bytes(expected)

    @classmethod
    def from_node(cls, node):
        """
        Create a :py:class:`HashRecord` from a hash node. Both the ``algo`` and
        ``value`` properties are required.
        """
        algo = codec.as_text(node.required_prop('algo'), node, 'algo')
        value = node.required_prop('value')
        return cls(node.name, algo, value)

    @property
    def name(self) -> str:
        """
        Name of the hash node (e.g. ``hash@1``)
        """
        return self._name

    @property
    def algorithm(self) -> str:
        """
        Algorithm name, as stored. This may name an unsupported algorithm.
        """
        return self._algorithm

    @property
    def expected(self) -> bytes:
        """
        Stored digest value
        """
        return self._expected

    def verify(self, data: bytes, **kwargs):
        """
        Verify *data* against this record. See :py:func:`verify()`.
        """
        _log.debug('Checking {:s} {:s} = {:s}'.format(self._name, self._algorithm, self._expected.hex()))
        verify(self._algorithm, self._expected, data, **kwargs)
        _log.debug('{:s} OK'.format(self._name))

    def __repr__(self):
        return 'HashRecord({:s}, {:s}, {:s})'.format(self._name, self._algorithm, self._expected.hex())
