# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Extraction and verification of the images stored in a FIT's ``/images`` node.
"""

from . import codec
from .errors import HashError, IntegrityError, MalformedProperty
from .hashing import HashRecord
from .log import FitLog

_log = FitLog('(image)')


class Image:
    """
    A verified payload (kernel, device tree blob, ramdisk, ...) and its metadata.

    Instances are only created once every attached :py:class:`~fitinfo.hashing.HashRecord`
    has been verified against *data*. Use :py:func:`extract_image()` rather than
    constructing one directly.
    """

    # pylint: disable=too-many-arguments
    def __init__(self, name: str, description: str, image_type: str, arch: str,
                 os: str, compression: str, data: bytes, hashes=(), **kwargs):
        # pylint: disable=redefined-builtin
        self._name = name
        self._description = description
        self._type = image_type
        self._arch = arch
        self._os = os
        self._compression = compression
        self._data = bytes(data)
        self._hashes = tuple(hashes)
        self._load = kwargs.get('load', None)
        self._entry = kwargs.get('entry', None)

    @property
    def name(self) -> str:
        """
        Image name, taken from the node name (e.g. ``kernel@1``)
        """
        return self._name

    @property
    def description(self) -> str:
        """
        Image description, or an empty string
        """
        return self._description

    @property
    def type(self) -> str:
        """
        Image type (e.g. ``kernel``, ``flat_dt``, ``ramdisk``)
        """
        return self._type

    @property
    def arch(self) -> str:
        """
        Target architecture
        """
        return self._arch

    @property
    def os(self):
        """
        Operating system, or ``None`` if not specified
        """
        return self._os

    @property
    def compression(self) -> str:
        """
        Compression applied to :py:attr:`data` (e.g. ``none``, ``gzip``)
        """
        return self._compression

    @property
    def data(self) -> bytes:
        """
        Image payload
        """
        return self._data

    @property
    def size(self) -> int:
        """
        Payload size in bytes
        """
        return len(self._data)

    @property
    def hashes(self) -> tuple:
        """
        Hash records the payload was verified against
        """
        return self._hashes

    @property
    def load(self):
        """
        Load address stored in the image node, or ``None``.

        This is informational only. Configurations always place images
        sequentially; see :py:func:`fitinfo.configuration.assign_loads()`.
        """
        return self._load

    @property
    def entry(self):
        """
        Entry point stored in the image node, or ``None``
        """
        return self._entry

    def __repr__(self):
        return 'Image({:s}, type={:s}, {:d} bytes)'.format(self._name, self._type, len(self._data))


def _text(node, name: str, required=True, default=None):
    if required:
        raw = node.required_prop(name)
    else:
        raw = node.prop(name)
        if raw is None:
            return default
    return codec.as_text(raw, node, name)


def _address(node, name: str):
    raw = node.prop(name)
    if raw is None:
        return None

    # Informational only; a malformed value does not fail the image
    try:
        return codec.as_cells(raw, node, name)
    except MalformedProperty as error:
        _log.warning(str(error) + '; ignoring it')
        return None


def _dump_properties(node):
    for name in sorted(node.properties):
        value = node.properties[name]
        if len(value) > 32:
            value = value[:32] + b'...'
        _log.debug('{:s}: {:s} = {!r}'.format(node.path, name, value))


def extract_image(node, **kwargs) -> Image:
    """
    Create an :py:class:`Image` from an image *node*, verifying its data against
    every ``hash`` and ``hash@N`` child.

    The ``type``, ``arch``, ``compression``, and ``data`` properties are required
    and :py:exc:`~fitinfo.MissingProperty` is raised if any is absent.
    ``description``, ``os``, ``load``, and ``entry`` are optional. A malformed ``load``
    or ``entry`` value is logged as a warning and treated as absent.

    Verification is all-or-nothing. The first record that fails raises
    :py:exc:`~fitinfo.IntegrityError`, whose *reason* holds the
    :py:exc:`~fitinfo.DigestMismatch` or :py:exc:`~fitinfo.UnsupportedAlgorithm`.

    **Optional Keyword Arguments**:

        *show_progress* - Show progress while hashing large payloads. Default: ``False``
    """
    _dump_properties(node)

    image_type  = _text(node, 'type')
    arch        = _text(node, 'arch')
    compression = _text(node, 'compression')
    data        = codec.as_bytes(node.required_prop('data'), node, 'data')

    description = _text(node, 'description', required=False, default='')
    os          = _text(node, 'os', required=False)

    load  = _address(node, 'load')
    entry = _address(node, 'entry')

    hashes = [HashRecord.from_node(child) for child in node.matching_children('hash')]
    if not hashes:
        _log.debug(node.name + ' has no hash records')

    show_progress = kwargs.get('show_progress', False)
    for record in hashes:
        hash_node = node.child(record.name)
        try:
            record.verify(data, node=hash_node, show_progress=show_progress)
        except HashError as error:
            raise IntegrityError(node.name, record.name, error) from error

    return Image(node.name, description, image_type, arch, os, compression, data,
                 hashes, load=load, entry=entry)


def extract_all(images_node, **kwargs) -> dict:
    """
    Extract and verify every child of the FIT's ``/images`` node.

    Returns a dictionary mapping image name to :py:class:`Image`. The dictionary is
    populated in name-sorted order, but callers producing listings should still
    sort explicitly.

    The first failure aborts the extraction. Keyword arguments are passed to
    :py:func:`extract_image()`.
    """
    images = {}
    for name in sorted(images_node.children):
        child = images_node.children[name]
        image = extract_image(child, **kwargs)
        _log.note('Verified {:s} ({:s}, {:d} bytes, {:d} hash record(s))'.format(
            image.name, image.type, image.size, len(image.hashes)))
        images[name] = image

    return images
