# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Resolution of the boot configurations stored in a FIT's ``/configurations`` node.

Each configuration names a kernel, a device tree (``fdt``), and optionally a
ramdisk. These names are resolved against the verified image table and the
images are placed back-to-back, in that order, starting at a base address.
"""

from . import codec
from .errors import ImageReferenceError, LoadAddressError, StructuralError
from .log import FitLog

_log = FitLog('(config)')

# Image reference properties, in load order
IMAGE_FIELDS = ('kernel', 'fdt', 'ramdisk')

_ADDRESS_MASK = (1 << 64) - 1


class ImageLoad:
    """
    Placement of an :py:class:`~fitinfo.image.Image` at a load address.

    The image is shared with the FIT's image table; it is not copied.
    """

    def __init__(self, field: str, image, load_address: int):
        self._field = field
        self._image = image
        self._load_address = load_address

    @property
    def field(self) -> str:
        """
        Configuration property that referenced the image (``kernel``, ``fdt``, or ``ramdisk``)
        """
        return self._field

    @property
    def image(self):
        """
        Referenced :py:class:`~fitinfo.image.Image`
        """
        return self._image

    @property
    def load_address(self) -> int:
        """
        Offset at which the image is placed
        """
        return self._load_address

    def __repr__(self):
        return 'ImageLoad({:s}={:s} @ 0x{:x})'.format(self._field, self._image.name, self._load_address)


class Configuration:
    """
    A named set of images to be loaded together.
    """

    def __init__(self, name: str, description, image_list):
        self._name = name
        self._description = description
        self._image_list = tuple(image_list)

    @property
    def name(self) -> str:
        """
        Configuration name (e.g. ``conf@1``)
        """
        return self._name

    @property
    def description(self):
        """
        Configuration description, or ``None``
        """
        return self._description

    @property
    def image_list(self) -> tuple:
        """
        :py:class:`ImageLoad` entries, ordered kernel, fdt, ramdisk.
        Entries for unspecified images are omitted.
        """
        return self._image_list

    def image(self, field: str):
        """
        Return the :py:class:`~fitinfo.image.Image` referenced by *field*
        (e.g. ``'kernel'``), or ``None`` if the configuration does not specify one.
        """
        for entry in self._image_list:
            if entry.field == field:
                return entry.image
        return None

    def __repr__(self):
        return 'Configuration({:s}, {!r})'.format(self._name, list(self._image_list))


def check_load_base(base: int, name: str = ''):
    """
    Raise :py:exc:`~fitinfo.LoadAddressError` if *base* is negative or wider than 64 bits.
    """
    if not 0 <= base <= _ADDRESS_MASK:
        raise LoadAddressError(name, None, base)


def assign_loads(refs, base: int = 0, name: str = '') -> tuple:
    """
    Place images back-to-back, starting at *base*.

    *refs* is an iterable of ``(field, image)`` pairs. Each image is assigned the current
    address, which then advances by the size of that image's data. Returns a tuple of
    :py:class:`ImageLoad`.

    Addresses never wrap. :py:exc:`~fitinfo.LoadAddressError` is raised if *base* is out
    of range, or if an image would extend past the end of the 64-bit address space.
    *name* identifies the configuration in that error.
    """
    check_load_base(base, name)

    loads = []
    address = base
    for field, image in refs:
        end = address + len(image.data)
        if address > _ADDRESS_MASK or end > _ADDRESS_MASK + 1:
            raise LoadAddressError(name, field, address)
        loads.append(ImageLoad(field, image, address))
        address = end
    return tuple(loads)


def resolve_default_name(configurations_node) -> str:
    """
    Return the name of the default configuration, as stored in the ``default`` property.

    :py:exc:`~fitinfo.StructuralError` is raised if the property is absent.
    """
    raw = configurations_node.prop('default')
    if raw is None:
        raise StructuralError('default')
    return codec.as_text(raw, configurations_node, 'default')


def resolve_one(configurations_node, images: dict, name: str, base: int = 0) -> Configuration:
    """
    Resolve the configuration named *name* against the *images* table.

    Raises :py:exc:`~fitinfo.StructuralError` if there is no such configuration,
    and :py:exc:`~fitinfo.ImageReferenceError` if it refers to an image not in *images*.
    Images are placed sequentially from *base* (see :py:func:`assign_loads()`).
    """
    node = configurations_node.child(name)
    if node is None:
        raise StructuralError('configuration ' + name)

    raw = node.prop('description')
    description = None if raw is None else codec.as_text(raw, node, 'description')

    refs = []
    for field in IMAGE_FIELDS:
        raw = node.prop(field)
        if raw is None:
            if field != 'ramdisk':
                _log.warning('Configuration {:s} does not specify a {:s} image'.format(name, field))
            continue

        image_name = codec.as_text(raw, node, field)
        try:
            refs.append((field, images[image_name]))
        except KeyError:
            raise ImageReferenceError(name, field, image_name) from None

    _log.debug('{:s}: {:s}'.format(name, ' '.join(f + '=' + i.name for f, i in refs)))
    return Configuration(name, description, assign_loads(refs, base, name))


def resolve_all(configurations_node, images: dict, base: int = 0) -> dict:
    """
    Resolve every ``conf`` and ``conf@N`` child of the ``/configurations`` node.

    Returns a dictionary mapping configuration name to :py:class:`Configuration`.
    The first failure aborts the resolution; see :py:func:`resolve_one()`.
    """
    configs = {}
    for node in configurations_node.matching_children('conf'):
        configs[node.name] = resolve_one(configurations_node, images, node.name, base)
        _log.note('Resolved configuration ' + node.name)
    return configs
