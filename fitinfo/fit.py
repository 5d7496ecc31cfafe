# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Provides the :py:class:`Fit` class, the verified model of a Flattened Image Tree.
"""

from datetime import datetime, timezone
from types import MappingProxyType

from . import codec
from . import configuration
from . import image
from .errors import MissingProperty, StructuralError
from .log import FitLog

_log = FitLog()


class Fit:
    """
    A Flattened Image Tree whose images have all been verified and whose
    configurations have all been resolved.

    Use :py:meth:`build()` to create one from a :py:class:`~fitinfo.node.Node` tree,
    or :py:meth:`load()` / :py:meth:`from_dtb()` to create one from a DTB.

    Instances are read-only. The :py:attr:`images` and :py:attr:`configs` mappings carry
    no meaningful order; sort by name when producing a listing.
    """

    # pylint: disable=too-many-arguments
    def __init__(self, description: str, address_cells: int, timestamp: int,
                 default_config_name: str, images: dict, configs: dict, **kwargs):
        self._description = description
        self._address_cells = address_cells
        self._timestamp = timestamp
        self._default_config_name = default_config_name
        self._images = MappingProxyType(dict(images))
        self._configs = MappingProxyType(dict(configs))
        self._selected = kwargs.get('selected', default_config_name)

    @classmethod
    def build(cls, root, **kwargs):
        """
        Build a :py:class:`Fit` from the *root* node of a FIT.

        The root must provide ``description``, ``#address-cells``, and ``timestamp``
        properties, as well as ``images`` and ``configurations`` children. Otherwise,
        :py:exc:`~fitinfo.StructuralError` is raised.

        All images are extracted and verified first, then configurations are resolved.
        Any failure is raised as a subclass of :py:exc:`~fitinfo.FitError`; no partially
        built object is returned.

        **Optional Keyword Arguments**:

            *config* - Name of the configuration to select instead of the one named
            by the ``default`` property. It must exist.

            *all_configs* - Resolve every configuration. If ``False``, only the selected
            configuration is resolved. The selected configuration is always
            looked up by name, whether or not it is a ``conf`` or ``conf@N`` node. Default: ``True``

            *load_base* - Address at which the first image of each configuration is placed.
            Default: ``0``

            *show_progress* - Show progress while hashing large payloads. Default: ``False``
        """
        selected    = kwargs.get('config', None)
        all_configs = kwargs.get('all_configs', True)
        load_base   = kwargs.get('load_base', 0)
        extract_kwargs = {'show_progress': kwargs.get('show_progress', False)}

        configuration.check_load_base(load_base)

        description   = codec.as_text(_root_prop(root, 'description'), root, 'description')
        address_cells = codec.as_u32(_root_prop(root, '#address-cells'), root, '#address-cells')
        timestamp     = codec.as_u32(_root_prop(root, 'timestamp'), root, 'timestamp')

        images_node = _root_child(root, 'images')
        configs_node = _root_child(root, 'configurations')

        _log.note('Verifying {:d} image(s)'.format(len(images_node.children)))
        images = image.extract_all(images_node, **extract_kwargs)

        default_name = configuration.resolve_default_name(configs_node)
        _log.debug('Default configuration: ' + default_name)
        if selected is None:
            selected = default_name

        if all_configs:
            configs = configuration.resolve_all(configs_node, images, load_base)
        else:
            configs = {}

        # The selected configuration is resolved by name, even when it is not a conf/conf@N child
        if selected not in configs:
            configs[selected] = configuration.resolve_one(configs_node, images, selected, load_base)

        _log.info('FIT verified: {:d} image(s), {:d} configuration(s)'.format(len(images), len(configs)))
        return cls(description, address_cells, timestamp, default_name, images, configs,
                   selected=selected)

    @classmethod
    def from_dtb(cls, data: bytes, **kwargs):
        """
        Decode a FIT from the raw DTB *data* and pass it to :py:meth:`build()`,
        along with any keyword arguments.
        """
        # Deferred; only needed when starting from a blob
        from . import dtb  # pylint: disable=import-outside-toplevel
        return cls.build(dtb.parse(data), **kwargs)

    @classmethod
    def load(cls, filename: str, **kwargs):
        """
        Read a FIT from *filename* and pass it to :py:meth:`build()`,
        along with any keyword arguments.
        """
        from . import dtb  # pylint: disable=import-outside-toplevel
        _log.note('Loading FIT from ' + filename)
        return cls.build(dtb.load(filename), **kwargs)

    @property
    def description(self) -> str:
        """
        Description of the FIT as a whole
        """
        return self._description

    @property
    def address_cells(self) -> int:
        """
        Value of the root ``#address-cells`` property
        """
        return self._address_cells

    @property
    def timestamp(self) -> int:
        """
        Creation time, in seconds since the epoch
        """
        return self._timestamp

    @property
    def build_time(self) -> datetime:
        """
        Creation time as a timezone-aware UTC :py:class:`~datetime.datetime`
        """
        return datetime.fromtimestamp(self._timestamp, tz=timezone.utc)

    @property
    def default_config_name(self) -> str:
        """
        Name of the default configuration
        """
        return self._default_config_name

    @property
    def images(self):
        """
        Read-only mapping of image name to :py:class:`~fitinfo.image.Image`
        """
        return self._images

    @property
    def configs(self):
        """
        Read-only mapping of configuration name to :py:class:`~fitinfo.configuration.Configuration`
        """
        return self._configs

    @property
    def default_config(self):
        """
        The :py:class:`~fitinfo.configuration.Configuration` named by the ``default`` property,
        or ``None`` if it was not resolved (see the *all_configs* option of :py:meth:`build()`).
        """
        return self._configs.get(self._default_config_name)

    @property
    def selected_config(self):
        """
        The configuration selected when the FIT was built. This is the default
        configuration unless another was requested.
        """
        return self._configs[self._selected]

    def __repr__(self):
        return 'Fit({!r}, images={!r}, configs={!r})'.format(
                self._description, sorted(self._images), sorted(self._configs))


def _root_prop(root, name: str) -> bytes:
    try:
        return root.required_prop(name)
    except MissingProperty:
        raise StructuralError('root property ' + name) from None


def _root_child(root, name: str):
    child = root.child(name)
    if child is None:
        raise StructuralError(name)
    return child
