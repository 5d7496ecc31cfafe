# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Generic device tree node, holding raw property values and named children.

This is the input representation consumed by :py:meth:`fitinfo.Fit.build()`.
Trees may be built programmatically (see :py:meth:`Node.from_dict()`) or
obtained from a DTB via :py:mod:`fitinfo.dtb`.
"""

from types import MappingProxyType

from .errors import MissingProperty


class Node:
    """
    A named node with a mapping of property names to raw ``bytes`` values,
    and a mapping of child names to child :py:class:`Node` objects.

    Neither mapping carries a meaningful order. Property values are exactly the
    bytes stored in the container; no decoding is performed here.
    """

    def __init__(self, name: str, properties: dict = None, children=None):
        self._name = name
        self._parent = None
        self._props = {}
        self._children = {}

        for prop_name, value in (properties or {}).items():
            self.set_prop(prop_name, value)

        for child in (children or ()):
            self.add_child(child)

    @classmethod
    def from_dict(cls, name: str, contents: dict):
        """
        Create a tree from a nested dictionary. ``dict`` values become child
        nodes; all other values are taken as raw property values and must be
        bytes-like. See :py:mod:`fitinfo.codec` for helpers to encode them.

        Example::

            Node.from_dict('/', {
                'description': codec.text('My FIT'),
                'images': {
                    'kernel@1': {'data': b'...'}
                }
            })

        """
        node = cls(name)
        for key, value in contents.items():
            if isinstance(value, dict):
                node.add_child(cls.from_dict(key, value))
            else:
                node.set_prop(key, value)
        return node

    def set_prop(self, name: str, value):
        """
        Set property *name* to the raw value *value*.
        """
        if not isinstance(value, (bytes, bytearray, memoryview)):
            msg = 'Property "{:s}" requires a bytes-like value, got {:s}'
            raise TypeError(msg.format(name, type(value).__name__))
        self._props[name] = bytes(value)

    def add_child(self, child):
        """
        Attach *child* beneath this node. Child names must be unique.
        """
        if child.name in self._children:
            raise ValueError('Duplicate child node "{:s}" in {:s}'.format(child.name, self.path))
        child._parent = self  # pylint: disable=protected-access
        self._children[child.name] = child

    @property
    def name(self) -> str:
        """
        Node name, including any unit address (e.g. ``kernel@1``)
        """
        return self._name

    @property
    def path(self) -> str:
        """
        Absolute path of the node within its tree, used in error messages.
        """
        if self._parent is None:
            return self._name if self._name not in ('', '/') else '/'

        parent = self._parent.path
        if not parent.endswith('/'):
            parent += '/'
        return parent + self._name

    @property
    def properties(self):
        """
        Read-only mapping of property name to raw value
        """
        return MappingProxyType(self._props)

    @property
    def children(self):
        """
        Read-only mapping of child name to :py:class:`Node`
        """
        return MappingProxyType(self._children)

    def prop(self, name: str, default=None):
        """
        Return the raw value of property *name*, or *default* if it is not present.
        """
        return self._props.get(name, default)

    def required_prop(self, name: str) -> bytes:
        """
        Return the raw value of property *name*.

        :py:exc:`~fitinfo.MissingProperty` is raised if it is not present.
        """
        try:
            return self._props[name]
        except KeyError:
            raise MissingProperty(self, name) from None

    def child(self, name: str):
        """
        Return the child named *name*, or ``None``.
        """
        return self._children.get(name)

    def matching_children(self, base: str) -> list:
        """
        Return children named either *base* or ``<base>@<unit address>``, sorted by name.
        """
        ret = []
        for name in sorted(self._children):
            if name == base or name.startswith(base + '@'):
                ret.append(self._children[name])
        return ret

    def __repr__(self):
        return 'Node({:s}, {:d} properties, {:d} children)'.format(
                self.path, len(self._props), len(self._children))
