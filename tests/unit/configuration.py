# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
#
# pylint: disable=missing-function-docstring, missing-class-docstring

"""
Unit tests for fitinfo.configuration
"""

from unittest import TestCase

from fitinfo import ImageReferenceError, LoadAddressError, Node, StructuralError, codec
from fitinfo.configuration import assign_loads, resolve_all, resolve_default_name, resolve_one
from fitinfo.image import Image


def _image(name: str, size: int) -> Image:
    return Image(name, '', 'kernel', 'arm', 'linux', 'none', bytes(size))


class TestAssignLoads(TestCase):

    def setUp(self):
        self.kernel = _image('kernel', 4)
        self.fdt = _image('fdt', 8)
        self.ramdisk = _image('ramdisk', 16)

    def test_sequential(self):
        loads = assign_loads([('kernel', self.kernel), ('fdt', self.fdt)])

        self.assertEqual(len(loads), 2)
        self.assertIs(loads[0].image, self.kernel)
        self.assertEqual(loads[0].load_address, 0)
        self.assertIs(loads[1].image, self.fdt)
        self.assertEqual(loads[1].load_address, 4)

    def test_base(self):
        refs = [('kernel', self.kernel), ('fdt', self.fdt), ('ramdisk', self.ramdisk)]
        loads = assign_loads(refs, 0x8000_0000)
        addresses = [entry.load_address for entry in loads]
        self.assertEqual(addresses, [0x8000_0000, 0x8000_0004, 0x8000_000c])
        self.assertEqual([entry.field for entry in loads], ['kernel', 'fdt', 'ramdisk'])

    def test_non_decreasing(self):
        empty = _image('empty', 0)
        loads = assign_loads([('kernel', self.kernel), ('fdt', empty), ('ramdisk', self.ramdisk)], 0x100)
        addresses = [entry.load_address for entry in loads]
        self.assertEqual(addresses, [0x100, 0x104, 0x104])

    def test_end_of_address_space(self):
        top = (1 << 64) - 12
        loads = assign_loads([('kernel', self.kernel), ('fdt', self.fdt)], top)
        self.assertEqual([e.load_address for e in loads], [top, top + 4])

    def test_no_wraparound(self):
        refs = [('kernel', self.fdt), ('fdt', self.fdt)]
        with self.assertRaises(LoadAddressError) as ctx:
            assign_loads(refs, (1 << 64) - 4, 'conf@1')

        self.assertEqual(ctx.exception.configuration, 'conf@1')
        self.assertEqual(ctx.exception.field, 'kernel')
        self.assertEqual(ctx.exception.address, (1 << 64) - 4)

        with self.assertRaises(LoadAddressError) as ctx:
            assign_loads(refs, (1 << 64) - 8, 'conf@1')
        self.assertEqual(ctx.exception.field, 'fdt')

    def test_invalid_base(self):
        for base in (-1, 1 << 64):
            with self.subTest(base=base):
                with self.assertRaises(LoadAddressError) as ctx:
                    assign_loads([('kernel', self.kernel)], base)
                self.assertIsNone(ctx.exception.field)
                self.assertEqual(ctx.exception.address, base)

    def test_empty(self):
        self.assertEqual(assign_loads([]), ())


class TestResolve(TestCase):

    def setUp(self):
        self.images = {
            'kernel@1': _image('kernel@1', 4),
            'fdt@1': _image('fdt@1', 8),
            'ramdisk@1': _image('ramdisk@1', 32),
        }

        self.node = Node.from_dict('configurations', {
            'default': codec.text('conf@2'),
            'conf@1': {
                'description': codec.text('With ramdisk'),
                'kernel': codec.text('kernel@1'),
                'fdt': codec.text('fdt@1'),
                'ramdisk': codec.text('ramdisk@1'),
            },
            'conf@2': {
                'kernel': codec.text('kernel@1'),
                'fdt': codec.text('fdt@1'),
            },
            'conf@3': {
                'kernel': codec.text('kernel@1'),
                'fdt': codec.text('fdt@2'),
            },
            'not-a-conf': {
                'kernel': codec.text('missing'),
            },
        })

    def test_default_name(self):
        self.assertEqual(resolve_default_name(self.node), 'conf@2')

    def test_default_missing(self):
        with self.assertRaises(StructuralError) as ctx:
            resolve_default_name(Node('configurations'))

        self.assertIs(type(ctx.exception), StructuralError)
        self.assertEqual(ctx.exception.what, 'default')

    def test_resolve_one(self):
        config = resolve_one(self.node, self.images, 'conf@1')

        self.assertEqual(config.name, 'conf@1')
        self.assertEqual(config.description, 'With ramdisk')
        self.assertEqual([e.field for e in config.image_list], ['kernel', 'fdt', 'ramdisk'])
        self.assertEqual([e.load_address for e in config.image_list], [0, 4, 12])
        self.assertIs(config.image('ramdisk'), self.images['ramdisk@1'])

    def test_resolve_one_without_ramdisk(self):
        config = resolve_one(self.node, self.images, 'conf@2', base=0x1000)

        self.assertIsNone(config.description)
        self.assertEqual(len(config.image_list), 2)
        self.assertIs(config.image_list[0].image, self.images['kernel@1'])
        self.assertIs(config.image_list[1].image, self.images['fdt@1'])
        self.assertEqual([e.load_address for e in config.image_list], [0x1000, 0x1004])
        self.assertIsNone(config.image('ramdisk'))

    def test_missing_configuration(self):
        with self.assertRaises(StructuralError) as ctx:
            resolve_one(self.node, self.images, 'conf@9')
        self.assertEqual(ctx.exception.what, 'configuration conf@9')

    def test_missing_image(self):
        with self.assertRaises(ImageReferenceError) as ctx:
            resolve_one(self.node, self.images, 'conf@3')

        self.assertEqual(ctx.exception.configuration, 'conf@3')
        self.assertEqual(ctx.exception.field, 'fdt')
        self.assertEqual(ctx.exception.missing_name, 'fdt@2')

    def test_resolve_all_fails_fast(self):
        with self.assertRaises(ImageReferenceError):
            resolve_all(self.node, self.images)

    def test_resolve_all(self):
        self.images['fdt@2'] = _image('fdt@2', 8)
        configs = resolve_all(self.node, self.images)

        self.assertEqual(sorted(configs), ['conf@1', 'conf@2', 'conf@3'])

        # Images are shared between configurations, not copied
        self.assertIs(configs['conf@1'].image('kernel'), configs['conf@3'].image('kernel'))
