# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
#
# pylint: disable=missing-function-docstring, missing-class-docstring

"""
Unit tests for fitinfo.image
"""

from unittest import TestCase

from fitinfo import (DigestMismatch, IntegrityError, MissingProperty, Node,
                     UnsupportedAlgorithm, codec)
from fitinfo.image import extract_all, extract_image

from .test_utils import digest, hash_node, image_dict, random_data


class TestExtractImage(TestCase):

    def test_metadata(self):
        data = random_data(100)
        contents = image_dict(data, ('sha1', 'md5', 'crc32'), 'kernel',
                              description='Linux kernel', arch='arm64', compression='gzip')
        contents['load'] = codec.u32(0x80080000)
        contents['entry'] = codec.u32_array((0x0, 0x80080000))

        image = extract_image(Node.from_dict('kernel@1', contents))

        self.assertEqual(image.name, 'kernel@1')
        self.assertEqual(image.description, 'Linux kernel')
        self.assertEqual(image.type, 'kernel')
        self.assertEqual(image.arch, 'arm64')
        self.assertEqual(image.os, 'linux')
        self.assertEqual(image.compression, 'gzip')
        self.assertEqual(image.data, data)
        self.assertEqual(image.size, 100)
        self.assertEqual(image.load, 0x80080000)
        self.assertEqual(image.entry, 0x80080000)
        self.assertEqual([h.name for h in image.hashes], ['hash@1', 'hash@2', 'hash@3'])
        self.assertEqual([h.algorithm for h in image.hashes], ['sha1', 'md5', 'crc32'])

    def test_optional(self):
        contents = image_dict(b'\xd0\x0d\xfe\xed', (), 'flat_dt', os=None)
        del contents['description']

        image = extract_image(Node.from_dict('fdt@1', contents))
        self.assertEqual(image.description, '')
        self.assertIsNone(image.os)
        self.assertIsNone(image.load)
        self.assertIsNone(image.entry)
        self.assertEqual(image.hashes, ())

    def test_malformed_address(self):
        contents = image_dict(b'AB')
        contents['load'] = b'\x80\x00\x00'
        contents['entry'] = codec.u32(0x80000000)

        with self.assertLogs('fitinfo', level='WARNING') as ctx:
            image = extract_image(Node.from_dict('kernel@1', contents))

        self.assertIsNone(image.load)
        self.assertEqual(image.entry, 0x80000000)
        self.assertEqual(image.data, b'AB')
        self.assertIn('"load"', '\n'.join(ctx.output))

    def test_missing_required(self):
        for prop in ('type', 'arch', 'compression', 'data'):
            with self.subTest(prop):
                contents = image_dict(b'AB')
                del contents[prop]

                with self.assertRaises(MissingProperty) as ctx:
                    extract_image(Node.from_dict('kernel@1', contents))

                self.assertEqual(ctx.exception.name, prop)
                self.assertEqual(ctx.exception.node.name, 'kernel@1')

    def test_missing_hash_value(self):
        contents = image_dict(b'AB')
        del contents['hash']['value']

        with self.assertRaises(MissingProperty) as ctx:
            extract_image(Node.from_dict('kernel@1', contents))

        self.assertEqual(ctx.exception.name, 'value')
        self.assertEqual(ctx.exception.node.path, 'kernel@1/hash')

    def test_mismatch(self):
        data = random_data(32)
        contents = image_dict(data, ('sha1', 'md5'))
        contents['hash@2']['value'] = digest('md5', b'not the data')

        with self.assertRaises(IntegrityError) as ctx:
            extract_image(Node.from_dict('kernel@1', contents))

        self.assertEqual(ctx.exception.image, 'kernel@1')
        self.assertEqual(ctx.exception.record, 'hash@2')
        self.assertIsInstance(ctx.exception.reason, DigestMismatch)
        self.assertEqual(ctx.exception.reason.computed, digest('md5', data))

    def test_unsupported(self):
        contents = image_dict(b'AB')
        contents.update(hash_node('hash@1', 'sha256', b'\x00' * 32))

        with self.assertRaises(IntegrityError) as ctx:
            extract_image(Node.from_dict('kernel@1', contents))

        self.assertEqual(ctx.exception.record, 'hash@1')
        self.assertIsInstance(ctx.exception.reason, UnsupportedAlgorithm)
        self.assertEqual(ctx.exception.reason.name, 'sha256')

    def test_non_hash_children_ignored(self):
        contents = image_dict(b'AB')
        contents['signature@1'] = {'algo': codec.text('sha256,rsa2048'), 'value': b'\x00'}
        contents['hashes'] = {'algo': codec.text('bogus'), 'value': b'\x00'}

        image = extract_image(Node.from_dict('kernel@1', contents))
        self.assertEqual([h.name for h in image.hashes], ['hash'])


class TestExtractAll(TestCase):

    def test_all(self):
        payloads = {
            'kernel@1': random_data(64, 1),
            'fdt@1': random_data(16, 2),
            'ramdisk@1': random_data(128, 3),
        }
        images_node = Node.from_dict('images', {name: image_dict(data) for name, data in payloads.items()})

        images = extract_all(images_node)

        self.assertEqual(sorted(images), sorted(payloads))
        for name, data in payloads.items():
            with self.subTest(name):
                self.assertEqual(images[name].name, name)
                self.assertEqual(images[name].data, data)

    def test_empty(self):
        self.assertEqual(extract_all(Node('images')), {})

    def test_fail_fast(self):
        contents = {'a@1': image_dict(b'A'), 'b@1': image_dict(b'B'), 'c@1': image_dict(b'C')}
        contents['b@1']['data'] = b'b'

        with self.assertRaises(IntegrityError) as ctx:
            extract_all(Node.from_dict('images', contents))

        self.assertEqual(ctx.exception.image, 'b@1')
