# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
#
# pylint: disable=missing-function-docstring, missing-class-docstring

"""
Unit tests for fitinfo.cmdline and fitinfo.string
"""

from unittest import TestCase

from fitinfo.cmdline import ArgumentParser, build_kwargs
from fitinfo.string import length_to_int


class TestLengthToInt(TestCase):

    def test_plain(self):
        self.assertEqual(length_to_int('4096'), 4096)
        self.assertEqual(length_to_int('0x8000_0000'), 0x8000_0000)
        self.assertEqual(length_to_int('0xB'), 11)

    def test_suffixes(self):
        expected = {
            '4k': 4096, '4KiB': 4096, '4kB': 4000,
            '2M': 2 * 1024 * 1024, '2MiB': 2 * 1024 * 1024, '2MB': 2000000,
            '1G': 1024 ** 3, '1 GiB': 1024 ** 3, '1GB': 1000 ** 3,
        }
        for string, value in expected.items():
            with self.subTest(string):
                self.assertEqual(length_to_int(string), value)

    def test_invalid(self):
        for string in ('', 'foo', '-1', '12QB'):
            with self.subTest(string):
                with self.assertRaises(ValueError):
                    length_to_int(string)


class TestArgumentParser(TestCase):

    def test_defaults(self):
        parser = ArgumentParser()
        args = parser.parse_args(['-f', 'image.itb'])

        self.assertEqual(args.file, 'image.itb')
        self.assertEqual(build_kwargs(args), {'load_base': 0})

    def test_options(self):
        parser = ArgumentParser()
        args = parser.parse_args(['-f', 'image.itb', '-c', 'conf@2', '-D', '-a', '2M', '-p'])

        self.assertEqual(build_kwargs(args), {
            'config': 'conf@2',
            'all_configs': False,
            'load_base': 2 * 1024 * 1024,
            'show_progress': True,
        })

    def test_init_args(self):
        parser = ArgumentParser(init_args=['file', 'address'], address_default=0x1000, prog='test')
        args = parser.parse_args(['-f', 'x'])
        self.assertEqual(args.address, 0x1000)
        self.assertFalse(hasattr(args, 'config'))

        with self.assertRaises(TypeError):
            ArgumentParser(init_args=42)

    def test_outfile_requires_help(self):
        parser = ArgumentParser(init_args=None)
        with self.assertRaises(ValueError):
            parser.add_outfile_argument()
