# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
# pylint: disable=missing-module-docstring

__version__ = '0.2.0'
