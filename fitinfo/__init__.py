# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
#
# flake8: noqa=F401
"""
fitinfo: Inspection and integrity verification of U-Boot Flattened Image Tree (FIT) images

A FIT bundles kernels, device trees, and ramdisks, together with named boot
configurations, inside a Flattened Device Tree. :py:meth:`Fit.build()` turns
such a tree into a model of verified images and resolved configurations.
"""

from .version import __version__

from . import log
from . import codec
from . import hashing
from . import report

from .errors import (FitError,
                     MalformedProperty,
                     MissingProperty,
                     StructuralError,
                     ImageReferenceError,
                     LoadAddressError,
                     DtbError,
                     HashError,
                     DigestMismatch,
                     UnsupportedAlgorithm,
                     IntegrityError)

from .node          import Node
from .hashing       import HashAlgorithm, HashRecord
from .image         import Image
from .configuration import Configuration, ImageLoad
from .fit           import Fit
from .progress      import Progress, ProgressBar
