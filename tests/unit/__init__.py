# flake8: noqa=F401
# pylint: disable=missing-module-docstring

from .codec import TestCodec
from .node import TestNode
from .hashing import TestHashAlgorithm, TestHashRecord, TestVerify
from .image import TestExtractImage, TestExtractAll
from .configuration import TestAssignLoads, TestResolve
from .fit import TestFitBuild
from .dtb import TestParse, TestRawValue
from .report import TestReport
from .cmdline import TestArgumentParser, TestLengthToInt
from .log import TestLog, TestProgress
