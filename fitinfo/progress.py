# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Progress reporting for long running work, such as hashing a large
kernel or ramdisk payload.

Use :py:meth:`Progress.create()` rather than instantiating the classes
directly; it decides whether a bar should actually be drawn.
"""

from tqdm import tqdm

from . import log


class Progress:
    """
    No-op progress indicator, used when nothing should be drawn.

    It still counts updates so that the amount of completed work can be
    inspected via :py:attr:`count` when debugging.
    """

    @staticmethod
    def create(total: int, desc: str, **kwargs):
        """
        Create either a :py:class:`ProgressBar` or a :py:class:`Progress` instance.

        A bar is only drawn when the *show* keyword argument is ``True`` (the default)
        and the log level is one of ``NOTE``, ``INFO``, or ``WARNING``. Debug output would
        otherwise interfere with the bar, and at quieter levels it would be obtrusive.

        *total* is the amount of work that corresponds to 100% completion, and *desc*
        briefly describes the operation in just a few words.
        """
        show  = kwargs.pop('show', True)
        show &= log.get_level() in (log.NOTE, log.INFO, log.WARNING)

        if show:
            cls = ProgressBar
        else:
            cls = Progress
            log.debug(desc)

        return cls(total, desc, **kwargs)

    def __init__(self, total: int, desc: str, **_kwargs):
        self._desc  = desc
        self._total = total
        self._count = 0

    @property
    def count(self) -> int:
        """
        Sum of all values passed to :py:meth:`update()` so far.
        """
        return self._count

    @property
    def total(self) -> int:
        """
        Amount of work corresponding to completion.
        """
        return self._total

    def update(self, count=1):
        """
        Record *count* additional units of completed work.
        This is relative to the previous call, not a running total.
        """
        self._count += count

    def close(self):
        """
        Close and cleanup progress status.
        """
        self._desc = None

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()


class ProgressBar(Progress):
    """
    A thin wrapper around tqdm.
    """

    def __init__(self, total: int, desc=None, unit='B', **kwargs):
        if not unit.startswith(' '):
            unit = ' ' + unit
        super().__init__(total, desc, **kwargs)
        self._pbar = tqdm(total=total, desc=desc, unit=unit, unit_scale=True, leave=False, **kwargs)

    def update(self, count=1):
        super().update(count)
        self._pbar.update(n=count)

    def close(self):
        super().close()
        self._pbar.close()
