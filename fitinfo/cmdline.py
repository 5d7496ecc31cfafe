# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification
"""
The *fitinfo.cmdline* module helps create consistent command line interfaces
atop of the fitinfo API.

It provides an :py:class:`ArgumentParser` that wraps the standard
:py:class:`argparse.ArgumentParser`, along with custom :py:class:`argparse.Action` classes.
"""

import argparse

from fitinfo.string import length_to_int


def build_kwargs(args) -> dict:
    """
    Translate parsed command-line arguments into the keyword arguments
    accepted by :py:meth:`fitinfo.Fit.build()`.

    Any of the arguments added by :py:class:`ArgumentParser` may be absent from *args*.
    """
    kwargs = {}

    if getattr(args, 'config', None):
        kwargs['config'] = args.config

    if getattr(args, 'default_only', False):
        kwargs['all_configs'] = False

    if getattr(args, 'address', None) is not None:
        kwargs['load_base'] = args.address

    if getattr(args, 'progress', False):
        kwargs['show_progress'] = True

    return kwargs


class AddressAction(argparse.Action):
    """
    ArgumentParser Action for validating addresses.

    The following suffixes are supported:

        * kB = 1000
        * K or kiB = 1024
        * MB = 1000 * 1000
        * M or MiB = 1024 * 1024
        * GB = 1000 * 1000 * 1000
        * G or GiB = 1024 * 1024 * 1024

    """
    def __call__(self, parser, namespace, address, option_string=None):
        try:
            value = length_to_int(address, desc='address')
        except ValueError as error:
            parser.error(str(error))
        setattr(namespace, self.dest, value)


class ArgumentParser(argparse.ArgumentParser):
    """
    Extension of Python's own :py:class:`argparse.ArgumentParser` that adds
    fitinfo-specific argument handlers.

    *init_args* is a list of names, each corresponding to the ``<x>`` in one of this
    class's ``add_<x>_argument()`` methods, which will be called during construction.
    The string ``'default'`` selects every item in :py:attr:`DEFAULT_ARGS`, and
    ``None`` or an empty list selects none of them.

    Keyword arguments prefixed with ``<x>_`` are passed to the corresponding
    ``add_<x>_argument()`` method, sans prefix. All other keyword arguments are passed
    to the underlying :py:class:`argparse.ArgumentParser`.
    """
    # Supress this for consistency with the ArgumentParser keyword names:
    #  pylint: disable=redefined-builtin

    #: :obj:`list` :
    #: Default list used by :py:meth:`ArgumentParser.__init__()` unless
    #: otherwise overridden with a caller-provided list.
    DEFAULT_ARGS = [
        'file',
        'config',
        'address',
        'default_only',
        'progress',
    ]

    def _perform_arg_handler_init(self, init_args: list, kwargs_dict: dict):
        init_operations = []
        for name in init_args:
            prefix = name + '_'
            fn_kwargs = {}
            for key in [k for k in kwargs_dict if k.startswith(prefix)]:
                fn_kwargs[key[len(prefix):]] = kwargs_dict.pop(key)

            init_fn = getattr(self, 'add_' + name + '_argument')
            init_operations.append((init_fn, fn_kwargs))

        return init_operations

    def __init__(self, init_args='default', **kwargs):
        if init_args == 'default':
            init_args = self.DEFAULT_ARGS
        elif init_args in self.DEFAULT_ARGS:
            init_args = [init_args]
        elif init_args is None:
            init_args = []
        elif not isinstance(init_args, list):
            raise TypeError('init_args expected to be a string or list')

        # Items for our add_<x>_argument() calls must be removed before
        # the superclass sees them.
        init_operations = self._perform_arg_handler_init(init_args, kwargs)

        super().__init__(**kwargs)
        for op_fn, op_kwargs in init_operations:
            op_fn(**op_kwargs)

        try:
            self._optionals.title = 'options'
        except AttributeError:
            pass

    def add_file_argument(self, **kwargs):
        """
        Add the input FIT file argument to the ArgumentParser.
        """
        self.add_argument('-f', '--file',
                          metavar=kwargs.pop('metavar', '<path>'),
                          required=kwargs.pop('required', True),
                          help=kwargs.pop('help', 'FIT image (DTB format) to inspect and verify.'),
                          **kwargs)

    def add_outfile_argument(self, **kwargs):
        """
        Add an output file argument to the ArgumentParser.
        The caller is required to provide the *help* argument.
        """
        if 'help' not in kwargs:
            raise ValueError('Help text must be provided for -o,--outfile ')

        self.add_argument('-o', '--outfile',
                          metavar=kwargs.pop('metavar', '<path>'),
                          **kwargs)

    def add_config_argument(self, **kwargs):
        """
        Add an argument used to select a configuration other than the default.
        """
        help_text = 'Configuration to select. Default: the one named by /configurations/default'
        self.add_argument('-c', '--config',
                          metavar=kwargs.pop('metavar', '<name>'),
                          default=kwargs.pop('default', None),
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_address_argument(self, **kwargs):
        """
        Add the base load address argument to the ArgumentParser.
        """
        default_value = kwargs.pop('default', 0)
        help_text = 'Address at which the first image of a configuration is placed.'
        if default_value is not None:
            help_text += ' Default: 0x{:08x}'.format(default_value)

        self.add_argument('-a', '--address',
                          metavar=kwargs.pop('metavar', '<value>'),
                          default=default_value,
                          action=AddressAction,
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_default_only_argument(self, **kwargs):
        """
        Add an option to resolve only the selected configuration, rather than all of them.
        """
        help_text = 'Only resolve the selected (or default) configuration.'
        self.add_argument('-D', '--default-only',
                          action='store_true',
                          default=kwargs.pop('default', False),
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_progress_argument(self, **kwargs):
        """
        Add an option to show progress bars while hashing large images.
        """
        self.add_argument('-p', '--progress',
                          action='store_true',
                          default=kwargs.pop('default', False),
                          help=kwargs.pop('help', 'Show progress while hashing large images.'),
                          **kwargs)

    def add_json_argument(self, **kwargs):
        """
        Add an option to produce JSON output rather than a text listing.
        """
        self.add_argument('-J', '--json',
                          action='store_true',
                          default=kwargs.pop('default', False),
                          help=kwargs.pop('help', 'Write results as JSON.'),
                          **kwargs)
