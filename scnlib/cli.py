# ScnLib - extraction of fluorescence channel planes from Leica SCN slides.
# Copyright (C) 2026  ScnLib authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
'''Command line interface.

Usage::

    scnlib [-v] convert SLIDE.scn OUTPUT_PREFIX
    scnlib [-v] show SLIDE.scn

Exit codes:

    * 0: success
    * 1: container could not be opened
    * 2: XML description missing, malformed or ambiguous, or invalid
      configuration
    * 3: pixel data of a selected directory could not be read
    * 4: memory for an image could not be allocated
    * 5: a channel plane could not be written
'''
import sys
import logging
import argparse
import traceback

from scnlib import __version__
from scnlib.config import LibraryConfig
from scnlib.config import RASTER_ORIGINS
from scnlib.config import SHARED_DIRECTORY_POLICIES
from scnlib.errors import ConfigurationError
from scnlib.errors import ScnError
from scnlib.extraction import convert
from scnlib.extraction import read_selection
from scnlib.logging_utils import configure_logging
from scnlib.logging_utils import map_logging_verbosity
from scnlib.readers import ContainerReader
from scnlib.writers import SelectionTableWriter

logger = logging.getLogger(__name__)


def _load_config(args):
    cfg = LibraryConfig()
    try:
        cfg.read()
        if args.raster_origin is not None:
            cfg.raster_origin = args.raster_origin
        if args.shared_directory is not None:
            cfg.shared_directory = args.shared_directory
    except ValueError as error:
        raise ConfigurationError(str(error))
    return cfg


def _convert(args):
    cfg = _load_config(args)
    logger.info('convert container: %s', args.input_path)
    filenames = convert(
        args.input_path, args.output_prefix,
        raster_origin=cfg.raster_origin,
        shared_directory=cfg.shared_directory
    )
    logger.info('%d files written', len(filenames))


def _show(args):
    with ContainerReader(args.input_path) as reader:
        table = read_selection(reader)
    with SelectionTableWriter(sys.stdout) as writer:
        writer.write(table, args.input_path)


def get_parser():
    '''Builds the argument parser of the command line interface.

    Returns
    -------
    argparse.ArgumentParser
    '''
    parser = argparse.ArgumentParser(
        prog='scnlib',
        description=(
            'Extract full-resolution fluorescence channel planes from '
            'Leica SCN slides as raw 8-bit files.'
        )
    )
    parser.add_argument(
        '-v', '--verbosity', dest='verbosity', action='count', default=0,
        help='increase logging verbosity (default: WARN)'
    )
    parser.add_argument(
        '--version', action='version', version='%(prog)s ' + __version__
    )
    subparsers = parser.add_subparsers(dest='command', help='sub-commands')

    convert_parser = subparsers.add_parser(
        'convert', help='write channel planes of all fields to disk'
    )
    convert_parser.description = '''
        Write one file per channel of each field. Files are named
        <prefix>Image<field>_Channel<channel>_X<width>_Y<height>.bin and
        hold unsigned 8-bit pixels in row-major order.
    '''
    convert_parser.add_argument('input_path', help='path to the SCN file')
    convert_parser.add_argument(
        'output_prefix', help='prefix of the output files'
    )
    convert_parser.add_argument(
        '--raster-origin', choices=RASTER_ORIGINS, default=None,
        help='row order of the written planes (default: from config, "top")'
    )
    convert_parser.add_argument(
        '--shared-directory', choices=SHARED_DIRECTORY_POLICIES,
        default=None,
        help=(
            'policy for directories selected by more than one channel '
            '(default: from config, "all")'
        )
    )
    convert_parser.set_defaults(handler=_convert)

    show_parser = subparsers.add_parser(
        'show', help='print the selected directories as YAML'
    )
    show_parser.add_argument('input_path', help='path to the SCN file')
    show_parser.set_defaults(handler=_show)
    return parser


def command_line_call(parser, argv=None):
    '''
    Main entry point for command line interfaces.

    Parses the command line arguments, configures logging and calls the
    handler of the sub-command.

    Parameters
    ----------
    parser: argparse.ArgumentParser
        argument parser object
    argv: List[str], optional
        command line arguments (default: ``sys.argv[1:]``)

    Returns
    -------
    int
        exit code

    Warning
    -------
    Don't do any other logging configuration anywhere else!
    '''
    args = parser.parse_args(argv)

    level = map_logging_verbosity(args.verbosity)
    configure_logging(level)
    logger.debug('running program: %s' % parser.prog)

    if getattr(args, 'handler', None) is None:
        parser.print_help()
        return 0
    try:
        args.handler(args)
    except ScnError as error:
        logger.error('%s', error)
        for tb in traceback.format_tb(sys.exc_info()[2]):
            logger.debug(tb.rstrip())
        return error.exit_code
    return 0


def main(argv=None):
    return command_line_call(get_parser(), argv)


if __name__ == '__main__':
    sys.exit(main())
