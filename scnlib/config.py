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
'''Configuration settings.

Settings are read from an `INI <https://en.wikipedia.org/wiki/INI_file>`_-like
file (:const:`CONFIG_FILE <scnlib.config.CONFIG_FILE>`), which may look as
follows::

    [scnlib]
    raster_origin = top
    shared_directory = all

The environment variable ``SCNLIB_CONFIG_FILE`` can be used to overwrite the
default location of the file.
'''
import os
import logging
from configparser import ConfigParser
from configparser import Error as ConfigParserError

logger = logging.getLogger(__name__)


CONFIG_FILE = os.path.expanduser('~/.scnlib/scnlib.cfg')

#: Row order of written channel planes
RASTER_ORIGINS = ('top', 'bottom')

#: Policies for directories that are selected for more than one channel
SHARED_DIRECTORY_POLICIES = ('all', 'error')


class LibraryConfig(object):

    '''Configuration settings of :mod:`scnlib`.'''

    __slots__ = ('_config_file', '_config', '_section')

    def __init__(self, config_file=None):
        '''
        Parameters
        ----------
        config_file: str, optional
            path to the configuration file; defaults to the value of the
            environment variable ``SCNLIB_CONFIG_FILE`` or
            :const:`CONFIG_FILE <scnlib.config.CONFIG_FILE>`
        '''
        if config_file is not None:
            self._config_file = config_file
        elif 'SCNLIB_CONFIG_FILE' in os.environ:
            self._config_file = os.environ['SCNLIB_CONFIG_FILE']
            logger.debug(
                'use config file set by environment variable '
                'SCNLIB_CONFIG_FILE'
            )
        else:
            self._config_file = CONFIG_FILE
        self._config = ConfigParser()
        self._section = 'scnlib'
        self._config.add_section(self._section)
        self.raster_origin = 'top'
        self.shared_directory = 'all'

    @property
    def config_file(self):
        '''str: path to the configuration file'''
        return self._config_file

    def read(self):
        '''Reads the configuration from file.

        Values of the file are validated; in case the file doesn't exist the
        defaults are kept.

        Raises
        ------
        ValueError
            when the file cannot be parsed or holds an invalid value
        '''
        if not os.path.exists(self._config_file):
            logger.debug(
                'configuration file does not exist, use defaults: %s',
                self._config_file
            )
            return
        logger.debug('read config file: %s', self._config_file)
        parser = ConfigParser()
        try:
            parser.read(self._config_file)
        except ConfigParserError as error:
            raise ValueError(
                'Cannot read configuration file "%s": %s'
                % (self._config_file, error)
            )
        if not parser.has_section(self._section):
            logger.warning(
                'configuration file has no section "%s": %s',
                self._section, self._config_file
            )
            return
        for name, value in parser.items(self._section):
            if name not in {'raster_origin', 'shared_directory'}:
                logger.warning('unknown configuration parameter "%s"', name)
                continue
            setattr(self, name, value.strip())

    @property
    def raster_origin(self):
        '''str: row order of written channel planes, either ``"top"`` for
        rows as stored in the container or ``"bottom"`` for the upside down
        layout of the libtiff RGBA interface (default: ``"top"``)
        '''
        return self._config.get(self._section, 'raster_origin')

    @raster_origin.setter
    def raster_origin(self, value):
        if value not in RASTER_ORIGINS:
            raise ValueError(
                'Configuration parameter "raster_origin" must be one of: "%s"'
                % '", "'.join(RASTER_ORIGINS)
            )
        self._config.set(self._section, 'raster_origin', value)

    @property
    def shared_directory(self):
        '''str: what to do when several channels refer to the same directory:
        ``"all"`` writes one file per channel, ``"error"`` aborts the run
        (default: ``"all"``)
        '''
        return self._config.get(self._section, 'shared_directory')

    @shared_directory.setter
    def shared_directory(self, value):
        if value not in SHARED_DIRECTORY_POLICIES:
            raise ValueError(
                'Configuration parameter "shared_directory" must be one of: '
                '"%s"' % '", "'.join(SHARED_DIRECTORY_POLICIES)
            )
        self._config.set(self._section, 'shared_directory', value)
