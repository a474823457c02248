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
'''Errors raised by :mod:`scnlib`.

Each error class carries the exit code the command line interface terminates
with when the error reaches the entry point.
'''


class ScnError(Exception):

    '''
    Base class for errors that abort a conversion run.
    '''

    #: process exit code reported by the command line interface
    exit_code = 1


class ContainerOpenFailed(ScnError):

    '''
    Error class that is raised when the container file cannot be opened.
    '''

    exit_code = 1


class MetadataMissing(ScnError):

    '''
    Error class that is raised when the first directory of the container
    doesn't provide an image description.
    '''

    exit_code = 2


class MetadataMalformed(ScnError):

    '''
    Error class that is raised when the image description cannot be parsed
    or lacks the *collection* element.
    '''

    exit_code = 2


class ConfigurationError(ScnError):

    '''
    Error class that is raised when a configuration value is invalid.
    '''

    exit_code = 2


class AmbiguousSelection(ScnError):

    '''
    Error class that is raised when several selected channels refer to the
    same container directory and the configuration forbids sharing.
    '''

    exit_code = 2


class DecodeFailed(ScnError):

    '''
    Error class that is raised when pixel data of a selected directory
    cannot be decoded.
    '''

    exit_code = 3


class MemoryAllocationFailed(ScnError):

    '''
    Error class that is raised when memory for a decoded raster or channel
    plane cannot be allocated.
    '''

    exit_code = 4


class WriteFailed(ScnError):

    '''
    Error class that is raised when a channel plane cannot be written to disk.
    '''

    exit_code = 5
