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
'''Writer classes.

All writers make use of the
`with statement context manager <https://docs.python.org/3/reference/datamodel.html#context-managers>`_
and thus follow a similar syntax::

    with ChannelPlaneWriter('/path/to/output/Slide_') as f:
        f.write(plane, field_index, channel_id)
'''
import os
import logging
import numpy as np
import yaml
from abc import ABCMeta
from abc import abstractmethod

from scnlib.errors import WriteFailed

logger = logging.getLogger(__name__)


class Writer(metaclass=ABCMeta):

    '''Abstract base class for writers.'''

    def __enter__(self):
        return self

    def __exit__(self, except_type, except_value, except_trace):
        pass

    @abstractmethod
    def write(self, *args, **kwargs):
        pass


class ChannelPlaneWriter(Writer):

    '''Class for writing channel planes as raw 8-bit files.

    Files have no header: they contain ``width * height`` unsigned bytes in
    row-major order. The dimensions are encoded in the filename.
    '''

    #: Format string for the name of a channel plane file
    FILENAME_FORMAT = '{prefix}Image{field}_Channel{channel}_X{width}_Y{height}.bin'

    def __init__(self, prefix):
        '''
        Parameters
        ----------
        prefix: str
            prefix of each output path; may contain a directory
        '''
        self.prefix = prefix

    def build_filename(self, field_index, channel_id, width, height):
        '''Builds the path of a channel plane file.

        Parameters
        ----------
        field_index: int
            zero-based field index
        channel_id: int
            zero-based channel identifier
        width: int
            number of pixel columns
        height: int
            number of pixel rows

        Returns
        -------
        str
            path to the file
        '''
        return self.FILENAME_FORMAT.format(
            prefix=self.prefix, field=field_index, channel=channel_id,
            width=width, height=height
        )

    def write(self, plane, field_index, channel_id):
        '''Writes a channel plane to disk.

        An existing file with the same name is overwritten.

        Parameters
        ----------
        plane: numpy.ndarray[numpy.uint8]
            2D pixel array with shape ``(height, width)``
        field_index: int
            zero-based field index
        channel_id: int
            zero-based channel identifier

        Returns
        -------
        str
            path to the written file

        Raises
        ------
        TypeError
            when `plane` is not a 2D array of unsigned 8-bit integers
        WriteFailed
            when the file cannot be written
        '''
        if plane.ndim != 2 or plane.dtype != np.uint8:
            raise TypeError('Channel plane must be a 2D array of type uint8.')
        height, width = plane.shape
        filename = self.build_filename(field_index, channel_id, width, height)
        logger.info('Writing %s', filename)
        try:
            np.ascontiguousarray(plane).tofile(filename)
            n_bytes = os.path.getsize(filename)
        except (IOError, OSError) as error:
            raise WriteFailed('Could not write file "%s": %s' % (filename, error))
        if n_bytes != width * height:
            raise WriteFailed(
                'Could not write file "%s": wrote %d of %d bytes.'
                % (filename, n_bytes, width * height)
            )
        return filename


class SelectionTableWriter(Writer):

    '''Class for writing a selection table in YAML format.'''

    def __init__(self, stream):
        '''
        Parameters
        ----------
        stream: file
            open text stream
        '''
        self.stream = stream

    def write(self, table, filename=None):
        '''Writes the entries of a selection table.

        Parameters
        ----------
        table: scnlib.selection.SelectionTable
            selected directories
        filename: str, optional
            name of the container the table was derived from
        '''
        data = dict()
        if filename is not None:
            data['container'] = filename
        data['n_fields'] = len(table.fields)
        data['fields'] = table.to_dict()
        yaml.safe_dump(data, self.stream, default_flow_style=False)
