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
'''Extraction of full-resolution channel planes from a SCN container.

The container is walked once, directory by directory. Whenever the current
directory is listed in the selection table its pixels are decoded and the
channel planes of all matching entries are written to disk.
'''
import logging
import numpy as np

from scnlib.errors import AmbiguousSelection
from scnlib.errors import MemoryAllocationFailed
from scnlib.readers import ContainerReader
from scnlib.scanner import scan_description
from scnlib.selection import select_directories
from scnlib.utils import map_channel_to_color
from scnlib.writers import ChannelPlaneWriter

logger = logging.getLogger(__name__)


def extract_channel_plane(raster, channel_id):
    '''Extracts the sample of one channel from an RGB raster.

    Channel 0 is stored in the red, 1 in the green and 2 in the blue sample.

    Parameters
    ----------
    raster: numpy.ndarray[numpy.uint8]
        raster with shape ``(height, width, 3)``
    channel_id: int
        zero-based channel identifier

    Returns
    -------
    Union[numpy.ndarray[numpy.uint8], None]
        C-contiguous plane with shape ``(height, width)``; ``None`` when
        `channel_id` has no colour sample

    Raises
    ------
    MemoryAllocationFailed
        when the plane doesn't fit into memory
    '''
    try:
        color = map_channel_to_color(channel_id)
    except ValueError:
        logger.error('invalid channel identifier %r', channel_id)
        return None
    logger.debug('extract %s sample for channel %d', color, channel_id)
    try:
        return np.ascontiguousarray(raster[:, :, channel_id], dtype=np.uint8)
    except MemoryError:
        raise MemoryAllocationFailed(
            'Could not allocate memory for channel plane (%d x %d).'
            % (raster.shape[1], raster.shape[0])
        )


class FieldExtractor(object):

    '''Class for writing the selected channel planes of a container.

    The extractor holds the state of one run: the directory cursor only moves
    forward and is never reset.
    '''

    def __init__(self, reader, table, writer, raster_origin='top',
                 shared_directory='all'):
        '''
        Parameters
        ----------
        reader: scnlib.readers.ContainerReader
            open container positioned on the metadata directory
        table: scnlib.selection.SelectionTable
            selected directories
        writer: scnlib.writers.ChannelPlaneWriter
            writer for channel planes
        raster_origin: str, optional
            ``"top"`` to write rows as stored, ``"bottom"`` to flip them
            (default: ``"top"``)
        shared_directory: str, optional
            ``"all"`` to write every channel that refers to a directory,
            ``"error"`` to refuse tables with shared directories
            (default: ``"all"``)
        '''
        if raster_origin not in {'top', 'bottom'}:
            raise ValueError('Unknown raster origin "%s".' % raster_origin)
        if shared_directory not in {'all', 'error'}:
            raise ValueError(
                'Unknown shared directory policy "%s".' % shared_directory
            )
        self.reader = reader
        self.table = table
        self.writer = writer
        self.raster_origin = raster_origin
        self.shared_directory = shared_directory
        self.cursor = reader.directory_index
        self.filenames = list()

    def _check_shared_directories(self):
        shared = self.table.find_shared_directories()
        if not shared:
            return
        for index, entries in sorted(shared.items()):
            description = ', '.join(
                'field %d channel %d' % (e.field_index, e.channel_id)
                for e in entries
            )
            if self.shared_directory == 'error':
                raise AmbiguousSelection(
                    'Directory %d is selected more than once: %s'
                    % (index, description)
                )
            logger.warning(
                'directory %d is selected more than once: %s',
                index, description
            )

    def extract(self):
        '''Walks the remaining directories of the container and writes the
        channel planes of all selected directories.

        Returns
        -------
        List[str]
            paths to the written files in the order they were written

        Raises
        ------
        scnlib.errors.AmbiguousSelection
            when directories are shared and the policy is ``"error"``
        scnlib.errors.DecodeFailed
            when a selected directory cannot be decoded
        scnlib.errors.MemoryAllocationFailed
            when a raster or plane doesn't fit into memory
        scnlib.errors.WriteFailed
            when a file cannot be written
        '''
        self._check_shared_directories()
        visited = set()
        while self.reader.advance_directory():
            self.cursor += 1
            entries = self.table.lookup(self.cursor)
            if not entries:
                continue
            visited.add(self.cursor)
            self._extract_directory(entries)

        missing = set(self.table.directory_indices) - visited
        for index in sorted(missing):
            logger.warning(
                'selected directory %d was not reached by the directory walk',
                index
            )
        logger.info(
            'wrote %d channel planes of %d fields',
            len(self.filenames), len(self.table.fields)
        )
        return self.filenames

    def _extract_directory(self, entries):
        width, height = self.reader.get_directory_dimensions()
        raster = self.reader.decode_directory_to_color_raster(width, height)
        logger.info('Read: successful (%d x %d)', width, height)
        if self.raster_origin == 'bottom':
            raster = raster[::-1]
        for entry in entries:
            plane = extract_channel_plane(raster, entry.channel_id)
            if plane is None:
                continue
            filename = self.writer.write(
                plane, entry.field_index, entry.channel_id
            )
            self.filenames.append(filename)
            del plane
        del raster


def read_selection(reader):
    '''Selects the full-resolution directories of a container.

    Parameters
    ----------
    reader: scnlib.readers.ContainerReader
        open container

    Returns
    -------
    scnlib.selection.SelectionTable
        selected directories

    Raises
    ------
    scnlib.errors.MetadataMissing
        when the container has no description
    scnlib.errors.MetadataMalformed
        when the description cannot be parsed
    '''
    description = reader.get_description_text()
    table = select_directories(scan_description(description))
    logger.info(
        'selected %d directories of %d fields',
        len(table), len(table.fields)
    )
    return table


def convert(filename, prefix, raster_origin='top', shared_directory='all'):
    '''Converts the full-resolution channel planes of all fields of a SCN
    container into raw 8-bit files.

    Parameters
    ----------
    filename: str
        path to the container file
    prefix: str
        prefix of the output files
    raster_origin: str, optional
        row order of the written planes (default: ``"top"``)
    shared_directory: str, optional
        policy for directories selected by several channels
        (default: ``"all"``)

    Returns
    -------
    List[str]
        paths to the written files

    See also
    --------
    :class:`scnlib.extraction.FieldExtractor`
    :class:`scnlib.writers.ChannelPlaneWriter`
    '''
    with ContainerReader(filename) as reader:
        table = read_selection(reader)
        with ChannelPlaneWriter(prefix) as writer:
            extractor = FieldExtractor(
                reader, table, writer, raster_origin=raster_origin,
                shared_directory=shared_directory
            )
            return extractor.extract()
