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
'''Reading of Leica SCN containers.

SCN files are `BigTIFF <http://bigtiff.org/>`_ files whose first directory
holds an XML description of the slide in its *ImageDescription* tag. All
other directories hold pixel data of one channel at one resolution level.
Directories are accessed via `tifffile <https://pypi.org/project/tifffile/>`_;
compressed tiles are decoded with `imagecodecs`.

The reader follows the cursor model of libtiff: there is a single current
directory that can only be advanced::

    with ContainerReader('/path/to/slide.scn') as f:
        description = f.get_description_text()
        while f.advance_directory():
            width, height = f.get_directory_dimensions()
            raster = f.decode_directory_to_color_raster(width, height)
'''
import os
import zlib
import logging
import numpy as np
import tifffile

from scnlib.errors import ContainerOpenFailed
from scnlib.errors import MetadataMissing
from scnlib.errors import DecodeFailed
from scnlib.errors import MemoryAllocationFailed

logger = logging.getLogger(__name__)


class ContainerReader(object):

    '''Class for reading the description and the pixel data of a SCN
    container one directory at a time.
    '''

    def __init__(self, filename):
        '''
        Parameters
        ----------
        filename: str
            path to the container file
        '''
        self.filename = filename
        self._tiff = None
        self._index = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, except_type, except_value, except_trace):
        self.close()

    def open(self):
        '''Opens the container and positions the cursor on the first
        directory.

        Raises
        ------
        ContainerOpenFailed
            when the file does not exist or is not a TIFF container
        '''
        if not os.path.exists(self.filename):
            raise ContainerOpenFailed(
                'Could not open container "%s": file does not exist.'
                % self.filename
            )
        logger.debug('open container: %s', self.filename)
        try:
            self._tiff = tifffile.TiffFile(self.filename)
            self._tiff.pages.useframes = False
            n = len(self._tiff.pages)
        except (tifffile.TiffFileError, OSError, ValueError) as error:
            self.close()
            raise ContainerOpenFailed(
                'Could not open container "%s": %s' % (self.filename, error)
            )
        if n == 0:
            self.close()
            raise ContainerOpenFailed(
                'Could not open container "%s": no directories.'
                % self.filename
            )
        logger.debug('container has %d directories', n)
        self._index = 0

    def close(self):
        '''Closes the container.'''
        if self._tiff is not None:
            self._tiff.close()
            self._tiff = None

    @property
    def directory_index(self):
        '''int: zero-based index of the current directory'''
        return self._index

    @property
    def n_directories(self):
        '''int: number of directories in the container'''
        return len(self._get_tiff().pages)

    def _get_tiff(self):
        if self._tiff is None:
            raise ValueError('Container "%s" is not open.' % self.filename)
        return self._tiff

    def _get_page(self):
        pages = self._get_tiff().pages
        try:
            return pages[self._index]
        except (tifffile.TiffFileError, ValueError, IndexError,
                OSError) as error:
            raise DecodeFailed(
                'Could not read directory %d of container "%s": %s'
                % (self._index, self.filename, error)
            )

    def get_description_text(self):
        '''Gets the XML description stored in the first directory.

        Returns
        -------
        str
            image description

        Raises
        ------
        MetadataMissing
            when the first directory has no non-empty *ImageDescription* tag
        '''
        page = self._get_tiff().pages[0]
        tag = page.tags.get('ImageDescription')
        if tag is None:
            raise MetadataMissing(
                'Container "%s" has no image description.' % self.filename
            )
        description = tag.value
        if isinstance(description, bytes):
            description = description.decode('utf-8', errors='replace')
        if not description.strip():
            raise MetadataMissing(
                'Image description of container "%s" is empty.'
                % self.filename
            )
        return description

    def advance_directory(self):
        '''Moves the cursor to the next directory.

        Returns
        -------
        bool
            ``False`` when the cursor was already on the last directory
        '''
        if self._index + 1 >= self.n_directories:
            return False
        self._index += 1
        return True

    def get_directory_dimensions(self):
        '''Gets the pixel dimensions of the current directory.

        Returns
        -------
        Tuple[int]
            width and height in pixels

        Raises
        ------
        DecodeFailed
            when the directory entry cannot be read
        '''
        page = self._get_page()
        return (int(page.imagewidth), int(page.imagelength))

    def decode_directory_to_color_raster(self, width, height):
        '''Decodes the pixels of the current directory into an interleaved
        RGB raster.

        Parameters
        ----------
        width: int
            expected number of pixel columns
        height: int
            expected number of pixel rows

        Returns
        -------
        numpy.ndarray[numpy.uint8]
            raster with shape ``(height, width, 3)``, top row first

        Raises
        ------
        DecodeFailed
            when the pixel data cannot be decoded or has unexpected dimensions
        MemoryAllocationFailed
            when the raster doesn't fit into memory
        '''
        page = self._get_page()
        logger.debug(
            'decode directory %d (%d x %d, %s)',
            self._index, width, height, page.dtype
        )
        try:
            array = page.asarray()
        except MemoryError:
            raise MemoryAllocationFailed(
                'Could not allocate memory for directory %d (%d x %d).'
                % (self._index, width, height)
            )
        except (ValueError, TypeError, RuntimeError, NotImplementedError,
                OSError, KeyError, zlib.error) as error:
            raise DecodeFailed(
                'Could not read directory %d of container "%s": %s'
                % (self._index, self.filename, error)
            )
        try:
            return to_color_raster(array, page.axes, width, height)
        except MemoryError:
            raise MemoryAllocationFailed(
                'Could not allocate memory for directory %d (%d x %d).'
                % (self._index, width, height)
            )
        except ValueError as error:
            raise DecodeFailed(
                'Could not read directory %d of container "%s": %s'
                % (self._index, self.filename, error)
            )


def to_color_raster(array, axes, width, height):
    '''Converts the pixels of one directory into an 8-bit RGB raster.

    Greyscale pixels are replicated into all three samples, 16-bit samples
    are reduced to their high byte and an alpha sample is dropped.

    Parameters
    ----------
    array: numpy.ndarray
        pixels as decoded by :mod:`tifffile`
    axes: str
        axes of `array`, e.g. ``"YX"``, ``"YXS"`` or ``"SYX"``
    width: int
        expected number of pixel columns
    height: int
        expected number of pixel rows

    Returns
    -------
    numpy.ndarray[numpy.uint8]
        raster with shape ``(height, width, 3)``

    Raises
    ------
    ValueError
        when the data type or the shape of `array` is not supported
    '''
    if array.ndim != len(axes):
        raise ValueError(
            'Pixel array has %d dimensions, but axes are "%s".'
            % (array.ndim, axes)
        )
    if 'S' in axes:
        array = np.moveaxis(array, axes.index('S'), -1)
        axes = axes.replace('S', '') + 'S'
    if axes not in {'YX', 'YXS'}:
        raise ValueError('Unsupported pixel axes "%s".' % axes)

    if array.dtype == np.uint8:
        pass
    elif array.dtype == np.uint16:
        array = (array >> 8).astype(np.uint8)
    elif array.dtype == bool:
        array = array.astype(np.uint8) * 255
    else:
        raise ValueError('Unsupported pixel data type "%s".' % array.dtype)

    if array.shape[:2] != (height, width):
        raise ValueError(
            'Pixel array has shape %s, expected %d x %d pixels.'
            % (array.shape[:2], width, height)
        )

    if array.ndim == 2:
        return np.repeat(array[:, :, np.newaxis], 3, axis=2)
    n_samples = array.shape[2]
    if n_samples == 1 or n_samples == 2:
        # greyscale with optional alpha
        return np.repeat(array[:, :, :1], 3, axis=2)
    return np.ascontiguousarray(array[:, :, :3])
