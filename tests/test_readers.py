# -*- coding: utf-8 -*-
import numpy as np
import pytest
import tifffile

from scnlib.errors import ContainerOpenFailed
from scnlib.errors import DecodeFailed
from scnlib.errors import MemoryAllocationFailed
from scnlib.errors import MetadataMissing
from scnlib.readers import ContainerReader
from scnlib.readers import to_color_raster

from conftest import write_container


def test_open_missing_file(tmpdir):
    with pytest.raises(ContainerOpenFailed):
        with ContainerReader(str(tmpdir.join('missing.scn'))):
            pass


def test_open_file_that_is_not_a_container(tmpdir):
    filename = tmpdir.join('slide.scn')
    filename.write('this is not a TIFF file')
    with pytest.raises(ContainerOpenFailed):
        with ContainerReader(str(filename)):
            pass


def test_get_description_text(slide):
    with ContainerReader(slide['filename']) as f:
        description = f.get_description_text()
    assert description.strip() == slide['description'].strip()


def test_missing_description(tmpdir):
    filename = str(tmpdir.join('slide.scn'))
    write_container(filename, None, [np.zeros((3, 3), dtype=np.uint8)])
    with ContainerReader(filename) as f:
        with pytest.raises(MetadataMissing):
            f.get_description_text()


def test_walk_directories(slide):
    with ContainerReader(slide['filename']) as f:
        assert f.directory_index == 0
        assert f.n_directories == 11
        indices = list()
        while f.advance_directory():
            indices.append(f.directory_index)
        assert indices == list(range(1, 11))
        assert not f.advance_directory()
        assert f.directory_index == 10


def test_directory_dimensions(slide):
    with ContainerReader(slide['filename']) as f:
        assert f.get_directory_dimensions() == (2, 2)
        f.advance_directory()
        assert f.get_directory_dimensions() == (5, 6)


def test_decode_rgb_directory(slide):
    with ContainerReader(slide['filename']) as f:
        for _ in range(4):
            f.advance_directory()
        raster = f.decode_directory_to_color_raster(5, 6)
    np.testing.assert_array_equal(raster, slide['pages'][3])
    assert raster.dtype == np.uint8


def test_decode_greyscale_directory(tmpdir):
    filename = str(tmpdir.join('slide.scn'))
    page = np.arange(12, dtype=np.uint8).reshape(3, 4)
    write_container(filename, '<scn/>', [page])
    with ContainerReader(filename) as f:
        f.advance_directory()
        raster = f.decode_directory_to_color_raster(4, 3)
    assert raster.shape == (3, 4, 3)
    for i in range(3):
        np.testing.assert_array_equal(raster[:, :, i], page)


def test_reader_is_closed_after_context(slide):
    with ContainerReader(slide['filename']) as f:
        pass
    with pytest.raises(ValueError):
        f.get_directory_dimensions()


def test_decode_corrupt_directory(corrupt_slide):
    with ContainerReader(corrupt_slide) as f:
        f.advance_directory()
        width, height = f.get_directory_dimensions()
        with pytest.raises(DecodeFailed):
            f.decode_directory_to_color_raster(width, height)


def test_decode_out_of_memory(slide, monkeypatch):
    def asarray(self, *args, **kwargs):
        raise MemoryError()

    monkeypatch.setattr(tifffile.TiffPage, 'asarray', asarray)
    with ContainerReader(slide['filename']) as f:
        f.advance_directory()
        with pytest.raises(MemoryAllocationFailed):
            f.decode_directory_to_color_raster(5, 6)


def test_unreadable_directory_entry(slide, monkeypatch):
    getitem = tifffile.TiffPages.__getitem__

    def broken_getitem(self, key):
        if key == 0:
            return getitem(self, key)
        raise tifffile.TiffFileError('corrupted IFD')

    with ContainerReader(slide['filename']) as f:
        monkeypatch.setattr(
            tifffile.TiffPages, '__getitem__', broken_getitem
        )
        f.advance_directory()
        with pytest.raises(DecodeFailed):
            f.get_directory_dimensions()


class TestToColorRaster(object):

    def test_greyscale(self):
        array = np.array([[1, 2], [3, 4]], dtype=np.uint8)
        raster = to_color_raster(array, 'YX', 2, 2)
        np.testing.assert_array_equal(raster[:, :, 2], array)

    def test_sixteen_bit_samples_keep_high_byte(self):
        array = np.array([[0x1234, 0xff00]], dtype=np.uint16)
        raster = to_color_raster(array, 'YX', 2, 1)
        np.testing.assert_array_equal(raster[0, :, 0], [0x12, 0xff])

    def test_alpha_is_dropped(self):
        array = np.zeros((2, 3, 4), dtype=np.uint8)
        array[:, :, 3] = 255
        array[:, :, 1] = 9
        raster = to_color_raster(array, 'YXS', 3, 2)
        assert raster.shape == (2, 3, 3)
        assert raster[:, :, 1].tolist() == [[9, 9, 9], [9, 9, 9]]

    def test_separate_planes_are_interleaved(self):
        array = np.zeros((3, 2, 2), dtype=np.uint8)
        array[0] = 1
        array[1] = 2
        array[2] = 3
        raster = to_color_raster(array, 'SYX', 2, 2)
        assert raster[0, 0].tolist() == [1, 2, 3]

    def test_unexpected_shape(self):
        with pytest.raises(ValueError):
            to_color_raster(np.zeros((2, 2), dtype=np.uint8), 'YX', 3, 2)

    def test_unsupported_data_type(self):
        with pytest.raises(ValueError):
            to_color_raster(np.zeros((2, 2), dtype=np.float32), 'YX', 2, 2)

    def test_unsupported_axes(self):
        with pytest.raises(ValueError):
            to_color_raster(np.zeros((2, 2, 2), dtype=np.uint8), 'ZYX', 2, 2)
