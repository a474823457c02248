# -*- coding: utf-8 -*-
import numpy as np
import pytest
import tifffile

SCN_NAMESPACE = 'http://www.leica-microsystems.com/scn/2010/10/01'


def build_description(collection, images, namespace=SCN_NAMESPACE):
    '''Builds a Leica SCN style XML description.

    Parameters
    ----------
    collection: Tuple[int]
        width and height of the collection
    images: List[dict]
        images with keys "view" (width and height) and "dimensions"
        (list of (r, c, ifd) tuples)
    '''
    parts = [
        '<?xml version="1.0"?>',
        '<scn xmlns="%s">' % namespace,
        '<collection name="slide" uuid="1" sizeX="%d" sizeY="%d">' % collection,
        '<barcode>1234</barcode>',
    ]
    for i, image in enumerate(images):
        parts.append('<image name="image%d" uuid="%d">' % (i, i + 2))
        parts.append('<pixels sizeX="%d" sizeY="%d">' % image['view'])
        for r, c, ifd in image['dimensions']:
            parts.append(
                '<dimension sizeX="4" sizeY="4" r="%d" c="%d" ifd="%d"/>'
                % (r, c, ifd)
            )
        parts.append('</pixels>')
        parts.append(
            '<view sizeX="%d" sizeY="%d" offsetX="0" offsetY="0"/>'
            % image['view']
        )
        parts.append('</image>')
    parts.append('</collection>')
    parts.append('</scn>')
    return '\n'.join(parts)


def write_container(filename, description, pages, compression=None):
    '''Writes a BigTIFF file with `description` in the first directory and
    one directory per array in `pages`.
    '''
    with tifffile.TiffWriter(filename, bigtiff=True) as tif:
        kwargs = dict(metadata=None, photometric='minisblack')
        if description is not None:
            kwargs['description'] = description
        tif.write(np.zeros((2, 2), dtype=np.uint8), **kwargs)
        for page in pages:
            photometric = 'rgb' if page.ndim == 3 else 'minisblack'
            tif.write(
                page, metadata=None, photometric=photometric,
                compression=compression
            )


def make_rgb(height, width, seed):
    rng = np.random.RandomState(seed)
    return rng.randint(0, 256, size=(height, width, 3)).astype(np.uint8)


@pytest.fixture
def slide(tmpdir):
    '''Container with an overview image and two fields of three channels.

    Directories: 0 metadata, 1-3 overview (ignored), 4-6 field 0,
    7-9 field 1 (resolution level 1 in 10).
    '''
    images = [
        {'view': (1000, 1000), 'dimensions': [(0, 0, 1), (0, 1, 2), (0, 2, 3)]},
        {'view': (300, 200), 'dimensions': [(0, 0, 4), (0, 1, 5), (0, 2, 6)]},
        {
            'view': (500, 400),
            'dimensions': [
                (0, 0, 7), (0, 1, 8), (0, 2, 9), (1, 0, 10)
            ]
        },
    ]
    description = build_description((1000, 1000), images)
    pages = [make_rgb(6, 5, seed) for seed in range(10)]
    filename = str(tmpdir.join('slide.scn'))
    write_container(filename, description, pages)
    return {'filename': filename, 'pages': pages, 'description': description}


def corrupt_directory(filename, index):
    '''Overwrites the pixel data of directory `index` with garbage.'''
    with tifffile.TiffFile(filename) as tif:
        page = tif.pages[index]
        offsets = list(page.dataoffsets)
        counts = list(page.databytecounts)
    with open(filename, 'r+b') as f:
        for offset, count in zip(offsets, counts):
            f.seek(offset)
            f.write(b'\xff' * count)


@pytest.fixture
def corrupt_slide(tmpdir):
    '''Container with one field whose only channel is stored in a
    zlib-compressed directory with broken pixel data.
    '''
    description = build_description((1000, 1000), [
        {'view': (300, 200), 'dimensions': [(0, 0, 1)]},
    ])
    filename = str(tmpdir.join('corrupt.scn'))
    write_container(
        filename, description, [make_rgb(16, 16, 0)], compression='zlib'
    )
    corrupt_directory(filename, 1)
    return filename
