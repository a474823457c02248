#! /usr/bin/env python
# encoding: utf-8

import os
import re
from setuptools import setup, find_packages


def get_version():
    src_path = os.path.dirname(os.path.abspath(__file__))
    with open(os.path.join(src_path, 'scnlib', 'version.py')) as f:
        content = f.read()
    return re.search(r"__version__ = '([^']+)'", content).group(1)


setup(
    name='scnlib',
    version=get_version(),
    description='Leica SCN fluorescence channel extraction',
    long_description=(
        'Python package for extracting full-resolution fluorescence '
        'channel planes from Leica SCN400F whole slide images'
    ),
    license='AGPL-3.0-or-later',
    platforms=['Linux', 'OS-X'],
    classifiers=[
        'Topic :: Scientific/Engineering :: Image Processing',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3',
        'Development Status :: 4 - Beta',
        'Operating System :: POSIX :: Linux',
        'Operating System :: MacOS',
        'Natural Language :: English'
    ],
    packages=find_packages(include=['scnlib', 'scnlib.*']),
    python_requires='>=3.8',
    entry_points={
        'console_scripts': ['scnlib = scnlib.cli:main']
    },
    install_requires=[
        'numpy>=1.17',
        'lxml>=4.4',
        'tifffile>=2022.4.8',
        'imagecodecs>=2022.2.22',
        'PyYAML>=5.1',
    ],
    extras_require={
        'test': ['pytest>=6.0']
    }
)
