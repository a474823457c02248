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
'''Extraction of full-resolution fluorescence channel planes from
`Leica SCN <https://openslide.org/formats/leica/>`_ whole slide images.

The package is organised along the conversion pipeline:

    * :mod:`scnlib.readers`: access to the container and its description
    * :mod:`scnlib.scanner`: events found in the XML description
    * :mod:`scnlib.selection`: directory of each channel of each field
    * :mod:`scnlib.extraction`: walk over the container directories
    * :mod:`scnlib.writers`: raw 8-bit channel plane files

'''
from scnlib.version import __version__
