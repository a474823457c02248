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
'''Miscellaneous helper functions.'''

#: Colour sample of the decoded raster that holds each fluorescence channel
CHANNEL_COLORS = {0: 'red', 1: 'green', 2: 'blue'}


def map_channel_to_color(channel_id):
    '''Maps a channel identifier to the name of the colour sample it is
    stored in.

    Parameters
    ----------
    channel_id: int
        zero-based channel identifier

    Returns
    -------
    str
        "red", "green" or "blue"

    Raises
    ------
    ValueError
        when `channel_id` is not 0, 1 or 2
    '''
    try:
        return CHANNEL_COLORS[channel_id]
    except KeyError:
        raise ValueError('Unknown channel identifier: %r' % (channel_id,))
