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
'''Selection of the container directories that hold full-resolution channel
data of each field.

A SCN description lists one *image* per scanned region. The overview image
of the whole slide has the size of the *collection*; every other image is a
field whose *view* differs from the collection in both dimensions. For each
accepted field, the *dimension* elements of resolution level 0 tell which
directory holds the pixels of each channel.

Grouping relies on document order: channel declarations belong to the field
that is closed by the next *view* element.
'''
import logging
import collections

from scnlib.scanner import CollectionDeclared
from scnlib.scanner import ChannelDirectoryDeclared
from scnlib.scanner import ViewDeclared

logger = logging.getLogger(__name__)

#: Channels that can be mapped onto the samples of an RGB raster
SUPPORTED_CHANNELS = (0, 1, 2)

SelectionEntry = collections.namedtuple(
    'SelectionEntry', ['field_index', 'channel_id', 'directory_index']
)


class SelectionTable(object):

    '''Container for :class:`SelectionEntry` objects with at most one entry
    per field and channel.
    '''

    def __init__(self, entries=None):
        '''
        Parameters
        ----------
        entries: Iterable[SelectionEntry], optional
            initial entries
        '''
        self._entries = dict()
        for entry in entries or []:
            self.add(entry)

    def add(self, entry):
        '''Adds an entry.

        Parameters
        ----------
        entry: SelectionEntry
            entry that should be added

        Raises
        ------
        ValueError
            when the table already holds an entry for the field and channel
        '''
        key = (entry.field_index, entry.channel_id)
        if key in self._entries:
            raise ValueError(
                'Channel %d of field %d was already selected.'
                % (entry.channel_id, entry.field_index)
            )
        self._entries[key] = entry

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        for key in sorted(self._entries):
            yield self._entries[key]

    def __contains__(self, entry):
        key = (entry.field_index, entry.channel_id)
        return self._entries.get(key) == entry

    def __eq__(self, other):
        if not isinstance(other, SelectionTable):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, list(self))

    @property
    def fields(self):
        '''List[int]: sorted indices of the selected fields'''
        return sorted({e.field_index for e in self._entries.values()})

    @property
    def directory_indices(self):
        '''List[int]: sorted indices of the selected directories'''
        return sorted({e.directory_index for e in self._entries.values()})

    def lookup(self, directory_index):
        '''Gets the entries that refer to a given directory.

        Parameters
        ----------
        directory_index: int
            zero-based index of a container directory

        Returns
        -------
        List[SelectionEntry]
            matching entries sorted by field and channel
        '''
        return [e for e in self if e.directory_index == directory_index]

    def find_shared_directories(self):
        '''Finds directories that are selected by more than one entry.

        Returns
        -------
        Dict[int, List[SelectionEntry]]
            entries for each shared directory index
        '''
        groups = collections.defaultdict(list)
        for entry in self:
            groups[entry.directory_index].append(entry)
        return {k: v for k, v in groups.items() if len(v) > 1}

    def to_dict(self):
        '''Converts the table into a serializable mapping.

        Returns
        -------
        Dict[str, List[dict]]
            entries grouped by field; keys have the form ``"Image<i>"``
        '''
        fields = collections.OrderedDict()
        for entry in self:
            key = 'Image%d' % entry.field_index
            fields.setdefault(key, []).append({
                'channel': entry.channel_id,
                'ifd': entry.directory_index
            })
        return dict(fields)


class DirectorySelector(object):

    '''State machine that turns scanner events into a
    :class:`SelectionTable`.
    '''

    def __init__(self):
        self.collection_size = None
        self.n_fields = 0
        self.table = SelectionTable()
        self._pending = dict()

    def consume(self, events):
        '''Processes scanner events in order.

        Parameters
        ----------
        events: Iterable[Union[scnlib.scanner.CollectionDeclared, scnlib.scanner.ChannelDirectoryDeclared, scnlib.scanner.ViewDeclared]]
            events as generated by :func:`scnlib.scanner.scan_description`

        Returns
        -------
        SelectionTable
            selected directories of all accepted fields

        Note
        ----
        Channel declarations that are not followed by a *view* are dropped.
        '''
        for event in events:
            if isinstance(event, CollectionDeclared):
                self._on_collection(event)
            elif isinstance(event, ChannelDirectoryDeclared):
                self._on_channel_directory(event)
            elif isinstance(event, ViewDeclared):
                self._on_view(event)
            else:
                raise TypeError('Unknown event type: %r' % (event,))
        if self._pending:
            logger.debug(
                'discard channel declarations without view: %r', self._pending
            )
            self._pending.clear()
        return self.table

    def _on_collection(self, event):
        if self.collection_size is not None:
            return
        logger.debug('collection size: %d x %d', event.width, event.height)
        self.collection_size = (event.width, event.height)

    def _on_channel_directory(self, event):
        if self.collection_size is None:
            logger.debug('ignore channel declaration before collection')
            return
        if event.channel_id not in SUPPORTED_CHANNELS:
            logger.debug(
                'ignore unsupported channel %d (directory %d)',
                event.channel_id, event.directory_index
            )
            return
        self._pending[event.channel_id] = event.directory_index

    def is_field(self, width, height):
        '''Decides whether a view is a field rather than a slide overview.

        Parameters
        ----------
        width: int
            width of the view
        height: int
            height of the view

        Returns
        -------
        bool
            ``True`` when both dimensions differ from the collection
        '''
        if self.collection_size is None:
            return False
        collection_width, collection_height = self.collection_size
        return width != collection_width and height != collection_height

    def _on_view(self, event):
        pending = dict(self._pending)
        self._pending.clear()
        if not self.is_field(event.width, event.height):
            logger.debug(
                'skip view %d x %d: shares a dimension with the collection',
                event.width, event.height
            )
            return
        field_index = self.n_fields
        self.n_fields += 1
        for channel_id in sorted(pending):
            self.table.add(
                SelectionEntry(field_index, channel_id, pending[channel_id])
            )
        logger.info(
            'field %d (%d x %d): channel directories %s',
            field_index, event.width, event.height,
            ', '.join(
                '%d->%d' % (c, pending[c]) for c in sorted(pending)
            ) or 'none'
        )


def select_directories(events):
    '''Selects the full-resolution directory of each channel of each field.

    Parameters
    ----------
    events: Iterable[Union[scnlib.scanner.CollectionDeclared, scnlib.scanner.ChannelDirectoryDeclared, scnlib.scanner.ViewDeclared]]
        scanner events in document order

    Returns
    -------
    SelectionTable
        selected directories
    '''
    return DirectorySelector().consume(events)
