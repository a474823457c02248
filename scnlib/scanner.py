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
'''Scanning of the XML description of Leica SCN containers.

The description is organised as *collection* -> *image* -> *pixels* ->
*dimension* plus a *view* element per image::

    <scn xmlns="http://www.leica-microsystems.com/scn/2010/10/01">
      <collection sizeX="..." sizeY="...">
        <image>
          <pixels sizeX="..." sizeY="...">
            <dimension sizeX="..." sizeY="..." r="0" c="0" ifd="5"/>
            ...
          </pixels>
          <view sizeX="..." sizeY="..." offsetX="..." offsetY="..."/>
        </image>
      </collection>
    </scn>

Only the three element types needed to select directories are reported, as
events in document order. Grouping of *dimension* elements into images is
left to the consumer (see :mod:`scnlib.selection`).
'''
import re
import logging
import collections
from lxml import etree

from scnlib.errors import MetadataMalformed

logger = logging.getLogger(__name__)

#: Leading integer of an attribute value, parsed the way ``atol`` does
INTEGER_REGEX_PATTERN = r'^\s*([+-]?\d+)'

_integer_regex = re.compile(INTEGER_REGEX_PATTERN)

#: Resolution level holding the full-resolution pixel data
FULL_RESOLUTION_LEVEL = 0

CollectionDeclared = collections.namedtuple(
    'CollectionDeclared', ['width', 'height']
)

ChannelDirectoryDeclared = collections.namedtuple(
    'ChannelDirectoryDeclared', ['channel_id', 'directory_index']
)

ViewDeclared = collections.namedtuple('ViewDeclared', ['width', 'height'])


def parse_integer(value):
    '''Parses the leading base-10 integer of an attribute value.

    Parameters
    ----------
    value: str or None
        attribute value

    Returns
    -------
    int
        parsed number; ``0`` when `value` is missing or doesn't start with
        digits
    '''
    if value is None:
        return 0
    match = _integer_regex.search(value)
    if match is None:
        return 0
    return int(match.group(1))


def _is_integer(value):
    return value is not None and _integer_regex.search(value) is not None


def _get_integer_attribute(element, name, tag):
    value = element.get(name)
    if not _is_integer(value):
        logger.debug(
            'attribute "%s" of element "%s" is missing or not a number: %r',
            name, tag, value
        )
    return parse_integer(value)


def _local_name(element):
    # comments and processing instructions have no string tag
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def parse_description(description):
    '''Parses the XML description.

    Parameters
    ----------
    description: str or bytes
        XML description

    Returns
    -------
    lxml.etree._Element
        root element

    Raises
    ------
    MetadataMalformed
        when `description` is not well-formed XML
    '''
    if isinstance(description, str):
        description = description.encode('utf-8')
    # huge_tree: slides with many images produce long descriptions
    parser = etree.XMLParser(
        huge_tree=True, resolve_entities=False, no_network=True
    )
    try:
        root = etree.fromstring(description, parser=parser)
    except etree.XMLSyntaxError as error:
        raise MetadataMalformed('Could not parse XML description: %s' % error)
    if root is None:
        raise MetadataMalformed('XML description has no root element.')
    return root


def _has_collection(root):
    return any(_local_name(e) == 'collection' for e in root.iter())


def _iter_events(root):
    collection_seen = False
    for element in root.iter():
        tag = _local_name(element)
        if tag == 'collection':
            if collection_seen:
                continue
            collection_seen = True
            yield CollectionDeclared(
                _get_integer_attribute(element, 'sizeX', tag),
                _get_integer_attribute(element, 'sizeY', tag)
            )
        elif tag == 'dimension':
            r = element.get('r')
            c = element.get('c')
            if not _is_integer(r) or not _is_integer(c):
                continue
            if parse_integer(r) != FULL_RESOLUTION_LEVEL:
                continue
            yield ChannelDirectoryDeclared(
                _get_integer_attribute(element, 'c', tag),
                _get_integer_attribute(element, 'ifd', tag)
            )
        elif tag == 'view':
            yield ViewDeclared(
                _get_integer_attribute(element, 'sizeX', tag),
                _get_integer_attribute(element, 'sizeY', tag)
            )


def scan_description(description):
    '''Scans the XML description for the elements that determine which
    directories hold full-resolution channel data.

    The description is validated immediately, events are generated lazily
    in document order:

        * :class:`CollectionDeclared` for the first *collection* element
        * :class:`ChannelDirectoryDeclared` for each *dimension* element with
          resolution level ``r`` 0 and a channel attribute ``c``
        * :class:`ViewDeclared` for each *view* element

    Attribute values that are missing or not numeric are reported as ``0``.

    Parameters
    ----------
    description: str or bytes
        XML description of the container

    Returns
    -------
    Iterator[Union[CollectionDeclared, ChannelDirectoryDeclared, ViewDeclared]]
        single-pass iterator over the events

    Raises
    ------
    MetadataMalformed
        when `description` is empty, is not well-formed XML or doesn't
        contain a *collection* element
    '''
    if not description or not description.strip():
        raise MetadataMalformed('XML description is empty.')
    root = parse_description(description)
    if not _has_collection(root):
        raise MetadataMalformed(
            'XML description does not contain a "collection" element.'
        )
    return _iter_events(root)
