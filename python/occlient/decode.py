"""
Decoding of WebDAV multi-status responses into :py:class:`~occlient.fileinfo.FileInfo` records.

The functions here operate on entries already extracted from the XML (see
:py:mod:`~occlient.davxml`); they are pure and hold no state, so they can be used from any
number of concurrent request flows.  Entries that cannot be decoded--because their href lies
outside of the server's remote endpoints or because the server could not retrieve their
properties--are dropped rather than reported as errors:  such partial failures are normal within
a multi-status response and must not prevent the remaining entries from being decoded.

An entry may be given either as a :py:class:`~occlient.davxml.DAVResponse` or as a mapping with
``href`` and ``propStat`` items, where each property-status block is itself either a
:py:class:`~occlient.davxml.PropStat` or a mapping with ``status`` and ``properties`` items.
"""
from collections.abc import Mapping
from typing import List, Optional
from urllib.parse import unquote

from lxml import etree

from .fileinfo import FileInfo, FILE, DIR
from .davxml import STATUS_OK, DAVResponse

REMOTE_SEGMENT = "remote.php"
DAV_VARIANTS = ("webdav", "dav")
RESOURCE_TYPE = "{DAV:}resourcetype"

def left_trim_components(dav_variant: str) -> int:
    """
    return the number of path segments that follow the DAV variant segment in an href but are
    not part of the logical path:  none for the legacy ``webdav`` variant; two (``files/{user}``)
    for the ``dav`` variant.
    """
    if dav_variant == "webdav":
        return 0
    if dav_variant == "dav":
        return 2
    raise ValueError("Unrecognized DAV path variant: "+str(dav_variant))

def resolve_path(href: str, left_trim: int=0) -> Optional[str]:
    """
    extract the logical resource path from an href returned by the server.

    :param str href:       the URL path of the resource (e.g. ``/remote.php/webdav/a/b%20c.txt``)
    :param int left_trim:  the number of segments to skip after the DAV variant segment
    :return:  the percent-decoded path starting with a '/' (e.g. ``/a/b c.txt``), an empty string
              if nothing follows the skipped segments, or None if the href is not under a
              recognized remote endpoint.
    """
    segs = [s for s in href.split('/') if s]
    try:
        remidx = [unquote(s) for s in segs].index(REMOTE_SEGMENT)
    except ValueError:
        return None
    if remidx + 1 >= len(segs) or unquote(segs[remidx+1]) not in DAV_VARIANTS:
        return None

    return ''.join('/' + unquote(s) for s in segs[remidx + (left_trim or 0) + 2:])

def _get(entry, key, attr):
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, attr, None)

def _is_collection(node) -> bool:
    if isinstance(node, Mapping):
        name = node.get('nodeName') or ''
        return node.get('namespaceURI') == "DAV:" and name.split(':')[-1] == "collection"
    if not isinstance(node.tag, str):
        return False
    qname = etree.QName(node)
    return qname.namespace == "DAV:" and qname.localname == "collection"

def resource_type(props: Mapping) -> str:
    """
    determine from a resource's properties whether it is a file or a directory
    """
    restype = props.get(RESOURCE_TYPE)
    if restype and not isinstance(restype, str) and _is_collection(restype[0]):
        return DIR
    return FILE

def decode_entry(entry, left_trim: int=0) -> Optional[FileInfo]:
    """
    convert one multi-status response entry into a FileInfo.  Only the entry's first
    property-status block is consulted.

    :return:  the FileInfo, or None if the href does not resolve or if the first
              property-status block does not report success.
    """
    path = resolve_path(_get(entry, 'href', 'href') or '', left_trim)
    if path is None:
        return None

    propstat = _get(entry, 'propStat', 'propstat')
    if not propstat:
        return None
    first = propstat[0]
    if _get(first, 'status', 'status') != STATUS_OK:
        return None

    props = _get(first, 'properties', 'properties') or {}
    return FileInfo(path, resource_type(props), props)

def decode_all(responses, left_trim: int=0) -> List[FileInfo]:
    """
    decode every entry of a multi-status response, preserving their order.  Entries that
    cannot be decoded are left out of the result.

    :param responses:  a single entry or a list of entries
    """
    if isinstance(responses, (Mapping, DAVResponse)):
        responses = [responses]

    out = []
    for entry in responses:
        info = decode_entry(entry, left_trim)
        if info is not None:
            out.append(info)
    return out
