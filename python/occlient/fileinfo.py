"""
The FileInfo class, a description of a remote file or directory
"""
import posixpath
from datetime import datetime
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import Mapping

FILE = "file"
DIR = "dir"

DAV_NS = "DAV:"
OC_NS = "http://owncloud.org/ns"

class FileInfo:
    """
    metadata describing a file or directory as returned in a WebDAV PROPFIND response.

    The ``properties`` are keyed by the property's namespaced name in Clark notation
    (e.g. ``{DAV:}getcontentlength``).  Values are either strings or, for properties with
    structured content (like ``{DAV:}resourcetype``), lists of XML elements.  Instances are
    not meant to be modified after construction.
    """

    def __init__(self, name: str, type: str=FILE, properties: Mapping=None):
        """
        :param str name:        the logical path of the resource
        :param str type:        either "file" or "dir"
        :param dict properties: the resource properties
        """
        self._name = name
        self._type = type
        self._props = MappingProxyType(dict(properties or {}))

    @property
    def name(self) -> str:
        """ the logical path of the resource """
        return self._name

    @property
    def type(self) -> str:
        """ either "file" or "dir" """
        return self._type

    @property
    def properties(self) -> Mapping:
        """ a read-only view of all of the resource's properties """
        return self._props

    def get_name(self) -> str:
        """ return the base name of the resource """
        return posixpath.basename(self._name.rstrip('/'))

    def get_path(self) -> str:
        """ return the path of the directory containing the resource, ending with a '/' """
        parent = posixpath.dirname(self._name.rstrip('/'))
        if not parent.endswith('/'):
            parent += '/'
        return parent

    def get_property(self, name: str, default=None):
        """
        return the value of the property with the given namespaced name
        """
        return self._props.get(name, default)

    def get_size(self) -> int:
        """
        return the size of the resource in bytes or None if the size is not known
        """
        size = self._props.get('{%s}size' % OC_NS)
        if size is None or size == '':
            size = self._props.get('{%s}getcontentlength' % DAV_NS)
        if size is None or size == '':
            return None
        return int(size)

    def get_file_id(self) -> str:
        return self._props.get('{%s}fileid' % OC_NS)

    def get_etag(self) -> str:
        return self._props.get('{%s}getetag' % DAV_NS)

    def get_content_type(self) -> str:
        ctype = self._props.get('{%s}getcontenttype' % DAV_NS)
        if not ctype and self.is_dir():
            ctype = "httpd/unix-directory"
        return ctype

    def get_last_modified(self) -> datetime:
        """
        return the last modified date as a datetime or None if it is not provided
        """
        modified = self._props.get('{%s}getlastmodified' % DAV_NS)
        if not modified:
            return None
        return parsedate_to_datetime(modified)

    def is_dir(self) -> bool:
        return self._type == DIR

    def __eq__(self, other):
        if not isinstance(other, FileInfo):
            return NotImplemented
        return (self._name, self._type, dict(self._props)) == \
               (other._name, other._type, dict(other._props))

    def __repr__(self):
        return f"FileInfo({self._name!r}, {self._type!r})"
