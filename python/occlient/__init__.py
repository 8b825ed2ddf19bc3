"""
a client library for ownCloud (and Nextcloud) servers, accessing them through their OCS REST API
and their WebDAV file API.

This package is organized into the following modules:

``client``
    the :py:class:`~occlient.client.OwnCloudClient` class, the entry point for making requests
``session``
    the connection context (server URL, credentials, server version) used by a client
``ocs``
    parsing of OCS response envelopes and normalization of their status codes into errors
``davxml``
    parsing of WebDAV multi-status and error response bodies; creation of PROPFIND requests
``decode``
    conversion of multi-status entries into :py:class:`~occlient.fileinfo.FileInfo` records,
    including the resolution of server hrefs into logical paths
``fileinfo``
    the :py:class:`~occlient.fileinfo.FileInfo` class describing a remote file or directory
``helpers``
    path encoding and other small utilities
``exceptions``
    the exceptions raised by this package
``config``
    support for loading client configurations
"""
try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

from .exceptions import OwnCloudException
from .fileinfo import FileInfo
from .session import Session
from .client import OwnCloudClient
