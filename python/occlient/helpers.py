"""
helper functions for building request paths and bodies and for normalizing loosely-typed
server values
"""
import logging
from collections.abc import MutableMapping
from urllib.parse import quote

BLAB = logging.DEBUG - 1

# characters that encodeURIComponent() leaves alone beyond those quote() always keeps
_URI_COMPONENT_SAFE = "!*'()"

_xml_escapes = {
    '<':  "&lt;",
    '>':  "&gt;",
    '&':  "&amp;",
    "'":  "&apos;",
    '"':  "&quot;"
}

def blab(log, msg, *args, **kwargs):
    """
    log a verbose message. This uses a log level, BLAB, that is lower than
    DEBUG; in other words when a log's level is set to DEBUG, this message
    will not be displayed.  This is intended for messages that would appear
    voluminously if the level were set to BLAB (e.g. one per multi-status entry).

    :param Logger log:  the Logger object to record to
    :param str    msg:  the message to write
    :param args:        treat msg as a template and insert these values
    :param kwargs:      other arbitrary keywords to pass to log.log()
    """
    log.log(BLAB, msg, *args, **kwargs)

def normalize_path(path: str) -> str:
    """
    make sure the given remote path starts with a '/'.  An empty (or None) path is
    the root, '/'.
    """
    if not path:
        return '/'
    if not path.startswith('/'):
        path = '/' + path
    return path

def encode_uri_path(path: str) -> str:
    """
    percent-encode the segments of a remote path so that it can be appended to a
    WebDAV endpoint URL.  The path is normalized first; the '/' delimiters are preserved.
    """
    path = quote(normalize_path(path), safe=_URI_COMPONENT_SAFE)
    return '/'.join(path.split('%2F'))

def escape_xml(unsafe):
    """
    escape the characters that are special to XML so that the text can be embedded
    in a generated request body.  Non-string values are returned unchanged.
    """
    if not isinstance(unsafe, str):
        return unsafe
    return ''.join(_xml_escapes.get(c, c) for c in unsafe)

def coerce_booleans(props):
    """
    convert all of the mapping's "true" or "false" values to booleans (in place).  Only
    the top level is examined; other values, as well as non-mapping inputs, are left untouched.

    :return:  the input object
    """
    if not isinstance(props, MutableMapping):
        return props

    for key, val in props.items():
        if val == "true":
            props[key] = True
        elif val == "false":
            props[key] = False

    return props

def encode_string(path: str) -> bytes:
    """ encode a path string according to UTF-8 """
    return path.encode('utf-8')
