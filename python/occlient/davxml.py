"""
Functions for reading and writing the XML messages exchanged with the WebDAV interface.

:py:func:`parse_multistatus` converts a 207 (multi-status) PROPFIND response into a list of
:py:class:`DAVResponse` entries which can then be decoded into
:py:class:`~occlient.fileinfo.FileInfo` objects by the :py:mod:`~occlient.decode` module.
"""
import re
from collections import namedtuple
from typing import List, Iterable

from lxml import etree

from .exceptions import UnexpectedOwnCloudResponse
from .helpers import escape_xml

DAV_NS = "DAV:"
OC_NS = "http://owncloud.org/ns"
NC_NS = "http://nextcloud.org/ns"
SABRE_NS = "http://sabredav.org/ns"

STATUS_OK = "HTTP/1.1 200 OK"

DAVResponse = namedtuple("DAVResponse", "href propstat")
DAVResponse.__doc__ = "one resource entry from a multi-status response"
PropStat = namedtuple("PropStat", "status properties")
PropStat.__doc__ = "a set of properties sharing a common retrieval status"

_ns_prefixes = { DAV_NS: "d", OC_NS: "oc", NC_NS: "nc" }
_re_clark = re.compile(r'^\{([^\}]*)\}(.+)$')

def _to_tree(content):
    if isinstance(content, str):
        content = content.encode('utf-8')
    return etree.fromstring(content)

def _prop_value(el):
    if len(el) > 0:
        return list(el)
    return el.text or ''

def _propstat(psel) -> PropStat:
    status = psel.findtext("{DAV:}status") or ''
    props = {}
    propel = psel.find("{DAV:}prop")
    if propel is not None:
        for child in propel:
            if not isinstance(child.tag, str):
                continue   # comments, processing instructions
            props[child.tag] = _prop_value(child)
    return PropStat(status.strip(), props)

def parse_multistatus(content) -> List[DAVResponse]:
    """
    return the list of response entries found in a multi-status response body, in document order.
    Entries without an href are skipped.

    :param str|bytes content:  the XML response message to parse
    :raises UnexpectedOwnCloudResponse:  if the content is not parseable XML
    """
    try:
        tree = _to_tree(content)
    except (etree.XMLSyntaxError, ValueError) as ex:
        raise UnexpectedOwnCloudResponse("Server returned unparseable XML: "+str(ex),
                                         resptext=content) from ex

    out = []
    for resp in tree.iter("{DAV:}response"):
        href = resp.findtext("{DAV:}href")
        if href is None:
            continue
        out.append(DAVResponse(href.strip(), [_propstat(ps) for ps in resp.findall("{DAV:}propstat")]))

    return out

def parse_dav_error(body) -> str:
    """
    extract the error message from a WebDAV error response body (a ``d:error`` document).
    An empty string is returned if the message is not simple text; "Unknown error" is returned
    if the body cannot be parsed or does not contain a non-empty message.
    """
    try:
        tree = _to_tree(body)
    except (etree.XMLSyntaxError, ValueError, TypeError):
        return "Unknown error"

    if tree.tag == "{DAV:}error":
        msgel = tree.find("{%s}message" % SABRE_NS)
        if msgel is not None:
            if len(msgel) > 0:
                return ''
            if msgel.text:
                return msgel.text

    return "Unknown error"

def build_propfind_body(properties: Iterable[str]=None) -> str:
    """
    create the body of a PROPFIND request asking for the given properties.

    :param list properties:  the names (in Clark notation, e.g. ``{DAV:}getetag``) of the
                             properties to request; if empty, the server's default set of
                             properties will be requested.
    """
    prefixes = dict(_ns_prefixes)
    props = []
    for name in (properties or []):
        m = _re_clark.match(name)
        if not m:
            raise ValueError("Property name not in {namespace}name form: "+name)
        ns, local = m.group(1), m.group(2)
        if ns not in prefixes:
            prefixes[ns] = "x%d" % (len(prefixes) - len(_ns_prefixes) + 1)
        props.append(f"<{prefixes[ns]}:{local} />")

    nsdecl = ' '.join(f'xmlns:{p}="{escape_xml(ns)}"' for ns, p in prefixes.items()
                      if p in ("d", "oc") or f"<{p}:" in ''.join(props))
    out = '<?xml version="1.0"?>\n'
    out += f"<d:propfind {nsdecl}>\n"
    if props:
        out += "  <d:prop>\n    " + "\n    ".join(props) + "\n  </d:prop>\n"
    else:
        out += "  <d:prop />\n"
    out += "</d:propfind>\n"
    return out
