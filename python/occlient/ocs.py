"""
Support for the OCS (Open Collaboration Services) API envelope.

OCS responses--whether delivered as XML or JSON--wrap their payload in an envelope of the form::

    {"ocs": {"meta": {"status": "ok", "statuscode": 100, "message": "OK"},
             "data": ... }}

This module turns a response body into that dictionary form and normalizes the status
reported in ``meta`` into either success or a single error contract.
"""
import json
from collections.abc import Mapping
from typing import Iterable, Optional, Union

from lxml import etree

from .exceptions import OCSError, UnexpectedOwnCloudResponse

DEFAULT_ACCEPTED_CODES = (100,)
PROVISIONING_DISABLED = 999

ErrorMessage = Union[str, Mapping]

def _element_to_value(el):
    children = [c for c in el if isinstance(c.tag, str)]
    if not children:
        return (el.text or '').strip()

    # OCS serializes lists as repeated <element> nodes
    if all(c.tag == "element" for c in children):
        return [_element_to_value(c) for c in children]

    out = {}
    for child in children:
        val = _element_to_value(child)
        if child.tag in out:
            if not isinstance(out[child.tag], list):
                out[child.tag] = [out[child.tag]]
            out[child.tag].append(val)
        else:
            out[child.tag] = val
    return out

def xml_to_envelope(content) -> dict:
    """
    convert an OCS XML response body into its dictionary form.  The root element's name
    becomes the single top-level key.

    :raises lxml.etree.XMLSyntaxError:  if the content is not well-formed XML
    """
    if isinstance(content, str):
        content = content.encode('utf-8')
    root = etree.fromstring(content)
    return { etree.QName(root).localname: _element_to_value(root) }

def parse_ocs_body(body) -> dict:
    """
    parse an OCS response body into its dictionary form.  The body is first read as XML;
    if that fails, it is read as JSON.

    :raises OCSError:  if the body is a JSON document reporting an error via a top-level
                       ``message`` property
    :raises UnexpectedOwnCloudResponse:  if the body is neither XML nor JSON
    """
    try:
        return xml_to_envelope(body)
    except (etree.XMLSyntaxError, ValueError):
        pass

    if isinstance(body, bytes):
        body = body.decode('utf-8', errors='replace')
    try:
        tree = json.loads(body)
    except (ValueError, TypeError) as ex:
        raise UnexpectedOwnCloudResponse("Invalid response body: " + str(body),
                                         resptext=body) from ex

    if not isinstance(tree, Mapping):
        raise UnexpectedOwnCloudResponse("Invalid response body: " + body, resptext=body)
    if 'message' in tree:
        raise OCSError(tree['message'])
    return tree

def _meta(envelope) -> Optional[Mapping]:
    ocs = envelope.get('ocs') if isinstance(envelope, Mapping) else None
    if not isinstance(ocs, Mapping):
        return None
    meta = ocs.get('meta')
    return meta if isinstance(meta, Mapping) else None

def _to_int(code) -> Optional[int]:
    try:
        return int(str(code).strip())
    except (ValueError, TypeError):
        return None

def _is_empty(value) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False

def check_ocs_status(envelope: Mapping, accepted_codes: Iterable[int]=DEFAULT_ACCEPTED_CODES) \
        -> Optional[ErrorMessage]:
    """
    check the status code within a parsed OCS envelope.

    :param dict envelope:        the parsed OCS response
    :param list accepted_codes:  the status codes that indicate success (default: 100 only)
    :return:  None if no error is detected (including when the envelope has no ``ocs.meta``);
              otherwise, the ``meta.message`` string or, if the server gave no message, the
              whole envelope.
    """
    meta = _meta(envelope)
    if meta is None:
        return None

    if _to_int(meta.get('statuscode')) in set(accepted_codes):
        return None

    message = meta.get('message')
    if _is_empty(message):
        return envelope
    return message

def ocs_status_code(envelope: Mapping) -> Optional[int]:
    """
    return the OCS status code in the given envelope or None if the envelope has no ``ocs.meta``
    (or the code is not an integer)
    """
    meta = _meta(envelope)
    if meta is None:
        return None
    return _to_int(meta.get('statuscode'))

def check_ocs_response(envelope: Mapping, accepted_codes: Iterable[int]=DEFAULT_ACCEPTED_CODES,
                       ep: str=None) -> Mapping:
    """
    raise an OCSError if the envelope reports a status not among the accepted codes;
    otherwise return the envelope.
    """
    err = check_ocs_status(envelope, accepted_codes)
    if err is not None:
        raise OCSError(err, ocs_status_code(envelope), ep)
    return envelope

def check_user_response(envelope: Mapping) -> bool:
    """
    interpret a response from the provisioning API that carries no data.

    :raises OCSError:  if the server reports that the provisioning API is disabled
    """
    if ocs_status_code(envelope) == PROVISIONING_DISABLED:
        raise OCSError("Provisioning API has been disabled at your instance",
                       PROVISIONING_DISABLED)
    return True
