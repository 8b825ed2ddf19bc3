"""
This module provides a client class, :py:class:`OwnCloudClient`, for accessing an ownCloud (or
Nextcloud) instance through its OCS REST API and its WebDAV interface.  OCS requests are made via
the ``requests`` package; WebDAV requests are carried out by the ``webdav3.client`` package.
Responses are decoded by the functions in the :py:mod:`~occlient.ocs`, :py:mod:`~occlient.davxml`,
and :py:mod:`~occlient.decode` modules.

All state needed to talk to the server--its URL, the credentials, the server version, and the
current user--is held in a :py:class:`~occlient.session.Session` owned by the client; thus,
multiple clients connected to different servers (or as different users) can be used within
the same process.
"""
import base64
import logging
from collections.abc import Mapping
from typing import List, Iterable
from urllib.parse import urlparse, urlunparse, urlencode

import requests
from webdav3 import client as wd3c

from .config import ConfigurationException
from .exceptions import *
from .fileinfo import FileInfo
from .helpers import normalize_path, encode_uri_path, encode_string, blab
from .session import Session
from . import davxml, decode, ocs

OCS_BASEPATH = 'ocs/v1.php/'
OCS_BASEPATH_V2 = 'ocs/v2.php/'
OCS_SERVICE_CLOUD = 'cloud'

META_PATH_PROP = "{http://owncloud.org/ns}meta-path-for-user"

def _ocs_data(envelope: Mapping, ep: str=None):
    # a parseable body is not necessarily an OCS envelope (e.g. a proxy error page)
    ocsel = envelope.get('ocs') if isinstance(envelope, Mapping) else None
    if not isinstance(ocsel, Mapping) or 'data' not in ocsel:
        raise UnexpectedOwnCloudResponse("Invalid response body: " + str(envelope), ep)
    return ocsel['data']

class OwnCloudClient:
    """
    a client for an ownCloud server's OCS and WebDAV APIs.

    This class supports the following configuration parameters:

    ``service_endpoint``
        (str) _required_.  the base URL of the server instance (e.g. ``https://cloud.example.com/``).
    ``dav_variant``
        (str) _optional_.  the WebDAV endpoint to use for file access:  ``webdav`` (the default)
        selects ``remote.php/webdav``; ``dav`` selects ``remote.php/dav/files/{user}``.
    ``server_version``
        (str) _optional_.  the version of the server, if known in advance.  Otherwise, it is
        learned by calling :py:meth:`get_capabilities`.
    ``ca_bundle``
        (str) _optional_.  the path to a CA certificate bundle that should be used to validate the
        remote server's site certificate.  If not provided, the CAs installed into the OS will be used.
    ``timeout``
        (float) _optional_.  the number of seconds to wait for the server to respond.
    ``authentication``
        (dict) _optional_. a dictionary containing the data required for authenticating to the
        service.  If not provided, requests requiring authentication will fail.  See below for
        sub-parameter details.

    The ``authentication`` object supports the following sub-parameters:

    ``user``
        (str) _optional_.  the user identity to connect as, using HTTP Basic authentication
    ``pass``
        (str) _optional_.  the password to use with ``user``; required if ``user`` is given.
    ``token``
        (str) _optional_.  a bearer token to authenticate with (instead of ``user`` and ``pass``)
    ``header``
        (str) _optional_.  a complete value for the ``Authorization`` header (overrides the others)
    """

    def __init__(self, config: Mapping, log: logging.Logger=None):
        """
        initialize the client

        :param dict config:  the configuration parameters for this client; see class documentation for
                             the parameter descriptions.
        :param Logger log:   the Logger object to use for messages from this client.  If not provided,
                             a default logger with the name "occlient" will be used.
        """
        if not log:
            log = logging.getLogger("occlient")
        self.log = log
        self.cfg = config

        if not config.get("service_endpoint"):
            raise ConfigurationException("OwnCloudClient: Missing required config parameter: "+
                                         "service_endpoint", "service_endpoint")
        variant = config.get("dav_variant", "webdav")
        if variant not in decode.DAV_VARIANTS:
            raise ConfigurationException("OwnCloudClient: config param dav_variant must be one of: "+
                                         ", ".join(decode.DAV_VARIANTS), "dav_variant")

        self.session = Session(config["service_endpoint"],
                               self._prep_auth(config.get("authentication")),
                               variant, config.get("server_version"))

        self.reqkw = {}
        if config.get("ca_bundle"):
            self.reqkw['verify'] = config['ca_bundle']
        if config.get("timeout"):
            self.reqkw['timeout'] = config['timeout']

        self.wdcli = None
        self._wdbase = None

    def _prep_auth(self, authcfg):
        if not authcfg:
            self.log.warning("No authentication parameters provided; assuming none are needed")
            return None

        if authcfg.get("header"):
            return authcfg["header"]
        if authcfg.get("token"):
            return "Bearer " + authcfg["token"]
        if authcfg.get("user"):
            if not authcfg.get("pass"):
                raise ConfigurationException("OwnCloudClient: missing required config parameter: "
                                             "authentication.pass", "authentication.pass")
            cred = "%s:%s" % (authcfg["user"], authcfg["pass"])
            return "Basic " + base64.b64encode(cred.encode('utf-8')).decode('ascii')

        raise ConfigurationException("OwnCloudClient: authentication requires one of: "
                                     "header, token, or user and pass", "authentication")

    def _check_ready(self, with_auth=True):
        if not self.session.base_url:
            raise OwnCloudClientError("Please specify a server URL first")
        if with_auth and not self.session.auth_header:
            raise OwnCloudClientError("Please specify an authorization first.")

    def build_headers(self, with_auth: bool=True) -> dict:
        """ return the headers to send with each request """
        return self.session.build_headers(with_auth)

    def logout(self):
        """ forget the credentials and current user """
        self.session.logout()

    ## OCS requests

    def make_ocs_request(self, method: str, service: str, action: str, data: Mapping=None,
                         accepted_codes: Iterable[int]=ocs.DEFAULT_ACCEPTED_CODES) -> Mapping:
        """
        make an OCS API request and return the parsed response envelope.

        :param str method:   the HTTP method (GET, POST, etc.)
        :param str service:  the OCS service (cloud, privatedata, etc.)
        :param str action:   the action path (e.g. capabilities, apps?filter=enabled)
        :param dict data:    form data to send with the request
        :param list accepted_codes:  the OCS status codes that indicate success
        :raises OwnCloudClientError:  if the server URL or authorization has not been set
        :raises OCSError:    if the response reports an unaccepted status
        :raises UnexpectedOwnCloudResponse:  if the response body is neither XML nor JSON
        :raises OwnCloudCommError:  if the server could not be reached
        """
        self._check_ready()

        hdrs = self.build_headers()
        hdrs['Content-Type'] = 'application/x-www-form-urlencoded'
        slash = '/' if service else ''
        url = self.session.base_url + OCS_BASEPATH + service + slash + action

        try:
            resp = requests.request(method, url, headers=hdrs, data=urlencode(data or {}),
                                    **self.reqkw)
        except requests.RequestException as ex:
            raise OwnCloudCommError(str(ex), url) from ex

        envelope = ocs.parse_ocs_body(resp.content)
        return ocs.check_ocs_response(envelope, accepted_codes, url)

    def ocs_v2(self, method: str='GET', service: str=OCS_SERVICE_CLOUD, action: str='user',
               data: Mapping=None, accepted_codes: Iterable[int]=(100, 200)) -> Mapping:
        """
        make a request to the version 2 OCS API (requesting a JSON response) and return the
        parsed response envelope.  Request data, if provided, is sent as JSON.
        """
        self._check_ready()

        sep = '&' if '?' in action else '?'
        url = self.session.base_url + OCS_BASEPATH_V2 + service + '/' + action + sep + 'format=json'
        kw = dict(self.reqkw)
        if data is not None:
            kw['json'] = data

        try:
            resp = requests.request(method, url, headers=self.build_headers(), **kw)
        except requests.RequestException as ex:
            raise OwnCloudCommError(str(ex), url) from ex

        envelope = ocs.parse_ocs_body(resp.content)
        return ocs.check_ocs_response(envelope, accepted_codes, url)

    def get_capabilities(self) -> Mapping:
        """
        return all of the server's capabilities available to the logged in user.  As a side
        effect, the server version is recorded.
        """
        envelope = self.make_ocs_request('GET', OCS_SERVICE_CLOUD, 'capabilities')
        body = _ocs_data(envelope, OCS_SERVICE_CLOUD + '/capabilities')
        vers = body.get('version') if isinstance(body, Mapping) else None
        if isinstance(vers, Mapping):
            self.session.version = "%s.%s.%s" % (vers.get('major'), vers.get('minor'),
                                                 vers.get('micro'))
            self.log.debug("Server version: %s", self.session.version)
        return body

    def get_config(self) -> Mapping:
        """ return the server's OCS configuration """
        envelope = self.make_ocs_request('GET', '', 'config')
        return _ocs_data(envelope, 'config')

    def get_current_user(self) -> Mapping:
        """
        return information about the logged in user, retrieving it from the server if
        necessary
        """
        if self.session.current_user is None:
            envelope = self.make_ocs_request('GET', OCS_SERVICE_CLOUD, 'user')
            self.session.current_user = _ocs_data(envelope, OCS_SERVICE_CLOUD + '/user')
        return self.session.current_user

    def login(self) -> Mapping:
        """
        verify the credentials with the server by retrieving its capabilities and the
        current user's information.

        :return:  the current user's information
        """
        self.get_capabilities()
        self.session.current_user = None
        return self.get_current_user()

    ## WebDAV requests

    def _connect_dav(self):
        ep = urlparse(self.session.base_url)
        opts = {
            'webdav_hostname': urlunparse((ep[0], ep[1], '', '', '', '')),
            'webdav_root': ep.path.rstrip('/') + '/remote.php'
        }
        if self.reqkw.get('timeout'):
            opts['webdav_timeout'] = self.reqkw['timeout']
        self.wdcli = wd3c.Client(opts)
        self.wdcli.verify = self.reqkw.get('verify', True)
        self._wdbase = self.session.base_url

    def _dav_path(self, path: str) -> str:
        if self.session.dav_variant == "dav" and not self.session.user_id:
            self.get_current_user()
        return self.session.file_path(path)

    def _propfind(self, davpath: str, depth: int, properties: Iterable[str]=None):
        self._check_ready()
        if not self.wdcli or self._wdbase != self.session.base_url:
            self._connect_dav()

        hdrs = self.build_headers()
        hdrs['Depth'] = str(depth)
        hdrs['Content-Type'] = 'application/xml; charset=utf-8'
        hdrs = [f"{k}: {v}" for k, v in hdrs.items()]
        body = encode_string(davxml.build_propfind_body(properties))

        try:
            resp = self.wdcli.execute_request("list", davpath, data=body, headers_ext=hdrs)
        except (wd3c.NoConnection, wd3c.ConnectionException, requests.RequestException) as ex:
            raise OwnCloudCommError("Failed to get resource info: "+str(ex), ep=davpath) from ex
        except wd3c.NotEnoughSpace as ex:
            raise OwnCloudServerError(507, davpath, message="Failed to get resource info: "+str(ex)) from ex
        except wd3c.RemoteResourceNotFound as ex:
            raise OwnCloudResourceNotFound(davpath, "Unable to get resource info: "+str(ex)) from ex
        except wd3c.MethodNotSupported as ex:
            raise OwnCloudClientError("Unable to get resource info: "+str(ex), 405, davpath) from ex
        except wd3c.ResponseErrorCode as ex:
            msg = davxml.parse_dav_error(ex.message)
            if ex.code == 401:
                raise OwnCloudUnauthorized(davpath, msg or None, ex.message) from ex
            raise DAVError(ex.code, msg, davpath, ex.message) from ex

        return davxml.parse_multistatus(resp.content)

    def list(self, path: str, depth: int=1, properties: Iterable[str]=None) -> List[FileInfo]:
        """
        return descriptions of the resource at the given path and (when depth > 0) of its
        contents, in the order the server returned them.

        :param str path:         the path of the directory to list
        :param int depth:        the PROPFIND depth:  0, 1, or "infinity"
        :param list properties:  the properties to request (in Clark notation); if not given,
                                 the server's default set is returned.
        """
        entries = self._propfind(self._dav_path(path), depth, properties)
        out = decode.decode_all(entries, self.session.left_trim)
        if len(out) < len(entries):
            blab(self.log, "%s: dropped %d of %d PROPFIND entries", path,
                 len(entries) - len(out), len(entries))
        return [FileInfo('/', fi.type, fi.properties) if fi.name == '' else fi for fi in out]

    def file_info(self, path: str, properties: Iterable[str]=None) -> FileInfo:
        """
        return a description of the resource with the given path

        :raises OwnCloudResourceNotFound:  if the server does not describe the resource
        """
        out = self.list(path, 0, properties)
        if not out:
            raise OwnCloudResourceNotFound(normalize_path(path), "No information returned for " +
                                           normalize_path(path))
        return out[0]

    def get_path_for_file_id(self, file_id) -> str:
        """
        return the path (relative to the user's root) of the file with the given identifier

        :raises OwnCloudResourceNotFound:  if the server does not report a path for the identifier
        """
        entries = self._propfind("/dav" + encode_uri_path("meta/" + str(file_id)), 0, [META_PATH_PROP])
        infos = decode.decode_all(entries, 1)
        path = infos[0].get_property(META_PATH_PROP) if infos else None
        if not path:
            raise OwnCloudResourceNotFound(str(file_id), "No path found for file id " + str(file_id))
        return path

    def get_file_url(self, path: str) -> str:
        """ return the URL for accessing the file with the given path via the legacy webdav endpoint """
        return self.session.webdav_path_url(path)

    def get_file_url_v2(self, path: str) -> str:
        """ return the URL for accessing the file with the given path via the dav endpoint """
        user = self.get_current_user().get('id')
        return self.session.dav_path_url("files/" + user + normalize_path(path))
