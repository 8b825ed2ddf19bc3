"""
The connection context shared by the operations of a client.
"""
import re
import uuid
from collections.abc import Mapping
from typing import Tuple

from .helpers import encode_uri_path, normalize_path
from .decode import left_trim_components, DAV_VARIANTS

REQUEST_ID_MIN_VERSION = "10.1.0"

_re_vers_field = re.compile(r'^\d+')

def parse_version(version: str) -> Tuple[int, ...]:
    """
    convert a dotted version string (e.g. "10.1.0") into a tuple of integers that can be
    compared.  Trailing non-numeric qualifiers on a field (e.g. "0-beta") are ignored.
    """
    out = []
    for field in str(version).strip().split('.'):
        m = _re_vers_field.match(field)
        out.append(int(m.group()) if m else 0)
    while len(out) < 3:
        out.append(0)
    return tuple(out)

class Session:
    """
    the state needed to talk to a particular server instance as a particular user:  the
    instance's base URL, the Authorization header value, which DAV path variant to use, and
    (once known) the server version and the current user's information.

    A Session is owned by a single client; clients holding different sessions can be used
    side by side.
    """

    def __init__(self, base_url: str=None, auth_header: str=None, dav_variant: str="webdav",
                 version: str=None):
        """
        :param str base_url:     the root URL of the server instance
        :param str auth_header:  the value to send in the Authorization header
        :param str dav_variant:  either "webdav" (for remote.php/webdav) or "dav" (for
                                 remote.php/dav/files/{user})
        :param str version:      the server version, if already known
        """
        if dav_variant not in DAV_VARIANTS:
            raise ValueError("Unrecognized DAV path variant: "+str(dav_variant))
        self.base_url = None
        self.set_instance(base_url)
        self.auth_header = auth_header
        self.dav_variant = dav_variant
        self.version = version
        self.current_user = None

    def set_instance(self, base_url: str):
        """ set the root URL of the server instance """
        if base_url and not base_url.endswith('/'):
            base_url += '/'
        self.base_url = base_url or None

    def logout(self):
        """ forget the authorization and current user """
        self.auth_header = None
        self.current_user = None

    @property
    def webdav_url(self) -> str:
        return self.base_url + "remote.php/webdav"

    @property
    def dav_url(self) -> str:
        return self.base_url + "remote.php/dav"

    @property
    def user_id(self) -> str:
        """ the identifier of the current user or None if not yet known """
        if isinstance(self.current_user, Mapping):
            return self.current_user.get('id')
        return None

    @property
    def left_trim(self) -> int:
        """ the number of href segments to skip when resolving paths under this session's DAV variant """
        return left_trim_components(self.dav_variant)

    def at_least_version(self, min_version: str) -> bool:
        """
        return True if the server's version is known and is equal to or later than the given
        version
        """
        if not self.version:
            return False
        return parse_version(self.version) >= parse_version(min_version)

    def build_headers(self, with_auth: bool=True) -> dict:
        """
        return the headers that should accompany every request to the server
        """
        hdrs = {
            'OCS-APIREQUEST': 'true',
            'X-Requested-With': 'XMLHttpRequest'
        }
        if with_auth:
            hdrs['Authorization'] = self.auth_header
        if self.at_least_version(REQUEST_ID_MIN_VERSION):
            hdrs['X-Request-ID'] = str(uuid.uuid4())
        return hdrs

    def webdav_path_url(self, path: str) -> str:
        """ return the full URL to a resource path under the legacy webdav endpoint """
        return self.webdav_url + encode_uri_path(path)

    def dav_path_url(self, path: str) -> str:
        """ return the full URL to a resource path under the dav endpoint """
        return self.dav_url + encode_uri_path(path)

    def file_path(self, path: str) -> str:
        """
        return the URL path, relative to ``remote.php``, addressing the given user file path
        under this session's DAV variant
        """
        if self.dav_variant == "dav":
            if not self.user_id:
                raise ValueError("Current user must be known to use the dav path variant")
            return "/dav" + encode_uri_path("files/" + self.user_id + normalize_path(path))
        return "/webdav" + encode_uri_path(path)
