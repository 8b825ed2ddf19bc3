"""
Exceptions raised by the ownCloud client.

All exceptions derive from :py:class:`OwnCloudException`.  Failures of a request to the server
are :py:class:`OwnCloudServiceError` instances which record the endpoint (``ep``), the HTTP
status (``code``) and the raw body (``response``) when they are known.  Problems found in the
contents of a response (an OCS status outside of the accepted codes or a WebDAV error body)
are reported as :py:class:`OCSError` and :py:class:`DAVError`, respectively.
"""

class OwnCloudException(Exception):
    """
    the base class for all exceptions raised by this package
    """

    def __init__(self, message: str=None):
        if not message:
            message = "Unspecified problem talking to the ownCloud server"
        super(OwnCloudException, self).__init__(message)


class OwnCloudServiceError(OwnCloudException):
    """
    a failed OCS or WebDAV request.

    This class serves as a base class for more specific request errors.
    """

    def __init__(self, message: str=None, ep: str=None, code: int=0, resptext: str=None):
        """
        create the exception

        :param str message:  an explanation of the cause of the error
        :param str ep:       the OCS URL or WebDAV path that was requested
        :param int code:     the HTTP status of the response (if the server responded)
        :param str resptext: the body of the response (if the server responded)
        """
        if not message:
            message = "ownCloud request failed"
            if ep:
                message += f": {ep}"
            if code:
                message += f" (HTTP {code})"
        super(OwnCloudServiceError, self).__init__(message)
        self.ep = ep
        self.code = code or 0
        self.response = resptext


class OwnCloudCommError(OwnCloudServiceError):
    """
    the server could not be reached or the connection was lost before a response arrived
    (e.g. DNS failures, refused connections, timeouts).
    """
    def __init__(self, message: str=None, ep: str=None):
        if not message:
            message = "Unable to reach the ownCloud server"
            if ep:
                message += f" for {ep}"
        super(OwnCloudCommError, self).__init__(message, ep)


class OwnCloudServerError(OwnCloudServiceError):
    """
    the server failed to carry out a valid request (typically a 5xx response, or a 507 when
    the user's storage is full).
    """

    def __init__(self, code: int=0, ep: str=None, resptext: str=None, message: str=None):
        if not message:
            message = "ownCloud server failure"
            if code:
                message += f" (HTTP {code})"
            if ep:
                message += f" on {ep}"
        super(OwnCloudServerError, self).__init__(message, ep, code, resptext)


class UnexpectedOwnCloudResponse(OwnCloudServerError):
    """
    the server's response could not be interpreted:  its body is neither XML nor JSON, or it
    does not have the shape of an OCS envelope or a WebDAV multi-status document.
    """

    def __init__(self, message: str=None, ep: str=None, resptext: str=None, code: int=0):
        if not message:
            message = "Unrecognized response from ownCloud server"
            if ep:
                message += f" for {ep}"
        super(UnexpectedOwnCloudResponse, self).__init__(code, ep, resptext, message)


class OwnCloudClientError(OwnCloudServiceError):
    """
    the request could not be made or was rejected as improper (a 4xx response).  This is also
    raised when a request is attempted before the server URL or the credentials are set.
    """

    def __init__(self, message: str=None, code: int=0, ep: str=None, resptext: str=None):
        if not message:
            message = "ownCloud server rejected the request"
            if code:
                message += f" (HTTP {code})"
            if ep:
                message += f": {ep}"
        super(OwnCloudClientError, self).__init__(message, ep, code, resptext)


class OwnCloudResourceNotFound(OwnCloudClientError):
    """
    the requested file or directory (or file id) does not exist or is not visible to the user.
    """

    def __init__(self, ep: str=None, message: str=None, resptext: str=None, code: int=404):
        if not message:
            message = "Requested resource not found"
            if ep:
                message += f": {ep}"
        super(OwnCloudResourceNotFound, self).__init__(message, code, ep, resptext)


class OwnCloudUnauthorized(OwnCloudClientError):
    """
    the server did not accept the credentials (a 401 response).
    """

    def __init__(self, ep: str=None, message: str=None, resptext: str=None, code: int=401):
        if not message:
            message = "ownCloud server did not accept the credentials"
            if ep:
                message += f" for {ep}"
        super(OwnCloudUnauthorized, self).__init__(message, code, ep, resptext)


class DAVError(OwnCloudServiceError):
    """
    an error response from the WebDAV interface.  The message is the one extracted from the
    server's ``d:error`` response body (when available).
    """

    def __init__(self, code: int, message: str=None, ep: str=None, resptext: str=None):
        if not message:
            message = f"WebDAV request failed ({code})"
        super(DAVError, self).__init__(message, ep, code, resptext)


class OCSError(OwnCloudServiceError):
    """
    an error status returned within an OCS response envelope.

    The ``payload`` attribute holds what the server reported:  normally the ``meta.message``
    string, but when the server provided no message, it is the entire parsed envelope.  The
    ``statuscode`` attribute holds the OCS status code (not the HTTP code), if known.
    """

    def __init__(self, payload=None, statuscode: int=None, ep: str=None):
        if isinstance(payload, str) and payload:
            message = payload
        else:
            message = "OCS request failed"
            if statuscode is not None:
                message += f" with status {statuscode}"
            if payload:
                message += f": {payload}"
        super(OCSError, self).__init__(message, ep)
        self.payload = payload
        self.statuscode = statuscode
