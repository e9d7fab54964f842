# breezyhr/exceptions.py

class BreezyError(Exception):
    """Base exception for breezyhr operations"""
    pass

class TransportError(BreezyError):
    """Raised when the HTTP call itself could not complete (DNS, TLS, timeout, refused)"""

    def __init__(self, message: str, code=None):
        super().__init__(f"Transport error: {message}")
        self.message = message
        self.code = code

class ApiError(BreezyError):
    """
    Raised when the API answered but signalled failure, either with an
    HTTP status >= 400 or a non-empty "error" field in the body.
    """

    def __init__(self, message=None, status_code: int = 0, response=None):
        super().__init__(str(message) if message else f"HTTP {status_code}")
        self.message = message
        self.status_code = status_code
        self.response = response

class MissingTokenError(ApiError):
    """Raised when sign-in succeeds but the response carries no access_token"""
    pass
