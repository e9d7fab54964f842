# breezyhr/client.py
import errno
import json
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urljoin

import requests

from .exceptions import ApiError, MissingTokenError, TransportError
from .response import ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://breezy.hr/public/api/v2/"


class BreezyApiClient:
    """
    Thin synchronous client for the Breezy HR REST API:
    1. Sign in to obtain an access token (or set one directly)
    2. Call get/post/put/delete with a path relative to the base URL
    3. Inspect the last response for diagnostics

    The last-response fields are shared per instance, so one client should
    not be used from several threads at once. request() returns a per-call
    ApiResponse for callers that need isolation.
    """

    USER_AGENT = "Breezy PHP wrapper (https://github.com/briedis/breezy)"

    def __init__(self, url: str = DEFAULT_URL, token: Optional[str] = None, config: Dict = None):
        self.url = url
        self.config = {
            "connect_timeout": 20,
            "timeout": 20,
            "max_redirects": 3,
            "user_agent": self.USER_AGENT,
            "signin_endpoint": "signin",
            **(config or {})
        }

        self._token = None
        self._last_response_raw = None
        self._last_response = None

        if token is not None:
            self.set_token(token)

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str):
        """Use token as the Authorization header of every later request"""
        self._token = token

    def get(self, path: str, params: Dict = None) -> Any:
        """Perform a GET request, params are appended as the query string"""
        return self.request("GET", path, params).data

    def delete(self, path: str, params: Dict = None) -> Any:
        """Perform a DELETE request"""
        return self.request("DELETE", path, params).data

    def post(self, path: str, data: Any = None, params: Dict = None) -> Any:
        """Perform a POST request with data sent as the JSON body"""
        return self.request("POST", path, params, {} if data is None else data).data

    def put(self, path: str, data: Any = None, params: Dict = None) -> Any:
        """Perform a PUT request with data sent as the JSON body"""
        return self.request("PUT", path, params, {} if data is None else data).data

    def get_last_response_raw(self) -> Optional[str]:
        """Raw body of the last successful request"""
        return self._last_response_raw

    def get_last_response(self) -> Any:
        """Decoded body of the last successful request"""
        return self._last_response

    def build_url(self, path: str, params: Dict = None) -> str:
        url = self.url + path.strip("/")
        if params:
            query = _encode_query(params)
            if query:
                url += "?" + query
        return url

    def request(self, method: str, path: str, params: Dict = None, data: Any = None) -> ApiResponse:
        """
        Perform a request and return the per-call result.
        Raises TransportError when the call could not complete and ApiError
        when the API reports a failure.
        """
        self._last_response_raw = None
        self._last_response = None

        method = method.upper()
        url = self.build_url(path, params)

        body = None
        if data is not None:
            body = json.dumps(data).encode("utf-8")

        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body) if body is not None else 0),
            "User-Agent": self.config["user_agent"],
        }
        if self._token:
            # Sent verbatim, the API does not expect a "Bearer" scheme
            headers["Authorization"] = str(self._token)

        logger.debug("%s %s", method, url)

        deadline = time.monotonic() + self.config["timeout"]
        session = requests.Session()
        try:
            response = self._send(session, method, url, body, headers, deadline)
            try:
                raw = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.RequestException as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise TransportError(str(e), _transport_code(e)) from e
        finally:
            session.close()

        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None

        result = ApiResponse(
            status_code=response.status_code,
            data=decoded,
            raw=raw,
            url=response.url or url,
        )
        logger.debug("%s %s -> %s", method, url, result.status_code)

        if result.failed:
            raise ApiError(result.error, result.status_code, result)

        self._last_response = decoded
        self._last_response_raw = raw

        return result

    def _send(self, session, method: str, url: str, body: Optional[bytes], headers: Dict, deadline: float):
        """Follow redirects by hand so every hop keeps the caller's method and body"""
        headers = dict(headers)
        max_redirects = self.config["max_redirects"]

        for hop in range(max_redirects + 1):
            response = session.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=(self.config["connect_timeout"], self.config["timeout"]),
                stream=True,
                allow_redirects=False,
            )
            if not response.is_redirect:
                return response

            response.close()
            if hop == max_redirects:
                raise requests.TooManyRedirects(f"Exceeded {max_redirects} redirects.", response=response)

            target = urljoin(url, response.headers["location"])
            if "Authorization" in headers and session.should_strip_auth(url, target):
                del headers["Authorization"]
            logger.debug("%s %s redirected to %s", method, url, target)
            url = target
            self._check_deadline(deadline)

    def _read_body(self, response, deadline: float) -> str:
        self._check_deadline(deadline)
        chunks = []
        for chunk in response.iter_content(chunk_size=1024):
            chunks.append(chunk)
            self._check_deadline(deadline)
        return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")

    def _check_deadline(self, deadline: float):
        """Enforce the limit on the whole call, the read timeout only bounds each socket read"""
        if time.monotonic() > deadline:
            raise TransportError(
                f"Operation timed out after {self.config['timeout']} seconds",
                errno.ETIMEDOUT,
            )

    def sign_in(self, email: str, password: str) -> str:
        """
        Sign in and remember the access token for consecutive requests
        Returns: access_token
        """
        result = self.request("POST", self.config["signin_endpoint"], data={
            "email": email,
            "password": password
        })

        token = None
        if isinstance(result.data, dict):
            token = result.data.get("access_token")

        if not token:
            raise MissingTokenError(
                "Sign-in response did not include an access_token",
                result.status_code,
                result,
            )

        self.set_token(token)
        logger.debug("Signed in as %s", email)

        return token


def _encode_query(params: Dict) -> str:
    """Form-encode params: None is dropped, booleans become 1/0, sequences repeat the key"""
    pairs = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                item = int(item)
            pairs.append((key, item))
    return urlencode(pairs)


def _transport_code(exc: BaseException) -> Optional[int]:
    """Find the errno of the OS-level error behind a requests exception, if any"""
    pending = [exc]
    seen = set()
    while pending:
        err = pending.pop()
        if err is None or id(err) in seen:
            continue
        seen.add(id(err))
        if isinstance(err, OSError) and isinstance(err.errno, int):
            return err.errno
        reason = getattr(err, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
        pending.extend(arg for arg in err.args if isinstance(arg, BaseException))
        pending.extend([err.__cause__, err.__context__])
    return None
