"""
Anonymous reads against the public object endpoint.

Objects with a public ACL can be read without credentials:
    http://storage.googleapis.com/{bucket}/{key}

Only GET and HEAD are issued. Any status other than 200 is an error;
connection failures raised by requests propagate unchanged.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import quote

import requests
from requests.structures import CaseInsensitiveDict

from ..exceptions import HTTPRequestError

logger = logging.getLogger(__name__)


class PublicObjectClient:
    """Reads publicly readable objects of one bucket over plain HTTP."""

    def __init__(
        self,
        bucket: str,
        host: str = "storage.googleapis.com",
        scheme: str = "http",
        timeout: Optional[float] = None,
    ):
        self.bucket = bucket
        self.host = host
        self.scheme = scheme
        self.timeout = timeout

    def object_path(self, file_key: str) -> str:
        return f"/{self.bucket}/{quote(file_key, safe='/')}"

    def object_url(self, file_key: str) -> str:
        return f"{self.scheme}://{self.host}{self.object_path(file_key)}"

    def request(self, method: str, file_key: str) -> Tuple[CaseInsensitiveDict, bytes]:
        """
        Issue an anonymous request for an object.

        Args:
            method: "GET" or "HEAD"
            file_key: Object key

        Returns:
            (response headers, buffered body); the body is empty for HEAD

        Raises:
            HTTPRequestError: If the response status is not 200
            requests.RequestException: On transport failure
        """
        path = self.object_path(file_key)
        logger.debug(f"Public {method} {self.host}{path}")

        # One connection per call; nothing is shared between worker threads
        response = requests.request(method, self.object_url(file_key), timeout=self.timeout)
        try:
            if response.status_code != 200:
                logger.error(f"Public {method} failed: {response.status_code} for {path}")
                raise HTTPRequestError(response.status_code, path)
            return response.headers, response.content
        finally:
            response.close()

    def head(self, file_key: str) -> CaseInsensitiveDict:
        headers, _ = self.request("HEAD", file_key)
        return headers

    def get(self, file_key: str) -> Tuple[CaseInsensitiveDict, bytes]:
        return self.request("GET", file_key)
