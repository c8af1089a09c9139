"""
    Marketing description lookup ("MacBook Pro (14-inch, 2021)") keyed by the
    last four characters of the serial number.
"""
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

CONFIG_CODE_OPEN = "<configCode>"
CONFIG_CODE_CLOSE = "</configCode>"


def parse_product_response(body: str) -> str | None:
    """
    Extract the description from the lookup response.

    Any body mentioning "error" has no description. Otherwise the text
    between the last <configCode> and the following </configCode> is used.
    """
    if "error" in body:
        return None
    if CONFIG_CODE_OPEN not in body:
        return None
    tail = body.rsplit(CONFIG_CODE_OPEN, 1)[1]
    if CONFIG_CODE_CLOSE not in tail:
        return None
    return tail.split(CONFIG_CODE_CLOSE, 1)[0]


class ProductLookup:
    """
    One blocking GET per call; returns None on any failure.

    Args:
        host: lookup host, e.g. "support-sp.apple.com"
        timeout: seconds to wait, None to wait forever
    """

    def __init__(self, host: str = "support-sp.apple.com", scheme: str = "http",
                 lang: str = "en_US", timeout: float | None = 15, session: Any = None):
        self.url = f"{scheme}://{host}/sp/product"
        self.lang = lang
        self.timeout = timeout
        self._http = session if session is not None else requests

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "ProductLookup":
        lookup = cfg.get("lookup", {})
        return cls(
            host=lookup.get("host", "support-sp.apple.com"),
            scheme=lookup.get("scheme", "http"),
            lang=lookup.get("lang", "en_US"),
            timeout=lookup.get("timeout", 15),
        )

    def describe(self, serial: str) -> str | None:
        if not serial:
            return None

        params = {"cc": serial[-4:], "lang": self.lang}
        try:
            resp = self._http.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("Product lookup failed: %s", e)
            return None

        try:
            body = resp.content.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Product lookup returned a non UTF-8 body")
            return None

        return parse_product_response(body)
