import logging

import requests

from errors import ForbiddenOrigin, MissingCredential, UpstreamUnreachable

logger = logging.getLogger("cannapliant-proxy")


def check_origin(origin, allowed):
    """Allow absent origins, everything in open mode, else exact matches only."""
    if not origin:
        return
    if not allowed:
        return
    if origin not in allowed:
        logger.warning("Rejected request from origin %s", origin)
        raise ForbiddenOrigin()


class UpstreamRelay:
    """Forwards raw request bodies to the inference API with server-held credentials."""

    def __init__(self, url, api_key, version, timeout=(10.0, 300.0), session=None):
        self.url = url
        self._api_key = api_key
        self.version = version
        self.timeout = timeout
        self.session = session or requests.Session()

    def __repr__(self):
        return f"UpstreamRelay(url={self.url!r}, version={self.version!r})"

    def build_headers(self, content_type=None):
        if not self._api_key:
            logger.error("ANTHROPIC_API_KEY is not configured; refusing to relay")
            raise MissingCredential()
        return {
            "Content-Type": content_type or "application/json",
            "Accept-Encoding": "identity",
            "x-api-key": self._api_key,
            "anthropic-version": self.version,
        }

    def open(self, body, content_type=None):
        """POST ``body`` upstream and return the unread streaming response."""
        headers = self.build_headers(content_type)
        try:
            return self.session.post(
                self.url,
                data=body,
                headers=headers,
                stream=True,
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.exception("Upstream request failed: %s", e)
            raise UpstreamUnreachable() from e

    def iter_body(self, upstream):
        try:
            for chunk in upstream.iter_content(chunk_size=None):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            # Status is already committed; let the server drop the connection.
            logger.exception("Upstream stream aborted: %s", e)
            raise
        finally:
            upstream.close()

    def close(self):
        self.session.close()
