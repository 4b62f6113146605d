"""Webhook receiver resource.

``POST /webhooks/{platform}`` reads the raw request body, so the signature
is checked over exactly the bytes the platform signed, and hands it to the
ingestion service.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/webhooks/{platform}", WebhookResource(ingestion_service))

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from rhodium.ingestion.service import WebhookIngestionService

__all__ = ["WebhookResource"]


class WebhookResource:
    """Accept webhook deliveries for a registered platform.

    Accepted events answer HTTP 202 with the ingestion receipt. Connectivity
    pings answer HTTP 200 once their signature has been verified. Errors are
    mapped by the handlers in :mod:`rhodium.api.errors`.

    """

    def __init__(self, ingestion_service: WebhookIngestionService) -> None:
        """Configure the resource with the ingestion service."""
        self._ingestion = ingestion_service

    async def on_post(self, req: Request, resp: Response, *, platform: str) -> None:
        """Handle POST /webhooks/{platform}.

        Parameters
        ----------
        req
            Falcon request whose raw body is the webhook payload.
        resp
            Falcon response populated with the ingestion receipt.
        platform
            Platform identifier from the URL path.

        """
        payload = await req.stream.read()
        receipt = await self._ingestion.ingest(platform, payload, req.headers)
        resp.media = msgspec.to_builtins(receipt)
        resp.status = falcon.HTTP_200 if receipt.is_ping else falcon.HTTP_202
