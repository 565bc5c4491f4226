"""FastAPI adapter – inbound webhook router and signature dependency."""
from typing import Any

try:
    from fastapi import APIRouter, HTTPException, Request
    from fastapi.responses import PlainTextResponse
except ImportError as exc:  # pragma: no cover
    raise ImportError("Install 'mp-webhooks[fastapi]' to use the FastAPI adapter") from exc

from mp_webhooks.application.receipt import InboundRequest, ReceiptEngine
from mp_webhooks.config.validation import ConfigError
from mp_webhooks.kernel.errors import VerificationError
from mp_webhooks.observability.logging import get_logger
from mp_webhooks.protocol import SignatureValidator

logger = get_logger(__name__)


async def _inbound(request: Request) -> InboundRequest:
    return InboundRequest(
        headers=dict(request.headers),
        body=await request.body(),
        method=request.method,
        path=request.url.path,
    )


def build_webhook_router(
    engine: ReceiptEngine,
    path: str = "/webhooks/{config_name}",
    *,
    default_config: str = "default",
    tags: list[str] | None = None,
) -> Any:
    """Return an ``APIRouter`` that feeds raw POST bodies to *engine*.

    The body is read as bytes and never parsed before verification. When
    *path* has no ``{config_name}`` segment every request goes to
    *default_config*. Unknown config names answer 404.
    """
    router = APIRouter(tags=tags or ["webhooks"])

    @router.post(path, response_class=PlainTextResponse)
    async def receive_webhook(request: Request) -> Any:
        config_name = request.path_params.get("config_name", default_config)
        try:
            result = await engine.receive(await _inbound(request), config_name)
        except ConfigError:
            logger.warning("webhook.unknown_config", config_name=config_name)
            return PlainTextResponse("Unknown webhook endpoint", status_code=404)
        return PlainTextResponse(result.body, status_code=result.status_code, headers=dict(result.headers))

    return router


class WebhookSignatureDependency:
    """FastAPI dependency rejecting unverified requests with 401.

    Usage::

        verify = WebhookSignatureDependency(HmacValidator(), secret)

        @app.post("/hooks")
        async def hooks(inbound: InboundRequest = Depends(verify)): ...
    """

    def __init__(self, validator: SignatureValidator, secret: str | bytes | None = None) -> None:
        self._validator = validator
        self._secret = secret

    async def __call__(self, request: Request) -> InboundRequest:
        inbound = await _inbound(request)
        try:
            self._validator.verify(inbound.headers, inbound.body, self._secret)
        except VerificationError as exc:
            logger.warning("webhook.signature_rejected", path=inbound.path, error=str(exc), error_code=exc.code)
            raise HTTPException(status_code=401, detail="Invalid signature") from exc
        return inbound


__all__ = ["WebhookSignatureDependency", "build_webhook_router"]
