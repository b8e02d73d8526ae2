"""Image relay route.

The public URL embedded in every news item points here; the ``url`` query
parameter is the encrypted token, never the origin.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse, StreamingResponse

from newsproxy.api.dependencies import get_image_relay
from newsproxy.core.errors import NewsProxyError
from newsproxy.services.image_relay import ImageRelay
from newsproxy.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["images"])

IMAGE_ERROR = "Error fetching the image"


@router.get("/image-urls", response_class=StreamingResponse)
async def relay_image(
    url: Optional[str] = Query(None, description="Image token issued in a news item"),
    image_relay: ImageRelay = Depends(get_image_relay),
):
    """Stream the image behind a token with its original content type."""
    if not url:
        return PlainTextResponse(IMAGE_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        image = await image_relay.open(url)
    except NewsProxyError as e:
        # error_type only: messages may describe the origin response
        logger.warning("Image relay failed", error_type=type(e).__name__)
        return PlainTextResponse(IMAGE_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return StreamingResponse(image.chunks, headers={"Content-Type": image.content_type})
