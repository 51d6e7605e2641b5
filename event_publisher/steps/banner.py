"""
Banner step: attaches an uploaded banner image to the event.

Three sequential calls, each gated on the previous one:

1. Create an attachment placeholder (tag ``banner``, type ``image``, empty URL)
2. Upload the binary content bound to the placeholder, yielding a storage URL
3. Patch the placeholder with that URL

Once a banner was supplied there is no "event without banner" fallback:
any failure aborts the submission.
"""

import logging
from typing import Optional

from event_publisher.envelope import ResponseCode, classify
from event_publisher.errors import (
    AttachmentCreateFailed,
    BannerUpdateFailed,
    UploadFailed,
)
from event_publisher.gateway import ResourceGateway
from event_publisher.models import BannerUpload
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.banner")

ATTACHMENT_RESOURCE = "event-attachment"
BANNER_TAG = "banner"
BANNER_TYPE = "image"


class BannerStep:

    def __init__(self, gateway: ResourceGateway):
        self._gateway = gateway

    async def run(self, event_id: str, banner: Optional[BannerUpload]) -> Optional[str]:
        """
        Upload and attach the banner.

        Returns:
            Storage URL of the banner, or None when no banner was supplied

        Raises:
            AttachmentCreateFailed: If the placeholder cannot be created
            UploadFailed: If the upload is rejected or returns no URL
            BannerUpdateFailed: If the placeholder cannot be patched
        """
        if banner is None or not banner.content:
            return None

        envelope = await self._gateway.create(
            ATTACHMENT_RESOURCE,
            {
                "event_id": event_id,
                "name": BANNER_TAG,
                "type": BANNER_TYPE,
                "url": "",
            },
        )
        attachment_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            AttachmentCreateFailed,
            "banner attachment",
            name=banner.filename,
        )

        envelope = await self._gateway.upload(
            attachment_id, banner.filename, banner.content, banner.content_type
        )
        outcome = classify(envelope, ResponseCode.CREATE_SUCCESS)
        if not outcome.ok:
            raise UploadFailed(
                f"Failed to upload banner '{banner.filename}': {outcome.message}",
                name=banner.filename,
                code=outcome.code,
            )
        url = outcome.result.get("url") if isinstance(outcome.result, dict) else None
        if not url:
            raise UploadFailed(
                f"Upload of banner '{banner.filename}' returned no URL",
                name=banner.filename,
                code=ResponseCode.CREATE_SUCCESS.value,
            )

        envelope = await self._gateway.update(
            ATTACHMENT_RESOURCE, attachment_id, {"url": url}
        )
        outcome = classify(envelope, ResponseCode.UPDATE_SUCCESS)
        if not outcome.ok:
            raise BannerUpdateFailed(
                f"Failed to attach banner URL to attachment {attachment_id}: {outcome.message}",
                name=banner.filename,
                code=outcome.code,
            )

        logger.debug("Attached banner %s to event %s", url, event_id)
        return url
