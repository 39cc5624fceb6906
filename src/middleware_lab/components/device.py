"""Device detection from the User-Agent header."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict
from datetime import datetime, timezone

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.models import DeviceInfo
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)

_MOBILE = re.compile(r"mobile|android|iphone|ipod|blackberry|iemobile|opera mini")
_TABLET = re.compile(r"tablet|ipad|android(?!.*mobile)")
_TV = re.compile(r"smart-tv|smarttv|googletv|appletv|hbbtv|pov_tv|netcast.tv")
_BOT = re.compile(r"bot|crawler|spider|scraper", re.IGNORECASE)


def _browser(ua: str) -> str:
    if "chrome" in ua and "edge" not in ua:
        return "chrome"
    if "firefox" in ua:
        return "firefox"
    if "safari" in ua and "chrome" not in ua:
        return "safari"
    if "edge" in ua:
        return "edge"
    if "opera" in ua:
        return "opera"
    if "msie" in ua or "trident" in ua:
        return "internet_explorer"
    return "unknown"


def _os(ua: str) -> str:
    if "windows" in ua:
        return "windows"
    if "mac os" in ua:
        return "macos"
    if "linux" in ua:
        return "linux"
    if "android" in ua:
        return "android"
    if "ios" in ua or "iphone" in ua or "ipad" in ua:
        return "ios"
    return "unknown"


def parse_user_agent(user_agent: str) -> DeviceInfo:
    """Classify a user agent string. A rough heuristic, not a full UA parser."""
    ua = user_agent.lower()

    if _MOBILE.search(ua):
        device_type = "mobile"
    elif _TABLET.search(ua):
        device_type = "tablet"
    elif _TV.search(ua):
        device_type = "tv"
    else:
        device_type = "desktop"

    return DeviceInfo(
        type=device_type,
        browser=_browser(ua),
        os=_os(ua),
        is_bot=bool(_BOT.search(user_agent)),
        is_mobile=device_type == "mobile",
        is_tablet=device_type == "tablet",
        user_agent=user_agent[:100],
        parsed_at=datetime.now(timezone.utc).isoformat(),
    )


class DeviceDetector(FlowComponent):
    """Attaches DeviceInfo to the context and annotates the response."""

    category = ComponentCategory.DETECTION

    async def resolve(self, ctx: RequestContext) -> None:
        ctx.device = parse_user_agent(ctx.user_agent)
        logger.info(
            "Detected %s - %s on %s",
            ctx.device.type,
            ctx.device.browser,
            ctx.device.os,
        )

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        device = ctx.device
        if device is None:
            return
        response.headers["X-Device-Type"] = device.type
        response.headers["X-Browser"] = device.browser
        response.headers["X-OS"] = device.os

        if device.is_mobile and response.is_json_object:
            response.update(mobile_optimized=True, device_info=asdict(device))
            logger.debug("Response optimized for mobile")
