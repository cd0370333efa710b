"""
ADVISORY SERVICE

Thin Gemini client producing a short comment on a pending trade.
No state. No business logic. Never raises past its boundary.
"""

import logging
from typing import Callable, Optional

import httpx

from p2p_desk.config import settings

_logger = logging.getLogger(__name__)

FALLBACK_NO_KEY = "Advisor API key is not configured. Check your settings."
FALLBACK_EMPTY = "The advisor could not produce a recommendation."
FALLBACK_ERROR = "The advisor is unavailable right now. Try again later."

PROMPT_TEMPLATE = """
Act as an expert in peer-to-peer crypto arbitrage.
Review this live trade:

- Buy price: ${buy_price} MXN
- Sell price: ${sell_price} MXN
- Amount sold: {amount} USDT
- Net profit: ${profit:.2f} MXN
- Return (ROI): {roi:.2f}%

Give ultra-brief advice (two sentences at most) on whether the spread is healthy,
whether the ROI justifies the risk of a bank freeze, or whether to look for a
better price. Be direct and professional.
"""


def build_prompt(buy_price: float, sell_price: float, amount: float, profit: float, roi: float) -> str:
    return PROMPT_TEMPLATE.format(
        buy_price=buy_price,
        sell_price=sell_price,
        amount=amount,
        profit=profit,
        roi=roi,
    ).strip()


def _extract_text(payload: dict) -> Optional[str]:
    for candidate in payload.get("candidates") or []:
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if text:
            return text
    return None


class AdvisoryGateway:
    """Async Gemini `generateContent` caller with fixed fallbacks"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.api_base = (api_base or settings.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.ADVISOR_TIMEOUT_SECONDS
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=self.timeout))

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def analyze_trade(
        self,
        buy_price: float,
        sell_price: float,
        amount: float,
        profit: float,
        roi: float,
    ) -> str:
        if not self.configured:
            _logger.warning("Advisor skipped (missing GEMINI_API_KEY)")
            return FALLBACK_NO_KEY

        url = f"{self.api_base}/models/{self.model}:generateContent"
        body = {
            "contents": [
                {"parts": [{"text": build_prompt(buy_price, sell_price, amount, profit, roi)}]}
            ]
        }
        headers = {"x-goog-api-key": self.api_key}

        try:
            async with self._client_factory() as client:
                resp = await client.post(url, json=body, headers=headers)
                resp.raise_for_status()
                payload = resp.json()
        except Exception as exc:
            _logger.error(f"Advisor request failed: {exc}")
            return FALLBACK_ERROR

        text = _extract_text(payload) if isinstance(payload, dict) else None
        return text or FALLBACK_EMPTY
