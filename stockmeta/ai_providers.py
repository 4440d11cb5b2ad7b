"""
StockMeta - AI Provider Module
Chat-completion client for OpenAI-compatible providers (OpenAI, Groq, OpenRouter).

The client performs exactly one logical completion per call: it returns the
raw text of the first choice and leaves all clean-up to the sanitizer.
Transient failures (rate limits, 5xx, timeouts) are retried with backoff.
"""

import logging
import random
import threading
import time

import requests

from stockmeta.errors import AuthError, ProviderError

logger = logging.getLogger(__name__)


# ─── Provider Configurations ────────────────────────────────────────────────────
PROVIDERS = {
    "OpenAI": {
        "base_url": "https://api.openai.com/v1/chat/completions",
        "models": [
            "gpt-4o-mini",
            "gpt-4.1-nano",
            "gpt-4.1-mini"
        ]
    },
    "Groq": {
        "base_url": "https://api.groq.com/openai/v1/chat/completions",
        "models": [
            "meta-llama/llama-4-scout-17b-16e-instruct"
        ]
    },
    "OpenRouter": {
        "base_url": "https://openrouter.ai/api/v1/chat/completions",
        "models": [
            "openai/gpt-4o-mini",
            "openai/gpt-4.1-nano",
            "google/gemini-2.0-flash-001"
        ]
    }
}

DEFAULT_PROVIDER = "OpenAI"
DEFAULT_MODEL = "gpt-4o-mini"

# ─── Transport Settings ─────────────────────────────────────────────────────────
REQUEST_TIMEOUT = 60                            # seconds per HTTP call
MAX_RETRIES = 3
RETRY_STATUSES = {429, 500, 502, 503, 504}      # server errors + rate limit
AUTH_STATUSES = {401, 403}
RETRY_BASE_DELAY = 2.0                          # 2s, 4s, ... plus jitter
RETRY_JITTER = 1.0

# gpt-4o-mini pricing, USD per 1M tokens
PRICE_PER_M_INPUT = 0.15
PRICE_PER_M_OUTPUT = 0.60


def get_provider_names():
    """Return list of provider names."""
    return list(PROVIDERS.keys())


def get_models_for_provider(provider_name):
    """Return list of models for a given provider."""
    return PROVIDERS.get(provider_name, {}).get("models", [])


def mask_key(api_key):
    """Shorten a credential for log output."""
    if not api_key:
        return "<missing>"
    return f"{api_key[:8]}...{api_key[-4:]}" if len(api_key) > 12 else "***"


def extract_content(resp_json):
    """Return the first choice's text, or "" when the provider sent none."""
    if not isinstance(resp_json, dict):
        return ""
    choices = resp_json.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else ""


class TokenUsage:
    """Thread-safe token counter shared by all calls of one client."""

    def __init__(self):
        self._lock = threading.Lock()
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.request_count = 0

    def add(self, usage):
        usage = usage or {}
        with self._lock:
            self.prompt_tokens += int(usage.get("prompt_tokens") or 0)
            self.completion_tokens += int(usage.get("completion_tokens") or 0)
            self.request_count += 1

    def snapshot(self):
        with self._lock:
            prompt, completion, count = self.prompt_tokens, self.completion_tokens, self.request_count
        cost = (prompt * PRICE_PER_M_INPUT + completion * PRICE_PER_M_OUTPUT) / 1_000_000
        return {
            "totalTokens": prompt + completion,
            "promptTokens": prompt,
            "completionTokens": completion,
            "requestCount": count,
            "estimatedCost": round(cost, 8),
        }


class CompletionClient:
    """Single chat-completion call against one provider, with one credential."""

    def __init__(self, api_key, provider_name=DEFAULT_PROVIDER, model=DEFAULT_MODEL,
                 timeout=REQUEST_TIMEOUT, max_retries=MAX_RETRIES, retry_base_delay=RETRY_BASE_DELAY,
                 session=None):
        provider = PROVIDERS.get(provider_name)
        if not provider:
            raise ValueError(f"Unknown provider: {provider_name}")
        self.api_key = api_key
        self.provider_name = provider_name
        self.model = model
        self.url = provider["base_url"]
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_base_delay = retry_base_delay
        self.usage = TokenUsage()
        self._http = session or requests

    def _headers(self):
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }
        # OpenRouter requires these headers for attribution
        if self.provider_name == "OpenRouter":
            headers["HTTP-Referer"] = "https://stockmeta.app"
            headers["X-Title"] = "StockMeta"
        return headers

    def _backoff(self, attempt, reason):
        wait = self.retry_base_delay * (2 ** (attempt - 1)) + random.uniform(0, RETRY_JITTER * self.retry_base_delay)
        logger.warning("Attempt %d/%d failed (%s), retrying in %.1fs", attempt, self.max_retries, reason, wait)
        time.sleep(wait)

    def complete(self, system, user, temperature=0.0, max_tokens=500):
        """
        Run one chat completion and return the raw answer text.

        Args:
            system: System prompt
            user: User prompt
            temperature: Sampling temperature
            max_tokens: Output token cap

        Returns:
            First choice content, or "" when the provider returned no content

        Raises:
            AuthError: credential missing or rejected (401/403)
            ProviderError: any other non-2xx answer, timeout or network failure
        """
        if not self.api_key or not str(self.api_key).strip():
            raise AuthError("API key is required. Please set it in Settings.")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user}
            ],
            "max_tokens": max_tokens,
            "temperature": temperature
        }

        logger.debug("POST %s model=%s key=%s", self.url, self.model, mask_key(self.api_key))

        response = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._http.post(self.url, headers=self._headers(), json=payload, timeout=self.timeout)
            except requests.exceptions.Timeout:
                if attempt < self.max_retries:
                    self._backoff(attempt, "timeout")
                    continue
                raise ProviderError(f"Request timed out ({self.timeout}s). The server may be overloaded.")
            except requests.exceptions.RequestException as e:
                if attempt < self.max_retries:
                    self._backoff(attempt, "connection error")
                    continue
                raise ProviderError(f"Connection error: {e}")

            status = response.status_code
            if 200 <= status < 300:
                break

            error_text = (response.text or "")[:500]
            if status in AUTH_STATUSES:
                raise AuthError(f"API key rejected by {self.provider_name} ({status}): {error_text}")

            if status in RETRY_STATUSES and attempt < self.max_retries:
                self._backoff(attempt, f"HTTP {status}")
                continue

            raise ProviderError(f"API Error ({status}): {error_text}", status_code=status)

        try:
            resp_json = response.json()
        except ValueError:
            raise ProviderError(f"Provider returned a non-JSON body: {(response.text or '')[:300]}")

        if isinstance(resp_json, dict):
            self.usage.add(resp_json.get("usage"))
        content = extract_content(resp_json)
        if not content:
            logger.info("Empty completion from %s (%s)", self.provider_name, self.model)
        return content
