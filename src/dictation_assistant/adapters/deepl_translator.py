import logging

import httpx

from dictation_assistant.domain.errors import (
    ConfigError,
    DecodeError,
    EmptyResultError,
    InvalidRequestError,
    TransportError,
    UpstreamError,
)
from dictation_assistant.ports.translator import TranslationRequest, TranslationResult

logger = logging.getLogger(__name__)

DEEPL_FREE_API_URL = "https://api-free.deepl.com/v2/translate"
PLACEHOLDER_API_KEY = "your_deepl_api_key_here"


class DeepLTranslator:
    def __init__(
        self,
        api_key: str | None,
        api_url: str = DEEPL_FREE_API_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def translate(
        self, text: str, target_lang: str, source_lang: str | None = None
    ) -> TranslationResult:
        api_key = require_api_key(self._api_key)
        request = TranslationRequest(text=text, target_lang=target_lang, source_lang=source_lang)
        if not request.text.strip() or not request.target_lang.strip():
            raise InvalidRequestError("Missing required fields: text and target_lang")

        form = {"text": request.text, "target_lang": request.target_lang}
        if request.source_lang:
            form["source_lang"] = request.source_lang

        headers = {"Authorization": f"DeepL-Auth-Key {api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._api_url, data=form, headers=headers)
        except httpx.DecodingError as exc:
            logger.error("DeepL response could not be decoded: %s", exc)
            raise DecodeError(f"Failed to decode DeepL response: {exc}") from exc
        except httpx.RequestError as exc:
            logger.error("DeepL request failed: %s", exc)
            raise TransportError(f"Failed to connect to DeepL API: {exc}") from exc

        if not response.is_success:
            logger.error("DeepL API error (status %d): %s", response.status_code, response.text)
            raise UpstreamError(response.status_code, response.text)

        translated_text = _first_translation(response)
        logger.info("Translation (%s -> %s): %s", source_lang or "auto", target_lang, translated_text)
        return TranslationResult(translated_text=translated_text)


def require_api_key(api_key: str | None) -> str:
    """Return a usable DeepL key or raise ``ConfigError`` for an unset or placeholder one."""
    if api_key is None:
        raise ConfigError("DeepL credential not found")
    if not api_key.strip() or api_key == PLACEHOLDER_API_KEY:
        raise ConfigError("DeepL credential is a placeholder")
    return api_key


def _first_translation(response: httpx.Response) -> str:
    try:
        data = response.json()
        translations = data["translations"]
        if not isinstance(translations, list):
            raise TypeError("translations is not a list")
        texts = [str(entry["text"]) for entry in translations]
    except (ValueError, KeyError, TypeError) as exc:
        raise DecodeError(f"Failed to parse DeepL response: {exc}") from exc

    if not texts:
        raise EmptyResultError()
    return texts[0]
