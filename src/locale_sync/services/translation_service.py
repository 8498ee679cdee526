"""
Translation service backed by OpenAI chat completions
"""

import asyncio
import json
import logging
from typing import Any, List, Optional
from openai import AsyncOpenAI

from locale_sync.config.settings import TranslatorSettings
from locale_sync.utils.errors import (
    BatchParseError,
    EmptyResultError,
    TranslationExhausted,
)
from locale_sync.utils.retry import classify_error, sleep_before_retry

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional translator. Translate the text exactly as provided without adding any comments, "
    "explanations, or additional text. Maintain the original formatting including any HTML, markdown, or "
    "special characters. Do not alter placeholders, variables, or code snippets."
)

BATCH_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the array of texts exactly as provided without adding "
    "comments or explanations. Maintain all formatting including HTML, markdown, and special characters. "
    "Return your response ONLY as a valid JSON object in this exact format: "
    "{\"translations\": [\"translated text 1\", \"translated text 2\", ...]}"
)


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def _string_list(value: Any, expected: int) -> Optional[List[str]]:
    if not isinstance(value, list) or len(value) != expected:
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return value


def _translations_field(payload: Any, expected: int) -> Optional[List[str]]:
    if not isinstance(payload, dict):
        return None
    return _string_list(payload.get('translations'), expected)


def parse_batch_response(content: str, expected: int) -> List[str]:
    """
    Extract the list of translations from a batch completion

    Tried in order, each requiring exactly `expected` strings:
      1. the whole content as {"translations": [...]}
      2. a bare JSON array, when the content looks like one
      3. the substring between the first '{' and the last '}' as the object form

    Raises:
        BatchParseError: none of the forms yielded a list of the right length
    """
    content = (content or '').strip()

    try:
        translations = _translations_field(json.loads(content), expected)
        if translations is not None:
            return translations
    except ValueError:
        pass

    if content.startswith('[') and content.endswith(']'):
        try:
            translations = _string_list(json.loads(content), expected)
        except ValueError as e:
            raise BatchParseError(f"failed to parse response as JSON array: {e}") from e
        if translations is None:
            raise BatchParseError(f"JSON array response does not hold {expected} strings")
        return translations

    start = content.find('{')
    end = content.rfind('}')
    if start < 0 or end <= start:
        raise BatchParseError("response did not contain valid JSON")

    try:
        translations = _translations_field(json.loads(content[start:end + 1]), expected)
    except ValueError as e:
        raise BatchParseError(f"failed to extract valid JSON response: {e}") from e
    if translations is None:
        raise BatchParseError(f"extracted JSON does not hold {expected} translations")
    return translations


class TranslationService:
    """Translation client rotating over a pool of API keys"""

    def __init__(self, settings: TranslatorSettings):
        self.settings = settings
        self.clients = [
            AsyncOpenAI(
                api_key=key,
                base_url=settings.base_url,
                timeout=settings.timeout,
                max_retries=0
            )
            for key in settings.api_keys
        ]
        self._index = 0
        self._lock = asyncio.Lock()

    async def _next_client(self) -> AsyncOpenAI:
        """Pick the client for the next call and advance the rotation"""
        async with self._lock:
            client = self.clients[self._index]
            self._index = (self._index + 1) % len(self.clients)
            return client

    def _build_prompt(self, text: str, language: str) -> str:
        return (
            f"Translate the following text to {language}. Keep any markdown, HTML tags, and special characters "
            f"(including [], {{}}, <>, etc.) unchanged:\n\n{text}"
        )

    def _build_batch_prompt(self, texts: List[str], language: str) -> str:
        return (
            f"Translate this array of texts to {language}. Keep any markdown, HTML tags, and special characters "
            f"(including [], {{}}, <>, etc.) unchanged. Return ONLY a JSON object with a 'translations' array.\n\n"
            f"{json.dumps(texts, ensure_ascii=False)}"
        )

    async def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int, **extra: Any) -> str:
        client = await self._next_client()
        response = await client.chat.completions.create(
            model=self.settings.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=self.settings.temperature,
            max_tokens=max_tokens,
            **extra
        )
        if not response.choices:
            raise EmptyResultError("no choices in response")
        return response.choices[0].message.content or ''

    async def translate(self, text: str, language: str) -> str:
        """
        Translate one text

        Args:
            text: Source text
            language: Target language name used in the prompt

        Returns:
            Translated text, stripped of surrounding whitespace

        Raises:
            TranslationExhausted: every attempt failed or returned nothing
        """
        last_error: Optional[BaseException] = None
        attempts = self.settings.max_attempts

        for attempt in range(attempts):
            try:
                result = (await self._complete(
                    SYSTEM_PROMPT,
                    self._build_prompt(text, language),
                    self.settings.max_tokens
                )).strip()
            except EmptyResultError as e:
                last_error = e
                logger.warning(f"{e} (attempt {attempt + 1}/{attempts})")
                continue
            except Exception as e:
                last_error = classify_error(e)
                await sleep_before_retry(last_error, attempt, attempts, self.settings.backoff_base)
                continue

            if not result:
                last_error = EmptyResultError("received empty translation")
                logger.warning(f"Empty translation for {language} (attempt {attempt + 1}/{attempts})")
                continue

            if attempt > 0:
                logger.info(f"Translation succeeded on attempt {attempt + 1}")
            return result

        raise TranslationExhausted(
            f"failed to translate after {attempts} attempts: {last_error}", last_error
        ) from last_error

    async def batch_translate(self, texts: List[str], language: str) -> List[str]:
        """
        Translate an ordered list of texts in one request per attempt

        The result has the same length and order as the input. Elements that
        come back empty are logged and returned as-is; callers must check them.

        Raises:
            TranslationExhausted: no attempt produced a parseable list
        """
        if not texts:
            return []

        last_error: Optional[BaseException] = None
        attempts = self.settings.max_attempts

        for attempt in range(attempts):
            try:
                content = await self._complete(
                    BATCH_SYSTEM_PROMPT,
                    self._build_batch_prompt(texts, language),
                    self.settings.batch_max_tokens,
                    response_format={"type": "json_object"}
                )
            except EmptyResultError as e:
                last_error = e
                logger.warning(f"{e} (attempt {attempt + 1}/{attempts})")
                continue
            except Exception as e:
                last_error = classify_error(e)
                await sleep_before_retry(last_error, attempt, attempts, self.settings.backoff_base)
                continue

            try:
                translations = parse_batch_response(content, len(texts))
            except BatchParseError as e:
                last_error = e
                logger.warning(f"Unparseable batch response: {e} (attempt {attempt + 1}/{attempts})")
                continue

            for source, translation in zip(texts, translations):
                if _is_blank(translation):
                    logger.warning(f"Received empty translation for text: {source}")

            return translations

        raise TranslationExhausted(
            f"failed to batch translate after {attempts} attempts: {last_error}", last_error
        ) from last_error

    async def close(self):
        """Close the underlying HTTP clients"""
        for client in self.clients:
            await client.close()
