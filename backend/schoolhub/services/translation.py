import logging

import requests

from schoolhub.errors import ProviderError

logger = logging.getLogger(__name__)

LANGUAGE_CODES = {
    "english": "en",
    "hindi": "hi",
    "marathi": "mr",
    "tamil": "ta",
    "telugu": "te",
    "kannada": "kn",
    "malayalam": "ml",
    "gujarati": "gu",
    "bengali": "bn",
    "punjabi": "pa",
    "urdu": "ur",
    "odia": "or",
}


def language_code_for(label):
    """Map a parent language label to the provider's two-letter code, 'en' if unknown."""
    return LANGUAGE_CODES.get((label or "").lower(), "en")


class TranslationGateway:
    """
    Client for the RapidAPI deep-translate endpoint.

    Configure in the app config:
    RAPIDAPI_KEY = 'your_api_key'
    RAPIDAPI_HOST = 'deep-translate1.p.rapidapi.com'
    RAPIDAPI_URL = 'https://deep-translate1.p.rapidapi.com/language/translate/v2'
    TRANSLATION_FALLBACK_ON_ERROR = True
    """

    def __init__(self, app=None):
        self.api_key = None
        self.api_host = None
        self.api_url = None
        self.timeout = 10
        self.fallback_on_error = True
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.api_key = app.config.get("RAPIDAPI_KEY")
        self.api_host = app.config.get("RAPIDAPI_HOST")
        self.api_url = app.config.get("RAPIDAPI_URL")
        self.timeout = app.config.get("TRANSLATION_TIMEOUT", 10)
        self.fallback_on_error = app.config.get("TRANSLATION_FALLBACK_ON_ERROR", True)
        if not self.api_key:
            logger.warning("Translation API key not configured; messages will stay in English")

    def translate(self, text, source_lang="en", target_lang="en"):
        """
        Translate text, returning the original text on any provider failure.

        When fallback_on_error is off the failure is raised as ProviderError
        so callers can choose their own fallback.
        """
        try:
            return self._request_translation(text, source_lang, target_lang)
        except ProviderError as e:
            logger.error(f"Translation failed: {e.message}")
            if not self.fallback_on_error:
                raise
            return text

    def _request_translation(self, text, source_lang, target_lang):
        if not self.api_key or not self.api_url:
            raise ProviderError("Translation API not configured")

        try:
            response = requests.post(
                self.api_url,
                json={"q": text, "source": source_lang, "target": target_lang},
                headers={
                    "Content-Type": "application/json",
                    "x-rapidapi-host": self.api_host,
                    "x-rapidapi-key": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(str(e)) from e

        translated = ((payload or {}).get("data") or {}).get("translations") or {}
        translated = translated.get("translatedText") if isinstance(translated, dict) else None
        if isinstance(translated, list):
            translated = translated[0] if translated else None

        if not translated:
            raise ProviderError("Translation failed or empty response received")
        return translated
