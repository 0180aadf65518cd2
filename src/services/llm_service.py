"""
Upstream LLM client: asks an OpenAI-compatible chat completions API for
generation-slang translations and validates what comes back.
"""
from typing import Optional

import requests

from config.settings import settings
from src.core.parsing import parse_translation
from src.models.schemas import TranslationResult
from src.utils.exceptions import ConfigurationException, LLMException, RateLimitException
from src.utils.logger import setup_logger, truncate

logger = setup_logger(__name__)


SYSTEM_PROMPT = """You are a comprehensive slang translation expert. Detect which generation's slang the input uses and translate it into ALL 6 generations' slang styles.

Generation definitions:
- Classic: 1950s - 1970s era slang (groovy, hip, cool cat, daddy-o, far out)
- Baby Boomers: Born 1946 - 1964 (right on, bummer, boogie, peace out)
- Gen X: Born 1965 - 1980 (rad, gnarly, totally, psych, as if, whatever)
- Millennials: Born 1981 - 1996 (GOAT, slay, iconic, adulting, ghosting, basic)
- Gen Z: Born 1997 - 2009 (no cap, bussin, based, mid, ratio, delulu, aura)
- Gen Alpha: Born 2010 - Current (skibidi, gyatt, rizz, ohio, sigma, mewing, fanum tax)

Return ONLY valid JSON matching this schema exactly. No markdown. No extra text.

Schema:
{
  "detectedGeneration": "Classic" | "Baby Boomers" | "Gen X" | "Millennials" | "Gen Z" | "Gen Alpha" | "Standard English",
  "originalText": string,
  "translations": [
    {
      "generation": "Classic" | "Baby Boomers" | "Gen X" | "Millennials" | "Gen Z" | "Gen Alpha",
      "text": string,
      "slangWords": [{"word": string, "definition": string}]
    }
  ]
}

Rules:
- Include ALL 6 generations in translations (Classic, Baby Boomers, Gen X, Millennials, Gen Z, Gen Alpha), each exactly once.
- slangWords must include ONLY the slang terms you used in that translation; may be empty [].
- Keep translations accurate and natural; do not invent definitions that are obviously wrong.
- Ensure the JSON is complete and parseable."""


class OpenAIUpstreamClient:
    """
    Single-attempt client for the chat completions endpoint.

    Retries are left to the caller so a failed attempt is never paid for
    twice.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        max_tokens: int = 1100,
        temperature: float = 0.4,
        timeout: float = 30,
        retry_after: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.retry_after = retry_after
        self.session = session or requests.Session()

    def build_payload(self, text: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
        }

    def translate(self, text: str) -> TranslationResult:
        """
        Translate ``text`` into all six generations.

        Raises:
            ConfigurationException: API key missing
            RateLimitException: provider throttled us (429)
            LLMException: timeout, transport failure or non-2xx status
            ParseException / IncompleteResponseException: unusable output
        """
        if not self.api_key:
            logger.error("OPENAI_API_KEY not configured")
            raise ConfigurationException()

        logger.info(f"🤖 Requesting translation (length: {len(text)} chars)")
        try:
            response = self.session.post(
                self.url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json=self.build_payload(text),
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error(f"Provider timed out after {self.timeout}s")
            raise LLMException()
        except requests.RequestException as e:
            logger.error(f"Provider request failed: {type(e).__name__}")
            raise LLMException()

        raw = response.text
        if response.status_code == 429:
            logger.warning(f"Provider rate limited us: {truncate(raw)}")
            raise RateLimitException(
                "Service is busy. Please try again.",
                retry_after=self.retry_after,
            )
        if not 200 <= response.status_code < 300:
            logger.error(f"Provider API error {response.status_code}: {truncate(raw)}")
            raise LLMException()

        result = parse_translation(raw)
        logger.info(f"✅ Translation received (detected: {result.detected_generation.value})")
        return result


_upstream_client: Optional[OpenAIUpstreamClient] = None


def get_llm_service() -> OpenAIUpstreamClient:
    """Get or create the upstream client singleton."""
    global _upstream_client
    if _upstream_client is None:
        _upstream_client = OpenAIUpstreamClient(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            temperature=settings.OPENAI_TEMPERATURE,
            timeout=settings.UPSTREAM_TIMEOUT,
            retry_after=settings.UPSTREAM_RETRY_AFTER,
        )
    return _upstream_client
