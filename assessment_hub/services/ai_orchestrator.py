import json
import re
import requests
from typing import List, Dict, Any
from assessment_hub.core.config import settings
from assessment_hub.core.exceptions import AIError, AIKillSwitchError
import logging
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

logger = logging.getLogger(__name__)


class AIDomain:
    ANALYSIS = "assessment_analysis"
    VISUALIZATION = "visualization"
    FEEDBACK = "feedback_text"
    GENERAL = "general"


class AIOrchestrator:
    @staticmethod
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type(requests.exceptions.RequestException),
        reraise=True
    )
    def _post(payload: Dict[str, Any]) -> requests.Response:
        """Network call, retried on connection errors and timeouts."""
        response = requests.post(
            url=settings.ai.base_url,
            headers={
                "Authorization": f"Bearer {settings.ai.openrouter_api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": "http://localhost:3000",  # Required by OpenRouter
            },
            data=json.dumps(payload),
            timeout=settings.ai.timeout_seconds
        )
        response.raise_for_status()
        return response

    @classmethod
    def _do_call(
        cls,
        messages: List[Dict[str, str]],
        model_name: str,
        temperature: float = 0.7,
        json_output: bool = True
    ) -> str:
        """Performs one model call (with network retries) and returns the message content."""
        logger.info(f"Calling AI Model: {model_name}")

        payload: Dict[str, Any] = {
            "model": model_name,
            "messages": messages,
            "temperature": temperature
        }
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = cls._post(payload)
            content = response.json()["choices"][0]["message"]["content"]
        except requests.exceptions.Timeout:
            logger.error("AI service timeout.")
            raise AIError("AI service reached timeout limit.")
        except requests.exceptions.HTTPError as e:
            logger.error(f"AI service HTTP error: {e}")
            raise AIError("AI service returned an error", error=f"HTTP {e.response.status_code}")
        except requests.exceptions.RequestException as e:
            logger.error(f"AI service unreachable: {e}")
            raise AIError("AI service is unreachable", error=str(e))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected AI response shape: {e}")
            raise AIError("AI service returned an unexpected response", error=str(e))

        if not content:
            raise AIError("AI service returned an empty response")

        if json_output:
            # Basic JSON extraction if model returns text around it
            json_match = re.search(r'\{.*\}', content, re.DOTALL)
            if json_match:
                return json_match.group()

        return content

    @classmethod
    def call_model(
        cls,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        json_output: bool = True,
        domain: str = AIDomain.GENERAL
    ) -> str:
        """
        Centralized AI model caller with kill-switch, retries and fallback.
        """
        logger.info(f"AI Coordination Request | Domain: {domain}")

        if settings.ai.kill_switch:
            logger.warning("AI Kill-switch is active. Blocking request.")
            raise AIKillSwitchError()

        if not settings.ai.openrouter_api_key:
            logger.error("OpenRouter API Key missing.")
            raise AIError("AI service configuration error.", error="OPENROUTER_API_KEY is not configured")

        try:
            return cls._do_call(messages, settings.ai.model_name, temperature, json_output)
        except AIError as e:
            logger.warning(f"Primary model {settings.ai.model_name} failed: {e.message}. Attempting fallback.")
            try:
                return cls._do_call(messages, settings.ai.fallback_model, temperature, json_output)
            except AIError as fe:
                logger.error(f"Fallback model {settings.ai.fallback_model} also failed: {fe.message}")
                raise AIError(
                    "AI service completely unavailable",
                    error=f"Primary: {(e.details or {}).get('error', e.message)}; "
                          f"Fallback: {(fe.details or {}).get('error', fe.message)}"
                )

    @classmethod
    def analyze_text(
        cls,
        system_prompt: str,
        user_content: str,
        temperature: float = 0.5,
        domain: str = AIDomain.GENERAL
    ) -> Dict[str, Any]:
        """ Helper for common analysis tasks that expect JSON back. """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content}
        ]
        response_text = cls.call_model(
            messages,
            temperature=temperature,
            json_output=True,
            domain=domain
        )
        try:
            parsed = json.loads(response_text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to decode AI JSON response: {response_text}")
            raise AIError("Failed to parse AI response.", error=e.msg)
        if not isinstance(parsed, dict):
            raise AIError("Failed to parse AI response.", error="Expected a JSON object")
        return parsed
