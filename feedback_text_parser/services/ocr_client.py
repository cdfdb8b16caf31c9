"""
OCR client for extracting raw text from feedback document images.
Sends images to an OpenAI-compatible vision endpoint and returns the transcription
untouched, so section parsing stays in this package.
"""
import base64
import logging
from typing import List

import requests

from ..config.config_manager import ConfigManager


class OCRError(Exception):
    """Exception raised when text cannot be extracted from an image."""
    pass


class OCRClient:
    """
    Client for transcribing feedback documents with a vision model.
    Tries several prompts and keeps the first transcription with meaningful text.
    """

    MIN_TEXT_LENGTH = 10
    RESTRICTED_CHARACTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz .,?!-[]#*:()"

    SYSTEM_PROMPT = """You are an OCR engine. Transcribe the text in the image exactly as written.
        Keep line breaks. Keep section markers such as ##Positive##, #Positive#, [Needs Improvement],
        **Observational** or Observational: exactly as they appear.
        Do not summarize, translate, correct or explain. Return only the transcribed text.
        If the image contains no readable text, return an empty response."""

    def __init__(self, config_manager: ConfigManager):
        """
        Initialize OCR client.

        Args:
            config_manager: Configuration manager instance

        Raises:
            ConfigurationError: If no API key is configured
        """
        self.config = config_manager
        self.logger = logging.getLogger(__name__)

        self.api_key = config_manager.get_api_key()
        self.base_url = config_manager.get_api_url()
        self.model = config_manager.get_ocr_model()
        self.timeout = config_manager.get_request_timeout()
        self.attempts = config_manager.get_ocr_attempts()
        self.max_tokens = 2000
        self.temperature = 0.0

        self.logger.debug(f"OCR client initialized (model: {self.model}, attempts: {self.attempts})")

    def _attempt_prompts(self) -> List[str]:
        """User prompts for each attempt; later attempts restrict the character set."""
        base_prompt = "Transcribe all text in this feedback document."
        restricted_prompt = (
            f"{base_prompt} Only output these characters: {self.RESTRICTED_CHARACTERS} "
            f"and line breaks."
        )
        prompts = [base_prompt, restricted_prompt]
        while len(prompts) < self.attempts:
            prompts.append(restricted_prompt)
        return prompts[:self.attempts]

    def extract_text(self, image_bytes: bytes, file_name: str = "image", mime_type: str = "image/png") -> str:
        """
        Extract raw text from an encoded image.

        Args:
            image_bytes: Encoded image content
            file_name: Name used in log messages
            mime_type: MIME type of image_bytes

        Returns:
            str: Trimmed transcription

        Raises:
            OCRError: If every attempt fails or returns no readable text
        """
        if not image_bytes:
            raise OCRError(f"No image data for {file_name}")

        image_base64 = base64.b64encode(image_bytes).decode('utf-8')
        text = ''

        for attempt, prompt in enumerate(self._attempt_prompts(), start=1):
            self.logger.debug(f"OCR attempt {attempt}/{self.attempts} for {file_name}")
            attempt_text = self._call_vision_api(image_base64, mime_type, prompt).strip()

            if len(attempt_text) > len(text) and len(attempt_text) > self.MIN_TEXT_LENGTH:
                text = attempt_text
                self.logger.debug(f"Using text from attempt {attempt}")
                break

            if len(attempt_text) > len(text):
                text = attempt_text

        if not text:
            raise OCRError("No readable text found in image")

        self.logger.info(f"Extracted {len(text)} characters from {file_name}")
        return text

    def _call_vision_api(self, image_base64: str, mime_type: str, prompt: str) -> str:
        """
        Call the vision chat completion endpoint.

        Returns:
            Message content of the first choice (may be empty)
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }

        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": self.SYSTEM_PROMPT
                },
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": prompt
                        },
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{mime_type};base64,{image_base64}",
                                "detail": "high"
                            }
                        }
                    ]
                }
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature
        }

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise OCRError(f"Request timed out after {self.timeout}s: {e}") from e
        except requests.exceptions.RequestException as e:
            raise OCRError(f"Request failed: {e}") from e

        if response.status_code != 200:
            error_msg = f"OCR API error: {response.status_code} - {response.text}"
            self.logger.error(error_msg)
            raise OCRError(error_msg)

        try:
            content = response.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise OCRError(f"Unexpected OCR API response: {e}") from e

        return content or ''

    def validate_connection(self) -> bool:
        """
        Test OCR API connection and authentication.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            response = requests.get(
                f"{self.base_url}/models",
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=10
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"OCR API connection validation failed: {e}")
            return False

        if response.status_code == 200:
            self.logger.info("OCR API connection validated successfully")
            return True

        self.logger.error(f"OCR API connection failed: {response.status_code}")
        return False
