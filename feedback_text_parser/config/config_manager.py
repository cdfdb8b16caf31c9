"""
Configuration manager for feedback text parser system.
"""
import os
from typing import Optional
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


class ConfigManager:
    """
    Manages environment variables and system configuration for the feedback text parser.
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            env_file: Optional path to .env file to load
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()  # Load from default .env file if present

        self._config = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load and validate all configuration values."""
        # Only needed when images are sent to the OCR service
        self._config['OPENAI_API_KEY'] = os.getenv('OPENAI_API_KEY')

        optional_vars = {
            'OPENAI_API_URL': 'https://api.openai.com/v1',
            'OCR_MODEL': 'gpt-4o',
            'REQUEST_TIMEOUT': '60',
            'OCR_ATTEMPTS': '2',
            'MAX_IMAGE_SIZE_MB': '10',
            'SUPPORTED_IMAGE_FORMATS': 'jpeg,jpg,png,webp',
            'CONTRAST_FACTOR': '1.2',
            'LOG_LEVEL': 'INFO'
        }

        for var_name, default_value in optional_vars.items():
            self._config[var_name] = os.getenv(var_name, default_value)

        self._validate_numeric_configs()

    def _validate_numeric_configs(self) -> None:
        """Validate and convert numeric configuration values."""
        numeric_configs = {
            'REQUEST_TIMEOUT': int,
            'OCR_ATTEMPTS': int,
            'MAX_IMAGE_SIZE_MB': int,
            'CONTRAST_FACTOR': float
        }

        for config_name, config_type in numeric_configs.items():
            try:
                self._config[config_name] = config_type(self._config[config_name])
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {config_name}: {self._config[config_name]}. "
                    f"Expected {config_type.__name__}."
                ) from e

            if self._config[config_name] <= 0:
                raise ConfigurationError(
                    f"Invalid value for {config_name}: {self._config[config_name]}. "
                    f"Expected a positive number."
                )

    def has_api_key(self) -> bool:
        return bool(self._config['OPENAI_API_KEY'])

    def get_api_key(self) -> str:
        """
        Get the OCR service API key.

        Returns:
            str: The API key for the OpenAI-compatible vision endpoint

        Raises:
            ConfigurationError: If API key is not configured
        """
        api_key = self._config['OPENAI_API_KEY']
        if not api_key:
            raise ConfigurationError(
                "Required environment variable 'OPENAI_API_KEY' is not set. "
                "This variable is needed for: extracting text from images"
            )
        return api_key

    def get_api_url(self) -> str:
        """Get the OCR service base URL (without trailing slash)."""
        return self._config['OPENAI_API_URL'].rstrip('/')

    def get_ocr_model(self) -> str:
        return self._config['OCR_MODEL']

    def get_request_timeout(self) -> int:
        """
        Get the API request timeout in seconds.

        Returns:
            int: Request timeout in seconds
        """
        return self._config['REQUEST_TIMEOUT']

    def get_ocr_attempts(self) -> int:
        return self._config['OCR_ATTEMPTS']

    def get_max_image_size_mb(self) -> int:
        """
        Get the maximum allowed image size in megabytes.

        Returns:
            int: Maximum file size in MB
        """
        return self._config['MAX_IMAGE_SIZE_MB']

    def get_supported_formats(self) -> list[str]:
        """
        Get the list of supported image formats.

        Returns:
            list[str]: List of supported file extensions (lowercase, no dot)
        """
        formats_str = self._config['SUPPORTED_IMAGE_FORMATS']
        return [fmt.strip().lower().lstrip('.') for fmt in formats_str.split(',') if fmt.strip()]

    def get_contrast_factor(self) -> float:
        return self._config['CONTRAST_FACTOR']

    def get_log_level(self) -> str:
        """
        Get the logging level.

        Returns:
            str: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        return self._config['LOG_LEVEL'].upper()

    def get_all_config(self) -> dict:
        """
        Get all configuration values (excluding sensitive data).

        Returns:
            dict: All configuration values with API key masked
        """
        config_copy = self._config.copy()
        api_key = config_copy.get('OPENAI_API_KEY')
        if api_key:
            config_copy['OPENAI_API_KEY'] = f"{api_key[:4]}...{api_key[-4:]}" if len(api_key) > 8 else "***"

        return config_copy
