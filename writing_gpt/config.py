"""Configuration management for writing-gpt."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from writing_gpt.llm.models import ProviderConfig, ProviderType

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class Configuration:
    """Manages configuration and environment variables."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.load_env()  # Load .env for API keys
        self._config = self._load_yaml_config(config_path or DEFAULT_CONFIG_PATH)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def active_provider(self) -> str:
        return self._config.get("llm", {}).get("active", "openai")

    @property
    def llm_api_key(self) -> str:
        """Get the API key for the active LLM provider.

        Returns:
            The API key as a string.

        Raises:
            ValueError: If the API key is not found in environment variables.
        """
        active_provider = self.active_provider

        # Map provider names to environment variable names
        provider_key_map = {
            "openai": "OPENAI_API_KEY",
        }

        env_key = provider_key_map.get(active_provider)
        if not env_key:
            raise ValueError(
                f"Unknown provider '{active_provider}' - no API key mapping found"
            )

        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(
                f"API key '{env_key}' not found in environment variables "
                f"for provider '{active_provider}'"
            )

        return api_key

    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def get_llm_config(self) -> dict[str, Any]:
        """Get active LLM provider configuration from YAML.

        Returns:
            Active LLM provider configuration dictionary.

        Raises:
            ValueError: If the active provider or a required key is missing.
        """
        providers = self._config.get("llm", {}).get("providers", {})
        active_provider = self.active_provider

        if active_provider not in providers:
            raise ValueError(
                f"Active provider '{active_provider}' not found in providers config"
            )

        llm_config = providers[active_provider]
        required_keys = ["base_url", "endpoint", "model", "temperature"]
        for key in required_keys:
            if key not in llm_config:
                raise ValueError(
                    f"Required LLM configuration parameter '{key}' not found "
                    f"for provider '{active_provider}' in config.yaml"
                )

        return llm_config

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client timeouts for the active LLM provider.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ValueError: If required HTTP client parameters are missing or invalid.
        """
        http_config = self.get_llm_config().get("http_client", {})

        required_keys = [
            "connect_timeout", "read_timeout", "write_timeout", "pool_timeout"
        ]
        for key in required_keys:
            if key not in http_config:
                raise ValueError(
                    f"http_client.{key} must be explicitly configured "
                    f"for provider '{self.active_provider}' in config.yaml"
                )

        for key in required_keys:
            value = http_config[key]
            # A null read timeout lets a slow stream run until cancelled
            if value is None and key == "read_timeout":
                continue
            if not isinstance(value, int | float) or value <= 0:
                raise ValueError(f"http_client.{key} must be a positive number")

        return http_config

    def get_provider_config(self) -> ProviderConfig:
        """Build the provider configuration for the active provider."""
        llm_config = self.get_llm_config()
        http_config = self.get_http_client_config()

        try:
            provider_type = ProviderType(self.active_provider)
        except ValueError as e:
            raise ValueError(
                f"Unsupported provider '{self.active_provider}'"
            ) from e

        temperature = llm_config["temperature"]
        if not isinstance(temperature, int | float) or not 0 <= temperature <= 2:
            raise ValueError("temperature must be a number between 0 and 2")

        return ProviderConfig(
            provider=provider_type,
            base_url=llm_config["base_url"],
            endpoint=llm_config["endpoint"],
            model=llm_config["model"],
            api_key=self.llm_api_key,
            temperature=float(temperature),
            connect_timeout=http_config["connect_timeout"],
            read_timeout=http_config["read_timeout"],
            write_timeout=http_config["write_timeout"],
            pool_timeout=http_config["pool_timeout"],
        )

    def get_prompt_config(self) -> dict[str, Any]:
        """Get prompt action templates from YAML.

        Raises:
            ValueError: If the separator or templates are missing.
        """
        prompt_config = self._config.get("prompts", {})

        if "separator" not in prompt_config:
            raise ValueError(
                "prompts.separator must be explicitly configured in config.yaml"
            )

        templates = prompt_config.get("templates")
        if not isinstance(templates, dict) or not templates:
            raise ValueError(
                "prompts.templates must be a non-empty mapping in config.yaml"
            )

        return prompt_config

    def get_history_config(self) -> dict[str, Any]:
        """Get answer history configuration from YAML.

        Raises:
            ValueError: If max_answers is missing or not a positive integer.
        """
        history_config = self._config.get("history", {})

        if "max_answers" not in history_config:
            raise ValueError(
                "history.max_answers must be explicitly configured in config.yaml"
            )

        max_answers = history_config["max_answers"]
        if not isinstance(max_answers, int) or max_answers < 1:
            raise ValueError("history.max_answers must be a positive integer")

        return history_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._config.get("logging", {})
