"""
Credential providers for resolving named secrets.
"""
from __future__ import annotations

import os
from typing import Dict, Optional, Protocol

from dotenv import load_dotenv

OPENAI_KEY_NAME = "openai_key"


class CredentialProvider(Protocol):
    """Resolves a secret name to its value, or None when it is not set."""

    def resolve(self, name: str) -> Optional[str]:
        ...


class StaticCredentialProvider:
    """Credentials held in memory."""

    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self._secrets = dict(secrets or {})

    def resolve(self, name: str) -> Optional[str]:
        value = self._secrets.get(name)
        return value or None


class EnvCredentialProvider:
    """
    Credentials read from environment variables (and a .env file).

    Secret names map to variables by upper-casing, unless an explicit
    mapping is given. ``openai_key`` maps to ``OPENAI_API_KEY``.
    """

    DEFAULT_MAPPING = {OPENAI_KEY_NAME: "OPENAI_API_KEY"}

    def __init__(self, mapping: Optional[Dict[str, str]] = None):
        load_dotenv()
        self.mapping = {**self.DEFAULT_MAPPING, **(mapping or {})}

    def resolve(self, name: str) -> Optional[str]:
        env_var = self.mapping.get(name, name.upper())
        value = os.getenv(env_var)
        if value is None:
            return None
        # Keys pasted into .env files sometimes keep their quotes
        value = value.strip().strip("'\"")
        return value or None
