"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP) y el coordinador lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "cep-race"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "cep-race"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "cep-race"
    return Path.home() / ".config" / "cep-race"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="CEP_RACE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Timeout por request a cada fuente (segundos).",
    )
    race_deadline_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Tiempo máximo total de la carrera entre fuentes (segundos).",
    )
    user_agent: str = Field(
        default="cep-race/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones a las fuentes.",
    )

    brasilapi_url_template: str = Field(
        default="https://brasilapi.com.br/api/cep/v1/{cep}",
        min_length=8,
        description="Plantilla de URL de BrasilAPI; `{cep}` se sustituye por el código.",
    )
    viacep_url_template: str = Field(
        default="http://viacep.com.br/ws/{cep}/json/",
        min_length=8,
        description="Plantilla de URL de ViaCEP; `{cep}` se sustituye por el código.",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    default_language: Language = Field(
        default=Language.ENGLISH,
        description="Idioma por defecto para la salida de la CLI (en/pt).",
    )
