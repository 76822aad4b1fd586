import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "QUERYBIND_"

_TRUTHY = {"1", "true", "yes", "on"}


class PreprocessorSettings(BaseModel):
    component_development_mode: bool = Field(
        default=False,
        description="Component development mode, forwarded to the code generator",
    )
    managed_extension: str = Field(
        default=".md", description="Only documents with this suffix are processed"
    )
    debounce_ms: int = Field(
        default=200, description="Quiescence window of generated reactive queries"
    )
    utilities_package: str = Field(
        default="@evidence-dev/component-utilities",
        description="Runtime package the generated script imports helpers from",
    )
    store_dir: Optional[Path] = Field(
        default=None, description="Persist the query store here between processes"
    )

    class Config:
        validate_assignment = True

    @field_validator("managed_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Managed extension must be a non-empty string")
        return v if v.startswith(".") else f".{v}"

    @field_validator("debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Debounce window must be a positive number of milliseconds")
        return v

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "PreprocessorSettings":
        """Build settings from QUERYBIND_* variables, loading a .env file first"""
        load_dotenv(env_file)

        values = {}
        dev_mode = os.getenv(f"{ENV_PREFIX}COMPONENT_DEV_MODE")
        if dev_mode is not None:
            values["component_development_mode"] = dev_mode.strip().lower() in _TRUTHY

        extension = os.getenv(f"{ENV_PREFIX}EXTENSION")
        if extension:
            values["managed_extension"] = extension

        debounce_ms = os.getenv(f"{ENV_PREFIX}DEBOUNCE_MS")
        if debounce_ms:
            values["debounce_ms"] = debounce_ms

        utilities_package = os.getenv(f"{ENV_PREFIX}UTILITIES_PACKAGE")
        if utilities_package:
            values["utilities_package"] = utilities_package

        store_dir = os.getenv(f"{ENV_PREFIX}STORE_DIR")
        if store_dir:
            values["store_dir"] = Path(store_dir)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
