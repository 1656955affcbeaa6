"""Configuration types for scan_pay."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


ENV_PREFIX = "SCAN_PAY_"


class ScanPayConfig(BaseModel):
    """Backend endpoints and workflow policy."""
    api_base_url: str = "http://localhost:5000"
    charges_path: str = "/api/charge/getallcharges"
    transfer_path: str = "/api/transaction/transfertoagent"
    pin_length: int = Field(default=4, ge=1)
    transfer_charge_keyword: str = "transfer"
    active_charge_status: str = "Active"
    default_currency: str = "NGN"
    # Transport timeout for every backend call. None disables it.
    request_timeout_seconds: Optional[float] = 30.0

    @property
    def charges_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.charges_path

    @property
    def transfer_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.transfer_path

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ScanPayConfig":
        """Build configuration from ``SCAN_PAY_*`` environment variables.

        A ``.env`` file is loaded first when present. Variables that are not
        set keep the model defaults.

        Args:
            dotenv_path: Optional explicit path to a .env file

        Returns:
            ScanPayConfig populated from the environment
        """
        load_dotenv(dotenv_path)

        values = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None:
                continue
            if field_name == "request_timeout_seconds" and raw.strip().lower() in ("", "none", "off"):
                values[field_name] = None
            else:
                values[field_name] = raw
        return cls.model_validate(values)
