"""Transfer fee lookup against the charges configuration service."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from ..types import Charge, ScanPayConfig, SessionCredential
from .client import ScanPayBackendClient


logger = logging.getLogger(__name__)

NO_FEE = Decimal(0)


def select_transfer_charge(
    charges: Iterable[Charge],
    keyword: str = "transfer",
    active_status: str = "Active"
) -> Optional[Charge]:
    """Returns the first active charge whose name mentions ``keyword``."""
    for charge in charges:
        if charge.is_active_transfer(keyword, active_status):
            return charge
    return None


class FeeResolver:
    """Resolves the currently active transfer charge.

    Fee lookup never blocks a payment: any failure resolves to a zero fee.
    """

    def __init__(self, backend: ScanPayBackendClient, config: Optional[ScanPayConfig] = None):
        self.backend = backend
        self.config = config or backend.config

    async def resolve_fee(self, credential: SessionCredential) -> Decimal:
        """Look up the transfer fee for the current session.

        Args:
            credential: Agent session credential

        Returns:
            The active transfer charge amount, or 0 when there is none or the
            lookup failed
        """
        try:
            charges = await self.backend.list_charges(credential)
        except Exception as e:
            logger.warning(f"Fee lookup failed, continuing without a transfer fee: {e}")
            return NO_FEE

        charge = select_transfer_charge(
            charges,
            keyword=self.config.transfer_charge_keyword,
            active_status=self.config.active_charge_status
        )
        if charge is None:
            logger.info(f"No active transfer charge among {len(charges)} charges")
            return NO_FEE
        if charge.amount < 0:
            logger.warning(f"Ignoring negative transfer charge {charge.name!r}: {charge.amount}")
            return NO_FEE

        logger.info(f"Resolved transfer fee {charge.amount} from charge {charge.name!r}")
        return charge.amount
