"""Payroll settings: the single process-wide configuration record."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.types import (
    DEFAULT_MIN_HOURS,
    PayrollSettingsSnapshot,
    resolve_threshold,
    to_decimal,
)
from attendance_payroll.errors import ValidationError
from attendance_payroll.models import PayrollSetting

logger = logging.getLogger(__name__)

SETTINGS_KEY = "payroll"


class SettingsService:
    """Reads and writes the payroll settings record."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_payroll_settings(self) -> PayrollSettingsSnapshot:
        """Snapshot of the current settings, defaulting when unset."""
        record = await self.session.get(PayrollSetting, SETTINGS_KEY)
        if record is None:
            return PayrollSettingsSnapshot(min_hours_per_shift=DEFAULT_MIN_HOURS)
        return PayrollSettingsSnapshot(
            min_hours_per_shift=resolve_threshold(record.min_hours_per_shift)
        )

    async def set_payroll_settings(self, changes: dict[str, Any]) -> PayrollSettingsSnapshot:
        """Merge changes into the settings record.

        Raises:
            ValidationError: min_hours_per_shift is not a positive number.
        """
        min_hours = None
        if changes.get("min_hours_per_shift") is not None:
            min_hours = to_decimal(changes["min_hours_per_shift"])
            if min_hours is None or min_hours <= 0:
                raise ValidationError("min_hours_per_shift must be a positive number")

        record = await self.session.get(PayrollSetting, SETTINGS_KEY)
        if record is None:
            record = PayrollSetting(setting_key=SETTINGS_KEY, min_hours_per_shift=DEFAULT_MIN_HOURS)
            self.session.add(record)
        if min_hours is not None:
            record.min_hours_per_shift = min_hours

        await self.session.flush()
        logger.info("Payroll settings updated: min_hours_per_shift=%s", record.min_hours_per_shift)
        return PayrollSettingsSnapshot(min_hours_per_shift=record.min_hours_per_shift)
