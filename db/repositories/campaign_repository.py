"""
Campaign repository.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, select

from db.base import utcnow
from db.models.campaign import Campaign
from db.repositories.base import SessionRepository
from db.repositories.errors import CampaignNotFoundError

CAMPAIGN_FIELDS: tuple[str, ...] = ("name", "unit_ids", "export_url")


class CampaignRepository(SessionRepository):
    def list_campaigns(self) -> list[Campaign]:
        stmt = select(Campaign).order_by(Campaign.created_at.desc(), Campaign.id)
        with self._read("list campaigns"):
            return list(self._session.scalars(stmt).all())

    def get(self, campaign_pk: uuid.UUID) -> Campaign:
        with self._read("load campaign"):
            campaign = self._session.get(Campaign, campaign_pk)
        if campaign is None:
            raise CampaignNotFoundError(f"Campaign not found: {campaign_pk}")
        return campaign

    def create(self, *, name: str, unit_ids: Sequence[str], export_url: str | None = None) -> Campaign:
        record = Campaign(name=name, unit_ids=list(unit_ids), export_url=export_url)
        with self._write("create campaign"):
            self._session.add(record)
            self._session.flush()
        return record

    def update(self, campaign_pk: uuid.UUID, changes: Mapping[str, Any]) -> Campaign:
        unknown = set(changes) - set(CAMPAIGN_FIELDS)
        if unknown:
            raise ValueError(f"Unknown campaign fields: {sorted(unknown)}")

        record = self.get(campaign_pk)
        with self._write("update campaign"):
            for field_name, value in changes.items():
                if field_name == "unit_ids":
                    value = list(value)
                setattr(record, field_name, value)
            record.updated_at = utcnow()
            self._session.flush()
        return record

    def delete(self, campaign_pk: uuid.UUID) -> None:
        record = self.get(campaign_pk)
        with self._write("delete campaign"):
            self._session.delete(record)

    def delete_all(self) -> int:
        with self._write("delete all campaigns"):
            result = self._session.execute(delete(Campaign))
        return result.rowcount or 0
