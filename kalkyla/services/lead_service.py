"""
Lead service - public questionnaire leads matched to installer companies.
Challenge: Spread leads fairly across companies with daily caps, without blocking the prospect
on notification delivery.
Design: Matching and counters are written in the request transaction; notifications are queued
through Celery and the match rows record which channels were used.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import NotFoundError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.core.timeutils import as_utc, utcnow
from kalkyla.db.models.enums import Elomrade, LeadStatus
from kalkyla.db.models.lead import Company, Lead, LeadCompanyMatch
from kalkyla.db.repositories.lead_repository import CompanyRepository, LeadRepository
from kalkyla.db.session import run_after_commit
from kalkyla.integrations import n8n
from kalkyla.queue.tasks import dispatch_company_webhook, dispatch_webhook
from kalkyla.schemas.lead import (
    LeadCreate,
    LeadCreatedResponse,
    LeadMatchResponse,
    LeadResponse,
    LeadStatusUpdate,
)

logger = logging.getLogger(__name__)

MAX_MATCHES_PER_LEAD = 6


def lead_summary(lead: Lead) -> dict[str, Any]:
    """Contact and qualification fields shared with matched companies."""
    return {
        "name": lead.name,
        "email": lead.email,
        "phone": lead.phone,
        "propertyType": lead.property_type.value,
        "postalCode": lead.postal_code,
        "elomrade": lead.elomrade.value,
        "annualKwh": float(lead.annual_kwh),
        "interestType": lead.interest_type.value,
        "budget": lead.budget.value,
        "timeline": lead.timeline.value,
    }


def to_response(lead: Lead) -> LeadResponse:
    return LeadResponse(
        id=lead.id,
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        property_type=lead.property_type,
        postal_code=lead.postal_code,
        elomrade=lead.elomrade,
        annual_kwh=float(lead.annual_kwh),
        has_existing_solar=lead.has_existing_solar,
        interest_type=lead.interest_type,
        budget=lead.budget,
        timeline=lead.timeline,
        source=lead.source,
        status=lead.status,
        matches=[
            LeadMatchResponse(
                company_id=m.company_id,
                company_name=m.company.name,
                notified_at=m.notified_at,
                notification_method=m.notification_method,
            )
            for m in lead.matches
        ],
        created_at=lead.created_at,
    )


class LeadService:
    def __init__(self, lead_repo: LeadRepository, company_repo: CompanyRepository):
        self.lead_repo = lead_repo
        self.company_repo = company_repo

    async def create_lead(self, data: LeadCreate) -> LeadCreatedResponse:
        lead = await self.lead_repo.add(
            Lead(
                name=data.name,
                email=data.email,
                phone=data.phone,
                property_type=data.property_type,
                postal_code=data.postal_code,
                elomrade=data.elomrade,
                annual_kwh=Decimal(str(data.annual_kwh)),
                has_existing_solar=data.has_existing_solar,
                interest_type=data.interest_type,
                budget=data.budget,
                timeline=data.timeline,
                calculation_snapshot=data.calculation_snapshot,
                source=data.source,
                status=LeadStatus.NEW,
            )
        )

        companies = await self.match_companies(lead)
        if companies:
            lead.status = LeadStatus.MATCHED
            await self.lead_repo.save(lead)
            await self._notify(lead, companies)
        logger.info("Lead %s created, matched %d companies", lead.id, len(companies))
        return LeadCreatedResponse(lead_id=lead.id, matched_companies=len(companies))

    async def match_companies(self, lead: Lead) -> list[Company]:
        """Active companies accepting the interest and under today's cap, at most six."""
        day_start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        selected: list[Company] = []
        for company in await self.company_repo.list_active():
            if not company.accepts(lead.interest_type):
                continue
            if company.last_lead_reset_at is None or as_utc(company.last_lead_reset_at) < day_start:
                company.leads_today = 0
                company.last_lead_reset_at = day_start
            if company.leads_today >= company.max_leads_per_day:
                continue
            selected.append(company)
            if len(selected) == MAX_MATCHES_PER_LEAD:
                break

        session = self.lead_repo.session
        for company in selected:
            company.leads_today += 1
            session.add(LeadCompanyMatch(lead_id=lead.id, company_id=company.id))
        await session.flush()
        return selected

    async def _notify(self, lead: Lead, companies: list[Company]) -> None:
        summary = lead_summary(lead)
        session = self.lead_repo.session
        await session.refresh(lead, attribute_names=["matches"])
        matches = {m.company_id: m for m in lead.matches}
        for company in companies:
            run_after_commit(
                session,
                dispatch_webhook,
                n8n.LEAD_NOTIFICATION,
                {"companyEmail": company.email, "companyName": company.name, "lead": summary},
            )
            method = "EMAIL"
            if company.webhook_url:
                run_after_commit(
                    session, dispatch_company_webhook, company.webhook_url, {"event": "new_lead", "lead": summary}
                )
                method = "EMAIL,WEBHOOK"
            match = matches[company.id]
            match.notified_at = utcnow()
            match.notification_method = method
        await session.flush()

    async def list_leads(
        self,
        actor: Principal,
        *,
        status: LeadStatus | None = None,
        elomrade: Elomrade | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[LeadResponse]:
        require_permission(actor.role, Permission.ORG_VIEW_ALL)
        leads = await self.lead_repo.list_filtered(
            status=status, elomrade=elomrade, date_from=date_from, date_to=date_to
        )
        return [to_response(lead) for lead in leads]

    async def update_status(self, actor: Principal, lead_id: int, data: LeadStatusUpdate) -> LeadResponse:
        require_permission(actor.role, Permission.ORG_VIEW_ALL)
        lead = await self.lead_repo.get_by_id(lead_id)
        if lead is None:
            raise NotFoundError("Leaden hittades inte")
        lead.status = data.status
        return to_response(await self.lead_repo.save(lead))
