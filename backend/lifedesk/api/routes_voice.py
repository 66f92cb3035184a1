"""
API routes for the voice/text intent pipeline.
"""
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from lifedesk.core.config import get_settings
from lifedesk.core.llm_client import get_llm_client
from lifedesk.db import crud_domain
from lifedesk.db.crud_foods import NutritionCatalog
from lifedesk.db.crud_logs import AppLogSink
from lifedesk.db.schema import ExecuteRequest, ExecuteResponse, UnderstandRequest, UnderstandResponse
from lifedesk.db.session import get_db
from lifedesk.services.voice import DomainServices, NutritionEnricher, execute_actions, parse_transcript

router = APIRouter()


def build_domain_services(db: Session) -> DomainServices:
    """Domain services bound to one request session."""
    return DomainServices(
        schedule=crud_domain.ScheduleSessionService(crud_domain.schedule_item, db),
        transactions=crud_domain.SessionService(crud_domain.transaction, db),
        workouts=crud_domain.SessionService(crud_domain.workout, db),
        food_entries=crud_domain.SessionService(crud_domain.food_entry, db),
        check_ins=crud_domain.SessionService(crud_domain.daily_check_in, db),
        goals=crud_domain.SessionService(crud_domain.goal, db),
    )


def build_enricher(db: Session) -> NutritionEnricher:
    settings = get_settings()
    ai_lookup = get_llm_client().lookup_food_nutrition if settings.food_lookup_enabled else None
    return NutritionEnricher(catalog=NutritionCatalog(db), ai_lookup=ai_lookup)


def get_llm():
    return get_llm_client()


@router.post("/voice/understand", response_model=UnderstandResponse)
async def understand(
    request: UnderstandRequest,
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
    llm=Depends(get_llm),
):
    """
    Turn a spoken or typed transcript into actions, without executing them.

    - **transcript**: What the user said, e.g. "bought a Coke for 5"
    - **lang**: "en", "he" or "auto"
    - **today**: Client's local date (YYYY-MM-DD), optional
    - **timezone**: Client's IANA timezone; times in actions are returned in UTC

    The client shows the actions for confirmation, then posts them to /voice/execute.
    """
    if not request.transcript or not request.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is required")

    return await parse_transcript(
        request.transcript,
        request.lang,
        x_user_id,
        request.today,
        request.timezone,
        llm=llm,
        enricher=build_enricher(db),
        diagnostics=AppLogSink(db),
    )


@router.post("/voice/execute", response_model=ExecuteResponse, response_model_exclude_none=True)
async def execute(
    request: ExecuteRequest,
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """
    Execute confirmed actions in order.

    Returns one result per action. A failed action does not stop the rest.
    """
    results = await execute_actions(request.actions, x_user_id, build_domain_services(db))
    return ExecuteResponse(results=results)
