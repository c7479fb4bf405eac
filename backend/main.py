"""
FastAPI Backend: Roster Kernel API v1.

In-memory: one RosterSession for the process lifetime. Nothing is
persisted; restarting the process starts from an empty state.

Endpoints:
  GET    /state                      full state
  DELETE /state                      reset to an empty state
  GET    /locations                  list locations
  POST   /locations                  create one or more locations
  PATCH  /locations/{id}             save a location edit (whole-form check)
  DELETE /locations/{id}             remove (blocked while rosters use it)
  GET    /locations/{id}/usage       area/section usage counts
  GET    /locations/{id}/staff       staff working at the location
  PUT    /active-location            set the active location
  GET    /staff, POST /staff, PATCH /staff/{id}, DELETE /staff/{id}
  GET    /rosters?date_iso=&location_id=
  GET    /rosters/month?year=&month=&location_id=
  POST   /rosters, PUT /rosters/{id}, DELETE /rosters/{id}
  PUT    /rosters/{id}/shifts        insert or replace one shift
  DELETE /rosters/{id}/shifts/{shift_id}
  GET    /rosters/{id}/stats, GET /rosters/{id}/timeline
  GET    /diagnostics, GET /metrics
  POST   /demo                       seed deterministic demo data
"""
from __future__ import annotations

import logging
import os
from datetime import date
from typing import List, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from roster_kernel import selectors
from roster_kernel.domain_types import (
    Area, NewAreaInput, NewLocationInput, Roster, RosterPolicy, Shift, StaffRecord,
)
from roster_kernel.validation import RemovalBlockedError, ValidationError
from roster_runtime.session import RosterSession, UnknownEntityError

from roster_generator import DemoSpec, GeneratorInvariantError, get_template, seed_demo

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
ALLOW_EMPTY_ROSTERS = os.environ.get("ALLOW_EMPTY_ROSTERS", "").lower() in ("1", "true", "yes")


def _log_level(name: Optional[str]) -> str:
    """Upper-cased level name, or INFO if logging does not know it."""
    level = (name or "INFO").upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


LOG_LEVEL = _log_level(os.environ.get("LOG_LEVEL"))
DEMO_SEED = int(os.environ.get("DEMO_SEED", "42"))

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Roster API",
    version="1.0.0",
    description="Venue shift rostering: locations, staff and daily rosters",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_session: Optional[RosterSession] = None


def _get_session() -> RosterSession:
    global _session
    if _session is None:
        _session = RosterSession(policy=RosterPolicy(allow_empty_rosters=ALLOW_EMPTY_ROSTERS))
    return _session


def reset_session(policy: Optional[RosterPolicy] = None) -> RosterSession:
    """Replace the process session with a fresh, empty one."""
    global _session
    _session = RosterSession(
        policy=policy or RosterPolicy(allow_empty_rosters=ALLOW_EMPTY_ROSTERS),
    )
    return _session


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    status = 409 if isinstance(exc, RemovalBlockedError) else 422
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "issues": [i.to_dict() for i in exc.issues]},
    )


@app.exception_handler(UnknownEntityError)
async def _unknown_entity(request: Request, exc: UnknownEntityError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class AreaInput(BaseModel):
    name: str
    sections: List[str] = []


class LocationInput(BaseModel):
    name: str
    address: str
    areas: List[AreaInput] = []


class CreateLocationsRequest(BaseModel):
    locations: List[LocationInput]


class AreaEdit(BaseModel):
    id: Optional[str] = None
    name: str
    sections: List[str] = []


class UpdateLocationRequest(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    areas: Optional[List[AreaEdit]] = None


class ActiveLocationRequest(BaseModel):
    id: Optional[str] = None


class StaffInput(BaseModel):
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    pay_rate: Optional[float] = None
    availability: List[str] = []
    locations: List[str] = []


class StaffPatch(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    pay_rate: Optional[float] = None
    availability: Optional[List[str]] = None
    locations: Optional[List[str]] = None


class ShiftInput(BaseModel):
    id: Optional[str] = None
    role: str
    area_id: str
    section: str
    staff_id: Optional[str] = None
    notes: Optional[str] = None
    start: str
    end: str


class RosterInput(BaseModel):
    date_iso: str
    location_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    shifts: List[ShiftInput] = []


class DemoRequest(BaseModel):
    template: str = "pub"
    start_date: Optional[str] = None
    days: int = 7
    staff_count: int = 6
    shifts_per_day: int = 4
    seed: Optional[int] = None


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _to_shift(req: ShiftInput) -> Shift:
    return Shift(
        id=req.id or "",
        role=req.role,
        area_id=req.area_id,
        section=req.section,
        staff_id=req.staff_id,
        notes=req.notes,
        start=req.start,
        end=req.end,
    )


def _to_roster(req: RosterInput, roster_id: str = "") -> Roster:
    return Roster(
        id=roster_id,
        date_iso=req.date_iso,
        location_id=req.location_id,
        title=req.title,
        description=req.description,
        shifts=[_to_shift(s) for s in req.shifts],
    )


def _roster_view(roster: Roster) -> dict:
    """Roster plus its aggregates, as the calendar and timeline show it."""
    session = _get_session()
    data = roster.to_dict()
    data["stats"] = selectors.roster_stats(roster, session.state.staff).to_dict()
    return data


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0.0"}


@app.get("/state")
def get_state():
    return _get_session().get_state()


@app.delete("/state")
def clear_state():
    reset_session()
    return {"status": "reset"}


# -- Locations --------------------------------------------------------------


@app.get("/locations")
def list_locations():
    session = _get_session()
    active = selectors.active_location(session.state)
    return {
        "active_location_id": active.id if active else None,
        "locations": [loc.to_dict() for loc in session.state.locations],
    }


@app.post("/locations", status_code=201)
def create_locations(req: CreateLocationsRequest):
    created = _get_session().create_locations([
        NewLocationInput(
            name=loc.name,
            address=loc.address,
            areas=[NewAreaInput(name=a.name, sections=list(a.sections)) for a in loc.areas],
        )
        for loc in req.locations
    ])
    return [loc.to_dict() for loc in created]


@app.patch("/locations/{location_id}")
def update_location(location_id: str, req: UpdateLocationRequest):
    areas = None
    if req.areas is not None:
        areas = [Area(id=a.id or "", name=a.name, sections=list(a.sections)) for a in req.areas]
    loc = _get_session().update_location(
        location_id, name=req.name, address=req.address, areas=areas,
    )
    return loc.to_dict()


@app.delete("/locations/{location_id}")
def delete_location(location_id: str):
    _get_session().delete_location(location_id)
    return {"status": "deleted"}


@app.get("/locations/{location_id}/usage")
def location_usage(location_id: str):
    session = _get_session()
    session.get_location(location_id)
    return session.get_usage_counts(location_id)


@app.get("/locations/{location_id}/staff")
def location_staff(location_id: str):
    session = _get_session()
    return [s.to_dict() for s in selectors.staff_by_location(session.state, location_id)]


@app.put("/active-location")
def set_active_location(req: ActiveLocationRequest):
    session = _get_session()
    session.set_active_location(req.id)
    return {"active_location_id": session.state.active_location_id}


# -- Staff ------------------------------------------------------------------


@app.get("/staff")
def list_staff():
    return [s.to_dict() for s in _get_session().state.staff]


@app.post("/staff", status_code=201)
def create_staff(req: StaffInput):
    member = _get_session().create_staff(StaffRecord(id="", **req.model_dump()))
    return member.to_dict()


@app.patch("/staff/{staff_id}")
def update_staff(staff_id: str, req: StaffPatch):
    member = _get_session().update_staff(staff_id, **req.model_dump(exclude_unset=True))
    return member.to_dict()


@app.delete("/staff/{staff_id}")
def delete_staff(staff_id: str):
    _get_session().delete_staff(staff_id)
    return {"status": "deleted"}


# -- Rosters ----------------------------------------------------------------


@app.get("/rosters")
def list_rosters(date_iso: str, location_id: Optional[str] = None):
    return [_roster_view(r) for r in _get_session().get_rosters_by_date(date_iso, location_id)]


@app.get("/rosters/month")
def rosters_for_month(
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    location_id: Optional[str] = None,
):
    """Rosters grouped by day, for the month calendar."""
    grouped = selectors.rosters_in_month(_get_session().state, year, month, location_id)
    return {day: [_roster_view(r) for r in rosters] for day, rosters in grouped.items()}


@app.post("/rosters", status_code=201)
def create_roster(req: RosterInput):
    return _roster_view(_get_session().create_roster(_to_roster(req)))


@app.put("/rosters/{roster_id}")
def update_roster(roster_id: str, req: RosterInput):
    return _roster_view(_get_session().update_roster(_to_roster(req, roster_id)))


@app.put("/rosters/{roster_id}/shifts")
def save_shift(roster_id: str, req: ShiftInput):
    """Insert a shift, or replace the one with the same id."""
    return _roster_view(_get_session().save_shift(roster_id, _to_shift(req)))


@app.delete("/rosters/{roster_id}/shifts/{shift_id}")
def remove_shift(roster_id: str, shift_id: str):
    return _roster_view(_get_session().remove_shift(roster_id, shift_id))


@app.delete("/rosters/{roster_id}")
def delete_roster(roster_id: str):
    _get_session().delete_roster(roster_id)
    return {"status": "deleted"}


@app.get("/rosters/{roster_id}/stats")
def roster_stats(roster_id: str):
    return _get_session().get_roster_stats(roster_id).to_dict()


@app.get("/rosters/{roster_id}/timeline")
def roster_timeline(roster_id: str):
    """One row per (area, section) of the roster's location."""
    session = _get_session()
    roster = session.get_roster(roster_id)
    location = selectors.find_location(session.state, roster.location_id)
    if location is None:
        raise HTTPException(status_code=404, detail="Roster location no longer exists")
    rows = selectors.shifts_by_section(roster, location)
    return [
        {
            "area_id": row.area_id,
            "area_name": row.area_name,
            "section": row.section,
            "shifts": [s.to_dict() for s in row.shifts],
        }
        for row in rows
    ]


# -- Health views -----------------------------------------------------------


@app.get("/diagnostics")
def diagnostics():
    return _get_session().get_diagnostics()


@app.get("/metrics")
def metrics():
    return _get_session().get_metrics().to_dict()


@app.post("/demo", status_code=201)
def generate_demo(req: DemoRequest):
    """Seed a sample venue, staff and daily rosters into the session."""
    try:
        template = get_template(req.template)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc.args[0]))

    spec = DemoSpec(
        start_date=req.start_date or date.today().isoformat(),
        days=req.days,
        staff_count=req.staff_count,
        shifts_per_day=req.shifts_per_day,
    )
    seed = DEMO_SEED if req.seed is None else req.seed
    try:
        summary = seed_demo(_get_session(), template, spec, seed)
    except GeneratorInvariantError as exc:
        logger.error("demo generation failed: template=%s seed=%s: %s", req.template, seed, exc)
        raise HTTPException(status_code=400, detail=f"Generation failed: {exc}")
    return summary
