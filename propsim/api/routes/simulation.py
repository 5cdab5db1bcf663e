"""Simulation routes: the primary API entry point."""

from dataclasses import asdict

from fastapi import APIRouter

from propsim.api.schemas import (
    AcquisitionResponse,
    AssumptionDetailResponse,
    DefaultsResponse,
    DraftSchema,
    ExitResponse,
    ScenarioResponse,
    SimulationResponse,
    YearlyResultResponse,
)
from propsim.engine.defaults import apply_estimated_defaults_with_manifest, build_configuration
from propsim.engine.simulation import simulate_cached
from propsim.models.configuration import AgeBandedOccupancy, EventItem, FixedItem, RateItem, RepairEvent
from propsim.models.draft import ConfigurationDraft
from propsim.models.manifest import AssumptionManifest
from propsim.models.results import ExitSummary, SimulationResult

router = APIRouter(prefix="/api/v1", tags=["simulation"])


def _to_draft(req: DraftSchema) -> ConfigurationDraft:
    """Convert the request schema into the engine's draft dataclass."""
    nested = {
        "occupancy_bands", "oer_rate_items", "oer_fixed_items", "oer_event_items", "repair_events",
    }
    fields = req.model_dump(exclude=nested)
    bands = req.occupancy_bands
    return ConfigurationDraft(
        **fields,
        occupancy_bands=AgeBandedOccupancy(**bands.model_dump()) if bands is not None else None,
        oer_rate_items=tuple(RateItem(**i.model_dump()) for i in req.oer_rate_items),
        oer_fixed_items=tuple(FixedItem(**i.model_dump()) for i in req.oer_fixed_items),
        oer_event_items=tuple(EventItem(**i.model_dump()) for i in req.oer_event_items),
        repair_events=tuple(RepairEvent(**e.model_dump()) for e in req.repair_events),
    )


def _manifest_to_response(manifest: AssumptionManifest) -> list[AssumptionDetailResponse]:
    return [AssumptionDetailResponse.model_validate(d) for d in manifest.details.values()]


def _exit_to_response(summary: ExitSummary | None) -> ExitResponse | None:
    if summary is None:
        return None
    return ExitResponse.model_validate(summary)


def _result_to_response(result: SimulationResult, manifest: AssumptionManifest) -> SimulationResponse:
    """Convert engine SimulationResult to API response."""
    scenario = None
    if result.scenario is not None:
        scenario = ScenarioResponse(
            yearly=[YearlyResultResponse.model_validate(y) for y in result.scenario.yearly],
            exit=_exit_to_response(result.scenario.exit),
            dead_cross_year=result.scenario.dead_cross_year,
            minimum_dscr=result.scenario.minimum_dscr,
        )

    return SimulationResponse(
        acquisition=AcquisitionResponse.model_validate(result.acquisition),
        baseline=[YearlyResultResponse.model_validate(y) for y in result.baseline],
        scenario=scenario,
        exit=_exit_to_response(result.exit),
        dead_cross_year=result.dead_cross_year,
        minimum_dscr=result.minimum_dscr,
        auto_filled=_manifest_to_response(manifest),
    )


@router.post("/defaults", response_model=DefaultsResponse)
async def estimate_defaults(req: DraftSchema):
    """Fill every ungathered field and report what was estimated."""
    defaulted, manifest = apply_estimated_defaults_with_manifest(_to_draft(req))
    return DefaultsResponse(
        draft=DraftSchema.model_validate(asdict(defaulted)),
        auto_filled=_manifest_to_response(manifest),
    )


@router.post("/simulate", response_model=SimulationResponse)
async def run_simulation(req: DraftSchema):
    """Draft -> defaults -> configuration -> full simulation."""
    defaulted, manifest = apply_estimated_defaults_with_manifest(_to_draft(req))
    config = build_configuration(defaulted)
    result = simulate_cached(config)
    return _result_to_response(result, manifest)
