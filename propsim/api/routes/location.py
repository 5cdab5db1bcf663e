"""Location routes: address lookup with non-fatal failures."""

from fastapi import APIRouter, HTTPException

from propsim.api.schemas import LocationRequest, LocationResponse
from propsim.data.geocode import try_geocode

router = APIRouter(prefix="/api/v1", tags=["location"])


@router.post("/location", response_model=LocationResponse)
async def locate(req: LocationRequest):
    """Address -> coordinates. A failed lookup is a warning, not an error."""
    if not req.address.strip():
        raise HTTPException(status_code=400, detail="Address must not be blank")

    location = await try_geocode(req.address)
    if location is None:
        return LocationResponse(
            address=req.address,
            warnings=[f"Could not geocode address: {req.address}"],
        )

    return LocationResponse(
        address=req.address,
        matched_address=location.matched_address,
        latitude=location.latitude,
        longitude=location.longitude,
    )
