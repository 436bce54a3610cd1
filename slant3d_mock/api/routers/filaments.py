from fastapi import APIRouter

from slant3d_mock.domain.filaments import get_filaments

router = APIRouter(prefix="/api/filament", tags=["filament"])


@router.get("")
@router.get("/", include_in_schema=False)
async def list_filaments():
    """Available filament colours and profiles. Public."""
    return {"filaments": get_filaments()}
