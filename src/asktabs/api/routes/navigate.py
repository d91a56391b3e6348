"""Tab navigation endpoint."""

from fastapi import APIRouter

from asktabs.api.deps import NavigationServiceDep
from asktabs.api.schemas import NavigateRequest, NavigateResponse

router = APIRouter()


@router.post("/navigate", response_model=NavigateResponse)
async def navigate(
    body: NavigateRequest, navigation: NavigationServiceDep
) -> NavigateResponse:
    """Focus the tab showing ``url``, else ``tab_id``, else open a new tab."""
    result = await navigation.navigate(body.url, body.tab_id)
    return NavigateResponse(
        success=result.success, tab_id=result.tab_id, error=result.error
    )
