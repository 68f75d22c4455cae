from typing import Annotated, cast

from fastapi import Depends, Query, Request

from mflix.app import App
from mflix.core.modules.catalog.models import Page


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


def get_page(
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum documents to return")] = 10,
    offset: Annotated[int, Query(ge=0, description="Number of documents to skip")] = 0,
) -> Page:
    return Page(limit=limit, offset=offset)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
PageDep = Annotated[Page, Depends(get_page)]
