"""Read-only catalog endpoints aggregating several tables."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from unidir.core.errors import ValidationError
from unidir.runtime.api.dependencies import get_context
from unidir.runtime.context import AppContext

router = APIRouter(tags=["catalog"])


@router.get("/")
async def root() -> dict[str, str]:
    """Welcome message."""
    return {"message": "Welcome to the University API"}


@router.get("/allUniversities")
async def all_universities(
    context: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """List every university."""
    return await context.store.list_universities()


@router.get("/allCourses")
async def all_courses(
    context: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """List every course with its university, requirement and test scores."""
    return await context.store.list_courses()


@router.get("/allUniName")
async def all_university_names(
    context: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """List universities as ``{id, name}`` pairs, name suffixed with the campus."""
    universities = await context.store.list_universities()
    return [
        {"id": row["id"], "name": f"{row['name']}-{row['campus_name']}"}
        for row in universities
    ]


@router.get("/searchCourses")
async def search_courses(
    name: str | None = Query(None, description="Substring of the course name"),
    context: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """Search courses by name."""
    if not name or not name.strip():
        raise ValidationError("Missing course name")
    return await context.store.search_courses(name.strip())
