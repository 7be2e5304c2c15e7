"""
Category routes.

Reads are public; create, update and delete go through the Auth Gate and
the Role Gate.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront.auth import AuthContext, require_admin
from storefront.integrations.sentry import capture_exception
from storefront.services.categories import CategoryStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/category", tags=["category"])


def get_category_store(request: Request) -> CategoryStore:
    return request.app.state.categories


class CategoryRequest(BaseModel):
    name: str = ""


def _failure(status_code: int, message: str, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": str(error)},
    )


def _respond(status_code: int, **body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


# =============================================================================
# Admin
# =============================================================================


@router.post("/create-category")
async def create_category(
    data: CategoryRequest,
    ctx: AuthContext = Depends(require_admin),
    categories: CategoryStore = Depends(get_category_store),
):
    # The admin client treats a missing name as 401; keep it
    if not data.name:
        return _respond(401, message="Name is required")

    try:
        if await categories.get_by_name(data.name):
            return _respond(200, success=False, message="Category Already Exisits")
        category = await categories.create(data.name)
    except Exception as e:
        capture_exception(e, route="create-category")
        return _failure(500, "Error in Category", e)

    return _respond(
        201, success=True, message="new category created", category=category.public()
    )


@router.put("/update-category/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryRequest,
    ctx: AuthContext = Depends(require_admin),
    categories: CategoryStore = Depends(get_category_store),
):
    """Rename a category. An unknown id answers 200 with category=null."""
    if not data.name:
        return _respond(401, message="Name is required")

    try:
        existing = await categories.get_by_name(data.name)
        if existing and existing.id != category_id:
            return _respond(
                200, success=False, message="Category with this name already exists"
            )
        category = await categories.update(category_id, data.name)
    except Exception as e:
        capture_exception(e, route="update-category")
        return _failure(500, "Error while updating category", e)

    return _respond(
        200,
        success=True,
        message="Category Updated Successfully",
        category=category.public() if category else None,
    )


@router.delete("/delete-category/{category_id}")
async def delete_category(
    category_id: str,
    ctx: AuthContext = Depends(require_admin),
    categories: CategoryStore = Depends(get_category_store),
):
    try:
        if await categories.get(category_id) is None:
            return _respond(404, success=False, message="Category not found")
        await categories.delete(category_id)
    except Exception as e:
        capture_exception(e, route="delete-category")
        return _failure(500, "Error while deleting category", e)

    logger.info(f"Category {category_id} deleted by {ctx.subject_id}")
    return _respond(200, success=True, message="Category Deleted Successfully")


# =============================================================================
# Public
# =============================================================================


@router.get("/get-category")
async def list_categories(categories: CategoryStore = Depends(get_category_store)):
    try:
        everything = await categories.list_all()
    except Exception as e:
        capture_exception(e, route="get-category")
        return _failure(500, "Error while getting all categories", e)

    return {
        "success": True,
        "message": "All Categories List",
        "category": [c.public() for c in everything],
    }


@router.get("/single-category/{slug}")
async def single_category(slug: str, categories: CategoryStore = Depends(get_category_store)):
    """Look up by slug. An unknown slug answers 200 with category=null."""
    try:
        category = await categories.get_by_slug(slug)
    except Exception as e:
        capture_exception(e, route="single-category")
        return _failure(500, "Error While getting Single Category", e)

    return {
        "success": True,
        "message": "Get Single Category Successfully",
        "category": category.public() if category else None,
    }
