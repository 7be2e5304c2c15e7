"""
Product routes.

Create, update and delete go through the Auth Gate and the Role Gate; every
read, including search and the shop filters, is public. Photos and checkout
are not served here.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront.api.categories import get_category_store
from storefront.auth import AuthContext, require_admin
from storefront.core.models import Product
from storefront.integrations.sentry import capture_exception
from storefront.services.categories import CategoryStore
from storefront.services.products import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product", tags=["product"])


def get_product_store(request: Request) -> ProductStore:
    return request.app.state.products


class ProductRequest(BaseModel):
    name: str = ""
    description: str = ""
    price: float | None = None
    category: str = ""
    quantity: int | None = None
    shipping: bool | None = None

    def missing_field(self) -> str | None:
        """Message for the first required field that is absent, if any."""
        if not self.name:
            return "Name is Required"
        if not self.description:
            return "Description is Required"
        if self.price is None:
            return "Price is Required"
        if not self.category:
            return "Category is Required"
        if self.quantity is None:
            return "Quantity is Required"
        return None


class FilterRequest(BaseModel):
    checked: list[str] = []
    radio: list[float] = []


def _failure(status_code: int, message: str, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": str(error)},
    )


def _respond(status_code: int, **body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


async def _with_categories(
    categories: CategoryStore, products: list[Product]
) -> list[dict[str, Any]]:
    """Public views with the category populated, as the shop pages show them."""
    views = {}
    for category_id in {p.category for p in products}:
        category = await categories.get(category_id)
        views[category_id] = category.public() if category else None
    return [p.public(views[p.category]) for p in products]


# =============================================================================
# Admin
# =============================================================================


@router.post("/create-product")
async def create_product(
    data: ProductRequest,
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    missing = data.missing_field()
    if missing:
        return _respond(400, error=missing)

    try:
        if await products.get_by_name(data.name):
            return _respond(200, success=False, message="Product Already Exists")
        product = await products.create(
            name=data.name,
            description=data.description,
            price=data.price,
            category=data.category,
            quantity=data.quantity,
            shipping=data.shipping,
        )
    except Exception as e:
        capture_exception(e, route="create-product")
        return _failure(500, "Error in crearing product", e)

    return _respond(
        201,
        success=True,
        message="Product Created Successfully",
        products=product.public(),
    )


@router.put("/update-product/{product_id}")
async def update_product(
    product_id: str,
    data: ProductRequest,
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    """Replace a product's fields. The name must stay unique."""
    missing = data.missing_field()
    if missing:
        return _respond(400, error=missing)

    try:
        existing = await products.get_by_name(data.name)
        if existing and existing.id != product_id:
            return _respond(
                409, success=False, message="Another product with this name already exists"
            )
        product = await products.update(
            product_id,
            name=data.name,
            description=data.description,
            price=data.price,
            category=data.category,
            quantity=data.quantity,
            shipping=data.shipping,
        )
    except Exception as e:
        capture_exception(e, route="update-product")
        return _failure(500, "Error in Update product", e)

    if product is None:
        return _respond(404, success=False, message="Product not found")

    return _respond(
        201,
        success=True,
        message="Product Updated Successfully",
        products=product.public(),
    )


@router.delete("/delete-product/{product_id}")
async def delete_product(
    product_id: str,
    ctx: AuthContext = Depends(require_admin),
    products: ProductStore = Depends(get_product_store),
):
    try:
        if not await products.delete(product_id):
            return _respond(404, success=False, message="Product not found")
    except Exception as e:
        capture_exception(e, route="delete-product")
        return _failure(500, "Error while deleting product", e)

    logger.info(f"Product {product_id} deleted by {ctx.subject_id}")
    return _respond(200, success=True, message="Product Deleted successfully")


# =============================================================================
# Public
# =============================================================================


@router.get("/get-product")
async def list_products(
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """The newest products for the home page."""
    try:
        latest = await products.latest()
        views = await _with_categories(categories, latest)
    except Exception as e:
        capture_exception(e, route="get-product")
        return _failure(500, "Erorr in getting products", e)

    return {
        "success": True,
        "total": len(views),
        "message": "All Products",
        "products": views,
    }


@router.get("/get-product/{slug}")
async def single_product(
    slug: str,
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    try:
        product = await products.get_by_slug(slug)
        if product is None:
            return _respond(404, success=False, message="Product not found")
        view = (await _with_categories(categories, [product]))[0]
    except Exception as e:
        capture_exception(e, route="single-product")
        return _failure(500, "Eror while getitng single product", e)

    return {"success": True, "message": "Single Product Fetched", "product": view}


@router.post("/product-filters")
async def filter_products(
    data: FilterRequest,
    products: ProductStore = Depends(get_product_store),
):
    """Filter by any of the checked categories and a [min, max] price range."""
    try:
        matches = await products.filter(data.checked, data.radio)
    except Exception as e:
        capture_exception(e, route="product-filters")
        return _failure(400, "Error WHile Filtering Products", e)

    return {"success": True, "products": [p.public() for p in matches]}


@router.get("/product-count")
async def count_products(products: ProductStore = Depends(get_product_store)):
    try:
        total = await products.count()
    except Exception as e:
        capture_exception(e, route="product-count")
        return _failure(400, "Error in product count", e)

    return {"success": True, "total": total}


@router.get("/product-list/{page}")
async def product_page(page: int, products: ProductStore = Depends(get_product_store)):
    try:
        listed = await products.page(page)
    except Exception as e:
        capture_exception(e, route="product-list")
        return _failure(400, "error in per page ctrl", e)

    return {"success": True, "products": [p.public() for p in listed]}


@router.get("/search/{keyword}")
async def search_products(keyword: str, products: ProductStore = Depends(get_product_store)):
    try:
        results = await products.search(keyword)
    except Exception as e:
        capture_exception(e, route="search")
        return _failure(400, "Error In Search Product API", e)

    return {"success": True, "results": [p.public() for p in results]}


@router.get("/related-product/{product_id}/{category_id}")
async def related_products(
    product_id: str,
    category_id: str,
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    try:
        related = await products.related(product_id, category_id)
        views = await _with_categories(categories, related)
    except Exception as e:
        capture_exception(e, route="related-product")
        return _failure(400, "error while geting related product", e)

    return {"success": True, "products": views}


@router.get("/product-category/{slug}")
async def products_in_category(
    slug: str,
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """Products of the category with this slug. An unknown slug lists nothing."""
    try:
        category = await categories.get_by_slug(slug)
        found = await products.in_category(category.id) if category else []
        views = await _with_categories(categories, found)
    except Exception as e:
        capture_exception(e, route="product-category")
        return _failure(400, "Error While Getting products", e)

    return {
        "success": True,
        "category": category.public() if category else None,
        "products": views,
    }
