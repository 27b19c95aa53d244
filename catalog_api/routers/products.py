from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from catalog_api.core.tokens import Claims
from catalog_api.routers.deps import get_product_service, require_admin, require_token
from catalog_api.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(request: Request, svc: ProductService = Depends(get_product_service)):
    params = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    return [p.to_public() for p in svc.list_products(params)]


@router.get("/{product_id}")
def get_product(product_id: str, svc: ProductService = Depends(get_product_service)):
    return svc.get_product(product_id).to_public()


@router.post("", status_code=201)
def create_products(
    payloads: list[dict[str, Any]] = Body(...),
    svc: ProductService = Depends(get_product_service),
    _claims: Claims = Depends(require_token),
):
    return svc.create_products(payloads)


@router.put("/{product_id}")
def update_product(
    product_id: str,
    patch: dict[str, Any] = Body(...),
    svc: ProductService = Depends(get_product_service),
    _claims: Claims = Depends(require_token),
):
    return svc.update_product(product_id, patch).to_public()


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    svc: ProductService = Depends(get_product_service),
    _claims: Claims = Depends(require_admin),
):
    return svc.delete_product(product_id)
