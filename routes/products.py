"""Products blueprint: farmers list produce, anyone can browse."""

from __future__ import annotations

from flask import Blueprint, request

from errors import NotFoundError, ValidationError
from models import db
from models.product import Category, Product
from utils.access_control import current_user, login_required, roles_required
from utils.persistence import commit_or_fail
from utils.request_validation import (
    apply_updates,
    coerce_field,
    parse_json_request,
    to_bool,
    to_optional_int,
    to_positive_decimal,
    to_required_text,
    to_optional_text,
    to_text,
)
from utils.responses import ok

products_bp = Blueprint("products", __name__)

UPDATABLE_FIELDS = {
    "name": to_required_text,
    "description": to_text,
    "price": to_positive_decimal,
    "quantity": to_positive_decimal,
    "unit": to_required_text,
    "category_id": to_optional_int,
    "image": to_text,
    "is_available": to_bool,
}


def _get_owned_product_or_404(product_id: int) -> Product:
    product = Product.query.filter_by(id=product_id, seller_id=current_user().id).first()
    if product is None:
        raise NotFoundError("Product not found or access denied")
    return product


def _check_category(category_id: int | None) -> None:
    if category_id is not None and db.session.get(Category, category_id) is None:
        raise ValidationError("Invalid category")


@products_bp.route("", methods=["GET"])
def list_products():
    """Return available products, newest first."""

    query = Product.query.filter(Product.is_available.is_(True))
    seller_id = request.args.get("seller_id", type=int)
    if seller_id:
        query = query.filter(Product.seller_id == seller_id)

    products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return ok(
        "Products retrieved successfully",
        {"products": [product.to_dict() for product in products], "total": len(products)},
    )


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = Product.query.filter_by(id=product_id, is_available=True).first()
    if product is None:
        raise NotFoundError("Product not found")
    return ok("Product retrieved successfully", {"product": product.to_dict()})


@products_bp.route("", methods=["POST"])
@roles_required("farmer", message="Only farmers can create products")
def create_product():
    data = parse_json_request(request, required_keys=("name", "price", "quantity", "unit"))

    price = coerce_field(data, "price", to_positive_decimal, "Price must be a positive number")
    quantity = coerce_field(
        data, "quantity", to_positive_decimal, "Quantity must be a positive number"
    )
    category_id = coerce_field(data, "category_id", to_optional_int)
    _check_category(category_id)

    product = Product(
        seller_id=current_user().id,
        category_id=category_id,
        name=coerce_field(data, "name", to_text),
        description=coerce_field(data, "description", to_optional_text),
        price=price,
        quantity=quantity,
        unit=coerce_field(data, "unit", to_text),
        image=coerce_field(data, "image", to_optional_text) or None,
        is_available=True,
    )
    db.session.add(product)
    commit_or_fail("Failed to create product")
    return ok("Product created successfully", {"product": product.to_dict()})


@products_bp.route("/<int:product_id>", methods=["PUT"])
@login_required
def update_product(product_id: int):
    product = _get_owned_product_or_404(product_id)
    data = parse_json_request(request)
    apply_updates(product, data, UPDATABLE_FIELDS)
    _check_category(product.category_id)
    commit_or_fail("Failed to update product")
    return ok("Product updated successfully", {"product": product.to_dict()})


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@login_required
def delete_product(product_id: int):
    """Soft delete: the listing disappears from browsing but keeps its history."""

    product = _get_owned_product_or_404(product_id)
    product.is_available = False
    commit_or_fail("Failed to delete product")
    return ok("Product deleted successfully")
