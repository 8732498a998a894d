"""
Product payload validation.

Every rule runs even after an earlier one fails, so a single 400 response
lists all the problems with the payload.
"""

import json
import math
from typing import Any, List

from fastapi import Request

from .errors import invalid
from .models import ProductIn

_MISSING = object()


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a number for our purposes
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def product_errors(payload: Any) -> List[str]:
    """Return every rule violation in the payload, in field order."""
    if not isinstance(payload, dict):
        payload = {}

    name = payload.get("name", _MISSING)
    description = payload.get("description", _MISSING)
    price = payload.get("price", _MISSING)
    category = payload.get("category", _MISSING)
    in_stock = payload.get("inStock", _MISSING)

    errors = []
    if not _is_text(name) or not name.strip():
        errors.append("Name is required and must be a non-empty string")
    # an empty description is allowed, only type and presence are checked
    if not _is_text(description):
        errors.append("Description is required and must be a string")
    if not _is_number(price) or price < 0:
        errors.append("Price is required and must be a non-negative number")
    if not _is_text(category):
        errors.append("Category is required and must be a string")
    if not isinstance(in_stock, bool):
        errors.append("inStock is required and must be a boolean")
    return errors


def validate_product(payload: Any) -> ProductIn:
    errors = product_errors(payload)
    if errors:
        raise invalid("; ".join(errors))
    return ProductIn(
        name=payload["name"].strip(),
        description=payload["description"].strip(),
        price=float(payload["price"]),
        category=payload["category"].strip(),
        in_stock=payload["inStock"],
    )


async def validated_product(request: Request) -> ProductIn:
    """Validation stage: parse the JSON body and check it."""
    raw = await request.body()
    if not raw:
        payload = {}
    else:
        try:
            payload = json.loads(raw)
        except ValueError:
            raise invalid("Request body must be valid JSON")
    return validate_product(payload)
