# tests/unit/test_schemas.py

import pytest
from pydantic import ValidationError

from bolerie.schemas import CustomerUpdate, IngredientUpdate, ProductUpdate, ReservationUpdate


@pytest.mark.parametrize("schema, payload", [
    (ProductUpdate, {"name": None}),
    (ProductUpdate, {"price": None}),
    (CustomerUpdate, {"name": None}),
    (IngredientUpdate, {"unit": None}),
    (ReservationUpdate, {"delivery_date": None}),
])
def test_update_rejects_null_for_not_null_columns(schema, payload):
    with pytest.raises(ValidationError):
        schema(**payload)


def test_update_accepts_null_for_nullable_columns():
    update = ProductUpdate(description=None)

    assert update.model_dump(exclude_unset=True) == {"description": None}


def test_product_sizes_null_still_means_untouched():
    update = ProductUpdate(sizes=None)

    assert update.sizes is None
