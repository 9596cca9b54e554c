# tests/utils/customer.py

from sqlalchemy.orm import Session
from faker import Faker

from bolerie import crud
from bolerie.models import Customer
from bolerie.schemas import CustomerCreate

fake = Faker("pt_BR")


def create_random_customer(db: Session, *, branch_id: int, loyalty_points: int = 0) -> Customer:
    customer_in = CustomerCreate(
        name=fake.name(),
        email=fake.unique.email(),
        phone=fake.msisdn(),
        loyalty_points=loyalty_points,
    )
    return crud.customer.create(db, obj_in=customer_in, branch_id=branch_id)
