# bolerie/crud/crud_catalog.py
# Cadastros simples do catálogo e da equipe.

from .base import CRUDBase
from ..models import Category, Employee, Size
from ..schemas import (
    CategoryCreate, CategoryUpdate, EmployeeCreate, EmployeeUpdate, SizeCreate, SizeUpdate
)


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):
    soft_delete_field = None
    order_by = "name"


class CRUDSize(CRUDBase[Size, SizeCreate, SizeUpdate]):
    soft_delete_field = None
    order_by = "name"


class CRUDEmployee(CRUDBase[Employee, EmployeeCreate, EmployeeUpdate]):
    order_by = "name"


category = CRUDCategory(Category)
size = CRUDSize(Size)
employee = CRUDEmployee(Employee)
