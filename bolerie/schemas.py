from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .models import (
    UserRole, ReservationStatus, SaleStatus, MovementType, NotificationType, PrinterType
)
from .services.calculations import classify_stock, legacy_fields


class PartialUpdate(BaseModel):
    """
    Base das atualizações parciais: todo campo pode ser omitido, mas os
    listados em `not_null_fields` não aceitam `null` explícito (colunas NOT NULL).
    """
    not_null_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for field in self.not_null_fields:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} may not be null")
        return self


# --- Autenticação ---

class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: str | None = None


# --- Filiais ---

class BranchBase(BaseModel):
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    manager: str = ""


class BranchCreate(BranchBase):
    is_active: bool = True


class BranchUpdate(PartialUpdate):
    not_null_fields = ("name", "address", "phone", "email", "manager", "is_active")

    name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    manager: str | None = None
    is_active: bool | None = None


class Branch(BranchBase):
    id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# --- Usuários ---

class UserBase(BaseModel):
    email: str
    name: str = ""
    phone: str | None = None


class UserCreate(UserBase):
    password: str = Field(
        ...,
        min_length=8,
        max_length=72  # limite do bcrypt
    )
    role: UserRole = UserRole.EMPLOYEE
    branch_ids: List[int] = []


class UserUpdate(PartialUpdate):
    not_null_fields = ("name", "role", "is_active")

    name: str | None = None
    phone: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None


# Schema para ler/retornar um usuário (NUNCA retorne a senha)
class User(UserBase):
    id: int
    role: UserRole
    is_active: bool
    branch_ids: List[int] = []

    model_config = ConfigDict(from_attributes=True)


# --- Funcionários ---

class EmployeeBase(BaseModel):
    name: str
    age: int | None = Field(None, gt=0)
    hire_date: date | None = None
    salary: Decimal = Field(Decimal("0"), ge=0)
    payment_day: int | None = Field(None, ge=1, le=31)
    role: UserRole = UserRole.EMPLOYEE
    position: str | None = None
    address: str | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(PartialUpdate):
    not_null_fields = ("name", "salary", "role", "is_active")

    name: str | None = None
    age: int | None = Field(None, gt=0)
    hire_date: date | None = None
    salary: Decimal | None = Field(None, ge=0)
    payment_day: int | None = Field(None, ge=1, le=31)
    role: UserRole | None = None
    position: str | None = None
    address: str | None = None
    is_active: bool | None = None


class Employee(EmployeeBase):
    id: int
    branch_id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# --- Categorias e Tamanhos ---

class CategoryCreate(BaseModel):
    name: str


class CategoryUpdate(PartialUpdate):
    not_null_fields = ("name",)

    name: str | None = None


class Category(CategoryCreate):
    id: int
    branch_id: int

    model_config = ConfigDict(from_attributes=True)


class SizeCreate(BaseModel):
    name: str
    reference_value: Decimal | None = None


class SizeUpdate(PartialUpdate):
    not_null_fields = ("name",)

    name: str | None = None
    reference_value: Decimal | None = None


class Size(SizeCreate):
    id: int
    branch_id: int

    model_config = ConfigDict(from_attributes=True)


# --- Produtos ---

class ProductSize(BaseModel):
    name: str
    price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    cost_price: Decimal = Field(Decimal("0"), ge=0)
    stock: int = Field(0, ge=0)
    category: str | None = None
    sizes: List[ProductSize] = []


class ProductUpdate(PartialUpdate):
    not_null_fields = ("name", "price", "cost_price", "stock")

    name: str | None = None
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    cost_price: Decimal | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    category: str | None = None
    # None = não mexe nos tamanhos; lista (mesmo vazia) = substitui
    sizes: List[ProductSize] | None = None


class Product(BaseModel):
    id: int
    branch_id: int
    name: str
    description: str | None = None
    price: Decimal
    cost_price: Decimal
    stock: int
    category: str | None = None
    sizes: List[ProductSize] = []
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# --- Ingredientes ---

class IngredientCreate(BaseModel):
    name: str
    quantity: Decimal = Field(Decimal("0"), ge=0)
    min_quantity: Decimal = Field(Decimal("0"), ge=0)
    unit: str = "un"
    cost: Decimal = Field(Decimal("0"), ge=0)


class IngredientUpdate(PartialUpdate):
    not_null_fields = ("name", "min_quantity", "unit", "cost")

    # A quantidade só muda pelo ajuste de estoque (que registra o histórico)
    name: str | None = None
    min_quantity: Decimal | None = Field(None, ge=0)
    unit: str | None = None
    cost: Decimal | None = Field(None, ge=0)


class Ingredient(BaseModel):
    id: int
    branch_id: int
    name: str
    quantity: Decimal
    min_quantity: Decimal
    unit: str
    cost: Decimal

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def status(self) -> str:
        return classify_stock(self.quantity, self.min_quantity)


class IngredientAdjust(BaseModel):
    delta: Decimal = Field(..., description="Positive for entrada, negative for saída")
    reason: str = ""


class IngredientMovement(BaseModel):
    id: int
    ingredient_id: int
    type: MovementType
    quantity: Decimal
    reason: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Clientes ---

class CustomerBase(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class CustomerCreate(CustomerBase):
    loyalty_points: int = Field(0, ge=0)


class CustomerUpdate(PartialUpdate):
    not_null_fields = ("name",)

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class Customer(CustomerBase):
    id: int
    branch_id: int
    loyalty_points: int
    loyalty_level_id: int | None = None
    total_orders: int
    last_order_date: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# --- Fidelidade ---

class LoyaltyLevelCreate(BaseModel):
    name: str
    minimum_points: int = Field(..., ge=0)
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    benefits: List[str] = []


class LoyaltyLevelUpdate(PartialUpdate):
    not_null_fields = ("name", "minimum_points", "discount_percentage", "benefits")

    name: str | None = None
    minimum_points: int | None = Field(None, ge=0)
    discount_percentage: Decimal | None = Field(None, ge=0, le=100)
    benefits: List[str] | None = None


class LoyaltyLevel(LoyaltyLevelCreate):
    id: int
    branch_id: int

    model_config = ConfigDict(from_attributes=True)


class LoyaltyRewardCreate(BaseModel):
    name: str
    description: str = ""
    points_required: int = Field(..., gt=0)
    is_active: bool = True


class LoyaltyRewardUpdate(PartialUpdate):
    not_null_fields = ("name", "description", "points_required", "is_active")

    name: str | None = None
    description: str | None = None
    points_required: int | None = Field(None, gt=0)
    is_active: bool | None = None


class LoyaltyReward(LoyaltyRewardCreate):
    id: int
    branch_id: int

    model_config = ConfigDict(from_attributes=True)


class RedeemRequest(BaseModel):
    reward_id: int


class LoyaltyRedemption(BaseModel):
    id: int
    customer_id: int
    reward_id: int
    reward_name: str
    points_redeemed: int
    redeemed_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Reservas ---

class ReservationItemBase(BaseModel):
    product_id: int
    product_name: str
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    size: str | None = None


class ReservationItem(ReservationItemBase):
    model_config = ConfigDict(from_attributes=True)


class ReservationCreate(BaseModel):
    customer_id: int | None = None
    customer_name: str
    customer_phone: str | None = None
    customer_email: str | None = None
    customer_address: str | None = None
    date: datetime
    delivery_date: datetime
    items: List[ReservationItemBase] = Field(..., min_length=1)
    payment_method: str | None = None
    has_advance_payment: bool = False
    advance_amount: Decimal = Field(Decimal("0"), ge=0)
    advance_payment_method: str | None = None
    notes: str | None = None


class ReservationUpdate(PartialUpdate):
    not_null_fields = ("customer_name", "date", "delivery_date", "has_advance_payment", "advance_amount")

    customer_id: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    customer_address: str | None = None
    date: datetime | None = None
    delivery_date: datetime | None = None
    items: List[ReservationItemBase] | None = Field(None, min_length=1)
    payment_method: str | None = None
    has_advance_payment: bool | None = None
    advance_amount: Decimal | None = Field(None, ge=0)
    advance_payment_method: str | None = None
    notes: str | None = None


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class Reservation(BaseModel):
    id: int
    branch_id: int
    customer_id: int | None = None
    customer_name: str
    customer_phone: str | None = None
    customer_email: str | None = None
    customer_address: str | None = None
    date: datetime
    delivery_date: datetime
    status: ReservationStatus
    items: List[ReservationItem] = []
    total: Decimal
    payment_method: str | None = None
    has_advance_payment: bool
    advance_amount: Decimal
    advance_payment_method: str | None = None
    remaining_amount: Decimal
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)

    # Campos legados, sempre derivados de `items`
    @computed_field
    @property
    def product_id(self) -> Optional[int]:
        return legacy_fields(self.items)["product_id"]

    @computed_field
    @property
    def product_name(self) -> str:
        return legacy_fields(self.items)["product_name"]

    @computed_field
    @property
    def quantity(self) -> int:
        return legacy_fields(self.items)["quantity"]

    @computed_field
    @property
    def price(self) -> Decimal:
        return legacy_fields(self.items)["price"]


# --- Vendas ---

class SaleItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0, description="Quantity must be greater than zero")
    size: str | None = None


class SaleCreate(BaseModel):
    items: List[SaleItemIn] = Field(..., min_length=1)
    # Se omitido, é a soma dos itens. Pode vir menor (desconto de fidelidade).
    total: Decimal | None = Field(None, ge=0)
    payment_method: str = "não especificado"
    customer_id: int | None = None


class SaleItem(BaseModel):
    product_id: int
    name: str
    size: str | None = None
    quantity: int
    price: Decimal
    cost_price: Decimal
    total: Decimal
    total_cost: Decimal

    model_config = ConfigDict(from_attributes=True)


class Sale(BaseModel):
    id: int
    branch_id: int
    items: List[SaleItem] = []
    total: Decimal
    total_cost: Decimal
    profit: Decimal
    payment_method: str
    status: SaleStatus
    customer_id: int | None = None
    customer_name: str | None = None
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class SaleOutcome(BaseModel):
    sale: Sale
    points_awarded: int = 0
    stock_warnings: List[str] = []


class CustomerOrder(BaseModel):
    id: int
    date: datetime
    items: List[SaleItem] = []
    total: Decimal
    payment_method: str
    status: SaleStatus

    model_config = ConfigDict(from_attributes=True)


class CustomerDetail(Customer):
    order_history: List[CustomerOrder] = []


# --- Configurações da loja ---

class StoreSettingsIn(BaseModel):
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    logo: str | None = None
    theme: str = "light"
    printer_type: PrinterType = PrinterType.THERMAL


class StoreSettings(StoreSettingsIn):
    branch_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


# --- Notificações ---

class NotificationCreate(BaseModel):
    user_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    link: str | None = None
    scheduled_for: datetime | None = None


class Notification(BaseModel):
    id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    link: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Relatórios ---

class PeriodSummary(BaseModel):
    period_start: date
    label: str
    total: Decimal
    count: int
    average_ticket: Decimal


class PaymentMethodSummary(BaseModel):
    method: str
    total: Decimal
    count: int
    percentage: float


class SalesReport(BaseModel):
    periods: List[PeriodSummary]
    by_payment_method: List[PaymentMethodSummary]
    best_periods: List[PeriodSummary]


class TotalsSummary(BaseModel):
    total: Decimal
    count: int
    average_ticket: Decimal


class DailyComparison(BaseModel):
    """Valor de hoje contra o de ontem (variação em %; 0 quando ontem foi zero)."""
    today: Decimal
    yesterday: Decimal
    percent_change: float


class CountComparison(BaseModel):
    today: int
    yesterday: int
    percent_change: float


class SalesDashboardSummary(BaseModel):
    daily_sales: TotalsSummary
    weekly_sales: TotalsSummary
    monthly_sales: TotalsSummary
    sales_by_payment_method: List[PaymentMethodSummary]
    monthly_profit: Decimal
    sales_vs_yesterday: DailyComparison
    items_sold: CountComparison
    new_customers: CountComparison


class StockEntry(BaseModel):
    product_id: int
    name: str
    stock: int


class BestSeller(BaseModel):
    product_id: int
    name: str
    quantity: int
    revenue: Decimal


class InventoryReport(BaseModel):
    low_stock: List[StockEntry]
    high_stock: List[StockEntry]
    best_selling: List[BestSeller]


class ReservationStatusSummary(BaseModel):
    total: int
    pending: int
    completed: int
    cancelled: int
    pending_value: Decimal


class WeekdayCount(BaseModel):
    weekday: str
    count: int


class ReservedProduct(BaseModel):
    name: str
    quantity: int
    value: Decimal


class ReservationReport(BaseModel):
    status: ReservationStatusSummary
    by_weekday: List[WeekdayCount]
    top_products: List[ReservedProduct]
