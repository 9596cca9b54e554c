# bolerie/models.py

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DECIMAL, DateTime, Date, JSON,
    ForeignKey, Enum, Table, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


# --- ENUMS ---

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    OWNER = "owner"


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SaleStatus(str, enum.Enum):
    COMPLETED = "completed"
    # Reservados para uso futuro: o checkout padrão só gera vendas concluídas
    PENDING = "pending"
    CANCELLED = "cancelled"


class MovementType(str, enum.Enum):
    ENTRADA = "entrada"
    SAIDA = "saída"


class NotificationType(str, enum.Enum):
    RESERVATION = "reservation"
    INVENTORY = "inventory"
    CUSTOMER = "customer"
    SYSTEM = "system"


class PrinterType(str, enum.Enum):
    THERMAL = "thermal"
    POS = "pos"
    A4 = "a4"


# --- FILIAIS E USUÁRIOS ---

user_branches = Table(
    "user_branches",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("branch_id", Integer, ForeignKey("branches.id"), primary_key=True),
)


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    manager = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.EMPLOYEE)
    phone = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Donos (owners) enxergam todas as filiais; os demais apenas as associadas aqui
    branches = relationship("Branch", secondary=user_branches)

    @property
    def branch_ids(self) -> list[int]:
        return [branch.id for branch in self.branches]


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer)
    hire_date = Column(Date)
    salary = Column(DECIMAL(10, 2), nullable=False, default=0)
    payment_day = Column(Integer)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.EMPLOYEE)
    position = Column(String(100))  # cargo: confeiteira, atendente...
    address = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# --- CATÁLOGO ---

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Size(Base):
    __tablename__ = "sizes"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    reference_value = Column(DECIMAL(10, 2))

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String)
    price = Column(DECIMAL(10, 2), nullable=False)
    cost_price = Column(DECIMAL(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(100), index=True)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # A ordem dos tamanhos faz parte do dado (P, M, G...)
    sizes = relationship(
        "ProductSize",
        back_populates="product",
        order_by="ProductSize.position",
        cascade="all, delete-orphan",
    )


class ProductSize(Base):
    __tablename__ = "product_sizes"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="sizes")


# --- ESTOQUE DE INGREDIENTES ---

class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(DECIMAL(12, 3), nullable=False, default=0)
    min_quantity = Column(DECIMAL(12, 3), nullable=False, default=0)
    unit = Column(String(20), nullable=False, default="un")
    cost = Column(DECIMAL(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    history = relationship(
        "IngredientMovement",
        back_populates="ingredient",
        order_by="IngredientMovement.id",
    )


class IngredientMovement(Base):
    """Lançamento do histórico do ingrediente. Apenas inserção, nunca alterado."""
    __tablename__ = "ingredient_movements"

    id = Column(Integer, primary_key=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False, index=True)
    type = Column(Enum(MovementType), nullable=False)
    quantity = Column(DECIMAL(12, 3), nullable=False)  # sempre positiva
    reason = Column(String(255), nullable=False, default="")
    date = Column(DateTime, nullable=False, default=datetime.now)

    ingredient = relationship("Ingredient", back_populates="history")


# --- CLIENTES E FIDELIDADE ---

class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255))
    phone = Column(String(50))
    address = Column(String(255))
    notes = Column(String)
    loyalty_points = Column(Integer, nullable=False, default=0)
    loyalty_level_id = Column(Integer, ForeignKey("loyalty_levels.id", ondelete="SET NULL"))
    total_orders = Column(Integer, nullable=False, default=0)
    last_order_date = Column(DateTime)
    is_active = Column(Boolean, nullable=False, default=True)

    # Horário local, como as demais datas do negócio (contagem de novos clientes)
    created_at = Column(DateTime, default=datetime.now, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    loyalty_level = relationship("LoyaltyLevel")


class LoyaltyLevel(Base):
    __tablename__ = "loyalty_levels"
    __table_args__ = (
        UniqueConstraint("branch_id", "minimum_points", name="uq_loyalty_levels_branch_points"),
    )

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    minimum_points = Column(Integer, nullable=False, default=0)
    discount_percentage = Column(DECIMAL(5, 2), nullable=False, default=0)
    benefits = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class LoyaltyReward(Base):
    __tablename__ = "loyalty_rewards"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=False, default="")
    points_required = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class LoyaltyRedemption(Base):
    """Resgate de recompensa. Imutável depois de criado."""
    __tablename__ = "loyalty_redemptions"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    # Sem FK: a recompensa pode ser excluída, o resgate guarda o nome
    reward_id = Column(Integer, nullable=False)
    reward_name = Column(String(255), nullable=False)
    points_redeemed = Column(Integer, nullable=False)
    redeemed_at = Column(DateTime, nullable=False, default=datetime.now)


# --- RESERVAS (ENCOMENDAS) ---

class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50))
    customer_email = Column(String(255))
    customer_address = Column(String(255))
    date = Column(DateTime, nullable=False, index=True)
    delivery_date = Column(DateTime, nullable=False)
    status = Column(Enum(ReservationStatus), nullable=False, default=ReservationStatus.PENDING)
    total = Column(DECIMAL(10, 2), nullable=False, default=0)
    payment_method = Column(String(50))
    has_advance_payment = Column(Boolean, nullable=False, default=False)
    advance_amount = Column(DECIMAL(10, 2), nullable=False, default=0)
    advance_payment_method = Column(String(50))
    remaining_amount = Column(DECIMAL(10, 2), nullable=False, default=0)
    notes = Column(String)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "ReservationItem",
        back_populates="reservation",
        order_by="ReservationItem.position",
        cascade="all, delete-orphan",
    )


class ReservationItem(Base):
    __tablename__ = "reservation_items"

    id = Column(Integer, primary_key=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    size = Column(String(100))

    reservation = relationship("Reservation", back_populates="items")


# --- VENDAS ---

class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True)
    customer_name = Column(String(255))
    total = Column(DECIMAL(10, 2), nullable=False)
    total_cost = Column(DECIMAL(10, 2), nullable=False, default=0)
    profit = Column(DECIMAL(10, 2), nullable=False, default=0)
    payment_method = Column(String(50), nullable=False)
    status = Column(Enum(SaleStatus), nullable=False, default=SaleStatus.COMPLETED)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "SaleItem",
        back_populates="sale",
        order_by="SaleItem.id",
        cascade="all, delete-orphan",
    )


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    size = Column(String(100))
    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    cost_price = Column(DECIMAL(10, 2), nullable=False, default=0)
    total = Column(DECIMAL(10, 2), nullable=False)
    total_cost = Column(DECIMAL(10, 2), nullable=False, default=0)

    sale = relationship("Sale", back_populates="items")


# --- CONFIGURAÇÕES E NOTIFICAÇÕES ---

class StoreSettings(Base):
    __tablename__ = "store_settings"

    id = Column(Integer, primary_key=True)
    # NULL = configuração global
    branch_id = Column(Integer, ForeignKey("branches.id"), unique=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    logo = Column(String(1024))
    theme = Column(String(20), nullable=False, default="light")
    printer_type = Column(Enum(PrinterType), nullable=False, default=PrinterType.THERMAL)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(String, nullable=False)
    type = Column(Enum(NotificationType), nullable=False, default=NotificationType.SYSTEM)
    read = Column(Boolean, nullable=False, default=False)
    link = Column(String(255))
    # Lembretes agendados só aparecem a partir deste momento
    scheduled_for = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
