# bolerie/services/loyalty_service.py

import logging
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from .. import models, crud
from ..core.config import settings
from .result import ServiceResult

logger = logging.getLogger(__name__)


DEFAULT_LEVELS = [
    {
        "name": "Bronze",
        "minimum_points": 0,
        "discount_percentage": Decimal("0"),
        "benefits": ["Acumule 1 ponto a cada R$ 10 em compras"],
    },
    {
        "name": "Prata",
        "minimum_points": 100,
        "discount_percentage": Decimal("5"),
        "benefits": ["5% de desconto em todos os produtos", "Bolo de aniversário com 10% de desconto"],
    },
    {
        "name": "Ouro",
        "minimum_points": 300,
        "discount_percentage": Decimal("10"),
        "benefits": ["10% de desconto em todos os produtos", "Bolo de aniversário grátis (até R$ 50)"],
    },
    {
        "name": "Diamante",
        "minimum_points": 1000,
        "discount_percentage": Decimal("15"),
        "benefits": [
            "15% de desconto em todos os produtos",
            "Bolo de aniversário grátis (até R$ 100)",
            "Frete grátis",
        ],
    },
]

DEFAULT_REWARDS = [
    {"name": "Desconto de R$ 10", "description": "Cupom de desconto de R$ 10 em qualquer compra", "points_required": 50},
    {"name": "Cupcake Grátis", "description": "Um cupcake grátis na sua próxima compra", "points_required": 75},
    {"name": "Desconto de R$ 25", "description": "Cupom de desconto de R$ 25 em qualquer compra", "points_required": 120},
    {"name": "Mini Bolo Grátis", "description": "Um mini bolo grátis na sua próxima compra", "points_required": 200},
    {
        "name": "Bolo Personalizado com 50% de Desconto",
        "description": "Desconto de 50% em um bolo personalizado",
        "points_required": 350,
    },
    {
        "name": "Bolo Personalizado Grátis",
        "description": "Um bolo personalizado grátis (até R$ 100)",
        "points_required": 500,
    },
]


def points_for_order(order_total) -> int:
    """1 ponto a cada LOYALTY_CURRENCY_PER_POINT reais, arredondado para baixo."""
    total = Decimal(str(order_total))
    if total <= 0:
        return 0
    return int(total // settings.LOYALTY_CURRENCY_PER_POINT)


def select_tier(levels: Iterable, total_points: int) -> Optional[models.LoyaltyLevel]:
    """
    Nível com o maior `minimum_points` que não passa de `total_points`.
    Em caso de empate, vence o último da lista.
    """
    selected = None
    for level in levels:
        if level.minimum_points > total_points:
            continue
        if selected is None or level.minimum_points >= selected.minimum_points:
            selected = level
    return selected


class LoyaltyService:
    def __init__(self, db: Session):
        self.db = db

    def recompute_tier(self, customer: models.Customer, total_points: int) -> None:
        """Atualiza o nível do cliente. Não faz commit."""
        levels = crud.loyalty_level.get_multi(self.db, branch_id=customer.branch_id, limit=None)
        tier = select_tier(levels, total_points)
        if tier is None:
            # Sem nível elegível o cliente mantém o nível atual
            return
        if customer.loyalty_level_id != tier.id:
            logger.info(f"Cliente {customer.id} mudou para o nível '{tier.name}' ({total_points} pontos).")
            customer.loyalty_level_id = tier.id

    def award_points_for_order(self, customer: models.Customer, order_total) -> int:
        """
        Soma os pontos da compra e recalcula o nível. Participa da transação
        de quem chamou (não faz commit). Retorna os pontos concedidos.
        """
        points = points_for_order(order_total)
        if points == 0:
            return 0
        customer.loyalty_points = (customer.loyalty_points or 0) + points
        self.recompute_tier(customer, customer.loyalty_points)
        self.db.add(customer)
        logger.info(f"{points} pontos concedidos ao cliente {customer.id} (total {customer.loyalty_points}).")
        return points

    def redeem(self, *, customer_id: int, reward_id: int, branch_id: int) -> ServiceResult[models.LoyaltyRedemption]:
        customer = crud.customer.get(self.db, customer_id, branch_id=branch_id)
        if not customer:
            logger.warning(f"Resgate recusado: cliente {customer_id} não encontrado na filial {branch_id}.")
            return ServiceResult.not_found("Customer not found")

        reward = crud.loyalty_reward.get(self.db, reward_id, branch_id=branch_id)
        if not reward:
            logger.warning(f"Resgate recusado: recompensa {reward_id} não encontrada na filial {branch_id}.")
            return ServiceResult.not_found("Reward not found")

        if not reward.is_active:
            logger.warning(f"Resgate recusado: recompensa '{reward.name}' está inativa.")
            return ServiceResult.constraint("Reward is not active")

        if customer.loyalty_points < reward.points_required:
            logger.warning(
                f"Resgate recusado: cliente {customer.id} tem {customer.loyalty_points} pontos, "
                f"'{reward.name}' exige {reward.points_required}."
            )
            return ServiceResult.constraint(
                f"Insufficient points. Available: {customer.loyalty_points}, required: {reward.points_required}"
            )

        # O nível não é recalculado no resgate: ele reflete os pontos já acumulados
        redemption = crud.crud_loyalty.create_redemption(
            self.db, branch_id=branch_id, customer_id=customer.id, reward=reward
        )
        customer.loyalty_points -= reward.points_required
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(redemption)
        logger.info(f"Cliente {customer.id} resgatou '{reward.name}' por {reward.points_required} pontos.")
        return ServiceResult.success(redemption)

    def seed_defaults(self, branch_id: int) -> ServiceResult[dict]:
        """Cria os níveis e recompensas padrão se a filial ainda não tiver nenhum."""
        created = {"levels": 0, "rewards": 0}

        if not crud.loyalty_level.get_multi(self.db, branch_id=branch_id, limit=1):
            for level_data in DEFAULT_LEVELS:
                self.db.add(models.LoyaltyLevel(branch_id=branch_id, **level_data))
                created["levels"] += 1

        if not crud.loyalty_reward.get_multi(self.db, branch_id=branch_id, limit=1):
            for reward_data in DEFAULT_REWARDS:
                self.db.add(models.LoyaltyReward(branch_id=branch_id, is_active=True, **reward_data))
                created["rewards"] += 1

        if created["levels"] or created["rewards"]:
            self.db.commit()
            logger.info(
                f"Fidelidade da filial {branch_id}: {created['levels']} níveis e "
                f"{created['rewards']} recompensas padrão criados."
            )
        return ServiceResult.success(created)

    def get_redemption_history(self, *, customer_id: int, branch_id: int):
        return crud.crud_loyalty.get_redemptions_by_customer(self.db, branch_id=branch_id, customer_id=customer_id)

    def get_all_redemptions(self, *, branch_id: int):
        return crud.crud_loyalty.get_redemptions(self.db, branch_id=branch_id)
