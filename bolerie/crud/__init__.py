from . import crud_product, crud_reservation, crud_sale, crud_store_settings, crud_notification
from . import crud_loyalty
from .crud_branch import branch
from .crud_user import user
from .crud_catalog import category, size, employee
from .crud_customer import customer
from .crud_ingredient import ingredient
from .crud_loyalty import level as loyalty_level, reward as loyalty_reward
