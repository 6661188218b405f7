from .setup import setup_observability
from .metrics import (
    ecomm_orders_placed_total,
    ecomm_order_rejections_total,
    ecomm_order_placement_duration_seconds,
    ecomm_order_status_transitions_total,
    ecomm_library_grants_total
)
