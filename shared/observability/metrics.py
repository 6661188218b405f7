from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_orders_placed_total = Counter(
    "ecomm_orders_placed_total",
    "Total orders placed",
    ["payment_method"] # Labels: 'COD', 'other'
)

ecomm_order_rejections_total = Counter(
    "ecomm_order_rejections_total",
    "Order placements rejected by validation",
    ["reason"] # Labels: 'empty_cart', 'missing_field', 'book_not_found', 'total_mismatch'
)

ecomm_order_placement_duration_seconds = Histogram(
    "ecomm_order_placement_duration_seconds",
    "Order placement duration in seconds"
)

ecomm_order_status_transitions_total = Counter(
    "ecomm_order_status_transitions_total",
    "Order status changes applied",
    ["status"]
)

ecomm_library_grants_total = Counter(
    "ecomm_library_grants_total",
    "Library entries granted after payment confirmation"
)
