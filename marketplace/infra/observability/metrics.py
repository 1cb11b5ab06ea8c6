from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed")
order_transitions_total = Counter(
    "marketplace_order_transitions_total", "Order status transitions applied", ["role", "from_status", "to_status"]
)
order_transition_rejections_total = Counter(
    "marketplace_order_transition_rejections_total", "Order transitions rejected by the state machine", ["role"]
)

# Catalog Metrics
image_uploads_total = Counter("marketplace_image_uploads_total", "Image uploads to the image store", ["status"])

# Cascade Metrics
cascade_step_failures_total = Counter(
    "marketplace_cascade_step_failures_total", "Failed steps during product/account cascades", ["step"]
)
cascade_duration = Histogram("marketplace_cascade_seconds", "Cascade deletion time", ["kind"])
