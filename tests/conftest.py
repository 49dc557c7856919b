"""Shared fixtures for the order_invoice test suite."""

import pytest


# Flattened first page of a typical delivery order
ORDER_TEXT = (
    "Order #1001 15 March 2024 "
    "Customer Jane Smith Contact information jane.smith@example.com "
    "Shipping address Jane Smith 12 Harbour St Mosman NSW 2088 "
    "Buongiorno Positano! Large / Clear Glass Vase $45.00 × 1 $45.00 "
    "Subtotal $45.00 Shipping Fresh Courier Delivery $19.00 "
    "GST 10% (Included) $5.82 Total $64.00"
)

# Same order with every glyph emitted as its own fragment in the labels
SPACED_ORDER_TEXT = (
    "Order #1002 2 April 2024 "
    "B u o n g i o r n o P o s i t a n o ! L a r g e / C l e a r G l a s s V a s e "
    "$45.00 × 1 "
    "S h i p p i n g F r e s h C o u r i e r D e l i v e r y $19.00"
)

PICKUP_ORDER_TEXT = (
    "Order #1003 7 May 2024 Customer Sam Lee "
    "Buongiorno Positano! Large / Clear Glass Vase $120.00 × 1 "
    "Shipping Fresh Courier Delivery $19.00 P i c k u p Northbridge"
)


@pytest.fixture
def order_text():
    return ORDER_TEXT


@pytest.fixture
def spaced_order_text():
    return SPACED_ORDER_TEXT


@pytest.fixture
def pickup_order_text():
    return PICKUP_ORDER_TEXT
