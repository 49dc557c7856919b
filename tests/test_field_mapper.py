"""
Tests for the extraction rule table and FieldMapper.
"""

import re

from order_invoice.config import DEFAULT_DESCRIPTION, ExtractionSettings
from order_invoice.parser.field_mapper import FieldMapper, extract_fields_from_text
from order_invoice.parser.normalizers import normalize
from order_invoice.parser.rules import (
    DATE,
    DESCRIPTION,
    EMAIL,
    ORDER_NUMBER,
    QUANTITY,
    SHIPPING_COST,
    UNIT_PRICE,
    ExtractionRule,
    build_rules,
)


class TestOrderFields:
    """Tests for a complete delivery order."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_all_fields(self, order_text):
        fields = self.mapper.extract(normalize(order_text))

        assert fields['order_number'] == '1001'
        assert fields['date'] == '15 March 2024'
        assert fields['unit_price'] == '45.00'
        assert fields['quantity'] == '1'
        assert fields['shipping_cost'] == '19.00'
        assert fields['description'] == DEFAULT_DESCRIPTION
        assert fields['is_pickup'] == 'false'
        assert fields['customer_name'] == 'Jane Smith'
        assert fields['email'] == 'jane.smith@example.com'
        assert fields['reported_tax'] == '5.82'

    def test_price_and_quantity(self):
        fields = self.mapper.extract("Vase $45.00 × 2 $90.00")
        assert fields['unit_price'] == '45.00'
        assert fields['quantity'] == '2'

    def test_letter_x_multiplier(self):
        fields = self.mapper.extract("Vase $1,250.00 x 3")
        assert fields['unit_price'] == '1250.00'
        assert fields['quantity'] == '3'

    def test_short_month_date(self):
        assert self.mapper.extract("Order #7 3 Sept 2024")['date'] == '3 Sept 2024'


class TestFallbacks:
    """Tests for rule misses."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_no_order_number(self, order_text):
        text = normalize(order_text.replace('#1001', ''))
        fields = self.mapper.extract(text)
        reference = self.mapper.extract(normalize(order_text))

        assert 'order_number' not in fields
        reference.pop('order_number')
        assert fields == reference

    def test_minimal_order(self):
        fields = self.mapper.extract("Order #1001 15 March 2024")

        assert fields['order_number'] == '1001'
        assert 'unit_price' not in fields
        assert fields['quantity'] == '1'
        assert fields['shipping_cost'] == '0.00'
        assert fields['description'] == DEFAULT_DESCRIPTION
        assert fields['is_pickup'] == 'false'
        assert fields['email'] == 'No email provided'
        assert 'customer_name' not in fields

    def test_default_date(self):
        fields = self.mapper.extract("Order #1001")
        assert fields['date'] == '13 November 2024'

    def test_empty_text(self):
        fields = self.mapper.extract("")
        assert fields['quantity'] == '1'
        assert fields['shipping_cost'] == '0.00'
        assert 'order_number' not in fields

    def test_fallback_methods_recorded(self):
        results = self.mapper.extract_fields("Order #1001")
        methods = {r.name: r.method for r in results}

        assert methods['order_number'] == 'pattern'
        assert methods['date'] == 'fallback'
        assert methods['unit_price'] == 'not_found'
        assert methods['quantity'] == 'fallback'

    def test_summary(self):
        results = self.mapper.extract_fields("Order #1001")
        summary = self.mapper.get_extraction_summary(results)

        assert 'order_number' in summary['matched']
        assert 'date' in summary['fallbacks']
        assert 'unit_price' in summary['missing']


class TestShippingRule:
    """Tests for the labelled shipping line and its flat-rate alternative."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_spaced_shipping_label(self, spaced_order_text):
        fields = self.mapper.extract(normalize(spaced_order_text))
        assert fields['shipping_cost'] == '19.00'

    def test_flat_rate_alternative(self):
        results = self.mapper.extract_fields("Order #1 $45.00 × 1 Shipping $19.00")
        shipping = next(r for r in results if r.name == SHIPPING_COST)

        assert shipping.value == '19.00'
        assert shipping.method == 'alternative'
        assert shipping.rule == 'carrier_flat_rate'

    def test_configured_flat_rate(self):
        mapper = FieldMapper(settings=ExtractionSettings(carrier_flat_rate='25.5'))
        fields = mapper.extract("Order #1 Courier $25.50")
        assert fields['shipping_cost'] == '25.50'

    def test_flat_rate_not_confused_with_longer_amount(self):
        fields = self.mapper.extract("Order #1 $19.001")
        assert fields['shipping_cost'] == '0.00'


class TestDescriptionRule:
    """Tests for product phrase extraction."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_spaced_description(self, spaced_order_text):
        fields = self.mapper.extract(normalize(spaced_order_text))
        assert fields['description'] == 'Buongiorno Positano! Large / Clear Glass Vase'

    def test_configured_products(self):
        settings = ExtractionSettings(products=['Amalfi Small / Blue Glass Bowl', DEFAULT_DESCRIPTION])
        mapper = FieldMapper(settings=settings)

        fields = mapper.extract("A m a l f i S m a l l / B l u e G l a s s B o w l $30.00 × 1")
        assert fields['description'] == 'Amalfi Small / Blue Glass Bowl'

    def test_lowercase_words_keep_configured_spelling(self):
        mapper = FieldMapper(settings=ExtractionSettings(products=['Large glass vase']))
        fields = mapper.extract("Large glass vase $10.00 × 1")
        assert fields['description'] == 'Large glass vase'

    def test_spaced_product_with_digits(self):
        mapper = FieldMapper(settings=ExtractionSettings(products=['Large glass vase 30cm']))
        fields = mapper.extract("L a r g e g l a s s v a s e 3 0 c m $10.00 × 1")
        assert fields['description'] == 'Large glass vase 30cm'


class TestPickupRule:
    """Tests for pickup detection."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_plain_keyword(self):
        assert self.mapper.extract("Order #1 Pickup at store")['is_pickup'] == 'true'

    def test_spaced_keyword(self, pickup_order_text):
        assert self.mapper.extract(normalize(pickup_order_text))['is_pickup'] == 'true'

    def test_absent(self, order_text):
        assert self.mapper.extract(normalize(order_text))['is_pickup'] == 'false'


class TestContactRules:
    """Tests for customer name and email."""

    def setup_method(self):
        self.mapper = FieldMapper()

    def test_customer_name_stops_at_section(self):
        fields = self.mapper.extract("Customer Ana María Payment Paid")
        assert fields['customer_name'] == 'Ana María'

    def test_customer_name_needs_section_heading(self, pickup_order_text):
        fields = self.mapper.extract(normalize(pickup_order_text))
        assert 'customer_name' not in fields

    def test_customer_name_needs_letters(self):
        fields = self.mapper.extract("Customer 12345 Contact information")
        assert 'customer_name' not in fields

    def test_email_after_contact_heading(self):
        fields = self.mapper.extract("Contact information No phone jo+shop@mail.example.com.au")
        assert fields[EMAIL] == 'jo+shop@mail.example.com.au'

    def test_email_not_taken_from_address_section(self):
        fields = self.mapper.extract(
            "Contact information Shipping address note: a@b.com"
        )
        assert fields[EMAIL] == 'No email provided'


class TestRuleIsolation:
    """A failing rule must not affect any other rule."""

    def test_raising_rule_falls_back(self):
        def explode(value):
            raise RuntimeError("boom")

        rules = (
            ExtractionRule(
                name='broken',
                pattern=re.compile(r'#(\d+)'),
                groups={ORDER_NUMBER: 1},
                transforms={ORDER_NUMBER: explode},
                fallback={ORDER_NUMBER: 'unknown'},
            ),
        ) + build_rules()[1:]
        mapper = FieldMapper(rules=rules)

        fields = mapper.extract("Order #1001 15 March 2024 $45.00 × 2")
        assert fields[ORDER_NUMBER] == 'unknown'
        assert fields[DATE] == '15 March 2024'
        assert fields[UNIT_PRICE] == '45.00'
        assert fields[QUANTITY] == '2'

    def test_unparseable_amount_is_a_miss(self):
        rule = ExtractionRule(
            name='loose_price',
            pattern=re.compile(r'Price (\S+)'),
            groups={UNIT_PRICE: 1},
            amounts=frozenset({UNIT_PRICE}),
            fallback={UNIT_PRICE: '0.00'},
        )
        results = FieldMapper(rules=(rule,)).extract_fields("Price 4O.OO")

        assert results[0].value == '0.00'
        assert results[0].method == 'fallback'

    def test_rules_are_order_independent(self, order_text):
        text = normalize(order_text)
        forward = FieldMapper(rules=build_rules()).extract(text)
        backward = FieldMapper(rules=tuple(reversed(build_rules()))).extract(text)
        assert forward == backward

    def test_convenience_function(self):
        assert extract_fields_from_text("Order #42")[ORDER_NUMBER] == '42'


class TestRuleTable:
    """Tests for the declarative rule table."""

    def test_rule_fields(self):
        rules = {rule.name: rule for rule in build_rules()}

        assert rules['price_quantity'].fields == (UNIT_PRICE, QUANTITY)
        assert rules[SHIPPING_COST].fields == (SHIPPING_COST,)
        assert rules[DESCRIPTION].fallback == {DESCRIPTION: DEFAULT_DESCRIPTION}
