"""
Invoice Settings

Static configuration consumed by the extractor and the renderer:
- Business identity block printed on every invoice
- Extraction defaults (fallback date, description, carrier flat rate)
- Invoice labels (shipping methods, GST and total rows)
- Brand styling

Settings are immutable pydantic models. They are loaded once and passed
explicitly to each component; nothing here is mutated at runtime.

Usage:
    settings = load_settings(Path("config/invoice.yaml"))
    pipeline = InvoicePipeline(settings)
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigError


DEFAULT_DESCRIPTION = 'Buongiorno Positano! Large / Clear Glass Vase'


class BusinessDetails(BaseModel):
    """Seller identity shown in the invoice header."""
    model_config = ConfigDict(frozen=True)

    name: str = 'Lime Tree Bower'
    address: str = '395 Sailors Bay Road, Northbridge NSW 2063'
    abn: str = '52 639 712 922'
    email: str = 'shop@limetreebower.com'


class ExtractionSettings(BaseModel):
    """Defaults and known phrases used by the extraction rules."""
    model_config = ConfigDict(frozen=True)

    default_date: str = '13 November 2024'
    default_description: str = DEFAULT_DESCRIPTION
    products: tuple[str, ...] = (DEFAULT_DESCRIPTION,)
    shipping_phrase: str = 'Shipping Fresh Courier Delivery'
    carrier_flat_rate: str = '19.00'
    pickup_keyword: str = 'Pickup'
    no_email_text: str = 'No email provided'

    @field_validator('carrier_flat_rate', mode='before')
    @classmethod
    def validate_flat_rate(cls, v):
        """Flat rate must be a non-negative amount; stored with 2 decimals."""
        try:
            amount = Decimal(str(v).replace('$', '').strip())
        except InvalidOperation:
            raise ValueError(f'Invalid carrier flat rate: {v}')
        if not amount.is_finite() or amount < 0:
            raise ValueError(f'Invalid carrier flat rate: {v}')
        return str(amount.quantize(Decimal('0.01')))

    @field_validator('products', mode='before')
    @classmethod
    def validate_products(cls, v):
        if isinstance(v, str):
            v = [v]
        phrases = tuple(str(p).strip() for p in v if p is not None)
        if not phrases:
            raise ValueError('At least one product phrase is required')
        if not all(phrases):
            raise ValueError('Product phrases must not be blank')
        return phrases

    @field_validator('shipping_phrase', 'pickup_keyword')
    @classmethod
    def validate_phrase(cls, v):
        """Search phrases must contain text; an empty phrase matches anywhere."""
        v = v.strip()
        if not v:
            raise ValueError('Search phrase must not be blank')
        return v


class InvoiceLabels(BaseModel):
    """Fixed text printed on the invoice."""
    model_config = ConfigDict(frozen=True)

    title: str = 'TAX INVOICE'
    pickup: str = 'Pick up Northbridge'
    delivery: str = 'Fresh Courier Delivery'
    tax: str = 'GST (10% included)'
    total: str = 'Total (GST inclusive)'
    document_prefix: str = 'Invoice'


class BrandStyle(BaseModel):
    """Colours and logo for the rendered invoice."""
    model_config = ConfigDict(frozen=True)

    color: str = '#5d7c79'
    logo_path: Optional[Path] = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        v = str(v).strip()
        if not (v.startswith('#') and len(v) in (4, 7)):
            raise ValueError(f'Color must be a hex string like #5d7c79: {v}')
        return v.lower()


class InvoiceSettings(BaseModel):
    """Complete settings value passed through the pipeline."""
    model_config = ConfigDict(frozen=True)

    business: BusinessDetails = BusinessDetails()
    extraction: ExtractionSettings = ExtractionSettings()
    labels: InvoiceLabels = InvoiceLabels()
    brand: BrandStyle = BrandStyle()


def load_settings(config_path: Optional[Path] = None) -> InvoiceSettings:
    """
    Load invoice settings from a YAML file.

    Missing sections fall back to the built-in defaults.

    Args:
        config_path: Path to a YAML settings file, or None for defaults

    Returns:
        Validated InvoiceSettings

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    if config_path is None:
        return InvoiceSettings()

    logger.info(f"Loading settings from: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load settings from {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file must contain a mapping: {config_path}")

    try:
        settings = InvoiceSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e

    logger.debug(f"Loaded settings for business '{settings.business.name}'")
    return settings
