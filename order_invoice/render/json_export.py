"""
Record Export

Export order records as JSON for integration with other systems.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from ..record import OrderRecord

logger = logging.getLogger(__name__)


def record_to_json(
    record: OrderRecord,
    indent: Optional[int] = 2,
    extra: Optional[dict[str, Any]] = None,
) -> str:
    """
    Serialize a record to a JSON string.

    Args:
        record: Record to serialize
        indent: JSON indent (None for compact output)
        extra: Additional top-level keys, e.g. the source file name
    """
    data = record.to_dict()
    if extra:
        data.update(extra)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def export_json(
    record: OrderRecord,
    output_path: Path,
    extra: Optional[dict[str, Any]] = None,
) -> Path:
    """
    Write a record to a JSON file.

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        os.makedirs(output_path.parent, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(record_to_json(record, extra=extra))

    logger.info(f"Exported record to {output_path}")
    return output_path
