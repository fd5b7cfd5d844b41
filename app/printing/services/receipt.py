"""ESC/POS rendering of the kitchen receipt."""

import base64
import binascii
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.orders.models.order import Order, OrderType

from ..utils.base import InputValidationError

logger = logging.getLogger(__name__)

ESC = b"\x1b"
GS = b"\x1d"
LF = b"\n"

INIT = ESC + b"@"
CODE_PAGE_PC850 = ESC + b"t\x02"
ALIGN_LEFT = ESC + b"a\x00"
ALIGN_CENTER = ESC + b"a\x01"
MODE_NORMAL = ESC + b"!\x00"
MODE_SMALL = ESC + b"!\x01"
MODE_EMPHASIZED = ESC + b"!\x08"
MODE_LARGE = ESC + b"!\x18"
MODE_DOUBLE = ESC + b"!\x38"
PARTIAL_CUT = GS + b"V\x41\x03"

ENCODING = "cp850"


def parse_items(items: Any) -> List[Dict[str, Any]]:
    """Line items are stored as a JSON string; tolerate a bad one."""
    if isinstance(items, list):
        return items
    try:
        parsed = json.loads(items or "[]")
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse order items: {e}")
        return []
    return parsed if isinstance(parsed, list) else []


class ReceiptFormatter:
    """Renders an order as the fixed kitchen ticket template."""

    def __init__(
        self,
        header: str = "RAVINTOLA TIRVA",
        subtitle: str = "Keittiötilaus",
        footer: str = "Kiitos tilauksesta!",
        website: str = "www.ravintolatirva.fi",
        width: int = 32,
    ):
        self.header = header
        self.subtitle = subtitle
        self.footer = footer
        self.website = website
        self.width = width

    def _text(self, text: str) -> bytes:
        return text.encode(ENCODING, errors="replace") + LF

    def format(self, order: Order, now: Optional[datetime] = None) -> bytes:
        now = now or datetime.now()
        double_rule = "=" * self.width
        rule = "-" * self.width
        out = bytearray()

        out += INIT + CODE_PAGE_PC850 + ALIGN_CENTER
        out += MODE_DOUBLE + self._text(self.header)
        out += MODE_NORMAL + MODE_EMPHASIZED + self._text(self.subtitle)
        out += MODE_NORMAL + self._text(double_rule)

        out += ALIGN_LEFT + MODE_SMALL
        out += self._text(f"Tilaus: #{order.woocommerce_id}")
        out += self._text(f"Asiakas: {order.customer_name}")
        if order.customer_phone and order.customer_phone != "Ei numeroa":
            out += self._text(f"Puh: {order.customer_phone}")
        is_delivery = order.type == OrderType.delivery
        out += self._text(f"Tyyppi: {'Kotiinkuljetus' if is_delivery else 'Nouto'}")
        if is_delivery:
            if order.address_street:
                out += self._text(f"Katu: {order.address_street}")
            if order.address_city:
                out += self._text(f"Kaupunki: {order.address_city}")
            if order.address_instructions:
                out += self._text(f"Ohjeet: {order.address_instructions}")
        out += self._text(f"Aika: {now.strftime('%d.%m.%Y %H.%M.%S')}")
        out += MODE_NORMAL + self._text(rule)

        out += MODE_EMPHASIZED + self._text("TUOTTEET:") + MODE_NORMAL
        for item in parse_items(order.items):
            out += self._text(f"{item.get('quantity', 1)}x {item.get('name', '')}")
            for variation in item.get("variations") or []:
                out += self._text(f"  + {variation}")
            for meta in item.get("meta") or []:
                if meta.get("key") and meta.get("value"):
                    out += self._text(f"  {meta['key']}: {meta['value']}")
            out += self._text(str(item.get("price") or "").rjust(self.width))
        out += self._text(rule)

        out += MODE_LARGE + self._text(f"YHTEENSÄ: {order.total or order.subtotal}") + MODE_NORMAL
        if order.delivery_fee and order.delivery_fee != "0 €":
            out += self._text(f"Toimitusmaksu: {order.delivery_fee}")

        if order.notes:
            out += self._text(rule)
            out += MODE_EMPHASIZED + self._text("ERITYISOHJEET:") + MODE_NORMAL
            out += self._text(order.notes)

        out += self._text(double_rule)
        out += ALIGN_CENTER
        out += self._text(f"Vastaanotettu: {order.received_at.strftime('%H.%M')}")
        if order.estimated_time:
            out += self._text(f"Arvioitu valmis: {order.estimated_time}")

        out += self._text(double_rule)
        out += MODE_EMPHASIZED + self._text(self.footer) + MODE_NORMAL
        out += self._text(self.website)
        out += LF * 3
        out += PARTIAL_CUT
        return bytes(out)


def decode_receipt_data(data: str, encoding: str = "binary") -> bytes:
    """
    Turn a receipt string sent by a client back into the raw byte stream.

    With ``binary`` every character stands for one byte (its code point
    modulo 256), so ESC/GS control codes pass through untouched. With
    ``base64`` the string is decoded strictly.
    """
    if encoding == "base64":
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InputValidationError(f"Invalid base64 receipt data: {e}") from e
    return bytes(ord(ch) & 0xFF for ch in data)
