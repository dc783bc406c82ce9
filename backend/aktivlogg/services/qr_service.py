"""QR code generation for training locations."""
import base64
import io
import re
import secrets
import string
from urllib.parse import urlencode

import qrcode

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
NORWEGIAN_LETTERS = str.maketrans({'æ': 'ae', 'ø': 'o', 'å': 'a'})

class QRService:
    """Service for QR code operations."""

    @staticmethod
    def generate_location_code(prefix: str, name: str, suffix_length: int = 6) -> str:
        """
        Build a code like ``svpk-innendors-25m-k3x9qa`` from the club
        prefix, the location name and a random suffix.
        """
        slug = re.sub(r'[^a-z0-9]+', '-', name.lower().translate(NORWEGIAN_LETTERS)).strip('-')
        suffix = ''.join(secrets.choice(SUFFIX_ALPHABET) for _ in range(suffix_length))
        parts = [p for p in (prefix.strip('-').lower(), slug, suffix) if p]
        return '-'.join(parts)

    @staticmethod
    def build_scanner_link(base_url: str, code: str) -> str:
        """Deep link that opens the scanner with the code pre-filled."""
        return f"{base_url.rstrip('/')}/scanner?{urlencode({'c': code})}"

    @staticmethod
    def generate_qr_image(data: str) -> str:
        """Render data as a PNG QR code, returned as a data URL."""
        qr = qrcode.QRCode(
            version=None,  # Auto-determine size
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        img_str = base64.b64encode(buffered.getvalue()).decode()

        return f"data:image/png;base64,{img_str}"
