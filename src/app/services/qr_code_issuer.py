"""
QR Code Issuer

Generates unguessable visit-scoped codes of the shape PREFIX_[A-Z0-9]{N},
binds them to a visit and renders them as PNG images.
"""

import base64
import io
import logging
import re
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

import qrcode
from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Visit
from src.domain.errors import ErrorCode

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class IssuedQrCode(BaseModel):
    code: str
    issued_at: datetime
    expires_at: datetime


class QrCodeIssuer:
    def __init__(
        self,
        prefix: str = "SG",
        length: int = 32,
        expiry_hours: int = 24,
        max_retries: int = 5,
        box_size: int = 10,
        border: int = 2,
    ):
        self.prefix = prefix
        self.length = length
        self.expiry_hours = expiry_hours
        self.max_retries = max_retries
        self.box_size = box_size
        self.border = border
        self._pattern = re.compile(rf"^{re.escape(prefix)}_[A-Z0-9]{{{length}}}$")

    @classmethod
    def from_config(cls, config) -> "QrCodeIssuer":
        return cls(
            prefix=config.QR_CODE_PREFIX,
            length=config.QR_CODE_LENGTH,
            expiry_hours=config.QR_CODE_EXPIRY_HOURS,
            max_retries=config.QR_CODE_MAX_RETRIES,
            box_size=config.QR_IMAGE_BOX_SIZE,
            border=config.QR_IMAGE_BORDER,
        )

    def generate_code(self) -> str:
        suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(self.length))
        return f"{self.prefix}_{suffix}"

    def is_valid_format(self, code: Optional[str]) -> bool:
        """Cheap shape check, run before any database lookup"""
        if not code or not isinstance(code, str):
            return False
        return self._pattern.match(code) is not None

    def compute_expiry(self, expected_end: Optional[datetime], now: datetime) -> datetime:
        if expected_end is not None:
            return expected_end
        return now + timedelta(hours=self.expiry_hours)

    async def issue(self, uow: UnitOfWork, visit: Visit, now: datetime) -> Result[IssuedQrCode]:
        """
        Bind a fresh code to the visit inside the caller's unit of work.

        The unique index on visits.qr_code is the final arbiter; the
        existence check here only keeps collisions from aborting the
        surrounding transaction.
        """
        for attempt in range(1, self.max_retries + 1):
            code = self.generate_code()
            if await uow.visits.qr_code_exists(code):
                logger.warning("QR code collision on attempt %d", attempt)
                continue

            visit.qr_code = code
            visit.qr_issued_at = now
            visit.qr_expires_at = self.compute_expiry(visit.expected_end, now)
            return Return.ok(
                IssuedQrCode(code=code, issued_at=now, expires_at=visit.qr_expires_at)
            )

        logger.error("QR code issuance exhausted after %d attempts", self.max_retries)
        return Return.err(
            Error(
                ErrorCode.ISSUANCE_EXHAUSTED,
                "Could not generate a unique QR code",
                {"attempts": self.max_retries},
            )
        )

    def render_png(self, code: str) -> bytes:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(code)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_data_url(self, code: str) -> str:
        encoded = base64.b64encode(self.render_png(code)).decode("ascii")
        return f"data:image/png;base64,{encoded}"
