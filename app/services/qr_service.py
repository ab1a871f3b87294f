"""
QR code generation for participant check-in tokens
"""

import base64
import io
import json
from dataclasses import dataclass

import qrcode

from app.core.exceptions import ValidationError

@dataclass(frozen=True)
class CheckInToken:
    """Identity carried by a check-in QR code"""
    participant_id: str
    event_id: str
    user_id: str

class QRService:
    """Encodes participant identities into scannable QR codes and back.

    Output depends only on the (participant, event, user) triple, so the
    same registration always renders the same image and nothing is stored.
    """

    @staticmethod
    def build_payload(participant_id: str, event_id: str, user_id: str) -> str:
        """Canonical text embedded in the QR code"""
        return json.dumps(
            {"id": participant_id, "eventId": event_id, "userId": user_id},
            sort_keys=True,
            separators=(",", ":"),
        )

    @staticmethod
    def generate_png(participant_id: str, event_id: str, user_id: str, format: str = 'PNG') -> bytes:
        """Render the check-in QR code as image bytes"""
        payload = QRService.build_payload(participant_id, event_id, user_id)

        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()

    @staticmethod
    def encode_token(participant_id: str, event_id: str, user_id: str) -> str:
        """Check-in token as a data URL, ready for an <img> tag"""
        png = QRService.generate_png(participant_id, event_id, user_id)
        return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

    @staticmethod
    def decode_payload(text: str) -> CheckInToken:
        """Parse a scanned payload back into its identity triple"""
        try:
            data = json.loads(text)
        except (TypeError, ValueError):
            raise ValidationError("Invalid QR code")

        if not isinstance(data, dict):
            raise ValidationError("Invalid QR code")

        participant_id = data.get("id")
        event_id = data.get("eventId")
        user_id = data.get("userId")
        if not participant_id or not event_id or not user_id:
            raise ValidationError("Invalid QR code data")

        return CheckInToken(
            participant_id=str(participant_id),
            event_id=str(event_id),
            user_id=str(user_id),
        )
