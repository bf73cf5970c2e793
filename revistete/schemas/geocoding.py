from typing import Optional
from revistete.schemas.common import Envelope


class ReverseGeocodeResponse(Envelope):
    city: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
