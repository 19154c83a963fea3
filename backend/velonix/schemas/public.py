from pydantic import BaseModel, Field
from typing import List


class ContactMessage(BaseModel):
    # Accepts anything; the endpoint always reports success
    name: str = ""
    email: str = ""
    message: str = ""


class EventItem(BaseModel):
    id: str
    name: str
    category: str
    description: str


class EventCatalogResponse(BaseModel):
    technical: List[EventItem]
    non_technical: List[EventItem] = Field(serialization_alias="nonTechnical")
    registration_fee: int = Field(serialization_alias="registrationFee")
    upi_id: str = Field(serialization_alias="upiId")
