from pydantic import BaseModel, Field, EmailStr, model_validator
from pydantic.alias_generators import to_camel
from typing import Literal, Optional, List

EnquiryStatus = Literal["pending", "approved", "rejected", "completed"]
ENQUIRY_STATUSES = ("pending", "approved", "rejected", "completed")


class CamelModel(BaseModel):
    """Stored and wire records use camelCase keys (vendorId, createdAt...)."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# Enquiries
class EnquiryCreate(CamelModel):
    vendor_id: str
    vendor_name: str
    realtor_id: str
    realtor_name: str
    realtor_email: str
    offerings: List[str] = Field(default_factory=list)
    status: EnquiryStatus = "pending"
    meeting_date: Optional[str] = None
    meeting_time: Optional[str] = None
    meeting_type: Optional[str] = None
    notes: Optional[str] = None


class StudioEnquiryCreate(CamelModel):
    studio_name: str
    studio_address: str
    realtor_name: str
    realtor_email: str
    realtor_phone: str = Field(min_length=1)
    selected_date: str
    selected_time: str
    status: EnquiryStatus = "pending"
    notes: Optional[str] = None


# Users
class SignupRequest(CamelModel):
    email: EmailStr
    name: str = Field(min_length=1)
    role: str = "client"
    company: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None


# Invoices
class InvoiceItem(CamelModel):
    id: str = ""
    description: str = ""
    quantity: float = 1
    rate: float = 0
    amount: Optional[float] = None

    @model_validator(mode="after")
    def _fill_amount(self):
        if self.amount is None:
            self.amount = round(self.quantity * self.rate, 2)
        return self


class InvoiceData(CamelModel):
    invoice_number: str = ""
    client_name: str = ""
    client_email: str = ""
    client_phone: str = ""
    client_address: str = ""
    issue_date: str = ""
    due_date: str = ""
    notes: str = ""
    items: List[InvoiceItem] = Field(default_factory=list)
