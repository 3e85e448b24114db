"""Pydantic schemas for API request validation"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case field names"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class AddressSchema(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)


class EmploymentSchema(CamelModel):
    status: Literal["employed", "self-employed", "unemployed", "retired"]
    employer: Optional[str] = None
    job_title: Optional[str] = None
    years_employed: Optional[float] = Field(None, ge=0)


class IncomeSchema(CamelModel):
    annual: float = Field(..., ge=0, description="Annual income in dollars")
    source: Literal["salary", "business", "investments", "retirement", "other"]


class HousingSchema(CamelModel):
    status: Literal["own", "rent", "other"]
    monthly_payment: float = Field(..., ge=0, description="Monthly housing payment")


class SubmitApplicationRequest(CamelModel):
    """Request body for POST /v1/applications"""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    date_of_birth: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    ssn: str = Field(..., pattern=r"^\d{4}$", description="Social Security Number (last 4 digits)")
    address: AddressSchema
    employment: EmploymentSchema
    income: IncomeSchema
    housing: HousingSchema

    def to_intake(self) -> dict:
        data = self.model_dump(exclude={"ssn"})
        data["ssn_last4"] = self.ssn
        return data


class VerifyIdentityRequest(CamelModel):
    government_id_type: Literal["drivers_license", "passport", "state_id"]
    government_id_number: str = Field(..., min_length=1)
    verification_method: Literal["automatic", "manual", "document_upload"]


class CheckCreditRequest(CamelModel):
    bureaus: Optional[List[Literal["experian", "equifax", "transunion"]]] = Field(
        None, description="Credit bureaus to check (defaults to all three)"
    )


class MakeDecisionRequest(CamelModel):
    override_decision: Literal["approve", "deny", "auto"] = "auto"
    manual_review_notes: Optional[str] = None


class ActivateCardRequest(CamelModel):
    card_delivery_address: Optional[AddressSchema] = Field(
        None, description="Card delivery address (defaults to application address)"
    )
    requested_pin: Optional[str] = Field(
        None, alias="requestedPIN", pattern=r"^\d{4}$", description="4-digit PIN (random if omitted)"
    )
