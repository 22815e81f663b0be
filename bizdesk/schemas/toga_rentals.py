"""
Pydantic models for toga rental endpoints.

Departments group graduation gown rentals. Each department lists its student
rentals and the payments recorded against them.

Wire format notes:
- Department listings use camelCase aggregate keys (totalStudents,
  activeRentals, revenue) because the frontend reads them that way.
- Create requests take department_id; it is stored as toga_department_id.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


DepartmentColor = Literal["blue", "purple", "cyan", "teal"]
GownSize = Literal["XS", "S", "M", "L", "XL", "XXL"]
RentalStatus = Literal["Active", "Returned", "Overdue"]
PaymentStatus = Literal["Paid", "Pending"]
PaymentMethod = Literal["Cash", "GCash", "Bank Transfer", "Card"]
PaymentType = Literal["Rental Fee", "Deposit", "Rental Fee + Deposit"]

DEFAULT_DEPARTMENT_ICON = "Building2"


# ==================== DEPARTMENTS ====================

class DepartmentRequest(BaseModel):
    """Request body for creating or updating a department."""
    name: str = Field(..., min_length=1, max_length=255, description="Department display name")
    code: str = Field(..., min_length=1, max_length=10, description="Unique short code (e.g., 'CCS')")
    color: DepartmentColor = Field(..., description="Card accent color")
    icon: Optional[str] = Field(None, max_length=50, description="Icon identifier (defaults to Building2)")


class DepartmentSummary(BaseModel):
    """A department with its rental aggregates, as returned by the listing."""
    id: int
    name: str
    code: str
    color: str
    icon: Optional[str] = None
    totalStudents: int = Field(0, description="Number of rentals in the department")
    activeRentals: int = Field(0, description="Rentals with status Active")
    revenue: float = Field(0, description="Sum of rental fees")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DepartmentMutationResponse(BaseModel):
    message: str
    department: dict


# ==================== RENTALS/STUDENTS ====================

class RentalFields(BaseModel):
    """Fields shared by rental create and update requests."""
    student_name: str = Field(..., min_length=1, max_length=255)
    student_number: str = Field(..., min_length=1, max_length=50)
    contact_number: str = Field(..., min_length=1, max_length=20)
    size: GownSize
    rental_date: date
    return_date: date
    rental_fee: float = Field(..., ge=0)
    deposit: float = Field(..., ge=0)
    status: RentalStatus
    payment_status: Optional[PaymentStatus] = None

    @model_validator(mode='after')
    def validate_return_after_rental(self):
        """The gown must come back after it went out."""
        if self.return_date <= self.rental_date:
            raise ValueError("return_date must be a date after rental_date")
        return self


class RentalCreateRequest(RentalFields):
    department_id: int = Field(..., description="Owning department ID")


class RentalUpdateRequest(RentalFields):
    pass


class RentalResponse(BaseModel):
    id: int
    student_name: str
    student_number: str
    contact_number: str
    size: str
    rental_date: str
    return_date: str
    rental_fee: float
    deposit: float
    status: str
    payment_status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RentalMutationResponse(BaseModel):
    message: str
    rental: dict


# ==================== PAYMENTS ====================

class PaymentFields(BaseModel):
    """Fields shared by payment create and update requests."""
    student_name: str = Field(..., min_length=1, max_length=255)
    student_number: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., ge=0)
    payment_date: date
    payment_method: PaymentMethod
    type: PaymentType
    status: PaymentStatus


class PaymentCreateRequest(PaymentFields):
    department_id: int = Field(..., description="Owning department ID")
    rental_id: Optional[int] = Field(None, description="Rental this payment settles, if any")


class PaymentUpdateRequest(PaymentFields):
    pass


class PaymentResponse(BaseModel):
    id: int
    payment_number: str
    student_name: str
    student_number: str
    amount: float
    payment_date: str
    payment_method: str
    status: str
    type: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PaymentMutationResponse(BaseModel):
    message: str
    payment: dict


# ==================== STATISTICS ====================

class TogaStatsResponse(BaseModel):
    """Aggregate counts across all departments."""
    total_departments: int = 0
    total_students: int = 0
    active_rentals: int = 0
    total_revenue: float = 0
    returned: int = 0
    overdue: int = 0
    pending_payments: int = 0
    paid_payments: int = 0


class MessageResponse(BaseModel):
    message: str
