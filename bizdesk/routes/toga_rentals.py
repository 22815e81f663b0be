"""
Toga rental API endpoints.

Endpoints:
- GET /toga-rentals/stats - Overall statistics
- GET /toga-rentals/departments - List departments with aggregates
- POST /toga-rentals/departments - Create department
- PUT /toga-rentals/departments/{id} - Update department
- DELETE /toga-rentals/departments/{id} - Delete department (only when it has no rentals)
- GET /toga-rentals/departments/{department_id}/rentals - List a department's rentals
- POST /toga-rentals/rentals - Create rental
- PUT /toga-rentals/rentals/{id} - Update rental
- DELETE /toga-rentals/rentals/{id} - Delete rental
- GET /toga-rentals/departments/{department_id}/payments - List a department's payments
- POST /toga-rentals/payments - Create payment
- PUT /toga-rentals/payments/{id} - Update payment
- DELETE /toga-rentals/payments/{id} - Delete payment
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status
from postgrest.exceptions import APIError

from bizdesk.db.client import get_supabase_client
from bizdesk.schemas.toga_rentals import (
    DepartmentMutationResponse,
    DepartmentRequest,
    DepartmentSummary,
    MessageResponse,
    PaymentCreateRequest,
    PaymentMutationResponse,
    PaymentResponse,
    PaymentUpdateRequest,
    RentalCreateRequest,
    RentalMutationResponse,
    RentalResponse,
    RentalUpdateRequest,
    TogaStatsResponse,
)
from bizdesk.services import toga_rental_service as service
from bizdesk.services.toga_rental_service import DepartmentInUseError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/toga-rentals", tags=["toga-rentals"])


def _not_found(resource: str, resource_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "not_found", "details": f"{resource} {resource_id} not found"}
    )


def _server_error(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": error, "details": details}
    )


def _validation_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error": "validation_error", "details": str(e)}
    )


def _duplicate_code() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"error": "duplicate", "details": "A department with this code already exists"}
    )


# ==================== STATISTICS ====================

@router.get(
    "/stats",
    response_model=TogaStatsResponse,
    summary="Toga rental statistics",
)
async def get_stats() -> TogaStatsResponse:
    """Overall counts across departments, rentals and payments."""
    supabase_client = get_supabase_client()

    try:
        stats = await service.get_stats(supabase_client)
        return TogaStatsResponse(**stats)
    except Exception as e:
        logger.error(f"Failed to compute toga stats: {e}", exc_info=True)
        raise _server_error("fetch_error", "Failed to compute statistics")


# ==================== DEPARTMENTS ====================

@router.get(
    "/departments",
    response_model=List[DepartmentSummary],
    summary="List departments",
    description="""
    List all departments, newest first.

    Each department carries:
    - totalStudents: number of rentals
    - activeRentals: rentals with status Active
    - revenue: sum of rental fees
    """
)
async def list_departments() -> List[DepartmentSummary]:
    supabase_client = get_supabase_client()

    try:
        departments = await service.get_departments(supabase_client)
        return [DepartmentSummary(**dept) for dept in departments]
    except Exception as e:
        logger.error(f"Failed to fetch departments: {e}", exc_info=True)
        raise _server_error("fetch_error", "Failed to retrieve departments")


@router.post(
    "/departments",
    response_model=DepartmentMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a department",
)
async def store_department(request: DepartmentRequest) -> DepartmentMutationResponse:
    supabase_client = get_supabase_client()

    try:
        department = await service.create_department(
            supabase_client, request.model_dump(mode="json")
        )
        return DepartmentMutationResponse(
            message="Department created successfully",
            department=department
        )
    except ValueError as e:
        logger.warning(f"Validation error creating department: {e}")
        raise _validation_error(e)
    except APIError as e:
        if e.code == "23505":  # unique_violation
            logger.warning(f"Duplicate department code rejected by database: {request.code}")
            raise _duplicate_code()
        logger.error(f"Database error creating department: {e}", exc_info=True)
        raise _server_error("create_error", "Failed to create department")
    except Exception as e:
        logger.error(f"Failed to create department: {e}", exc_info=True)
        raise _server_error("create_error", "Failed to create department")


@router.put(
    "/departments/{department_id}",
    response_model=DepartmentMutationResponse,
    summary="Update a department",
)
async def update_department(department_id: int, request: DepartmentRequest) -> DepartmentMutationResponse:
    supabase_client = get_supabase_client()

    try:
        department = await service.update_department(
            supabase_client, department_id, request.model_dump(mode="json", exclude_none=True)
        )
    except ValueError as e:
        logger.warning(f"Validation error updating department {department_id}: {e}")
        raise _validation_error(e)
    except APIError as e:
        if e.code == "23505":  # unique_violation
            logger.warning(f"Duplicate department code rejected by database: {request.code}")
            raise _duplicate_code()
        logger.error(f"Database error updating department {department_id}: {e}", exc_info=True)
        raise _server_error("update_error", "Failed to update department")
    except Exception as e:
        logger.error(f"Failed to update department {department_id}: {e}", exc_info=True)
        raise _server_error("update_error", "Failed to update department")

    if not department:
        raise _not_found("Department", department_id)

    return DepartmentMutationResponse(
        message="Department updated successfully",
        department=department
    )


@router.delete(
    "/departments/{department_id}",
    response_model=MessageResponse,
    summary="Delete a department",
    description="Departments that still have rentals cannot be deleted (422).",
)
async def destroy_department(department_id: int) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await service.delete_department(supabase_client, department_id)
    except DepartmentInUseError as e:
        logger.warning(f"Refusing to delete department {department_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "department_in_use", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to delete department {department_id}: {e}", exc_info=True)
        raise _server_error("delete_error", "Failed to delete department")

    if not deleted:
        raise _not_found("Department", department_id)

    return MessageResponse(message="Department deleted successfully")


# ==================== RENTALS/STUDENTS ====================

@router.get(
    "/departments/{department_id}/rentals",
    response_model=List[RentalResponse],
    summary="List a department's rentals",
)
async def list_rentals(department_id: int) -> List[RentalResponse]:
    supabase_client = get_supabase_client()

    try:
        rentals = await service.get_rentals(supabase_client, department_id)
        return [RentalResponse(**rental) for rental in rentals]
    except Exception as e:
        logger.error(f"Failed to fetch rentals for department {department_id}: {e}", exc_info=True)
        raise _server_error("fetch_error", "Failed to retrieve rentals")


@router.post(
    "/rentals",
    response_model=RentalMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student rental",
)
async def store_rental(request: RentalCreateRequest) -> RentalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        rental = await service.create_rental(supabase_client, request.model_dump(mode="json"))
        return RentalMutationResponse(
            message="Student rental created successfully",
            rental=rental
        )
    except ValueError as e:
        logger.warning(f"Validation error creating rental: {e}")
        raise _validation_error(e)
    except Exception as e:
        logger.error(f"Failed to create rental: {e}", exc_info=True)
        raise _server_error("create_error", "Failed to create rental")


@router.put(
    "/rentals/{rental_id}",
    response_model=RentalMutationResponse,
    summary="Update a student rental",
)
async def update_rental(rental_id: int, request: RentalUpdateRequest) -> RentalMutationResponse:
    supabase_client = get_supabase_client()

    try:
        rental = await service.update_rental(supabase_client, rental_id, request.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"Failed to update rental {rental_id}: {e}", exc_info=True)
        raise _server_error("update_error", "Failed to update rental")

    if not rental:
        raise _not_found("Rental", rental_id)

    return RentalMutationResponse(
        message="Student rental updated successfully",
        rental=rental
    )


@router.delete(
    "/rentals/{rental_id}",
    response_model=MessageResponse,
    summary="Delete a student rental",
)
async def destroy_rental(rental_id: int) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await service.delete_rental(supabase_client, rental_id)
    except Exception as e:
        logger.error(f"Failed to delete rental {rental_id}: {e}", exc_info=True)
        raise _server_error("delete_error", "Failed to delete rental")

    if not deleted:
        raise _not_found("Rental", rental_id)

    return MessageResponse(message="Student rental deleted successfully")


# ==================== PAYMENTS ====================

@router.get(
    "/departments/{department_id}/payments",
    response_model=List[PaymentResponse],
    summary="List a department's payments",
)
async def list_payments(department_id: int) -> List[PaymentResponse]:
    supabase_client = get_supabase_client()

    try:
        payments = await service.get_payments(supabase_client, department_id)
        return [PaymentResponse(**payment) for payment in payments]
    except Exception as e:
        logger.error(f"Failed to fetch payments for department {department_id}: {e}", exc_info=True)
        raise _server_error("fetch_error", "Failed to retrieve payments")


@router.post(
    "/payments",
    response_model=PaymentMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
async def store_payment(request: PaymentCreateRequest) -> PaymentMutationResponse:
    supabase_client = get_supabase_client()

    try:
        payment = await service.create_payment(supabase_client, request.model_dump(mode="json"))
        return PaymentMutationResponse(
            message="Payment created successfully",
            payment=payment
        )
    except ValueError as e:
        logger.warning(f"Validation error creating payment: {e}")
        raise _validation_error(e)
    except Exception as e:
        logger.error(f"Failed to create payment: {e}", exc_info=True)
        raise _server_error("create_error", "Failed to create payment")


@router.put(
    "/payments/{payment_id}",
    response_model=PaymentMutationResponse,
    summary="Update a payment",
)
async def update_payment(payment_id: int, request: PaymentUpdateRequest) -> PaymentMutationResponse:
    supabase_client = get_supabase_client()

    try:
        payment = await service.update_payment(supabase_client, payment_id, request.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"Failed to update payment {payment_id}: {e}", exc_info=True)
        raise _server_error("update_error", "Failed to update payment")

    if not payment:
        raise _not_found("Payment", payment_id)

    return PaymentMutationResponse(
        message="Payment updated successfully",
        payment=payment
    )


@router.delete(
    "/payments/{payment_id}",
    response_model=MessageResponse,
    summary="Delete a payment",
)
async def destroy_payment(payment_id: int) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await service.delete_payment(supabase_client, payment_id)
    except Exception as e:
        logger.error(f"Failed to delete payment {payment_id}: {e}", exc_info=True)
        raise _server_error("delete_error", "Failed to delete payment")

    if not deleted:
        raise _not_found("Payment", payment_id)

    return MessageResponse(message="Payment deleted successfully")
