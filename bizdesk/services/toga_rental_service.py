"""
Toga rental persistence service.

RULES:
1. Department codes are unique (case-sensitive, as stored)
2. A department that still has rentals CANNOT be deleted
3. Rentals and payments are stored with toga_department_id; requests send
   department_id and the service renames it
4. New payments get a generated payment_number: 'PAY-' + uppercase hex id
5. New rentals default payment_status to 'Pending'

Department listings carry aggregates computed from the department's rentals:
totalStudents (all rentals), activeRentals (status Active) and revenue
(sum of rental_fee).
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from bizdesk.schemas.toga_rentals import DEFAULT_DEPARTMENT_ICON

logger = logging.getLogger(__name__)

DEPARTMENTS_TABLE = "toga_departments"
RENTALS_TABLE = "toga_rentals"
PAYMENTS_TABLE = "toga_payments"

RENTAL_COLUMNS = (
    "id, student_name, student_number, contact_number, size, rental_date, return_date, "
    "rental_fee, deposit, status, payment_status, toga_department_id, created_at, updated_at"
)
PAYMENT_COLUMNS = (
    "id, payment_number, student_name, student_number, amount, payment_date, "
    "payment_method, status, type, toga_department_id, created_at, updated_at"
)


class DepartmentInUseError(ValueError):
    """Raised when deleting a department that still has rentals."""


def generate_payment_number() -> str:
    """Return a new payment number such as 'PAY-3F2A9C1B7D4E'."""
    return f"PAY-{uuid.uuid4().hex[:13].upper()}"


def summarize_departments(
    departments: List[Dict[str, Any]],
    rentals: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Attach rental aggregates to each department.

    Args:
        departments: Department rows (id, name, code, color, icon, timestamps)
        rentals: Rental rows with toga_department_id, status and rental_fee

    Returns:
        Department dicts in input order with totalStudents, activeRentals and revenue
    """
    totals: Dict[Any, Dict[str, Any]] = {}
    for rental in rentals:
        bucket = totals.setdefault(
            rental.get("toga_department_id"),
            {"totalStudents": 0, "activeRentals": 0, "revenue": 0.0},
        )
        bucket["totalStudents"] += 1
        if rental.get("status") == "Active":
            bucket["activeRentals"] += 1
        bucket["revenue"] += float(rental.get("rental_fee") or 0)

    summaries = []
    for dept in departments:
        agg = totals.get(dept.get("id"), {"totalStudents": 0, "activeRentals": 0, "revenue": 0.0})
        summaries.append({
            "id": dept.get("id"),
            "name": dept.get("name"),
            "code": dept.get("code"),
            "color": dept.get("color"),
            "icon": dept.get("icon"),
            "totalStudents": agg["totalStudents"],
            "activeRentals": agg["activeRentals"],
            "revenue": agg["revenue"],
            "created_at": dept.get("created_at"),
            "updated_at": dept.get("updated_at"),
        })
    return summaries


# ==================== DEPARTMENTS ====================

async def get_departments(supabase_client: Client) -> List[Dict[str, Any]]:
    """
    Fetch all departments, newest first, with rental aggregates.

    Args:
        supabase_client: Supabase client

    Returns:
        List of department summaries
    """
    logger.debug("Fetching toga departments")

    dept_result = (
        supabase_client.table(DEPARTMENTS_TABLE)
        .select("id, name, code, color, icon, created_at, updated_at")
        .order("created_at", desc=True)
        .execute()
    )
    departments = cast(List[Dict[str, Any]], dept_result.data or [])

    rental_result = (
        supabase_client.table(RENTALS_TABLE)
        .select("toga_department_id, status, rental_fee")
        .execute()
    )
    rentals = cast(List[Dict[str, Any]], rental_result.data or [])

    summaries = summarize_departments(departments, rentals)

    logger.info(f"Fetched {len(summaries)} toga departments")

    return summaries


async def get_department_by_id(supabase_client: Client, department_id: int) -> Optional[Dict[str, Any]]:
    result = (
        supabase_client.table(DEPARTMENTS_TABLE)
        .select("*")
        .eq("id", department_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Toga department {department_id} not found")
        return None

    return cast(Dict[str, Any], result.data[0])


async def _ensure_unique_code(
    supabase_client: Client,
    code: str,
    exclude_id: Optional[int] = None,
) -> None:
    query = supabase_client.table(DEPARTMENTS_TABLE).select("id").eq("code", code)
    if exclude_id is not None:
        query = query.neq("id", exclude_id)
    result = query.execute()
    if result.data:
        raise ValueError(f"The code '{code}' has already been taken.")


async def create_department(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a department.

    Raises:
        ValueError: If the code is already used
        Exception: If the insert returns no row
    """
    await _ensure_unique_code(supabase_client, data["code"])

    department_data = dict(data)
    department_data["icon"] = department_data.get("icon") or DEFAULT_DEPARTMENT_ICON

    logger.info(f"Creating toga department: code={department_data['code']}")

    result = supabase_client.table(DEPARTMENTS_TABLE).insert(department_data).execute()

    if not result.data:
        raise Exception("Failed to create department: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def update_department(
    supabase_client: Client,
    department_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Update a department.

    Returns:
        Updated department, or None if it does not exist

    Raises:
        ValueError: If the new code belongs to another department
    """
    existing = await get_department_by_id(supabase_client, department_id)
    if not existing:
        return None

    await _ensure_unique_code(supabase_client, data["code"], exclude_id=department_id)

    logger.info(f"Updating toga department {department_id}")

    result = (
        supabase_client.table(DEPARTMENTS_TABLE)
        .update(data)
        .eq("id", department_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of toga department {department_id} returned no rows")
        return None

    return cast(Dict[str, Any], result.data[0])


async def delete_department(supabase_client: Client, department_id: int) -> bool:
    """
    Delete a department that has no rentals.

    Returns:
        True if deleted, False if the department does not exist

    Raises:
        DepartmentInUseError: If the department still has rentals
    """
    existing = await get_department_by_id(supabase_client, department_id)
    if not existing:
        return False

    rentals = (
        supabase_client.table(RENTALS_TABLE)
        .select("id", count="exact")
        .eq("toga_department_id", department_id)
        .execute()
    )
    rental_count = rentals.count if rentals.count is not None else len(rentals.data or [])
    if rental_count > 0:
        raise DepartmentInUseError("Cannot delete department with existing rentals")

    supabase_client.table(DEPARTMENTS_TABLE).delete().eq("id", department_id).execute()

    logger.info(f"Toga department {department_id} deleted")

    return True


# ==================== RENTALS/STUDENTS ====================

async def get_rentals(supabase_client: Client, department_id: int) -> List[Dict[str, Any]]:
    """Fetch a department's rentals, newest first."""
    result = (
        supabase_client.table(RENTALS_TABLE)
        .select(RENTAL_COLUMNS)
        .eq("toga_department_id", department_id)
        .order("created_at", desc=True)
        .execute()
    )

    rentals = cast(List[Dict[str, Any]], result.data or [])

    logger.info(f"Fetched {len(rentals)} rentals for department {department_id}")

    return rentals


async def get_rental_by_id(supabase_client: Client, rental_id: int) -> Optional[Dict[str, Any]]:
    result = (
        supabase_client.table(RENTALS_TABLE)
        .select("*")
        .eq("id", rental_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Toga rental {rental_id} not found")
        return None

    return cast(Dict[str, Any], result.data[0])


async def create_rental(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a student rental under a department.

    Raises:
        ValueError: If the department does not exist
    """
    rental_data = dict(data)
    department_id = rental_data.pop("department_id")

    if not await get_department_by_id(supabase_client, department_id):
        raise ValueError(f"Department {department_id} does not exist")

    rental_data["toga_department_id"] = department_id
    rental_data["payment_status"] = rental_data.get("payment_status") or "Pending"

    logger.info(f"Creating toga rental in department {department_id}")

    result = supabase_client.table(RENTALS_TABLE).insert(rental_data).execute()

    if not result.data:
        raise Exception("Failed to create rental: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def update_rental(
    supabase_client: Client,
    rental_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    existing = await get_rental_by_id(supabase_client, rental_id)
    if not existing:
        return None

    update_data = {key: value for key, value in data.items() if value is not None}

    result = (
        supabase_client.table(RENTALS_TABLE)
        .update(update_data)
        .eq("id", rental_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of toga rental {rental_id} returned no rows")
        return None

    logger.info(f"Toga rental {rental_id} updated")

    return cast(Dict[str, Any], result.data[0])


async def delete_rental(supabase_client: Client, rental_id: int) -> bool:
    existing = await get_rental_by_id(supabase_client, rental_id)
    if not existing:
        return False

    supabase_client.table(RENTALS_TABLE).delete().eq("id", rental_id).execute()

    logger.info(f"Toga rental {rental_id} deleted from department {existing.get('toga_department_id')}")

    return True


# ==================== PAYMENTS ====================

async def get_payments(supabase_client: Client, department_id: int) -> List[Dict[str, Any]]:
    """Fetch a department's payments, newest first."""
    result = (
        supabase_client.table(PAYMENTS_TABLE)
        .select(PAYMENT_COLUMNS)
        .eq("toga_department_id", department_id)
        .order("created_at", desc=True)
        .execute()
    )

    payments = cast(List[Dict[str, Any]], result.data or [])

    logger.info(f"Fetched {len(payments)} payments for department {department_id}")

    return payments


async def get_payment_by_id(supabase_client: Client, payment_id: int) -> Optional[Dict[str, Any]]:
    result = (
        supabase_client.table(PAYMENTS_TABLE)
        .select("*")
        .eq("id", payment_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Toga payment {payment_id} not found")
        return None

    return cast(Dict[str, Any], result.data[0])


async def create_payment(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Record a payment for a department (and optionally a specific rental).

    Raises:
        ValueError: If the department or the referenced rental does not exist
    """
    payment_data = dict(data)
    department_id = payment_data.pop("department_id")
    rental_id = payment_data.pop("rental_id", None)

    if not await get_department_by_id(supabase_client, department_id):
        raise ValueError(f"Department {department_id} does not exist")
    if rental_id is not None and not await get_rental_by_id(supabase_client, rental_id):
        raise ValueError(f"Rental {rental_id} does not exist")

    payment_data["payment_number"] = generate_payment_number()
    payment_data["toga_department_id"] = department_id
    payment_data["toga_rental_id"] = rental_id

    logger.info(f"Creating toga payment {payment_data['payment_number']} in department {department_id}")

    result = supabase_client.table(PAYMENTS_TABLE).insert(payment_data).execute()

    if not result.data:
        raise Exception("Failed to create payment: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def update_payment(
    supabase_client: Client,
    payment_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    existing = await get_payment_by_id(supabase_client, payment_id)
    if not existing:
        return None

    result = (
        supabase_client.table(PAYMENTS_TABLE)
        .update(data)
        .eq("id", payment_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of toga payment {payment_id} returned no rows")
        return None

    logger.info(f"Toga payment {payment_id} updated")

    return cast(Dict[str, Any], result.data[0])


async def delete_payment(supabase_client: Client, payment_id: int) -> bool:
    existing = await get_payment_by_id(supabase_client, payment_id)
    if not existing:
        return False

    supabase_client.table(PAYMENTS_TABLE).delete().eq("id", payment_id).execute()

    logger.info(f"Toga payment {payment_id} deleted")

    return True


# ==================== STATISTICS ====================

def compute_stats(
    department_count: int,
    rentals: List[Dict[str, Any]],
    payments: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Reduce rental and payment rows to the toga stats payload."""
    statuses = [rental.get("status") for rental in rentals]
    payment_statuses = [payment.get("status") for payment in payments]

    return {
        "total_departments": department_count,
        "total_students": len(rentals),
        "active_rentals": statuses.count("Active"),
        "total_revenue": sum(float(rental.get("rental_fee") or 0) for rental in rentals),
        "returned": statuses.count("Returned"),
        "overdue": statuses.count("Overdue"),
        "pending_payments": payment_statuses.count("Pending"),
        "paid_payments": payment_statuses.count("Paid"),
    }


async def get_stats(supabase_client: Client) -> Dict[str, Any]:
    """Compute overall toga rental statistics."""
    departments = supabase_client.table(DEPARTMENTS_TABLE).select("id").execute()
    rentals = supabase_client.table(RENTALS_TABLE).select("status, rental_fee").execute()
    payments = supabase_client.table(PAYMENTS_TABLE).select("status").execute()

    stats = compute_stats(
        department_count=len(departments.data or []),
        rentals=cast(List[Dict[str, Any]], rentals.data or []),
        payments=cast(List[Dict[str, Any]], payments.data or []),
    )

    logger.info(
        f"Toga stats computed: departments={stats['total_departments']}, "
        f"students={stats['total_students']}"
    )

    return stats
