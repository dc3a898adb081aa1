from motor.motor_asyncio import AsyncIOMotorDatabase


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create required MongoDB indexes (idempotent)."""
    time_entries = db["time_entries"]
    # At most one open entry per employee; racing clock-ins fail with a duplicate key
    await time_entries.create_index(
        [("company_id", 1), ("employee_id", 1)],
        unique=True,
        partialFilterExpression={"is_active": True},
        name="uniq_open_entry_per_employee",
    )
    await time_entries.create_index(
        [("company_id", 1), ("employee_id", 1), ("clock_in", -1)],
        name="idx_te_company_emp_clock_in",
    )
    await time_entries.create_index([("company_id", 1), ("clock_in", -1)], name="idx_te_company_clock_in")

    companies = db["companies"]
    await companies.create_index([("code", 1)], unique=True, name="uniq_company_code")

    employees = db["employees"]
    await employees.create_index(
        [("company_id", 1), ("employee_number", 1)],
        unique=True,
        name="uniq_company_employee_number",
    )
