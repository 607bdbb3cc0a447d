"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 12 transports (bicycles, scooters, electric scooters)
  - 4 sample loans (ACTIVE, extended ACTIVE, COMPLETED, CANCELLED), built
    through the loan state machine and priced with the configured rules
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import text

from ecomove.config import settings
from ecomove.domain.durations import minutes_between
from ecomove.domain.entities import Loan
from ecomove.domain.enums import TransportType
from ecomove.domain.pricing import PricingEngine
from ecomove.infrastructure.database import async_session_factory, engine
from ecomove.infrastructure.repositories import LoanRepository, TransportRepository

TRANSPORTS = [
    ("BIC-001", TransportType.BICYCLE),
    ("BIC-002", TransportType.BICYCLE),
    ("BIC-003", TransportType.BICYCLE),
    ("BIC-004", TransportType.BICYCLE),
    ("BIC-005", TransportType.BICYCLE),
    ("SCO-001", TransportType.SCOOTER),
    ("SCO-002", TransportType.SCOOTER),
    ("SCO-003", TransportType.SCOOTER),
    ("ESC-001", TransportType.ELECTRIC_SCOOTER),
    ("ESC-002", TransportType.ELECTRIC_SCOOTER),
    ("ESC-003", TransportType.ELECTRIC_SCOOTER),
    ("ESC-004", TransportType.ELECTRIC_SCOOTER),
]


async def seed():
    pricing = PricingEngine(settings.pricing_table())
    now = datetime.now(timezone.utc)

    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM transports"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        transports = TransportRepository(session)
        loans = LoanRepository(session)

        # ── Transports ────────────────────────────────────────────────
        models = []
        for code, transport_type in TRANSPORTS:
            models.append(
                await transports.create(
                    id=str(uuid.uuid4()), code=code, transport_type=transport_type
                )
            )
        print(f"  Created {len(models)} transports")

        def new_loan(user_id, transport, minutes_ago):
            return Loan.create(
                id=str(uuid.uuid4()),
                user_id=user_id,
                transport_id=transport.id,
                start_date=now - timedelta(minutes=minutes_ago),
            )

        # ── Loans ─────────────────────────────────────────────────────
        active = new_loan("user-001", models[0], 20)

        extended = new_loan("user-002", models[5], 40)
        planned_end = now + timedelta(minutes=30)
        extended = extended.extend(planned_end).with_cost(
            pricing.calculate_loan_cost(
                minutes_between(extended.start_date, planned_end), "scooter"
            )
        )

        completed = new_loan("user-003", models[8], 180)
        returned_at = completed.start_date + timedelta(minutes=45)
        completed = completed.complete(returned_at).with_cost(
            pricing.calculate_loan_cost(45, "electric_scooter")
        )

        cancelled = new_loan("user-004", models[1], 90).cancel()

        for loan in (active, extended, completed, cancelled):
            await loans.add(loan)
        await transports.set_available(models[0].id, False)
        await transports.set_available(models[5].id, False)
        print("  Created 4 loans")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
