import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import insert  # noqa: E402

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.tables import cars, customers, drivers, metadata, partners  # noqa: E402

PARTNERS = [
    {"id": "partner-1", "full_name": "Cancun Car Rentals", "phone_number": "+529981234567",
     "email": "ops@cancuncars.example.com", "device_tokens": []},
]

CARS = [
    {"id": "car-1", "partner_id": "partner-1", "brand": "Toyota", "model": "Corolla",
     "price_per_day": 50.0, "registration_number": "CUN-1001",
     "pickup_location": "Cancun Airport T2", "dropoff_location": "Cancun Airport T2"},
    {"id": "car-2", "partner_id": "partner-1", "brand": "Nissan", "model": "Versa",
     "price_per_day": 42.0, "registration_number": "CUN-1002",
     "pickup_location": "Cancun Downtown", "dropoff_location": "Cancun Airport T3"},
    {"id": "car-3", "partner_id": "partner-1", "brand": "Jeep", "model": "Wrangler",
     "price_per_day": 95.0, "registration_number": "CUN-1003",
     "pickup_location": "Playa del Carmen", "dropoff_location": "Playa del Carmen"},
]

CUSTOMERS = [
    {"id": "customer-1", "full_name": "Jane Roe", "phone_number": "+15551234567",
     "email": "jane@example.com", "device_tokens": []},
]

DRIVERS = [
    {"id": "driver-1", "full_name": "Luis Medina", "phone_number": "+529987654321",
     "email": "luis@example.com", "device_tokens": []},
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("Created missing tables.")

        await conn.execute(insert(partners), PARTNERS)
        await conn.execute(insert(cars), CARS)
        await conn.execute(insert(customers), CUSTOMERS)
        await conn.execute(insert(drivers), DRIVERS)

        print(f"Seeded {len(PARTNERS)} partners, {len(CARS)} cars, "
              f"{len(CUSTOMERS)} customers, {len(DRIVERS)} drivers.")

if __name__ == "__main__":
    asyncio.run(seed())
