import argparse
import random
from datetime import date, datetime, timedelta

from faker import Faker

from tsmwa_admin.extensions import db
from tsmwa_admin.models import (
    GstFiling,
    GstItem,
    Invoice,
    InvoiceItem,
    Labour,
    LeaseQuery,
    Meeting,
    Membership,
    MembershipChange,
    MembershipFee,
    MeterReading,
    Trip,
    User,
    Vehicle,
)
from tsmwa_admin.services import billing

fake = Faker("en_IN")

STONE_ITEMS = [
    ("6802", "Tandur yellow stone"),
    ("6802", "Tandur blue stone"),
    ("2516", "Shahabad stone"),
    ("6802", "Polished kota slab"),
]


def _phone():
    return str(random.randint(6000000000, 9999999999))


# ============================================================
#  WIPE (FK-safe order)
# ============================================================

def wipe_domain_data():
    print("Wiping domain data in FK-safe order...")
    for model in (
        Trip,
        Vehicle,
        InvoiceItem,
        Invoice,
        GstItem,
        GstFiling,
        MembershipChange,
        MembershipFee,
        LeaseQuery,
        Labour,
        Meeting,
        User,
        MeterReading,
        Membership,
    ):
        db.session.query(model).delete()
    db.session.commit()
    print("Domain data wiped.")


# ============================================================
#  SEED HELPERS
# ============================================================

def seed_memberships(n=12):
    members = []
    for _ in range(n):
        start = fake.date_between(start_date="-4y", end_date="-60d")
        m = Membership(
            meter_number=f"MTR{random.randint(1000, 9999)}",
            industry_name=f"{fake.last_name()} Stone Industries",
            applicant_name=fake.name(),
            address=fake.address().replace("\n", ", "),
            pin_code=str(random.randint(501141, 501158)),
            contact_number=_phone(),
            email=fake.email(),
            membership_start_date=start,
            membership_due_date=start + timedelta(days=365),
            monthly_fee=random.choice([500.0, 750.0, 1000.0]),
            status=random.choice(["Active", "Active", "Active", "Pending", "Inactive"]),
        )
        db.session.add(m)
        members.append(m)
    db.session.commit()
    return members


def seed_fees(members):
    fees = []
    today = date.today()
    for m in members:
        for months_back in range(random.randint(1, 4)):
            period_from = (today.replace(day=1) - timedelta(days=30 * months_back)).replace(day=1)
            status = random.choice(["paid", "paid", "due"])
            fee = MembershipFee(
                membership=m,
                amount=m.monthly_fee,
                paid_amount=m.monthly_fee if status == "paid" else 0.0,
                paid_date=period_from + timedelta(days=random.randint(1, 20)) if status == "paid" else None,
                period_from=period_from,
                period_to=period_from + timedelta(days=29),
                status=status,
                approval_status=random.choice(["pending", "approved"]),
                payment_method=random.choice(["Cash", "UPI", "Cheque"]) if status == "paid" else None,
            )
            db.session.add(fee)
            fees.append(fee)
    db.session.commit()
    return fees


def seed_membership_changes(members, n=4):
    changes = []
    for m in random.sample(members, min(n, len(members))):
        change = MembershipChange(
            membership=m,
            updated_data=random.choice(
                [
                    {"contact_number": _phone()},
                    {"address": fake.address().replace("\n", ", ")},
                    {"applicant_name": fake.name(), "email": fake.email()},
                ]
            ),
            modified_by=fake.name(),
            approval_status="PENDING",
        )
        db.session.add(change)
        changes.append(change)
    db.session.commit()
    return changes


def seed_invoices(members, home_state="Telangana", n=10):
    invoices = []
    counters = {}
    for _ in range(n):
        m = random.choice(members)
        invoice_date = fake.date_between(start_date="-1y", end_date="today")
        prefix = billing.invoice_prefix(invoice_date.year)
        counters[prefix] = billing.next_code(counters.get(prefix), prefix)

        items = []
        for _ in range(random.randint(1, 3)):
            hsn, particulars = random.choice(STONE_ITEMS)
            sq_ft = float(random.randint(100, 1500))
            rate = float(random.choice([22, 28, 35, 40]))
            items.append(
                {
                    "hsn_code": hsn,
                    "particulars": particulars,
                    "no_of_stones": random.randint(20, 300),
                    "sizes": random.choice(["2x2", "2x3", "1.5x1.5"]),
                    "total_sq_feet": sq_ft,
                    "rate_per_sq_ft": rate,
                    "amount": billing.item_amount(sq_ft, rate),
                }
            )

        state = random.choice([home_state, home_state, "Karnataka", "Maharashtra"])
        split = billing.default_tax_split(state, home_state)
        totals = billing.calculate_invoice_amounts(
            items, split["cgst_percentage"], split["sgst_percentage"], split["igst_percentage"]
        )
        inv = Invoice(
            invoice_number=counters[prefix],
            invoice_date=invoice_date,
            membership=m,
            member_name=m.applicant_name,
            firm_name=m.industry_name,
            firm_address=m.address,
            state=state,
            approval_status=random.choice(["pending", "approved"]),
            items=[InvoiceItem(**item) for item in items],
            **split,
            **totals,
        )
        db.session.add(inv)
        invoices.append(inv)
    db.session.commit()
    return invoices


def seed_gst_filings(members):
    filings = []
    for m in random.sample(members, k=min(5, len(members))):
        items = [
            {"name": random.choice(["Stone sales", "Transport", "Polishing services"]), "taxable_amount": float(random.randint(10000, 90000))}
            for _ in range(random.randint(1, 3))
        ]
        due = fake.date_between(start_date="-6m", end_date="+1m")
        status = random.choice(["filled", "pending", "due"])
        f = GstFiling(
            membership=m,
            filing_period=due.strftime("%b %Y"),
            due_date=due,
            filing_date=due - timedelta(days=random.randint(0, 10)) if status == "filled" else None,
            status=status,
            items=[GstItem(**i) for i in items],
            **billing.gst_filing_totals(items),
        )
        db.session.add(f)
        filings.append(f)
    db.session.commit()
    return filings


def seed_labour(members, n=15):
    workers = []
    for _ in range(n):
        employed_from = fake.date_between(start_date="-3y", end_date="-30d")
        w = Labour(
            name=fake.name(),
            phone=_phone(),
            father_name=fake.name_male(),
            date_of_birth=fake.date_of_birth(minimum_age=19, maximum_age=58),
            aadhar_number=str(random.randint(10**11, 10**12 - 1)),
            permanent_address=fake.address(),
            current_membership=random.choice(members),
            employed_from=employed_from,
            status=random.choice(["active", "active", "bench", "inactive"]),
        )
        db.session.add(w)
        workers.append(w)
    db.session.commit()
    return workers


def seed_lease_queries(members, n=6):
    queries = []
    last = None
    for _ in range(n):
        leased = fake.date_between(start_date="-10y", end_date="-1y")
        last = billing.next_code(last, billing.LEASE_QUERY_PREFIX, width=4)
        q = LeaseQuery(
            lease_query_id=last,
            membership=random.choice(members),
            present_lease_holder=fake.name(),
            date_of_lease=leased,
            expiry_of_lease=leased + timedelta(days=365 * random.randint(3, 15)),
            status=random.choice(["PENDING", "PROCESSING", "RESOLVED"]),
        )
        db.session.add(q)
        queries.append(q)
    db.session.commit()
    return queries


def seed_meetings(n=6):
    meetings = []
    for _ in range(n):
        when = fake.date_between(start_date="-90d", end_date="+60d")
        completed = when < date.today()
        expected = random.randint(20, 120)
        mt = Meeting(
            title=random.choice(["General body meeting", "Executive committee", "GST awareness session"]),
            agenda=fake.paragraph(),
            meeting_date=when,
            meeting_time=random.choice(["10:00", "11:30", "16:00"]),
            meeting_point="Association hall, Tandur",
            status="completed" if completed else "scheduled",
            expected_attendees=expected,
            actual_attendees=random.randint(10, expected) if completed else None,
        )
        db.session.add(mt)
        meetings.append(mt)
    db.session.commit()
    return meetings


def seed_users():
    users = []
    for role in ("Admin", "TSMWA Editor", "TSMWA Viewer", "TQMWA Editor"):
        u = User(name=fake.name(), email=fake.unique.email(), phone=_phone(), role=role)
        db.session.add(u)
        users.append(u)
    db.session.commit()
    return users


def seed_vehicles(n=5):
    vehicles = []
    counters = {}
    for _ in range(n):
        v = Vehicle(
            vehicle_number=f"TS{random.randint(1, 36):02d}{fake.random_uppercase_letter()}{fake.random_uppercase_letter()}{random.randint(1000, 9999)}",
            driver_name=fake.name_male(),
            driver_phone_number=_phone(),
            owner_name=fake.name(),
            owner_phone_number=_phone(),
        )
        for _ in range(random.randint(1, 4)):
            trip_date = fake.date_between(start_date="-120d", end_date="today")
            prefix = billing.trip_prefix(trip_date.year)
            counters[prefix] = billing.next_code(counters.get(prefix), prefix)
            per_trip = float(random.choice([1500, 2000, 2500]))
            count = random.randint(1, 6)
            paid = float(random.choice([0, per_trip, per_trip * count]))
            v.trips.append(
                Trip(
                    trip_code=counters[prefix],
                    trip_date=trip_date,
                    amount_per_trip=per_trip,
                    number_of_trips=count,
                    amount_paid=paid,
                    **billing.trip_amounts(per_trip, count, paid),
                )
            )
        db.session.add(v)
        vehicles.append(v)
    db.session.commit()
    return vehicles


def add_random_meter_reading():
    """One reading with a random MET### id, the home page's demo action."""
    reading = MeterReading(
        meter_id=f"MET{random.randint(0, 999):03d}".upper(),
        name=fake.name(),
        email=f"user{int(datetime.utcnow().timestamp() * 1000)}@example.com",
        reading_date=datetime.utcnow(),
        status=random.choice(["ACTIVE", "INACTIVE", "CANCELLED", "FAILED"]),
        price=float(random.randint(0, 999)),
    )
    db.session.add(reading)
    db.session.commit()
    return reading


def seed_all(home_state="Telangana"):
    members = seed_memberships()
    counts = {
        "Memberships": len(members),
        "MembershipFees": len(seed_fees(members)),
        "MembershipChanges": len(seed_membership_changes(members)),
        "Invoices": len(seed_invoices(members, home_state=home_state)),
        "GstFilings": len(seed_gst_filings(members)),
        "Labour": len(seed_labour(members)),
        "LeaseQueries": len(seed_lease_queries(members)),
        "Meetings": len(seed_meetings()),
        "Users": len(seed_users()),
        "Vehicles": len(seed_vehicles()),
        "MeterReadings": len([add_random_meter_reading() for _ in range(8)]),
    }
    return counts


# ============================================================
#  MAIN
# ============================================================

def main():
    from tsmwa_admin import create_app

    parser = argparse.ArgumentParser()
    parser.add_argument("--wipe", action="store_true")
    parser.add_argument("--seed", action="store_true")
    parser.add_argument("--reading", action="store_true", help="add one random meter reading")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.wipe:
            wipe_domain_data()
        if args.seed:
            counts = seed_all(home_state=app.config["INVOICE_STATE"])
            print("Demo data seeded successfully.")
            for label, n in counts.items():
                print(f"{label}: {n}")
        if args.reading:
            reading = add_random_meter_reading()
            print(f"Added meter reading {reading.meter_id}")


if __name__ == "__main__":
    main()
