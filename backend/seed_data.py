"""Seed database with demo data."""
from damon_panel.database import SessionLocal, init_db
from damon_panel.models import Category, Device, PricingSettings, Project, ProjectStatusHistory, User
from damon_panel.auth import get_password_hash
from damon_panel.services.pricing import DEFAULT_COEFFICIENTS


def seed():
    """Seed database with demo data."""
    init_db()
    db = SessionLocal()

    try:
        if db.query(User).first():
            print("Database already has users, skipping seed.")
            return

        # Create users
        users_data = [
            {
                'id': '00000000-0000-0000-0000-000000000101',
                'username': 'admin',
                'password': 'admin123',
                'full_name': 'Administrator',
                'role': 'admin'
            },
            {
                'id': '00000000-0000-0000-0000-000000000102',
                'username': 'rahimi',
                'password': 'rahimi123',
                'full_name': 'Sara Rahimi',
                'role': 'sales_manager'
            },
            {
                'id': '00000000-0000-0000-0000-000000000103',
                'username': 'karimi',
                'password': 'karimi123',
                'full_name': 'Ali Karimi',
                'role': 'employee'
            },
        ]

        users = []
        for user_data in users_data:
            password = user_data.pop('password')
            user = User(password_hash=get_password_hash(password), **user_data)
            db.add(user)
            users.append(user)

        db.flush()

        # Catalog
        categories = [
            Category(id='00000000-0000-0000-0000-000000000201', category_name='Chillers', description='Water-cooled and air-cooled chillers'),
            Category(id='00000000-0000-0000-0000-000000000202', category_name='Pumps', description='Circulation pumps'),
        ]
        db.add_all(categories)

        devices_data = [
            ('00000000-0000-0000-0000-000000000301', categories[0].id, 'CH-200 Air Cooled', 18500, 3.2, 2.1),
            ('00000000-0000-0000-0000-000000000302', categories[0].id, 'CH-450 Water Cooled', 32000, 4.5, 3.8),
            ('00000000-0000-0000-0000-000000000303', categories[1].id, 'P-50 Inline', 1000, 2.0, 5.0),
        ]
        for device_id, category_id, model_name, price, length, weight in devices_data:
            db.add(
                Device(
                    id=device_id,
                    category_id=category_id,
                    model_name=model_name,
                    factory_pricelist_eur=price,
                    length_meter=length,
                    weight_unit=weight,
                )
            )

        # Pricing settings v1 (defaults, rounded up to 100 EUR)
        values = DEFAULT_COEFFICIENTS.as_dict()
        values.update({'rounding_mode': 'ceil', 'rounding_step': 100.0})
        db.add(PricingSettings(version=1, created_by_user_id=users[0].id, **values))

        # Demo project awaiting approval
        project = Project(
            id='00000000-0000-0000-0000-000000000401',
            created_by_user_id=users[2].id,
            assigned_sales_manager_id=users[1].id,
            project_name='Milad Hospital HVAC',
            employer_name='Milad Health Co.',
            project_type='hospital',
            address_text='Tehran, Hemmat Hwy',
            lat=35.7448,
            lng=51.3753,
            status='pending_approval',
        )
        db.add(project)
        db.add(
            ProjectStatusHistory(
                project_id=project.id,
                changed_by_user_id=users[2].id,
                from_status='draft',
                to_status='pending_approval',
                note='Project created',
            )
        )

        db.commit()
        print("Demo data seeded:")
        for user in users:
            print(f"  - {user.username} ({user.role})")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
